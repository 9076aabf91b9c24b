import numpy as np
import pandas as pd
import pytest

from osgrid.frames import eastings_northings_to_latlon, gridrefs_to_latlon, latlon_to_gridrefs


@pytest.fixture
def gridref_df():
    return pd.DataFrame({
        "Site": ["Norfolk", "Northumberland", "Garbage"],
        "GridRef": ["TG 51409 13177", "NU 12765 42058", "not a grid ref"],
    })


class TestGridrefsToLatlon:

    def test_adds_columns_and_converts(self, gridref_df):
        with pytest.warns(UserWarning, match=r"1 row\(s\) could not be converted"):
            out = gridrefs_to_latlon(gridref_df, datum="OSGB36")

        assert list(out.columns) == ["Site", "GridRef", "Easting", "Northing", "Latitude", "Longitude"]
        np.testing.assert_array_equal(out["Easting"].to_numpy()[:2], [651409, 412765])
        np.testing.assert_array_equal(out["Northing"].to_numpy()[:2], [313177, 642058])
        np.testing.assert_allclose(out.loc[0, ["Latitude", "Longitude"]].to_numpy(dtype=float),
                                   [52.6576, 1.7179], atol=1e-3)

    def test_failed_row_is_nan(self, gridref_df):
        with pytest.warns(UserWarning, match="first failure at index 2"):
            out = gridrefs_to_latlon(gridref_df)
        assert out.loc[2, ["Easting", "Northing", "Latitude", "Longitude"]].isna().all()
        assert out.loc[:1, "Latitude"].notna().all()

    def test_input_frame_is_not_modified(self, gridref_df):
        before = gridref_df.copy()
        with pytest.warns(UserWarning):
            gridrefs_to_latlon(gridref_df)
        pd.testing.assert_frame_equal(gridref_df, before)

    def test_custom_column_name(self):
        df = pd.DataFrame({"ref": ["SV 00000 00000"]})
        out = gridrefs_to_latlon(df, column="ref", datum="OSGB36")
        assert out.loc[0, "Easting"] == 0
        assert out.loc[0, "Latitude"] == pytest.approx(49.766, abs=1e-2)

    def test_missing_column_raises(self):
        with pytest.raises(KeyError, match="GridRef"):
            gridrefs_to_latlon(pd.DataFrame({"ref": ["TG 51409 13177"]}))

    def test_unknown_datum_raises(self, gridref_df):
        with pytest.raises(ValueError, match="Unknown datum"):
            gridrefs_to_latlon(gridref_df, datum="NAD27")


class TestEastingsNorthingsToLatlon:

    def test_matches_gridref_path(self):
        by_ref = gridrefs_to_latlon(pd.DataFrame({"GridRef": ["NU 12765 42058"]}))
        by_en = eastings_northings_to_latlon(pd.DataFrame({"Easting": [412765.4], "Northing": [642058.9]}))
        np.testing.assert_allclose(by_en[["Latitude", "Longitude"]].to_numpy(),
                                   by_ref[["Latitude", "Longitude"]].to_numpy(), atol=1e-12)

    def test_nan_row_warns_and_stays_nan(self):
        df = pd.DataFrame({"Easting": [651409.0, np.nan], "Northing": [313177.0, 313177.0]})
        with pytest.warns(UserWarning, match=r"1 row\(s\)"):
            out = eastings_northings_to_latlon(df, datum="OSGB36")
        assert np.isfinite(out.loc[0, "Latitude"])
        assert np.isnan(out.loc[1, "Latitude"])

    def test_missing_columns_raise(self):
        with pytest.raises(KeyError):
            eastings_northings_to_latlon(pd.DataFrame({"Easting": [1.0]}))


class TestLatlonToGridrefs:

    def test_os_example(self):
        df = pd.DataFrame({"Latitude": [52 + 39 / 60 + 27.2531 / 3600],
                           "Longitude": [1 + 43 / 60 + 4.5177 / 3600]})
        out = latlon_to_gridrefs(df, datum="OSGB36")
        assert out.loc[0, "GridRef"] == "TG 51409 13177"
        assert out.loc[0, "Easting"] == 651409
        assert out.loc[0, "Northing"] == 313177

    def test_digits_are_passed_through(self):
        df = pd.DataFrame({"Latitude": [52 + 39 / 60 + 27.2531 / 3600],
                           "Longitude": [1 + 43 / 60 + 4.5177 / 3600]})
        out = latlon_to_gridrefs(df, datum="OSGB36", digits=6)
        assert out.loc[0, "GridRef"] == "TG 514 131"

    def test_off_grid_point_gets_none(self):
        # Paris is south of the false origin: negative northing
        df = pd.DataFrame({"Latitude": [52.6576, 48.8584], "Longitude": [1.7179, 2.2945]})
        with pytest.warns(UserWarning, match=r"1 row\(s\)"):
            out = latlon_to_gridrefs(df)
        assert out.loc[0, "GridRef"].startswith("TG ")
        assert out["GridRef"].dtype == object
        assert out.loc[1, "GridRef"] is None
        assert np.isnan(out.loc[1, "Easting"])

    def test_wgs84_round_trip_within_a_few_metres(self):
        refs = pd.DataFrame({"GridRef": ["TG 51409 13177", "NU 12765 42058", "SU 38750 14850"]})
        latlon = gridrefs_to_latlon(refs)
        back = latlon_to_gridrefs(latlon[["Latitude", "Longitude"]])
        np.testing.assert_allclose(back["Easting"].to_numpy(), latlon["Easting"].to_numpy(), atol=3)
        np.testing.assert_allclose(back["Northing"].to_numpy(), latlon["Northing"].to_numpy(), atol=3)
