import numpy as np
import pytest

from osgrid.core.datums import DatumId
from osgrid.core.errors import ConvergenceError, DatumMismatchError
from osgrid.core.projections import Projection, ProjectionFactory, TransverseMercator
from osgrid.domain.schemas import GeodeticPoint, GridRef
from osgrid.models import NATIONAL_GRID, SolverConfig


class TestDatumGuard:

    def test_wgs84_point_is_rejected(self):
        p = GeodeticPoint(latitude=52.6576, longitude=1.7179, datum=DatumId.WGS84)
        with pytest.raises(DatumMismatchError, match="Convert the datum first"):
            TransverseMercator().forward(p)

    def test_other_airy_variant_is_rejected(self):
        # Irl1975 is on Airy Modified, not Airy 1830
        p = GeodeticPoint(latitude=53.35, longitude=-6.26, datum=DatumId.IRL1975)
        with pytest.raises(DatumMismatchError):
            TransverseMercator().forward(p)


class TestConvergence:

    def test_iteration_cap_raises(self):
        tm = TransverseMercator(solver=SolverConfig(max_iterations=1))
        with pytest.raises(ConvergenceError) as exc:
            tm.inverse(GridRef(easting=651409, northing=313177))
        assert exc.value.iterations == 1
        assert abs(exc.value.residual) > 1e-5

    def test_default_cap_is_enough_across_the_grid(self):
        tm = TransverseMercator()
        for n in (0, 300000, 650000, 1000000, 1299999):
            p = tm.inverse(GridRef(easting=400000, northing=n))
            assert 49.0 <= p.latitude < 62.0

    def test_northing_beyond_the_pole_raises(self):
        with pytest.raises(ConvergenceError, match="Base latitude"):
            TransverseMercator().inverse(GridRef(easting=400000, northing=10 ** 9))

    def test_far_negative_northing_raises(self):
        with pytest.raises(ConvergenceError):
            TransverseMercator().inverse(GridRef(easting=400000, northing=-(10 ** 9)))

    def test_convergence_error_is_arithmetic_error(self):
        with pytest.raises(ArithmeticError):
            TransverseMercator().inverse(GridRef(easting=400000, northing=10 ** 9))


class TestMeridionalArc:

    def test_arc_increases_northwards(self):
        tm = TransverseMercator()
        lats = np.radians([49.0, 50.0, 55.0, 60.0])
        arcs = [tm.meridional_arc(phi) for phi in lats]
        assert all(b > a for a, b in zip(arcs, arcs[1:]))

    def test_one_degree_of_arc_is_about_111_km(self):
        tm = TransverseMercator()
        arc = tm.meridional_arc(np.radians(50.0))
        # scaled by F0 = 0.9996
        np.testing.assert_allclose(arc, 111.2e3 * NATIONAL_GRID.F0, rtol=2e-3)


class TestProjectionFactory:

    def test_creates_national_grid(self):
        proj = ProjectionFactory.create("national_grid")
        assert isinstance(proj, Projection)
        assert isinstance(proj, TransverseMercator)
        assert proj.params == NATIONAL_GRID

    def test_custom_tm_with_national_grid_parameters_matches(self, os_example_point):
        custom = ProjectionFactory.create(
            "tm",
            central_meridian=-2.0,
            latitude_of_origin=49.0,
            false_easting=400000.0,
            false_northing=-100000.0,
            scale_factor=0.9996012717,
            datum="OSGB36",
        )
        assert custom.forward(os_example_point) == ProjectionFactory.create("national_grid").forward(os_example_point)

    def test_custom_tm_on_irish_datum(self):
        # Irish Grid parameters on Airy Modified
        irish = ProjectionFactory.create(
            "tm",
            central_meridian=-8.0,
            latitude_of_origin=53.5,
            false_easting=200000.0,
            false_northing=250000.0,
            scale_factor=1.000035,
            datum=DatumId.IRL1975,
        )
        origin = GeodeticPoint(latitude=53.5, longitude=-8.0, datum=DatumId.IRL1975)
        assert irish.forward(origin) == GridRef(easting=200000, northing=250000)
        back = irish.inverse(GridRef(easting=315904, northing=234671))
        assert back.datum is DatumId.IRL1975
        assert 53.0 < back.latitude < 54.0
        assert -6.5 < back.longitude < -6.0

    def test_custom_tm_missing_parameters_raises(self):
        with pytest.raises(ValueError, match="Missing Transverse Mercator parameters"):
            ProjectionFactory.create("tm", central_meridian=-2.0)

    def test_unknown_method_raises(self):
        with pytest.raises(ValueError, match="Unknown projection method"):
            ProjectionFactory.create("web_mercator")

    def test_solver_is_passed_through(self):
        proj = ProjectionFactory.create("national_grid", solver=SolverConfig(max_iterations=3))
        assert proj.solver.max_iterations == 3
