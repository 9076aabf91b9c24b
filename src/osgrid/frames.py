"""Row-wise conversions over pandas DataFrames.

Rows the engine rejects come back as NaN (or None for grid-reference text)
and are reported once through warnings.warn; the rest of the frame is
converted normally. Input frames are never modified.
"""

import logging
import warnings
from typing import Callable, List, Tuple, Union

import numpy as np
import pandas as pd

from osgrid.core.datum_transform import convert
from osgrid.core.datums import DatumId, get_datum
from osgrid.core.errors import OsGridError
from osgrid.core.gridref import format_gridref, parse_gridref
from osgrid.core.projections import Projection, ProjectionFactory
from osgrid.domain.schemas import GeodeticPoint, GridRef

logger = logging.getLogger(__name__)


def _require_columns(df: pd.DataFrame, columns: List[str]) -> None:
    missing = [c for c in columns if c not in df.columns]
    if missing:
        raise KeyError(f"DataFrame is missing required columns: {missing} (got {list(df.columns)})")


def _warn_failures(failures: List[Tuple[object, str]], what: str) -> None:
    if not failures:
        return
    first_idx, first_msg = failures[0]
    warnings.warn(
        f"{len(failures)} row(s) could not be converted ({what}); first failure at index "
        f"{first_idx!r}: {first_msg}"
    )


def _to_latlon(df: pd.DataFrame, to_gridref: Callable[[pd.Series], GridRef],
               datum: Union[DatumId, str], projection: Projection, what: str) -> pd.DataFrame:
    target = get_datum(datum).id
    n = len(df)
    eastings = np.full(n, np.nan)
    northings = np.full(n, np.nan)
    lats = np.full(n, np.nan)
    lons = np.full(n, np.nan)
    failures: List[Tuple[object, str]] = []

    for i, (idx, row) in enumerate(df.iterrows()):
        try:
            gridref = to_gridref(row)
            point = convert(projection.inverse(gridref), target)
        except (OsGridError, ValueError, TypeError) as e:
            failures.append((idx, str(e)))
            continue
        eastings[i] = gridref.easting
        northings[i] = gridref.northing
        lats[i] = point.latitude
        lons[i] = point.longitude

    logger.debug("Converted %d of %d rows (%s) to %s", n - len(failures), n, what, target.value)
    _warn_failures(failures, what)

    out = df.copy()
    out["Easting"] = eastings
    out["Northing"] = northings
    out["Latitude"] = lats
    out["Longitude"] = lons
    return out


def gridrefs_to_latlon(df: pd.DataFrame, column: str = "GridRef",
                       datum: Union[DatumId, str] = DatumId.WGS84) -> pd.DataFrame:
    """Parse grid-reference text in `column` and add Easting/Northing/Latitude/Longitude."""
    _require_columns(df, [column])
    projection = ProjectionFactory.create("national_grid")
    return _to_latlon(df, lambda row: parse_gridref(str(row[column])), datum, projection, "grid reference")


def eastings_northings_to_latlon(df: pd.DataFrame,
                                 datum: Union[DatumId, str] = DatumId.WGS84) -> pd.DataFrame:
    """Convert numeric Easting/Northing columns to Latitude/Longitude on `datum`."""
    _require_columns(df, ["Easting", "Northing"])
    projection = ProjectionFactory.create("national_grid")
    return _to_latlon(
        df,
        lambda row: GridRef(easting=row["Easting"], northing=row["Northing"]),
        datum, projection, "easting/northing",
    )


def latlon_to_gridrefs(df: pd.DataFrame, datum: Union[DatumId, str] = DatumId.WGS84,
                       digits: int = 10) -> pd.DataFrame:
    """Convert Latitude/Longitude on `datum` to Easting/Northing and GridRef text."""
    _require_columns(df, ["Latitude", "Longitude"])
    source = get_datum(datum).id
    projection = ProjectionFactory.create("national_grid")

    n = len(df)
    eastings = np.full(n, np.nan)
    northings = np.full(n, np.nan)
    refs: List[object] = [None] * n
    failures: List[Tuple[object, str]] = []

    for i, (idx, row) in enumerate(df.iterrows()):
        try:
            point = GeodeticPoint(latitude=row["Latitude"], longitude=row["Longitude"], datum=source)
            gridref = projection.forward(convert(point, DatumId.OSGB36))
            refs[i] = format_gridref(gridref, digits)
        except (OsGridError, ValueError, TypeError) as e:
            failures.append((idx, str(e)))
            continue
        eastings[i] = gridref.easting
        northings[i] = gridref.northing

    logger.debug("Converted %d of %d rows (latitude/longitude) from %s", n - len(failures), n, source.value)
    _warn_failures(failures, "latitude/longitude")

    out = df.copy()
    out["Easting"] = eastings
    out["Northing"] = northings
    out["GridRef"] = pd.Series(refs, index=df.index, dtype=object)
    return out
