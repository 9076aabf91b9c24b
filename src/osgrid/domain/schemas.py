import math

from pydantic import BaseModel, ConfigDict, field_validator

from osgrid.core.datums import DatumId


class GridRef(BaseModel):
    """Numeric National Grid reference: metres from the false origin.

    Values are floored to whole metres on construction, so projected
    coordinates can be passed straight in. NaN and infinities are rejected.
    """

    easting: int
    northing: int

    model_config = ConfigDict(frozen=True)

    @field_validator("easting", "northing", mode="before")
    @classmethod
    def floor_to_metre(cls, value):
        if isinstance(value, bool):
            raise ValueError("Grid coordinate must be a number, got a bool")
        if isinstance(value, int):
            return value
        number = float(value)
        if not math.isfinite(number):
            raise ValueError(f"Grid coordinate must be finite, got {value!r}")
        return math.floor(number)


class GeodeticPoint(BaseModel):
    """Latitude/longitude (degrees) and ellipsoidal height (metres) on a datum.

    Ranges are not clamped: a latitude outside [-90, 90] is physically
    meaningless but representable, and callers validate where it matters.
    """

    latitude: float
    longitude: float
    height: float = 0.0
    datum: DatumId = DatumId.WGS84

    model_config = ConfigDict(frozen=True)
