from __future__ import annotations

from dataclasses import dataclass

from osgrid.core.datums import DatumId


@dataclass(frozen=True)
class TransverseMercatorParams:
    """
    Transverse Mercator parameters.

    Defaults are the Ordnance Survey National Grid:
      - Airy 1830 ellipsoid (OSGB36 datum)
      - scale factor F0 on the central meridian
      - true origin 49°N, 2°W
      - false origin N0/E0 (northing & easting of true origin, metres)
    """
    a: float = 6377563.396
    b: float = 6356256.909
    F0: float = 0.9996012717
    lat0_deg: float = 49.0
    lon0_deg: float = -2.0
    N0: float = -100000.0
    E0: float = 400000.0
    datum: DatumId = DatumId.OSGB36


@dataclass(frozen=True)
class SolverConfig:
    """
    Bounds for the iterative solves.

    arc_tolerance_m: stop the meridional-arc iteration (grid -> lat/lon) when
      the northing residual drops below this (1e-5 m = 0.01 mm).
    The cartesian -> geodetic latitude solve stops when the change in latitude
    is below 1/a radians (about 1 m), the practical limit of a Helmert transform.
    max_abs_height_m: cartesian points further than this above or below the
      ellipsoid are rejected as degenerate input.
    """
    max_iterations: int = 20
    arc_tolerance_m: float = 1e-5
    max_abs_height_m: float = 1e7

    def __post_init__(self) -> None:
        if self.max_iterations < 1:
            raise ValueError(f"max_iterations must be >= 1, got {self.max_iterations}")
        if self.arc_tolerance_m <= 0:
            raise ValueError(f"arc_tolerance_m must be positive, got {self.arc_tolerance_m}")
        if self.max_abs_height_m <= 0:
            raise ValueError(f"max_abs_height_m must be positive, got {self.max_abs_height_m}")


NATIONAL_GRID = TransverseMercatorParams()
DEFAULT_SOLVER = SolverConfig()
