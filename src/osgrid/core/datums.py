"""Reference ellipsoids and datums.

Helmert parameters transform *from* WGS84 *into* the given datum
(q.v. Ordnance Survey 'A guide to coordinate systems in Great Britain', s.6).
The tables are read-only mappings built once at import time.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Mapping, Union


@dataclass(frozen=True)
class Ellipsoid:
    name: str
    a: float  # semi-major axis, m
    b: float  # semi-minor axis, m
    f: float  # flattening

    def __post_init__(self) -> None:
        if not (self.a > self.b > 0):
            raise ValueError(f"Ellipsoid {self.name}: require a > b > 0, got a={self.a}, b={self.b}")

    @property
    def e2(self) -> float:
        """Eccentricity squared."""
        return (self.a * self.a - self.b * self.b) / (self.a * self.a)


@dataclass(frozen=True)
class HelmertTransform:
    tx: float = 0.0  # m
    ty: float = 0.0  # m
    tz: float = 0.0  # m
    rx: float = 0.0  # arc-seconds
    ry: float = 0.0  # arc-seconds
    rz: float = 0.0  # arc-seconds
    s: float = 0.0   # ppm

    def negated(self) -> HelmertTransform:
        """
        Every parameter with its sign flipped.

        This is the small-angle approximation of the inverse transform, not
        the exact matrix inverse; the error grows with the rotation and scale
        terms (sub-millimetre for OSGB36, larger for datums such as Irl1975).
        """
        return HelmertTransform(
            tx=-self.tx, ty=-self.ty, tz=-self.tz,
            rx=-self.rx, ry=-self.ry, rz=-self.rz,
            s=-self.s,
        )

    @property
    def is_identity(self) -> bool:
        return all(v == 0.0 for v in (self.tx, self.ty, self.tz, self.rx, self.ry, self.rz, self.s))


class DatumId(str, Enum):
    WGS84 = "WGS84"
    OSGB36 = "OSGB36"
    ED50 = "ED50"
    IRL1975 = "Irl1975"
    TOKYO_JAPAN = "TokyoJapan"


@dataclass(frozen=True)
class Datum:
    id: DatumId
    ellipsoid: Ellipsoid
    transform: HelmertTransform


ELLIPSOIDS: Mapping[str, Ellipsoid] = MappingProxyType({
    "WGS84":        Ellipsoid("WGS84",        a=6378137.0,   b=6356752.3142,  f=1 / 298.257223563),
    "GRS80":        Ellipsoid("GRS80",        a=6378137.0,   b=6356752.31414, f=1 / 298.257222101),
    "Airy1830":     Ellipsoid("Airy1830",     a=6377563.396, b=6356256.909,   f=1 / 299.3249646),
    "AiryModified": Ellipsoid("AiryModified", a=6377340.189, b=6356034.448,   f=1 / 299.32496),
    "Intl1924":     Ellipsoid("Intl1924",     a=6378388.0,   b=6356911.946,   f=1 / 297.0),
    "Bessel1841":   Ellipsoid("Bessel1841",   a=6377397.155, b=6356078.963,   f=1 / 299.152815351),
})


DATUMS: Mapping[DatumId, Datum] = MappingProxyType({
    DatumId.WGS84: Datum(
        DatumId.WGS84,
        ELLIPSOIDS["WGS84"],
        HelmertTransform(),
    ),
    DatumId.OSGB36: Datum(
        DatumId.OSGB36,
        ELLIPSOIDS["Airy1830"],
        HelmertTransform(tx=-446.448, ty=125.157, tz=-542.060,
                         rx=-0.1502, ry=-0.2470, rz=-0.8421,
                         s=20.4894),
    ),
    DatumId.ED50: Datum(
        DatumId.ED50,
        ELLIPSOIDS["Intl1924"],
        HelmertTransform(tx=89.5, ty=93.8, tz=123.1,
                         rx=0.0, ry=0.0, rz=0.156,
                         s=-1.2),
    ),
    DatumId.IRL1975: Datum(
        DatumId.IRL1975,
        ELLIPSOIDS["AiryModified"],
        HelmertTransform(tx=-482.530, ty=130.596, tz=-564.557,
                         rx=-1.042, ry=-0.214, rz=-0.631,
                         s=-8.150),
    ),
    DatumId.TOKYO_JAPAN: Datum(
        DatumId.TOKYO_JAPAN,
        ELLIPSOIDS["Bessel1841"],
        HelmertTransform(tx=148.0, ty=-507.0, tz=-685.0),
    ),
})


def get_datum(datum: Union[DatumId, str]) -> Datum:
    """Look up a datum by id or by name (case-insensitive)."""
    if isinstance(datum, DatumId):
        return DATUMS[datum]
    for datum_id in DatumId:
        if datum_id.value.lower() == str(datum).strip().lower():
            return DATUMS[datum_id]
    raise ValueError(f"Unknown datum: {datum!r}. Expected one of: {', '.join(d.value for d in DatumId)}")
