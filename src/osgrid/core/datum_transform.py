"""Datum conversion via a 7-parameter Helmert transform on ECEF coordinates.

WGS84 is the hub: every conversion goes geodetic -> cartesian (source
ellipsoid) -> Helmert -> geodetic (target ellipsoid), and conversions between
two non-WGS84 datums pass through WGS84.

Conversions *to* WGS84 apply the source datum's parameters with their signs
flipped. That is the small-angle approximation of the inverse transform; the
round trip through WGS84 is therefore only exact to the order of the rotation
and scale terms (well under a metre for the tabulated datums).
"""

from __future__ import annotations

import math
from enum import Enum
from typing import Optional, Union

from osgrid.angles import to_degrees, to_radians
from osgrid.core.datums import Datum, DatumId, HelmertTransform, get_datum
from osgrid.core.errors import ConvergenceError
from osgrid.core.vector3d import Vector3d
from osgrid.domain.schemas import GeodeticPoint
from osgrid.models import DEFAULT_SOLVER, SolverConfig


class ConversionKind(str, Enum):
    IDENTITY = "identity"
    FROM_WGS84 = "from_wgs84"
    TO_WGS84 = "to_wgs84"
    BETWEEN_NON_WGS84 = "between_non_wgs84"


def conversion_kind(from_datum: DatumId, to_datum: DatumId) -> ConversionKind:
    if from_datum is to_datum:
        return ConversionKind.IDENTITY
    if from_datum is DatumId.WGS84:
        return ConversionKind.FROM_WGS84
    if to_datum is DatumId.WGS84:
        return ConversionKind.TO_WGS84
    return ConversionKind.BETWEEN_NON_WGS84


def to_cartesian(point: GeodeticPoint) -> Vector3d:
    """Geodetic (lat, lon, h) on the point's own datum ellipsoid -> ECEF (x, y, z) metres."""
    ellipsoid = get_datum(point.datum).ellipsoid
    phi = to_radians(point.latitude)
    lam = to_radians(point.longitude)
    H = point.height

    sin_phi, cos_phi = math.sin(phi), math.cos(phi)
    sin_lam, cos_lam = math.sin(lam), math.cos(lam)

    e2 = ellipsoid.e2
    nu = ellipsoid.a / math.sqrt(1 - e2 * sin_phi * sin_phi)

    x = (nu + H) * cos_phi * cos_lam
    y = (nu + H) * cos_phi * sin_lam
    z = ((1 - e2) * nu + H) * sin_phi

    return Vector3d(x, y, z)


def from_cartesian(vec: Vector3d, datum: Union[DatumId, str],
                   solver: SolverConfig = DEFAULT_SOLVER) -> GeodeticPoint:
    """
    ECEF (x, y, z) -> geodetic (lat, lon, h) on the given datum's ellipsoid.

    Latitude is solved iteratively until it changes by less than 1/a radians
    (about a metre on the ground). Points whose height exceeds
    SolverConfig.max_abs_height_m raise ConvergenceError.
    """
    d = get_datum(datum)
    a = d.ellipsoid.a
    e2 = d.ellipsoid.e2
    x, y, z = vec.x, vec.y, vec.z

    p = math.sqrt(x * x + y * y)
    phi = math.atan2(z, p * (1 - e2))
    precision = 1 / a

    delta = math.inf
    for i in range(1, solver.max_iterations + 1):
        sin_phi = math.sin(phi)
        nu = a / math.sqrt(1 - e2 * sin_phi * sin_phi)
        phi_prev = phi
        phi = math.atan2(z + e2 * nu * sin_phi, p)
        delta = abs(phi - phi_prev)
        if delta < precision:
            break
    else:
        raise ConvergenceError(
            f"Latitude did not converge for cartesian point {vec.to_string()}",
            iterations=solver.max_iterations, residual=delta,
        )

    lam = math.atan2(y, x)

    # p/cos(phi) - nu degenerates on the polar axis; this form does not
    sin_phi = math.sin(phi)
    nu = a / math.sqrt(1 - e2 * sin_phi * sin_phi)
    H = p * math.cos(phi) + z * sin_phi - a * a / nu

    if not all(math.isfinite(v) for v in (phi, lam, H)):
        raise ConvergenceError(
            f"Non-finite geodetic result for cartesian point {vec.to_string()}",
            iterations=i, residual=delta,
        )
    if abs(H) > solver.max_abs_height_m:
        raise ConvergenceError(
            f"Implausible height {H:.3f} m for cartesian point {vec.to_string()}",
            iterations=i, residual=delta,
        )

    return GeodeticPoint(latitude=to_degrees(phi), longitude=to_degrees(lam), height=H, datum=d.id)


def apply_helmert(vec: Vector3d, t: HelmertTransform) -> Vector3d:
    """Apply a 7-parameter Helmert transform (rotations in arc-seconds, scale in ppm)."""
    x1, y1, z1 = vec.x, vec.y, vec.z

    rx = to_radians(t.rx / 3600)
    ry = to_radians(t.ry / 3600)
    rz = to_radians(t.rz / 3600)
    s1 = t.s / 1e6 + 1

    x2 = t.tx + x1 * s1 - y1 * rz + z1 * ry
    y2 = t.ty + x1 * rz + y1 * s1 - z1 * rx
    z2 = t.tz - x1 * ry + y1 * rx + z1 * s1

    return Vector3d(x2, y2, z2)


def _transform_for(kind: ConversionKind, source: Datum, target: Datum) -> Optional[HelmertTransform]:
    if kind is ConversionKind.FROM_WGS84:
        return target.transform
    if kind is ConversionKind.TO_WGS84:
        return source.transform.negated()
    return None


def convert(point: GeodeticPoint, to_datum: Union[DatumId, str],
            solver: SolverConfig = DEFAULT_SOLVER) -> GeodeticPoint:
    """Convert a point to another datum, returning a new point."""
    target = get_datum(to_datum)
    source = get_datum(point.datum)
    kind = conversion_kind(source.id, target.id)

    if kind is ConversionKind.IDENTITY:
        return point
    if kind is ConversionKind.BETWEEN_NON_WGS84:
        point = convert(point, DatumId.WGS84, solver)
        kind = ConversionKind.FROM_WGS84
        source = get_datum(DatumId.WGS84)

    transform = _transform_for(kind, source, target)
    cartesian = apply_helmert(to_cartesian(point), transform)
    return from_cartesian(cartesian, target.id, solver)
