from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np


@dataclass(frozen=True)
class Vector3d:
    """
    Immutable 3-d vector.

    In a geodesy context x, y, z are usually metres from the earth centre
    (ECEF), but the arithmetic is generic: n-vectors, great-circle normals
    and motion vectors use the same operations.
    """
    x: float
    y: float
    z: float

    def plus(self, v: Vector3d) -> Vector3d:
        return Vector3d(self.x + v.x, self.y + v.y, self.z + v.z)

    def minus(self, v: Vector3d) -> Vector3d:
        return Vector3d(self.x - v.x, self.y - v.y, self.z - v.z)

    def times(self, k: float) -> Vector3d:
        k = float(k)
        return Vector3d(self.x * k, self.y * k, self.z * k)

    def divided_by(self, k: float) -> Vector3d:
        k = float(k)
        if k == 0.0:
            raise ZeroDivisionError(f"Cannot divide vector {self.to_string()} by zero")
        return Vector3d(self.x / k, self.y / k, self.z / k)

    def dot(self, v: Vector3d) -> float:
        return self.x * v.x + self.y * v.y + self.z * v.z

    def cross(self, v: Vector3d) -> Vector3d:
        x = self.y * v.z - self.z * v.y
        y = self.z * v.x - self.x * v.z
        z = self.x * v.y - self.y * v.x
        return Vector3d(x, y, z)

    def negate(self) -> Vector3d:
        return Vector3d(-self.x, -self.y, -self.z)

    def length(self) -> float:
        return math.sqrt(self.x * self.x + self.y * self.y + self.z * self.z)

    def unit(self) -> Vector3d:
        """Unit vector in the same direction; zero and unit vectors are returned as-is."""
        norm = self.length()
        if norm == 1.0 or norm == 0.0:
            return self
        return Vector3d(self.x / norm, self.y / norm, self.z / norm)

    def angle_to(self, v: Vector3d) -> float:
        """Angle in radians between this vector and v, in [0, π]."""
        sin_theta = self.cross(v).length()
        cos_theta = self.dot(v)
        return math.atan2(sin_theta, cos_theta)

    def rotate_around(self, axis: Vector3d, theta: float) -> Vector3d:
        """
        Rotate the direction of this vector around axis by theta radians.

        Uses the quaternion-derived rotation matrix for axis/angle; the
        result is a unit vector (the point is normalised before rotation).
        """
        p = self.unit()
        a = axis.unit()
        s = math.sin(theta)
        c = math.cos(theta)
        t = 1.0 - c

        q = np.array([
            [a.x * a.x * t + c,       a.x * a.y * t - a.z * s, a.x * a.z * t + a.y * s],
            [a.y * a.x * t + a.z * s, a.y * a.y * t + c,       a.y * a.z * t - a.x * s],
            [a.z * a.x * t - a.y * s, a.z * a.y * t + a.x * s, a.z * a.z * t + c],
        ])
        qp = q @ np.array([p.x, p.y, p.z])
        return Vector3d(float(qp[0]), float(qp[1]), float(qp[2]))

    def to_string(self, precision: int = 3) -> str:
        p = int(precision)
        return f"[{self.x:.{p}f},{self.y:.{p}f},{self.z:.{p}f}]"

    def __str__(self) -> str:
        return self.to_string()
