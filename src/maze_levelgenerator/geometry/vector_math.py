"""
Vector and quaternion math for maze geometry.

Vectors are plain numpy float64 arrays of shape (3,). Rotations are
unit quaternions stored as (x, y, z, w).

Axis conventions (right-handed, Y up):
- RIGHT   = (1, 0, 0)
- UP      = (0, 1, 0)
- FORWARD = (0, 0, -1)
"""

from __future__ import annotations
import math
from dataclasses import dataclass
from typing import Iterable, Tuple

import numpy as np


EPSILON = 1e-9


def vec3(x: float = 0.0, y: float = 0.0, z: float = 0.0) -> np.ndarray:
    """Create a new 3D vector."""
    return np.array([x, y, z], dtype=np.float64)


def as_vec3(value) -> np.ndarray:
    """Copy any 3-sequence into a fresh float64 vector."""
    return np.array(value, dtype=np.float64).reshape(3)


def _readonly(x: float, y: float, z: float) -> np.ndarray:
    v = vec3(x, y, z)
    v.setflags(write=False)
    return v


ZERO = _readonly(0.0, 0.0, 0.0)
ONE = _readonly(1.0, 1.0, 1.0)
RIGHT = _readonly(1.0, 0.0, 0.0)
UP = _readonly(0.0, 1.0, 0.0)
FORWARD = _readonly(0.0, 0.0, -1.0)


def length(v: np.ndarray) -> float:
    return float(np.linalg.norm(v))


def normalize(v: np.ndarray) -> np.ndarray:
    """Return unit vector, or the zero vector if v has no length."""
    ln = length(v)
    if ln < EPSILON:
        return vec3()
    return v / ln


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def even(value: float) -> float:
    """Round to the nearest even number (halves round up)."""
    return math.floor(value / 2.0 + 0.5) * 2.0


def even_range(low: float, high: float) -> Tuple[float, float]:
    """Smallest and largest even numbers inside [low, high].

    The result has first > second when the interval holds no even number.
    """
    return math.ceil(low / 2.0) * 2.0, math.floor(high / 2.0) * 2.0


def bounds(points: Iterable[np.ndarray]) -> Tuple[np.ndarray, np.ndarray]:
    """Axis-aligned (min, max) corners of a point set."""
    stacked = np.asarray(list(points), dtype=np.float64)
    return stacked.min(axis=0), stacked.max(axis=0)


@dataclass(frozen=True)
class Quaternion:
    """Rotation quaternion (x, y, z, w)."""
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0
    w: float = 1.0

    # ---------------------------------------------------------------
    # Constructors
    # ---------------------------------------------------------------

    @classmethod
    def identity(cls) -> "Quaternion":
        return cls(0.0, 0.0, 0.0, 1.0)

    @classmethod
    def from_axis_angle(cls, axis: np.ndarray, angle: float) -> "Quaternion":
        """Rotation of `angle` radians around `axis`."""
        n = normalize(np.asarray(axis, dtype=np.float64))
        s = math.sin(angle / 2.0)
        return cls(n[0] * s, n[1] * s, n[2] * s, math.cos(angle / 2.0)).normalized()

    @classmethod
    def from_euler(cls, x: float, y: float, z: float) -> "Quaternion":
        """Build from Euler angles in radians, ZYX order."""
        c1 = math.cos(x / 2.0)
        c2 = math.cos(y / 2.0)
        c3 = math.cos(z / 2.0)
        s1 = math.sin(x / 2.0)
        s2 = math.sin(y / 2.0)
        s3 = math.sin(z / 2.0)
        return cls(
            s1 * c2 * c3 - c1 * s2 * s3,
            c1 * s2 * c3 + s1 * c2 * s3,
            c1 * c2 * s3 - s1 * s2 * c3,
            c1 * c2 * c3 + s1 * s2 * s3,
        )

    @classmethod
    def from_degrees(cls, x: float, y: float, z: float) -> "Quaternion":
        """Build from Euler angles in degrees, ZYX order."""
        return cls.from_euler(math.radians(x), math.radians(y), math.radians(z))

    @classmethod
    def from_matrix(cls, m: np.ndarray) -> "Quaternion":
        """Extract rotation from the upper 3x3 of m (must be unscaled)."""
        m11, m12, m13 = m[0, 0], m[0, 1], m[0, 2]
        m21, m22, m23 = m[1, 0], m[1, 1], m[1, 2]
        m31, m32, m33 = m[2, 0], m[2, 1], m[2, 2]
        trace = m11 + m22 + m33

        if trace > 0:
            s = 0.5 / math.sqrt(trace + 1.0)
            q = cls((m32 - m23) * s, (m13 - m31) * s, (m21 - m12) * s, 0.25 / s)
        elif m11 > m22 and m11 > m33:
            s = 2.0 * math.sqrt(1.0 + m11 - m22 - m33)
            q = cls(0.25 * s, (m12 + m21) / s, (m13 + m31) / s, (m32 - m23) / s)
        elif m22 > m33:
            s = 2.0 * math.sqrt(1.0 + m22 - m11 - m33)
            q = cls((m12 + m21) / s, 0.25 * s, (m23 + m32) / s, (m13 - m31) / s)
        else:
            s = 2.0 * math.sqrt(1.0 + m33 - m11 - m22)
            q = cls((m13 + m31) / s, (m23 + m32) / s, 0.25 * s, (m21 - m12) / s)
        return q.normalized()

    # ---------------------------------------------------------------
    # Algebra
    # ---------------------------------------------------------------

    def __mul__(self, q: "Quaternion") -> "Quaternion":
        """Hamilton product: (self * q) applies q first, then self."""
        ax, ay, az, aw = self.x, self.y, self.z, self.w
        bx, by, bz, bw = q.x, q.y, q.z, q.w
        return Quaternion(
            ax * bw + aw * bx + ay * bz - az * by,
            ay * bw + aw * by + az * bx - ax * bz,
            az * bw + aw * bz + ax * by - ay * bx,
            aw * bw - ax * bx - ay * by - az * bz,
        )

    def dot(self, q: "Quaternion") -> float:
        return self.x * q.x + self.y * q.y + self.z * q.z + self.w * q.w

    def magnitude(self) -> float:
        return math.sqrt(self.dot(self))

    def normalized(self) -> "Quaternion":
        mag = self.magnitude()
        if mag < EPSILON:
            return Quaternion.identity()
        return Quaternion(self.x / mag, self.y / mag, self.z / mag, self.w / mag)

    def conjugate(self) -> "Quaternion":
        return Quaternion(-self.x, -self.y, -self.z, self.w)

    def inverse(self) -> "Quaternion":
        sq = self.dot(self)
        if sq < EPSILON:
            return Quaternion.identity()
        c = self.conjugate()
        return Quaternion(c.x / sq, c.y / sq, c.z / sq, c.w / sq)

    def rotate_vector(self, v: np.ndarray) -> np.ndarray:
        x, y, z = float(v[0]), float(v[1]), float(v[2])
        qx, qy, qz, qw = self.x, self.y, self.z, self.w

        ix = qw * x + qy * z - qz * y
        iy = qw * y + qz * x - qx * z
        iz = qw * z + qx * y - qy * x
        iw = -qx * x - qy * y - qz * z

        return vec3(
            ix * qw + iw * -qx + iy * -qz - iz * -qy,
            iy * qw + iw * -qy + iz * -qx - ix * -qz,
            iz * qw + iw * -qz + ix * -qy - iy * -qx,
        )

    @property
    def direction(self) -> np.ndarray:
        """Forward vector under this rotation."""
        return normalize(self.rotate_vector(FORWARD))

    def to_matrix(self) -> np.ndarray:
        """4x4 rotation matrix (column vectors)."""
        x, y, z, w = self.x, self.y, self.z, self.w
        xx, yy, zz = x * x, y * y, z * z
        xy, xz, yz = x * y, x * z, y * z
        wx, wy, wz = w * x, w * y, w * z

        return np.array([
            [1 - 2 * (yy + zz), 2 * (xy - wz), 2 * (xz + wy), 0.0],
            [2 * (xy + wz), 1 - 2 * (xx + zz), 2 * (yz - wx), 0.0],
            [2 * (xz - wy), 2 * (yz + wx), 1 - 2 * (xx + yy), 0.0],
            [0.0, 0.0, 0.0, 1.0],
        ], dtype=np.float64)

    def is_close(self, q: "Quaternion", tolerance: float = 1e-6) -> bool:
        """True if both represent the same rotation (q and -q are equal)."""
        return abs(abs(self.normalized().dot(q.normalized())) - 1.0) < tolerance

    def to_tuple(self) -> Tuple[float, float, float, float]:
        return (self.x, self.y, self.z, self.w)
