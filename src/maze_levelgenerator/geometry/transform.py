"""
Affine transforms for the maze node hierarchy.

A Transform holds position, rotation and scale. Its `model` matrix is
built in TRS order (translate * rotate * scale), using column vectors so
that `parent.model @ child.model` maps child space into parent space.

Matrices are 4x4 numpy float64 arrays with the translation in the last
column.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Tuple

import numpy as np

from .vector_math import EPSILON, Quaternion, as_vec3, vec3


class DegenerateTransformError(ValueError):
    """Raised when a matrix cannot be inverted or decomposed (zero determinant)."""


def compose_matrix(position: np.ndarray, rotation: Quaternion, scale: np.ndarray) -> np.ndarray:
    """Build translate * rotate * scale."""
    m = rotation.to_matrix()
    m[:3, 0] *= scale[0]
    m[:3, 1] *= scale[1]
    m[:3, 2] *= scale[2]
    m[:3, 3] = position
    return m


def _check_determinant(m: np.ndarray) -> float:
    """Determinant of the 3x3 block, relative to its column lengths.

    A uniformly tiny scale is still invertible; only a collapsed basis
    (zero or parallel columns) is rejected.
    """
    basis = m[:3, :3]
    det = float(np.linalg.det(basis))
    norms = float(np.prod(np.linalg.norm(basis, axis=0)))
    if norms == 0.0 or abs(det) < EPSILON * norms:
        raise DegenerateTransformError(f"Matrix is not invertible (determinant={det:g})")
    return det


def invert_matrix(m: np.ndarray) -> np.ndarray:
    _check_determinant(m)
    return np.linalg.inv(m)


def decompose_matrix(m: np.ndarray) -> Tuple[np.ndarray, Quaternion, np.ndarray]:
    """Split an affine matrix back into (position, rotation, scale).

    Scale is the length of each basis column. A negative determinant
    means the basis is mirrored, which is folded into the X scale.
    """
    det = _check_determinant(m)

    position = np.array(m[:3, 3], dtype=np.float64)

    sx = float(np.linalg.norm(m[:3, 0]))
    sy = float(np.linalg.norm(m[:3, 1]))
    sz = float(np.linalg.norm(m[:3, 2]))
    if det < 0:
        sx = -sx

    basis = np.array(m[:3, :3], dtype=np.float64)
    basis[:, 0] /= sx
    basis[:, 1] /= sy
    basis[:, 2] /= sz

    return position, Quaternion.from_matrix(basis), vec3(sx, sy, sz)


@dataclass(eq=False)
class Transform:
    """Position / rotation / scale of a node relative to its parent."""
    position: np.ndarray = field(default_factory=vec3)
    rotation: Quaternion = field(default_factory=Quaternion.identity)
    scale: np.ndarray = field(default_factory=lambda: vec3(1.0, 1.0, 1.0))

    def __post_init__(self):
        self.position = as_vec3(self.position)
        self.scale = as_vec3(self.scale)
        self.rotation = self.rotation.normalized()

    @classmethod
    def identity(cls) -> "Transform":
        return cls()

    @classmethod
    def from_matrix(cls, m: np.ndarray) -> "Transform":
        position, rotation, scale = decompose_matrix(m)
        return cls(position, rotation, scale)

    @property
    def model(self) -> np.ndarray:
        return compose_matrix(self.position, self.rotation, self.scale)

    def local(self, parent: "Transform") -> "Transform":
        """Express this transform relative to `parent`.

        Solves inverse(parent.model) * self.model and decomposes the result.
        """
        return Transform.from_matrix(invert_matrix(parent.model) @ self.model)

    def to_world(self, parent: "Transform") -> "Transform":
        """Inverse of local(): re-express a child transform in parent's space."""
        return Transform.from_matrix(parent.model @ self.model)

    def replace(self, other: "Transform") -> None:
        """Overwrite this transform in place."""
        self.position = as_vec3(other.position)
        self.rotation = other.rotation.normalized()
        self.scale = as_vec3(other.scale)

    def copy(self) -> "Transform":
        return Transform(self.position.copy(), self.rotation, self.scale.copy())

    def is_close(self, other: "Transform", tolerance: float = 1e-6) -> bool:
        return (
            np.allclose(self.position, other.position, atol=tolerance) and
            np.allclose(self.scale, other.scale, atol=tolerance) and
            self.rotation.is_close(other.rotation, tolerance)
        )
