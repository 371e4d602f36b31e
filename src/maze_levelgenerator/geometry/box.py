"""
Oriented bounding boxes and separating-axis intersection.

A Box is derived from a world transform: eight corners from the
+/- half-scale extents rotated and offset, plus the three rotated local
axes used as candidate separating axes.

Box.intersects() runs the 15-axis SAT test (3 face axes per box and the
9 edge cross products). The boundary is closed: boxes that only touch
are reported as intersecting.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

import numpy as np

from .transform import Transform
from .vector_math import EPSILON, FORWARD, RIGHT, UP, Quaternion, as_vec3, bounds, vec3


# Corner sign pattern, x varies fastest
_CORNER_SIGNS = np.array([
    [-1, -1, -1],
    [1, -1, -1],
    [-1, 1, -1],
    [1, 1, -1],
    [-1, -1, 1],
    [1, -1, 1],
    [-1, 1, 1],
    [1, 1, 1],
], dtype=np.float64)


@dataclass
class BoxIntersection:
    """Minimum translation info gathered during an intersection test.

    Attributes:
        a, b: The tested boxes
        a_in_b: True if a projects inside b on every tested axis
        b_in_a: True if b projects inside a on every tested axis
        distance: Smallest absolute overlap found (None until an axis overlaps)
        axis: Unit axis of that overlap, signed by the overlap direction
    """
    a: Optional["Box"] = None
    b: Optional["Box"] = None
    a_in_b: bool = True
    b_in_a: bool = True
    distance: Optional[float] = None
    axis: np.ndarray = field(default_factory=vec3)


class Box:
    """Oriented bounding box in world space."""

    def __init__(self, position: np.ndarray, rotation: Quaternion, scale: np.ndarray):
        position = as_vec3(position)
        half = as_vec3(scale) * 0.5

        rot = rotation.to_matrix()[:3, :3]
        self.vertices: np.ndarray = position + (_CORNER_SIGNS * half) @ rot.T

        self.right = rotation.rotate_vector(RIGHT)
        self.up = rotation.rotate_vector(UP)
        self.forward = rotation.rotate_vector(FORWARD)
        self.bounds: Tuple[np.ndarray, np.ndarray] = bounds(self.vertices)

    @classmethod
    def from_transform(cls, transform: Transform) -> "Box":
        return cls(transform.position, transform.rotation, transform.scale)

    @classmethod
    def from_matrix(cls, m: np.ndarray) -> "Box":
        return cls.from_transform(Transform.from_matrix(m))

    @property
    def axes(self) -> List[np.ndarray]:
        return [self.right, self.up, self.forward]

    def candidate_axes(self, other: "Box") -> List[np.ndarray]:
        """Face axes of both boxes followed by the 9 edge cross products."""
        result = self.axes + other.axes
        for axis in self.axes:
            for other_axis in other.axes:
                result.append(np.cross(axis, other_axis))
        return result

    @staticmethod
    def _separated(va: np.ndarray, vb: np.ndarray, axis: np.ndarray,
                   result: Optional[BoxIntersection] = None) -> bool:
        """Check a single axis; record overlap in `result` when not separated."""
        pa = va @ axis
        pb = vb @ axis
        a_min, a_max = float(pa.min()), float(pa.max())
        b_min, b_max = float(pb.min()), float(pb.max())

        # Union span longer than both intervals together means a gap
        total = (a_max - a_min) + (b_max - b_min)
        span = max(a_max, b_max) - min(a_min, b_min)
        if span > total:
            return True

        if a_min > b_max or a_max < b_min:
            return True

        if result is not None:
            if a_min < b_min:
                result.a_in_b = False
                if a_max < b_max:
                    overlap = a_max - b_min
                    result.b_in_a = False
                else:
                    option1 = a_max - b_min
                    option2 = b_max - a_min
                    overlap = option1 if option1 < option2 else -option2
            else:
                result.b_in_a = False
                if a_max > b_max:
                    overlap = a_min - b_max
                    result.a_in_b = False
                else:
                    option1 = a_max - b_min
                    option2 = b_max - a_min
                    overlap = option1 if option1 < option2 else -option2

            absolute = abs(overlap)
            if result.distance is None or result.distance > absolute:
                result.distance = absolute
                result.axis = axis * (-1.0 if overlap < 0 else 1.0)

        return False

    @staticmethod
    def intersects(a: "Box", b: "Box", result: Optional[BoxIntersection] = None) -> bool:
        """Separating-axis test between two boxes.

        Args:
            a, b: Boxes to test
            result: Optional BoxIntersection to fill with minimum overlap info

        Returns:
            True if no separating axis exists (touching counts as intersecting)
        """
        if result is not None:
            result.a = a
            result.b = b
            result.a_in_b = True
            result.b_in_a = True
            result.distance = None
            result.axis = vec3()

        for axis in a.candidate_axes(b):
            ln = float(np.linalg.norm(axis))
            # Parallel edges give a zero cross product; not a real axis
            if ln < EPSILON:
                continue
            if Box._separated(a.vertices, b.vertices, axis / ln, result):
                return False

        return True

    def intersection(self, other: "Box") -> Optional[BoxIntersection]:
        """Return overlap info if the boxes intersect, else None."""
        info = BoxIntersection()
        if Box.intersects(self, other, info):
            return info
        return None
