"""
Geometry Module for Maze Generation

Vector/quaternion helpers, TRS transforms and oriented bounding boxes
with separating-axis intersection.
"""

from .vector_math import (
    EPSILON,
    ZERO,
    ONE,
    RIGHT,
    UP,
    FORWARD,
    Quaternion,
    vec3,
    as_vec3,
    length,
    normalize,
    even,
    even_range,
    round_half_up,
    bounds,
)
from .transform import (
    Transform,
    DegenerateTransformError,
    compose_matrix,
    decompose_matrix,
    invert_matrix,
)
from .box import Box, BoxIntersection

__all__ = [
    'EPSILON',
    'ZERO',
    'ONE',
    'RIGHT',
    'UP',
    'FORWARD',
    'Quaternion',
    'vec3',
    'as_vec3',
    'length',
    'normalize',
    'even',
    'even_range',
    'round_half_up',
    'bounds',
    'Transform',
    'DegenerateTransformError',
    'compose_matrix',
    'decompose_matrix',
    'invert_matrix',
    'Box',
    'BoxIntersection',
]

__version__ = '1.0.0'
