"""
Procedural 3D maze level generator.

Grows a tree of connected cells from a seeded random source, using
oriented bounding boxes to keep cells from overlapping.
"""

from .generators.maze import (
    Maze,
    MazeGenerator,
    MazeNode,
    MazeNodeKind,
    MazeSettings,
    MazeSettingsError,
    UnknownNodeKindError,
    generate_maze,
)
from .geometry import Box, DegenerateTransformError, Quaternion, Transform
from .validation import ValidationError, validate_maze

__all__ = [
    'Maze',
    'MazeGenerator',
    'MazeNode',
    'MazeNodeKind',
    'MazeSettings',
    'MazeSettingsError',
    'UnknownNodeKindError',
    'generate_maze',
    'Box',
    'DegenerateTransformError',
    'Quaternion',
    'Transform',
    'ValidationError',
    'validate_maze',
]

__version__ = '1.0.0'
