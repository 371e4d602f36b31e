"""
Maze Generation Module

Grows a tree of connected cells (rooms, corridors, challenges, rounds)
by attaching random prototypes to open connectors and rejecting any
placement whose box collides with an already placed cell.
"""

from .maze_node import MazeNode, MazeNodeKind, ConnectorState, GENERATABLE_KINDS
from .layout_rules import (
    UnknownNodeKindError,
    generate_cell,
    populate_dynamic_node,
    populate_round_node,
    add_base,
    BASE_SIZE,
    SOLID_SIZE,
    SOLID_BORDER_SIZE,
    TRANSPARENT_SIZE,
)
from .settings import MazeSettings, MazeSettingsError, load_settings, save_settings
from .maze_generator import (
    Maze,
    MazeGenerator,
    GenerationStats,
    PlacementRejected,
    generate_maze,
)

__all__ = [
    'MazeNode',
    'MazeNodeKind',
    'ConnectorState',
    'GENERATABLE_KINDS',
    'UnknownNodeKindError',
    'generate_cell',
    'populate_dynamic_node',
    'populate_round_node',
    'add_base',
    'BASE_SIZE',
    'SOLID_SIZE',
    'SOLID_BORDER_SIZE',
    'TRANSPARENT_SIZE',
    'MazeSettings',
    'MazeSettingsError',
    'load_settings',
    'save_settings',
    'Maze',
    'MazeGenerator',
    'GenerationStats',
    'PlacementRejected',
    'generate_maze',
]

__version__ = '1.0.0'
