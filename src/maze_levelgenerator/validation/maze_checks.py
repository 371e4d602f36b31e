"""
Structural checks for generated mazes.

Validates:
- MAZE-001: Unlinked top-level cells do not overlap
- MAZE-002: No connector is left open without a link
- MAZE-003: Links are recorded on both sides
- MAZE-004: Exactly one ROOT cell
- MAZE-005: Linked connectors face each other
"""

import logging
from typing import List, Optional

import numpy as np

from ..generators.maze import Maze, MazeNode, MazeNodeKind
from ..geometry import Box
from .core import ValidationError, ValidationResult
from .rules import MAZE_001, MAZE_002, MAZE_003, MAZE_004, MAZE_005

logger = logging.getLogger(__name__)


# Linked connectors are exact opposites; allow float noise
FACING_TOLERANCE = 1e-3


def _describe(maze: Maze, cell: MazeNode) -> str:
    for index, other in enumerate(maze.children):
        if other is cell:
            return f"{cell.kind}#{index}"
    return f"{cell.kind}#?"


def _linked_connectors(cell: MazeNode) -> List[MazeNode]:
    return [part for part in cell.filter([MazeNodeKind.TRANSPARENT]) if part.state.link is not None]


def _back_connector(cell: MazeNode, target: MazeNode) -> Optional[MazeNode]:
    """Connector on `target` that links back to `cell`."""
    for part in _linked_connectors(target):
        if part.state.link is cell:
            return part
    return None


def _are_linked(a: MazeNode, b: MazeNode) -> bool:
    return (any(p.state.link is b for p in _linked_connectors(a)) or
            any(p.state.link is a for p in _linked_connectors(b)))


def check_overlaps(maze: Maze) -> ValidationResult:
    result = ValidationResult()
    cells = list(maze.children)
    boxes = [cell.box for cell in cells]

    for i in range(len(cells)):
        for j in range(i + 1, len(cells)):
            # Linked neighbours share a face
            if _are_linked(cells[i], cells[j]):
                continue
            if Box.intersects(boxes[i], boxes[j]):
                a, b = _describe(maze, cells[i]), _describe(maze, cells[j])
                result.add_issue(MAZE_001.issue(cell=a, a=a, b=b))
    return result


def check_connectors(maze: Maze) -> ValidationResult:
    result = ValidationResult()

    for cell in maze.children:
        name = _describe(maze, cell)
        for index, part in enumerate(cell.filter([MazeNodeKind.TRANSPARENT])):
            connector = f"{name}/{index}"
            target = part.state.link
            if target is None:
                result.add_issue(MAZE_002.issue(cell=name, connector=connector))
                continue

            back = _back_connector(cell, target)
            if back is None:
                result.add_issue(MAZE_003.issue(cell=name, connector=connector,
                                                target=_describe(maze, target)))
                continue

            dot = float(np.dot(part.world_transform.rotation.direction,
                               back.world_transform.rotation.direction))
            if dot > -1.0 + FACING_TOLERANCE:
                result.add_issue(MAZE_005.issue(cell=name, connector=connector, a=name,
                                                b=_describe(maze, target), dot=dot))
    return result


def check_root(maze: Maze) -> ValidationResult:
    result = ValidationResult()
    count = len(maze.filter([MazeNodeKind.ROOT]))
    if count != 1:
        result.add_issue(MAZE_004.issue(count=count))
    return result


def validate_maze(maze: Maze, fail_fast: bool = False) -> ValidationResult:
    """
    Run all structural checks on a generated maze.

    Args:
        maze: Maze returned by MazeGenerator.generate()
        fail_fast: Raise ValidationError if any FAIL issue is found

    Returns:
        ValidationResult with all issues

    Raises:
        ValidationError: If fail_fast is True and validation failed
    """
    result = ValidationResult()
    for check in (check_root, check_overlaps, check_connectors):
        result.merge(check(maze))

    for issue in result.issues:
        logger.warning("Validation: %s: %s", issue.code, issue.message)

    if fail_fast and result.failed:
        raise ValidationError(result)
    return result
