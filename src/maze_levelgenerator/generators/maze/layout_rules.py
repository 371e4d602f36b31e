"""
Perimeter layout rules for generatable maze cells.

Every generatable cell gets a floor slab (plus a support slab filling the
gap down to the bottom of the cell) and one wall run per side. A side is
either SOLID (one full-length wall) or TRANSPARENT (two wall stubs of
random length around a fixed-size connector opening).

Cardinal cells (root, room, corridor, challenge) have four sides at
-90 degree steps. Round cells are N-sided polygons whose side length is
the chord between consecutive corner directions.

All sub-parts are computed in the cell's parent frame and stored local to
the cell (MazeNode.add_node with world=True).
"""

import logging
import random
from typing import Optional, Sequence, Union

import numpy as np

from ...geometry import Quaternion, Transform, UP, length, normalize, round_half_up, vec3
from .maze_node import GENERATABLE_KINDS, MazeNode, MazeNodeKind

logger = logging.getLogger(__name__)


# =============================================================================
# STRUCTURAL SIZES (x=length, y=height, z=depth)
# =============================================================================

BASE_SIZE = vec3(1.0, 1.0, 1.0)
SOLID_SIZE = vec3(1.0, 4.0, 1.0)
SOLID_BORDER_SIZE = vec3(1.0, 1.0, 1.0)
TRANSPARENT_SIZE = vec3(4.0, 4.0, 1.0)

ROUND_MINIMUM_SIDES = 3
ROUND_MAXIMUM_SIDES = 8

# Centre heights of walls and connectors above the floor slab
WALL_HEIGHT = 0.5 * BASE_SIZE[2] + 0.5 * SOLID_SIZE[1]
CONNECTOR_HEIGHT = 0.5 * BASE_SIZE[2] + 0.5 * TRANSPARENT_SIZE[1]

# Default side kinds per cardinal cell kind, in side order (-90 degree steps)
DEFAULT_SIDE_KINDS = {
    MazeNodeKind.ROOT: (MazeNodeKind.TRANSPARENT,) * 4,
    MazeNodeKind.ROOM: (MazeNodeKind.TRANSPARENT,) * 4,
    MazeNodeKind.CORRIDOR: (
        MazeNodeKind.SOLID, MazeNodeKind.TRANSPARENT,
        MazeNodeKind.SOLID, MazeNodeKind.TRANSPARENT,
    ),
    MazeNodeKind.CHALLENGE: (
        MazeNodeKind.SOLID, MazeNodeKind.TRANSPARENT,
        MazeNodeKind.SOLID, MazeNodeKind.TRANSPARENT,
    ),
}

_SIDE_KINDS = (MazeNodeKind.SOLID, MazeNodeKind.TRANSPARENT)
_QUARTER_TURN = Quaternion.from_degrees(0, 90, 0)
_FLOOR_FLIP = Quaternion.from_degrees(-180, 0, 0)


class UnknownNodeKindError(ValueError):
    """Raised when a kind without a layout rule is passed to generate_cell()."""

    def __init__(self, kind):
        self.kind = kind
        super().__init__(f"Unknown node kind: {kind}")


def _resolve_kind(kind: Union[MazeNodeKind, str]) -> MazeNodeKind:
    if not isinstance(kind, MazeNodeKind):
        try:
            kind = MazeNodeKind(kind)
        except ValueError:
            raise UnknownNodeKindError(kind) from None
    if kind not in GENERATABLE_KINDS:
        raise UnknownNodeKindError(kind)
    return kind


def _check_side_kinds(side_kinds: Sequence[MazeNodeKind], count: Optional[int] = None,
                      minimum: Optional[int] = None) -> None:
    if count is not None and len(side_kinds) != count:
        raise ValueError(f"Expected {count} side kinds, got {len(side_kinds)}")
    if minimum is not None and len(side_kinds) < minimum:
        raise ValueError(f"Expected at least {minimum} side kinds, got {len(side_kinds)}")
    for kind in side_kinds:
        if kind not in _SIDE_KINDS:
            raise ValueError(f"Side kind must be SOLID or TRANSPARENT, got {kind}")


def generate_cell(parent: Optional[MazeNode], kind: Union[MazeNodeKind, str],
                  transform: Transform, rng: random.Random,
                  side_kinds: Optional[Sequence[MazeNodeKind]] = None) -> MazeNode:
    """
    Create a generatable cell and lay out its perimeter.

    Args:
        parent: Node the cell is expressed relative to (normally the Maze)
        kind: ROOT, ROOM, CORRIDOR, CHALLENGE or ROUND
        transform: Cell transform; scale is the footprint
        rng: Random source for wall splits and round side count
        side_kinds: Optional explicit per-side kinds (overrides the defaults,
            and for ROUND also fixes the number of sides)

    Returns:
        The populated, unattached cell

    Raises:
        UnknownNodeKindError: If kind has no layout rule
        ValueError: If side_kinds is malformed for the kind
    """
    kind = _resolve_kind(kind)
    node = MazeNode(parent, kind, transform)

    if kind == MazeNodeKind.ROUND:
        if side_kinds is None:
            sides = rng.randint(ROUND_MINIMUM_SIDES, ROUND_MAXIMUM_SIDES)
            side_kinds = [MazeNodeKind.TRANSPARENT] * sides
        populate_round_node(node, side_kinds, rng)
    else:
        if side_kinds is None:
            side_kinds = DEFAULT_SIDE_KINDS[kind]
        populate_dynamic_node(node, side_kinds, rng)

    logger.debug("Generated %s cell: %d sides, %d parts, scale=%s",
                 kind, len(side_kinds), len(node.children), node.transform.scale.tolist())
    return node


def add_base(node: MazeNode, position: np.ndarray, rotation: Quaternion,
             scale: np.ndarray, wedged: bool) -> None:
    """Add a floor slab and, unless wedged, a support slab down to the cell bottom."""
    node.add_node(MazeNodeKind.WEDGE if wedged else MazeNodeKind.CONCRETE,
                  position, rotation, scale)

    size = 0.5 * node.transform.scale[1] - (node.transform.position[1] - position[1])
    if size > 0 and not wedged:
        support = position - vec3(0.0, 0.5 * scale[1] + 0.5 * size, 0.0)
        node.add_node(MazeNodeKind.BASE, support, rotation, vec3(scale[0], size, scale[2]))


def _add_side(node: MazeNode, kind: MazeNodeKind, rotation: Quaternion,
              distance: float, side_length: float, rng: random.Random) -> None:
    """Emit the wall run (and connector) of one side.

    `distance` is measured from the cell centre along the side's facing
    direction; `side_length` is the usable wall length.
    """
    direction = rotation.direction
    along = normalize(_QUARTER_TURN.rotate_vector(direction))
    up = node.transform.rotation.rotate_vector(UP)
    centre = node.transform.position + direction * distance

    if kind == MazeNodeKind.SOLID:
        node.add_node(MazeNodeKind.SOLID,
                      centre + up * CONNECTOR_HEIGHT, rotation,
                      vec3(side_length, SOLID_SIZE[1], SOLID_SIZE[2]))
        return

    opening = TRANSPARENT_SIZE[0]
    if side_length <= opening + 1.0:
        raise ValueError(f"Side length {side_length:g} leaves no room for a connector")

    # Split point in [1, half of the remaining wall]
    wl1 = float(round_half_up(rng.uniform(1.0, max(1.0, 0.5 * (side_length - opening)))))
    wl2 = side_length - opening - wl1

    node.add_node(MazeNodeKind.TRANSPARENT,
                  centre + up * CONNECTOR_HEIGHT + along * (-0.5 * side_length + wl1 + 0.5 * opening),
                  rotation, TRANSPARENT_SIZE)
    node.add_node(MazeNodeKind.SOLID,
                  centre + up * WALL_HEIGHT + along * (-0.5 * side_length + 0.5 * wl1),
                  rotation, vec3(wl1, SOLID_SIZE[1], SOLID_SIZE[2]))
    node.add_node(MazeNodeKind.SOLID,
                  centre + up * WALL_HEIGHT + along * (0.5 * side_length - 0.5 * wl2),
                  rotation, vec3(wl2, SOLID_SIZE[1], SOLID_SIZE[2]))


def populate_dynamic_node(node: MazeNode, side_kinds: Sequence[MazeNodeKind],
                          rng: random.Random) -> None:
    """Four-sided layout for root, room, corridor and challenge cells."""
    _check_side_kinds(side_kinds, count=4)
    t = node.transform

    add_base(node, t.position, t.rotation * _FLOOR_FLIP,
             vec3(t.scale[0], BASE_SIZE[1], t.scale[2]), wedged=False)

    up = t.rotation.rotate_vector(UP)
    for i, kind in enumerate(side_kinds):
        rotation = t.rotation * Quaternion.from_degrees(0, -90 * i, 0)

        # Odd sides face +/-X, even sides face +/-Z
        if i % 2:
            distance = 0.5 * t.scale[0] - 0.5 * TRANSPARENT_SIZE[2]
            side_length = t.scale[2] - 2 * SOLID_BORDER_SIZE[2]
        else:
            distance = 0.5 * t.scale[2] - 0.5 * TRANSPARENT_SIZE[2]
            side_length = t.scale[0] - 2 * SOLID_BORDER_SIZE[2]

        direction = rotation.direction
        along = normalize(_QUARTER_TURN.rotate_vector(direction))

        # Corner pillar at the start of the side
        pillar = (t.position + up * CONNECTOR_HEIGHT + direction * distance +
                  along * (-0.5 * side_length - 0.5 * SOLID_BORDER_SIZE[2]))
        node.add_node(MazeNodeKind.SOLID, pillar, rotation,
                      vec3(SOLID_BORDER_SIZE[0], SOLID_SIZE[1], SOLID_BORDER_SIZE[2]))

        _add_side(node, kind, rotation, distance, side_length, rng)


def populate_round_node(node: MazeNode, side_kinds: Sequence[MazeNodeKind],
                        rng: random.Random) -> None:
    """N-sided polygon layout; side i faces i * 360/N degrees around Y."""
    _check_side_kinds(side_kinds, minimum=ROUND_MINIMUM_SIDES)
    t = node.transform

    sides = len(side_kinds)
    step = 360.0 / sides
    radius = 0.5 * t.scale[2] - SOLID_SIZE[2]

    for i, kind in enumerate(side_kinds):
        angle = i * step
        rotation = t.rotation * Quaternion.from_degrees(0, angle, 0)

        # Polygon corners either side of this face
        prev_corner = (t.rotation * Quaternion.from_degrees(0, angle - 0.5 * step, 0)).direction * radius
        next_corner = (t.rotation * Quaternion.from_degrees(0, angle + 0.5 * step, 0)).direction * radius

        chord = length(next_corner - prev_corner)
        inner_distance = length(prev_corner + normalize(next_corner - prev_corner) * (0.5 * chord))
        outer_distance = inner_distance + 0.5 * SOLID_SIZE[2]

        direction = rotation.direction
        add_base(node, t.position + direction * outer_distance, rotation,
                 vec3(chord, BASE_SIZE[1], SOLID_SIZE[2]), wedged=False)
        add_base(node, t.position + direction * (0.5 * inner_distance), rotation,
                 vec3(chord, BASE_SIZE[1], inner_distance), wedged=True)

        _add_side(node, kind, rotation, outer_distance, chord, rng)
