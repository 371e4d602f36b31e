"""
Maze node tree.

A maze is a tree of MazeNode objects. The top-level cells (root, rooms,
corridors, challenges, rounds) are children of the Maze node; their
children are the structural parts emitted by the layout rules (walls,
floors, connectors).

Each node's transform is local to its parent. World placement is the
product of ancestor model matrices and is recomputed on every access.

Connector bookkeeping lives in ConnectorState. `link` is a non-owning
reference to the cell on the other side of a connection; ownership stays
with the parent's `children` list.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Optional

import numpy as np

from ...geometry import Box, Quaternion, Transform


class MazeNodeKind(Enum):
    """Kinds of maze nodes"""
    BASE = "base"                # Support slab under a floor
    CHALLENGE = "challenge"      # Large square cell
    CONCRETE = "concrete"        # Floor slab
    CORRIDOR = "corridor"        # Long narrow cell
    MAZE = "maze"                # Tree root marker
    NONE = "none"                # Static blocker, never part of the output
    ROOM = "room"
    ROOT = "root"                # First generated cell
    ROUND = "round"              # N-sided polygon cell
    SHADOW = "shadow"
    SOLID = "solid"              # Wall segment or sealed connector
    TRANSPARENT = "transparent"  # Open connector
    WEDGE = "wedge"              # Bevelled inner floor of a round cell

    def __str__(self) -> str:
        return self.value


# Kinds the layout rules know how to populate
GENERATABLE_KINDS = frozenset({
    MazeNodeKind.CHALLENGE,
    MazeNodeKind.CORRIDOR,
    MazeNodeKind.ROOM,
    MazeNodeKind.ROOT,
    MazeNodeKind.ROUND,
})


@dataclass
class ConnectorState:
    """Growth bookkeeping carried by every node (only used on connectors).

    Attributes:
        is_available: False once linked or sealed
        retry_count: Number of times the connector was picked for an attempt
        link: Cell on the other side of the connection (non-owning)
    """
    is_available: bool = True
    retry_count: int = 0
    link: Optional['MazeNode'] = None


class MazeNode:
    """A node in the maze tree."""

    def __init__(self, parent: Optional['MazeNode'], kind: MazeNodeKind,
                 transform: Optional[Transform] = None):
        self.parent = parent
        self._kind = kind
        self.transform = transform if transform is not None else Transform.identity()
        self.children: List['MazeNode'] = []
        self.state = ConnectorState()

    def __repr__(self) -> str:
        return (
            f"MazeNode(kind={self._kind}, position={self.transform.position.tolist()}, "
            f"children={len(self.children)})"
        )

    @property
    def kind(self) -> MazeNodeKind:
        return self._kind

    def change_kind(self, kind: MazeNodeKind) -> None:
        self._kind = kind

    @property
    def world(self) -> np.ndarray:
        """World model matrix (parent.world @ model, or model at the root)."""
        if self.parent is None:
            return self.transform.model
        return self.parent.world @ self.transform.model

    @property
    def world_transform(self) -> Transform:
        return Transform.from_matrix(self.world)

    @property
    def box(self) -> Box:
        return Box.from_transform(self.world_transform)

    @property
    def is_linked(self) -> bool:
        return self.state.link is not None

    def intersects(self, other: 'MazeNode') -> bool:
        """SAT test between the world boxes of two nodes."""
        return Box.intersects(self.box, other.box)

    def create_node(self, kind: MazeNodeKind, position: np.ndarray, rotation: Quaternion,
                    scale: np.ndarray, world: bool = True) -> 'MazeNode':
        """Create a child node without attaching it.

        With world=True the given transform is expressed in this node's
        parent frame and is converted to be local to this node.
        """
        transform = Transform(position, rotation, scale)
        if world:
            transform = transform.local(self.transform)
        return MazeNode(self, kind, transform)

    def add_node(self, kind: MazeNodeKind, position: np.ndarray, rotation: Quaternion,
                 scale: np.ndarray, world: bool = True) -> 'MazeNode':
        node = self.create_node(kind, position, rotation, scale, world)
        self.children.append(node)
        return node

    def filter(self, kinds: Iterable[MazeNodeKind]) -> List['MazeNode']:
        """Direct children whose kind is in `kinds`."""
        kinds = set(kinds)
        return [child for child in self.children if child.kind in kinds]

    def available_connectors(self) -> List['MazeNode']:
        """Transparent children still open for linking."""
        return [
            child for child in self.children
            if child.kind == MazeNodeKind.TRANSPARENT and child.state.is_available
        ]
