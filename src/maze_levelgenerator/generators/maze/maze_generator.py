"""
Breadth-first maze growth.

The generator seeds a ROOT cell at the origin and then repeatedly:

1. pops the front cell of a FIFO queue,
2. picks one of its open connectors at random and re-queues the cell,
3. builds a random prototype cell at the origin,
4. turns and moves the prototype so one of its connectors faces the
   picked connector, one connector depth further out,
5. accepts the prototype if its box hits no other placed cell (the cell
   being grown from is ignored, it shares a face with the prototype).

A connector that keeps failing is sealed into a solid wall after
`max_retries_per_connector` attempts. When growth stops, every
connector that never got linked is sealed as well, so the finished maze
has no open connectors.
"""

import logging
import random
from collections import deque
from dataclasses import dataclass
from itertools import chain
from typing import Iterable, List, Optional, Tuple

import numpy as np

from ...geometry import Box, Quaternion, Transform, even, even_range, vec3
from .layout_rules import TRANSPARENT_SIZE, generate_cell
from .maze_node import MazeNode, MazeNodeKind
from .settings import MazeSettings, MazeSettingsError

logger = logging.getLogger(__name__)


_HALF_TURN = Quaternion.from_degrees(0, 180, 0)


class PlacementRejected(Exception):
    """A prototype could not be attached; handled by the growth loop.

    Attributes:
        blocker: Node the prototype collided with, or None when the
            prototype had no connector to attach with
    """

    def __init__(self, message: str, blocker: Optional[MazeNode] = None):
        self.blocker = blocker
        super().__init__(message)


@dataclass
class GenerationStats:
    """Counters collected during one generate() call"""
    iterations: int = 0   # Queue pops
    accepted: int = 0     # Prototypes attached
    rejected: int = 0     # Prototypes that collided
    abandoned: int = 0    # Prototypes without an open connector
    sealed: int = 0       # Connectors converted to SOLID


class Maze(MazeNode):
    """Tree root; its children are the generated top-level cells."""

    def __init__(self, seed: Optional[int] = None, settings: Optional[MazeSettings] = None):
        super().__init__(None, MazeNodeKind.MAZE)
        self.seed = seed
        self.settings = settings
        self.stats = GenerationStats()

    @property
    def root(self) -> Optional[MazeNode]:
        for cell in self.children:
            if cell.kind == MazeNodeKind.ROOT:
                return cell
        return None

    def connectors(self) -> List[MazeNode]:
        """All TRANSPARENT parts of all cells (linked ones after generation)."""
        return [part for cell in self.children for part in cell.filter([MazeNodeKind.TRANSPARENT])]


class MazeGenerator:
    """
    Grows a maze from a seeded random source.

    Args:
        settings: Generation settings (defaults when None)
        seed: Seed for a private random.Random (drawn when None)
        rng: Explicit random source; takes precedence over seed

    Raises:
        MazeSettingsError: If settings are invalid
    """

    def __init__(self, settings: Optional[MazeSettings] = None, seed: Optional[int] = None,
                 rng: Optional[random.Random] = None):
        self.settings = settings if settings is not None else MazeSettings()
        self._validate_settings()

        if rng is None:
            if seed is None:
                seed = random.randint(0, 2**31 - 1)
            rng = random.Random(seed)
        self.seed = seed
        self.rng = rng

    def _validate_settings(self):
        errors = self.settings.validate()
        if errors:
            raise MazeSettingsError(f"Invalid settings: {'; '.join(errors)}")

    # -- sizes --

    def _even_in_range(self, value: float, axis: int) -> float:
        """Round to even, kept inside the even sizes of [minimum, maximum]."""
        low, high = even_range(self.settings.node_minimum_size[axis],
                               self.settings.node_maximum_size[axis])
        return min(max(even(value), low), high)

    def random_size(self) -> np.ndarray:
        """Even footprint drawn per axis from [minimum, maximum]."""
        lo, hi = self.settings.node_minimum_size, self.settings.node_maximum_size
        return vec3(*(self._even_in_range(self.rng.uniform(lo[i], hi[i]), i) for i in range(3)))

    def average_size(self) -> np.ndarray:
        """Root footprint: maximum size, doubled on x and z."""
        hi = self.settings.node_maximum_size
        size = vec3(*(self._even_in_range(self.rng.uniform(hi[i], hi[i]), i) for i in range(3)))
        return size * vec3(2.0, 1.0, 2.0)

    def prototype_size(self, kind: MazeNodeKind, size: np.ndarray) -> np.ndarray:
        s = self.settings
        if kind == MazeNodeKind.CHALLENGE:
            return vec3(s.challenge_size, size[1], s.challenge_size)
        if kind == MazeNodeKind.ROUND:
            diameter = max(size[0], s.round_minimum_size)
            return vec3(diameter, size[1], diameter)
        if kind == MazeNodeKind.CORRIDOR:
            return vec3(size[0], size[1], s.corridor_depth)
        return size

    def select_prototype_kind(self, parent_kind: MazeNodeKind) -> MazeNodeKind:
        """
        Roll the kind gates for a new prototype.

        All three gates are always drawn. ROUND is excluded under a ROUND
        parent; CORRIDOR and CHALLENGE are excluded under a CORRIDOR
        parent. The corridor roll only applies when the round roll
        failed; a challenge roll replaces ROUND or ROOM, never CORRIDOR.
        """
        s = self.settings
        round_gate = self.rng.random() < s.round_chance and parent_kind != MazeNodeKind.ROUND
        corridor_gate = self.rng.random() < s.corridor_chance and parent_kind != MazeNodeKind.CORRIDOR
        challenge_gate = self.rng.random() < s.challenge_chance and parent_kind != MazeNodeKind.CORRIDOR

        kind = MazeNodeKind.ROUND if round_gate else MazeNodeKind.ROOM
        if corridor_gate and kind == MazeNodeKind.ROOM:
            return MazeNodeKind.CORRIDOR
        if challenge_gate:
            return MazeNodeKind.CHALLENGE
        return kind

    def build_prototype(self, maze: Maze, parent_kind: MazeNodeKind) -> MazeNode:
        """Generate a detached, fully laid-out trial cell at the origin."""
        size = self.random_size()
        kind = self.select_prototype_kind(parent_kind)
        transform = Transform(vec3(), Quaternion.identity(), self.prototype_size(kind, size))
        return generate_cell(maze, kind, transform, self.rng)

    # -- placement --

    @staticmethod
    def align(prototype: MazeNode, connector: MazeNode, target: MazeNode) -> None:
        """
        Move `prototype` so `target` (one of its connectors) faces `connector`.

        The prototype is turned by the connector rotation plus a half turn,
        less the target's own rotation, and shifted so the target lands one
        connector depth outward from `connector`. Scale is kept.
        """
        tr = connector.world_transform
        av = target.world_transform
        pr = prototype.world_transform

        rotation = (tr.rotation * _HALF_TURN * av.rotation.inverse() * pr.rotation).normalized()
        offset = (rotation * pr.rotation.inverse()).rotate_vector(av.position - pr.position)
        position = tr.position + tr.rotation.direction * TRANSPARENT_SIZE[2] - offset

        prototype.transform.replace(Transform(position, rotation, prototype.transform.scale))

    def _pick_target(self, prototype: MazeNode) -> MazeNode:
        availables = prototype.available_connectors()
        if not availables:
            raise PlacementRejected(f"{prototype.kind} prototype has no available connector")
        index = self.settings.prototype_connector_index
        if index is not None:
            return availables[index % len(availables)]
        return self.rng.choice(availables)

    def attach(self, node: MazeNode, connector: MazeNode, prototype: MazeNode,
               placed: Iterable[Tuple[MazeNode, Box]]) -> Box:
        """
        Align `prototype` to `connector` and test it against `placed`.

        Links both connectors on success and returns the prototype's box.

        Raises:
            PlacementRejected: On collision with any placed node except `node`,
                or if the prototype has no connector to attach with
        """
        target = self._pick_target(prototype)
        self.align(prototype, connector, target)

        box = prototype.box
        for other, other_box in placed:
            if other is node:
                continue
            if Box.intersects(box, other_box):
                raise PlacementRejected(f"{prototype.kind} prototype intersects {other.kind}", other)

        connector.state.is_available = False
        connector.state.link = prototype
        target.state.is_available = False
        target.state.link = node
        return box

    @staticmethod
    def seal(connector: MazeNode) -> None:
        connector.change_kind(MazeNodeKind.SOLID)
        connector.state.is_available = False

    # -- main loop --

    def generate(self, obstacles: Iterable[Transform] = ()) -> Maze:
        """
        Grow a maze.

        Args:
            obstacles: World transforms of static blocker boxes; prototypes
                must not hit them. They are not part of the result.

        Returns:
            Maze whose children are the generated cells
        """
        s = self.settings
        maze = Maze(seed=self.seed, settings=s)
        stats = maze.stats

        root = generate_cell(maze, MazeNodeKind.ROOT,
                             Transform(vec3(), Quaternion.identity(), self.average_size()), self.rng)

        blockers = []
        for transform in obstacles:
            blocker = MazeNode(maze, MazeNodeKind.NONE, transform.copy())
            blockers.append((blocker, blocker.box))

        # Placed cells never move, so their boxes are computed once
        boxes = {id(root): root.box}
        queue = deque([root])
        finalized: List[MazeNode] = []

        while queue and stats.accepted < s.max_accepted_cells:
            stats.iterations += 1
            node = queue.popleft()

            connectors = node.available_connectors()
            if not connectors:
                finalized.append(node)
                logger.debug("%s cell finished growing", node.kind)
                continue

            connector = self.rng.choice(connectors)
            connector.state.retry_count += 1
            queue.append(node)

            prototype = self.build_prototype(maze, node.kind)
            placed = [(cell, boxes[id(cell)]) for cell in chain(finalized, queue)]
            placed.extend(blockers)

            try:
                box = self.attach(node, connector, prototype, placed)
            except PlacementRejected as e:
                if e.blocker is None:
                    stats.abandoned += 1
                else:
                    stats.rejected += 1
                logger.debug("Placement rejected (attempt %d): %s",
                             connector.state.retry_count, e)

                if connector.state.retry_count >= s.max_retries_per_connector:
                    self.seal(connector)
                    stats.sealed += 1
                    logger.debug("Sealed connector of %s cell after %d attempts",
                                 node.kind, connector.state.retry_count)
                continue

            boxes[id(prototype)] = box
            queue.append(prototype)
            stats.accepted += 1
            logger.debug("Attached %s cell to %s cell (%d/%d)",
                         prototype.kind, node.kind, stats.accepted, s.max_accepted_cells)

        maze.children.extend(finalized)
        maze.children.extend(queue)

        for cell in maze.children:
            for part in cell.children:
                if part.kind == MazeNodeKind.TRANSPARENT and part.state.link is None:
                    self.seal(part)
                    stats.sealed += 1

        logger.info(
            "Maze generated: seed=%s cells=%d accepted=%d rejected=%d abandoned=%d "
            "sealed=%d iterations=%d",
            self.seed, len(maze.children), stats.accepted, stats.rejected,
            stats.abandoned, stats.sealed, stats.iterations,
        )
        return maze


def generate_maze(seed: Optional[int] = None, settings: Optional[MazeSettings] = None,
                  obstacles: Iterable[Transform] = ()) -> Maze:
    """Generate a maze in one call. See MazeGenerator."""
    return MazeGenerator(settings=settings, seed=seed).generate(obstacles)
