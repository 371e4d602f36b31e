"""
Maze generation settings.

All tunables of the growth loop live here. Settings can be round-tripped
through JSON files for the command-line driver.
"""

from __future__ import annotations
import json
import logging
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

from ...geometry import even_range

logger = logging.getLogger(__name__)


class MazeSettingsError(ValueError):
    """Raised for invalid or unreadable settings."""


Size3 = Tuple[float, float, float]


@dataclass
class MazeSettings:
    # Growth limits
    max_accepted_cells: int = 4
    max_retries_per_connector: int = 10

    # Random footprint range (x, y, z)
    node_minimum_size: Size3 = (16.0, 16.0, 16.0)
    node_maximum_size: Size3 = (16.0, 16.0, 16.0)

    # Prototype kind gates
    round_chance: float = 0.2
    corridor_chance: float = 0.2
    challenge_chance: float = 0.1

    # Per-kind footprints
    challenge_size: float = 64.0
    corridor_depth: float = 8.0
    round_minimum_size: float = 16.0

    # Test mode: always use this prototype connector index (None = random)
    prototype_connector_index: Optional[int] = None

    def __post_init__(self):
        self.node_minimum_size = tuple(float(v) for v in self.node_minimum_size)
        self.node_maximum_size = tuple(float(v) for v in self.node_maximum_size)

    def validate(self) -> List[str]:
        """Return a list of human-readable problems (empty when valid)."""
        errors = []
        if self.max_accepted_cells < 0:
            errors.append("max_accepted_cells must be >= 0")
        if self.max_retries_per_connector < 1:
            errors.append("max_retries_per_connector must be >= 1")

        if len(self.node_minimum_size) != 3 or len(self.node_maximum_size) != 3:
            errors.append("Node sizes must have exactly 3 components")
        else:
            for axis, lo, hi in zip("xyz", self.node_minimum_size, self.node_maximum_size):
                if hi < lo:
                    errors.append(f"node_maximum_size.{axis} must be >= node_minimum_size.{axis}")
                    continue
                # Footprints are rounded to even sizes
                low, high = even_range(lo, hi)
                if low > high:
                    errors.append(f"node size range on {axis} contains no even size")
            # A side must fit a pillar pair, a connector and two wall stubs
            if self.node_minimum_size[0] < 8 or self.node_minimum_size[2] < 8:
                errors.append("node_minimum_size x and z must be at least 8")
            if self.node_minimum_size[1] <= 0:
                errors.append("node_minimum_size y must be positive")

        for name in ("round_chance", "corridor_chance", "challenge_chance"):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                errors.append(f"{name} must be between 0 and 1")

        if self.challenge_size < 8:
            errors.append("challenge_size must be at least 8")
        if self.corridor_depth < 8:
            errors.append("corridor_depth must be at least 8")
        # Octagon sides need room for a connector opening
        if self.round_minimum_size < 16:
            errors.append("round_minimum_size must be at least 16")

        if self.prototype_connector_index is not None and self.prototype_connector_index < 0:
            errors.append("prototype_connector_index must be >= 0")
        return errors

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["node_minimum_size"] = list(self.node_minimum_size)
        data["node_maximum_size"] = list(self.node_maximum_size)
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MazeSettings":
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise MazeSettingsError(f"Unknown settings: {', '.join(unknown)}")
        try:
            return cls(**data)
        except TypeError as e:
            raise MazeSettingsError(f"Malformed settings: {e}") from e


def load_settings(file_path: Union[str, Path]) -> MazeSettings:
    """
    Load settings from a JSON file.

    Raises:
        MazeSettingsError: If the file is missing, not JSON, or has unknown keys
    """
    file_path = Path(file_path)
    try:
        with open(file_path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise MazeSettingsError(f"Cannot read settings from {file_path}: {e}") from e

    if not isinstance(data, dict):
        raise MazeSettingsError(f"Settings file {file_path} must contain a JSON object")

    settings = MazeSettings.from_dict(data)
    logger.debug("Loaded settings from %s", file_path)
    return settings


def save_settings(settings: MazeSettings, file_path: Union[str, Path]) -> Path:
    """Write settings to a JSON file and return its path."""
    file_path = Path(file_path)
    with open(file_path, 'w', encoding='utf-8') as f:
        json.dump(settings.to_dict(), f, indent=2)
    return file_path
