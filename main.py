#!/usr/bin/env python3
"""
Maze Level Generator - Command-Line Entry Point

Generates a maze, validates it and prints a summary plus the validation
report. Exits with 1 if validation fails or the settings are invalid.
"""

import argparse
import logging
import sys
from pathlib import Path


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Generate a procedural 3D maze")
    parser.add_argument("--seed", type=int, default=None, help="Random seed (default: random)")
    parser.add_argument("--max-cells", type=int, default=None,
                        help="Maximum number of attached cells")
    parser.add_argument("--max-retries", type=int, default=None,
                        help="Attempts per connector before it is sealed")
    parser.add_argument("--config", type=Path, default=None, help="JSON settings file")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    return parser


def main(argv=None) -> int:
    """Main application entry point."""
    # Ensure package imports work when executed as a script
    src_root = Path(__file__).resolve().parent / "src"
    if str(src_root) not in sys.path:
        sys.path.insert(0, str(src_root))

    from maze_levelgenerator.generators.maze import (
        MazeGenerator, MazeSettings, MazeSettingsError, load_settings,
    )
    from maze_levelgenerator.validation import validate_maze

    args = _build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger = logging.getLogger("maze_levelgenerator.main")

    try:
        settings = load_settings(args.config) if args.config else MazeSettings()
        if args.max_cells is not None:
            settings.max_accepted_cells = args.max_cells
        if args.max_retries is not None:
            settings.max_retries_per_connector = args.max_retries
        generator = MazeGenerator(settings=settings, seed=args.seed)
    except MazeSettingsError as e:
        logger.error("%s", e)
        return 1

    maze = generator.generate()

    print(f"Seed: {maze.seed}")
    for index, cell in enumerate(maze.children):
        position = ", ".join(f"{v:.2f}" for v in cell.transform.position)
        linked = sum(1 for part in cell.children if part.is_linked)
        print(f"  {index:3d} {cell.kind!s:<10} pos=({position}) links={linked}")

    result = validate_maze(maze)
    print(result.report())
    return 0 if result.passed else 1


if __name__ == "__main__":
    sys.exit(main())
