from __future__ import annotations

import copy
import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Tuple

from robozzle.core.robot import Direction, Robot
from robozzle.core.tiles import Grid, Tile, TileColor

logger = logging.getLogger(__name__)

HOLE = "X"
DEFAULT_FUNCTION_LIMITS = (5,)


class LevelParseError(ValueError):
    """A level file could not be read or one of its directives is malformed."""


class LevelDirectoryNotFoundError(FileNotFoundError):
    pass


class EmptyLevelDirectoryError(ValueError):
    pass


@dataclass(frozen=True)
class LevelDescriptor:
    id: int
    name: str
    width: int
    height: int
    tiles: Tuple[Optional[Tile], ...]
    robot_start: Tuple[int, int]
    robot_direction: Direction
    function_limits: Tuple[int, ...]

    @property
    def total_stars(self) -> int:
        return sum(1 for tile in self.tiles if tile is not None and tile.has_star)

    def build_grid(self) -> Grid:
        """Fresh, independently mutable grid for a play session."""
        return Grid(self.width, self.height, [copy.copy(tile) for tile in self.tiles])

    def build_robot(self) -> Robot:
        x, y = self.robot_start
        return Robot(x, y, self.robot_direction)


def _parse_int(token: str, directive: str, field_name: str) -> int:
    try:
        return int(token)
    except ValueError:
        raise LevelParseError(f"{directive}: invalid {field_name} {token!r}") from None


def _parse_cell(token: str, x: int, y: int) -> Optional[Tile]:
    if token == HOLE:
        return None
    return Tile(x, y, TileColor.from_code(token[0]), has_star="*" in token)


def parse_level(text: str, level_id: int = 0) -> LevelDescriptor:
    """Parse the line-oriented level format (LEVEL, SIZE, ROBOT, FUNCTIONS, GRID:)."""
    name = f"Problem {level_id + 1}"
    width = height = 0
    robot_start = (0, 0)
    robot_direction = Direction.NORTH
    function_limits: Tuple[int, ...] = DEFAULT_FUNCTION_LIMITS

    lines = text.splitlines()
    index = 0
    while index < len(lines):
        line = lines[index].strip()
        index += 1
        if not line or line.startswith("#"):
            continue
        keyword, _, rest = line.partition(" ")
        args = rest.split()
        if keyword == "LEVEL" and rest.strip():
            name = rest.strip()
        elif keyword == "SIZE" and len(args) == 2:
            width = _parse_int(args[0], "SIZE", "width")
            height = _parse_int(args[1], "SIZE", "height")
        elif keyword == "ROBOT" and len(args) == 3:
            robot_start = (
                _parse_int(args[0], "ROBOT", "x"),
                _parse_int(args[1], "ROBOT", "y"),
            )
            direction = Direction.parse(args[2])
            if direction is None:
                raise LevelParseError(f"ROBOT: invalid direction {args[2]!r}")
            robot_direction = direction
        elif keyword == "FUNCTIONS" and args:
            function_limits = tuple(_parse_int(arg, "FUNCTIONS", "capacity") for arg in args)
            for capacity in function_limits:
                if capacity < 0:
                    raise LevelParseError(f"FUNCTIONS: invalid capacity {capacity}")
        elif line == "GRID:":
            break
    if width < 0 or height < 0:
        raise LevelParseError(f"SIZE: negative dimensions {width}x{height}")

    tiles: List[Optional[Tile]] = []
    # Rows missing from the end of the file are simply not present.
    for y, row in enumerate(lines[index:index + height]):
        cells = row.split()
        for x in range(width):
            tiles.append(_parse_cell(cells[x] if x < len(cells) else HOLE, x, y))

    return LevelDescriptor(
        id=level_id,
        name=name,
        width=width,
        height=height,
        tiles=tuple(tiles),
        robot_start=robot_start,
        robot_direction=robot_direction,
        function_limits=function_limits,
    )


def load_level_file(path: Path, level_id: int) -> LevelDescriptor:
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise LevelParseError(f"{path.name}: could not read file: {e}") from e
    try:
        return parse_level(text, level_id)
    except LevelParseError as e:
        raise LevelParseError(f"{path.name}: {e}") from e


def load_levels_from_directory(directory: Path) -> List[LevelDescriptor]:
    """Load every ``<n>.txt`` file in numeric order; ids follow that order."""
    directory = Path(directory)
    if not directory.is_dir():
        raise LevelDirectoryNotFoundError(f"Levels directory not found: {directory}")

    numbered = []
    for path in directory.glob("*.txt"):
        if re.fullmatch(r"\d+", path.stem):
            numbered.append((int(path.stem), path))
    numbered.sort()

    if not numbered:
        raise EmptyLevelDirectoryError(f"No level files (<n>.txt) found in {directory}")

    levels = []
    for level_id, (_, path) in enumerate(numbered):
        try:
            level = load_level_file(path, level_id)
        except LevelParseError:
            logger.error("Failed to load level file %s", path)
            raise
        logger.info("Loaded level %d (%s) from %s", level_id + 1, level.name, path)
        levels.append(level)

    logger.info("Loaded %d level(s) from %s", len(levels), directory)
    return levels
