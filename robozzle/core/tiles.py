from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, List, Optional


class TileColor(Enum):
    GRAY = "gray"
    RED = "red"
    GREEN = "green"
    BLUE = "blue"

    @classmethod
    def from_code(cls, code: str) -> "TileColor":
        """Map a grid cell colour code (R/G/B) to a colour; anything else is gray."""
        return {"R": cls.RED, "G": cls.GREEN, "B": cls.BLUE}.get(code, cls.GRAY)


@dataclass
class Tile:
    x: int
    y: int
    color: TileColor = TileColor.GRAY
    has_star: bool = False
    star_collected: bool = False

    def collect_star(self) -> bool:
        """Mark the star collected. Returns True only on the first collection."""
        if not self.has_star or self.star_collected:
            return False
        self.star_collected = True
        return True


@dataclass
class Grid:
    """Rectangular board of optional tiles stored row-major."""

    width: int
    height: int
    tiles: List[Optional[Tile]] = field(default_factory=list)

    def _index(self, x: int, y: int) -> Optional[int]:
        if not self.is_in_bounds(x, y):
            return None
        index = y * self.width + x
        if index >= len(self.tiles):
            return None
        return index

    def is_in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def tile_at(self, x: int, y: int) -> Optional[Tile]:
        index = self._index(x, y)
        if index is None:
            return None
        return self.tiles[index]

    # Tiles are mutable objects, so the mutable accessor hands out the same one.
    tile_at_mut = tile_at

    def is_valid_position(self, x: int, y: int) -> bool:
        return self.tile_at(x, y) is not None

    def set_tile(self, x: int, y: int, tile: Optional[Tile]) -> None:
        index = self._index(x, y)
        if index is not None:
            self.tiles[index] = tile

    def present_tiles(self) -> Iterator[Tile]:
        return (tile for tile in self.tiles if tile is not None)

    def collected_stars(self) -> int:
        return sum(1 for tile in self.present_tiles() if tile.has_star and tile.star_collected)

    def reset_stars(self, collected: bool = False) -> None:
        """Set every star to ``collected``; star-less tiles always stay uncollected."""
        for tile in self.present_tiles():
            tile.star_collected = collected and tile.has_star
