from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple


class Direction(Enum):
    NORTH = "N"
    EAST = "E"
    SOUTH = "S"
    WEST = "W"

    def turn_left(self) -> "Direction":
        return _LEFT_OF[self]

    def turn_right(self) -> "Direction":
        return _RIGHT_OF[self]

    @property
    def offset(self) -> Tuple[int, int]:
        """Grid delta for one step; y grows downwards."""
        return _OFFSETS[self]

    @classmethod
    def parse(cls, text: str) -> Optional["Direction"]:
        """Accept a full name or its initial, case-insensitive."""
        token = text.strip().upper()
        for direction in cls:
            if token in (direction.name, direction.value):
                return direction
        return None


_RIGHT_OF = {
    Direction.NORTH: Direction.EAST,
    Direction.EAST: Direction.SOUTH,
    Direction.SOUTH: Direction.WEST,
    Direction.WEST: Direction.NORTH,
}
_LEFT_OF = {after: before for before, after in _RIGHT_OF.items()}
_OFFSETS = {
    Direction.NORTH: (0, -1),
    Direction.EAST: (1, 0),
    Direction.SOUTH: (0, 1),
    Direction.WEST: (-1, 0),
}


@dataclass
class Robot:
    x: int
    y: int
    direction: Direction = Direction.NORTH
    start_x: int = field(init=False)
    start_y: int = field(init=False)
    start_direction: Direction = field(init=False)

    def __post_init__(self) -> None:
        self.start_x = self.x
        self.start_y = self.y
        self.start_direction = self.direction

    @property
    def position(self) -> Tuple[int, int]:
        return (self.x, self.y)

    def ahead(self) -> Tuple[int, int]:
        """Cell the robot would reach by moving forward."""
        dx, dy = self.direction.offset
        return (self.x + dx, self.y + dy)

    def move_to(self, x: int, y: int) -> None:
        self.x = x
        self.y = y

    def turn_left(self) -> None:
        self.direction = self.direction.turn_left()

    def turn_right(self) -> None:
        self.direction = self.direction.turn_right()

    def reset_to_start(self) -> None:
        self.x = self.start_x
        self.y = self.start_y
        self.direction = self.start_direction
