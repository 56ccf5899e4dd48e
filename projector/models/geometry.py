"""Grid primitives used throughout the projector."""

from __future__ import annotations
import math
from enum import Enum
from pydantic import BaseModel, ConfigDict, Field


class BlockPos(BaseModel):
    """Integer cell coordinate in a 3-D grid (Y is vertical)."""
    model_config = ConfigDict(frozen=True)

    x: int
    y: int
    z: int

    def offset(self, other: BlockPos) -> BlockPos:
        return BlockPos(x=self.x + other.x, y=self.y + other.y, z=self.z + other.z)

    def distance_to(self, other: BlockPos) -> float:
        return math.sqrt(
            (self.x - other.x) ** 2
            + (self.y - other.y) ** 2
            + (self.z - other.z) ** 2
        )

    def chebyshev_to(self, other: BlockPos) -> int:
        return max(abs(self.x - other.x), abs(self.y - other.y), abs(self.z - other.z))

    def as_tuple(self) -> tuple[int, int, int]:
        return (self.x, self.y, self.z)

    def __add__(self, other: BlockPos) -> BlockPos:
        return self.offset(other)

    def __sub__(self, other: BlockPos) -> BlockPos:
        return BlockPos(x=self.x - other.x, y=self.y - other.y, z=self.z - other.z)


ORIGIN = BlockPos(x=0, y=0, z=0)


def pos(x: int, y: int, z: int) -> BlockPos:
    """Shorthand constructor used heavily by the structure generators."""
    return BlockPos(x=x, y=y, z=z)


class Extent(BaseModel):
    """Size of a structure along each axis, in cells."""
    model_config = ConfigDict(frozen=True)

    x: int = Field(gt=0)
    y: int = Field(gt=0)
    z: int = Field(gt=0)

    @property
    def volume(self) -> int:
        return self.x * self.y * self.z

    def label(self) -> str:
        return f"{self.x}x{self.y}x{self.z}"


def extent(x: int, y: int, z: int) -> Extent:
    return Extent(x=x, y=y, z=z)


class Direction(str, Enum):
    NORTH = "north"
    SOUTH = "south"
    EAST = "east"
    WEST = "west"
    UP = "up"
    DOWN = "down"

    @property
    def vector(self) -> tuple[int, int, int]:
        return _DIRECTION_VECTORS[self]

    @property
    def is_horizontal(self) -> bool:
        return self not in (Direction.UP, Direction.DOWN)

    @classmethod
    def from_vector(cls, dx: int, dy: int, dz: int) -> Direction:
        for direction, vec in _DIRECTION_VECTORS.items():
            if vec == (dx, dy, dz):
                return direction
        raise ValueError(f"not a unit axis vector: {(dx, dy, dz)}")


_DIRECTION_VECTORS: dict[Direction, tuple[int, int, int]] = {
    Direction.NORTH: (0, 0, -1),
    Direction.SOUTH: (0, 0, 1),
    Direction.EAST: (1, 0, 0),
    Direction.WEST: (-1, 0, 0),
    Direction.UP: (0, 1, 0),
    Direction.DOWN: (0, -1, 0),
}


class Rotation(int, Enum):
    """Quarter-turn steps about the vertical axis."""
    NONE = 0
    QUARTER = 1
    HALF = 2
    THREE_QUARTER = 3

    @property
    def degrees(self) -> int:
        return self.value * 90

    def rotated(self, steps: int) -> Rotation:
        return Rotation((self.value + steps) % 4)
