"""World access: the host environment the projector reads from and writes to."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable, Iterator
from typing import Any

from projector.models import AIR, BlockPos, ContentToken


class World(ABC):
    """
    Abstract host world.

    Reads never raise: anything unreadable (out of bounds, unloaded) is
    reported as AIR. Writes return False when the host rejects them.
    """

    @abstractmethod
    def get_block(self, pos: BlockPos) -> ContentToken:
        ...

    @abstractmethod
    def set_block(
        self, pos: BlockPos, token: ContentToken, nbt: dict[str, Any] | None = None,
    ) -> bool:
        ...

    def in_bounds(self, pos: BlockPos) -> bool:
        return True

    def is_empty(self, pos: BlockPos) -> bool:
        return self.get_block(pos).is_empty


class InMemoryWorld(World):
    """Dictionary-backed world with vertical limits and a square border."""

    def __init__(
        self,
        min_y: int = -64,
        max_y: int = 319,
        border: int = 29_999_984,
        blocks: Iterable[tuple[BlockPos, ContentToken]] = (),
    ) -> None:
        self.min_y = min_y
        self.max_y = max_y
        self.border = border
        self._blocks: dict[BlockPos, ContentToken] = {}
        self._nbt: dict[BlockPos, dict[str, Any]] = {}
        self._protected: set[BlockPos] = set()
        for pos, token in blocks:
            self.set_block(pos, token)

    def in_bounds(self, pos: BlockPos) -> bool:
        return (
            self.min_y <= pos.y <= self.max_y
            and abs(pos.x) <= self.border
            and abs(pos.z) <= self.border
        )

    def protect(self, pos: BlockPos) -> None:
        """Reject future writes at `pos`, like a claimed or spawn-protected cell."""
        self._protected.add(pos)

    def get_block(self, pos: BlockPos) -> ContentToken:
        if not self.in_bounds(pos):
            return AIR
        return self._blocks.get(pos, AIR)

    def get_nbt(self, pos: BlockPos) -> dict[str, Any] | None:
        return self._nbt.get(pos)

    def set_block(
        self, pos: BlockPos, token: ContentToken, nbt: dict[str, Any] | None = None,
    ) -> bool:
        if not self.in_bounds(pos) or pos in self._protected:
            return False
        if token.is_empty:
            self._blocks.pop(pos, None)
            self._nbt.pop(pos, None)
            return True
        self._blocks[pos] = token
        if nbt is not None:
            self._nbt[pos] = dict(nbt)
        else:
            self._nbt.pop(pos, None)
        return True

    def items(self) -> Iterator[tuple[BlockPos, ContentToken]]:
        return iter(list(self._blocks.items()))

    def __len__(self) -> int:
        return len(self._blocks)
