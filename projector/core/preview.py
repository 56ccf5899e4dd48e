"""Ghost preview: which tokens a renderer should draw, and rune cycling."""

from __future__ import annotations

from projector.core.projection import ProjectedBlock, Projection
from projector.core.world import World
from projector.models import BlockPos, ContentToken


class PreviewCycler:
    """
    Advances a display index once per interval.

    Timestamps are caller-supplied milliseconds, so the cycler can be driven
    by a render loop or a test without touching the clock.
    """

    def __init__(self, interval_ms: int = 1000) -> None:
        self.interval_ms = interval_ms
        self.index = 0
        self._last: int | None = None

    def tick(self, now_ms: int) -> int:
        if self._last is None:
            self._last = now_ms
        elif now_ms - self._last >= self.interval_ms:
            self.index += 1
            self._last = now_ms
        return self.index

    def reset(self) -> None:
        self.index = 0
        self._last = None


def ghost_token(projection: Projection, block: ProjectedBlock, cycle_index: int) -> ContentToken:
    if block.slot is not None and block.slot.acceptable:
        return projection.transform.apply_token(block.slot.token_at(cycle_index))
    return block.token


def ghost_blocks(
    projection: Projection, world: World, cycle_index: int = 0,
) -> list[tuple[BlockPos, ContentToken]]:
    """Cells still to draw as ghosts; occupied cells are left to the world."""
    ghosts: list[tuple[BlockPos, ContentToken]] = []

    def collect(block: ProjectedBlock) -> bool:
        shown = ghost_token(projection, block, cycle_index)
        if shown.is_empty or not world.is_empty(block.world):
            return False
        ghosts.append((block.world, shown))
        return False

    projection.process_all(collect)
    return ghosts
