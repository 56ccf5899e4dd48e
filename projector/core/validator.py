"""
Validator / completion engine.

Compares a projection against live world content. Per-instance state (the
set of incorrect cells from the previous pass) is keyed by the instance's
world origin and always recomputed in full, so one lock around the state
map is all the synchronisation needed.
"""

from __future__ import annotations

import threading
from enum import Enum

from pydantic import BaseModel, ConfigDict

from projector.core.projection import ProjectedBlock, Projection
from projector.core.world import World
from projector.models import AIR, DIRECTION_INSENSITIVE, BlockPos, ContentToken, CyclingSlot
from projector.utils.logger import get_logger

log = get_logger(__name__)


def blocks_match(actual: ContentToken, expected: ContentToken) -> bool:
    """Exact match, except direction-insensitive categories ignore orientation."""
    if not actual.same_base(expected):
        return False
    if expected.category in DIRECTION_INSENSITIVE:
        return True
    return actual == expected


def matches_cycling(actual: ContentToken, slot: CyclingSlot | None) -> bool:
    """Any acceptable token with the same base identity matches."""
    if slot is None or not slot.acceptable:
        return False
    return slot.accepts(actual)


def matches(actual: ContentToken, block: ProjectedBlock) -> bool:
    if block.slot is not None:
        return matches_cycling(actual, block.slot)
    return blocks_match(actual, block.token)


class ValidationStatus(str, Enum):
    CLEAN = "clean"
    DIRTY = "dirty"
    COMPLETE = "complete"


class ValidationResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    origin: BlockPos
    incorrect: frozenset[BlockPos] = frozenset()
    regressions: frozenset[BlockPos] = frozenset()   # incorrect now, not on the previous pass
    missing: int = 0                                 # expected cells still empty
    missing_cells: frozenset[BlockPos] = frozenset()
    complete: bool = False

    @property
    def status(self) -> ValidationStatus:
        if self.complete:
            return ValidationStatus.COMPLETE
        if self.incorrect:
            return ValidationStatus.DIRTY
        return ValidationStatus.CLEAN

    @property
    def has_regressions(self) -> bool:
        return bool(self.regressions)


class BlockValidator:
    """Tracks incorrect cells per projection origin."""

    def __init__(self) -> None:
        self._incorrect: dict[BlockPos, frozenset[BlockPos]] = {}
        self._lock = threading.Lock()

    def validate(self, projection: Projection, world: World) -> ValidationResult:
        incorrect: set[BlockPos] = set()
        absent: set[BlockPos] = set()

        def visit(block: ProjectedBlock) -> bool:
            if block.token.is_empty:
                return False
            actual = _read(world, block.world)
            if matches(actual, block):
                return False
            if actual.is_empty:
                absent.add(block.world)
            else:
                incorrect.add(block.world)
            return False

        projection.process_all(visit)

        origin = projection.origin
        current = frozenset(incorrect)
        with self._lock:
            previous = self._incorrect.get(origin, frozenset())
            if current:
                self._incorrect[origin] = current
            else:
                self._incorrect.pop(origin, None)

        complete = not projection.is_inert and not current and not absent
        return ValidationResult(
            origin=origin,
            incorrect=current,
            regressions=current - previous,
            missing=len(absent),
            missing_cells=frozenset(absent),
            complete=complete,
        )

    def is_complete(self, projection: Projection, world: World) -> bool:
        """Completion check that stops at the first unsatisfied cell of each layer."""
        if projection.is_inert or self.incorrect_at(projection.origin):
            return False

        def unsatisfied(block: ProjectedBlock) -> bool:
            if block.token.is_empty:
                return False
            actual = _read(world, block.world)
            return actual.is_empty or not matches(actual, block)

        for layer in range(projection.layer_count):
            if projection.process(layer, unsatisfied):
                return False
        return True

    def incorrect_at(self, origin: BlockPos) -> frozenset[BlockPos]:
        with self._lock:
            return self._incorrect.get(origin, frozenset())

    def is_incorrect(self, pos: BlockPos) -> bool:
        with self._lock:
            return any(pos in cells for cells in self._incorrect.values())

    def clear(self, origin: BlockPos) -> None:
        with self._lock:
            self._incorrect.pop(origin, None)

    def clear_all(self) -> None:
        with self._lock:
            self._incorrect.clear()


def _read(world: World, pos: BlockPos) -> ContentToken:
    # Unreadable cells count as absent content
    try:
        return world.get_block(pos)
    except Exception:
        log.warning("world_read_failed", x=pos.x, y=pos.y, z=pos.z, exc_info=True)
        return AIR
