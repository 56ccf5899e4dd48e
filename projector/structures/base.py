"""Abstract base class for all structure definitions.

Every buildable structure implements this interface. Definitions are:
- Immutable: palettes are resolved before construction, nothing changes after
- Pure: `generate()` returns a new Blueprint on each call
- Data-driven: size behaviour and cycling support are attributes, not types
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from enum import Enum

from projector.models import (
    Blueprint, BlockPos, ContentToken, CyclingSlot, Extent, Placement, SizePreset,
)


class CellKind(str, Enum):
    EDGE = "edge"
    FACE = "face"
    INTERIOR = "interior"


def boundary_count(x: int, y: int, z: int, size: Extent) -> int:
    """Number of axes on which (x, y, z) touches the extent's boundary."""
    count = 0
    if x == 0 or x == size.x - 1:
        count += 1
    if y == 0 or y == size.y - 1:
        count += 1
    if z == 0 or z == size.z - 1:
        count += 1
    return count


def classify(x: int, y: int, z: int, size: Extent) -> CellKind:
    touching = boundary_count(x, y, z, size)
    if touching >= 2:
        return CellKind.EDGE
    if touching == 1:
        return CellKind.FACE
    return CellKind.INTERIOR


def is_edge(x: int, y: int, z: int, size: Extent) -> bool:
    return boundary_count(x, y, z, size) >= 2


def is_interior(x: int, y: int, z: int, size: Extent) -> bool:
    return boundary_count(x, y, z, size) == 0


class BlueprintBuilder:
    """Collects placements for a single generate() call."""

    def __init__(self) -> None:
        self._placements: dict[BlockPos, Placement] = {}
        self._cycling: dict[BlockPos, CyclingSlot] = {}

    def place(
        self, x: int, y: int, z: int,
        block: ContentToken | None,
        nbt: dict | None = None,
    ) -> None:
        """Place a token; `None` leaves the cell unconstrained."""
        if block is None:
            return
        at = BlockPos(x=x, y=y, z=z)
        self._placements[at] = Placement(pos=at, token=block, nbt=nbt)
        self._cycling.pop(at, None)

    def place_cycling(self, x: int, y: int, z: int, slot: CyclingSlot) -> None:
        at = BlockPos(x=x, y=y, z=z)
        self._placements[at] = Placement(pos=at, token=slot.default)
        self._cycling[at] = slot

    def build(self) -> Blueprint:
        return Blueprint(
            placements=list(self._placements.values()),
            cycling=dict(self._cycling),
        )


class StructureDefinition(ABC):
    """
    Base class for all structure definitions.

    Subclasses implement `get_id()`, `get_name()` and either `layout()`
    (fixed size) or `layout_at()` (variable size).
    """

    # Content source this definition belongs to (e.g. 'mekanism').
    source: str = "multiblockprojector"

    # Free-form grouping shown in menus (e.g. 'power', 'storage').
    category: str = "misc"

    # Scale factor applied by preview renderers.
    preview_scale: float = 1.0

    # Non-empty for variable-size definitions; ordered small to large.
    size_presets: list[SizePreset] = []

    # True if the definition may declare cycling positions.
    cycling: bool = False

    @abstractmethod
    def get_id(self) -> str:
        """Stable identifier (e.g., 'mekanism:dynamic_tank')."""
        ...

    @abstractmethod
    def get_name(self) -> str:
        """Human-readable name (e.g., 'Dynamic Tank')."""
        ...

    @abstractmethod
    def generate(self, size: Extent | None = None) -> Blueprint:
        """
        Produce the placements of this structure at the given size.

        Must return a new Blueprint on every call and must not raise.
        """
        ...

    @property
    def is_variable(self) -> bool:
        return len(self.size_presets) > 0

    def default_size_index(self) -> int:
        return len(self.size_presets) // 2 if self.is_variable else 0

    def clamp_size_index(self, index: int) -> int:
        if not self.is_variable:
            return 0
        return max(0, min(index, len(self.size_presets) - 1))

    @abstractmethod
    def get_size(self, size_index: int | None = None) -> Extent:
        ...

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.get_id()}>"


class FixedStructure(StructureDefinition):
    """A single-size structure whose blueprint is computed once."""

    fixed_size: Extent

    def __init__(self) -> None:
        self._blueprint = self.layout()

    @abstractmethod
    def layout(self) -> Blueprint:
        """Compute the constant layout. Called once from __init__."""
        ...

    def get_size(self, size_index: int | None = None) -> Extent:
        return self.fixed_size

    def generate(self, size: Extent | None = None) -> Blueprint:
        return self._blueprint.copy_fresh()


class VariableStructure(StructureDefinition):
    """A structure derived procedurally from the requested extent."""

    def get_size(self, size_index: int | None = None) -> Extent:
        if size_index is None:
            size_index = self.default_size_index()
        return self.size_presets[self.clamp_size_index(size_index)].size

    @abstractmethod
    def layout_at(self, size: Extent, builder: BlueprintBuilder) -> None:
        ...

    def generate(self, size: Extent | None = None) -> Blueprint:
        if size is None:
            size = self.get_size()
        builder = BlueprintBuilder()
        self.layout_at(size, builder)
        return builder.build()


def presets(*entries: tuple[str, int, int, int]) -> list[SizePreset]:
    return [
        SizePreset(label=label, size=Extent(x=x, y=y, z=z))
        for label, x, y, z in entries
    ]
