"""Projection: a structure instance expanded into world placements and layers."""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict

from projector.core.transform import Transform
from projector.models import (
    ORIGIN, Blueprint, BlockPos, ContentToken, CyclingSlot, Extent, Rotation,
    StructureInstance,
)
from projector.structures.base import StructureDefinition

if TYPE_CHECKING:
    from projector.core.registry import StructureCatalog


class ProjectedBlock(BaseModel):
    """One expected cell, in both local and world coordinates."""
    model_config = ConfigDict(frozen=True)

    local: BlockPos
    world: BlockPos
    token: ContentToken                # transformed expected content
    nbt: dict[str, Any] | None = None
    slot: CyclingSlot | None = None    # set on cycling positions

    @property
    def is_cycling(self) -> bool:
        return self.slot is not None


# Returns True to stop iterating the current layer
Visitor = Callable[[ProjectedBlock], bool]


def partition_layers(blocks: list[ProjectedBlock]) -> list[list[ProjectedBlock]]:
    """Group blocks by world y, lowest first, keeping list order within a layer."""
    by_y: dict[int, list[ProjectedBlock]] = {}
    for block in blocks:
        by_y.setdefault(block.world.y, []).append(block)
    return [by_y[y] for y in sorted(by_y)]


class Projection:
    """
    A placed, sized and oriented structure.

    Re-deriving a projection from the same instance fields always yields
    the same blocks in the same order. A projection whose definition is
    unknown is inert: zero layers, never complete, nothing to place.
    """

    def __init__(
        self,
        instance: StructureInstance,
        definition: StructureDefinition | None,
        blueprint: Blueprint | None = None,
    ) -> None:
        self.instance = instance
        self.definition = definition
        self.transform = Transform(
            rotation=instance.rotation,
            mirror=instance.mirror,
            origin=instance.origin,
        )
        self._blueprint = blueprint or Blueprint()
        self.blocks = [self._project(p.pos, p.token, p.nbt) for p in self._blueprint.placements]
        self.layers = partition_layers(self.blocks)

    @classmethod
    def from_instance(cls, instance: StructureInstance, catalog: StructureCatalog) -> Projection:
        definition = catalog.get(instance.structure_id)
        if definition is None:
            return cls(instance, None)
        size = instance.size or definition.get_size()
        return cls(instance, definition, definition.generate(size))

    def _project(self, local: BlockPos, token: ContentToken, nbt: dict[str, Any] | None) -> ProjectedBlock:
        return ProjectedBlock(
            local=local,
            world=self.transform.apply(local),
            token=self.transform.apply_token(token),
            nbt=nbt,
            slot=self._blueprint.slot_at(local),
        )

    @property
    def is_inert(self) -> bool:
        return self.definition is None

    @property
    def layer_count(self) -> int:
        return len(self.layers)

    @property
    def origin(self) -> BlockPos:
        return self.instance.origin

    def slot_at(self, local: BlockPos) -> CyclingSlot | None:
        return self._blueprint.slot_at(local)

    def process(self, layer: int, visitor: Visitor) -> bool:
        """Visit one layer in order. Returns True if the visitor stopped early."""
        if not 0 <= layer < len(self.layers):
            return False
        for block in self.layers[layer]:
            if visitor(block):
                return True
        return False

    def process_all(self, visitor: Visitor) -> None:
        """Visit every layer; a stop signal only ends the current layer."""
        for layer in range(len(self.layers)):
            self.process(layer, visitor)

    def bounds(self) -> tuple[BlockPos, BlockPos] | None:
        """Inclusive (min, max) world corners, or None for an empty projection."""
        if not self.blocks:
            return None
        xs = [b.world.x for b in self.blocks]
        ys = [b.world.y for b in self.blocks]
        zs = [b.world.z for b in self.blocks]
        return (
            BlockPos(x=min(xs), y=min(ys), z=min(zs)),
            BlockPos(x=max(xs), y=max(ys), z=max(zs)),
        )

    def __len__(self) -> int:
        return len(self.blocks)


def build_projection(
    definition: StructureDefinition,
    size: Extent | None = None,
    rotation: Rotation = Rotation.NONE,
    mirror: bool = False,
    origin: BlockPos = ORIGIN,
) -> Projection:
    size = size or definition.get_size()
    instance = StructureInstance(
        structure_id=definition.get_id(),
        size=size,
        rotation=rotation,
        mirror=mirror,
        origin=origin,
    )
    return Projection(instance, definition, definition.generate(size))
