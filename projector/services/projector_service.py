"""High-level projector service: facade for the API layer."""

from __future__ import annotations

from collections.abc import Iterable

from projector.api.middleware.error_handler import InvalidInstanceError, StructureNotFoundError
from projector.config import Settings, get_settings
from projector.core.builder import AutoBuildResult, auto_build
from projector.core.preview import PreviewCycler, ghost_blocks
from projector.core.projection import Projection
from projector.core.registry import StructureCatalog, create_default_catalog
from projector.core.session import BuildAssistant
from projector.core.validator import BlockValidator, ValidationResult
from projector.core.world import InMemoryWorld
from projector.models import BlockPos, ContentToken, StructureInstance
from projector.structures.base import StructureDefinition


class ProjectorService:
    """Resolves instances against the catalog and delegates to the core."""

    def __init__(
        self,
        catalog: StructureCatalog | None = None,
        settings: Settings | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.catalog = catalog if catalog is not None else create_default_catalog(self.settings)
        self.validator = BlockValidator()
        self.assistant = BuildAssistant(
            self.catalog,
            validator=self.validator,
            cleanup_radius=self.settings.cleanup_radius,
        )

    def list_structures(self, source: str | None = None) -> list[StructureDefinition]:
        if source is None:
            return self.catalog.list()
        return self.catalog.list_by_source(source)

    def get_structure(self, structure_id: str) -> StructureDefinition:
        definition = self.catalog.get(structure_id)
        if definition is None:
            raise StructureNotFoundError(structure_id)
        return definition

    def build_instance(self, instance: StructureInstance) -> Projection:
        self.get_structure(instance.structure_id)
        return Projection.from_instance(instance, self.catalog)

    def world_from_snapshot(self, blocks: Iterable[tuple[BlockPos, ContentToken]]) -> InMemoryWorld:
        world = InMemoryWorld(
            min_y=self.settings.world_min_y,
            max_y=self.settings.world_max_y,
            border=self.settings.world_border,
        )
        for pos, token in blocks:
            if not world.in_bounds(pos):
                raise InvalidInstanceError(f"block outside world bounds: {pos.as_tuple()}")
            world.set_block(pos, token)
        return world

    def validate(
        self, instance: StructureInstance, world: InMemoryWorld,
    ) -> tuple[Projection, ValidationResult]:
        projection = self.build_instance(instance)
        return projection, self.validator.validate(projection, world)

    def auto_build(self, instance: StructureInstance, world: InMemoryWorld) -> AutoBuildResult:
        return auto_build(self.build_instance(instance), world)

    def preview(
        self, instance: StructureInstance, world: InMemoryWorld, cycle_index: int = 0,
    ) -> list[tuple[BlockPos, ContentToken]]:
        return ghost_blocks(self.build_instance(instance), world, cycle_index)

    def preview_cycler(self) -> PreviewCycler:
        return PreviewCycler(self.settings.cycle_interval_ms)

    def reset_validation(self, origin: BlockPos | None = None) -> None:
        if origin is None:
            self.validator.clear_all()
        else:
            self.validator.clear(origin)
