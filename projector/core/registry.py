"""Structure catalog: discovers, stores, and resolves structure definitions."""

from __future__ import annotations

from collections.abc import Callable

from projector.config import Settings, get_settings
from projector.core.sources import BlockRegistry, Palette, PaletteSpec
from projector.structures.base import StructureDefinition
from projector.utils.logger import get_logger

log = get_logger(__name__)


class StructureCatalog:
    """
    Central registry for all structure definitions.

    Definitions are registered once at startup; after that the catalog is
    read-mostly and may be shared across request handlers.
    """

    def __init__(self) -> None:
        self._structures: dict[str, StructureDefinition] = {}

    def register(self, definition: StructureDefinition) -> bool:
        """Register a definition. Returns False if the id was already taken."""
        structure_id = definition.get_id()
        if structure_id in self._structures:
            log.debug("structure_duplicate_skipped", structure_id=structure_id)
            return False
        self._structures[structure_id] = definition
        log.debug("structure_registered", structure_id=structure_id, source=definition.source)
        return True

    def unregister(self, structure_id: str) -> None:
        self._structures.pop(structure_id, None)

    def get(self, structure_id: str | None) -> StructureDefinition | None:
        if structure_id is None:
            return None
        return self._structures.get(structure_id)

    def list(self) -> list[StructureDefinition]:
        """All definitions, sorted by display name (case-insensitive)."""
        return sorted(self._structures.values(), key=lambda d: d.get_name().lower())

    def list_by_source(self, source: str) -> list[StructureDefinition]:
        return [d for d in self.list() if d.source == source]

    def sources(self) -> list[str]:
        return sorted({d.source for d in self._structures.values()})

    def __contains__(self, structure_id: object) -> bool:
        return structure_id in self._structures

    def __len__(self) -> int:
        return len(self._structures)


# A content source: the palettes it needs, and a factory taking them in order
SourceFactory = Callable[..., list[StructureDefinition]]


def _content_sources() -> list[tuple[str, list[PaletteSpec], SourceFactory]]:
    from projector.structures.bloodmagic import BLOODMAGIC_PALETTE, altar_structures
    from projector.structures.mekanism import (
        GENERATORS_PALETTE, MEKANISM_PALETTE, generators_structures, mekanism_structures,
    )

    return [
        ("mekanism", [MEKANISM_PALETTE], mekanism_structures),
        ("mekanismgenerators", [MEKANISM_PALETTE, GENERATORS_PALETTE], generators_structures),
        ("bloodmagic", [BLOODMAGIC_PALETTE], altar_structures),
    ]


def discover_structures(
    catalog: StructureCatalog,
    registry: BlockRegistry,
    settings: Settings | None = None,
) -> int:
    """
    Probe every content source once and register what is available.

    A source is registered when its own namespace is present in the block
    registry, or when it is forced through configuration (its blocks then
    resolve to fallbacks). Test structures are only added when nothing else
    registered. Returns the number of newly registered definitions.
    """
    from projector.structures.builtin import builtin_structures

    if settings is None:
        settings = get_settings()

    before = len(catalog)
    palettes: dict[str, Palette] = {}

    for source, specs, factory in _content_sources():
        loaded = registry.has_namespace(specs[-1].namespace)
        if not loaded and source not in settings.forced_sources:
            log.info("source_skipped", source=source)
            continue
        try:
            resolved = []
            for spec in specs:
                if spec.source not in palettes:
                    palettes[spec.source] = Palette.resolve(spec, registry)
                resolved.append(palettes[spec.source])
            definitions = factory(*resolved)
        except Exception:
            log.exception("source_registration_failed", source=source)
            continue
        for definition in definitions:
            catalog.register(definition)
        log.info("source_registered", source=source, structures=len(definitions))

    if len(catalog) == 0 and settings.register_test_structures:
        for definition in builtin_structures():
            catalog.register(definition)
        log.info("test_structures_registered", structures=len(catalog))

    return len(catalog) - before


def create_default_catalog(settings: Settings | None = None) -> StructureCatalog:
    """Create a catalog populated from the configured block registry."""
    if settings is None:
        settings = get_settings()
    catalog = StructureCatalog()
    discover_structures(catalog, BlockRegistry(settings.known_blocks), settings)
    return catalog
