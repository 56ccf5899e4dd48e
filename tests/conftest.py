from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from projector.config import Settings
from projector.core.registry import StructureCatalog, discover_structures
from projector.core.sources import BlockRegistry, Palette
from projector.core.world import InMemoryWorld
from projector.structures.bloodmagic import BLOODMAGIC_PALETTE
from projector.structures.builtin import builtin_structures
from projector.structures.mekanism import GENERATORS_PALETTE, MEKANISM_PALETTE

ALL_SOURCES = ["mekanism", "mekanismgenerators", "bloodmagic"]


def make_settings(**overrides) -> Settings:
    return Settings(_env_file=None, **overrides)


@pytest.fixture()
def settings() -> Settings:
    return make_settings()


@pytest.fixture()
def full_registry() -> BlockRegistry:
    """A host with every optional content source loaded."""
    ids = []
    for spec in (MEKANISM_PALETTE, GENERATORS_PALETTE, BLOODMAGIC_PALETTE):
        ids.extend(spec.blocks.values())
    return BlockRegistry(ids)


@pytest.fixture()
def empty_registry() -> BlockRegistry:
    return BlockRegistry()


@pytest.fixture()
def mekanism(full_registry: BlockRegistry) -> Palette:
    return Palette.resolve(MEKANISM_PALETTE, full_registry)


@pytest.fixture()
def generators(mekanism: Palette, full_registry: BlockRegistry) -> Palette:
    return mekanism.merged(Palette.resolve(GENERATORS_PALETTE, full_registry))


@pytest.fixture()
def bloodmagic(full_registry: BlockRegistry) -> Palette:
    return Palette.resolve(BLOODMAGIC_PALETTE, full_registry)


@pytest.fixture()
def catalog(full_registry: BlockRegistry) -> StructureCatalog:
    """Built-in test structures plus every content source."""
    catalog = StructureCatalog()
    for definition in builtin_structures():
        catalog.register(definition)
    discover_structures(catalog, full_registry, make_settings())
    return catalog


@pytest.fixture()
def world() -> InMemoryWorld:
    return InMemoryWorld()


@pytest.fixture()
def service(catalog: StructureCatalog):
    from projector.services.projector_service import ProjectorService
    return ProjectorService(catalog=catalog, settings=make_settings())


@pytest.fixture()
def client(service, monkeypatch: pytest.MonkeyPatch):
    from projector.api import dependencies
    from projector.api.main import create_app

    monkeypatch.setattr(dependencies, "_service", service)
    with TestClient(create_app()) as test_client:
        yield test_client
