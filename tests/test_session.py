"""Auto-build, ghost previews and the building-assistance loop."""

import pytest

from projector.core.builder import auto_build
from projector.core.preview import PreviewCycler, ghost_blocks
from projector.core.projection import Projection, build_projection
from projector.core.session import BuildAssistant, NoticeKind, ProjectionManager
from projector.core.world import InMemoryWorld
from projector.models import (
    Direction, ProjectorMode, ProjectorSettings, StructureInstance, pos, token,
)
from projector.structures.builtin import PistonPress, SingleBlock

IRON = token("minecraft:iron_block")
STONE = token("minecraft:stone")


# ─── Auto-build ──────────────────────────────────────────────────────────────

def test_auto_build_places_everything(world):
    projection = build_projection(PistonPress(), origin=pos(0, 64, 0))
    result = auto_build(projection, world)
    assert result.success
    assert result.placed == 14
    assert world.get_block(pos(1, 64, 0)) == token("minecraft:furnace", Direction.NORTH)


def test_auto_build_reports_rejected_writes(world):
    projection = build_projection(PistonPress(), origin=pos(0, 64, 0))
    world.protect(pos(1, 65, 1))
    result = auto_build(projection, world)
    assert not result.success
    assert result.placed == 13
    assert result.failures == [pos(1, 65, 1)]


def test_auto_build_out_of_bounds(catalog):
    world = InMemoryWorld(min_y=0)
    instance = StructureInstance(structure_id="bloodmagic:altar_tier_2", origin=pos(0, 0, 0))
    result = auto_build(Projection.from_instance(instance, catalog), world)
    assert len(result.failures) == 8
    assert result.placed == 1


def test_auto_build_writes_rune_defaults(catalog, world):
    instance = StructureInstance(structure_id="bloodmagic:altar_tier_2", origin=pos(0, 64, 0))
    auto_build(Projection.from_instance(instance, catalog), world)
    assert world.get_block(pos(1, 63, 1)) == token("bloodmagic:blankrune")


def test_auto_build_survives_raising_world(world, monkeypatch):
    projection = build_projection(SingleBlock())

    def explode(*args, **kwargs):
        raise RuntimeError("host refused")

    monkeypatch.setattr(world, "set_block", explode)
    result = auto_build(projection, world)
    assert result.failures == [pos(0, 0, 0)]


# ─── Preview ─────────────────────────────────────────────────────────────────

def test_preview_cycler_advances_per_interval():
    cycler = PreviewCycler(interval_ms=1000)
    assert [cycler.tick(t) for t in (0, 500, 1000, 1999, 2000)] == [0, 0, 1, 1, 2]
    cycler.reset()
    assert cycler.tick(5000) == 0


def test_ghosts_cycle_through_runes(catalog, world):
    instance = StructureInstance(structure_id="bloodmagic:altar_tier_2", origin=pos(0, 64, 0))
    projection = Projection.from_instance(instance, catalog)
    ghosts = dict(ghost_blocks(projection, world, cycle_index=1))
    assert ghosts[pos(0, 64, 0)] == token("bloodmagic:altar")
    assert ghosts[pos(1, 63, 0)] == token("bloodmagic:speedrune")
    assert ghosts == dict(ghost_blocks(projection, world, cycle_index=1))


def test_ghosts_skip_occupied_cells(world):
    projection = build_projection(PistonPress())
    world.set_block(pos(0, 0, 0), STONE)
    ghosts = ghost_blocks(projection, world)
    assert len(ghosts) == 13
    assert pos(0, 0, 0) not in dict(ghosts)


# ─── Projection manager ──────────────────────────────────────────────────────

def test_manager_cleanup_distant():
    manager = ProjectionManager()
    near = build_projection(SingleBlock(), origin=pos(10, 0, 0))
    far = build_projection(SingleBlock(), origin=pos(100, 0, 0))
    manager.set(near.origin, near)
    manager.set(far.origin, far)
    assert manager.cleanup_distant(pos(0, 0, 0), radius=64) == [pos(100, 0, 0)]
    assert manager.get(pos(10, 0, 0)) is near
    assert len(manager) == 1
    assert manager.get(None) is None


# ─── Build assistant ─────────────────────────────────────────────────────────

@pytest.fixture()
def assistant(catalog) -> BuildAssistant:
    return BuildAssistant(catalog)


@pytest.fixture()
def selected(catalog) -> ProjectorSettings:
    settings = ProjectorSettings()
    settings.select(catalog.get("multiblockprojector:single_block"))
    return settings


def test_aim_follows_target(assistant, selected):
    first = assistant.aim(selected, pos(0, 0, 0))
    assert first is not None
    assert assistant.aim(selected, pos(0, 0, 0)) is first
    assistant.aim(selected, pos(3, 0, 0))
    assert assistant.manager.get(pos(0, 0, 0)) is None
    assert assistant.manager.get(pos(3, 0, 0)) is not None
    assert assistant.aim(selected, None) is None
    assert len(assistant.manager) == 0


def test_aim_needs_projection_mode(assistant):
    assert assistant.aim(ProjectorSettings(), pos(0, 0, 0)) is None


def test_place_switches_to_building(assistant, selected):
    assistant.aim(selected, pos(1, 0, 0))
    notice = assistant.place(selected, pos(2, 0, 0))
    assert notice.kind is NoticeKind.PROJECTION_CREATED
    assert notice.message == "Projection created: Single Block"
    assert selected.mode is ProjectorMode.BUILDING
    assert selected.placed
    assert selected.pos == pos(2, 0, 0)
    assert list(assistant.manager.all()) == [pos(2, 0, 0)]


def test_tick_reports_each_regression_once(assistant, selected, world):
    assistant.place(selected, pos(0, 64, 0))
    world.set_block(pos(0, 64, 0), STONE)

    notices = assistant.tick([selected], world)
    assert [n.kind for n in notices] == [NoticeKind.INCORRECT_BLOCK]
    assert notices[0].message == "Incorrect block placed!"
    assert assistant.tick([selected], world) == []


def test_tick_completes_structure(assistant, selected, world):
    assistant.place(selected, pos(0, 64, 0))
    assert assistant.tick([selected], world) == []

    world.set_block(pos(0, 64, 0), IRON)
    notices = assistant.tick([selected], world)
    assert [n.kind for n in notices] == [NoticeKind.COMPLETED]
    assert notices[0].message == "Multiblock structure completed!"
    assert selected.mode is ProjectorMode.NOTHING_SELECTED
    assert assistant.manager.get(pos(0, 64, 0)) is None


def test_tick_recreates_missing_projection(assistant, selected, world):
    assistant.place(selected, pos(0, 64, 0))
    assistant.manager.clear_all()
    assistant.tick([selected], world)
    assert assistant.manager.get(pos(0, 64, 0)) is not None


def test_tick_cleans_up_far_projections(assistant, selected, world):
    assistant.place(selected, pos(500, 64, 0))
    assistant.tick([], world, observer=pos(0, 64, 0))
    assert len(assistant.manager) == 0


def test_cancel_resets(assistant, selected, world):
    assistant.place(selected, pos(0, 64, 0))
    world.set_block(pos(0, 64, 0), STONE)
    assistant.tick([selected], world)
    assistant.cancel(selected)
    assert selected.mode is ProjectorMode.NOTHING_SELECTED
    assert len(assistant.manager) == 0
    assert not assistant.validator.is_incorrect(pos(0, 64, 0))


def test_auto_build_denied_without_privilege(assistant, selected, world):
    notice, result = assistant.auto_build(selected, pos(0, 64, 0), world, privileged=False)
    assert notice.kind is NoticeKind.AUTO_BUILD_DENIED
    assert notice.message == "Auto-build only works in creative mode!"
    assert result is None
    assert len(world) == 0


def test_auto_build_denied_outside_projection_mode(assistant, world):
    notice, result = assistant.auto_build(ProjectorSettings(), pos(0, 64, 0), world, privileged=True)
    assert notice.kind is NoticeKind.AUTO_BUILD_DENIED
    assert result is None


def test_auto_build_completed(assistant, selected, world):
    notice, result = assistant.auto_build(selected, pos(0, 64, 0), world, privileged=True)
    assert notice.kind is NoticeKind.AUTO_BUILD_COMPLETED
    assert notice.message == "Auto-build completed! Placed 1 blocks."
    assert result.success
    assert world.get_block(pos(0, 64, 0)) == IRON
    assert selected.mode is ProjectorMode.NOTHING_SELECTED


def test_auto_build_failed_keeps_mode(assistant, selected, world):
    world.protect(pos(0, 64, 0))
    notice, result = assistant.auto_build(selected, pos(0, 64, 0), world, privileged=True)
    assert notice.kind is NoticeKind.AUTO_BUILD_FAILED
    assert notice.count == 1
    assert selected.mode is ProjectorMode.PROJECTION


def test_tick_validates_against_current_definition(assistant, selected, world, catalog):
    from projector.structures.base import BlueprintBuilder

    class GoldBlock(SingleBlock):
        def layout(self):
            builder = BlueprintBuilder()
            builder.place(0, 0, 0, token("minecraft:gold_block"))
            return builder.build()

    assistant.place(selected, pos(0, 64, 0))
    assert assistant.tick([selected], world) == []

    catalog.unregister("multiblockprojector:single_block")
    catalog.register(GoldBlock())
    world.set_block(pos(0, 64, 0), token("minecraft:gold_block"))

    notices = assistant.tick([selected], world)
    assert [n.kind for n in notices] == [NoticeKind.COMPLETED]


def test_tick_keeps_far_instances_being_built(assistant, selected, world):
    assistant.place(selected, pos(500, 64, 0))
    world.set_block(pos(500, 64, 0), STONE)
    assistant.tick([selected], world, observer=pos(0, 64, 0))
    assert assistant.manager.get(pos(500, 64, 0)) is not None
    assert assistant.validator.is_incorrect(pos(500, 64, 0))


def test_tick_cleanup_clears_validation_state(assistant, selected, world):
    assistant.place(selected, pos(500, 64, 0))
    world.set_block(pos(500, 64, 0), STONE)
    assistant.tick([selected], world)
    assert assistant.validator.is_incorrect(pos(500, 64, 0))

    selected.mode = ProjectorMode.NOTHING_SELECTED
    assistant.tick([selected], world, observer=pos(0, 64, 0))
    assert len(assistant.manager) == 0
    assert not assistant.validator.is_incorrect(pos(500, 64, 0))


def test_manager_cleanup_keeps_listed_origins():
    manager = ProjectionManager()
    far = build_projection(SingleBlock(), origin=pos(100, 0, 0))
    manager.set(far.origin, far)
    assert manager.cleanup_distant(pos(0, 0, 0), radius=64, keep={far.origin}) == []
    assert len(manager) == 1
