"""
Projector session: active projections and the building-assistance loop.

The assistant drives the projector tool's state machine

    nothing_selected -> projection (aiming) -> building -> nothing_selected

and, once per tick, validates every instance that is being built, turning
validator results into user-facing notices.
"""

from __future__ import annotations

import threading
from collections.abc import Collection
from enum import Enum

from pydantic import BaseModel

from projector.core.builder import AutoBuildResult, auto_build
from projector.core.projection import Projection
from projector.core.registry import StructureCatalog
from projector.core.validator import BlockValidator
from projector.core.world import World
from projector.models import (
    BlockPos, ProjectorMode, ProjectorSettings, StructureInstance,
)
from projector.structures.base import StructureDefinition
from projector.utils.logger import get_logger

log = get_logger(__name__)


class ProjectionManager:
    """Active projections, keyed by world origin."""

    def __init__(self) -> None:
        self._projections: dict[BlockPos, Projection] = {}
        self._lock = threading.Lock()

    def set(self, origin: BlockPos, projection: Projection) -> None:
        with self._lock:
            self._projections[origin] = projection

    def get(self, origin: BlockPos | None) -> Projection | None:
        if origin is None:
            return None
        with self._lock:
            return self._projections.get(origin)

    def remove(self, origin: BlockPos | None) -> Projection | None:
        if origin is None:
            return None
        with self._lock:
            return self._projections.pop(origin, None)

    def all(self) -> dict[BlockPos, Projection]:
        with self._lock:
            return dict(self._projections)

    def clear_all(self) -> None:
        with self._lock:
            self._projections.clear()

    def cleanup_distant(
        self, observer: BlockPos, radius: float = 64.0, keep: Collection[BlockPos] = (),
    ) -> list[BlockPos]:
        """Drop projections farther than `radius` from `observer`, except origins in `keep`."""
        with self._lock:
            distant = [
                o for o in self._projections
                if o not in keep and o.distance_to(observer) > radius
            ]
            for origin in distant:
                del self._projections[origin]
        if distant:
            log.debug("projections_cleaned_up", removed=len(distant), radius=radius)
        return distant

    def __len__(self) -> int:
        return len(self._projections)


class NoticeKind(str, Enum):
    PROJECTION_CREATED = "projection_created"
    INCORRECT_BLOCK = "incorrect_block"
    COMPLETED = "completed"
    AUTO_BUILD_COMPLETED = "auto_build_completed"
    AUTO_BUILD_FAILED = "auto_build_failed"
    AUTO_BUILD_DENIED = "auto_build_denied"


class BuildNotice(BaseModel):
    kind: NoticeKind
    message: str
    origin: BlockPos | None = None
    count: int = 0


class BuildAssistant:
    """
    Caller-side building assistance.

    Holds the aim projection (which follows the targeted cell while a
    structure is selected) and validates placed projections on each tick.
    """

    def __init__(
        self,
        catalog: StructureCatalog,
        manager: ProjectionManager | None = None,
        validator: BlockValidator | None = None,
        cleanup_radius: float = 64.0,
    ) -> None:
        self.catalog = catalog
        self.manager = manager if manager is not None else ProjectionManager()
        self.validator = validator or BlockValidator()
        self.cleanup_radius = cleanup_radius
        self.aim_pos: BlockPos | None = None

    def _definition(self, settings: ProjectorSettings) -> StructureDefinition | None:
        return self.catalog.get(settings.structure_id)

    def projection_for(self, settings: ProjectorSettings, origin: BlockPos) -> Projection:
        definition = self._definition(settings)
        if definition is None:
            instance = StructureInstance(structure_id=settings.structure_id or "", origin=origin)
            return Projection.from_instance(instance, self.catalog)
        return Projection.from_instance(settings.to_instance(definition, origin), self.catalog)

    def _clear_aim(self) -> None:
        if self.aim_pos is not None:
            self.manager.remove(self.aim_pos)
            self.aim_pos = None

    # ── Aiming and placing ──────────────────────────────────────────────────

    def aim(self, settings: ProjectorSettings, target: BlockPos | None) -> Projection | None:
        """Move the aim projection to `target` (None: nothing targeted)."""
        if settings.mode is not ProjectorMode.PROJECTION or self._definition(settings) is None:
            self._clear_aim()
            return None
        if target is None:
            self._clear_aim()
            return None

        projection = self.projection_for(settings, target)
        current = self.manager.get(target) if target == self.aim_pos else None
        if current is not None and current.instance == projection.instance:
            return current

        self._clear_aim()
        self.manager.set(target, projection)
        self.aim_pos = target
        return projection

    def place(self, settings: ProjectorSettings, pos: BlockPos) -> BuildNotice | None:
        """Pin the projection at `pos` and switch the tool to building mode."""
        definition = self._definition(settings)
        if settings.mode is not ProjectorMode.PROJECTION or definition is None:
            return None

        self.manager.set(pos, self.projection_for(settings, pos))
        if self.aim_pos is not None and self.aim_pos != pos:
            self.manager.remove(self.aim_pos)
        self.aim_pos = None

        settings.mode = ProjectorMode.BUILDING
        settings.pos = pos
        settings.placed = True
        log.info("projection_placed", structure_id=definition.get_id(), x=pos.x, y=pos.y, z=pos.z)
        return BuildNotice(
            kind=NoticeKind.PROJECTION_CREATED,
            message=f"Projection created: {definition.get_name()}",
            origin=pos,
        )

    def cancel(self, settings: ProjectorSettings) -> None:
        """Abandon aiming or building and return to nothing selected."""
        if settings.mode not in (ProjectorMode.PROJECTION, ProjectorMode.BUILDING):
            return
        self._clear_aim()
        if settings.pos is not None:
            self.manager.remove(settings.pos)
            self.validator.clear(settings.pos)
        settings.reset()

    # ── Tick ────────────────────────────────────────────────────────────────

    def tick(
        self,
        settings_list: list[ProjectorSettings],
        world: World,
        observer: BlockPos | None = None,
    ) -> list[BuildNotice]:
        """Validate every instance being built; report regressions and completions."""
        if observer is not None:
            building = {
                s.pos for s in settings_list
                if s.mode is ProjectorMode.BUILDING and s.pos is not None
            }
            for origin in self.manager.cleanup_distant(observer, self.cleanup_radius, keep=building):
                self.validator.clear(origin)

        notices: list[BuildNotice] = []
        for settings in settings_list:
            if settings.mode is not ProjectorMode.BUILDING or settings.pos is None:
                continue
            if self._definition(settings) is None:
                continue

            # Expected content is re-derived every pass from the current definition
            origin = settings.pos
            projection = self.projection_for(settings, origin)
            self.manager.set(origin, projection)

            result = self.validator.validate(projection, world)
            if result.has_regressions:
                notices.append(BuildNotice(
                    kind=NoticeKind.INCORRECT_BLOCK,
                    message="Incorrect block placed!",
                    origin=origin,
                    count=len(result.regressions),
                ))

            if result.complete and self.validator.is_complete(projection, world):
                settings.reset()
                self.manager.remove(origin)
                self.validator.clear(origin)
                log.info("structure_completed", structure_id=projection.instance.structure_id)
                notices.append(BuildNotice(
                    kind=NoticeKind.COMPLETED,
                    message="Multiblock structure completed!",
                    origin=origin,
                ))
        return notices

    # ── Auto-build ──────────────────────────────────────────────────────────

    def auto_build(
        self,
        settings: ProjectorSettings,
        pos: BlockPos,
        world: World,
        privileged: bool,
    ) -> tuple[BuildNotice, AutoBuildResult | None]:
        """Place the selected structure at `pos` in one go (privileged callers only)."""
        if not privileged:
            return BuildNotice(
                kind=NoticeKind.AUTO_BUILD_DENIED,
                message="Auto-build only works in creative mode!",
                origin=pos,
            ), None
        if settings.mode is not ProjectorMode.PROJECTION or self._definition(settings) is None:
            return BuildNotice(
                kind=NoticeKind.AUTO_BUILD_DENIED,
                message="Select a structure before auto-building",
                origin=pos,
            ), None

        self._clear_aim()
        result = auto_build(self.projection_for(settings, pos), world)
        if not result.success:
            return BuildNotice(
                kind=NoticeKind.AUTO_BUILD_FAILED,
                message=f"Auto-build failed! {len(result.failures)} blocks couldn't be placed.",
                origin=pos,
                count=len(result.failures),
            ), result

        settings.reset()
        return BuildNotice(
            kind=NoticeKind.AUTO_BUILD_COMPLETED,
            message=f"Auto-build completed! Placed {result.placed} blocks.",
            origin=pos,
            count=result.placed,
        ), result
