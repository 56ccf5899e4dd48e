"""Auto-build: write every expected cell of a projection into the world."""

from __future__ import annotations

from pydantic import BaseModel

from projector.core.projection import ProjectedBlock, Projection
from projector.core.world import World
from projector.models import BlockPos, ContentToken
from projector.utils.logger import get_logger

log = get_logger(__name__)


class AutoBuildResult(BaseModel):
    placed: int = 0
    failures: list[BlockPos] = []

    @property
    def success(self) -> bool:
        return not self.failures


def target_token(projection: Projection, block: ProjectedBlock) -> ContentToken:
    """What auto-build writes: the default token on cycling positions."""
    if block.slot is not None:
        return projection.transform.apply_token(block.slot.default)
    return block.token


def auto_build(projection: Projection, world: World) -> AutoBuildResult:
    """
    Place every block of `projection`, layer by layer.

    Writes the host rejects, or that fail, are collected in `failures`;
    the remaining cells are still written.
    """
    result = AutoBuildResult()

    def place(block: ProjectedBlock) -> bool:
        token = target_token(projection, block)
        try:
            written = world.in_bounds(block.world) and world.set_block(block.world, token, block.nbt)
        except Exception:
            log.warning("auto_build_write_failed", x=block.world.x, y=block.world.y, z=block.world.z, exc_info=True)
            written = False
        if written:
            result.placed += 1
        else:
            result.failures.append(block.world)
        return False

    projection.process_all(place)

    if result.failures:
        log.warning(
            "auto_build_partial_failure",
            structure_id=projection.instance.structure_id,
            placed=result.placed,
            failed=len(result.failures),
        )
    else:
        log.info(
            "auto_build_completed",
            structure_id=projection.instance.structure_id,
            placed=result.placed,
        )
    return result
