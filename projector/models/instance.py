"""Structure instance: a sized, oriented, positioned use of a definition."""

from __future__ import annotations
from pydantic import BaseModel, ConfigDict

from .geometry import BlockPos, Extent, Rotation, ORIGIN


class StructureInstance(BaseModel):
    """
    The fields a projection is derived from.

    World placements and layers are never stored here; they are recomputed
    from these fields plus the current definition.
    """
    model_config = ConfigDict(frozen=True)

    structure_id: str
    size: Extent | None = None   # None = the definition's default size
    rotation: Rotation = Rotation.NONE
    mirror: bool = False
    origin: BlockPos = ORIGIN
