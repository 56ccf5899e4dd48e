from .geometry import BlockPos, Extent, Direction, Rotation, ORIGIN, pos, extent
from .content import (
    ContentToken, TokenCategory, DIRECTION_INSENSITIVE, AIR, categorize, token,
)
from .structure import Placement, SizePreset, CyclingSlot, Blueprint
from .instance import StructureInstance
from .settings import ProjectorSettings, ProjectorMode

__all__ = [
    "BlockPos", "Extent", "Direction", "Rotation", "ORIGIN", "pos", "extent",
    "ContentToken", "TokenCategory", "DIRECTION_INSENSITIVE", "AIR", "categorize", "token",
    "Placement", "SizePreset", "CyclingSlot", "Blueprint",
    "StructureInstance",
    "ProjectorSettings", "ProjectorMode",
]
