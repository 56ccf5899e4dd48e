"""API request/response schemas."""

from __future__ import annotations
from pydantic import BaseModel

from projector.models import BlockPos, ContentToken, Extent, SizePreset, StructureInstance
from projector.core.validator import ValidationStatus


class BlockEntry(BaseModel):
    """One occupied cell of a world snapshot."""
    pos: BlockPos
    token: ContentToken


class StructureInfo(BaseModel):
    id: str
    name: str
    source: str
    category: str
    preview_scale: float
    variable: bool
    cycling: bool
    default_size: Extent


class StructureDetail(StructureInfo):
    sizes: list[SizePreset] = []
    default_size_index: int = 0
    block_count: int


class ProjectedBlockOut(BaseModel):
    local: BlockPos
    world: BlockPos
    token: ContentToken
    acceptable: list[ContentToken] = []   # non-empty on cycling positions


class ProjectionRequest(BaseModel):
    instance: StructureInstance


class ProjectionResponse(BaseModel):
    structure_id: str
    layer_count: int
    block_count: int
    layers: list[list[ProjectedBlockOut]]
    min_corner: BlockPos | None = None
    max_corner: BlockPos | None = None


class WorldRequest(BaseModel):
    """An instance plus a snapshot of the cells around it."""
    instance: StructureInstance
    world: list[BlockEntry] = []


class ValidationResponse(BaseModel):
    status: ValidationStatus
    complete: bool
    incorrect: list[BlockPos]
    regressions: list[BlockPos]
    missing: int
    missing_cells: list[BlockPos] = []


class AutoBuildResponse(BaseModel):
    success: bool
    placed: int
    failures: list[BlockPos]
    world: list[BlockEntry]


class PreviewRequest(WorldRequest):
    cycle_index: int = 0


class PreviewResponse(BaseModel):
    ghosts: list[BlockEntry]
