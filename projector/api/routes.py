"""FastAPI route definitions."""

from __future__ import annotations

from fastapi import APIRouter

from projector.api.dependencies import ServiceDep
from projector.api.schemas import (
    AutoBuildResponse, BlockEntry, PreviewRequest, PreviewResponse,
    ProjectedBlockOut, ProjectionRequest, ProjectionResponse, StructureDetail,
    StructureInfo, ValidationResponse, WorldRequest,
)
from projector.core.projection import Projection
from projector.structures.base import StructureDefinition

router = APIRouter()


def _info(definition: StructureDefinition) -> StructureInfo:
    return StructureInfo(
        id=definition.get_id(),
        name=definition.get_name(),
        source=definition.source,
        category=definition.category,
        preview_scale=definition.preview_scale,
        variable=definition.is_variable,
        cycling=definition.cycling,
        default_size=definition.get_size(),
    )


def _projection_response(projection: Projection) -> ProjectionResponse:
    bounds = projection.bounds()
    return ProjectionResponse(
        structure_id=projection.instance.structure_id,
        layer_count=projection.layer_count,
        block_count=len(projection),
        layers=[
            [
                ProjectedBlockOut(
                    local=b.local,
                    world=b.world,
                    token=b.token,
                    acceptable=[projection.transform.apply_token(t) for t in b.slot.acceptable] if b.slot else [],
                )
                for b in layer
            ]
            for layer in projection.layers
        ],
        min_corner=bounds[0] if bounds else None,
        max_corner=bounds[1] if bounds else None,
    )


@router.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok"}


@router.get("/structures", response_model=list[StructureInfo])
async def list_structures(service: ServiceDep, source: str | None = None) -> list[StructureInfo]:
    """List registered structures, optionally for one content source."""
    return [_info(d) for d in service.list_structures(source)]


@router.get("/structures/{structure_id:path}", response_model=StructureDetail)
async def get_structure(structure_id: str, service: ServiceDep) -> StructureDetail:
    definition = service.get_structure(structure_id)
    return StructureDetail(
        **_info(definition).model_dump(),
        sizes=list(definition.size_presets),
        default_size_index=definition.default_size_index(),
        block_count=len(definition.generate()),
    )


@router.post("/projections", response_model=ProjectionResponse)
async def create_projection(request: ProjectionRequest, service: ServiceDep) -> ProjectionResponse:
    """Expand an instance into layered world placements."""
    return _projection_response(service.build_instance(request.instance))


@router.post("/projections/validate", response_model=ValidationResponse)
async def validate_projection(request: WorldRequest, service: ServiceDep) -> ValidationResponse:
    """Check a world snapshot against an instance."""
    world = service.world_from_snapshot((e.pos, e.token) for e in request.world)
    _, result = service.validate(request.instance, world)
    return ValidationResponse(
        status=result.status,
        complete=result.complete,
        incorrect=sorted(result.incorrect, key=lambda p: p.as_tuple()),
        regressions=sorted(result.regressions, key=lambda p: p.as_tuple()),
        missing=result.missing,
        missing_cells=sorted(result.missing_cells, key=lambda p: p.as_tuple()),
    )


@router.post("/projections/auto-build", response_model=AutoBuildResponse)
async def auto_build_projection(request: WorldRequest, service: ServiceDep) -> AutoBuildResponse:
    """Write the instance into a world snapshot and return the result."""
    world = service.world_from_snapshot((e.pos, e.token) for e in request.world)
    result = service.auto_build(request.instance, world)
    return AutoBuildResponse(
        success=result.success,
        placed=result.placed,
        failures=result.failures,
        world=[BlockEntry(pos=p, token=t) for p, t in world.items()],
    )


@router.post("/projections/preview", response_model=PreviewResponse)
async def preview_projection(request: PreviewRequest, service: ServiceDep) -> PreviewResponse:
    """Ghost blocks still to be drawn at the given cycle index."""
    world = service.world_from_snapshot((e.pos, e.token) for e in request.world)
    ghosts = service.preview(request.instance, world, request.cycle_index)
    return PreviewResponse(ghosts=[BlockEntry(pos=p, token=t) for p, t in ghosts])
