"""FastAPI dependencies: the shared ProjectorService."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends

from projector.services.projector_service import ProjectorService

_service: ProjectorService | None = None


def init_service(service: ProjectorService | None = None) -> ProjectorService:
    """Create (or install) the shared service. Called from the app lifespan."""
    global _service
    _service = service or ProjectorService()
    return _service


def get_service() -> ProjectorService:
    if _service is None:
        return init_service()
    return _service


ServiceDep = Annotated[ProjectorService, Depends(get_service)]
