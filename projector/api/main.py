"""FastAPI application factory."""

from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from projector.api.dependencies import get_service
from projector.api.middleware.error_handler import register_error_handlers
from projector.api.routes import router
from projector.utils.logger import configure_logging, get_logger

log = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    service = get_service()
    log.info(
        "projector_startup",
        structures=len(service.catalog),
        sources=service.catalog.sources(),
    )
    yield
    log.info("projector_shutdown")


def create_app() -> FastAPI:
    app = FastAPI(
        title="Multiblock Projector",
        description="Parametric multiblock structures, projection and build validation",
        version="0.1.0",
        lifespan=lifespan,
    )

    # CORS: allow any local preview client
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_error_handlers(app)
    app.include_router(router, prefix="/api")

    return app


app = create_app()
