"""
Global error handlers.

Converts projector errors (and anything unhandled) into structured JSON
error bodies. Registered on the FastAPI app in main.py.
"""

from __future__ import annotations

import traceback

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from projector.utils.logger import get_logger

log = get_logger(__name__)


class StructureNotFoundError(KeyError):
    """Raised when a structure id is not registered in the catalog."""

    def __str__(self) -> str:
        return str(self.args[0]) if self.args else ""


class InvalidInstanceError(ValueError):
    """Raised when an instance or world snapshot cannot be projected."""


def _error_body(code: str, message: str, detail: str | None = None) -> dict:
    body = {"error": {"code": code, "message": message}}
    if detail:
        body["error"]["detail"] = detail
    return body


def register_error_handlers(app: FastAPI) -> None:
    """Register all exception handlers on the application."""

    @app.exception_handler(StructureNotFoundError)
    async def structure_not_found_handler(
        req: Request, exc: StructureNotFoundError
    ) -> JSONResponse:
        log.warning("structure_not_found", path=str(req.url), structure_id=str(exc))
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content=_error_body(
                code="STRUCTURE_NOT_FOUND",
                message=f"Structure not found: {exc}",
            ),
        )

    @app.exception_handler(InvalidInstanceError)
    async def invalid_instance_handler(
        req: Request, exc: InvalidInstanceError
    ) -> JSONResponse:
        log.warning("invalid_instance", path=str(req.url), error=str(exc))
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content=_error_body(
                code="INVALID_INSTANCE",
                message=str(exc),
            ),
        )

    @app.exception_handler(Exception)
    async def generic_handler(req: Request, exc: Exception) -> JSONResponse:
        log.error(
            "unhandled_exception",
            path=str(req.url),
            error=str(exc),
            exc_type=type(exc).__name__,
            traceback=traceback.format_exc(),
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=_error_body(
                code="INTERNAL_SERVER_ERROR",
                message="An unexpected error occurred.",
            ),
        )
