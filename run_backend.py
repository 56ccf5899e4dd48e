#!/usr/bin/env python3
"""Start the Multiblock Projector API server."""

import uvicorn

from projector.config import get_settings

if __name__ == "__main__":
    settings = get_settings()
    uvicorn.run(
        "projector.api.main:app",
        host=settings.host,
        port=settings.port,
        reload=True,
        reload_dirs=["projector"],
    )
