"""
Projector configuration.

All settings are loaded from PROJECTOR_* environment variables (or a .env
file) with defaults suited to a single local host.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="PROJECTOR_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ─── Content sources ─────────────────────────────────────────────────────
    # Block ids the host registry exposes; a source counts as loaded when any
    # id in its namespace is present.
    known_blocks: list[str] = []
    # Sources registered with fallback content even when not loaded
    forced_sources: list[str] = []
    # Built-in test structures, only used when no external source registers
    register_test_structures: bool = True

    # ─── Projection ──────────────────────────────────────────────────────────
    cleanup_radius: float = 64.0
    cycle_interval_ms: int = 1000

    # ─── World snapshots (HTTP facade) ───────────────────────────────────────
    world_min_y: int = -64
    world_max_y: int = 319
    world_border: int = 29_999_984

    # ─── Logging ─────────────────────────────────────────────────────────────
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    # ─── Server ──────────────────────────────────────────────────────────────
    host: str = "0.0.0.0"
    port: int = 8000


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached singleton Settings instance."""
    return Settings()
