"""Structure layout models: placements, size presets, cycling slots."""

from __future__ import annotations
from typing import Any
from pydantic import BaseModel, ConfigDict, model_validator

from .content import ContentToken
from .geometry import BlockPos, Extent


class Placement(BaseModel):
    """One expected cell of a structure, relative to the structure origin."""
    model_config = ConfigDict(frozen=True)

    pos: BlockPos
    token: ContentToken
    nbt: dict[str, Any] | None = None  # Opaque metadata handed to the host on placement


class SizePreset(BaseModel):
    model_config = ConfigDict(frozen=True)

    label: str
    size: Extent


class CyclingSlot(BaseModel):
    """A position where any of several tokens is acceptable."""
    model_config = ConfigDict(frozen=True)

    acceptable: tuple[ContentToken, ...]
    default: ContentToken

    @model_validator(mode="before")
    @classmethod
    def _include_default(cls, data: object) -> object:
        # The default token is always one of the acceptable tokens
        if isinstance(data, dict):
            default = data.get("default")
            acceptable = tuple(data.get("acceptable") or ())
            if isinstance(default, ContentToken) and not any(
                isinstance(t, ContentToken) and t.same_base(default) for t in acceptable
            ):
                data = {**data, "acceptable": (default,) + acceptable}
        return data

    def accepts(self, candidate: ContentToken) -> bool:
        return any(t.same_base(candidate) for t in self.acceptable)

    def token_at(self, index: int) -> ContentToken:
        return self.acceptable[index % len(self.acceptable)]


class Blueprint(BaseModel):
    """
    Result of generating a structure at one size.

    Each call to a generator produces a new Blueprint with its own placement
    list and cycling map; nothing is shared between callers.
    """
    placements: list[Placement] = []
    cycling: dict[BlockPos, CyclingSlot] = {}

    def slot_at(self, local: BlockPos) -> CyclingSlot | None:
        return self.cycling.get(local)

    def positions(self) -> set[BlockPos]:
        return {p.pos for p in self.placements}

    def copy_fresh(self) -> Blueprint:
        return Blueprint(
            placements=[p.model_copy(deep=True) for p in self.placements],
            cycling=dict(self.cycling),
        )

    def __len__(self) -> int:
        return len(self.placements)
