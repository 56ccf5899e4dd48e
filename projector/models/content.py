"""Content tokens: what occupies a single grid cell."""

from __future__ import annotations
from enum import Enum
from pydantic import BaseModel, ConfigDict, model_validator

from .geometry import Direction


class TokenCategory(str, Enum):
    MECHANISM = "mechanism"   # e.g. pistons: any facing is accepted
    CONVEYOR = "conveyor"     # e.g. conveyor belts: any facing is accepted


DIRECTION_INSENSITIVE: frozenset[TokenCategory] = frozenset({
    TokenCategory.MECHANISM,
    TokenCategory.CONVEYOR,
})

EMPTY_BLOCKS = frozenset({"minecraft:air", "minecraft:cave_air", "minecraft:void_air"})


class ContentToken(BaseModel):
    """
    Opaque, comparable identifier for the content of one cell.

    `block` is the base identity used for relaxed matching. `facing` is the
    free orientation attribute rewritten by the geometry transform, and
    `properties` holds any other state that must match exactly.
    """
    model_config = ConfigDict(frozen=True)

    block: str
    facing: Direction | None = None
    category: TokenCategory | None = None
    properties: tuple[tuple[str, str], ...] = ()

    @model_validator(mode="before")
    @classmethod
    def _derive_category(cls, data: object) -> object:
        # Category follows from the block id unless given explicitly
        if isinstance(data, dict) and data.get("category") is None and isinstance(data.get("block"), str):
            data = {**data, "category": categorize(data["block"])}
        if isinstance(data, dict) and isinstance(data.get("properties"), dict):
            data = {**data, "properties": tuple(sorted(data["properties"].items()))}
        return data

    @property
    def is_empty(self) -> bool:
        return self.block in EMPTY_BLOCKS

    @property
    def base_identity(self) -> str:
        return self.block

    @property
    def orientation(self) -> Direction | None:
        return self.facing

    @property
    def namespace(self) -> str:
        return self.block.split(":", 1)[0] if ":" in self.block else "minecraft"

    def with_orientation(self, facing: Direction | None) -> ContentToken:
        if facing == self.facing:
            return self
        return self.model_copy(update={"facing": facing})

    def same_base(self, other: ContentToken) -> bool:
        return self.block == other.block

    def __str__(self) -> str:
        state = [f"{k}={v}" for k, v in self.properties]
        if self.facing is not None:
            state.insert(0, f"facing={self.facing.value}")
        return f"{self.block}[{','.join(state)}]" if state else self.block


def categorize(block: str) -> TokenCategory | None:
    """Assign the relaxed-matching category of a block id, if any."""
    if "piston" in block:
        return TokenCategory.MECHANISM
    if block.startswith("immersiveengineering:") and "conveyor" in block:
        return TokenCategory.CONVEYOR
    return None


def token(block: str, facing: Direction | None = None, **properties: str) -> ContentToken:
    return ContentToken(
        block=block,
        facing=facing,
        category=categorize(block),
        properties=tuple(sorted(properties.items())),
    )


AIR = ContentToken(block="minecraft:air")
