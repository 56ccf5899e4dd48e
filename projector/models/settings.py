"""Projector tool state: the small flat record persisted with the tool."""

from __future__ import annotations
from enum import Enum
from typing import TYPE_CHECKING, Any
from pydantic import BaseModel

from .geometry import ORIGIN, BlockPos, Rotation
from .instance import StructureInstance

if TYPE_CHECKING:
    from projector.structures.base import StructureDefinition


class ProjectorMode(str, Enum):
    NOTHING_SELECTED = "nothing_selected"
    MULTIBLOCK_SELECTION = "multiblock_selection"
    PROJECTION = "projection"
    BUILDING = "building"


_MODES = list(ProjectorMode)


class ProjectorSettings(BaseModel):
    """User-adjustable projector state."""
    mode: ProjectorMode = ProjectorMode.NOTHING_SELECTED
    structure_id: str | None = None
    size_index: int = 0
    rotation: Rotation = Rotation.NONE
    mirror: bool = False
    placed: bool = False
    pos: BlockPos | None = None

    def rotate_cw(self) -> None:
        self.rotation = self.rotation.rotated(1)

    def rotate_ccw(self) -> None:
        self.rotation = self.rotation.rotated(-1)

    def flip(self) -> None:
        self.mirror = not self.mirror

    def switch_mode(self) -> None:
        self.mode = _MODES[(_MODES.index(self.mode) + 1) % len(_MODES)]

    def select(self, definition: StructureDefinition) -> None:
        """Pick a structure and enter projection mode at its default size."""
        self.structure_id = definition.get_id()
        self.size_index = definition.default_size_index()
        self.mode = ProjectorMode.PROJECTION

    def increase_size(self, definition: StructureDefinition) -> bool:
        new_index = definition.clamp_size_index(self.size_index + 1)
        changed = new_index != self.size_index
        self.size_index = new_index
        return changed

    def decrease_size(self, definition: StructureDefinition) -> bool:
        new_index = definition.clamp_size_index(self.size_index - 1)
        changed = new_index != self.size_index
        self.size_index = new_index
        return changed

    def to_instance(
        self, definition: StructureDefinition, pos: BlockPos | None = None,
    ) -> StructureInstance:
        """The instance these settings project at `pos` (default: the stored position)."""
        origin = pos if pos is not None else self.pos
        return StructureInstance(
            structure_id=definition.get_id(),
            size=definition.get_size(self.size_index),
            rotation=self.rotation,
            mirror=self.mirror,
            origin=origin if origin is not None else ORIGIN,
        )

    def reset(self) -> None:
        """Return to nothing-selected; the chosen structure is kept."""
        self.mode = ProjectorMode.NOTHING_SELECTED
        self.pos = None
        self.placed = False

    # ── Flat record ─────────────────────────────────────────────────────────

    def to_record(self) -> dict[str, Any]:
        record: dict[str, Any] = {
            "mode": _MODES.index(self.mode),
            "rotation": self.rotation.value,
            "mirror": self.mirror,
            "placed": self.placed,
            "size": self.size_index,
        }
        if self.structure_id is not None:
            record["multiblock"] = self.structure_id
        if self.pos is not None:
            record["pos"] = {"x": self.pos.x, "y": self.pos.y, "z": self.pos.z}
        return record

    @classmethod
    def from_record(cls, record: dict[str, Any] | None) -> ProjectorSettings:
        """Decode a record; malformed fields fall back to defaults."""
        if not record:
            return cls()

        mode_index = _as_int(record.get("mode"), 0)
        mode = _MODES[max(0, min(mode_index, len(_MODES) - 1))]

        rotation_value = _as_int(record.get("rotation"), 0)
        rotation = Rotation(rotation_value) if 0 <= rotation_value <= 3 else Rotation.NONE

        structure_id = record.get("multiblock")
        if not isinstance(structure_id, str) or not structure_id:
            structure_id = None

        pos = None
        raw_pos = record.get("pos")
        if isinstance(raw_pos, dict):
            pos = BlockPos(
                x=_as_int(raw_pos.get("x"), 0),
                y=_as_int(raw_pos.get("y"), 0),
                z=_as_int(raw_pos.get("z"), 0),
            )

        return cls(
            mode=mode,
            structure_id=structure_id,
            size_index=max(0, _as_int(record.get("size"), 0)),
            rotation=rotation,
            mirror=bool(record.get("mirror", False)),
            placed=bool(record.get("placed", False)),
            pos=pos,
        )


def _as_int(value: object, default: int) -> int:
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    try:
        return int(str(value))
    except (TypeError, ValueError):
        return default
