"""Built-in test structures, registered when no content source is loaded."""

from __future__ import annotations

from projector.models import Blueprint, Direction, Extent, extent, token
from projector.structures.base import (
    BlueprintBuilder, FixedStructure, StructureDefinition, VariableStructure,
    is_edge, presets,
)

IRON_BLOCK = token("minecraft:iron_block")
STONE_BRICKS = token("minecraft:stone_bricks")
SMOOTH_STONE = token("minecraft:smooth_stone")
BRICK_WALL = token("minecraft:stone_brick_wall")


class BuiltinStructure:
    source = "multiblockprojector"
    category = "test"


class SingleBlock(BuiltinStructure, FixedStructure):
    preview_scale = 2.0
    fixed_size = extent(1, 1, 1)

    def get_id(self) -> str:
        return "multiblockprojector:single_block"

    def get_name(self) -> str:
        return "Single Block"

    def layout(self) -> Blueprint:
        builder = BlueprintBuilder()
        builder.place(0, 0, 0, IRON_BLOCK)
        return builder.build()


class FrameCube(BuiltinStructure, VariableStructure):
    """Stone brick cube frame: only the twelve edges are filled."""

    size_presets = presets(
        ("small", 3, 3, 3),
        ("medium", 5, 5, 5),
        ("large", 7, 7, 7),
    )

    def get_id(self) -> str:
        return "multiblockprojector:frame_cube"

    def get_name(self) -> str:
        return "Frame Cube"

    def layout_at(self, size: Extent, builder: BlueprintBuilder) -> None:
        for x in range(size.x):
            for y in range(size.y):
                for z in range(size.z):
                    if is_edge(x, y, z, size):
                        builder.place(x, y, z, STONE_BRICKS)


class PistonPress(BuiltinStructure, FixedStructure):
    """
    Small press with a downward piston over a conveyor.

    The furnace facing north must match exactly; the piston and the conveyor
    are accepted in any orientation.
    """

    fixed_size = extent(3, 2, 3)

    def get_id(self) -> str:
        return "multiblockprojector:piston_press"

    def get_name(self) -> str:
        return "Piston Press"

    def layout(self) -> Blueprint:
        builder = BlueprintBuilder()
        for x in range(3):
            for z in range(3):
                builder.place(x, 0, z, SMOOTH_STONE)
        builder.place(1, 0, 0, token("minecraft:furnace", Direction.NORTH))
        builder.place(1, 0, 1, token("immersiveengineering:conveyor_basic", Direction.SOUTH))

        for x, z in ((0, 0), (2, 0), (0, 2), (2, 2)):
            builder.place(x, 1, z, BRICK_WALL)
        builder.place(1, 1, 1, token("minecraft:piston", Direction.DOWN))
        return builder.build()


def builtin_structures() -> list[StructureDefinition]:
    return [SingleBlock(), FrameCube(), PistonPress()]
