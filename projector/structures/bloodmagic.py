"""
Blood Magic altar tiers.

Every tier is anchored on the altar itself (local origin), so rings, pillars
and capstones of a lower tier sit at the same local coordinates in every
higher tier. Rune rings are cycling positions: tiers 1-2 accept basic runes,
tier 3 and up accept upgraded runes as well.
"""

from __future__ import annotations

from projector.core.sources import Palette, PaletteSpec
from projector.models import Blueprint, CyclingSlot, extent
from projector.structures.base import BlueprintBuilder, FixedStructure, StructureDefinition

BASIC_RUNES = {
    "rune_blank": "bloodmagic:blankrune",
    "rune_speed": "bloodmagic:speedrune",
    "rune_sacrifice": "bloodmagic:sacrificerune",
    "rune_self_sacrifice": "bloodmagic:selfsacrificerune",
    "rune_capacity": "bloodmagic:altarcapacityrune",
    "rune_capacity_augmented": "bloodmagic:bettercapacityrune",
    "rune_charging": "bloodmagic:chargingrune",
    "rune_acceleration": "bloodmagic:accelerationrune",
    "rune_dislocation": "bloodmagic:dislocationrune",
    "rune_orb": "bloodmagic:orbcapacityrune",
    "rune_efficiency": "bloodmagic:efficiencyrune",
}

# No upgraded blank rune exists
UPGRADED_RUNES = {
    f"{key}_2": f"{block_id}2"
    for key, block_id in BASIC_RUNES.items()
    if key != "rune_blank"
}

BLOODMAGIC_PALETTE = PaletteSpec(
    source="bloodmagic",
    namespace="bloodmagic",
    blocks={
        "altar": "bloodmagic:altar",
        "pillar": "bloodmagic:bloodstonebrick",
        "glowstone": "minecraft:glowstone",
        "bloodstone": "bloodmagic:largebloodstonebrick",
        "hellforged": "bloodmagic:dungeon_metal",
        "crystal": "bloodmagic:crystal_cluster",
        **BASIC_RUNES,
        **UPGRADED_RUNES,
    },
    fallbacks={
        "altar": "minecraft:obsidian",
        "pillar": "minecraft:stone_bricks",
        "glowstone": "minecraft:glowstone",
        "bloodstone": "minecraft:red_nether_bricks",
        "hellforged": "minecraft:netherite_block",
        "crystal": "minecraft:amethyst_block",
        "rune_blank": "minecraft:nether_bricks",
    },
    groups={
        "basic_runes": list(BASIC_RUNES),
        "all_runes": list(BASIC_RUNES) + list(UPGRADED_RUNES),
    },
    group_fallbacks={
        "basic_runes": [
            "minecraft:nether_bricks",
            "minecraft:red_nether_bricks",
            "minecraft:chiseled_nether_bricks",
            "minecraft:cracked_nether_bricks",
            "minecraft:polished_blackstone_bricks",
        ],
        "all_runes": [
            "minecraft:nether_bricks",
            "minecraft:red_nether_bricks",
            "minecraft:chiseled_nether_bricks",
            "minecraft:cracked_nether_bricks",
            "minecraft:polished_blackstone_bricks",
            "minecraft:cracked_polished_blackstone_bricks",
            "minecraft:chiseled_polished_blackstone",
        ],
    },
)

TIER_NAMES = {
    1: "Weak",
    2: "Apprentice",
    3: "Mage",
    4: "Master",
    5: "Archmage",
    6: "Transcendent",
}

TIER_SIZES = {
    1: extent(1, 1, 1),
    2: extent(3, 2, 3),
    3: extent(7, 4, 7),
    4: extent(11, 6, 11),
    5: extent(17, 7, 17),
    6: extent(23, 9, 23),
}

TIER_SCALES = {1: 2.0, 2: 1.5, 3: 0.7, 4: 0.5, 5: 0.35, 6: 0.25}

# tier -> (radius, half span, height below the altar)
RUNE_RINGS = {
    2: (1, 1, -1),
    3: (3, 2, -2),
    4: (5, 3, -3),
    5: (8, 6, -4),
    6: (11, 9, -5),
}

# tier -> (corner offset, pillar bottom dy, pillar top dy, capstone key)
PILLARS = {
    3: (3, -1, 0, "glowstone"),
    4: (5, -2, 1, "bloodstone"),
    6: (11, -4, 2, "crystal"),
}

# Tier 5 has no pillars, only capstones level with its rune ring
HELLFORGED_CAPS_Y = -4
HELLFORGED_CAPS_OFFSET = 8


def ring_positions(radius: int, span: int, dy: int) -> list[tuple[int, int, int]]:
    """Cells of one square rune ring around the altar column."""
    cells: list[tuple[int, int, int]] = []
    seen: set[tuple[int, int, int]] = set()
    for i in range(-span, span + 1):
        for cell in ((i, dy, radius), (i, dy, -radius), (radius, dy, i), (-radius, dy, i)):
            if cell not in seen:
                seen.add(cell)
                cells.append(cell)
    return cells


def _corners(offset: int) -> list[tuple[int, int]]:
    return [(offset, offset), (offset, -offset), (-offset, offset), (-offset, -offset)]


class AltarTier(FixedStructure):
    """One tier of the blood altar, including everything lower tiers need."""

    source = "bloodmagic"
    category = "altar"

    def __init__(self, tier: int, palette: Palette) -> None:
        if tier not in TIER_SIZES:
            raise ValueError(f"altar tier must be 1-6, got {tier}")
        self.tier = tier
        self.palette = palette
        self.fixed_size = TIER_SIZES[tier]
        self.preview_scale = TIER_SCALES[tier]
        self.cycling = tier >= 2
        super().__init__()

    def get_id(self) -> str:
        return f"bloodmagic:altar_tier_{self.tier}"

    def get_name(self) -> str:
        return f"Blood Altar - Tier {self.tier} ({TIER_NAMES[self.tier]})"

    def rune_slot(self) -> CyclingSlot:
        group = "basic_runes" if self.tier <= 2 else "all_runes"
        return CyclingSlot(
            acceptable=tuple(self.palette.group(group)),
            default=self.palette["rune_blank"],
        )

    def layout(self) -> Blueprint:
        p = self.palette
        builder = BlueprintBuilder()
        builder.place(0, 0, 0, p["altar"])

        slot = self.rune_slot()
        for tier in range(2, self.tier + 1):
            if tier in RUNE_RINGS:
                for x, y, z in ring_positions(*RUNE_RINGS[tier]):
                    builder.place_cycling(x, y, z, slot)

            if tier in PILLARS:
                offset, bottom, top, cap = PILLARS[tier]
                for x, z in _corners(offset):
                    for y in range(bottom, top + 1):
                        builder.place(x, y, z, p["pillar"])
                    builder.place(x, top + 1, z, p[cap])
            elif tier == 5:
                for x, z in _corners(HELLFORGED_CAPS_OFFSET):
                    builder.place(x, HELLFORGED_CAPS_Y, z, p["hellforged"])

        return builder.build()


def altar_structures(palette: Palette) -> list[StructureDefinition]:
    return [AltarTier(tier, palette) for tier in sorted(TIER_SIZES)]
