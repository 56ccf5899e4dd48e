"""Mekanism multiblocks: tanks, matrices, boilers, turbines and reactors.

Most of these are hollow boxes classified cell by cell (edge / face /
interior) with ports, valves and controllers on specific face rows.
"""

from __future__ import annotations

from projector.core.sources import Palette, PaletteSpec
from projector.models import Blueprint, ContentToken, Extent, extent
from projector.structures.base import (
    BlueprintBuilder, CellKind, FixedStructure, StructureDefinition,
    VariableStructure, classify, is_edge, is_interior, presets,
)


MEKANISM_PALETTE = PaletteSpec(
    source="mekanism",
    namespace="mekanism",
    blocks={
        "dynamic_tank": "mekanism:dynamic_tank",
        "dynamic_valve": "mekanism:dynamic_valve",
        "induction_casing": "mekanism:induction_casing",
        "induction_port": "mekanism:induction_port",
        "induction_cell": "mekanism:basic_induction_cell",
        "induction_provider": "mekanism:basic_induction_provider",
        "boiler_casing": "mekanism:boiler_casing",
        "boiler_valve": "mekanism:boiler_valve",
        "pressure_disperser": "mekanism:pressure_disperser",
        "superheating_element": "mekanism:superheating_element",
        "evaporation_block": "mekanism:thermal_evaporation_block",
        "evaporation_controller": "mekanism:thermal_evaporation_controller",
        "evaporation_valve": "mekanism:thermal_evaporation_valve",
        "sps_casing": "mekanism:sps_casing",
        "sps_port": "mekanism:sps_port",
        "supercharged_coil": "mekanism:supercharged_coil",
        "structural_glass": "mekanism:structural_glass",
    },
    fallbacks={
        "dynamic_tank": "minecraft:iron_block",
        "dynamic_valve": "minecraft:iron_block",
        "induction_casing": "minecraft:iron_block",
        "induction_port": "minecraft:iron_block",
        "induction_cell": "minecraft:diamond_block",
        "induction_provider": "minecraft:emerald_block",
        "boiler_casing": "minecraft:iron_block",
        "boiler_valve": "minecraft:iron_block",
        "pressure_disperser": "minecraft:copper_block",
        "superheating_element": "minecraft:redstone_block",
        "evaporation_block": "minecraft:iron_block",
        "evaporation_controller": "minecraft:gold_block",
        "evaporation_valve": "minecraft:iron_block",
        "sps_casing": "minecraft:iron_block",
        "sps_port": "minecraft:iron_block",
        "supercharged_coil": "minecraft:lapis_block",
        "structural_glass": "minecraft:glass",
    },
)

GENERATORS_PALETTE = PaletteSpec(
    source="mekanismgenerators",
    namespace="mekanismgenerators",
    blocks={
        "fission_casing": "mekanismgenerators:fission_reactor_casing",
        "fission_port": "mekanismgenerators:fission_reactor_port",
        "fission_logic_adapter": "mekanismgenerators:fission_reactor_logic_adapter",
        "fission_fuel_assembly": "mekanismgenerators:fission_fuel_assembly",
        "fission_control_rod": "mekanismgenerators:control_rod_assembly",
        "turbine_casing": "mekanismgenerators:turbine_casing",
        "turbine_valve": "mekanismgenerators:turbine_valve",
        "turbine_vent": "mekanismgenerators:turbine_vent",
        "turbine_rotor": "mekanismgenerators:turbine_rotor",
        "rotational_complex": "mekanismgenerators:rotational_complex",
        "electromagnetic_coil": "mekanismgenerators:electromagnetic_coil",
        "saturating_condenser": "mekanismgenerators:saturating_condenser",
        "fusion_frame": "mekanismgenerators:fusion_reactor_frame",
        "fusion_port": "mekanismgenerators:fusion_reactor_port",
        "fusion_controller": "mekanismgenerators:fusion_reactor_controller",
        "laser_focus_matrix": "mekanismgenerators:laser_focus_matrix",
        "reactor_glass": "mekanismgenerators:reactor_glass",
    },
    fallbacks={
        "fission_casing": "minecraft:iron_block",
        "fission_port": "minecraft:iron_block",
        "fission_logic_adapter": "minecraft:iron_block",
        "fission_fuel_assembly": "minecraft:coal_block",
        "fission_control_rod": "minecraft:redstone_block",
        "turbine_casing": "minecraft:iron_block",
        "turbine_valve": "minecraft:iron_block",
        "turbine_vent": "minecraft:iron_block",
        "turbine_rotor": "minecraft:coal_block",
        "rotational_complex": "minecraft:gold_block",
        "electromagnetic_coil": "minecraft:copper_block",
        "saturating_condenser": "minecraft:lapis_block",
        "fusion_frame": "minecraft:iron_block",
        "fusion_port": "minecraft:iron_block",
        "fusion_controller": "minecraft:gold_block",
        "laser_focus_matrix": "minecraft:diamond_block",
        "reactor_glass": "minecraft:glass",
    },
)

# Shared by most tank-like structures
STANDARD_PRESETS = presets(
    ("small", 3, 3, 3),
    ("small_medium", 6, 6, 6),
    ("medium", 9, 9, 9),
    ("medium_large", 13, 13, 13),
    ("large", 18, 18, 18),
)


class MekanismStructure(VariableStructure):
    source = "mekanism"
    preview_scale = 0.8

    def __init__(self, palette: Palette) -> None:
        self.palette = palette


class MekanismFixedStructure(FixedStructure):
    source = "mekanism"
    preview_scale = 0.8

    def __init__(self, palette: Palette) -> None:
        # layout() reads the palette, so it must be bound first
        self.palette = palette
        super().__init__()


# ============================================
# Dynamic Tank
# ============================================

class DynamicTank(MekanismStructure):
    """Hollow tank: casing edges and floor, two valves, glass walls."""

    category = "storage"
    size_presets = STANDARD_PRESETS

    def get_id(self) -> str:
        return "mekanism:dynamic_tank"

    def get_name(self) -> str:
        return "Dynamic Tank"

    def layout_at(self, size: Extent, builder: BlueprintBuilder) -> None:
        p = self.palette
        center_x = size.x // 2
        for x in range(size.x):
            for y in range(size.y):
                for z in range(size.z):
                    kind = classify(x, y, z, size)
                    if kind is CellKind.INTERIOR:
                        continue
                    if kind is CellKind.EDGE or y == 0:
                        block = p["dynamic_tank"]
                    elif y == 1 and x == center_x and z in (0, size.z - 1):
                        block = p["dynamic_valve"]
                    else:
                        block = p["structural_glass"]
                    builder.place(x, y, z, block)


# ============================================
# Induction Matrix
# ============================================

class InductionMatrix(MekanismStructure):
    """Casing shell filled with cells, one provider at the first interior cell."""

    category = "power"
    # Minimum 4x4x4 so the interior holds both cells and the provider
    size_presets = presets(
        ("small", 4, 4, 4),
        ("small_medium", 6, 6, 6),
        ("medium", 9, 9, 9),
        ("medium_large", 13, 13, 13),
        ("large", 18, 18, 18),
    )

    def get_id(self) -> str:
        return "mekanism:induction_matrix"

    def get_name(self) -> str:
        return "Induction Matrix"

    def layout_at(self, size: Extent, builder: BlueprintBuilder) -> None:
        p = self.palette
        center_x = size.x // 2
        for x in range(size.x):
            for y in range(size.y):
                for z in range(size.z):
                    kind = classify(x, y, z, size)
                    if kind is CellKind.INTERIOR:
                        core = (x, y, z) == (1, 1, 1)
                        block = p["induction_provider"] if core else p["induction_cell"]
                    elif kind is CellKind.EDGE or y == 0:
                        block = p["induction_casing"]
                    elif y == 1 and x == center_x and z in (0, size.z - 1):
                        block = p["induction_port"]
                    else:
                        block = p["structural_glass"]
                    builder.place(x, y, z, block)


# ============================================
# Thermoelectric Boiler
# ============================================

class ThermoelectricBoiler(MekanismStructure):
    """
    Boiler with a steam cavity on top and a water cavity below.

    One full interior layer of pressure dispersers sits one layer below the
    top interior layer, the bottom interior layer is a solid floor of
    superheating elements, and everything between is left empty.
    """

    category = "processing"
    preview_scale = 0.7
    size_presets = presets(
        ("small", 3, 4, 3),
        ("small_medium", 6, 7, 6),
        ("medium", 9, 10, 9),
        ("medium_large", 13, 14, 13),
        ("large", 18, 18, 18),
    )

    def get_id(self) -> str:
        return "mekanism:thermoelectric_boiler"

    def get_name(self) -> str:
        return "Thermoelectric Boiler"

    @staticmethod
    def disperser_layer(height: int) -> int:
        # At least one water layer below the dispersers
        return max(height - 3, 2)

    def layout_at(self, size: Extent, builder: BlueprintBuilder) -> None:
        p = self.palette
        center_x, center_z = size.x // 2, size.z // 2
        disperser_y = self.disperser_layer(size.y)

        for x in range(size.x):
            for y in range(size.y):
                for z in range(size.z):
                    if is_interior(x, y, z, size):
                        if y == disperser_y:
                            builder.place(x, y, z, p["pressure_disperser"])
                        elif y == 1 and y < disperser_y:
                            builder.place(x, y, z, p["superheating_element"])
                        continue

                    if is_edge(x, y, z, size) or y == 0:
                        block = p["boiler_casing"]
                    elif y == 1 and x == center_x and z in (0, size.z - 1):
                        # water in (front) and heated coolant out (back)
                        block = p["boiler_valve"]
                    elif y == size.y - 2 and x == 0 and z == center_z:
                        # steam out, high on the left side
                        block = p["boiler_valve"]
                    else:
                        block = p["structural_glass"]
                    builder.place(x, y, z, block)


# ============================================
# Industrial Turbine
# ============================================

# (width, minimum height) -> optimal rotor count
_OPTIMAL_ROTORS: dict[tuple[int, int], int] = {
    (5, 9): 4,
    (7, 13): 6,
    (9, 17): 8,
    (11, 18): 9,
    (13, 18): 9,
    (15, 18): 10,
    (17, 18): 10,
}


def turbine_rotor_count(width: int, height: int) -> int:
    """Rotor shaft length for a turbine of the given width and height."""
    for (w, min_height), rotors in _OPTIMAL_ROTORS.items():
        if width == w and height >= min_height:
            return rotors
    # Leave room for disperser, coils, condensers and the roof
    interior_width = width - 2
    max_rotors = 2 * interior_width - 1
    return max(0, min(max_rotors, height - 5))


def turbine_coil_count(rotors: int) -> int:
    # Two blades per rotor, four blades per coil
    blades = rotors * 2
    return (blades + 3) // 4


class IndustrialTurbine(MekanismStructure):
    """
    Rotor column with a rotational complex, dispersers, coils and condensers.

    y=0                       floor casing
    y=1..rotors               rotor shaft (centre), open blade space around it
    y=rotors+1                rotational complex (centre) + disperser layer
    y=rotors+2..+coils        electromagnetic coils (centre), condensers elsewhere
    above                     condensers up to the roof, vents on the upper walls
    """

    source = "mekanismgenerators"
    category = "power"
    preview_scale = 0.6
    # Odd widths only
    size_presets = presets(
        ("small", 5, 9, 5),
        ("small_medium", 7, 13, 7),
        ("medium", 9, 17, 9),
        ("medium_large", 13, 18, 13),
        ("large", 17, 18, 17),
    )

    def get_id(self) -> str:
        return "mekanism:industrial_turbine"

    def get_name(self) -> str:
        return "Industrial Turbine"

    def layout_at(self, size: Extent, builder: BlueprintBuilder) -> None:
        p = self.palette
        center_x, center_z = size.x // 2, size.z // 2
        rotors = turbine_rotor_count(size.x, size.y)
        coils = turbine_coil_count(rotors)

        disperser_y = rotors + 1
        coil_start = rotors + 2
        coil_end = coil_start + coils - 1

        for x in range(size.x):
            for y in range(size.y):
                for z in range(size.z):
                    kind = classify(x, y, z, size)

                    if kind is CellKind.INTERIOR:
                        if x == center_x and z == center_z:
                            if 1 <= y <= rotors:
                                builder.place(x, y, z, p["turbine_rotor"])
                            elif y == disperser_y:
                                builder.place(x, y, z, p["rotational_complex"])
                            elif coil_start <= y <= coil_end:
                                builder.place(x, y, z, p["electromagnetic_coil"])
                        elif y == disperser_y:
                            builder.place(x, y, z, p["pressure_disperser"])
                        elif disperser_y < y < size.y - 1:
                            builder.place(x, y, z, p["saturating_condenser"])
                        continue

                    if kind is CellKind.EDGE or y == 0:
                        block = p["turbine_casing"]
                    elif y == size.y - 1 or y >= disperser_y:
                        block = p["turbine_vent"]
                    elif y == 1 and x == center_x and z in (0, size.z - 1):
                        block = p["turbine_valve"]
                    else:
                        block = p["structural_glass"]
                    builder.place(x, y, z, block)


# ============================================
# Thermal Evaporation Plant
# ============================================

class ThermalEvaporationPlant(MekanismStructure):
    """Fixed 4x4 tower of variable height, ports on the first wall row."""

    category = "processing"
    size_presets = presets(
        ("small", 4, 3, 4),
        ("small_medium", 4, 6, 4),
        ("medium", 4, 9, 4),
        ("medium_large", 4, 14, 4),
        ("large", 4, 18, 4),
    )

    def get_id(self) -> str:
        return "mekanism:thermal_evaporation_plant"

    def get_name(self) -> str:
        return "Thermal Evaporation Plant"

    def layout_at(self, size: Extent, builder: BlueprintBuilder) -> None:
        p = self.palette
        for x in range(4):
            for y in range(size.y):
                for z in range(4):
                    if y == 0:
                        builder.place(x, y, z, p["evaporation_block"])
                        continue
                    if x in (1, 2) and z in (1, 2):
                        continue  # hollow core, open at the top

                    if y == 1 and (x, z) == (1, 0):
                        block = p["evaporation_controller"]
                    elif y == 1 and (x, z) in ((2, 0), (1, 3)):
                        block = p["evaporation_valve"]
                    else:
                        block = p["evaporation_block"]
                    builder.place(x, y, z, block)


# ============================================
# Supercritical Phase Shifter
# ============================================

# 0 = outside, 1 = frame (casing), 2 = side (glass or port)
SPS_GRID: tuple[tuple[int, ...], ...] = (
    (0, 0, 1, 1, 1, 0, 0),
    (0, 1, 2, 2, 2, 1, 0),
    (1, 2, 2, 2, 2, 2, 1),
    (1, 2, 2, 2, 2, 2, 1),
    (1, 2, 2, 2, 2, 2, 1),
    (0, 1, 2, 2, 2, 1, 0),
    (0, 0, 1, 1, 1, 0, 0),
)

# Coils sit just inside each face's centre port
_SPS_COILS = {(1, 3, 3), (5, 3, 3), (3, 3, 1), (3, 3, 5), (3, 5, 3), (3, 1, 3)}


class SupercriticalPhaseShifter(MekanismFixedStructure):
    category = "processing"
    preview_scale = 0.6
    fixed_size = extent(7, 7, 7)

    def get_id(self) -> str:
        return "mekanism:sps"

    def get_name(self) -> str:
        return "Supercritical Phase Shifter"

    def layout(self) -> Blueprint:
        builder = BlueprintBuilder()
        for x in range(7):
            for y in range(7):
                for z in range(7):
                    if z == 0:
                        block = self._face(x, y, front=True)
                    elif z == 6:
                        block = self._face(x, y)
                    elif x in (0, 6):
                        block = self._face(z, y)
                    elif y in (0, 6):
                        block = self._face(x, z)
                    elif (x, y, z) in _SPS_COILS:
                        block = self.palette["supercharged_coil"]
                    else:
                        block = None
                    builder.place(x, y, z, block)
        return builder.build()

    def _face(self, a: int, b: int, front: bool = False) -> ContentToken | None:
        cell = SPS_GRID[b][a]
        if cell == 0:
            return None
        if cell == 1:
            return self.palette["sps_casing"]
        if a == 3 and b == 3:
            return self.palette["sps_port"]
        # Two extra energy ports near the top of the front face
        if front and b == 1 and a in (2, 4):
            return self.palette["sps_port"]
        return self.palette["structural_glass"]


# ============================================
# Fission Reactor
# ============================================

class FissionReactor(MekanismStructure):
    """Glass-walled reactor; large enough cores get fuel columns and rods."""

    source = "mekanismgenerators"
    category = "power"
    size_presets = presets(
        ("small", 3, 4, 3),
        ("small_medium", 6, 7, 6),
        ("medium", 9, 11, 9),
        ("medium_large", 13, 14, 13),
        ("large", 18, 18, 18),
    )

    def get_id(self) -> str:
        return "mekanism:fission_reactor"

    def get_name(self) -> str:
        return "Fission Reactor"

    def layout_at(self, size: Extent, builder: BlueprintBuilder) -> None:
        p = self.palette
        center_x, center_z = size.x // 2, size.z // 2
        with_rods = size.x >= 5 and size.y >= 5 and size.z >= 5
        rod_y = size.y - 2

        for x in range(size.x):
            for y in range(size.y):
                for z in range(size.z):
                    if is_interior(x, y, z, size):
                        if with_rods and (x + z) % 2 == 0:
                            block = p["fission_fuel_assembly"] if y < rod_y else p["fission_control_rod"]
                            builder.place(x, y, z, block)
                        continue

                    if is_edge(x, y, z, size) or y == 0:
                        block = p["fission_casing"]
                    elif y == 1 and z == 0 and x == center_x:
                        block = p["fission_logic_adapter"]
                    elif y == 1 and x in (0, size.x - 1) and self._is_port_row(z, center_z, size.z):
                        block = p["fission_port"]
                    else:
                        block = p["reactor_glass"]
                    builder.place(x, y, z, block)

    @staticmethod
    def _is_port_row(z: int, center_z: int, depth: int) -> bool:
        if z == center_z - 1 and center_z > 1:
            return True
        return z == center_z and depth > 3


# ============================================
# Fusion Reactor
# ============================================

_PLUS = (
    (0, 0, 1, 0, 0),
    (0, 1, 1, 1, 0),
    (1, 1, 1, 1, 1),
    (0, 1, 1, 1, 0),
    (0, 0, 1, 0, 0),
)
_RING = (
    (0, 1, 1, 1, 0),
    (1, 0, 0, 0, 1),
    (1, 0, 0, 0, 1),
    (1, 0, 0, 0, 1),
    (0, 1, 1, 1, 0),
)
# 1 = frame, 2 = port, 3 = glass, 4 = laser focus, 5 = controller
_MIDDLE = (
    (1, 3, 3, 3, 1),
    (3, 0, 0, 0, 3),
    (2, 0, 0, 0, 2),
    (3, 0, 0, 0, 3),
    (1, 3, 4, 3, 1),
)
_TOP = (
    (0, 0, 1, 0, 0),
    (0, 1, 1, 1, 0),
    (1, 1, 5, 1, 1),
    (0, 1, 1, 1, 0),
    (0, 0, 1, 0, 0),
)
FUSION_LAYERS = (_PLUS, _RING, _MIDDLE, _RING, _TOP)


class FusionReactor(MekanismFixedStructure):
    source = "mekanismgenerators"
    category = "power"
    fixed_size = extent(5, 5, 5)

    def get_id(self) -> str:
        return "mekanism:fusion_reactor"

    def get_name(self) -> str:
        return "Fusion Reactor"

    def layout(self) -> Blueprint:
        p = self.palette
        legend = {
            1: p["fusion_frame"],
            2: p["fusion_port"],
            3: p["reactor_glass"],
            4: p["laser_focus_matrix"],
            5: p["fusion_controller"],
        }
        builder = BlueprintBuilder()
        for y, pattern in enumerate(FUSION_LAYERS):
            for z, row in enumerate(pattern):
                for x, cell in enumerate(row):
                    if cell:
                        builder.place(x, y, z, legend[cell])
        return builder.build()


def mekanism_structures(palette: Palette) -> list[StructureDefinition]:
    return [
        DynamicTank(palette),
        InductionMatrix(palette),
        ThermoelectricBoiler(palette),
        ThermalEvaporationPlant(palette),
        SupercriticalPhaseShifter(palette),
    ]


def generators_structures(palette: Palette, generators: Palette) -> list[StructureDefinition]:
    """Turbine, fission and fusion mix base casings/glass with generator parts."""
    combined = palette.merged(generators)
    return [
        IndustrialTurbine(combined),
        FissionReactor(combined),
        FusionReactor(combined),
    ]
