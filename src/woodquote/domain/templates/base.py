"""Inputs and outputs shared by the furniture panel templates."""

from __future__ import annotations

import math
from dataclasses import dataclass, field

from ..value_objects import BoardType, HardwareItem, MaterialClass, Panel

# Gap between adjacent shutters and clearance at the carcass edges.
SHUTTER_GAP_MM = 3.0
SHUTTER_EDGE_CLEARANCE_MM = 2.0

# Standard back panel thickness.
BACK_THICKNESS_MM = 6.0

# Boards stocked in the back thickness; other carcass boards take plywood backs.
BACK_BOARD_TYPES = frozenset({BoardType.PLYWOOD, BoardType.MDF})


@dataclass(frozen=True)
class UnitSpec:
    """Parametric description of one furniture unit.

    Attributes:
        unit_type: Template name, e.g. "wardrobe".
        width: Overall width in millimetres.
        height: Overall height in millimetres.
        depth: Overall depth in millimetres.
        material: Carcass and front board.
        back_material: Back board; defaults to 6mm of the carcass board
            type when that is plywood or MDF, otherwise 6mm plywood.
        variant: Template-specific variant, e.g. "sliding" for wardrobes.
        shutters: Number of shutters or doors.
        drawers: Number of drawers.
        shelves: Number of shelves.
        partitions: Number of vertical partitions.
        exposed_sides: Whether the carcass sides are visible to the room.
        loft_height: Height of a loft section above the unit; 0 for none.
    """

    unit_type: str
    width: float
    height: float
    depth: float
    material: MaterialClass = field(default_factory=MaterialClass.standard_18mm)
    back_material: MaterialClass | None = None
    variant: str = ""
    shutters: int = 0
    drawers: int = 0
    shelves: int = 0
    partitions: int = 0
    exposed_sides: bool = False
    loft_height: float = 0.0

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0 or self.depth <= 0:
            raise ValueError("Unit dimensions must be positive")
        for name in ("shutters", "drawers", "shelves", "partitions"):
            if getattr(self, name) < 0:
                raise ValueError(f"Unit {name} must be non-negative")
        if self.loft_height < 0:
            raise ValueError("Loft height must be non-negative")

    @property
    def back(self) -> MaterialClass:
        """Board used for backs."""
        if self.back_material is not None:
            return self.back_material
        if self.material.board_type in BACK_BOARD_TYPES:
            return MaterialClass(BACK_THICKNESS_MM, self.material.board_type)
        return MaterialClass(BACK_THICKNESS_MM, BoardType.PLYWOOD)

    @property
    def has_loft(self) -> bool:
        return self.loft_height > 0


@dataclass(frozen=True)
class TemplateOutput:
    """Panels and hardware enumerated for one unit."""

    panels: tuple[Panel, ...] = ()
    hardware: tuple[HardwareItem, ...] = ()

    @property
    def panel_count(self) -> int:
        return sum(p.quantity for p in self.panels)


def shutter_width(unit_width: float, count: int) -> float:
    """Width of each of ``count`` shutters spanning the unit front."""
    gaps = (count - 1) * SHUTTER_GAP_MM + 2 * SHUTTER_EDGE_CLEARANCE_MM
    return (unit_width - gaps) / count


def bay_width(unit_width: float, bays: int) -> float:
    """Clear width of one of ``bays`` equal bays."""
    return (unit_width - (bays - 1) * SHUTTER_GAP_MM) / bays


def hinges_per_door(door_height: float) -> int:
    """Hinge count for a cabinet door by height."""
    if door_height <= 1200:
        return 2
    if door_height <= 1800:
        return 3
    return 4


def joint_count(shelves: int, partitions: int = 0) -> int:
    """Carcass joints: four corners plus two per shelf or partition."""
    return 4 + 2 * (shelves + partitions)


def require_positive(value: float, what: str) -> float:
    if not value > 0 or math.isinf(value):
        raise ValueError(f"Computed {what} must be positive (got {value:g})")
    return value
