"""Wardrobe panel template (openable, sliding and walk-in)."""

from __future__ import annotations

import logging
from enum import Enum

from ..value_objects import ALL_EDGES, HardwareItem, Panel, PanelEdge, PanelKind
from .base import (
    TemplateOutput,
    UnitSpec,
    bay_width,
    joint_count,
    require_positive,
    shutter_width,
)

logger = logging.getLogger(__name__)

# Clearances for shutters and loose shelves.
SHUTTER_HEIGHT_CLEARANCE_MM = 4.0
SHELF_WIDTH_CLEARANCE_MM = 4.0
SHELF_DEPTH_CLEARANCE_MM = 2.0
DRAWER_FRONT_HEIGHT_MM = 200.0

STRAIGHTENER_MIN_HEIGHT_MM = 2100.0
HINGE_HEIGHT_BREAK_MM = 1200.0


class WardrobeType(str, Enum):
    """Wardrobe variants."""

    OPENABLE = "openable"
    SLIDING = "sliding"
    WALKIN = "walkin"

    @classmethod
    def from_label(cls, label: str) -> "WardrobeType":
        """Map a variant label to a wardrobe type; anything unknown is openable."""
        normalized = label.strip().lower().replace("-", "").replace("_", "")
        if normalized == "sliding":
            return cls.SLIDING
        if normalized == "walkin":
            return cls.WALKIN
        return cls.OPENABLE


class WardrobeTemplate:
    """Builds the panels and hardware of a wardrobe.

    Openable wardrobes have at least one hinged shutter; sliding wardrobes at
    least two unbanded shutters running in aluminium profiles; walk-in units
    have no shutters, back or bottom.
    """

    unit_type = "wardrobe"
    description = "Wardrobe with shutters, shelves, drawers and optional loft"

    def build(self, unit: UnitSpec) -> TemplateOutput:
        wardrobe_type = WardrobeType.from_label(unit.variant)
        if wardrobe_type is WardrobeType.WALKIN and unit.shutters > 0:
            raise ValueError("Walk-in wardrobes cannot have shutters")

        shutters = self._shutter_count(wardrobe_type, unit.shutters)
        panels = self._carcass(unit, wardrobe_type, shutters)
        if shutters:
            panels.append(self._shutters(unit, wardrobe_type, shutters))
        if unit.drawers:
            panels.append(self._drawer_fronts(unit, shutters))
        if unit.has_loft:
            panels.extend(self._loft(unit, wardrobe_type, shutters))

        hardware = self._hardware(unit, wardrobe_type, shutters)
        logger.debug(
            "Wardrobe %s %gx%gx%g: %d panels, %d hardware lines",
            wardrobe_type.value,
            unit.width,
            unit.height,
            unit.depth,
            len(panels),
            len(hardware),
        )
        return TemplateOutput(panels=tuple(panels), hardware=tuple(hardware))

    @staticmethod
    def _shutter_count(wardrobe_type: WardrobeType, requested: int) -> int:
        if wardrobe_type is WardrobeType.OPENABLE:
            return max(1, requested)
        if wardrobe_type is WardrobeType.SLIDING:
            return max(2, requested)
        return 0

    def _carcass(
        self, unit: UnitSpec, wardrobe_type: WardrobeType, shutters: int
    ) -> list[Panel]:
        front = (PanelEdge.TOP,)
        panels = [
            Panel(
                id="side",
                kind=PanelKind.SIDE,
                width=unit.height,
                height=unit.depth,
                quantity=2,
                material=unit.material,
                is_exposed_end=unit.exposed_sides,
                banded_edges=front,
                band_class="2mm",
            ),
            Panel(
                id="top",
                kind=PanelKind.TOP,
                width=unit.width,
                height=unit.depth,
                material=unit.material,
                banded_edges=front,
                band_class="2mm",
            ),
        ]

        if wardrobe_type is not WardrobeType.WALKIN:
            panels.append(
                Panel(
                    id="bottom",
                    kind=PanelKind.BOTTOM,
                    width=unit.width,
                    height=unit.depth,
                    material=unit.material,
                    banded_edges=front,
                    band_class="2mm",
                )
            )
            panels.append(
                Panel(
                    id="back",
                    kind=PanelKind.BACK,
                    width=unit.width,
                    height=unit.height,
                    material=unit.back,
                )
            )

        if unit.shelves:
            if wardrobe_type is WardrobeType.WALKIN:
                shelf_span = unit.width
            else:
                shelf_span = bay_width(unit.width, shutters)
            panels.append(
                Panel(
                    id="shelf",
                    kind=PanelKind.SHELF,
                    width=require_positive(
                        shelf_span - SHELF_WIDTH_CLEARANCE_MM, "shelf width"
                    ),
                    height=require_positive(
                        unit.depth - SHELF_DEPTH_CLEARANCE_MM, "shelf depth"
                    ),
                    quantity=unit.shelves,
                    material=unit.material,
                    banded_edges=front,
                    band_class="0.8mm",
                )
            )

        if unit.partitions:
            inner_height = unit.height - 2 * unit.material.thickness
            panels.append(
                Panel(
                    id="partition",
                    kind=PanelKind.PARTITION,
                    width=require_positive(inner_height, "partition height"),
                    height=unit.depth,
                    quantity=unit.partitions,
                    material=unit.material,
                    banded_edges=front,
                    band_class="0.8mm",
                )
            )
        return panels

    def _shutters(
        self, unit: UnitSpec, wardrobe_type: WardrobeType, shutters: int
    ) -> Panel:
        if wardrobe_type is WardrobeType.SLIDING:
            # Sliding shutters are edged by their aluminium profile
            edges: tuple[PanelEdge, ...] = ()
            band_class = None
        else:
            edges = ALL_EDGES
            band_class = "2mm"
        return Panel(
            id="shutter",
            kind=PanelKind.SHUTTER,
            width=require_positive(
                unit.height - SHUTTER_HEIGHT_CLEARANCE_MM, "shutter height"
            ),
            height=require_positive(
                shutter_width(unit.width, shutters), "shutter width"
            ),
            quantity=shutters,
            material=unit.material,
            banded_edges=edges,
            band_class=band_class,
        )

    def _drawer_fronts(self, unit: UnitSpec, shutters: int) -> Panel:
        bays = max(1, shutters)
        return Panel(
            id="drawer-front",
            kind=PanelKind.DRAWER_FRONT,
            width=require_positive(
                bay_width(unit.width, bays) - SHELF_WIDTH_CLEARANCE_MM,
                "drawer front width",
            ),
            height=DRAWER_FRONT_HEIGHT_MM,
            quantity=unit.drawers,
            material=unit.material,
            banded_edges=ALL_EDGES,
            band_class="2mm",
        )

    def _loft(
        self, unit: UnitSpec, wardrobe_type: WardrobeType, shutters: int
    ) -> list[Panel]:
        front = (PanelEdge.TOP,)
        panels = [
            Panel(
                id="loft-side",
                kind=PanelKind.LOFT_SIDE,
                width=unit.loft_height,
                height=unit.depth,
                quantity=2,
                material=unit.material,
                is_exposed_end=unit.exposed_sides,
                banded_edges=front,
                band_class="2mm",
            ),
            Panel(
                id="loft-top",
                kind=PanelKind.LOFT_TOP,
                width=unit.width,
                height=unit.depth,
                material=unit.material,
                banded_edges=front,
                band_class="2mm",
            ),
            Panel(
                id="loft-bottom",
                kind=PanelKind.LOFT_BOTTOM,
                width=unit.width,
                height=unit.depth,
                material=unit.material,
                banded_edges=front,
                band_class="2mm",
            ),
            Panel(
                id="loft-back",
                kind=PanelKind.LOFT_BACK,
                width=unit.width,
                height=unit.loft_height,
                material=unit.back,
            ),
        ]
        if shutters:
            panels.append(
                Panel(
                    id="loft-shutter",
                    kind=PanelKind.SHUTTER,
                    width=require_positive(
                        unit.loft_height - SHUTTER_HEIGHT_CLEARANCE_MM,
                        "loft shutter height",
                    ),
                    height=shutter_width(unit.width, shutters),
                    quantity=shutters,
                    material=unit.material,
                    banded_edges=ALL_EDGES,
                    band_class="2mm",
                )
            )
        return panels

    def _hardware(
        self, unit: UnitSpec, wardrobe_type: WardrobeType, shutters: int
    ) -> list[HardwareItem]:
        items: list[HardwareItem] = []

        if shutters:
            items.append(HardwareItem("Lock", shutters, rate_key="lock"))
            if shutters == 2:
                items.append(
                    HardwareItem(
                        "Center Lock Set", 1, rate_key="lock", rate_multiplier=0.8
                    )
                )

        handles = shutters + unit.drawers
        if handles:
            items.append(HardwareItem("Handle", handles, rate_key="handle"))

        if shutters and wardrobe_type is WardrobeType.OPENABLE:
            per_shutter = 3 if unit.height <= HINGE_HEIGHT_BREAK_MM else 4
            items.append(HardwareItem("Hinge", shutters * per_shutter, rate_key="hinge"))

        if unit.drawers:
            items.append(
                HardwareItem(
                    "Drawer Slide Set",
                    unit.drawers,
                    rate_key="drawer_slide",
                    rate_multiplier=2,
                    notes="1 set = 2 slides",
                )
            )

        joints = joint_count(unit.shelves, unit.partitions)
        items.append(HardwareItem("Minifix", joints * 3, rate_key="minifix"))
        items.append(HardwareItem("Dowel", joints * 5, rate_key="dowel"))

        if wardrobe_type is not WardrobeType.SLIDING:
            clear_width = unit.width - 2 * unit.material.thickness
            items.append(
                HardwareItem(
                    f"Hanging Rod ({clear_width:g}mm)", 1, rate_key="hanging_rod"
                )
            )

        if shutters and unit.height > STRAIGHTENER_MIN_HEIGHT_MM:
            items.append(
                HardwareItem("Straightener", shutters, rate_key="straightener")
            )
        return items
