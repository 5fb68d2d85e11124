"""Storage unit and bookshelf panel template."""

from __future__ import annotations

import math

from ..value_objects import ALL_EDGES, HardwareItem, Panel, PanelEdge, PanelKind
from .base import (
    TemplateOutput,
    UnitSpec,
    hinges_per_door,
    require_positive,
    shutter_width,
)

# Shelves sit between the sides and in front of the back.
SHELF_WIDTH_DEDUCTION_MM = 36.0
SHELF_DEPTH_DEDUCTION_MM = 18.0

DRAWER_ZONE_DEDUCTION_MM = 100.0
DRAWER_SIDE_DEDUCTION_MM = 16.0
DRAWER_DEPTH_DEDUCTION_MM = 50.0
DRAWER_FRONT_CLEARANCE_MM = 3.0


class StorageUnitTemplate:
    """Builds an open or shuttered storage unit with shelves and drawers.

    Drawers share the unit height equally after a fixed plinth allowance;
    each drawer has a front, two box sides and a bottom.
    """

    unit_type = "storage_unit"
    description = "Storage unit or bookshelf with shelves, drawers and shutters"

    def build(self, unit: UnitSpec) -> TemplateOutput:
        front = (PanelEdge.TOP,)
        panels = [
            Panel(
                id="top",
                kind=PanelKind.TOP,
                width=unit.width,
                height=unit.depth,
                material=unit.material,
                banded_edges=front,
                band_class="2mm",
            ),
            Panel(
                id="bottom",
                kind=PanelKind.BOTTOM,
                width=unit.width,
                height=unit.depth,
                material=unit.material,
                banded_edges=front,
                band_class="2mm",
            ),
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
                id="back",
                kind=PanelKind.BACK,
                width=unit.height,
                height=unit.width,
                material=unit.back,
            ),
        ]

        if unit.shelves:
            panels.append(
                Panel(
                    id="shelf",
                    kind=PanelKind.SHELF,
                    width=require_positive(
                        unit.width - SHELF_WIDTH_DEDUCTION_MM, "shelf width"
                    ),
                    height=require_positive(
                        unit.depth - SHELF_DEPTH_DEDUCTION_MM, "shelf depth"
                    ),
                    quantity=unit.shelves,
                    material=unit.material,
                    banded_edges=front,
                    band_class="0.8mm",
                )
            )

        if unit.drawers:
            panels.extend(self._drawers(unit))

        if unit.shutters:
            panels.append(
                Panel(
                    id="shutter",
                    kind=PanelKind.SHUTTER,
                    width=require_positive(unit.height - 4, "shutter height"),
                    height=require_positive(
                        shutter_width(unit.width, unit.shutters), "shutter width"
                    ),
                    quantity=unit.shutters,
                    material=unit.material,
                    banded_edges=ALL_EDGES,
                    band_class="2mm",
                )
            )

        return TemplateOutput(panels=tuple(panels), hardware=tuple(self._hardware(unit)))

    def _drawers(self, unit: UnitSpec) -> list[Panel]:
        drawer_height = math.floor(
            (unit.height - DRAWER_ZONE_DEDUCTION_MM) / unit.drawers
        )
        box_depth = require_positive(
            unit.depth - DRAWER_DEPTH_DEDUCTION_MM, "drawer depth"
        )
        return [
            Panel(
                id="drawer-front",
                kind=PanelKind.DRAWER_FRONT,
                width=require_positive(
                    unit.width - DRAWER_FRONT_CLEARANCE_MM, "drawer front width"
                ),
                height=require_positive(drawer_height, "drawer height"),
                quantity=unit.drawers,
                material=unit.material,
                banded_edges=ALL_EDGES,
                band_class="2mm",
            ),
            Panel(
                id="drawer-side",
                kind=PanelKind.SIDE,
                width=require_positive(
                    drawer_height - DRAWER_SIDE_DEDUCTION_MM, "drawer side height"
                ),
                height=box_depth,
                quantity=unit.drawers * 2,
                material=unit.material,
                banded_edges=(PanelEdge.TOP,),
                band_class="0.8mm",
            ),
            Panel(
                id="drawer-bottom",
                kind=PanelKind.BOTTOM,
                width=require_positive(
                    unit.width - SHELF_WIDTH_DEDUCTION_MM, "drawer bottom width"
                ),
                height=box_depth,
                quantity=unit.drawers,
                material=unit.material,
            ),
        ]

    def _hardware(self, unit: UnitSpec) -> list[HardwareItem]:
        items: list[HardwareItem] = []
        if unit.shelves:
            items.append(
                HardwareItem(
                    "Shelf Support Pins", unit.shelves * 4, rate_key="shelf_support"
                )
            )
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
        if unit.shutters:
            hinges = hinges_per_door(unit.height - 4) * unit.shutters
            items.append(HardwareItem("Hinge", hinges, rate_key="hinge"))
        handles = unit.drawers + unit.shutters
        if handles:
            items.append(HardwareItem("Handle", handles, rate_key="handle"))
        items.append(
            HardwareItem("Assembly Screws & Fittings", 1, rate_key="screw_pack")
        )
        return items
