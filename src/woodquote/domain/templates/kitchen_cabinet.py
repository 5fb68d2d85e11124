"""Kitchen base cabinet panel template."""

from __future__ import annotations

from ..value_objects import ALL_EDGES, HardwareItem, Panel, PanelEdge, PanelKind
from .base import (
    SHUTTER_GAP_MM,
    TemplateOutput,
    UnitSpec,
    hinges_per_door,
    require_positive,
    shutter_width,
)

DRAWER_FRONT_HEIGHT_MM = 150.0
SHELF_WIDTH_DEDUCTION_MM = 36.0
SHELF_DEPTH_DEDUCTION_MM = 18.0


class KitchenCabinetTemplate:
    """Builds a kitchen base cabinet.

    Drawers stack at the top of the front; doors fill the remaining height.
    A cabinet with neither doors nor drawers gets two doors.
    """

    unit_type = "kitchen_cabinet"
    description = "Kitchen base cabinet with doors, drawers and shelves"

    def build(self, unit: UnitSpec) -> TemplateOutput:
        doors = unit.shutters if (unit.shutters or unit.drawers) else 2
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
            panels.append(
                Panel(
                    id="drawer-front",
                    kind=PanelKind.DRAWER_FRONT,
                    width=require_positive(unit.width - 4, "drawer front width"),
                    height=DRAWER_FRONT_HEIGHT_MM,
                    quantity=unit.drawers,
                    material=unit.material,
                    banded_edges=ALL_EDGES,
                    band_class="2mm",
                )
            )

        door_height = self._door_height(unit)
        if doors:
            panels.append(
                Panel(
                    id="door",
                    kind=PanelKind.DOOR,
                    width=require_positive(door_height, "door height"),
                    height=require_positive(
                        shutter_width(unit.width, doors), "door width"
                    ),
                    quantity=doors,
                    material=unit.material,
                    banded_edges=ALL_EDGES,
                    band_class="2mm",
                )
            )

        hardware: list[HardwareItem] = []
        if doors:
            hardware.append(
                HardwareItem(
                    "Soft Close Hinge",
                    hinges_per_door(door_height) * doors,
                    rate_key="soft_close_hinge",
                )
            )
        if unit.drawers:
            hardware.append(
                HardwareItem(
                    "Drawer Slide Set",
                    unit.drawers,
                    rate_key="drawer_slide_soft_close",
                    rate_multiplier=2,
                    notes="1 set = 2 slides",
                )
            )
        if doors + unit.drawers:
            hardware.append(
                HardwareItem("Handle", doors + unit.drawers, rate_key="handle")
            )
        if unit.shelves:
            hardware.append(
                HardwareItem(
                    "Shelf Support Pins", unit.shelves * 4, rate_key="shelf_support"
                )
            )

        return TemplateOutput(panels=tuple(panels), hardware=tuple(hardware))

    @staticmethod
    def _door_height(unit: UnitSpec) -> float:
        drawer_zone = unit.drawers * (DRAWER_FRONT_HEIGHT_MM + SHUTTER_GAP_MM)
        return unit.height - 4 - drawer_zone
