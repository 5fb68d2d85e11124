"""Roll-up of panels, nesting and finishes into a priced purchase list.

Quantities are converted into the units material is actually bought in:
board sheets per material class, laminate sheets per face, edge-banding
rolls per band class, hardware pieces and adhesive bottles. Every rate goes
through the PriceResolver chain. Costs are rounded once per group, never
mid-calculation.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Sequence

from ..value_objects import INNER_LAMINATE_KEY, HardwareItem, MaterialClass, Panel
from .finish_resolver import Face, FinishSummary
from .geometry import (
    EDGE_BAND_ROLL_LENGTH_M,
    EDGE_BAND_WASTAGE,
    banded_length_m,
    edge_band_rolls,
    mm2_to_sqft,
    standard_sheets_for_area,
)
from .pricing import PriceCategory, PriceKey, PriceResolver

if TYPE_CHECKING:
    from woodquote.infrastructure.bin_packing import NestingResult

logger = logging.getLogger(__name__)

__all__ = [
    "AdhesiveLine",
    "BoardGroup",
    "EdgeBandGroup",
    "HardwareLine",
    "LaminateGroup",
    "PurchaseAggregator",
    "PurchaseRequirements",
]

ADHESIVE_KEY = PriceKey(PriceCategory.ADHESIVE, "adhesive_bottle")


@dataclass(frozen=True)
class BoardGroup:
    """Board purchase for one material class.

    Attributes:
        material: Material class.
        total_area: Panel area in square feet.
        sheet_count: Sheets used by the nester.
        utilization_percent: Nester utilization, capped at 100.
        rate: Price per square foot.
        cost: Rounded group cost.
    """

    material: MaterialClass
    total_area: float
    sheet_count: int
    utilization_percent: float
    rate: float
    cost: float


@dataclass(frozen=True)
class LaminateGroup:
    """Laminate (or premium finish) purchase for one face type.

    Attributes:
        face: OUTER or INNER.
        finish: Price key name of the finish, e.g. "outer_laminate".
        area: Area to cover in square feet.
        sheet_count: Standard sheets needed, by area.
        rate: Price per square foot.
        cost: Rounded group cost.
    """

    face: Face
    finish: str
    area: float
    sheet_count: int
    rate: float
    cost: float


@dataclass(frozen=True)
class EdgeBandGroup:
    """Edge-banding purchase for one band class.

    Attributes:
        band_class: Band grade, e.g. "2mm".
        length_required: Banded length in metres.
        rolls_needed: Whole rolls including the wastage allowance.
        rate: Price per metre.
        cost: Rounded cost of the rolls.
    """

    band_class: str
    length_required: float
    rolls_needed: int
    rate: float
    cost: float


@dataclass(frozen=True)
class HardwareLine:
    name: str
    quantity: int
    rate: float
    cost: float
    notes: str = ""


@dataclass(frozen=True)
class AdhesiveLine:
    bottle_count: int
    rate: float
    cost: float


@dataclass(frozen=True)
class PurchaseRequirements:
    """Priced, purchase-ready bill of materials."""

    boards: tuple[BoardGroup, ...] = ()
    laminates: tuple[LaminateGroup, ...] = ()
    edge_banding: tuple[EdgeBandGroup, ...] = ()
    hardware: tuple[HardwareLine, ...] = ()
    adhesive: AdhesiveLine | None = None
    total_cost: float = 0.0

    @property
    def board_cost(self) -> float:
        return sum(g.cost for g in self.boards)

    @property
    def laminate_cost(self) -> float:
        return sum(g.cost for g in self.laminates)

    @property
    def edge_banding_cost(self) -> float:
        return sum(g.cost for g in self.edge_banding)

    @property
    def hardware_cost(self) -> float:
        return sum(line.cost for line in self.hardware)

    @property
    def adhesive_cost(self) -> float:
        return self.adhesive.cost if self.adhesive else 0.0

    @property
    def total_sheets(self) -> int:
        return sum(g.sheet_count for g in self.boards)


class PurchaseAggregator:
    """Groups estimate quantities into purchase units and prices them.

    Args:
        resolver: Price resolver for this estimation call.
        rounding_digits: Decimal places group costs are rounded to.
        roll_length_m: Length of one edge-banding roll in metres.
        band_wastage: Wastage allowance applied to banding length.
    """

    def __init__(
        self,
        resolver: PriceResolver,
        rounding_digits: int = 2,
        roll_length_m: float = EDGE_BAND_ROLL_LENGTH_M,
        band_wastage: float = EDGE_BAND_WASTAGE,
    ) -> None:
        self.resolver = resolver
        self.rounding_digits = rounding_digits
        self.roll_length_m = roll_length_m
        self.band_wastage = band_wastage

    def aggregate(
        self,
        panels: Sequence[Panel],
        nesting: NestingResult,
        finishes: FinishSummary,
        hardware: Sequence[HardwareItem] = (),
    ) -> PurchaseRequirements:
        """Build the priced purchase requirements.

        Args:
            panels: Panels of the estimate (before tiling).
            nesting: Nesting result for the same panels.
            finishes: Finish summary for the same panels.
            hardware: Hardware items to pass through.

        Returns:
            The purchase requirements with per-group and total costs.

        Raises:
            PriceUnavailableError: If any required key has no rate.
            ValueError: If the nesting result lacks a material class used by
                the panels.
        """
        by_material = self._group_by_material(panels)
        by_band = self._group_by_band_class(panels)
        hardware = [item for item in hardware if item.quantity > 0]

        # One lookup per distinct key, before any cost is computed
        self.resolver.prefetch(
            self._required_keys(by_material, by_band, finishes, hardware)
        )

        boards = tuple(
            self._board_group(material, group, nesting)
            for material, group in by_material.items()
        )
        laminates = self._laminate_groups(finishes)
        edge_banding = tuple(
            self._edge_band_group(band_class, group)
            for band_class, group in by_band.items()
        )
        hardware_lines = tuple(self._hardware_line(item) for item in hardware)
        adhesive = self._adhesive_line(finishes)

        total = (
            sum(g.cost for g in boards)
            + sum(g.cost for g in laminates)
            + sum(g.cost for g in edge_banding)
            + sum(line.cost for line in hardware_lines)
            + (adhesive.cost if adhesive else 0.0)
        )

        requirements = PurchaseRequirements(
            boards=boards,
            laminates=laminates,
            edge_banding=edge_banding,
            hardware=hardware_lines,
            adhesive=adhesive,
            # Group costs are already rounded; this only removes float noise
            total_cost=round(total, self.rounding_digits),
        )
        logger.info(
            "Purchase requirements: %d board groups, %d sheets, total %.2f",
            len(boards),
            requirements.total_sheets,
            requirements.total_cost,
        )
        return requirements

    def _round(self, value: float) -> float:
        return round(value, self.rounding_digits)

    def _required_keys(
        self,
        by_material: dict[MaterialClass, list[Panel]],
        by_band: dict[str, list[Panel]],
        finishes: FinishSummary,
        hardware: Sequence[HardwareItem],
    ) -> list[PriceKey]:
        keys = [PriceKey(PriceCategory.BOARD, m.key) for m in by_material]
        if finishes.outer_area > 0:
            keys.append(
                PriceKey(PriceCategory.LAMINATE, finishes.outer_finish.outer_rate_key)
            )
        if finishes.inner_area > 0:
            keys.append(PriceKey(PriceCategory.LAMINATE, INNER_LAMINATE_KEY))
        keys.extend(PriceKey(PriceCategory.EDGE_BANDING, b) for b in by_band)
        keys.extend(PriceKey(PriceCategory.HARDWARE, h.rate_key) for h in hardware)
        if finishes.adhesive_bottles > 0:
            keys.append(ADHESIVE_KEY)
        return keys

    def _board_group(
        self, material: MaterialClass, panels: list[Panel], nesting: NestingResult
    ) -> BoardGroup:
        material_nesting = nesting.for_material(material)
        if material_nesting is None:
            raise ValueError(f"Nesting result has no sheets for {material.label}")

        area = mm2_to_sqft(sum(p.total_area for p in panels))
        rate = self.resolver.rate(PriceKey(PriceCategory.BOARD, material.key))
        return BoardGroup(
            material=material,
            total_area=area,
            sheet_count=material_nesting.sheet_count,
            utilization_percent=min(100.0, material_nesting.utilization * 100),
            rate=rate,
            cost=self._round(area * rate),
        )

    def _laminate_groups(self, finishes: FinishSummary) -> tuple[LaminateGroup, ...]:
        faces = (
            (Face.OUTER, finishes.outer_area, finishes.outer_finish.outer_rate_key),
            # Inner faces are always laminated, whatever the outer finish
            (Face.INNER, finishes.inner_area, INNER_LAMINATE_KEY),
        )
        groups: list[LaminateGroup] = []
        for face, area, key_name in faces:
            if area <= 0:
                continue
            rate = self.resolver.rate(PriceKey(PriceCategory.LAMINATE, key_name))
            groups.append(
                LaminateGroup(
                    face=face,
                    finish=key_name,
                    area=area,
                    sheet_count=standard_sheets_for_area(area),
                    rate=rate,
                    cost=self._round(area * rate),
                )
            )
        return tuple(groups)

    def _edge_band_group(self, band_class: str, panels: list[Panel]) -> EdgeBandGroup:
        length = banded_length_m(panels)
        rolls = edge_band_rolls(length, self.roll_length_m, self.band_wastage)
        rate = self.resolver.rate(PriceKey(PriceCategory.EDGE_BANDING, band_class))
        return EdgeBandGroup(
            band_class=band_class,
            length_required=length,
            rolls_needed=rolls,
            rate=rate,
            cost=self._round(rolls * self.roll_length_m * rate),
        )

    def _hardware_line(self, item: HardwareItem) -> HardwareLine:
        rate = (
            self.resolver.rate(PriceKey(PriceCategory.HARDWARE, item.rate_key))
            * item.rate_multiplier
        )
        return HardwareLine(
            name=item.name,
            quantity=item.quantity,
            rate=rate,
            cost=self._round(item.quantity * rate),
            notes=item.notes,
        )

    def _adhesive_line(self, finishes: FinishSummary) -> AdhesiveLine | None:
        if finishes.adhesive_bottles <= 0:
            return None
        rate = self.resolver.rate(ADHESIVE_KEY)
        return AdhesiveLine(
            bottle_count=finishes.adhesive_bottles,
            rate=rate,
            cost=self._round(finishes.adhesive_bottles * rate),
        )

    @staticmethod
    def _group_by_material(
        panels: Sequence[Panel],
    ) -> dict[MaterialClass, list[Panel]]:
        groups: dict[MaterialClass, list[Panel]] = {}
        for panel in panels:
            groups.setdefault(panel.material, []).append(panel)
        return groups

    @staticmethod
    def _group_by_band_class(panels: Sequence[Panel]) -> dict[str, list[Panel]]:
        groups: dict[str, list[Panel]] = {}
        for panel in panels:
            if panel.band_class and panel.banded_length > 0:
                groups.setdefault(panel.band_class, []).append(panel)
        return groups
