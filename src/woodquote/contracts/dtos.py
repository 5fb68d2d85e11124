"""Data transfer objects shared by the application and infrastructure layers."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from woodquote.domain.services import FinishSummary, PurchaseRequirements
from woodquote.domain.value_objects import HardwareItem, Panel

if TYPE_CHECKING:
    from woodquote.infrastructure.bin_packing import NestingResult


@dataclass
class EstimateResult:
    """Everything computed for one estimate.

    Attributes:
        panels: Panels as supplied, before tiling.
        hardware: Hardware items passed through to pricing.
        nesting: Sheet layouts per material class.
        finishes: Face areas and adhesive quantity.
        purchase: Priced purchase requirements.
    """

    panels: tuple[Panel, ...]
    nesting: "NestingResult"
    finishes: FinishSummary
    purchase: PurchaseRequirements
    hardware: tuple[HardwareItem, ...] = field(default_factory=tuple)

    @property
    def total_cost(self) -> float:
        return self.purchase.total_cost
