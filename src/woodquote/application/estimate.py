"""Application commands (use cases) for build estimation."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Sequence

from woodquote.contracts.dtos import EstimateResult
from woodquote.domain.services import (
    FaceFinishResolver,
    FinishTopology,
    PriceResolver,
    PurchaseAggregator,
    PurchaseRequirements,
)
from woodquote.domain.value_objects import HardwareItem, Panel, validate_panel_ids
from woodquote.infrastructure.bin_packing import NestingService, SheetSpec, SortOrder

if TYPE_CHECKING:
    from woodquote.contracts.protocols import PriceLookup

logger = logging.getLogger(__name__)


class EstimateCommand:
    """Runs the full estimate: tile, nest, resolve finishes, aggregate, price.

    Collaborators can be injected for testing; the price resolver is created
    fresh for every call so that no rate is reused across estimates.
    """

    def __init__(
        self,
        nesting_service: NestingService | None = None,
        finish_resolver: FaceFinishResolver | None = None,
        rounding_digits: int = 2,
    ) -> None:
        self.nesting_service = nesting_service or NestingService()
        self.finish_resolver = finish_resolver or FaceFinishResolver()
        self.rounding_digits = rounding_digits

    def execute(
        self,
        panels: Sequence[Panel],
        topology: FinishTopology,
        price_lookup: PriceLookup | None = None,
        hardware: Sequence[HardwareItem] = (),
    ) -> EstimateResult:
        """Execute the estimate.

        Args:
            panels: Panels to estimate.
            topology: Finish configuration.
            price_lookup: Caller's price configuration; defaults apply when
                it is None or returns None for a key.
            hardware: Hardware items to price alongside the panels.

        Returns:
            EstimateResult with nesting, finishes and purchase requirements.

        Raises:
            InvalidPanelError: For invalid panels or duplicate ids, before
                any tiling.
            UnplaceablePanelError: If a tile does not fit a fresh sheet.
            DegenerateFinishTopologyError: In strict finish mode.
            PriceUnavailableError: If a required rate cannot be resolved.
        """
        panels = tuple(panels)
        validate_panel_ids(panels)

        nesting = self.nesting_service.nest(panels)
        finishes = self.finish_resolver.resolve(panels, topology)

        aggregator = PurchaseAggregator(
            PriceResolver(price_lookup), rounding_digits=self.rounding_digits
        )
        purchase = aggregator.aggregate(panels, nesting, finishes, hardware)

        logger.info(
            "Estimate complete: %d panels, %d sheets, total %.2f",
            len(panels),
            nesting.total_sheets,
            purchase.total_cost,
        )
        return EstimateResult(
            panels=panels,
            nesting=nesting,
            finishes=finishes,
            purchase=purchase,
            hardware=tuple(hardware),
        )


def nest_and_price(
    panels: Sequence[Panel],
    sheet_spec: SheetSpec,
    topology: FinishTopology,
    price_lookup: PriceLookup | None,
    hardware: Sequence[HardwareItem] = (),
    sort_order: SortOrder = SortOrder.AREA_DESC,
) -> PurchaseRequirements:
    """Nest panels onto sheets and price the resulting purchase list.

    Example:
        >>> panels = [Panel("side", PanelKind.SIDE, 2000, 600)]
        >>> purchase = nest_and_price(
        ...     panels, SheetSpec(), FinishTopology(), price_lookup=None
        ... )
        >>> purchase.total_sheets
        1
    """
    command = EstimateCommand(
        nesting_service=NestingService(sheet=sheet_spec, sort_order=sort_order)
    )
    return command.execute(panels, topology, price_lookup, hardware).purchase
