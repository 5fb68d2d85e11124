"""Infrastructure layer - nesting, rendering, formatters and price catalog."""

from .bin_packing import (
    FreeRectangle,
    GuillotineNester,
    MaterialNesting,
    NestingResult,
    NestingService,
    Placement,
    SheetLayout,
    SheetSpec,
    SortOrder,
)
from .cut_diagram_renderer import CutDiagramRenderer
from .formatters import (
    CutListFormatter,
    EstimateJsonExporter,
    PurchaseSummaryFormatter,
)
from .price_catalog import CatalogPriceLookup, PriceSetting, Product
from .tiling import OversizeTiler

__all__ = [
    # Nesting
    "FreeRectangle",
    "GuillotineNester",
    "MaterialNesting",
    "NestingResult",
    "NestingService",
    "OversizeTiler",
    "Placement",
    "SheetLayout",
    "SheetSpec",
    "SortOrder",
    # Output
    "CutDiagramRenderer",
    "CutListFormatter",
    "EstimateJsonExporter",
    "PurchaseSummaryFormatter",
    # Pricing
    "CatalogPriceLookup",
    "PriceSetting",
    "Product",
]
