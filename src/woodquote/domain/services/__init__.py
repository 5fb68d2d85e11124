"""Domain services for finish resolution, pricing and purchase aggregation."""

from .finish_resolver import (
    Face,
    FaceFinishResolver,
    FinishSummary,
    FinishTopology,
    PanelFinish,
    faces_for_panel,
)
from .geometry import (
    MM2_PER_SQFT,
    STANDARD_SHEET_AREA_SQFT,
    banded_length_m,
    edge_band_rolls,
    mm2_to_sqft,
    mm_to_m,
    panel_area_sqft,
    perimeter,
    standard_sheets_for_area,
)
from .pricing import (
    DEFAULT_RATES,
    PriceCategory,
    PriceKey,
    PriceRecord,
    PriceResolver,
    PriceSource,
    ResolvedRate,
)
from .purchase_aggregator import (
    AdhesiveLine,
    BoardGroup,
    EdgeBandGroup,
    HardwareLine,
    LaminateGroup,
    PurchaseAggregator,
    PurchaseRequirements,
)

__all__ = [
    "AdhesiveLine",
    "BoardGroup",
    "DEFAULT_RATES",
    "EdgeBandGroup",
    "Face",
    "FaceFinishResolver",
    "FinishSummary",
    "FinishTopology",
    "HardwareLine",
    "LaminateGroup",
    "MM2_PER_SQFT",
    "PanelFinish",
    "PriceCategory",
    "PriceKey",
    "PriceRecord",
    "PriceResolver",
    "PriceSource",
    "PurchaseAggregator",
    "PurchaseRequirements",
    "ResolvedRate",
    "STANDARD_SHEET_AREA_SQFT",
    "banded_length_m",
    "edge_band_rolls",
    "faces_for_panel",
    "mm2_to_sqft",
    "mm_to_m",
    "panel_area_sqft",
    "perimeter",
    "standard_sheets_for_area",
]
