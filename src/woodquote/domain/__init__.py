"""Domain layer - panels, finishes, pricing and purchase aggregation."""

from .exceptions import (
    DegenerateFinishTopologyError,
    EstimationError,
    InvalidPanelError,
    PriceUnavailableError,
    UnplaceablePanelError,
)
from .value_objects import (
    BoardType,
    FinishType,
    GrainDirection,
    HardwareItem,
    MaterialClass,
    Panel,
    PanelEdge,
    PanelKind,
)

__all__ = [
    "BoardType",
    "DegenerateFinishTopologyError",
    "EstimationError",
    "FinishType",
    "GrainDirection",
    "HardwareItem",
    "InvalidPanelError",
    "MaterialClass",
    "Panel",
    "PanelEdge",
    "PanelKind",
    "PriceUnavailableError",
    "UnplaceablePanelError",
]
