"""Value objects for the estimation domain.

All classes are re-exported from sub-modules for convenience.
"""

from __future__ import annotations

from ._hardware import HardwareItem
from ._materials import INNER_LAMINATE_KEY, BoardType, FinishType, MaterialClass
from ._panels import (
    ALL_EDGES,
    GrainDirection,
    Panel,
    PanelEdge,
    PanelKind,
    validate_panel_ids,
)

__all__ = [
    "ALL_EDGES",
    "BoardType",
    "FinishType",
    "GrainDirection",
    "HardwareItem",
    "INNER_LAMINATE_KEY",
    "MaterialClass",
    "Panel",
    "PanelEdge",
    "PanelKind",
    "validate_panel_ids",
]
