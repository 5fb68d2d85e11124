"""Unit conversions and edge-length helpers.

Geometry is kept in millimetres throughout the nesting engine; areas are
converted to square feet and lengths to metres only when they are priced.
"""

from __future__ import annotations

import math
from typing import Iterable

from ..value_objects import Panel

MM2_PER_SQFT = 92903.04
MM_PER_M = 1000.0

# A standard 8x4 ft sheet, used to convert per-sheet prices and laminate areas.
STANDARD_SHEET_AREA_SQFT = 32.0

EDGE_BAND_ROLL_LENGTH_M = 50.0
EDGE_BAND_WASTAGE = 0.05


def mm2_to_sqft(area_mm2: float) -> float:
    """Convert square millimetres to square feet."""
    return area_mm2 / MM2_PER_SQFT


def mm_to_m(length_mm: float) -> float:
    return length_mm / MM_PER_M


def perimeter(width: float, height: float) -> float:
    return 2 * (width + height)


def panel_area_sqft(panel: Panel) -> float:
    """Area of all copies of a panel in square feet."""
    return mm2_to_sqft(panel.total_area)


def banded_length_m(panels: Iterable[Panel]) -> float:
    """Total edge-banding length in metres across all copies of the panels."""
    return mm_to_m(sum(p.banded_length * p.quantity for p in panels))


def edge_band_rolls(
    length_m: float,
    roll_length_m: float = EDGE_BAND_ROLL_LENGTH_M,
    wastage: float = EDGE_BAND_WASTAGE,
) -> int:
    """Whole rolls needed for a banding length, with a fixed wastage allowance.

    Examples:
        >>> edge_band_rolls(47.6)
        1
        >>> edge_band_rolls(0)
        0
    """
    if length_m <= 0:
        return 0
    return math.ceil(length_m * (1 + wastage) / roll_length_m)


def standard_sheets_for_area(area_sqft: float) -> int:
    """Area-based sheet count against the standard 32 sq ft sheet."""
    if area_sqft <= 0:
        return 0
    return math.ceil(area_sqft / STANDARD_SHEET_AREA_SQFT)
