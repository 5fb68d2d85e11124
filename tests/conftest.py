"""Pytest configuration and shared fixtures for woodquote tests."""

from __future__ import annotations

import pytest

from woodquote.domain.services import FinishTopology, PriceKey, PriceRecord
from woodquote.domain.value_objects import (
    BoardType,
    MaterialClass,
    Panel,
    PanelEdge,
    PanelKind,
)
from woodquote.infrastructure.bin_packing import SheetSpec


def pytest_configure(config: pytest.Config) -> None:
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "slow: tests that take a long time to run")


class RecordingLookup:
    """PriceLookup fake that serves fixed records and counts calls per key."""

    def __init__(self, records: dict[PriceKey, PriceRecord] | None = None) -> None:
        self.records = records or {}
        self.calls: dict[PriceKey, int] = {}

    def __call__(self, key: PriceKey) -> PriceRecord | None:
        self.calls[key] = self.calls.get(key, 0) + 1
        return self.records.get(key)


# =============================================================================
# Shared fixtures
# =============================================================================


@pytest.fixture
def plywood_18() -> MaterialClass:
    return MaterialClass.standard_18mm()


@pytest.fixture
def plywood_6() -> MaterialClass:
    return MaterialClass.standard_6mm()


@pytest.fixture
def pre_lam_board() -> MaterialClass:
    return MaterialClass(18, BoardType.PRE_LAM_PARTICLE_BOARD)


@pytest.fixture
def standard_sheet() -> SheetSpec:
    """8x4 ft sheet with 3mm kerf and 10mm margin."""
    return SheetSpec()


@pytest.fixture
def laminate_topology() -> FinishTopology:
    return FinishTopology()


@pytest.fixture
def recording_lookup() -> RecordingLookup:
    return RecordingLookup()


@pytest.fixture
def small_wardrobe_panels(plywood_18: MaterialClass) -> list[Panel]:
    """A minimal wardrobe carcass: two sides, top, bottom, shelf and shutters."""
    front = (PanelEdge.TOP,)
    return [
        Panel(
            "side",
            PanelKind.SIDE,
            2100,
            560,
            quantity=2,
            material=plywood_18,
            banded_edges=front,
            band_class="2mm",
        ),
        Panel(
            "top",
            PanelKind.TOP,
            900,
            560,
            material=plywood_18,
            banded_edges=front,
            band_class="2mm",
        ),
        Panel(
            "bottom",
            PanelKind.BOTTOM,
            900,
            560,
            material=plywood_18,
            banded_edges=front,
            band_class="2mm",
        ),
        Panel(
            "shelf",
            PanelKind.SHELF,
            860,
            540,
            quantity=3,
            material=plywood_18,
            banded_edges=front,
            band_class="0.8mm",
        ),
        Panel(
            "shutter",
            PanelKind.SHUTTER,
            2096,
            445,
            quantity=2,
            material=plywood_18,
            banded_edges=(
                PanelEdge.TOP,
                PanelEdge.BOTTOM,
                PanelEdge.LEFT,
                PanelEdge.RIGHT,
            ),
            band_class="2mm",
        ),
    ]
