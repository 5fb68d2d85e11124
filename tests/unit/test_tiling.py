"""Unit tests for OversizeTiler.

Tests cover:
- Panels that fit pass through untouched
- Rotation is used to avoid tiling when allowed
- Grid splitting, tile naming and area conservation
- Edge banding kept only on the original perimeter
"""

from __future__ import annotations

import pytest

from woodquote.domain.value_objects import (
    ALL_EDGES,
    GrainDirection,
    Panel,
    PanelEdge,
    PanelKind,
)
from woodquote.infrastructure.tiling import OversizeTiler

USABLE_W = 2420.0
USABLE_H = 1200.0


@pytest.fixture
def tiler() -> OversizeTiler:
    return OversizeTiler()


class TestFits:
    def test_panel_within_usable_area(self) -> None:
        panel = Panel("p", PanelKind.SHELF, 2420, 1200)
        assert OversizeTiler.fits(panel, USABLE_W, USABLE_H)

    def test_rotation_makes_panel_fit(self) -> None:
        panel = Panel("p", PanelKind.SIDE, 600, 2100)
        assert OversizeTiler.fits(panel, USABLE_W, USABLE_H)

    def test_grain_prevents_rotated_fit(self) -> None:
        panel = Panel("p", PanelKind.SIDE, 600, 2100, grain=GrainDirection.LONG)
        assert not OversizeTiler.fits(panel, USABLE_W, USABLE_H)


class TestTile:
    def test_fitting_panels_unchanged_in_order(self, tiler: OversizeTiler) -> None:
        panels = [
            Panel("a", PanelKind.SHELF, 800, 500),
            Panel("b", PanelKind.SIDE, 2000, 560),
        ]
        assert tiler.tile(panels, USABLE_W, USABLE_H) == panels

    def test_long_panel_split_into_two_columns(self, tiler: OversizeTiler) -> None:
        panel = Panel("counter", PanelKind.TOP, 3000, 600)

        tiles = tiler.tile([panel], USABLE_W, USABLE_H)

        assert [(t.id, t.width, t.height) for t in tiles] == [
            ("counter-tile1x1", 2420, 600),
            ("counter-tile2x1", 580, 600),
        ]
        assert sum(t.area for t in tiles) == pytest.approx(panel.area)

    def test_tiles_keep_panel_attributes(self, tiler: OversizeTiler) -> None:
        panel = Panel("counter", PanelKind.TOP, 3000, 600, quantity=2)

        tiles = tiler.tile([panel], USABLE_W, USABLE_H)

        assert all(t.quantity == 2 for t in tiles)
        assert all(t.kind is PanelKind.TOP for t in tiles)
        assert all(t.material == panel.material for t in tiles)

    def test_grid_split_in_both_directions(self, tiler: OversizeTiler) -> None:
        panel = Panel("slab", PanelKind.CUSTOM, 5000, 2500, allow_rotate=False)

        tiles = tiler.tile([panel], USABLE_W, USABLE_H)

        assert len(tiles) == 3 * 3
        assert tiles[0].id == "slab-tile1x1"
        assert tiles[-1].id == "slab-tile3x3"
        assert tiles[-1].width == pytest.approx(5000 - 2 * USABLE_W)
        assert tiles[-1].height == pytest.approx(2500 - 2 * USABLE_H)
        assert sum(t.area for t in tiles) == pytest.approx(panel.area)
        assert all(OversizeTiler.fits(t, USABLE_W, USABLE_H) for t in tiles)

    def test_oversize_replaced_in_place(self, tiler: OversizeTiler) -> None:
        panels = [
            Panel("a", PanelKind.SHELF, 800, 500),
            Panel("big", PanelKind.TOP, 3000, 600),
            Panel("z", PanelKind.SHELF, 400, 300),
        ]

        ids = [t.id for t in tiler.tile(panels, USABLE_W, USABLE_H)]

        assert ids == ["a", "big-tile1x1", "big-tile2x1", "z"]

    def test_banding_only_on_original_perimeter(self, tiler: OversizeTiler) -> None:
        panel = Panel(
            "counter",
            PanelKind.TOP,
            3000,
            600,
            banded_edges=ALL_EDGES,
            band_class="2mm",
        )

        first, second = tiler.tile([panel], USABLE_W, USABLE_H)

        assert PanelEdge.RIGHT not in first.banded_edges
        assert PanelEdge.LEFT in first.banded_edges
        assert PanelEdge.LEFT not in second.banded_edges
        assert PanelEdge.RIGHT in second.banded_edges
        total = (first.banded_length + second.banded_length) * panel.quantity
        assert total == pytest.approx(panel.banded_length)

    @pytest.mark.parametrize(("w", "h"), [(0, 1200), (2420, -1)])
    def test_invalid_usable_area_rejected(
        self, tiler: OversizeTiler, w: float, h: float
    ) -> None:
        with pytest.raises(ValueError):
            tiler.tile([], w, h)
