"""Tests for sheet nesting data models, GuillotineNester and NestingService.

Tests cover:
- SheetSpec validation and usable area
- Placement geometry and labels
- Best-short-side-fit placement and free-rectangle splitting
- Kerf spacing, sheet bounds and utilization limits
- Sheet overflow and unplaceable panels
- Multi-material coordination and oversize tiling
"""

from __future__ import annotations

from itertools import combinations

import pytest

from woodquote.domain.exceptions import InvalidPanelError, UnplaceablePanelError
from woodquote.domain.value_objects import (
    GrainDirection,
    MaterialClass,
    Panel,
    PanelKind,
)
from woodquote.infrastructure.bin_packing import (
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

EPS = 1e-9


def _assert_kerf_separated(layout: SheetLayout, kerf: float) -> None:
    """Every pair of placements on a sheet is at least one kerf apart."""
    for a, b in combinations(layout.placements, 2):
        separated = (
            a.right_edge + kerf <= b.x + EPS
            or b.right_edge + kerf <= a.x + EPS
            or a.bottom_edge + kerf <= b.y + EPS
            or b.bottom_edge + kerf <= a.y + EPS
        )
        assert separated, f"{a.label} and {b.label} are closer than the kerf"


def _assert_within_margins(layout: SheetLayout) -> None:
    sheet = layout.sheet
    for p in layout.placements:
        assert p.x >= sheet.margin - EPS
        assert p.y >= sheet.margin - EPS
        assert p.right_edge <= sheet.length - sheet.margin + EPS
        assert p.bottom_edge <= sheet.width - sheet.margin + EPS


# =============================================================================
# SheetSpec
# =============================================================================


class TestSheetSpec:
    def test_defaults_are_standard_sheet(self) -> None:
        sheet = SheetSpec()
        assert (sheet.length, sheet.width) == (2440, 1220)
        assert sheet.kerf == 3
        assert sheet.margin == 10

    def test_usable_dimensions(self) -> None:
        sheet = SheetSpec()
        assert sheet.usable_length == 2420
        assert sheet.usable_width == 1200
        assert sheet.net_area == 2420 * 1200

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"length": 0},
            {"width": -1},
            {"kerf": -0.5},
            {"margin": -1},
            {"width": 100, "margin": 50},
        ],
    )
    def test_invalid_sheets_rejected(self, kwargs: dict) -> None:
        with pytest.raises(ValueError):
            SheetSpec(**kwargs)


# =============================================================================
# Data models
# =============================================================================


class TestPlacement:
    def test_rotated_extents(self) -> None:
        panel = Panel("p", PanelKind.SHELF, 800, 500)
        placed = Placement(panel, 10, 10, rotated=True)
        assert placed.placed_width == 500
        assert placed.placed_height == 800
        assert placed.right_edge == 510
        assert placed.bottom_edge == 810

    def test_negative_position_rejected(self) -> None:
        panel = Panel("p", PanelKind.SHELF, 800, 500)
        with pytest.raises(ValueError):
            Placement(panel, -1, 0)

    def test_label_includes_copy_number_for_quantities(self) -> None:
        single = Panel("top", PanelKind.TOP, 800, 500)
        multiple = Panel("shelf", PanelKind.SHELF, 800, 500, quantity=3)
        assert Placement(single, 10, 10).label == "top"
        assert Placement(multiple, 10, 10, copy_index=1).label == "shelf #2"


class TestFreeRectangle:
    def test_contains(self) -> None:
        outer = FreeRectangle(0, 0, 100, 100)
        assert outer.contains(FreeRectangle(10, 10, 50, 50))
        assert outer.contains(outer)
        assert not outer.contains(FreeRectangle(60, 60, 50, 50))

    def test_touching_edges_do_not_overlap(self) -> None:
        rect = FreeRectangle(100, 0, 50, 50)
        assert not rect.overlaps(0, 0, 100, 50)
        assert rect.overlaps(0, 0, 101, 50)


class TestSheetLayout:
    def test_empty_layout(self) -> None:
        layout = SheetLayout(0, SheetSpec(), MaterialClass.standard_18mm(), ())
        assert layout.utilization == 0
        assert layout.waste == SheetSpec().net_area
        assert layout.piece_count == 0

    def test_negative_index_rejected(self) -> None:
        with pytest.raises(ValueError):
            SheetLayout(-1, SheetSpec(), MaterialClass.standard_18mm(), ())


class TestNestingResult:
    def test_empty_result(self) -> None:
        result = NestingResult()
        assert result.total_sheets == 0
        assert result.layouts == ()
        assert result.for_material(MaterialClass.standard_18mm()) is None


# =============================================================================
# GuillotineNester - placement
# =============================================================================


class TestGuillotineNesterPlacement:
    """Tests for best-short-side-fit placement on a single sheet."""

    def test_single_panel_at_margin_corner(self, standard_sheet: SheetSpec) -> None:
        panel = Panel("side", PanelKind.SIDE, 2000, 600)

        result = GuillotineNester(standard_sheet).nest([panel])

        assert result.sheet_count == 1
        placement = result.layouts[0].placements[0]
        assert (placement.x, placement.y) == (10, 10)
        assert placement.rotated is False
        assert result.utilization == pytest.approx(0.4132, abs=1e-4)

    def test_free_rectangles_after_first_placement(
        self, standard_sheet: SheetSpec
    ) -> None:
        panel = Panel("side", PanelKind.SIDE, 2000, 600)

        layout = GuillotineNester(standard_sheet).nest([panel]).layouts[0]

        assert layout.free_rectangles == (
            FreeRectangle(2013, 10, 417, 1200),
            FreeRectangle(10, 613, 2420, 597),
        )

    def test_second_panel_placed_one_kerf_away(
        self, standard_sheet: SheetSpec
    ) -> None:
        panel = Panel("square", PanelKind.SHELF, 1200, 1200, quantity=2)

        result = GuillotineNester(standard_sheet).nest([panel])

        assert result.sheet_count == 1
        first, second = result.layouts[0].placements
        assert (first.x, first.y) == (10, 10)
        assert (second.x, second.y) == (1213, 10)

    def test_rotates_when_only_rotated_orientation_fits(
        self, standard_sheet: SheetSpec
    ) -> None:
        panel = Panel("side", PanelKind.SIDE, 600, 2000)

        placement = GuillotineNester(standard_sheet).nest([panel]).layouts[0].placements[0]

        assert placement.rotated is True
        assert placement.placed_width == 2000

    def test_grained_panel_never_rotated(
        self, standard_sheet: SheetSpec, small_wardrobe_panels: list[Panel]
    ) -> None:
        grained = [
            Panel(
                p.id,
                p.kind,
                p.width,
                p.height,
                quantity=p.quantity,
                grain=GrainDirection.LONG,
            )
            for p in small_wardrobe_panels
        ]

        result = GuillotineNester(standard_sheet).nest(grained)

        assert all(not p.rotated for layout in result.layouts for p in layout.placements)

    def test_quantity_expanded_into_copies(self, standard_sheet: SheetSpec) -> None:
        panel = Panel("shelf", PanelKind.SHELF, 800, 500, quantity=3)

        result = GuillotineNester(standard_sheet).nest([panel])

        placements = result.layouts[0].placements
        assert sorted(p.copy_index for p in placements) == [0, 1, 2]

    def test_sort_order_changes_first_placement(
        self, standard_sheet: SheetSpec
    ) -> None:
        square = Panel("square", PanelKind.SHELF, 1000, 1000)
        strip = Panel("strip", PanelKind.FILLER, 2000, 100)

        by_area = GuillotineNester(standard_sheet, SortOrder.AREA_DESC).nest(
            [strip, square]
        )
        by_side = GuillotineNester(standard_sheet, SortOrder.MAX_SIDE_DESC).nest(
            [square, strip]
        )

        assert by_area.layouts[0].placements[0].panel_id == "square"
        assert by_side.layouts[0].placements[0].panel_id == "strip"

    def test_sort_order_accepts_string_value(self, standard_sheet: SheetSpec) -> None:
        nester = GuillotineNester(standard_sheet, "max-side-desc")  # type: ignore[arg-type]
        assert nester.sort_order is SortOrder.MAX_SIDE_DESC


# =============================================================================
# GuillotineNester - invariants
# =============================================================================


class TestGuillotineNesterInvariants:
    """Properties that must hold for every nesting result."""

    @pytest.fixture
    def mixed_panels(self) -> list[Panel]:
        return [
            Panel("side", PanelKind.SIDE, 2100, 560, quantity=4),
            Panel("top", PanelKind.TOP, 900, 560, quantity=4),
            Panel("shelf", PanelKind.SHELF, 860, 540, quantity=6),
            Panel("shutter", PanelKind.SHUTTER, 2096, 445, quantity=4),
            Panel("drawer", PanelKind.DRAWER_FRONT, 440, 180, quantity=5),
            Panel("filler", PanelKind.FILLER, 1200, 75, quantity=2),
        ]

    def test_every_copy_placed_once(
        self, standard_sheet: SheetSpec, mixed_panels: list[Panel]
    ) -> None:
        result = GuillotineNester(standard_sheet).nest(mixed_panels)

        placed = [(p.panel_id, p.copy_index) for layout in result.layouts for p in layout.placements]
        expected = [(p.id, i) for p in mixed_panels for i in range(p.quantity)]
        assert sorted(placed) == sorted(expected)

    def test_area_conserved(
        self, standard_sheet: SheetSpec, mixed_panels: list[Panel]
    ) -> None:
        result = GuillotineNester(standard_sheet).nest(mixed_panels)

        assert result.used_area == pytest.approx(sum(p.total_area for p in mixed_panels))

    def test_kerf_separation_and_margins(
        self, standard_sheet: SheetSpec, mixed_panels: list[Panel]
    ) -> None:
        result = GuillotineNester(standard_sheet).nest(mixed_panels)

        for layout in result.layouts:
            _assert_kerf_separated(layout, standard_sheet.kerf)
            _assert_within_margins(layout)

    def test_utilization_within_bounds(
        self, standard_sheet: SheetSpec, mixed_panels: list[Panel]
    ) -> None:
        result = GuillotineNester(standard_sheet).nest(mixed_panels)

        assert 0 < result.utilization <= 1
        for layout in result.layouts:
            assert 0 <= layout.utilization <= 1
            assert layout.waste >= 0

    def test_sheet_indices_sequential(
        self, standard_sheet: SheetSpec, mixed_panels: list[Panel]
    ) -> None:
        result = GuillotineNester(standard_sheet).nest(mixed_panels)

        assert [layout.sheet_index for layout in result.layouts] == list(range(result.sheet_count))
        assert all(layout.placements for layout in result.layouts)

    def test_deterministic(
        self, standard_sheet: SheetSpec, mixed_panels: list[Panel]
    ) -> None:
        first = GuillotineNester(standard_sheet).nest(mixed_panels)
        second = GuillotineNester(standard_sheet).nest(mixed_panels)

        assert first == second

    def test_zero_kerf_allows_touching_panels(self) -> None:
        sheet = SheetSpec(kerf=0, margin=0)
        panel = Panel("half", PanelKind.SHELF, 1220, 1220, quantity=2)

        result = GuillotineNester(sheet).nest([panel])

        assert result.sheet_count == 1
        assert result.utilization == pytest.approx(1.0)


# =============================================================================
# GuillotineNester - overflow and errors
# =============================================================================


class TestGuillotineNesterOverflow:
    def test_new_sheet_opened_when_full(self, standard_sheet: SheetSpec) -> None:
        panel = Panel("square", PanelKind.SHELF, 1200, 1200, quantity=3)

        result = GuillotineNester(standard_sheet).nest([panel])

        assert result.sheet_count == 2
        assert [layout.piece_count for layout in result.layouts] == [2, 1]

    def test_later_small_panel_fills_earlier_sheet(
        self, standard_sheet: SheetSpec
    ) -> None:
        big = Panel("big", PanelKind.SHELF, 2420, 1000, quantity=2)
        small = Panel("small", PanelKind.FILLER, 1000, 150)

        result = GuillotineNester(standard_sheet).nest([big, small])

        assert result.sheet_count == 2
        small_placement = next(
            p for layout in result.layouts for p in layout.placements if p.panel_id == "small"
        )
        assert small_placement.y == pytest.approx(1013)


class TestGuillotineNesterErrors:
    def test_empty_input(self, standard_sheet: SheetSpec) -> None:
        result = GuillotineNester(standard_sheet).nest([])
        assert isinstance(result, MaterialNesting)
        assert result.sheet_count == 0
        assert result.utilization == 0

    def test_oversize_panel_unplaceable(self, standard_sheet: SheetSpec) -> None:
        panel = Panel("counter", PanelKind.TOP, 3000, 600)

        with pytest.raises(UnplaceablePanelError) as exc_info:
            GuillotineNester(standard_sheet).nest([panel])

        assert exc_info.value.panel_id == "counter"

    def test_grained_panel_too_tall_unplaceable(
        self, standard_sheet: SheetSpec
    ) -> None:
        panel = Panel("side", PanelKind.SIDE, 600, 2000, grain=GrainDirection.LONG)

        with pytest.raises(UnplaceablePanelError):
            GuillotineNester(standard_sheet).nest([panel])

    def test_mixed_materials_rejected(
        self,
        standard_sheet: SheetSpec,
        plywood_18: MaterialClass,
        plywood_6: MaterialClass,
    ) -> None:
        panels = [
            Panel("side", PanelKind.SIDE, 2000, 560, material=plywood_18),
            Panel("back", PanelKind.BACK, 2000, 900, material=plywood_6),
        ]

        with pytest.raises(ValueError, match="back"):
            GuillotineNester(standard_sheet).nest(panels, plywood_18)


# =============================================================================
# NestingService
# =============================================================================


class TestNestingService:
    """Tests for multi-material coordination and tiling."""

    def test_groups_by_material_in_first_seen_order(
        self, plywood_18: MaterialClass, plywood_6: MaterialClass
    ) -> None:
        panels = [
            Panel("back", PanelKind.BACK, 2000, 900, material=plywood_6),
            Panel("side", PanelKind.SIDE, 2000, 560, material=plywood_18),
            Panel("top", PanelKind.TOP, 900, 560, material=plywood_18),
        ]

        result = NestingService().nest(panels)

        assert [n.material for n in result.materials] == [plywood_6, plywood_18]
        assert result.sheets_by_material == {plywood_6: 1, plywood_18: 1}
        assert result.total_sheets == 2
        assert result.total_pieces_placed == 3

    def test_materials_never_share_sheets(
        self, plywood_18: MaterialClass, plywood_6: MaterialClass
    ) -> None:
        panels = [
            Panel("a", PanelKind.SHELF, 300, 300, material=plywood_18),
            Panel("b", PanelKind.BACK, 300, 300, material=plywood_6),
        ]

        result = NestingService().nest(panels)

        for layout in result.layouts:
            assert {p.panel.material for p in layout.placements} == {layout.material}

    def test_oversize_panel_tiled_before_nesting(self) -> None:
        panel = Panel("counter", PanelKind.TOP, 3000, 600)

        result = NestingService().nest([panel])

        placed = sorted(p.panel_id for p in result.layouts[0].placements)
        assert placed == ["counter-tile1x1", "counter-tile2x1"]
        assert result.materials[0].used_area == pytest.approx(panel.area)

    def test_grained_tall_panel_tiled_across(self) -> None:
        panel = Panel("side", PanelKind.SIDE, 600, 2100, grain=GrainDirection.LONG)

        result = NestingService().nest([panel])

        heights = sorted(p.panel.height for p in result.layouts[0].placements)
        assert heights == [900, 1200]

    def test_duplicate_ids_rejected(self) -> None:
        panels = [
            Panel("a", PanelKind.SHELF, 300, 300),
            Panel("a", PanelKind.SHELF, 400, 300),
        ]
        with pytest.raises(InvalidPanelError):
            NestingService().nest(panels)

    def test_tile_id_clashing_with_panel_id_rejected(
        self, plywood_6: MaterialClass
    ) -> None:
        panels = [
            Panel("a", PanelKind.TOP, 3000, 600),
            Panel("a-tile1x1", PanelKind.SHELF, 400, 300),
        ]
        with pytest.raises(InvalidPanelError) as exc_info:
            NestingService().nest(panels)
        assert exc_info.value.panel_id == "a-tile1x1"

        # Ids are unique across material classes too
        panels[1] = Panel("a-tile1x1", PanelKind.BACK, 400, 300, material=plywood_6)
        with pytest.raises(InvalidPanelError):
            NestingService().nest(panels)

    def test_material_sheet_override(self, plywood_6: MaterialClass) -> None:
        small_sheet = SheetSpec(length=1220, width=1220)
        service = NestingService(material_sheets={plywood_6: small_sheet})
        panel = Panel("back", PanelKind.BACK, 1100, 1100, material=plywood_6)

        result = service.nest([panel])

        assert result.materials[0].sheet == small_sheet
        assert service.sheet_for(MaterialClass.standard_18mm()) == SheetSpec()

    def test_wardrobe_fits_on_few_sheets(
        self, small_wardrobe_panels: list[Panel]
    ) -> None:
        result = NestingService().nest(small_wardrobe_panels)

        assert result.total_pieces_placed == 9
        assert 1 <= result.total_sheets <= 3
        for layout in result.layouts:
            _assert_kerf_separated(layout, layout.sheet.kerf)
            _assert_within_margins(layout)
