"""Unit tests for PurchaseAggregator.

Tests cover:
- Board groups per material class with nester sheet counts
- Laminate groups per face type
- Edge-banding rolls per band class
- Hardware pass-through with rate multipliers
- Adhesive line and totals
- One lookup per distinct price key
"""

from __future__ import annotations

import pytest

from conftest import RecordingLookup
from woodquote.domain.exceptions import PriceUnavailableError
from woodquote.domain.services import (
    Face,
    FaceFinishResolver,
    FinishTopology,
    PriceCategory,
    PriceKey,
    PriceRecord,
    PriceResolver,
    PurchaseAggregator,
    mm2_to_sqft,
)
from woodquote.domain.value_objects import (
    ALL_EDGES,
    FinishType,
    HardwareItem,
    MaterialClass,
    Panel,
    PanelEdge,
    PanelKind,
)
from woodquote.infrastructure.bin_packing import NestingResult, NestingService


def _aggregate(
    panels: list[Panel],
    topology: FinishTopology | None = None,
    hardware: tuple[HardwareItem, ...] = (),
    lookup: RecordingLookup | None = None,
    rounding_digits: int = 2,
):
    topology = topology or FinishTopology()
    nesting = NestingService().nest(panels)
    finishes = FaceFinishResolver().resolve(panels, topology)
    aggregator = PurchaseAggregator(PriceResolver(lookup), rounding_digits)
    return aggregator.aggregate(panels, nesting, finishes, hardware)


@pytest.fixture
def doors() -> list[Panel]:
    """Two 1000x500 doors banded all round in 2mm."""
    return [
        Panel(
            "door",
            PanelKind.DOOR,
            1000,
            500,
            quantity=2,
            banded_edges=ALL_EDGES,
            band_class="2mm",
        )
    ]


class TestBoardGroups:
    def test_board_area_rate_and_sheets(self, doors: list[Panel]) -> None:
        purchase = _aggregate(doors)

        (board,) = purchase.boards
        area = mm2_to_sqft(2 * 1000 * 500)
        assert board.material == MaterialClass.standard_18mm()
        assert board.total_area == pytest.approx(area)
        assert board.sheet_count == 1
        assert board.rate == 147
        assert board.cost == round(area * 147, 2)
        assert 0 < board.utilization_percent <= 100

    def test_one_group_per_material(
        self, plywood_18: MaterialClass, plywood_6: MaterialClass
    ) -> None:
        panels = [
            Panel("side", PanelKind.SIDE, 2000, 560, quantity=2, material=plywood_18),
            Panel("back", PanelKind.BACK, 2000, 900, material=plywood_6),
        ]

        purchase = _aggregate(panels)

        assert [g.material for g in purchase.boards] == [plywood_18, plywood_6]
        assert purchase.boards[1].rate == 95
        assert purchase.total_sheets == 2

    def test_missing_material_in_nesting_rejected(self, doors: list[Panel]) -> None:
        finishes = FaceFinishResolver().resolve(doors, FinishTopology())
        aggregator = PurchaseAggregator(PriceResolver())

        with pytest.raises(ValueError, match="18mm plywood"):
            aggregator.aggregate(doors, NestingResult(), finishes)


class TestLaminateGroups:
    def test_outer_group_for_fronts(self, doors: list[Panel]) -> None:
        purchase = _aggregate(doors)

        (laminate,) = purchase.laminates
        assert laminate.face is Face.OUTER
        assert laminate.finish == "outer_laminate"
        assert laminate.area == pytest.approx(4 * mm2_to_sqft(500_000))
        assert laminate.sheet_count == 1
        assert laminate.rate == 210

    def test_inner_group_always_inner_laminate(self) -> None:
        panels = [Panel("shelf", PanelKind.SHELF, 900, 500, quantity=4)]
        topology = FinishTopology(finish=FinishType.ACRYLIC)

        purchase = _aggregate(panels, topology)

        (laminate,) = purchase.laminates
        assert laminate.face is Face.INNER
        assert laminate.finish == "inner_laminate"
        assert laminate.rate == 150

    def test_premium_finish_rate(self, doors: list[Panel]) -> None:
        purchase = _aggregate(doors, FinishTopology(finish=FinishType.ACRYLIC))
        assert purchase.laminates[0].finish == "acrylic_finish"
        assert purchase.laminates[0].rate == 380

    def test_pre_laminated_board_has_no_laminate(
        self, pre_lam_board: MaterialClass
    ) -> None:
        panels = [Panel("door", PanelKind.DOOR, 1000, 500, material=pre_lam_board)]

        purchase = _aggregate(panels, FinishTopology(is_pre_laminated=True))

        assert purchase.laminates == ()
        assert purchase.adhesive is None
        assert purchase.boards[0].rate == 80


class TestEdgeBanding:
    def test_rolls_and_cost(self, doors: list[Panel]) -> None:
        purchase = _aggregate(doors)

        (band,) = purchase.edge_banding
        assert band.band_class == "2mm"
        assert band.length_required == pytest.approx(6.0)
        assert band.rolls_needed == 1
        assert band.cost == 1 * 50 * 8

    def test_grouped_by_band_class(self) -> None:
        panels = [
            Panel(
                "shelf",
                PanelKind.SHELF,
                800,
                500,
                quantity=5,
                banded_edges=(PanelEdge.TOP,),
                band_class="0.8mm",
            ),
            Panel(
                "side",
                PanelKind.SIDE,
                2000,
                560,
                banded_edges=(PanelEdge.TOP,),
                band_class="2mm",
            ),
        ]

        purchase = _aggregate(panels)

        lengths = {g.band_class: g.length_required for g in purchase.edge_banding}
        assert lengths == pytest.approx({"0.8mm": 4.0, "2mm": 2.0})

    def test_unbanded_panels_have_no_banding(self) -> None:
        purchase = _aggregate([Panel("back", PanelKind.BACK, 900, 900)])
        assert purchase.edge_banding == ()


class TestHardware:
    def test_hardware_lines_priced(self, doors: list[Panel]) -> None:
        hardware = (
            HardwareItem("Hinge", 4),
            HardwareItem(
                "Drawer Slide Set", 2, rate_key="drawer_slide", rate_multiplier=2
            ),
        )

        purchase = _aggregate(doors, hardware=hardware)

        hinge, slides = purchase.hardware
        assert (hinge.name, hinge.rate, hinge.cost) == ("Hinge", 60, 240)
        assert slides.rate == 300
        assert slides.cost == 600
        assert purchase.hardware_cost == 840

    def test_zero_quantity_items_dropped(self, doors: list[Panel]) -> None:
        purchase = _aggregate(doors, hardware=(HardwareItem("Hinge", 0),))
        assert purchase.hardware == ()

    def test_unpriced_hardware_aborts(self, doors: list[Panel]) -> None:
        with pytest.raises(PriceUnavailableError):
            _aggregate(doors, hardware=(HardwareItem("Gold Knob", 2),))

    def test_override_from_lookup(self, doors: list[Panel]) -> None:
        key = PriceKey(PriceCategory.HARDWARE, "gold_knob")
        lookup = RecordingLookup({key: PriceRecord(override_price=400.0)})

        purchase = _aggregate(
            doors, hardware=(HardwareItem("Gold Knob", 2),), lookup=lookup
        )

        assert purchase.hardware[0].cost == 800


class TestAdhesiveAndTotals:
    def test_adhesive_line(self, doors: list[Panel]) -> None:
        purchase = _aggregate(doors)

        assert purchase.adhesive is not None
        assert purchase.adhesive.bottle_count == 1
        assert purchase.adhesive.cost == 85

    def test_total_is_sum_of_groups(self, doors: list[Panel]) -> None:
        purchase = _aggregate(doors, hardware=(HardwareItem("Handle", 2),))

        expected = (
            purchase.board_cost
            + purchase.laminate_cost
            + purchase.edge_banding_cost
            + purchase.hardware_cost
            + purchase.adhesive_cost
        )
        assert purchase.total_cost == pytest.approx(expected)

    def test_rounding_digits(self, doors: list[Panel]) -> None:
        purchase = _aggregate(doors, rounding_digits=0)

        for group in (*purchase.boards, *purchase.laminates):
            assert group.cost == round(group.cost)

    def test_each_key_looked_up_once(
        self, small_wardrobe_panels: list[Panel], recording_lookup: RecordingLookup
    ) -> None:
        _aggregate(
            small_wardrobe_panels,
            hardware=(HardwareItem("Hinge", 8), HardwareItem("Hinge Spare", 2, "hinge")),
            lookup=recording_lookup,
        )

        assert recording_lookup.calls
        assert set(recording_lookup.calls.values()) == {1}
        assert PriceKey(PriceCategory.EDGE_BANDING, "0.8mm") in recording_lookup.calls
