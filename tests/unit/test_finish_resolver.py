"""Unit tests for face-by-face finish resolution.

Tests cover:
- The face assignment for every panel kind
- Outer and inner area totals with quantities
- Pre-laminated boards needing no finish
- Panels without a face assignment (warning vs strict mode)
- Adhesive bottle calculation
"""

from __future__ import annotations

import logging

import pytest

from woodquote.domain.exceptions import DegenerateFinishTopologyError
from woodquote.domain.services.finish_resolver import (
    Face,
    FaceFinishResolver,
    FinishSummary,
    FinishTopology,
    faces_for_panel,
)
from woodquote.domain.services.geometry import mm2_to_sqft
from woodquote.domain.value_objects import FinishType, MaterialClass, Panel, PanelKind

# 500,000 mm2 per panel face
W, H = 1000, 500
FACE_SQFT = mm2_to_sqft(W * H)


def _panel(kind: PanelKind, quantity: int = 1, **kwargs) -> Panel:
    return Panel(f"{kind.value}-panel", kind, W, H, quantity=quantity, **kwargs)


@pytest.fixture
def resolver() -> FaceFinishResolver:
    return FaceFinishResolver()


class TestFacesForPanel:
    """The structural role decides each face's finish."""

    @pytest.mark.parametrize(
        "kind", [PanelKind.SHUTTER, PanelKind.DOOR, PanelKind.DRAWER_FRONT]
    )
    def test_fronts_are_outer_both_sides(self, kind: PanelKind) -> None:
        assert faces_for_panel(_panel(kind)) == (Face.OUTER, Face.OUTER)

    @pytest.mark.parametrize("kind", [PanelKind.SIDE, PanelKind.LOFT_SIDE])
    def test_side_against_wall(self, kind: PanelKind) -> None:
        assert faces_for_panel(_panel(kind)) == (Face.INNER, Face.NONE)

    @pytest.mark.parametrize("kind", [PanelKind.SIDE, PanelKind.LOFT_SIDE])
    def test_exposed_end_side(self, kind: PanelKind) -> None:
        panel = _panel(kind, is_exposed_end=True)
        assert faces_for_panel(panel) == (Face.INNER, Face.OUTER)

    @pytest.mark.parametrize(
        "kind",
        [
            PanelKind.TOP,
            PanelKind.BOTTOM,
            PanelKind.PARTITION,
            PanelKind.SHELF,
            PanelKind.LOFT_TOP,
            PanelKind.LOFT_BOTTOM,
            PanelKind.LOFT_SHELF,
        ],
    )
    def test_interior_parts_one_inner_face(self, kind: PanelKind) -> None:
        assert faces_for_panel(_panel(kind)) == (Face.INNER, Face.NONE)

    @pytest.mark.parametrize("kind", [PanelKind.BACK, PanelKind.LOFT_BACK])
    def test_backs_unfinished(self, kind: PanelKind) -> None:
        assert faces_for_panel(_panel(kind)) == (Face.NONE, Face.NONE)

    @pytest.mark.parametrize("kind", [PanelKind.FILLER, PanelKind.CUSTOM])
    def test_kinds_without_assignment(self, kind: PanelKind) -> None:
        assert faces_for_panel(_panel(kind)) is None


class TestFinishTopology:
    def test_defaults(self) -> None:
        topology = FinishTopology()
        assert topology.finish is FinishType.LAMINATE
        assert topology.is_pre_laminated is False
        assert topology.adhesive_coverage_sqft == 32.0
        assert topology.adhesive_waste_pct == pytest.approx(0.10)

    def test_finish_accepts_string(self) -> None:
        assert FinishTopology(finish="acrylic").finish is FinishType.ACRYLIC  # type: ignore[arg-type]

    @pytest.mark.parametrize(
        "kwargs", [{"adhesive_coverage_sqft": 0}, {"adhesive_waste_pct": -0.1}]
    )
    def test_invalid_values_rejected(self, kwargs: dict) -> None:
        with pytest.raises(ValueError):
            FinishTopology(**kwargs)


class TestFaceFinishResolver:
    """Tests for area totals and adhesive."""

    def test_front_counts_two_outer_faces(
        self, resolver: FaceFinishResolver, laminate_topology: FinishTopology
    ) -> None:
        summary = resolver.resolve([_panel(PanelKind.SHUTTER, 2)], laminate_topology)

        assert summary.outer_area == pytest.approx(4 * FACE_SQFT)
        assert summary.inner_area == 0

    def test_mixed_carcass_areas(
        self, resolver: FaceFinishResolver, laminate_topology: FinishTopology
    ) -> None:
        panels = [
            Panel("left", PanelKind.SIDE, W, H, is_exposed_end=True),
            Panel("right", PanelKind.SIDE, W, H),
            Panel("shelf", PanelKind.SHELF, W, H, quantity=3),
            Panel("back", PanelKind.BACK, W, H),
        ]

        summary = resolver.resolve(panels, laminate_topology)

        assert summary.outer_area == pytest.approx(1 * FACE_SQFT)
        assert summary.inner_area == pytest.approx(5 * FACE_SQFT)
        assert summary.laminated_area == pytest.approx(6 * FACE_SQFT)

    def test_per_panel_breakdown(
        self, resolver: FaceFinishResolver, laminate_topology: FinishTopology
    ) -> None:
        summary = resolver.resolve([_panel(PanelKind.BACK, 2)], laminate_topology)

        (finish,) = summary.panels
        assert finish.faces == (Face.NONE, Face.NONE)
        assert finish.area_sqft == pytest.approx(2 * FACE_SQFT)
        assert finish.none_area == pytest.approx(4 * FACE_SQFT)

    def test_outer_finish_reported(self, resolver: FaceFinishResolver) -> None:
        topology = FinishTopology(finish=FinishType.MEMBRANE)
        summary = resolver.resolve([_panel(PanelKind.DOOR)], topology)
        assert summary.outer_finish is FinishType.MEMBRANE

    def test_pre_laminated_needs_no_finish(self, resolver: FaceFinishResolver) -> None:
        topology = FinishTopology(is_pre_laminated=True)

        summary = resolver.resolve(
            [_panel(PanelKind.SHUTTER), _panel(PanelKind.SIDE)], topology
        )

        assert summary == FinishSummary.empty(topology)
        assert summary.outer_area == 0
        assert summary.inner_area == 0
        assert summary.adhesive_bottles == 0
        assert summary.is_pre_laminated

    def test_pre_laminated_material_needs_no_finish(
        self,
        resolver: FaceFinishResolver,
        laminate_topology: FinishTopology,
        pre_lam_board: MaterialClass,
    ) -> None:
        summary = resolver.resolve(
            [_panel(PanelKind.DOOR, material=pre_lam_board)], laminate_topology
        )

        assert summary.laminated_area == 0
        assert summary.adhesive_bottles == 0
        assert summary.panels[0].faces == (Face.NONE, Face.NONE)
        assert not summary.is_pre_laminated

    def test_mixed_boards_finish_only_plain_panels(
        self,
        resolver: FaceFinishResolver,
        laminate_topology: FinishTopology,
        pre_lam_board: MaterialClass,
    ) -> None:
        panels = [
            Panel("side", PanelKind.SIDE, W, H, is_exposed_end=True, material=pre_lam_board),
            Panel("shutter", PanelKind.SHUTTER, W, H, material=pre_lam_board),
            Panel("shelf", PanelKind.SHELF, W, H, quantity=2),
        ]

        summary = resolver.resolve(panels, laminate_topology)

        assert summary.outer_area == 0
        assert summary.inner_area == pytest.approx(2 * FACE_SQFT)

    def test_pre_laminated_filler_is_not_degenerate(
        self, resolver: FaceFinishResolver, pre_lam_board: MaterialClass
    ) -> None:
        summary = resolver.resolve(
            [_panel(PanelKind.FILLER, material=pre_lam_board)],
            FinishTopology(strict=True),
        )
        assert summary.degenerate_panel_ids == ()

    def test_empty_input(
        self, resolver: FaceFinishResolver, laminate_topology: FinishTopology
    ) -> None:
        summary = resolver.resolve([], laminate_topology)
        assert summary.laminated_area == 0
        assert summary.adhesive_bottles == 0


class TestDegenerateKinds:
    """Panels whose kind has no face assignment."""

    def test_warns_and_treats_as_unfinished(
        self,
        resolver: FaceFinishResolver,
        laminate_topology: FinishTopology,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        panels = [_panel(PanelKind.FILLER), _panel(PanelKind.SHUTTER)]

        with caplog.at_level(logging.WARNING):
            summary = resolver.resolve(panels, laminate_topology)

        assert summary.degenerate_panel_ids == ("filler-panel",)
        assert summary.outer_area == pytest.approx(2 * FACE_SQFT)
        assert "filler-panel" in caplog.text

    def test_strict_mode_raises(self, resolver: FaceFinishResolver) -> None:
        topology = FinishTopology(strict=True)

        with pytest.raises(DegenerateFinishTopologyError) as exc_info:
            resolver.resolve([_panel(PanelKind.CUSTOM)], topology)

        assert exc_info.value.panel_id == "custom-panel"
        assert exc_info.value.kind == "custom"


class TestAdhesive:
    def test_bottles_from_laminated_area(self, resolver: FaceFinishResolver) -> None:
        # Each 1000x500 door: 2 outer faces, about 10.76 sq ft laminated
        panels = [_panel(PanelKind.DOOR, 3)]

        summary = resolver.resolve(panels, FinishTopology())

        # 32.29 sq ft plus 10% waste needs just over one 32 sq ft bottle
        assert summary.laminated_area == pytest.approx(6 * FACE_SQFT)
        assert summary.adhesive_bottles == 2

    def test_coverage_and_waste_configurable(
        self, resolver: FaceFinishResolver
    ) -> None:
        topology = FinishTopology(adhesive_coverage_sqft=100, adhesive_waste_pct=0)

        summary = resolver.resolve([_panel(PanelKind.DOOR, 3)], topology)

        assert summary.adhesive_bottles == 1

    def test_unfinished_panels_need_no_adhesive(
        self, resolver: FaceFinishResolver, laminate_topology: FinishTopology
    ) -> None:
        summary = resolver.resolve([_panel(PanelKind.BACK, 4)], laminate_topology)
        assert summary.adhesive_bottles == 0
