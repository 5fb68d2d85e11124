"""Face-by-face finish resolution for panels.

Every rectangular panel has two faces. The resolver classifies each face as
needing the premium "outer" finish, the utility "inner" laminate, or nothing,
based purely on the panel's structural role. It does not look at the nesting
layout.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Sequence

from ..exceptions import DegenerateFinishTopologyError
from ..value_objects import FinishType, Panel, PanelKind
from .geometry import mm2_to_sqft

logger = logging.getLogger(__name__)

__all__ = [
    "Face",
    "FaceFinishResolver",
    "FinishSummary",
    "FinishTopology",
    "PanelFinish",
    "faces_for_panel",
]


class Face(str, Enum):
    """Finish required on one face of a panel."""

    OUTER = "outer"
    INNER = "inner"
    NONE = "none"


_FRONT_KINDS = frozenset({PanelKind.SHUTTER, PanelKind.DOOR, PanelKind.DRAWER_FRONT})
_SIDE_KINDS = frozenset({PanelKind.SIDE, PanelKind.LOFT_SIDE})
_INTERIOR_KINDS = frozenset(
    {
        PanelKind.TOP,
        PanelKind.BOTTOM,
        PanelKind.PARTITION,
        PanelKind.SHELF,
        PanelKind.LOFT_TOP,
        PanelKind.LOFT_BOTTOM,
        PanelKind.LOFT_SHELF,
    }
)
_BACK_KINDS = frozenset({PanelKind.BACK, PanelKind.LOFT_BACK})


def faces_for_panel(panel: Panel) -> tuple[Face, Face] | None:
    """Return the (face A, face B) finish pair for a panel.

    For carcass sides face A is the interior face and face B the room side.
    Returns None for kinds with no face assignment.
    """
    if panel.kind in _FRONT_KINDS:
        return (Face.OUTER, Face.OUTER)
    if panel.kind in _SIDE_KINDS:
        return (Face.INNER, Face.OUTER if panel.is_exposed_end else Face.NONE)
    if panel.kind in _INTERIOR_KINDS:
        return (Face.INNER, Face.NONE)
    if panel.kind in _BACK_KINDS:
        return (Face.NONE, Face.NONE)
    return None


@dataclass(frozen=True)
class FinishTopology:
    """Finish configuration for one estimate.

    Attributes:
        finish: Finish applied to outer faces.
        is_pre_laminated: Treat the whole estimate as pre-laminated, so no
            finish is applied at all. Panels cut from a pre-laminated
            board get no finish even when this is False.
        adhesive_coverage_sqft: Laminated area one adhesive bottle covers.
        adhesive_waste_pct: Extra adhesive allowance as a fraction.
        strict: Raise on panel kinds without a face assignment instead of
            treating them as unfinished.
    """

    finish: FinishType = FinishType.LAMINATE
    is_pre_laminated: bool = False
    adhesive_coverage_sqft: float = 32.0
    adhesive_waste_pct: float = 0.10
    strict: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "finish", FinishType(self.finish))
        if self.adhesive_coverage_sqft <= 0:
            raise ValueError("Adhesive coverage must be positive")
        if self.adhesive_waste_pct < 0:
            raise ValueError("Adhesive waste percentage must be non-negative")


@dataclass(frozen=True)
class PanelFinish:
    """Resolved faces and finish areas of one panel (all copies)."""

    panel_id: str
    kind: PanelKind
    faces: tuple[Face, Face]
    area_sqft: float
    outer_area: float
    inner_area: float
    none_area: float
    degenerate: bool = False


@dataclass(frozen=True)
class FinishSummary:
    """Aggregate finish requirements for a set of panels.

    Areas are in square feet.
    """

    outer_area: float
    inner_area: float
    adhesive_bottles: int
    outer_finish: FinishType
    is_pre_laminated: bool = False
    panels: tuple[PanelFinish, ...] = ()

    @property
    def laminated_area(self) -> float:
        return self.outer_area + self.inner_area

    @property
    def degenerate_panel_ids(self) -> tuple[str, ...]:
        """Panels whose kind had no face assignment and were left unfinished."""
        return tuple(p.panel_id for p in self.panels if p.degenerate)

    @classmethod
    def empty(cls, topology: FinishTopology) -> "FinishSummary":
        return cls(
            outer_area=0.0,
            inner_area=0.0,
            adhesive_bottles=0,
            outer_finish=topology.finish,
            is_pre_laminated=topology.is_pre_laminated,
        )


class FaceFinishResolver:
    """Resolves outer and inner finish areas for panels."""

    def resolve(
        self, panels: Sequence[Panel], topology: FinishTopology
    ) -> FinishSummary:
        """Classify every panel face and total the finish areas.

        Args:
            panels: Panels to resolve; quantities are honoured.
            topology: Finish configuration.

        Returns:
            The finish summary. A pre-laminated topology yields an empty
            summary; panels cut from pre-laminated boards get no finish.

        Raises:
            DegenerateFinishTopologyError: In strict mode, for a panel kind
                with no face assignment.
        """
        if topology.is_pre_laminated:
            logger.debug("Pre-laminated board: skipping finish resolution")
            return FinishSummary.empty(topology)

        resolved: list[PanelFinish] = []
        outer_total = 0.0
        inner_total = 0.0

        for panel in panels:
            finish = self._resolve_panel(panel, topology.strict)
            resolved.append(finish)
            outer_total += finish.outer_area
            inner_total += finish.inner_area

        laminated = outer_total + inner_total
        bottles = self._adhesive_bottles(laminated, topology)

        logger.info(
            "Resolved finishes for %d panels: outer=%.2f sqft inner=%.2f sqft "
            "adhesive=%d bottles",
            len(resolved),
            outer_total,
            inner_total,
            bottles,
        )

        return FinishSummary(
            outer_area=outer_total,
            inner_area=inner_total,
            adhesive_bottles=bottles,
            outer_finish=topology.finish,
            panels=tuple(resolved),
        )

    def _resolve_panel(self, panel: Panel, strict: bool) -> PanelFinish:
        if panel.material.is_pre_laminated:
            # Factory surface on both faces
            faces: tuple[Face, Face] | None = (Face.NONE, Face.NONE)
        else:
            faces = faces_for_panel(panel)
        degenerate = faces is None
        if faces is None:
            if strict:
                raise DegenerateFinishTopologyError(panel.id, panel.kind.value)
            logger.warning(
                "Panel %s has kind '%s' with no face assignment; "
                "treating it as unfinished",
                panel.id,
                panel.kind.value,
            )
            faces = (Face.NONE, Face.NONE)

        area = mm2_to_sqft(panel.area)
        outer_faces = faces.count(Face.OUTER)
        inner_faces = faces.count(Face.INNER)
        none_faces = 2 - outer_faces - inner_faces

        return PanelFinish(
            panel_id=panel.id,
            kind=panel.kind,
            faces=faces,
            area_sqft=area * panel.quantity,
            outer_area=area * outer_faces * panel.quantity,
            inner_area=area * inner_faces * panel.quantity,
            none_area=area * none_faces * panel.quantity,
            degenerate=degenerate,
        )

    def _adhesive_bottles(self, laminated: float, topology: FinishTopology) -> int:
        if laminated <= 0:
            return 0
        coverage = max(1.0, topology.adhesive_coverage_sqft)
        return math.ceil(laminated * (1 + topology.adhesive_waste_pct) / coverage)
