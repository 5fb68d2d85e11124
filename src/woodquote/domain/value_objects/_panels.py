"""Panel kinds and the cuttable panel value object."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable

from ..exceptions import InvalidPanelError
from ._materials import MaterialClass

logger = logging.getLogger(__name__)


class PanelKind(str, Enum):
    """Structural role of a panel in a furniture unit."""

    # Carcass
    SIDE = "side"
    TOP = "top"
    BOTTOM = "bottom"
    SHELF = "shelf"
    PARTITION = "partition"
    BACK = "back"

    # Fronts
    SHUTTER = "shutter"
    DOOR = "door"
    DRAWER_FRONT = "drawer_front"

    # Loft carcass
    LOFT_SIDE = "loft_side"
    LOFT_TOP = "loft_top"
    LOFT_BOTTOM = "loft_bottom"
    LOFT_SHELF = "loft_shelf"
    LOFT_BACK = "loft_back"

    # Parts without a face assignment
    FILLER = "filler"
    CUSTOM = "custom"

    @classmethod
    def from_label(cls, label: str) -> "PanelKind":
        """Map a free-text part name such as "Loft Side Panel" to a kind.

        More specific phrases are checked first: loft parts before carcass
        parts, and drawer box parts before the generic side/back/bottom
        words. Unrecognised names map to ``CUSTOM`` and are logged.
        """
        name = label.lower()

        if "loft" in name:
            for word, kind in _LOFT_WORDS:
                if word in name:
                    return kind

        if "shutter" in name:
            return cls.SHUTTER
        if "door" in name:
            return cls.DOOR
        if "drawer front" in name:
            return cls.DRAWER_FRONT

        # Drawer boxes are interior parts
        if "drawer side" in name:
            return cls.SIDE
        if "drawer back" in name:
            return cls.BACK
        if "drawer bottom" in name:
            return cls.BOTTOM

        for word, kind in _CARCASS_WORDS:
            if word in name:
                return kind

        if "filler" in name:
            return cls.FILLER

        logger.warning("Unmapped panel name %r; treating as custom", label)
        return cls.CUSTOM


_LOFT_WORDS: tuple[tuple[str, PanelKind], ...] = (
    ("side", PanelKind.LOFT_SIDE),
    ("top", PanelKind.LOFT_TOP),
    ("bottom", PanelKind.LOFT_BOTTOM),
    ("back", PanelKind.LOFT_BACK),
    ("shelf", PanelKind.LOFT_SHELF),
    # Loft shutters are fronts like any other shutter
    ("shutter", PanelKind.SHUTTER),
)

_CARCASS_WORDS: tuple[tuple[str, PanelKind], ...] = (
    ("side", PanelKind.SIDE),
    ("top", PanelKind.TOP),
    ("bottom", PanelKind.BOTTOM),
    ("back", PanelKind.BACK),
    ("partition", PanelKind.PARTITION),
    ("shelf", PanelKind.SHELF),
)


class GrainDirection(str, Enum):
    """Grain alignment constraint for a panel.

    Any value other than NONE pins the panel to its given orientation.
    """

    NONE = "none"
    LONG = "long"
    SHORT = "short"


class PanelEdge(str, Enum):
    """Edges of a panel as seen in its unrotated orientation.

    TOP and BOTTOM run along the panel width; LEFT and RIGHT along its height.
    """

    TOP = "top"
    BOTTOM = "bottom"
    LEFT = "left"
    RIGHT = "right"

    @property
    def runs_along_width(self) -> bool:
        return self in (PanelEdge.TOP, PanelEdge.BOTTOM)


ALL_EDGES: tuple[PanelEdge, ...] = (
    PanelEdge.TOP,
    PanelEdge.BOTTOM,
    PanelEdge.LEFT,
    PanelEdge.RIGHT,
)


@dataclass(frozen=True)
class Panel:
    """One rectangular part to be cut from stock, possibly in several copies.

    Attributes:
        id: Identifier, unique within one estimation call.
        kind: Structural role, which drives the finish assignment.
        width: Width in millimetres. Runs along the sheet length when placed
            unrotated.
        height: Height in millimetres.
        quantity: Number of identical copies.
        material: Board material class the panel is cut from.
        allow_rotate: Whether the nester may turn the panel 90 degrees.
            Forced to False when a grain direction is set.
        grain: Grain constraint.
        is_exposed_end: For side panels, whether the outward face is visible
            to the room instead of standing against a wall.
        banded_edges: Edges that receive edge banding.
        band_class: Edge-band grade, e.g. "2mm". Required when any edge
            is banded.
    """

    id: str
    kind: PanelKind
    width: float
    height: float
    quantity: int = 1
    material: MaterialClass = field(default_factory=MaterialClass.standard_18mm)
    allow_rotate: bool = True
    grain: GrainDirection = GrainDirection.NONE
    is_exposed_end: bool = False
    banded_edges: tuple[PanelEdge, ...] = ()
    band_class: str | None = None

    def __post_init__(self) -> None:
        if not self.id:
            raise InvalidPanelError("Panel id must not be empty")
        if not self.width > 0 or not self.height > 0:
            raise InvalidPanelError(
                f"Panel {self.id} dimensions must be positive "
                f"(got {self.width}x{self.height})",
                panel_id=self.id,
            )
        if isinstance(self.quantity, bool) or not isinstance(self.quantity, int):
            raise InvalidPanelError(
                f"Panel {self.id} quantity must be an integer", panel_id=self.id
            )
        if self.quantity < 1:
            raise InvalidPanelError(
                f"Panel {self.id} quantity must be at least 1 (got {self.quantity})",
                panel_id=self.id,
            )

        try:
            object.__setattr__(self, "kind", PanelKind(self.kind))
            object.__setattr__(self, "grain", GrainDirection(self.grain))
            # Accept any iterable of edges but store a tuple
            edges = tuple(PanelEdge(edge) for edge in self.banded_edges)
        except ValueError as e:
            raise InvalidPanelError(f"Panel {self.id}: {e}", panel_id=self.id) from e
        if len(set(edges)) != len(edges):
            raise InvalidPanelError(
                f"Panel {self.id} lists a banded edge twice", panel_id=self.id
            )
        if edges and not self.band_class:
            raise InvalidPanelError(
                f"Panel {self.id} has banded edges but no band class",
                panel_id=self.id,
            )
        object.__setattr__(self, "banded_edges", edges)

        if self.grain is not GrainDirection.NONE and self.allow_rotate:
            object.__setattr__(self, "allow_rotate", False)

    @property
    def area(self) -> float:
        """Area of a single copy in square millimetres."""
        return self.width * self.height

    @property
    def total_area(self) -> float:
        """Area of all copies in square millimetres."""
        return self.area * self.quantity

    @property
    def can_rotate(self) -> bool:
        return self.allow_rotate and self.grain is GrainDirection.NONE

    @property
    def max_side(self) -> float:
        return max(self.width, self.height)

    @property
    def banded_length(self) -> float:
        """Edge-banding length of a single copy in millimetres."""
        return sum(
            self.width if edge.runs_along_width else self.height
            for edge in self.banded_edges
        )


def validate_panel_ids(panels: Iterable[Panel]) -> None:
    """Ensure panel ids are unique within one estimation call.

    Raises:
        InvalidPanelError: Naming the first duplicated id.
    """
    seen: set[str] = set()
    for panel in panels:
        if panel.id in seen:
            raise InvalidPanelError(f"Duplicate panel id: {panel.id}", panel_id=panel.id)
        seen.add(panel.id)
