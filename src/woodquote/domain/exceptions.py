"""Exceptions raised by the estimation core.

Every error below aborts the whole estimation call. A bill of materials with
a dropped panel or an unpriced group is never returned.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .services.pricing import PriceKey


class EstimationError(Exception):
    """Base class for all estimation failures."""

    pass


class InvalidPanelError(EstimationError, ValueError):
    """Raised when a panel has invalid dimensions, quantity or identity.

    Attributes:
        panel_id: Id of the offending panel, if known.
    """

    def __init__(self, message: str, panel_id: str | None = None) -> None:
        self.panel_id = panel_id
        super().__init__(message)


class UnplaceablePanelError(EstimationError):
    """Raised when a panel instance does not fit a freshly opened sheet.

    This means an oversize panel reached the nester without being tiled.

    Attributes:
        panel_id: Id of the panel that could not be placed.
        width: Panel width in millimetres.
        height: Panel height in millimetres.
    """

    def __init__(self, panel_id: str, width: float, height: float) -> None:
        self.panel_id = panel_id
        self.width = width
        self.height = height
        super().__init__(
            f"Panel {panel_id} ({width:g}x{height:g}mm) does not fit on a fresh sheet"
        )


class PriceUnavailableError(EstimationError):
    """Raised when no tier of the price chain yields a rate for a key."""

    def __init__(self, key: PriceKey) -> None:
        self.key = key
        super().__init__(f"No price available for {key}")


class DegenerateFinishTopologyError(EstimationError):
    """Raised in strict mode for a panel kind with no face assignment."""

    def __init__(self, panel_id: str, kind: str) -> None:
        self.panel_id = panel_id
        self.kind = kind
        super().__init__(
            f"Panel {panel_id} has kind '{kind}' with no face assignment"
        )
