"""Capability protocols supplied by callers of the estimation core.

The core never reaches out to a database or catalog itself. Callers hand in
implementations of these protocols, which keeps the core free of I/O and easy
to test with in-memory fakes.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from woodquote.domain.services.pricing import PriceKey, PriceRecord
    from woodquote.domain.templates.base import TemplateOutput, UnitSpec


@runtime_checkable
class PriceLookup(Protocol):
    """Looks up the caller's price configuration for one key.

    Implementations cover the external half of the price chain: the
    configuration record and its linked product. The default rate table is
    applied by the core.

    Example:
        ```python
        def lookup(key: PriceKey) -> PriceRecord | None:
            if key.name == "hinge":
                return PriceRecord(override_price=75.0)
            return None
        ```
    """

    def __call__(self, key: PriceKey) -> PriceRecord | None:
        """Return the price record for a key, or None if none is configured."""
        ...


@runtime_checkable
class PanelTemplate(Protocol):
    """Enumerates the panels and hardware of one furniture unit type."""

    unit_type: str
    description: str

    def build(self, unit: UnitSpec) -> TemplateOutput:
        """Build the panel and hardware list for a unit.

        Raises:
            ValueError: If the unit dimensions or options are invalid for
                this template.
        """
        ...
