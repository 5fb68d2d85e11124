"""Hardware line items."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class HardwareItem:
    """A hardware requirement passed through to the purchase summary.

    Attributes:
        name: Display name, e.g. "Hinge" or "Center Lock Set".
        quantity: Number of pieces or sets to buy.
        rate_key: Hardware price key, e.g. "hinge". Defaults to the name
            lowercased with spaces replaced by underscores.
        rate_multiplier: Multiplier applied to the resolved rate, for sets
            priced relative to a single piece (a slide set is two slides).
        notes: Optional remark shown in reports.
    """

    name: str
    quantity: int
    rate_key: str = ""
    rate_multiplier: float = 1.0
    notes: str = ""

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("Hardware name must not be empty")
        if self.quantity < 0:
            raise ValueError("Hardware quantity must be non-negative")
        if self.rate_multiplier <= 0:
            raise ValueError("Hardware rate multiplier must be positive")
        if not self.rate_key:
            object.__setattr__(
                self, "rate_key", self.name.strip().lower().replace(" ", "_")
            )
