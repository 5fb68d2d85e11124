"""Three-tier price resolution.

A rate for any material or hardware key is resolved in this order:

1. The linked real product's unit price, when the caller's price record
   links a product and has real pricing enabled. Board and laminate products
   sold per sheet are converted to a per-square-foot rate.
2. The record's custom override price.
3. The built-in default rate table.

If no tier yields a rate a PriceUnavailableError is raised; a missing price
is never treated as zero.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Iterable, Mapping

from ..exceptions import PriceUnavailableError
from .geometry import STANDARD_SHEET_AREA_SQFT

if TYPE_CHECKING:
    from woodquote.contracts.protocols import PriceLookup

logger = logging.getLogger(__name__)

__all__ = [
    "DEFAULT_RATES",
    "PriceCategory",
    "PriceKey",
    "PriceRecord",
    "PriceResolver",
    "PriceSource",
    "ResolvedRate",
]


class PriceCategory(str, Enum):
    """Groups of priced items. Each category has its own unit of rate."""

    BOARD = "board"  # per sq ft
    LAMINATE = "laminate"  # per sq ft
    EDGE_BANDING = "edge_banding"  # per metre
    HARDWARE = "hardware"  # per piece
    ADHESIVE = "adhesive"  # per bottle


@dataclass(frozen=True)
class PriceKey:
    """Identifies one priced material or hardware type.

    Attributes:
        category: Price category.
        name: Key within the category, e.g. "18mm_plywood" or "hinge".
    """

    category: PriceCategory
    name: str

    def __post_init__(self) -> None:
        object.__setattr__(self, "category", PriceCategory(self.category))
        if not self.name:
            raise ValueError("Price key name must not be empty")

    @property
    def is_area_priced(self) -> bool:
        """True for keys whose rate is per square foot of sheet material."""
        return self.category in (PriceCategory.BOARD, PriceCategory.LAMINATE)

    @classmethod
    def parse(cls, text: str) -> "PriceKey":
        """Parse ``"category:name"``."""
        category, sep, name = text.partition(":")
        if not sep:
            raise ValueError(f"Price key must look like 'category:name', got {text!r}")
        return cls(PriceCategory(category.strip()), name.strip())

    def __str__(self) -> str:
        return f"{self.category.value}:{self.name}"


@dataclass(frozen=True)
class PriceRecord:
    """The caller's configuration for one price key.

    Attributes:
        use_real_pricing: Whether the linked product's price should be used.
        linked_product_price: Unit price of the linked product, if any.
        linked_product_unit: Unit the product is sold in, e.g. "sheet".
        override_price: Custom price that overrides the default table.
    """

    use_real_pricing: bool = False
    linked_product_price: float | None = None
    linked_product_unit: str | None = None
    override_price: float | None = None


class PriceSource(str, Enum):
    """Which tier of the chain produced a rate."""

    LINKED_PRODUCT = "linked_product"
    OVERRIDE = "override"
    DEFAULT = "default"


@dataclass(frozen=True)
class ResolvedRate:
    key: PriceKey
    rate: float
    source: PriceSource


# Rates in rupees: boards and laminates per sq ft, edge banding per metre,
# hardware per piece, adhesive per bottle.
DEFAULT_RATES: dict[PriceCategory, dict[str, float]] = {
    PriceCategory.BOARD: {
        "18mm_plywood": 147,
        "12mm_plywood": 120,
        "6mm_plywood": 95,
        "25mm_plywood": 190,
        "18mm_mdf": 110,
        "12mm_mdf": 85,
        "6mm_mdf": 65,
        "18mm_particle_board": 80,
        "12mm_particle_board": 60,
        "18mm_pre_lam_particle_board": 80,
        "12mm_pre_lam_particle_board": 60,
        "teak": 450,
        "oak": 380,
        "sheesham": 320,
        "mango_wood": 280,
    },
    PriceCategory.LAMINATE: {
        "outer_laminate": 210,
        "inner_laminate": 150,
        "acrylic_finish": 380,
        "veneer_finish": 320,
        "paint_finish": 180,
        "pu_finish": 450,
        "glass_finish": 520,
        "membrane_foil": 95,
    },
    PriceCategory.EDGE_BANDING: {
        "2mm": 8,
        "0.8mm": 4,
        "1mm": 5,
        "3mm": 12,
    },
    PriceCategory.HARDWARE: {
        "soft_close_hinge": 90,
        "normal_hinge": 30,
        "concealed_hinge": 60,
        "piano_hinge": 45,
        "drawer_slide_soft_close": 180,
        "drawer_slide_normal": 120,
        "ball_bearing_slide": 150,
        "telescopic_slide": 200,
        "ss_handle": 180,
        "aluminium_handle": 120,
        "brass_handle": 250,
        "plastic_handle": 45,
        "door_lock": 80,
        "cam_lock": 25,
        "magnetic_lock": 65,
        "minifix": 15,
        "dowel": 3,
        "screw_pack": 120,
        "wall_bracket": 50,
        "shelf_support": 8,
        "hanging_rod": 150,
        "drawer_organizer": 350,
        "pull_out_basket": 850,
        "lazy_susan": 1200,
        "soft_close_mechanism": 450,
        "hinge": 60,
        "handle": 120,
        "lock": 80,
        "drawer_slide": 150,
        "straightener": 150,
    },
    PriceCategory.ADHESIVE: {
        "adhesive_bottle": 85,
    },
}


class PriceResolver:
    """Resolves rates through the three-tier chain.

    Each distinct key is looked up at most once per resolver. A resolver is
    meant to live for a single estimation call so that prices are never
    served stale across calls.

    Args:
        lookup: Caller-supplied price lookup returning a PriceRecord or None.
        defaults: Built-in default rate table.
    """

    def __init__(
        self,
        lookup: PriceLookup | None = None,
        defaults: Mapping[PriceCategory, Mapping[str, float]] | None = None,
    ) -> None:
        self._lookup = lookup
        self._defaults = DEFAULT_RATES if defaults is None else defaults
        self._cache: dict[PriceKey, ResolvedRate] = {}

    def prefetch(self, keys: Iterable[PriceKey]) -> None:
        """Resolve a batch of keys, querying each distinct key once."""
        for key in dict.fromkeys(keys):
            self.resolve(key)

    def rate(self, key: PriceKey) -> float:
        return self.resolve(key).rate

    def resolve(self, key: PriceKey) -> ResolvedRate:
        """Resolve the rate for a key.

        Raises:
            PriceUnavailableError: If no tier yields a rate.
        """
        cached = self._cache.get(key)
        if cached is not None:
            return cached

        resolved = self._resolve_uncached(key)
        logger.debug(
            "Price %s = %s (%s)", key, resolved.rate, resolved.source.value
        )
        self._cache[key] = resolved
        return resolved

    def _resolve_uncached(self, key: PriceKey) -> ResolvedRate:
        record = self._lookup(key) if self._lookup is not None else None

        if record is not None:
            if record.use_real_pricing and record.linked_product_price is not None:
                return ResolvedRate(
                    key, self._product_rate(key, record), PriceSource.LINKED_PRODUCT
                )
            if record.override_price is not None:
                return ResolvedRate(key, record.override_price, PriceSource.OVERRIDE)

        default = self._defaults.get(key.category, {}).get(key.name)
        if default is not None:
            return ResolvedRate(key, float(default), PriceSource.DEFAULT)

        raise PriceUnavailableError(key)

    def _product_rate(self, key: PriceKey, record: PriceRecord) -> float:
        price = float(record.linked_product_price)
        unit = (record.linked_product_unit or "").lower()
        if key.is_area_priced and "sheet" in unit:
            # Per-sheet price to per-sq-ft rate, unrounded
            return price / STANDARD_SHEET_AREA_SQFT
        return price
