"""In-memory price catalog implementing the PriceLookup capability.

The catalog holds the caller's per-key price settings and the products they
may link to. It answers lookups with a PriceRecord; choosing between the
linked product, the override and the default table is left to the
PriceResolver.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Mapping

from woodquote.domain.services.pricing import PriceKey, PriceRecord

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Product:
    """A purchasable product with a unit price.

    Attributes:
        id: Product identifier.
        name: Display name.
        price_per_unit: Price of one unit.
        unit: Unit the product is sold in, e.g. "sheet", "pcs" or "roll".
    """

    id: str
    name: str
    price_per_unit: float
    unit: str = "pcs"

    def __post_init__(self) -> None:
        if self.price_per_unit < 0:
            raise ValueError("Product price must be non-negative")


@dataclass(frozen=True)
class PriceSetting:
    """The caller's price configuration for one key.

    Attributes:
        key: Price key the setting applies to.
        linked_product_id: Product whose price is used when real pricing is on.
        use_real_pricing: Whether to use the linked product's price.
        override_price: Custom price overriding the default table.
    """

    key: PriceKey
    linked_product_id: str | None = None
    use_real_pricing: bool = False
    override_price: float | None = None

    def __post_init__(self) -> None:
        if self.override_price is not None and self.override_price < 0:
            raise ValueError("Override price must be non-negative")


class CatalogPriceLookup:
    """PriceLookup backed by settings and products held in memory.

    Example:
        >>> catalog = CatalogPriceLookup(
        ...     settings=[PriceSetting(PriceKey("hardware", "hinge"), override_price=75)],
        ... )
        >>> catalog(PriceKey("hardware", "hinge")).override_price
        75
    """

    def __init__(
        self,
        settings: Iterable[PriceSetting] = (),
        products: Iterable[Product] = (),
    ) -> None:
        self._settings: dict[PriceKey, PriceSetting] = {s.key: s for s in settings}
        self._products: Mapping[str, Product] = {p.id: p for p in products}

    def __call__(self, key: PriceKey) -> PriceRecord | None:
        setting = self._settings.get(key)
        if setting is None:
            return None

        product = None
        if setting.linked_product_id is not None:
            product = self._products.get(setting.linked_product_id)
            if product is None:
                logger.warning(
                    "Price setting %s links unknown product %s",
                    key,
                    setting.linked_product_id,
                )

        return PriceRecord(
            use_real_pricing=setting.use_real_pricing,
            linked_product_price=product.price_per_unit if product else None,
            linked_product_unit=product.unit if product else None,
            override_price=setting.override_price,
        )

    def __len__(self) -> int:
        return len(self._settings)
