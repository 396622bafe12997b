"""Reference staples basket.

Eleven representative recurring household items used to judge how
well a store covers everyday shopping, independent of the list the
user asked for. Only packaged goods the price source lists are
included; fresh produce, eggs and fresh cheese are left out.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Iterable, Sequence

from src.common.models import PriceObservation


@dataclass(frozen=True)
class BasketItem:
    """A staple with keyword groups for substring matching.

    Keywords inside a group must ALL appear (AND); any matching group
    is enough (OR). ``weight`` is an informational importance hint for
    callers; ``BasketCoverage`` counts every staple once regardless of it.
    """

    name: str
    keyword_groups: tuple[tuple[str, ...], ...]
    weight: int = 1


BasketMatcher = Callable[[str, BasketItem], bool]


REFERENCE_BASKET: tuple[BasketItem, ...] = (
    # Dairy (packaged)
    BasketItem("Leche 1L", (("leche",),), 3),
    # Pantry staples
    BasketItem("Arroz 1kg", (("arroz",),), 2),
    BasketItem("Aceite 1.5L", (("aceite",),), 3),
    BasketItem("Harina 1kg", (("harina",),), 2),
    BasketItem("Azúcar 1kg", (("azúcar",), ("azucar",)), 2),
    BasketItem("Fideos 500g", (("fideos",), ("fideo",)), 2),
    BasketItem("Yerba 1kg", (("yerba",),), 3),
    BasketItem("Pan lactal", (("pan lactal",), ("pan de molde",)), 2),
    # Cleaning & hygiene
    BasketItem("Detergente", (("detergente",),), 2),
    BasketItem(
        "Papel higiénico",
        (("papel higiénico",), ("papel higienico",), ("papel hig",)),
        2,
    ),
    # Beverages
    BasketItem(
        "Agua 1.5L",
        (("agua mineral",), ("agua villavicencio",), ("agua glaciar",)),
        1,
    ),
)


def matches_basket_item(text: str, item: BasketItem) -> bool:
    """Case-insensitive keyword match of a product text against a staple."""
    lower = text.lower()
    return any(
        all(keyword in lower for keyword in group)
        for group in item.keyword_groups
    )


@dataclass
class BasketCoverage:
    """Fraction of the reference basket a store's products cover.

    Match results are memoized per (catalog name, description) for the
    lifetime of one instance, so the same product seen at many stores
    is only tested against the basket once.

    Usage:
        coverage = BasketCoverage()
        ratio = coverage.ratio(products_at_store)
    """

    basket: Sequence[BasketItem] = REFERENCE_BASKET
    matcher: BasketMatcher = matches_basket_item
    _memo: dict[tuple[str, str], frozenset[int]] = field(default_factory=dict, repr=False)

    def ratio(self, products: Iterable[PriceObservation]) -> float:
        """Matched staples over basket size, unweighted."""
        if not self.basket:
            return 0.0
        covered: set[int] = set()
        for product in products:
            covered |= self._matched_items(product)
        return len(covered) / len(self.basket)

    def _matched_items(self, product: PriceObservation) -> frozenset[int]:
        key = (product.catalog_product_name, product.product_description)
        cached = self._memo.get(key)
        if cached is not None:
            return cached
        # Either the catalog name or the source description may carry the staple's keywords.
        matched = frozenset(
            idx
            for idx, item in enumerate(self.basket)
            if self.matcher(product.catalog_product_name, item)
            or self.matcher(product.product_description, item)
        )
        self._memo[key] = matched
        return matched
