"""Store scoring: turns aggregated store data into ranked clusters.

Scores each store across 4 dimensions with weights (configurable):
- Product coverage: 35%
- Category coverage: 25%
- Price competitiveness: 25%
- Reference basket coverage: 15%

All components are normalized to 0.0 to 1.0, so the composite is too.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Iterable, Sequence

from src.common.config import ScoringSettings, settings
from src.common.models import (
    ACTIVE_CATEGORIES,
    GroceryCategory,
    PriceObservation,
    StoreCluster,
)

from .basket import BasketCoverage

logger = logging.getLogger(__name__)

EARTH_RADIUS_KM = 6371.0


@dataclass
class StoreScores:
    """Component scores for one store (each 0.0 to 1.0)."""

    store_name: str
    product_coverage: float = 0.0
    category_coverage: float = 0.0
    price_competitiveness: float = 0.0
    basket_coverage: float = 0.0

    def weighted_total(self, weights: ScoringSettings) -> float:
        return (
            self.product_coverage * weights.weight_product_coverage
            + self.category_coverage * weights.weight_category_coverage
            + self.price_competitiveness * weights.weight_price_competitiveness
            + self.basket_coverage * weights.weight_basket_coverage
        )

    def to_dict(self) -> dict:
        return {
            "store_name": self.store_name,
            "product_coverage": round(self.product_coverage, 3),
            "category_coverage": round(self.category_coverage, 3),
            "price_competitiveness": round(self.price_competitiveness, 3),
            "basket_coverage": round(self.basket_coverage, 3),
        }


class StoreScorer:
    """Builds a StoreCluster for every store in the aggregated mapping.

    Usage:
        scorer = StoreScorer(total_requested=12, user_lat=-34.6, user_lng=-58.4)
        clusters = scorer.score_stores(store_map, cheapest_by_product)
    """

    def __init__(
        self,
        total_requested: int,
        user_lat: float | None = None,
        user_lng: float | None = None,
        *,
        active_categories: Sequence[GroceryCategory] = ACTIVE_CATEGORIES,
        basket_coverage: BasketCoverage | None = None,
        scoring: ScoringSettings | None = None,
    ) -> None:
        self.total_requested = total_requested
        self.user_lat = user_lat
        self.user_lng = user_lng
        self.active_categories = frozenset(active_categories)
        self.category_count = len(self.active_categories)
        self.basket_coverage = basket_coverage or BasketCoverage()
        self.scoring = scoring or settings.scoring

    def score_stores(
        self,
        store_map: dict[str, list[PriceObservation]],
        cheapest_by_product: dict[str, float],
    ) -> list[StoreCluster]:
        """Score every store, in the store map's discovery order."""
        return [
            self.score_store(store_name, products, cheapest_by_product)
            for store_name, products in store_map.items()
            if products
        ]

    def score_store(
        self,
        store_name: str,
        products: list[PriceObservation],
        cheapest_by_product: dict[str, float],
    ) -> StoreCluster:
        by_category: dict[GroceryCategory, list[PriceObservation]] = {}
        for product in products:
            by_category.setdefault(product.category, []).append(product)

        scores = StoreScores(
            store_name=store_name,
            product_coverage=self._product_coverage(len(products)),
            category_coverage=self._category_coverage(by_category.keys()),
            price_competitiveness=self._price_competitiveness(products, cheapest_by_product),
            basket_coverage=self.basket_coverage.ratio(products),
        )
        composite = scores.weighted_total(self.scoring)
        logger.debug(
            "Score %s: products=%.2f categories=%.2f price=%.2f basket=%.2f total=%.3f",
            store_name, scores.product_coverage, scores.category_coverage,
            scores.price_competitiveness, scores.basket_coverage, composite,
        )

        representative = products[0]
        distance = haversine_km(
            self.user_lat, self.user_lng,
            representative.store_lat, representative.store_lng,
        )

        return StoreCluster(
            store_name=store_name,
            total_product_count=len(products),
            products_by_category=by_category,
            all_products=list(products),
            estimated_basket_cost=round_half_up(sum(p.price for p in products)),
            category_coverage=len(by_category),
            cheapest_product_count=count_cheapest(products, cheapest_by_product),
            score=round(min(max(composite, 0.0), 1.0), 3),
            distance_km=round(distance, 1) if distance is not None else None,
            store_address=representative.store_address,
            store_locality=representative.store_locality,
        )

    # ------------------------------------------------------------------
    # Component scores
    # ------------------------------------------------------------------

    def _product_coverage(self, matched: int) -> float:
        if self.total_requested <= 0:
            return 0.0
        return min(matched / self.total_requested, 1.0)

    def _category_coverage(self, categories: Iterable[GroceryCategory]) -> float:
        """Share of the active categories this store covers; others earn nothing."""
        if self.category_count <= 0:
            return 0.0
        covered = len(self.active_categories.intersection(categories))
        return covered / self.category_count

    def _price_competitiveness(
        self,
        products: list[PriceObservation],
        cheapest_by_product: dict[str, float],
    ) -> float:
        """Average of cheapest/actual per product: 1.0 when this store is the cheapest."""
        if not products:
            return 0.0
        total = 0.0
        for product in products:
            cheapest = cheapest_by_product.get(product.catalog_product_name)
            if not cheapest or product.price <= 0:
                total += self.scoring.neutral_price_score
                continue
            total += min(cheapest / product.price, 1.0)
        return total / len(products)


def count_cheapest(
    products: list[PriceObservation],
    cheapest_by_product: dict[str, float],
) -> int:
    """Products priced at (or below) the global minimum. Ties count."""
    count = 0
    for product in products:
        cheapest = cheapest_by_product.get(product.catalog_product_name)
        if cheapest is not None and product.price <= cheapest:
            count += 1
    return count


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _is_coordinate(value: float | None) -> bool:
    return value is not None and math.isfinite(value)


def haversine_km(
    lat1: float | None,
    lng1: float | None,
    lat2: float | None,
    lng2: float | None,
) -> float | None:
    """Great-circle distance in kilometers, or None if a coordinate is missing."""
    if not all(_is_coordinate(v) for v in (lat1, lng1, lat2, lng2)):
        return None
    d_lat = math.radians(lat2 - lat1)
    d_lng = math.radians(lng2 - lng1)
    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(d_lng / 2) ** 2
    )
    return EARTH_RADIUS_KM * 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
