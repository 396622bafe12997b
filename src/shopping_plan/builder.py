"""Shopping plan builder.

Aggregates price observations into a ShoppingPlan that ranks stores
for the whole shopping list. Pure function: no I/O, no shared state.

Pipeline:
  1. Group observations by store banner (cheapest per product per store)
  2. Index the cheapest price per product across all stores
  3. Score every store
  4. Rank, filter and cap the stores
  5. Compose the deterministic recommendation
  6. Collect products found nowhere
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Iterable, Sequence

from src.common.config import ScoringSettings, settings
from src.common.models import (
    ACTIVE_CATEGORIES,
    GroceryCategory,
    PriceObservation,
    ShoppingPlan,
)

from .aggregator import build_cheapest_index, group_by_store
from .basket import REFERENCE_BASKET, BasketCoverage, BasketItem, BasketMatcher, matches_basket_item
from .ranking import rank_stores
from .recommendation import RecommendationComposer
from .scorer import StoreScorer

logger = logging.getLogger(__name__)


def build_shopping_plan(
    observations: Sequence[PriceObservation],
    requested_product_names: Iterable[str],
    user_latitude: float | None = None,
    user_longitude: float | None = None,
    *,
    active_categories: Sequence[GroceryCategory] = ACTIVE_CATEGORIES,
    basket: Sequence[BasketItem] = REFERENCE_BASKET,
    basket_matcher: BasketMatcher = matches_basket_item,
    scoring: ScoringSettings | None = None,
    now: datetime | None = None,
) -> ShoppingPlan:
    """Build a ranked, explained shopping plan for one shopping list.

    Args:
        observations: Price observations from the price source.
        requested_product_names: Catalog product names on the list.
        user_latitude: User latitude; None disables distances.
        user_longitude: User longitude; None disables distances.
        active_categories: Category enumeration that normalizes
            category breadth.
        basket: Reference staples basket.
        basket_matcher: Predicate matching a product text to a staple.
        scoring: Weights and thresholds; defaults to settings.scoring.
        now: Generation timestamp; defaults to the current UTC time.

    Returns:
        ShoppingPlan with stores ranked highest score first.
    """
    scoring = scoring or settings.scoring
    generated_at = now or datetime.now(timezone.utc)
    requested = list(dict.fromkeys(requested_product_names))
    composer = RecommendationComposer(scoring)

    if not observations:
        logger.info("No price observations; returning empty plan")
        return empty_plan(len(requested), composer=composer, now=generated_at)

    store_map = group_by_store(observations, requested)
    cheapest_by_product = build_cheapest_index(observations)

    scorer = StoreScorer(
        total_requested=len(requested),
        user_lat=user_latitude,
        user_lng=user_longitude,
        active_categories=active_categories,
        basket_coverage=BasketCoverage(basket=basket, matcher=basket_matcher),
        scoring=scoring,
    )
    clusters = scorer.score_stores(store_map, cheapest_by_product)
    stores = rank_stores(clusters, scoring)

    recommendation = composer.compose(stores, len(requested))

    found = {obs.catalog_product_name for obs in observations} & set(requested)
    products_not_found = sorted(name for name in requested if name not in found)

    logger.info(
        "Shopping plan: %d/%d products found, %d stores ranked, top=%s (%s)",
        len(found), len(requested), len(stores),
        recommendation.top_store, recommendation.confidence.value,
    )

    return ShoppingPlan(
        stores=stores,
        recommendation=recommendation.text,
        confidence=recommendation.confidence,
        top_store=recommendation.top_store,
        products_not_found=products_not_found,
        total_products_searched=len(requested),
        total_products_found=len(found),
        last_updated=generated_at,
    )


def empty_plan(
    total_products_searched: int = 0,
    *,
    composer: RecommendationComposer | None = None,
    now: datetime | None = None,
) -> ShoppingPlan:
    """Canonical plan for when the price source returned nothing."""
    recommendation = (composer or RecommendationComposer()).no_prices()
    return ShoppingPlan(
        stores=[],
        recommendation=recommendation.text,
        confidence=recommendation.confidence,
        top_store=None,
        products_not_found=[],
        total_products_searched=total_products_searched,
        total_products_found=0,
        last_updated=now or datetime.now(timezone.utc),
    )
