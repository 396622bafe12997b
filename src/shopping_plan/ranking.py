"""Rank scored stores and drop thin competitors."""

from __future__ import annotations

import logging

from src.common.config import ScoringSettings, settings
from src.common.models import StoreCluster

logger = logging.getLogger(__name__)


def rank_stores(
    clusters: list[StoreCluster],
    scoring: ScoringSettings | None = None,
) -> list[StoreCluster]:
    """Sort by score (descending), apply the adaptive product floor, cap to top N.

    Once the best store matches at least ``filter_activation_count``
    products, stores with fewer than ``min_products_threshold`` matches
    are dropped, unless that would drop every store.
    Ties keep their incoming order.
    """
    scoring = scoring or settings.scoring
    if not clusters:
        return []

    ranked = sorted(clusters, key=lambda c: c.score, reverse=True)

    best_count = ranked[0].total_product_count
    if best_count >= scoring.filter_activation_count:
        filtered = [
            c for c in ranked
            if c.total_product_count >= scoring.min_products_threshold
        ]
        if filtered:
            if len(filtered) < len(ranked):
                logger.debug(
                    "Dropped %d stores with fewer than %d products",
                    len(ranked) - len(filtered), scoring.min_products_threshold,
                )
            ranked = filtered

    return ranked[: scoring.max_stores]
