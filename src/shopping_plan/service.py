"""Shopping plan service: cache lookup, price fetch, build and store.

Wires the price source and the plan cache around the pure
``build_shopping_plan`` engine.
"""

from __future__ import annotations

import logging
from typing import Iterable

from src.common.config import ScoringSettings
from src.common.models import CatalogProduct, GroceryCategory, ShoppingPlan
from src.plan_cache import PlanCache, RefreshOverride
from src.price_source import PreciosClarosClient, fetch_all_prices

from .builder import build_shopping_plan

logger = logging.getLogger(__name__)


class ShoppingPlanService:
    """Produce (and cache) the shopping plan for a household catalog.

    Usage:
        service = ShoppingPlanService()
        plan = service.get_plan(catalog, latitude=-34.6, longitude=-58.4)
    """

    def __init__(
        self,
        client: PreciosClarosClient | None = None,
        cache: PlanCache | None = None,
        refresh: RefreshOverride | None = None,
        scoring: ScoringSettings | None = None,
    ) -> None:
        self.client = client or PreciosClarosClient()
        self.cache = cache or PlanCache()
        self.refresh = refresh or RefreshOverride()
        self.scoring = scoring

    def get_plan(
        self,
        catalog: Iterable[CatalogProduct],
        latitude: float | None,
        longitude: float | None,
        *,
        category: GroceryCategory | None = None,
        excluded_product_names: Iterable[str] = (),
        force_refresh: bool = False,
    ) -> ShoppingPlan:
        """Return a cached plan for the location, or build and cache a new one.

        Raises:
            ValueError: If the location is unknown or no products remain
                to search after category filtering and exclusions.
        """
        if latitude is None or longitude is None:
            raise ValueError("Location unavailable: latitude and longitude are required")

        excluded = set(excluded_product_names)
        products = [
            p for p in catalog
            if p.name not in excluded and (category is None or p.category == category)
        ]
        if not products:
            raise ValueError("No products selected to search")

        # Taken on every call, cache hit or not.
        refresh_requested = self.refresh.take()
        if not (force_refresh or refresh_requested):
            cached = self.cache.get(latitude, longitude, category)
            if cached is not None:
                return cached
        else:
            logger.info("Refresh forced; skipping plan cache")

        observations = fetch_all_prices(self.client, products, latitude, longitude)
        plan = build_shopping_plan(
            observations,
            [p.name for p in products],
            latitude,
            longitude,
            scoring=self.scoring,
        )
        self.cache.put(plan, latitude, longitude, category)
        return plan
