"""Group price observations by store and index the cheapest prices."""

from __future__ import annotations

import logging
from typing import Iterable

from src.common.models import PriceObservation

logger = logging.getLogger(__name__)


def group_by_store(
    observations: Iterable[PriceObservation],
    requested_product_names: Iterable[str] | None = None,
) -> dict[str, list[PriceObservation]]:
    """Group observations by store banner, keeping the cheapest per product.

    A store may list several SKUs for one catalog product (e.g. two pack
    sizes); only the lowest-priced one counts toward that product.
    Stores and products keep their discovery order.

    Args:
        observations: Flat list of price observations.
        requested_product_names: The shopping list. Observations for
            products outside it are ignored. None or empty means every
            observation is relevant.

    Returns:
        Mapping of store name to deduplicated observations.
    """
    wanted = set(requested_product_names or ())
    stores: dict[str, dict[str, PriceObservation]] = {}
    skipped = 0

    for obs in observations:
        if wanted and obs.catalog_product_name not in wanted:
            skipped += 1
            continue
        products = stores.setdefault(obs.store, {})
        current = products.get(obs.catalog_product_name)
        if current is None or obs.price < current.price:
            products[obs.catalog_product_name] = obs

    if skipped:
        logger.debug("Ignored %d observations for products not on the list", skipped)

    return {store: list(products.values()) for store, products in stores.items()}


def build_cheapest_index(observations: Iterable[PriceObservation]) -> dict[str, float]:
    """Lowest price seen for each catalog product across all stores."""
    cheapest: dict[str, float] = {}
    for obs in observations:
        current = cheapest.get(obs.catalog_product_name)
        if current is None or obs.price < current:
            cheapest[obs.catalog_product_name] = obs.price
    return cheapest
