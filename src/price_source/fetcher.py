"""Collect price observations for a whole catalog from Precios Claros.

Two phases, each on a bounded thread pool:
  1. Search every catalog product and keep the most relevant EAN
  2. Fetch per-branch prices for each EAN
A failure for one product is logged and skipped.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Callable, Iterable, TypeVar

from src.common.models import CatalogProduct, PriceObservation

from .banners import normalize_store_banner
from .models import PCProduct, PCStorePrice
from .precios_claros import PreciosClarosClient

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")


@dataclass(frozen=True)
class _ResolvedProduct:
    catalog: CatalogProduct
    match: PCProduct


def run_with_concurrency(
    items: Iterable[T],
    concurrency: int,
    fn: Callable[[T], R],
) -> list[tuple[T, R | None]]:
    """Apply fn to every item with at most `concurrency` workers.

    Results keep input order; an item whose call raised is paired with None.
    """
    items = list(items)
    if not items:
        return []

    results: list[tuple[T, R | None]] = []
    with ThreadPoolExecutor(max_workers=max(1, min(concurrency, len(items)))) as pool:
        futures = [(item, pool.submit(fn, item)) for item in items]
        for item, future in futures:
            try:
                results.append((item, future.result()))
            except Exception:
                logger.warning("Price lookup failed for %r", item, exc_info=True)
                results.append((item, None))
    return results


def to_observation(catalog: CatalogProduct, store_price: PCStorePrice) -> PriceObservation:
    return PriceObservation(
        catalog_product_name=catalog.name,
        ean=store_price.ean,
        brand=store_price.brand,
        product_description=store_price.description,
        store=normalize_store_banner(store_price.store_banner),
        price=store_price.price,
        store_address=store_price.store_address or None,
        store_locality=store_price.store_locality or None,
        store_lat=store_price.store_lat,
        store_lng=store_price.store_lng,
        category=catalog.category,
    )


def fetch_all_prices(
    client: PreciosClarosClient,
    catalog: Iterable[CatalogProduct],
    latitude: float,
    longitude: float,
    *,
    concurrency: int | None = None,
) -> list[PriceObservation]:
    """Fetch price observations for every catalog product near a location."""
    workers = concurrency or client.config.concurrency
    catalog = list(catalog)

    # Phase 1: resolve each catalog product to its most relevant EAN
    searches = run_with_concurrency(
        catalog,
        workers,
        lambda product: client.search_products(product.query, latitude, longitude),
    )
    resolved: list[_ResolvedProduct] = []
    for product, matches in searches:
        if matches:
            resolved.append(_ResolvedProduct(catalog=product, match=matches[0]))
        else:
            logger.debug("No Precios Claros match for %s", product.name)

    # Phase 2: per-branch prices
    price_lists = run_with_concurrency(
        resolved,
        workers,
        lambda item: client.get_product_prices(item.match.ean, latitude, longitude),
    )
    observations: list[PriceObservation] = []
    for item, store_prices in price_lists:
        for store_price in store_prices or []:
            observations.append(to_observation(item.catalog, store_price))

    logger.info(
        "Fetched %d price observations for %d/%d catalog products",
        len(observations), len(resolved), len(catalog),
    )
    return observations
