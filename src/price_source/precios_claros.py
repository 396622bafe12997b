"""Precios Claros (SEPA) API client.

Public price-transparency API from Argentina's government. Returns
structured product prices per store branch near a location. No auth.

Graceful: every lookup returns [] on failure and never blocks the
planning pipeline.
"""

from __future__ import annotations

import logging
import re
import threading
import time
from typing import Any

import requests

from src.common.config import PriceSourceSettings, settings
from src.common.location import location_key

from .http_client import HTTPClient
from .models import PCProduct, PCStorePrice

logger = logging.getLogger(__name__)

_NUMBER_RE = re.compile(r"\d+([.,]\d+)?\s*")
_UNIT_RE = re.compile(
    r"\b(g|l|ml|lt|lts|litros?|litro|cc|kg|kgs?|kilos?|gr|grs?|gramos?|un|und|unidades?|rollos?|saquitos?|sachet)\b",
    re.I,
)
_SPACES_RE = re.compile(r"\s{2,}")


def clean_search_term(term: str) -> str:
    """Strip quantities and units; the API returns nothing for "aceite 1.5 litros".

    Examples:
        "aceite girasol 1.5 litros" -> "aceite girasol"
        "yerba mate 1 kg" -> "yerba mate"
    """
    cleaned = _NUMBER_RE.sub("", term)
    cleaned = _UNIT_RE.sub("", cleaned)
    return _SPACES_RE.sub(" ", cleaned).strip()


def _to_float(value: Any) -> float | None:
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


class _TTLCache:
    """Thread-safe in-memory cache with per-entry expiry.

    Expired entries are dropped on every write, and once ``max_entries``
    is reached the oldest insertion is evicted.
    """

    def __init__(self, ttl_seconds: float, max_entries: int = 1024) -> None:
        self._ttl = ttl_seconds
        self._max_entries = max_entries
        self._entries: dict[str, tuple[float, Any]] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def get(self, key: str) -> Any | None:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            expires_at, value = entry
            if time.monotonic() >= expires_at:
                del self._entries[key]
                return None
            return value

    def set(self, key: str, value: Any) -> None:
        with self._lock:
            now = time.monotonic()
            self._purge_expired(now)
            self._entries.pop(key, None)
            while self._entries and len(self._entries) >= self._max_entries:
                del self._entries[next(iter(self._entries))]
            self._entries[key] = (now + self._ttl, value)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def _purge_expired(self, now: float) -> None:
        expired = [key for key, (expires_at, _) in self._entries.items() if now >= expires_at]
        for key in expired:
            del self._entries[key]


class PreciosClarosClient:
    """Client for the Precios Claros product and price endpoints.

    Usage:
        client = PreciosClarosClient()
        products = client.search_products("aceite girasol", -34.6, -58.4)
        prices = client.get_product_prices(products[0].ean, -34.6, -58.4)
    """

    def __init__(
        self,
        config: PriceSourceSettings | None = None,
        http_client: HTTPClient | None = None,
    ) -> None:
        self.config = config or settings.price_source
        self._client = http_client or HTTPClient(self.config)
        ttl = self.config.response_cache_ttl_hours * 3600
        self._search_cache = _TTLCache(ttl)
        self._prices_cache = _TTLCache(ttl)

    def search_products(
        self,
        term: str,
        latitude: float,
        longitude: float,
    ) -> list[PCProduct]:
        """Search product variants by text near a location."""
        cleaned = clean_search_term(term)
        if not cleaned:
            return []
        cache_key = f"search:{cleaned}:{location_key(latitude, longitude)}"
        cached = self._search_cache.get(cache_key)
        if cached is not None:
            return cached

        data = self._fetch("/productos", {
            "string": cleaned,
            "lat": latitude,
            "lng": longitude,
            "limit": self.config.search_limit,
        })
        if not data or not isinstance(data.get("productos"), list):
            return []

        products = [
            PCProduct(
                ean=str(p.get("id", "")),
                brand=p.get("marca") or "",
                name=p.get("nombre") or "",
                presentation=p.get("presentacion") or "",
                price_min=_to_float(p.get("precioMin")) or 0.0,
                price_max=_to_float(p.get("precioMax")) or 0.0,
            )
            for p in data["productos"]
            if p.get("id")
        ]
        self._search_cache.set(cache_key, products)
        return products

    def get_product_prices(
        self,
        ean: str,
        latitude: float,
        longitude: float,
    ) -> list[PCStorePrice]:
        """Per-branch prices for one product (by EAN), cheapest first."""
        cache_key = f"prices:{ean}:{location_key(latitude, longitude)}"
        cached = self._prices_cache.get(cache_key)
        if cached is not None:
            return cached

        data = self._fetch("/producto", {
            "id_producto": ean,
            "lat": latitude,
            "lng": longitude,
            "limit": self.config.prices_limit,
        })
        if not data or not isinstance(data.get("sucursales"), list):
            return []

        product = data.get("producto") or {}
        prices: list[PCStorePrice] = []
        for branch in data["sucursales"]:
            price = _to_float((branch.get("preciosProducto") or {}).get("precioLista"))
            if price is None or price <= 0:
                continue
            prices.append(PCStorePrice(
                ean=str(product.get("id") or ean),
                brand=product.get("marca") or "",
                name=product.get("nombre") or "",
                presentation=product.get("presentacion") or "",
                store_banner=branch.get("banderaDescripcion") or "",
                store_address=branch.get("direccion") or "",
                store_locality=branch.get("localidad") or "",
                store_lat=_to_float(branch.get("lat")),
                store_lng=_to_float(branch.get("lng")),
                price=price,
            ))

        prices.sort(key=lambda p: p.price)
        self._prices_cache.set(cache_key, prices)
        return prices

    def _fetch(self, path: str, params: dict[str, Any]) -> dict | None:
        url = f"{self.config.base_url.rstrip('/')}{path}"
        try:
            data = self._client.get_json(url, params=params)
        except (requests.RequestException, ValueError) as exc:
            logger.warning("Precios Claros %s failed: %s", path, exc)
            return None
        if not isinstance(data, dict):
            logger.warning("Precios Claros %s returned unexpected payload", path)
            return None
        return data

    def clear_cache(self) -> None:
        self._search_cache.clear()
        self._prices_cache.clear()

    def close(self) -> None:
        self._client.close()
