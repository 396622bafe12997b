"""
Price source: Precios Claros (SEPA) data acquisition

- precios_claros: API client with an in-memory response cache
- fetcher: concurrent catalog-wide price collection
- banners: store banner normalization
"""

from .banners import normalize_store_banner
from .fetcher import fetch_all_prices
from .precios_claros import PreciosClarosClient, clean_search_term

__all__ = [
    "PreciosClarosClient",
    "clean_search_term",
    "fetch_all_prices",
    "normalize_store_banner",
]
