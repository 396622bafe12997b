"""Data models for the Precios Claros price source.

All models use @dataclass with to_dict() for JSON serialization.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass


@dataclass(frozen=True)
class PCProduct:
    """Product variant found by text search."""

    ean: str
    brand: str
    name: str
    presentation: str
    price_min: float = 0.0
    price_max: float = 0.0

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class PCStorePrice:
    """One branch's list price for a specific product."""

    ean: str
    brand: str
    name: str
    presentation: str
    store_banner: str
    store_address: str
    store_locality: str
    store_lat: float | None
    store_lng: float | None
    price: float

    @property
    def description(self) -> str:
        return f"{self.name} {self.presentation}".strip()

    def to_dict(self) -> dict:
        return asdict(self)
