"""Shared test fixtures for the shopping planner."""

import sys
from pathlib import Path

import pytest

# Ensure src is importable
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from src.common.config import CacheSettings, ScoringSettings
from src.common.models import GroceryCategory, PriceObservation


def make_observation(
    product: str,
    store: str,
    price: float,
    category: GroceryCategory = GroceryCategory.ALMACEN,
    **extra,
) -> PriceObservation:
    """Build a PriceObservation with sensible defaults."""
    return PriceObservation(
        catalog_product_name=product,
        store=store,
        price=price,
        category=category,
        **extra,
    )


@pytest.fixture
def project_root() -> Path:
    """Return the project root directory."""
    return PROJECT_ROOT


@pytest.fixture
def fixtures_dir() -> Path:
    """Return the test fixtures directory."""
    return PROJECT_ROOT / "tests" / "fixtures"


@pytest.fixture
def scoring() -> ScoringSettings:
    """Default weights and thresholds, independent of config/settings.yaml."""
    return ScoringSettings()


@pytest.fixture
def cache_config(tmp_path) -> CacheSettings:
    """Plan cache settings pointing to a temporary SQLite database."""
    return CacheSettings(db_path=str(tmp_path / "test_plans.db"), plan_ttl_hours=24)


@pytest.fixture
def obs():
    """Factory fixture for price observations."""
    return make_observation


@pytest.fixture
def mixed_observations() -> list[PriceObservation]:
    """Three stores across two categories with overlapping products."""
    return [
        make_observation("Leche entera", "Coto", 1200, GroceryCategory.LACTEOS,
                         product_description="Leche Entera Sachet 1 L",
                         store_lat=-34.60, store_lng=-58.38),
        make_observation("Leche entera", "Dia", 1100, GroceryCategory.LACTEOS,
                         product_description="Leche Entera 1 L"),
        make_observation("Yerba mate", "Coto", 4500,
                         product_description="Yerba Mate Suave 1 Kg"),
        make_observation("Yerba mate", "Carrefour", 4300,
                         product_description="Yerba Mate 1 Kg"),
        make_observation("Arroz largo fino", "Coto", 1500,
                         product_description="Arroz Largo Fino 1 Kg"),
        make_observation("Arroz largo fino", "Dia", 1400,
                         product_description="Arroz Largo Fino 1 Kg"),
    ]
