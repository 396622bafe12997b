"""Tests for ShoppingPlanService (cache / fetch / build / store)."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest

from src.common.models import CatalogProduct, GroceryCategory
from src.plan_cache import PlanCache, RefreshOverride
from src.shopping_plan.service import ShoppingPlanService

LAT, LNG = -34.6037, -58.3816


@pytest.fixture
def catalog() -> list[CatalogProduct]:
    return [
        CatalogProduct(name="Leche entera", search_terms="leche entera 1 litro",
                       category=GroceryCategory.LACTEOS, is_essential=True),
        CatalogProduct(name="Yogur entero", category=GroceryCategory.LACTEOS),
        CatalogProduct(name="Yerba mate", search_terms="yerba mate 1 kilo",
                       category=GroceryCategory.PANADERIA_DULCES, is_essential=True),
    ]


@pytest.fixture
def service(cache_config, scoring) -> ShoppingPlanService:
    return ShoppingPlanService(
        client=MagicMock(),
        cache=PlanCache(cache_config),
        refresh=RefreshOverride(),
        scoring=scoring,
    )


@pytest.fixture
def fetch(obs):
    observations = [
        obs("Leche entera", "Coto", 1200, GroceryCategory.LACTEOS),
        obs("Yerba mate", "Coto", 4500, GroceryCategory.PANADERIA_DULCES),
        obs("Leche entera", "Dia", 1100, GroceryCategory.LACTEOS),
    ]
    with patch("src.shopping_plan.service.fetch_all_prices", return_value=observations) as mock:
        yield mock


class TestGetPlan:
    def test_builds_and_caches(self, service, catalog, fetch):
        plan = service.get_plan(catalog, LAT, LNG)
        assert plan.top_store == "Coto"
        assert plan.total_products_searched == 3
        assert plan.products_not_found == ["Yogur entero"]
        fetch.assert_called_once()
        assert service.cache.get(LAT, LNG) is not None

    def test_second_call_hits_cache(self, service, catalog, fetch):
        first = service.get_plan(catalog, LAT, LNG)
        second = service.get_plan(catalog, LAT, LNG)
        assert fetch.call_count == 1
        assert second.to_dict() == first.to_dict()

    def test_force_refresh_skips_cache(self, service, catalog, fetch):
        service.get_plan(catalog, LAT, LNG)
        service.get_plan(catalog, LAT, LNG, force_refresh=True)
        assert fetch.call_count == 2

    def test_refresh_override_is_one_shot(self, service, catalog, fetch):
        service.get_plan(catalog, LAT, LNG)
        service.refresh.request()
        service.get_plan(catalog, LAT, LNG)
        service.get_plan(catalog, LAT, LNG)
        assert fetch.call_count == 2
        assert not service.refresh.pending

    def test_refresh_override_consumed_on_cache_miss(self, service, catalog, fetch):
        service.refresh.request()
        service.get_plan(catalog, LAT, LNG)
        assert not service.refresh.pending

    def test_category_filter(self, service, catalog, fetch):
        service.get_plan(catalog, LAT, LNG, category=GroceryCategory.LACTEOS)
        products = fetch.call_args.args[1]
        assert [p.name for p in products] == ["Leche entera", "Yogur entero"]

    def test_category_cached_separately(self, service, catalog, fetch):
        service.get_plan(catalog, LAT, LNG)
        service.get_plan(catalog, LAT, LNG, category=GroceryCategory.LACTEOS)
        assert fetch.call_count == 2

    def test_exclusions(self, service, catalog, fetch):
        plan = service.get_plan(catalog, LAT, LNG, excluded_product_names=["Yogur entero"])
        products = fetch.call_args.args[1]
        assert "Yogur entero" not in [p.name for p in products]
        assert plan.total_products_searched == 2
        assert plan.products_not_found == []

    def test_missing_location(self, service, catalog, fetch):
        with pytest.raises(ValueError, match="Location unavailable"):
            service.get_plan(catalog, None, LNG)
        fetch.assert_not_called()

    def test_nothing_left_to_search(self, service, catalog, fetch):
        with pytest.raises(ValueError, match="No products"):
            service.get_plan(catalog, LAT, LNG, category=GroceryCategory.LIMPIEZA)
        fetch.assert_not_called()

    def test_empty_fetch_gives_empty_plan(self, service, catalog):
        with patch("src.shopping_plan.service.fetch_all_prices", return_value=[]):
            plan = service.get_plan(catalog, LAT, LNG)
        assert plan.stores == []
        assert plan.top_store is None
        assert plan.total_products_searched == 3
