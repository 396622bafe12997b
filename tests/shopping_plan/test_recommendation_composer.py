"""Tests for confidence bands and recommendation templates."""

from __future__ import annotations

import pytest

from src.common.config import ScoringSettings
from src.common.models import ShoppingPlanConfidence, StoreCluster
from src.shopping_plan.recommendation import RecommendationComposer, format_ars


def _cluster(name: str, score: float, count: int, cost: int, categories: int = 2) -> StoreCluster:
    return StoreCluster(
        store_name=name,
        total_product_count=count,
        estimated_basket_cost=cost,
        category_coverage=categories,
        cheapest_product_count=0,
        score=score,
    )


@pytest.fixture
def composer(scoring) -> RecommendationComposer:
    return RecommendationComposer(scoring)


class TestFormatArs:
    def test_thousands_separator(self):
        assert format_ars(12345) == "$12.345"
        assert format_ars(1234567) == "$1.234.567"

    def test_small_amounts(self):
        assert format_ars(0) == "$0"
        assert format_ars(999) == "$999"


class TestResolveConfidence:
    def test_bands(self, composer):
        assert composer.resolve_confidence(1.0) == ShoppingPlanConfidence.HIGH
        assert composer.resolve_confidence(0.5) == ShoppingPlanConfidence.HIGH
        assert composer.resolve_confidence(0.49) == ShoppingPlanConfidence.MEDIUM
        assert composer.resolve_confidence(0.3) == ShoppingPlanConfidence.MEDIUM
        assert composer.resolve_confidence(0.29) == ShoppingPlanConfidence.LOW
        assert composer.resolve_confidence(0.0) == ShoppingPlanConfidence.LOW


class TestCompose:
    def test_no_stores(self, composer):
        rec = composer.compose([], total_requested=4)
        assert rec.text == "No se encontraron precios. Intenta actualizar mas tarde."
        assert rec.confidence == ShoppingPlanConfidence.LOW
        assert rec.top_store is None

    def test_low_confidence_names_only_top_store(self, composer):
        stores = [_cluster("Coto", 0.4, 2, 5300), _cluster("Dia", 0.2, 1, 1100)]
        rec = composer.compose(stores, total_requested=10)
        assert rec.confidence == ShoppingPlanConfidence.LOW
        assert rec.top_store == "Coto"
        assert rec.text == "Datos limitados. Coto tiene 2 productos, canasta estimada $5.300."
        assert "Dia" not in rec.text

    def test_single_store(self, composer):
        rec = composer.compose([_cluster("Coto", 0.8, 5, 12345, categories=3)], total_requested=5)
        assert rec.confidence == ShoppingPlanConfidence.HIGH
        assert rec.text == "Coto: 5 productos en 3 categorias, canasta estimada $12.345."

    def test_decisive_winner(self, composer):
        stores = [_cluster("Coto", 0.8, 8, 25400), _cluster("Dia", 0.6, 6, 19800)]
        rec = composer.compose(stores, total_requested=10)
        assert rec.confidence == ShoppingPlanConfidence.HIGH
        assert rec.text.startswith("Mejor opcion: Coto (8 productos, canasta $25.400).")
        assert "Le sigue Dia con 6 productos ($19.800)." in rec.text

    def test_close_tie_presents_both(self, composer):
        stores = [_cluster("Coto", 0.61, 4, 10000), _cluster("Dia", 0.58, 4, 9500)]
        rec = composer.compose(stores, total_requested=10)
        assert rec.confidence == ShoppingPlanConfidence.MEDIUM
        assert rec.text.startswith("Coto y Dia estan muy parejos.")
        assert "Mejor opcion" not in rec.text
        assert "$10.000" in rec.text and "$9.500" in rec.text

    def test_gap_of_exactly_threshold_is_tie(self, composer):
        stores = [_cluster("Coto", 0.7, 6, 10000), _cluster("Dia", 0.6, 6, 9500)]
        rec = composer.compose(stores, total_requested=10)
        assert "estan muy parejos" in rec.text

    def test_zero_requested_is_low(self, composer):
        rec = composer.compose([_cluster("Coto", 0.5, 3, 3000)], total_requested=0)
        assert rec.confidence == ShoppingPlanConfidence.LOW
        assert rec.text.startswith("Datos limitados.")

    def test_custom_gap(self):
        composer = RecommendationComposer(ScoringSettings(decisive_score_gap=0.01))
        stores = [_cluster("Coto", 0.61, 6, 10000), _cluster("Dia", 0.58, 6, 9500)]
        rec = composer.compose(stores, total_requested=10)
        assert rec.text.startswith("Mejor opcion: Coto")

    def test_to_dict(self, composer):
        d = composer.compose([_cluster("Coto", 0.8, 5, 100)], total_requested=5).to_dict()
        assert d == {
            "text": "Coto: 5 productos en 2 categorias, canasta estimada $100.",
            "confidence": "high",
            "top_store": "Coto",
        }
