"""Deterministic, template-based store recommendation.

Confidence is the coverage ratio of the top store
(matched products / requested products):
  high:   coverage >= 50%
  medium: coverage >= 30%
  low:    below that; only the top store is named, no comparison.

With adequate confidence and two or more stores, a score gap above
``decisive_score_gap`` names a clear winner, otherwise both stores are
presented as comparable.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape

from src.common.config import ScoringSettings, settings
from src.common.models import ShoppingPlanConfidence, StoreCluster

_TEMPLATES_DIR = Path(__file__).parent / "templates"


def format_ars(amount: int | float) -> str:
    """Format a peso amount the es-AR way: 12345 -> "$12.345"."""
    return "$" + f"{int(amount):,}".replace(",", ".")


@dataclass
class Recommendation:
    """Recommendation text with its confidence and top store."""

    text: str
    confidence: ShoppingPlanConfidence
    top_store: str | None

    def to_dict(self) -> dict:
        return {
            "text": self.text,
            "confidence": self.confidence.value,
            "top_store": self.top_store,
        }


class RecommendationComposer:
    """Picks and renders one of the recommendation templates.

    Usage:
        composer = RecommendationComposer()
        rec = composer.compose(ranked_stores, total_requested=12)
    """

    def __init__(
        self,
        scoring: ScoringSettings | None = None,
        templates_dir: Path | None = None,
    ) -> None:
        self.scoring = scoring or settings.scoring
        self.env = Environment(
            loader=FileSystemLoader(str(templates_dir or _TEMPLATES_DIR)),
            autoescape=select_autoescape(["html", "xml"]),
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self.env.filters["ars"] = format_ars

    def compose(self, stores: list[StoreCluster], total_requested: int) -> Recommendation:
        if not stores:
            return self.no_prices()

        best = stores[0]
        coverage_ratio = (
            best.total_product_count / total_requested if total_requested > 0 else 0.0
        )
        confidence = self.resolve_confidence(coverage_ratio)

        if confidence == ShoppingPlanConfidence.LOW:
            template = "low_confidence"
            context = {"best": best}
        elif len(stores) == 1:
            template = "single_store"
            context = {"best": best}
        else:
            second = stores[1]
            # Scores carry 3 decimals; round so an exact 0.1 gap is not decisive.
            gap = round(best.score - second.score, 3)
            template = "decisive" if gap > self.scoring.decisive_score_gap else "tied"
            context = {"best": best, "second": second}

        return Recommendation(
            text=self._render(template, context),
            confidence=confidence,
            top_store=best.store_name,
        )

    def no_prices(self) -> Recommendation:
        return Recommendation(
            text=self._render("no_prices", {}),
            confidence=ShoppingPlanConfidence.LOW,
            top_store=None,
        )

    def resolve_confidence(self, coverage_ratio: float) -> ShoppingPlanConfidence:
        if coverage_ratio >= self.scoring.high_confidence_threshold:
            return ShoppingPlanConfidence.HIGH
        if coverage_ratio >= self.scoring.medium_confidence_threshold:
            return ShoppingPlanConfidence.MEDIUM
        return ShoppingPlanConfidence.LOW

    def _render(self, name: str, context: dict) -> str:
        template = self.env.get_template(f"{name}.jinja2")
        return template.render(**context).strip()
