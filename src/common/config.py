"""Project configuration and paths.

Loads settings from config/settings.yaml and environment variables.
"""

from __future__ import annotations

import os
from pathlib import Path

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field, model_validator

# === Paths ===
PROJECT_ROOT = Path(__file__).parent.parent.parent
CONFIG_DIR = PROJECT_ROOT / "config"
DATA_DIR = PROJECT_ROOT / "data"

# Load .env from project root
load_dotenv(PROJECT_ROOT / ".env")


class ScoringSettings(BaseModel):
    """Weights and thresholds for store ranking and recommendation."""
    weight_product_coverage: float = Field(default=0.35, ge=0, le=1)
    weight_category_coverage: float = Field(default=0.25, ge=0, le=1)
    weight_price_competitiveness: float = Field(default=0.25, ge=0, le=1)
    weight_basket_coverage: float = Field(default=0.15, ge=0, le=1)

    high_confidence_threshold: float = Field(default=0.5, ge=0, le=1)
    medium_confidence_threshold: float = Field(default=0.3, ge=0, le=1)
    decisive_score_gap: float = Field(default=0.1, ge=0)

    max_stores: int = Field(default=5, ge=1)
    min_products_threshold: int = Field(default=3, ge=0)
    filter_activation_count: int = Field(default=5, ge=0)
    neutral_price_score: float = Field(default=0.5, ge=0, le=1)

    @model_validator(mode="after")
    def _check_consistency(self) -> ScoringSettings:
        total = (
            self.weight_product_coverage
            + self.weight_category_coverage
            + self.weight_price_competitiveness
            + self.weight_basket_coverage
        )
        if abs(total - 1.0) > 1e-6:
            raise ValueError(f"Scoring weights must sum to 1.0, got {total:.4f}")
        if self.medium_confidence_threshold > self.high_confidence_threshold:
            raise ValueError("medium_confidence_threshold cannot exceed high_confidence_threshold")
        return self


class PriceSourceSettings(BaseModel):
    """Settings for the Precios Claros (SEPA) price source."""
    base_url: str = "https://d3e6htiiul5ek9.cloudfront.net/prod"
    request_timeout_seconds: float = 10.0
    search_limit: int = 30
    prices_limit: int = 50
    response_cache_ttl_hours: float = 4.0
    concurrency: int = Field(default=5, ge=1)
    rate_limit_rpm: int = 120
    user_agent: str = "Mozilla/5.0 (compatible; CanastaPlanner/1.0)"


class CacheSettings(BaseModel):
    """Persistence settings for computed shopping plans."""
    db_path: str = str(DATA_DIR / "shopping_plans.db")
    plan_ttl_hours: float = 24.0


class Settings(BaseModel):
    """Top-level application settings."""
    scoring: ScoringSettings = Field(default_factory=ScoringSettings)
    price_source: PriceSourceSettings = Field(default_factory=PriceSourceSettings)
    cache: CacheSettings = Field(default_factory=CacheSettings)

    def model_post_init(self, __context) -> None:
        """Apply environment overrides."""
        if url := os.getenv("PRECIOS_CLAROS_BASE_URL"):
            self.price_source.base_url = url
        if timeout := os.getenv("PRICE_SOURCE_TIMEOUT"):
            self.price_source.request_timeout_seconds = float(timeout)
        if db_path := os.getenv("PLAN_CACHE_DB_PATH"):
            self.cache.db_path = db_path

    @classmethod
    def load(cls, path: Path | None = None) -> Settings:
        """Load settings from config/settings.yaml, falling back to defaults."""
        settings_path = path or CONFIG_DIR / "settings.yaml"
        if settings_path.exists():
            with open(settings_path, encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
            return cls(**data)
        return cls()


# Singleton settings instance
settings = Settings.load()
