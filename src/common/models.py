"""Shared Pydantic data models for the shopping planner.

These models define the data contracts between the price source
(data acquisition), the planning engine and the plan cache. All
modules import from here.
"""

from __future__ import annotations

import json
from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field


# === Enums ===

class GroceryCategory(str, Enum):
    """Closed set of grocery catalog categories."""
    ALMACEN = "ALMACEN"
    PANADERIA_DULCES = "PANADERIA_DULCES"
    LACTEOS = "LACTEOS"
    CARNES = "CARNES"
    FRUTAS_VERDURAS = "FRUTAS_VERDURAS"
    BEBIDAS = "BEBIDAS"
    LIMPIEZA = "LIMPIEZA"
    PERFUMERIA = "PERFUMERIA"

    @property
    def label(self) -> str:
        return CATEGORY_LABELS[self]


CATEGORY_LABELS: dict[GroceryCategory, str] = {
    GroceryCategory.ALMACEN: "Almacen",
    GroceryCategory.PANADERIA_DULCES: "Panaderia y Dulces",
    GroceryCategory.LACTEOS: "Lacteos",
    GroceryCategory.CARNES: "Carnes",
    GroceryCategory.FRUTAS_VERDURAS: "Frutas y Verduras",
    GroceryCategory.BEBIDAS: "Bebidas",
    GroceryCategory.LIMPIEZA: "Limpieza",
    GroceryCategory.PERFUMERIA: "Perfumeria",
}

# Fresh meat and produce are not listed by the price source.
ACTIVE_CATEGORIES: tuple[GroceryCategory, ...] = (
    GroceryCategory.ALMACEN,
    GroceryCategory.PANADERIA_DULCES,
    GroceryCategory.LACTEOS,
    GroceryCategory.BEBIDAS,
    GroceryCategory.LIMPIEZA,
    GroceryCategory.PERFUMERIA,
)


class ShoppingPlanConfidence(str, Enum):
    """How much of the requested list the top store covers."""
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


# === Price source contract ===

class CatalogProduct(BaseModel):
    """Canonical grocery item the household wants priced."""
    name: str
    search_terms: str = ""
    category: GroceryCategory
    is_essential: bool = False

    model_config = {"frozen": True}

    @property
    def query(self) -> str:
        return self.search_terms or self.name


class PriceObservation(BaseModel):
    """Single price of a catalog product at one store banner."""
    catalog_product_name: str
    ean: str = ""
    brand: str = ""
    product_description: str = ""
    store: str
    price: float = Field(ge=0, description="Price in ARS")
    store_address: str | None = None
    store_locality: str | None = None
    store_lat: float | None = None
    store_lng: float | None = None
    category: GroceryCategory

    model_config = {"frozen": True}


# === Engine output ===

class StoreCluster(BaseModel):
    """One store banner aggregated across every matched product."""
    store_name: str
    total_product_count: int = Field(ge=0)
    products_by_category: dict[GroceryCategory, list[PriceObservation]] = {}
    all_products: list[PriceObservation] = []
    estimated_basket_cost: int = Field(ge=0, description="Sum of matched prices (ARS)")
    category_coverage: int = Field(ge=0)
    cheapest_product_count: int = Field(ge=0)
    score: float = Field(ge=0, le=1)
    distance_km: float | None = None
    store_address: str | None = None
    store_locality: str | None = None

    model_config = {"frozen": True}


class ShoppingPlan(BaseModel):
    """Ranked stores plus a deterministic recommendation."""
    stores: list[StoreCluster] = []
    recommendation: str
    confidence: ShoppingPlanConfidence
    top_store: str | None = None
    products_not_found: list[str] = []
    total_products_searched: int = Field(ge=0)
    total_products_found: int = Field(ge=0)
    last_updated: datetime

    model_config = {"frozen": True}

    def to_dict(self) -> dict:
        return self.model_dump(mode="json")

    def to_json(self, indent: int | None = 2) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False, indent=indent)
