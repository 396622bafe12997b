"""CLI entry point for the shopping plan engine.

Usage:
    # Offline: rank stores from a saved list of price observations
    python -m src.shopping_plan.main --observations data/observations.json \\
        --products "Leche entera,Yerba mate" --lat -34.60 --lng -58.38

    # Live: fetch Precios Claros prices for a catalog (cached 24h)
    python -m src.shopping_plan.main --catalog config/catalog.yaml \\
        --lat -34.60 --lng -58.38 --category LACTEOS --output plan.json
"""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path

import yaml

from src.common.logging import setup_logging
from src.common.models import CatalogProduct, GroceryCategory, PriceObservation, ShoppingPlan

from .builder import build_shopping_plan
from .recommendation import format_ars
from .service import ShoppingPlanService
from .unit_parser import price_per_reference_unit

# Under `python -m` __name__ is "__main__", outside the "src" tree.
logger = logging.getLogger("src.shopping_plan.main")


def load_observations(path: str | Path) -> list[PriceObservation]:
    """Load observations from a JSON list (or {"observations": [...]})."""
    with open(path, encoding="utf-8") as f:
        data = json.load(f)
    if isinstance(data, dict):
        data = data.get("observations", [])
    return [PriceObservation(**item) for item in data]


def load_catalog(path: str | Path) -> list[CatalogProduct]:
    """Load catalog products from YAML (a list, or {"products": [...]})."""
    with open(path, encoding="utf-8") as f:
        data = yaml.safe_load(f) or []
    if isinstance(data, dict):
        data = data.get("products", [])
    return [CatalogProduct(**item) for item in data]


def log_plan(plan: ShoppingPlan) -> None:
    logger.info("=== Shopping plan (%s confidence) ===", plan.confidence.value)
    logger.info("%s", plan.recommendation)
    logger.info(
        "Products found: %d/%d", plan.total_products_found, plan.total_products_searched,
    )
    for rank, store in enumerate(plan.stores, 1):
        distance = f"{store.distance_km} km" if store.distance_km is not None else "distance unknown"
        logger.info(
            "  %d. %s: score %.3f, %d products, %d categories, basket %s, cheapest on %d (%s)",
            rank, store.store_name, store.score, store.total_product_count,
            store.category_coverage, format_ars(store.estimated_basket_cost),
            store.cheapest_product_count, distance,
        )
        for category in sorted(store.products_by_category, key=lambda c: c.value):
            for product in sorted(
                store.products_by_category[category], key=lambda p: p.catalog_product_name,
            ):
                per_unit = price_per_reference_unit(product.price, product.product_description)
                unit_text = f" ({format_ars(round(per_unit[0]))}/{per_unit[1]})" if per_unit else ""
                logger.info(
                    "       [%s] %s: %s%s",
                    category.label, product.catalog_product_name,
                    format_ars(round(product.price)), unit_text,
                )
    if plan.products_not_found:
        logger.info("Not found anywhere: %s", ", ".join(plan.products_not_found))


def main() -> None:
    parser = argparse.ArgumentParser(description="Multi-store shopping plan")
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument(
        "--observations",
        type=str,
        help="JSON file with price observations (offline mode)",
    )
    source.add_argument(
        "--catalog",
        type=str,
        help="YAML catalog of products to price via Precios Claros (live mode)",
    )
    parser.add_argument(
        "--products",
        type=str,
        help="Comma-separated shopping list (offline mode; defaults to every observed product)",
    )
    parser.add_argument("--lat", type=float, help="User latitude")
    parser.add_argument("--lng", type=float, help="User longitude")
    parser.add_argument(
        "--category",
        type=str,
        choices=[c.value for c in GroceryCategory],
        help="Only plan for one grocery category (live mode)",
    )
    parser.add_argument(
        "--exclude",
        type=str,
        default="",
        help="Comma-separated catalog products to skip (live mode)",
    )
    parser.add_argument(
        "--force-refresh",
        action="store_true",
        help="Ignore a cached plan (live mode)",
    )
    parser.add_argument("--output", type=str, help="Output JSON file path")
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log per-store component scores (DEBUG)",
    )

    args = parser.parse_args()
    setup_logging(logging.DEBUG if args.verbose else logging.INFO)

    if args.observations:
        observations = load_observations(args.observations)
        if args.products:
            requested = [p.strip() for p in args.products.split(",") if p.strip()]
        else:
            requested = list(dict.fromkeys(o.catalog_product_name for o in observations))
        plan = build_shopping_plan(observations, requested, args.lat, args.lng)
    else:
        if args.lat is None or args.lng is None:
            parser.error("--lat and --lng are required with --catalog")
        service = ShoppingPlanService()
        try:
            plan = service.get_plan(
                load_catalog(args.catalog),
                args.lat,
                args.lng,
                category=GroceryCategory(args.category) if args.category else None,
                excluded_product_names=[e.strip() for e in args.exclude.split(",") if e.strip()],
                force_refresh=args.force_refresh,
            )
        except ValueError as exc:
            parser.error(str(exc))
        finally:
            service.client.close()

    log_plan(plan)

    if args.output:
        Path(args.output).write_text(plan.to_json(), encoding="utf-8")
        logger.info("Output written to %s", args.output)


if __name__ == "__main__":
    main()
