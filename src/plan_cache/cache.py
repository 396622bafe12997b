"""Time-boxed storage for computed shopping plans.

Plans are keyed by a rounded location key and an optional category;
``get`` only returns unexpired rows, newest first.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone

from pydantic import ValidationError

from src.common.config import CacheSettings, settings
from src.common.database import get_connection, init_db
from src.common.location import location_key
from src.common.models import GroceryCategory, ShoppingPlan

logger = logging.getLogger(__name__)

ALL_CATEGORIES_KEY = "ALL"


def _category_key(category: GroceryCategory | None) -> str:
    return category.value if category is not None else ALL_CATEGORIES_KEY


class PlanCache:
    """SQLite-backed plan cache.

    Usage:
        cache = PlanCache()
        plan = cache.get(-34.6, -58.4)
        if plan is None:
            plan = build_shopping_plan(...)
            cache.put(plan, -34.6, -58.4)
    """

    def __init__(self, config: CacheSettings | None = None) -> None:
        self.config = config or settings.cache
        self.ttl = timedelta(hours=self.config.plan_ttl_hours)
        init_db(self.config.db_path)

    def get(
        self,
        latitude: float,
        longitude: float,
        category: GroceryCategory | None = None,
        *,
        now: datetime | None = None,
    ) -> ShoppingPlan | None:
        """Newest unexpired plan for the location cell and category, if any."""
        now = _as_utc(now or datetime.now(timezone.utc))
        key = location_key(latitude, longitude)
        conn = get_connection(self.config.db_path)
        try:
            row = conn.execute(
                """SELECT id, plan_json FROM plan_cache
                   WHERE location_key = ? AND category = ? AND expires_at > ?
                   ORDER BY generated_at DESC, id DESC LIMIT 1""",
                (key, _category_key(category), now.isoformat()),
            ).fetchone()
            if row is None:
                logger.info("Plan cache miss for %s/%s", key, _category_key(category))
                return None
            try:
                plan = ShoppingPlan.model_validate_json(row["plan_json"])
            except ValidationError:
                logger.warning("Discarding unreadable cached plan %d", row["id"])
                conn.execute("DELETE FROM plan_cache WHERE id = ?", (row["id"],))
                conn.commit()
                return None
        finally:
            conn.close()

        logger.info("Plan cache hit for %s/%s", key, _category_key(category))
        return plan

    def put(
        self,
        plan: ShoppingPlan,
        latitude: float,
        longitude: float,
        category: GroceryCategory | None = None,
    ) -> datetime:
        """Store a plan; returns its expiry time."""
        generated_at = _as_utc(plan.last_updated)
        expires_at = generated_at + self.ttl
        key = location_key(latitude, longitude)
        conn = get_connection(self.config.db_path)
        try:
            conn.execute(
                """INSERT INTO plan_cache
                   (location_key, category, plan_json, generated_at, expires_at)
                   VALUES (?, ?, ?, ?, ?)""",
                (
                    key,
                    _category_key(category),
                    plan.to_json(indent=None),
                    generated_at.isoformat(),
                    expires_at.isoformat(),
                ),
            )
            conn.commit()
        finally:
            conn.close()
        logger.info("Cached plan for %s/%s until %s", key, _category_key(category), expires_at)
        return expires_at

    def purge_expired(self, now: datetime | None = None) -> int:
        """Delete expired plans; returns how many rows were removed."""
        now = _as_utc(now or datetime.now(timezone.utc))
        conn = get_connection(self.config.db_path)
        try:
            cur = conn.execute(
                "DELETE FROM plan_cache WHERE expires_at <= ?", (now.isoformat(),)
            )
            conn.commit()
            return cur.rowcount
        finally:
            conn.close()


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
