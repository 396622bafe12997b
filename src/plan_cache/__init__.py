"""
Plan cache: persistence for computed shopping plans

- cache: SQLite storage keyed by location cell and category
- refresh: caller-owned one-shot refresh override
"""

from .cache import PlanCache
from .refresh import RefreshOverride

__all__ = ["PlanCache", "RefreshOverride"]
