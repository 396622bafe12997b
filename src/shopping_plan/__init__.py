"""
Shopping plan engine: which store best serves the whole list

Modules:
- aggregator: group observations by store, cheapest-price index
- scorer: four component scores and the weighted composite
- ranking: adaptive product floor and top-N cap
- recommendation: confidence band and template-based text
- builder: build_shopping_plan, the pure entry point
- service: cache / fetch / build / store around the engine
- unit_parser: weight/volume extraction for price-per-unit display
"""

from .builder import build_shopping_plan, empty_plan
from .unit_parser import UnitInfo, parse_product_unit

__all__ = [
    "build_shopping_plan",
    "empty_plan",
    "UnitInfo",
    "parse_product_unit",
]
