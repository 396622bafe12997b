"""Weight/volume extraction from product descriptions.

Parses tokens like "1.5 L", "500 Gr", "1kg", "250 cc" and normalizes
them to grams or milliliters so products of different pack sizes can
be compared by price per unit.
"""

from __future__ import annotations

import re
from dataclasses import dataclass


@dataclass(frozen=True)
class UnitInfo:
    """Quantity found in a product description."""

    quantity: float  # in base unit (g or ml)
    unit: str  # g | ml
    unit_label: str  # "1.5L", "500g"

    def to_dict(self) -> dict:
        return {
            "quantity": self.quantity,
            "unit": self.unit,
            "unit_label": self.unit_label,
        }


@dataclass(frozen=True)
class _UnitPattern:
    regex: re.Pattern[str]
    factor: float
    unit: str
    suffix: str


# Most specific first: kg before g, liters before ml.
_UNIT_PATTERNS: list[_UnitPattern] = [
    _UnitPattern(re.compile(r"(\d+(?:[.,]\d+)?)\s*kg\b", re.I), 1000, "g", "kg"),
    _UnitPattern(re.compile(r"(\d+(?:[.,]\d+)?)\s*g(?:rs?)?\.?\b", re.I), 1, "g", "g"),
    _UnitPattern(
        re.compile(r"(\d+(?:[.,]\d+)?)\s*l(?:t(?:s|r)?|itros?)?\.?\b", re.I),
        1000, "ml", "L",
    ),
    _UnitPattern(re.compile(r"(\d+(?:[.,]\d+)?)\s*(?:ml|cc)\.?\b", re.I), 1, "ml", "ml"),
]


def _parse_quantity(raw: str) -> float:
    # Argentine decimal comma: "1,5" -> 1.5
    return float(raw.replace(",", "."))


def parse_product_unit(text: str) -> UnitInfo | None:
    """Extract weight/volume from a product name or description.

    Returns None if no recognizable unit is found.

    Examples:
        "Aceite de Girasol 1,5 lt" -> UnitInfo(1500.0, "ml", "1.5L")
        "Yerba Mate 500 Gr" -> UnitInfo(500.0, "g", "500g")
    """
    if not text:
        return None

    for pattern in _UNIT_PATTERNS:
        match = pattern.regex.search(text)
        if not match:
            continue
        try:
            raw_quantity = _parse_quantity(match.group(1))
        except ValueError:
            continue
        if raw_quantity <= 0:
            continue
        return UnitInfo(
            quantity=raw_quantity * pattern.factor,
            unit=pattern.unit,
            unit_label=f"{raw_quantity:g}{pattern.suffix}",
        )

    return None


def price_per_base_unit(price: float, text: str) -> float | None:
    """Price per gram or milliliter, or None if no unit parses."""
    info = parse_product_unit(text)
    if info is None or info.quantity <= 0:
        return None
    return price / info.quantity


def price_per_reference_unit(price: float, text: str) -> tuple[float, str] | None:
    """Price per kilogram or liter, with the matching label ("kg" | "L")."""
    info = parse_product_unit(text)
    if info is None:
        return None
    label = "kg" if info.unit == "g" else "L"
    return price / info.quantity * 1000, label
