"""
Metric/imperial conversion for ingredient amounts.

Countable units (piece, clove, can, ...) and unknown units pass through
unchanged. Converted values are rounded for display.
"""

from __future__ import annotations
import math
from typing import Any, Dict, Optional, Tuple

METRIC = "metric"
IMPERIAL = "imperial"

# unit -> (factor or callable, target unit, target system)
CONVERSIONS = {
    # weight
    "g": (0.035274, "oz", IMPERIAL),
    "kg": (2.20462, "lb", IMPERIAL),
    "oz": (28.3495, "g", METRIC),
    "lb": (0.453592, "kg", METRIC),
    # volume
    "ml": (0.033814, "fl oz", IMPERIAL),
    "l": (4.22675, "cup", IMPERIAL),
    "fl oz": (29.5735, "ml", METRIC),
    "cup": (236.588, "ml", METRIC),
    "tbsp": (14.7868, "ml", METRIC),
    "tsp": (4.92892, "ml", METRIC),
    # temperature
    "C": (lambda v: v * 9 / 5 + 32, "F", IMPERIAL),
    "F": (lambda v: (v - 32) * 5 / 9, "C", METRIC),
    # length
    "cm": (0.393701, "in", IMPERIAL),
    "m": (3.28084, "ft", IMPERIAL),
    "in": (2.54, "cm", METRIC),
    "ft": (0.3048, "m", METRIC),
}

METRIC_UNITS = {"g", "kg", "ml", "l", "C", "cm", "m"}
IMPERIAL_UNITS = {"oz", "lb", "fl oz", "cup", "tbsp", "tsp", "F", "in", "ft"}
COUNTABLE_UNITS = {"piece", "whole", "slice", "clove", "head", "bunch", "can", "package"}

UNIT_ALIASES = {
    "tbs": "tbsp", "tbl": "tbsp", "tbls": "tbsp", "tablespoon": "tbsp", "tablespoons": "tbsp",
    "teaspoon": "tsp", "teaspoons": "tsp", "tsps": "tsp",
    "cups": "cup", "ounce": "oz", "ounces": "oz", "pound": "lb", "pounds": "lb", "lbs": "lb",
    "gram": "g", "grams": "g", "kilogram": "kg", "kilograms": "kg",
    "milliliter": "ml", "milliliters": "ml", "liter": "l", "liters": "l", "litre": "l",
    "fl. oz": "fl oz", "floz": "fl oz",
    "°c": "C", "°f": "F",
    "pieces": "piece", "slices": "slice", "cloves": "clove", "heads": "head",
    "bunches": "bunch", "cans": "can", "packages": "package",
}


def normalize_unit(unit: Optional[str]) -> Optional[str]:
    """Map common unit spellings to the canonical keys above."""
    if unit is None:
        return None
    t = unit.strip().rstrip(".")
    if t in CONVERSIONS or t in COUNTABLE_UNITS:
        return t
    low = t.lower()
    if low in CONVERSIONS or low in COUNTABLE_UNITS:
        return low
    return UNIT_ALIASES.get(low, t)


def _round_half_up(value: float, digits: int) -> float:
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


def round_for_display(value: float) -> float:
    """>=100 -> integer, >=1 -> one decimal, otherwise two decimals."""
    if value >= 100:
        return float(math.floor(value + 0.5))
    if value >= 1:
        return _round_half_up(value, 1)
    return _round_half_up(value, 2)


def convert_value(value: Any, unit: Optional[str], system: str) -> Tuple[float, Optional[str]]:
    """
    Convert ``value`` in ``unit`` to the target measurement ``system``.

    Non-numeric or non-finite values come back as 0 in the original unit.
    """
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0, unit
    if math.isnan(number) or math.isinf(number):
        return 0, unit

    canonical = normalize_unit(unit)
    if canonical is None or canonical in COUNTABLE_UNITS:
        return number, unit
    if system == METRIC and canonical in METRIC_UNITS:
        return number, unit
    if system == IMPERIAL and canonical in IMPERIAL_UNITS:
        return number, unit

    conversion = CONVERSIONS.get(canonical)
    if conversion is None:
        return number, unit

    factor, target_unit, target_system = conversion
    if target_system != system:
        return number, unit
    converted = factor(number) if callable(factor) else number * factor
    return round_for_display(converted), target_unit


def convert_ingredient(ingredient: Dict[str, Any], system: str) -> Dict[str, Any]:
    """Return a copy of an ingredient dict with ``amount``/``unit`` converted."""
    amount = ingredient.get("amount")
    if amount is None or amount == "":
        return dict(ingredient)
    value, unit = convert_value(amount, ingredient.get("unit"), system)
    return {**ingredient, "amount": value, "unit": unit}
