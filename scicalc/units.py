"""Unit conversion for length, mass, temperature and time."""

from typing import Dict, List, Tuple

from .errors import InputError

UNIT_CATEGORIES: Dict[str, List[str]] = {
    "length": ["meter", "kilometer", "mile", "foot", "inch", "centimeter", "millimeter"],
    "mass": ["gram", "kilogram", "pound", "ounce"],
    "temperature": ["celsius", "fahrenheit", "kelvin"],
    "time": ["second", "minute", "hour", "day"],
}

# Factor to the category's base unit (meter, kilogram, second).
LINEAR_FACTORS: Dict[str, float] = {
    "meter": 1.0,
    "kilometer": 1000.0,
    "mile": 1609.344,
    "foot": 0.3048,
    "inch": 0.0254,
    "centimeter": 0.01,
    "millimeter": 0.001,
    "gram": 0.001,
    "kilogram": 1.0,
    "pound": 0.45359237,
    "ounce": 0.028349523125,
    "second": 1.0,
    "minute": 60.0,
    "hour": 3600.0,
    "day": 86400.0,
}


def category_of(unit: str) -> str:
    """Return the category a unit belongs to."""
    for category, names in UNIT_CATEGORIES.items():
        if unit in names:
            return category
    raise InputError(f"Unknown unit: {unit}")


def default_units(category: str) -> Tuple[str, str]:
    """Return the (from, to) units preselected for a category."""
    if category not in UNIT_CATEGORIES:
        raise InputError(f"Unknown unit category: {category}")
    names = UNIT_CATEGORIES[category]
    return names[0], names[1] if len(names) > 1 else names[0]


def _to_kelvin(value: float, unit: str) -> float:
    if unit == "celsius":
        return value + 273.15
    if unit == "fahrenheit":
        return (value - 32.0) * 5.0 / 9.0 + 273.15
    return value


def _from_kelvin(value: float, unit: str) -> float:
    if unit == "celsius":
        return value - 273.15
    if unit == "fahrenheit":
        return (value - 273.15) * 9.0 / 5.0 + 32.0
    return value


def convert_unit(value: float, from_unit: str, to_unit: str) -> float:
    """Convert a value between two units of the same category.

    Raises:
        InputError: Unknown unit or units from different categories.
    """
    from_category = category_of(from_unit)
    to_category = category_of(to_unit)
    if from_category != to_category:
        raise InputError(f"Cannot convert {from_unit} to {to_unit}")

    if from_category == "temperature":
        return _from_kelvin(_to_kelvin(value, from_unit), to_unit)
    return value * LINEAR_FACTORS[from_unit] / LINEAR_FACTORS[to_unit]


def format_conversion(raw_value: str, from_unit: str, to_unit: str) -> str:
    """Convert raw input text for display.

    Returns:
        The converted value with 4 decimals, an empty string for non-numeric
        input, or ``Error`` when the units cannot be converted.
    """
    try:
        value = float(raw_value)
    except (TypeError, ValueError):
        return ""
    try:
        return f"{convert_unit(value, from_unit, to_unit):.4f}"
    except InputError:
        return "Error"
