"""Numeric coercion utilities"""

import math
from typing import Any, Optional

MULTIPLIERS = {
    "k": 1_000,
    "thousand": 1_000,
    "m": 1_000_000,
    "million": 1_000_000,
    "b": 1_000_000_000,
    "billion": 1_000_000_000,
}


def is_present(value: Any) -> bool:
    """A profile field counts as absent when unset or blank"""
    if value is None:
        return False
    if isinstance(value, str) and not value.strip():
        return False
    return True


def parse_number(value: Any) -> float:
    """
    Coerce a numeric-ish value to float.

    Strings are parsed after stripping "$" and thousands separators.
    Anything that does not parse, and NaN or infinity, is treated as 0.0.
    """
    if isinstance(value, (bool, int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip().replace("$", "").replace(",", ""))
        except ValueError:
            return 0.0
    else:
        return 0.0
    return number if math.isfinite(number) else 0.0


def apply_multiplier(amount: float, suffix: Optional[str]) -> float:
    """Scale an amount by a k/m/b style suffix ("250k" -> 250000)"""
    if not suffix:
        return amount
    return amount * MULTIPLIERS.get(suffix.lower(), 1)
