"""
Value normalization for raw setting strings.

Slicers write values with units ("0.2mm", "15%", "215°C") and in several
boolean spellings. ``normalize_value`` turns one raw string into a typed
value; anything it cannot classify comes back unchanged.
"""

import math
import re
from typing import Any

from .models import SettingValue

_UNIT_SUFFIX = re.compile(r"\s*(mm|%|°C|C)$")
_NUMERIC = re.compile(r"^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?$")

_TRUE_WORDS = frozenset({"true", "yes", "1", "on"})
_FALSE_WORDS = frozenset({"false", "no", "0", "off"})


def _parse_number(value: str) -> int | float | None:
    value = value.strip()
    if not _NUMERIC.match(value):
        return None
    try:
        number = float(value)
        if not math.isfinite(number):
            return None
        if "." in value:
            return number
        try:
            return int(value)
        except ValueError:
            # exponent form without a decimal point, e.g. "1e3"
            return int(number)
    except (ValueError, OverflowError):
        return None


def normalize_value(raw: str) -> SettingValue:
    """Classify a raw setting string.

    Order: percentage, boolean keyword, number, else the original string.
    Percentages become integers (``"20%"`` -> ``20``, ``"12.5%"`` -> ``12``).
    Units are stripped only for classification; an unclassified value keeps
    its unit.
    """
    stripped = _UNIT_SUFFIX.sub("", raw.strip())

    if "%" in raw:
        number = _parse_number(stripped.replace("%", ""))
        if number is not None:
            return int(number)

    lowered = stripped.lower()
    if lowered in _TRUE_WORDS:
        return True
    if lowered in _FALSE_WORDS:
        return False

    number = _parse_number(stripped)
    if number is not None:
        return number

    return raw


def _first(value: Any) -> Any:
    """Extract the first element if value is a list, otherwise return as-is."""
    if isinstance(value, list):
        return value[0] if value else None
    return value


def coerce_setting(value: Any) -> SettingValue | None:
    """Normalize a value that may already be typed (e.g. decoded from JSON).

    Lists collapse to their first element. Integers go through the same
    keyword check as strings, so ``1`` becomes ``True``. Returns None for
    values that have no scalar form (null, objects, empty lists, non-finite
    floats).
    """
    value = _first(value)
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return normalize_value(str(value))
    if isinstance(value, float):
        return value if math.isfinite(value) else None
    if isinstance(value, str):
        return normalize_value(value)
    return None
