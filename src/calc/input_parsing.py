"""Boundary between raw form text and the numeric inputs the calculators use.

Every calculator assumes it receives plain numbers. Whatever the user typed
(currency symbols, thousands separators, percent signs, blanks) is cleaned
up here once, and anything that still isn't a usable number becomes 0.
"""

import logging
import math
import re
from typing import Any, Dict, Optional, Tuple


_STRIP_CHARS = re.compile(r"[,$%\s]")

TRUE_CHOICES = {"yes", "y", "true", "1", "jointly", "over65", "on"}

# Entered contributions that are checked against an annual dollar limit,
# mapped to the retirement limit group they belong to.
LIMITED_CONTRIBUTIONS = {
    "retirement_roth_401k": "401k",
    "retirement_roth_ira": "ira",
}


def sanitize_text(raw: Any) -> str:
    """Strip currency formatting and keep at most two decimal places."""
    if raw is None:
        return ""
    text = _STRIP_CHARS.sub("", str(raw))
    if "." in text:
        whole, _, frac = text.partition(".")
        text = whole + "." + frac.replace(".", "")[:2]
    return text


def coerce_amount(value: Any, allow_negative: bool = False) -> float:
    """Turn any scalar into a finite float, using 0 for anything unusable.

    Negative values become 0 unless allow_negative is set.
    """
    if value is None or isinstance(value, bool):
        return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    if math.isnan(number) or math.isinf(number):
        return 0.0
    if number < 0 and not allow_negative:
        return 0.0
    return number


def parse_number(raw: Any, allow_negative: bool = False) -> float:
    """Parse user text such as ``"$1,250.509"`` into ``1250.5``."""
    if isinstance(raw, (int, float)) and not isinstance(raw, bool):
        return coerce_amount(raw, allow_negative)
    text = sanitize_text(raw)
    if text in ("", ".", "-", "-."):
        return 0.0
    return coerce_amount(text, allow_negative)


def parse_optional_number(raw: Any) -> Optional[float]:
    """Like parse_number, but a blank field stays None instead of becoming 0."""
    if raw is None:
        return None
    if isinstance(raw, str) and sanitize_text(raw) == "":
        return None
    return parse_number(raw)


def clamp_percent(value: float, maximum: float = 100.0) -> Tuple[float, bool]:
    """Clamp a percentage into 0..maximum. Returns (value, clamped)."""
    value = coerce_amount(value)
    if value > maximum:
        logging.warning("Percentage %.2f exceeds %.0f%%; using %.0f%%", value, maximum, maximum)
        return maximum, True
    return value, False


def parse_percent(raw: Any, maximum: float = 100.0) -> Tuple[float, bool]:
    return clamp_percent(parse_number(raw), maximum)


def parse_age(raw: Any, default: int, min_age: int = 22, max_age: int = 100) -> int:
    """Whole-year age clamped into the projection range; blanks use default."""
    value = parse_optional_number(raw)
    if value is None or value == 0:
        value = default
    return int(min(max(int(value), min_age), max_age))


def parse_choice(raw: Any) -> bool:
    """Map yes/no style selections (and real booleans) to a bool."""
    if isinstance(raw, bool):
        return raw
    if raw is None:
        return False
    return str(raw).strip().lower() in TRUE_CHOICES


def clamp_contribution(item_id: str, amount: float, limits: Dict[str, float]) -> Tuple[float, bool]:
    """Hold an entered contribution to its annual dollar limit.

    Items without a limit pass through untouched. Returns (amount, clamped).
    """
    group = LIMITED_CONTRIBUTIONS.get(item_id)
    if group is None or group not in limits:
        return amount, False
    limit = limits[group]
    if amount > limit:
        logging.warning("%s of $%.2f exceeds the $%.2f limit", item_id, amount, limit)
        return float(limit), True
    return amount, False
