import math
import re
from typing import Any, Dict, List

PROJECTION_MULTIPLIER = 1.1
AMOUNT_FALLBACK = 0.0

_LEADING_NUMBER = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


def parse_amount(raw: Any) -> float:
    """Parse an ``obligated_amount`` value, always returning a finite float.

    Strings are read leniently: surrounding whitespace is ignored and the
    longest leading decimal is used, so ``"12.5abc"`` gives ``12.5``.
    Missing, empty, non-numeric, NaN and infinite amounts fall back to ``0.0``,
    as do amounts too large for a float or whose projection would overflow.
    """
    if raw is None or isinstance(raw, bool):
        return AMOUNT_FALLBACK
    if isinstance(raw, str):
        match = _LEADING_NUMBER.match(raw.strip())
        if not match:
            return AMOUNT_FALLBACK
        raw = match.group(0)
    elif not isinstance(raw, (int, float)):
        return AMOUNT_FALLBACK
    try:
        value = float(raw)
    except (OverflowError, ValueError):
        return AMOUNT_FALLBACK
    # alternative must stay finite too
    if not math.isfinite(value) or not math.isfinite(value * PROJECTION_MULTIPLIER):
        return AMOUNT_FALLBACK
    return value


def normalize_obligation(record: Any) -> Dict[str, Any]:
    if not isinstance(record, dict):
        record = {}
    title = record.get("account_title")
    value = parse_amount(record.get("obligated_amount"))
    return {
        "name": "" if title is None else str(title),
        "value": value,
        "alternative": value * PROJECTION_MULTIPLIER,
    }


def normalize_obligations(results: List[Any]) -> List[Dict[str, Any]]:
    return [normalize_obligation(r) for r in results]


def total_value(records: List[Dict[str, Any]]) -> float:
    total = 0.0
    for r in records:
        total += r["value"]
    return total


def record_count(records: List[Dict[str, Any]]) -> int:
    return len(records)
