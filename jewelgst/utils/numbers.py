from __future__ import annotations

import math
import re
from decimal import Decimal, InvalidOperation
from typing import Any


# Plain ASCII decimal literals and signed "Infinity"; float() alone also takes
# "inf", "nan", "1_000" and non-ASCII digits.
_NUMERIC_RE = re.compile(r"[+-]?(?:(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?|Infinity)", re.ASCII)


def to_number(value: Any) -> float:
    """
    Lenient numeric coercion for stored invoice columns.
    Missing, blank, non-numeric and NaN values become 0.0 instead of raising,
    so one bad row can't break a report.
    """
    if value is None:
        return 0.0
    if isinstance(value, bool):
        return 1.0 if value else 0.0
    if isinstance(value, (int, float)):
        out = float(value)
    elif isinstance(value, Decimal):
        try:
            out = float(value)
        except (InvalidOperation, ValueError):
            return 0.0
    elif isinstance(value, str):
        s = value.strip()
        if not s:
            return 0.0
        if not _NUMERIC_RE.fullmatch(s):
            return 0.0
        out = float(s.replace("Infinity", "inf"))
    else:
        return 0.0
    return 0.0 if math.isnan(out) else out


def number_or(value: Any, default: float) -> float:
    """to_number, but a zero result falls back to `default`."""
    return to_number(value) or default
