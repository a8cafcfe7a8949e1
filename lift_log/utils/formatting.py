"""Formatting helpers used by the derivations and console output."""

from __future__ import annotations

import math
import re
from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Optional

_FRACTION = re.compile(r"(T\d{2}:\d{2}:\d{2})\.(\d+)")


def to_fixed(value: float, places: int) -> str:
    """Format like JavaScript ``Number.prototype.toFixed``.

    Rounds half away from zero on the exact binary value, so ``2.5`` gives
    ``"3"`` where ``format(2.5, ".0f")`` would give ``"2"``.
    """
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    quantum = Decimal(1).scaleb(-places)
    rounded = Decimal(value).quantize(quantum, rounding=ROUND_HALF_UP)
    return f"{rounded:.{places}f}"


def iso_timestamp(moment: datetime) -> str:
    """Return a UTC ISO-8601 timestamp with milliseconds and ``Z`` suffix."""
    if moment.tzinfo is None:
        moment = moment.astimezone()
    utc = moment.astimezone(timezone.utc)
    return utc.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def display_date(moment: datetime, date_format: str = "") -> str:
    """Format the local calendar date, M/D/YYYY unless a strftime format is given."""
    if moment.tzinfo is not None:
        moment = moment.astimezone()
    if date_format:
        return moment.strftime(date_format)
    return f"{moment.month}/{moment.day}/{moment.year}"


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Parse an ISO timestamp into an aware datetime, or None."""
    if not value:
        return None
    text = str(value).strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    # fromisoformat before 3.11 only takes 3 or 6 fraction digits.
    text = _FRACTION.sub(lambda m: f"{m.group(1)}.{m.group(2)[:6].ljust(6, '0')}", text, count=1)
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.astimezone()
    return parsed


def format_amount(value: str, units: str = "") -> str:
    """Render a free-text weight with its unit label."""
    if not units:
        return value
    return f"{value} {units}"


def format_number(value: float) -> str:
    """Shortest round-trip text for a parsed weight, without a trailing ``.0``."""
    if math.isfinite(value) and value.is_integer():
        return str(int(value))
    return repr(value)
