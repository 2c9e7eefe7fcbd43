"""Minute-level duration helpers."""

from decimal import Decimal
from typing import Tuple


def split_minutes(minutes: int | None) -> Tuple[int, int]:
    """Decompose a minute count into (hours, minutes); negatives count as zero."""
    total = max(int(minutes or 0), 0)
    return divmod(total, 60)


def minutes_to_hours(minutes: int | None) -> Decimal:
    return Decimal(max(int(minutes or 0), 0)) / Decimal("60")


def format_hm(minutes: int | None) -> str:
    hours, rest = split_minutes(minutes)
    if hours and rest:
        return f"{hours}h {rest}m"
    if hours:
        return f"{hours}h"
    return f"{rest}m"


def format_hours(minutes: int | None) -> str:
    """Compact hour figure, e.g. 90 -> "1.5", 120 -> "2"."""
    hours = minutes_to_hours(minutes).quantize(Decimal("0.01"))
    return format(hours.normalize(), "f")


def format_full(minutes: int | None) -> str:
    hours, rest = split_minutes(minutes)
    parts = []
    if hours:
        parts.append(f"{hours} hour" + ("" if hours == 1 else "s"))
    if rest or not hours:
        parts.append(f"{rest} minute" + ("" if rest == 1 else "s"))
    return " ".join(parts)
