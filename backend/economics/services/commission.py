"""Instructor and referral commission calculators."""

import logging
from decimal import Decimal
from typing import Optional

from backend.economics.core.errors import InvalidRateSchemeError
from backend.economics.schemas.records import FixedRate, PercentageRate, RateScheme, Referral
from backend.economics.schemas.results import CommissionResult
from backend.economics.services.duration import minutes_to_hours
from backend.economics.services.revenue import to_money

logger = logging.getLogger(__name__)


def format_rate(rate: Decimal) -> str:
    value = Decimal(str(rate))
    if value == value.to_integral_value():
        return str(int(value))
    return format(value.normalize(), "f")


def rate_label(scheme: RateScheme) -> str:
    if isinstance(scheme, FixedRate):
        return f"{format_rate(scheme.rate)}/hr"
    if isinstance(scheme, PercentageRate):
        return f"{format_rate(scheme.rate)}%"
    raise InvalidRateSchemeError(type(scheme).__name__)


def commission(
    consumed_minutes: int | None,
    scheme: RateScheme,
    base_revenue: Decimal,
    target_minutes: int | None = None,
) -> CommissionResult:
    """Compute an earning from a rate scheme.

    Fixed rates pay per delivered hour and ignore revenue; percentage rates
    take a share of ``base_revenue``. ``target_minutes`` is unused by both.
    """
    hours = minutes_to_hours(consumed_minutes)
    if isinstance(scheme, FixedRate):
        earned = Decimal(str(scheme.rate)) * hours
    elif isinstance(scheme, PercentageRate):
        earned = Decimal(str(scheme.rate)) / Decimal("100") * Decimal(str(base_revenue))
    else:
        raise InvalidRateSchemeError(type(scheme).__name__)
    return CommissionResult(hours=hours, rate_label=rate_label(scheme), earned=to_money(earned))


def referral_commission(
    booking_minutes: int | None,
    referral: Optional[Referral],
    booking_revenue: Decimal,
    target_minutes: int | None = None,
) -> Optional[CommissionResult]:
    """Referral earning on booking-level hours and revenue; None without a referral."""
    if referral is None:
        return None
    logger.debug("Computing referral commission for code %s", referral.code)
    return commission(booking_minutes, referral.scheme, booking_revenue, target_minutes)
