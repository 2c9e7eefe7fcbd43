"""Package price proration."""

from decimal import Decimal, ROUND_HALF_UP

MONEY_QUANT = Decimal("0.01")
ZERO = Decimal("0.00")


def to_money(value: Decimal | int | float | str) -> Decimal:
    return Decimal(str(value)).quantize(MONEY_QUANT, rounding=ROUND_HALF_UP)


def lesson_revenue(
    price_unit: Decimal | float | int,
    participant_count: int | None,
    consumed_minutes: int | None,
    target_minutes: int | None,
) -> Decimal:
    """Prorate the package price by the share of its duration that was delivered.

    A package without a positive duration has no proration base and earns 0.
    """
    if not target_minutes or target_minutes <= 0:
        return ZERO
    consumed = max(consumed_minutes or 0, 0)
    participants = max(participant_count or 0, 1)
    price = Decimal(str(price_unit))
    revenue = price * participants * Decimal(consumed) / Decimal(target_minutes)
    return revenue.quantize(MONEY_QUANT, rounding=ROUND_HALF_UP)
