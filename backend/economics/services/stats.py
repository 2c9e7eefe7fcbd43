"""Order-independent stat rollups over bookings, students, instructors, equipment and packages.

Every entity kind reduces to the same ``StatBundle`` through an extractor, and
bundles only ever combine by component-wise addition. That keeps the empty
rollup equal to ``ZERO_BUNDLE`` and lets a group total be rebuilt from its
subtotals without going back to the source records.
"""

import logging
from dataclasses import dataclass
from decimal import Decimal
from functools import reduce
from typing import Callable, Dict, Iterable, Optional, TypeVar, Union

from backend.economics.core.errors import EconomicsError
from backend.economics.schemas.records import Booking, SessionStatus
from backend.economics.schemas.results import BookingEconomics
from backend.economics.schemas.rows import EquipmentRow, InstructorRow, PackageRow, ReferralRow, StudentRow
from backend.economics.services.booking_economics import booking_economics, lesson_economics
from backend.economics.services.commission import referral_commission
from backend.economics.services.completion import consumed_minutes
from backend.economics.services.revenue import ZERO, lesson_revenue

logger = logging.getLogger(__name__)

Row = TypeVar("Row")


@dataclass(frozen=True)
class StatBundle:
    count: int = 0
    event_count: int = 0
    total_minutes: int = 0
    money_in: Decimal = ZERO
    money_out: Decimal = ZERO
    incomplete: int = 0

    @property
    def net(self) -> Decimal:
        return self.money_in - self.money_out

    def __add__(self, other: "StatBundle") -> "StatBundle":
        return combine(self, other)

    def as_dict(self) -> dict:
        return {
            "count": self.count,
            "event_count": self.event_count,
            "total_minutes": self.total_minutes,
            "money_in": self.money_in,
            "money_out": self.money_out,
            "net": self.net,
            "incomplete": self.incomplete,
        }


ZERO_BUNDLE = StatBundle()


@dataclass(frozen=True)
class GroupedStats:
    total: StatBundle
    groups: Dict[str, StatBundle]


def combine(left: StatBundle, right: StatBundle) -> StatBundle:
    return StatBundle(
        count=left.count + right.count,
        event_count=left.event_count + right.event_count,
        total_minutes=left.total_minutes + right.total_minutes,
        money_in=left.money_in + right.money_in,
        money_out=left.money_out + right.money_out,
        incomplete=left.incomplete + right.incomplete,
    )


def rollup(rows: Iterable[Row], extract: Callable[[Row], StatBundle]) -> StatBundle:
    return reduce(combine, (extract(row) for row in rows), ZERO_BUNDLE)


def group_rollup(
    rows: Iterable[Row],
    extract: Callable[[Row], StatBundle],
    key: Callable[[Row], str],
) -> GroupedStats:
    groups: Dict[str, StatBundle] = {}
    for row in rows:
        group = key(row)
        groups[group] = combine(groups.get(group, ZERO_BUNDLE), extract(row))
    total = reduce(combine, groups.values(), ZERO_BUNDLE)
    logger.debug("Rolled up %d rows into %d groups", total.count, len(groups))
    return GroupedStats(total=total, groups=groups)


def _activity_only(count: int, events: int, minutes: int) -> StatBundle:
    """Bundle for a row whose money figures could not be computed."""
    return StatBundle(count=count, event_count=events, total_minutes=minutes, incomplete=1)


def booking_stats(row: Union[Booking, BookingEconomics]) -> StatBundle:
    economics = booking_economics(row) if isinstance(row, Booking) else row
    if economics.money_out is None:
        return _activity_only(1, economics.event_count, economics.consumed_minutes)
    return StatBundle(
        count=1,
        event_count=economics.event_count,
        total_minutes=economics.consumed_minutes,
        money_in=economics.money_in,
        money_out=economics.money_out,
    )


def student_stats(row: StudentRow) -> StatBundle:
    """Money in is what the student paid; money out is their share of delivered revenue."""
    events = minutes = 0
    paid = charged = ZERO
    for booking in row.bookings:
        package = booking.school_package
        booking_minutes = consumed_minutes(booking.sessions)
        events += len(booking.sessions)
        minutes += booking_minutes
        charged += lesson_revenue(package.price_unit, 1, booking_minutes, package.duration_target)
        paid += sum(
            (p.amount for p in booking.payments if p.student_id in (None, row.student_id)),
            ZERO,
        )
    return StatBundle(count=1, event_count=events, total_minutes=minutes, money_in=paid, money_out=charged)


def instructor_stats(row: InstructorRow) -> StatBundle:
    """Money in is commission earned; money out is what has been paid out."""
    events = minutes = 0
    earned = paid_out = ZERO
    complete = True
    for booking in row.bookings:
        for lesson in booking.lessons:
            if lesson.instructor_id != row.instructor_id:
                continue
            economics = lesson_economics(lesson, booking)
            events += economics.event_count
            minutes += economics.consumed_minutes
            paid_out += economics.paid_out
            if economics.commission is None:
                complete = False
            else:
                earned += economics.commission.earned
    if not complete:
        return _activity_only(1, events, minutes)
    return StatBundle(count=1, event_count=events, total_minutes=minutes, money_in=earned, money_out=paid_out)


def equipment_stats(row: EquipmentRow) -> StatBundle:
    """Revenue of the sessions the equipment was used in, against its repair costs."""
    events = minutes = 0
    revenue = ZERO
    for booking in row.bookings:
        package = booking.school_package
        used = [s for s in booking.sessions if row.equipment_id in s.equipment_ids]
        used_minutes = sum(s.duration_minutes for s in used if s.status != SessionStatus.CANCELLED)
        events += len(used)
        minutes += used_minutes
        revenue += lesson_revenue(package.price_unit, booking.participants, used_minutes, package.duration_target)
    repairs = sum((repair.amount for repair in row.repairs), ZERO)
    return StatBundle(count=1, event_count=events, total_minutes=minutes, money_in=revenue, money_out=repairs)


def package_stats(row: PackageRow) -> StatBundle:
    bookings = rollup(row.bookings, booking_stats)
    return StatBundle(
        count=1,
        event_count=bookings.event_count,
        total_minutes=bookings.total_minutes,
        money_in=bookings.money_in,
        money_out=bookings.money_out,
        incomplete=bookings.incomplete,
    )


def referral_stats(row: ReferralRow) -> StatBundle:
    """Revenue brought in through a referral code against the referral payouts."""
    events = minutes = 0
    revenue = payout = ZERO
    complete = True
    for booking in row.bookings:
        package = booking.school_package
        booking_minutes = consumed_minutes(booking.sessions)
        booking_revenue = lesson_revenue(
            package.price_unit, booking.participants, booking_minutes, package.duration_target
        )
        events += len(booking.sessions)
        minutes += booking_minutes
        try:
            result = referral_commission(booking_minutes, row.referral, booking_revenue, package.duration_target)
        except EconomicsError as exc:
            logger.warning("Unable to compute referral %s payout: %s", row.referral.code, exc)
            complete = False
            continue
        revenue += booking_revenue
        payout += result.earned
    if not complete:
        return _activity_only(1, events, minutes)
    return StatBundle(count=1, event_count=events, total_minutes=minutes, money_in=revenue, money_out=payout)


EXTRACTORS: Dict[str, Callable] = {
    "bookings": booking_stats,
    "students": student_stats,
    "instructors": instructor_stats,
    "equipment": equipment_stats,
    "packages": package_stats,
    "referrals": referral_stats,
}


def extractor_for(kind: str) -> Optional[Callable]:
    return EXTRACTORS.get(kind)
