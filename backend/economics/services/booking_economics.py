"""Booking-level economics composed from the revenue, commission and completion calculators."""

import logging
from collections import OrderedDict
from datetime import UTC, datetime
from decimal import Decimal
from typing import Callable, Iterable, List, Optional, TypeVar

from backend.economics.core.errors import EconomicsError, MissingFigureError
from backend.economics.schemas.records import Booking, Lesson, SessionStatus
from backend.economics.schemas.results import (
    BookingEconomics,
    CommissionGroup,
    CommissionResult,
    LessonEconomics,
    SessionTransaction,
)
from backend.economics.services.commission import commission, rate_label, referral_commission
from backend.economics.services.completion import completion, consumed_minutes
from backend.economics.services.duration import format_hm, minutes_to_hours
from backend.economics.services.revenue import ZERO, lesson_revenue, to_money

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _attempt(figure: str, errors: List[str], compute: Callable[[], T]) -> Optional[T]:
    """Run one figure; on an economics error record it and return None."""
    try:
        return compute()
    except EconomicsError as exc:
        logger.warning("Unable to compute %s: %s", figure, exc)
        errors.append(f"{figure}: {exc}")
        return None


def _sum_payments(payments) -> Decimal:
    return sum((payment.amount for payment in payments), ZERO)


def lesson_commission(lesson: Lesson, booking: Booking, minutes: int, revenue: Decimal) -> CommissionResult:
    if lesson.commission is None:
        raise MissingFigureError("commission", f"lesson {lesson.id} has no commission snapshot")
    return commission(minutes, lesson.commission.scheme, revenue, booking.school_package.duration_target)


def lesson_economics(lesson: Lesson, booking: Booking, errors: Optional[List[str]] = None) -> LessonEconomics:
    errors = errors if errors is not None else []
    package = booking.school_package
    minutes = consumed_minutes(lesson.sessions)
    revenue = lesson_revenue(package.price_unit, booking.participants, minutes, package.duration_target)
    earned = _attempt(
        f"lesson {lesson.id} commission",
        errors,
        lambda: lesson_commission(lesson, booking, minutes, revenue),
    )
    return LessonEconomics(
        lesson_id=lesson.id,
        instructor_id=lesson.instructor_id,
        event_count=len(lesson.sessions),
        consumed_minutes=minutes,
        revenue=revenue,
        commission=earned,
        paid_out=_sum_payments(lesson.payments),
    )


def booking_economics(booking: Booking) -> BookingEconomics:
    """Revenue, payouts, net and completion for one booking."""
    package = booking.school_package
    errors: List[str] = []

    lessons = [lesson_economics(lesson, booking, errors) for lesson in booking.lessons]
    sessions = booking.sessions
    progress = completion(sessions, package.duration_target)
    minutes = progress.consumed_minutes
    revenue = lesson_revenue(package.price_unit, booking.participants, minutes, package.duration_target)

    instructor_commission: Optional[Decimal] = None
    if all(lesson.commission is not None for lesson in lessons):
        instructor_commission = sum((lesson.commission.earned for lesson in lessons), ZERO)

    referral = _attempt(
        "referral commission",
        errors,
        lambda: referral_commission(minutes, booking.referral, revenue, package.duration_target),
    )
    referral_failed = booking.referral is not None and referral is None

    money_out: Optional[Decimal] = None
    net: Optional[Decimal] = None
    if instructor_commission is not None and not referral_failed:
        money_out = instructor_commission + (referral.earned if referral is not None else ZERO)
        net = revenue - money_out

    paid = _sum_payments(booking.payments)
    return BookingEconomics(
        booking_id=booking.id,
        currency=booking.currency,
        participants=booking.participants,
        event_count=len(sessions),
        consumed_minutes=minutes,
        revenue=revenue,
        lessons=lessons,
        instructor_commission=instructor_commission,
        referral=referral,
        money_in=revenue,
        money_out=money_out,
        net=net,
        paid=paid,
        balance=revenue - paid,
        completion=progress,
        errors=errors,
    )


def session_transactions(booking: Booking) -> List[SessionTransaction]:
    """One financial row per session, ordered by start time.

    A lesson whose commission cannot be computed keeps its rows with
    ``instructor_earning`` and ``profit`` left as None.
    """
    package = booking.school_package
    dated: List[tuple] = []
    errors: List[str] = []
    for lesson in booking.lessons:
        scheme = None
        if lesson.commission is not None:
            scheme = _attempt(f"lesson {lesson.id} commission", errors, lambda: lesson.commission.scheme)
        for session in lesson.sessions:
            delivered = 0 if session.status == SessionStatus.CANCELLED else session.duration_minutes
            revenue = lesson_revenue(package.price_unit, booking.participants, delivered, package.duration_target)
            earning: Optional[Decimal] = None
            if scheme is not None:
                earning = commission(delivered, scheme, revenue, package.duration_target).earned
            row = SessionTransaction(
                session_id=session.id,
                lesson_id=lesson.id,
                booking_id=booking.id,
                instructor_id=lesson.instructor_id,
                status=SessionStatus(session.status).value,
                duration_minutes=session.duration_minutes,
                duration_label=format_hm(session.duration_minutes),
                revenue=revenue,
                instructor_earning=earning,
                profit=revenue - earning if earning is not None else None,
                currency=booking.currency,
            )
            dated.append((session.starts_at, row))
    # starts_at is always aware once validated; undated sessions go last
    dated.sort(key=lambda item: (item[0] is None, item[0] or datetime.min.replace(tzinfo=UTC)))
    return [row for _, row in dated]


def group_by_commission(bookings: Iterable[Booking], instructor_id: Optional[str] = None) -> List[CommissionGroup]:
    """Group lessons sharing a commission type and rate, in first-seen order.

    Lessons without a snapshot, or whose snapshot cannot be resolved, are left out.
    """
    groups: "OrderedDict[tuple, dict]" = OrderedDict()
    errors: List[str] = []
    for booking in bookings:
        package = booking.school_package
        for lesson in booking.lessons:
            if instructor_id is not None and lesson.instructor_id != instructor_id:
                continue
            if lesson.commission is None:
                logger.debug("Lesson %s has no commission snapshot; not grouped", lesson.id)
                continue
            scheme = _attempt(f"lesson {lesson.id} commission", errors, lambda: lesson.commission.scheme)
            if scheme is None:
                continue
            minutes = consumed_minutes(lesson.sessions)
            revenue = lesson_revenue(package.price_unit, booking.participants, minutes, package.duration_target)
            result = commission(minutes, scheme, revenue, package.duration_target)
            key = (lesson.commission.type.strip().lower(), Decimal(str(lesson.commission.rate)))
            entry = groups.setdefault(
                key,
                {"label": rate_label(scheme), "lesson_count": 0, "minutes": 0, "earned": ZERO},
            )
            entry["lesson_count"] += 1
            entry["minutes"] += minutes
            entry["earned"] += result.earned

    return [
        CommissionGroup(
            type=kind,
            rate=rate,
            rate_label=entry["label"],
            lesson_count=entry["lesson_count"],
            hours=minutes_to_hours(entry["minutes"]),
            earned=to_money(entry["earned"]),
        )
        for (kind, rate), entry in groups.items()
    ]
