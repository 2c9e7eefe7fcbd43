"""Result schemas returned by the economics services."""

from decimal import Decimal
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict


class CommissionResult(BaseModel):
    hours: Decimal
    rate_label: str
    earned: Decimal

    model_config = ConfigDict(frozen=True)


class ProgressSegment(BaseModel):
    status: str
    fraction: float
    color: str

    model_config = ConfigDict(frozen=True)


class CompletionResult(BaseModel):
    minutes_by_status: Dict[str, int]
    counts_by_status: Dict[str, int]
    consumed_minutes: int
    target_minutes: int
    ratio: float
    raw_ratio: float
    segments: List[ProgressSegment]

    model_config = ConfigDict(frozen=True)


class LessonEconomics(BaseModel):
    lesson_id: str
    instructor_id: str
    event_count: int
    consumed_minutes: int
    revenue: Decimal
    commission: Optional[CommissionResult] = None
    paid_out: Decimal

    model_config = ConfigDict(frozen=True)


class BookingEconomics(BaseModel):
    booking_id: str
    currency: str
    participants: int
    event_count: int
    consumed_minutes: int
    revenue: Decimal
    lessons: List[LessonEconomics]
    instructor_commission: Optional[Decimal] = None
    referral: Optional[CommissionResult] = None
    money_in: Decimal
    money_out: Optional[Decimal] = None
    net: Optional[Decimal] = None
    paid: Decimal
    balance: Decimal
    completion: CompletionResult
    errors: List[str] = []

    model_config = ConfigDict(frozen=True)


class SessionTransaction(BaseModel):
    session_id: str
    lesson_id: str
    booking_id: str
    instructor_id: str
    status: str
    duration_minutes: int
    duration_label: str
    revenue: Decimal
    instructor_earning: Optional[Decimal] = None
    profit: Optional[Decimal] = None
    currency: str

    model_config = ConfigDict(frozen=True)


class CommissionGroup(BaseModel):
    type: str
    rate: Decimal
    rate_label: str
    lesson_count: int
    hours: Decimal
    earned: Decimal

    model_config = ConfigDict(frozen=True)


class StatBundleRead(BaseModel):
    count: int
    event_count: int
    total_minutes: int
    money_in: Decimal
    money_out: Decimal
    net: Decimal
    incomplete: int

    model_config = ConfigDict(from_attributes=True)


class GroupedStatsRead(BaseModel):
    total: StatBundleRead
    groups: Dict[str, StatBundleRead]

    model_config = ConfigDict(from_attributes=True)
