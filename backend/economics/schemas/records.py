"""Input records for the economics engine.

Records arrive fully nested from the data-access layer; every nested
collection defaults to empty so a row with missing children still computes.
"""

from dataclasses import dataclass
from datetime import UTC, datetime
from decimal import Decimal
from enum import Enum
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from backend.economics.core.errors import InvalidRateSchemeError, RateOutOfRangeError
from backend.economics.core.settings import get_settings
from backend.economics.core.time import utc_now


class SessionStatus(str, Enum):
    SCHEDULED = "scheduled"
    RESTING = "resting"
    COMPLETED = "completed"
    UNCOMPLETED = "uncompleted"
    CANCELLED = "cancelled"


STATUS_ALIASES = {
    "planned": SessionStatus.SCHEDULED,
    "active": SessionStatus.SCHEDULED,
    "tbc": SessionStatus.SCHEDULED,
    "rest": SessionStatus.RESTING,
    "canceled": SessionStatus.CANCELLED,
}


@dataclass(frozen=True)
class FixedRate:
    """Currency per delivered hour."""

    rate: Decimal


@dataclass(frozen=True)
class PercentageRate:
    """Share (0-100) of the revenue base."""

    rate: Decimal


RateScheme = Union[FixedRate, PercentageRate]


def build_rate_scheme(scheme_type: str, value: Decimal) -> RateScheme:
    """Resolve a stored type tag into its rate variant."""
    tag = (scheme_type or "").strip().lower()
    if tag == "fixed":
        return FixedRate(rate=value)
    if tag == "percentage":
        if Decimal(str(value)) > 100:
            raise RateOutOfRangeError(scheme_type, value)
        return PercentageRate(rate=value)
    raise InvalidRateSchemeError(scheme_type)


class RecordBase(BaseModel):
    model_config = ConfigDict(frozen=True)


class SchoolPackage(RecordBase):
    id: str
    description: str = ""
    price_unit: Decimal = Field(ge=0)
    duration_target: int = Field(ge=0)
    participant_capacity: int = Field(default=1, ge=1)
    equipment_capacity: int = Field(default=0, ge=0)
    equipment_category: Optional[str] = None


class Commission(RecordBase):
    id: Optional[str] = None
    type: str
    rate: Decimal = Field(ge=0)
    description: Optional[str] = None

    @property
    def scheme(self) -> RateScheme:
        return build_rate_scheme(self.type, self.rate)


class Referral(RecordBase):
    id: Optional[str] = None
    code: str
    type: str
    value: Decimal = Field(ge=0)

    @property
    def scheme(self) -> RateScheme:
        return build_rate_scheme(self.type, self.value)


class StudentPackage(RecordBase):
    id: str
    school_package: SchoolPackage
    referral: Optional[Referral] = None
    student_ids: List[str] = Field(default_factory=list)


class Payment(RecordBase):
    id: Optional[str] = None
    amount: Decimal = Field(ge=0)
    paid_at: datetime = Field(default_factory=utc_now)
    student_id: Optional[str] = None


class Session(RecordBase):
    id: str
    duration_minutes: int = Field(default=0, ge=0)
    status: SessionStatus = SessionStatus.SCHEDULED
    starts_at: Optional[datetime] = None
    location: Optional[str] = None
    equipment_ids: List[str] = Field(default_factory=list)

    @field_validator("status", mode="before")
    @classmethod
    def _normalise_status(cls, value):
        if isinstance(value, str):
            key = value.strip().lower()
            return STATUS_ALIASES.get(key, key)
        return value

    @field_validator("starts_at")
    @classmethod
    def _assume_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        if value is not None and value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value


class Lesson(RecordBase):
    id: str
    instructor_id: str
    commission: Optional[Commission] = None
    sessions: List[Session] = Field(default_factory=list)
    payments: List[Payment] = Field(default_factory=list)


class Booking(RecordBase):
    id: str
    student_package: StudentPackage
    student_ids: List[str] = Field(default_factory=list)
    participant_count: Optional[int] = Field(default=None, ge=0)
    lessons: List[Lesson] = Field(default_factory=list)
    payments: List[Payment] = Field(default_factory=list)
    currency: str = Field(default_factory=lambda: get_settings().default_currency)

    @property
    def school_package(self) -> SchoolPackage:
        return self.student_package.school_package

    @property
    def referral(self) -> Optional[Referral]:
        return self.student_package.referral

    @property
    def participants(self) -> int:
        if self.participant_count:
            return self.participant_count
        return len(self.student_ids) or self.school_package.participant_capacity

    @property
    def sessions(self) -> List[Session]:
        return [session for lesson in self.lessons for session in lesson.sessions]
