"""Rollup rows: one entity plus the bookings that mention it."""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from backend.economics.schemas.records import Booking, Payment, Referral, SchoolPackage


class RowBase(BaseModel):
    model_config = ConfigDict(frozen=True)

    bookings: List[Booking] = Field(default_factory=list)


class StudentRow(RowBase):
    student_id: str
    name: Optional[str] = None


class InstructorRow(RowBase):
    instructor_id: str
    username: Optional[str] = None


class EquipmentRow(RowBase):
    equipment_id: str
    category: Optional[str] = None
    repairs: List[Payment] = Field(default_factory=list)


class PackageRow(RowBase):
    package: SchoolPackage


class ReferralRow(RowBase):
    referral: Referral
