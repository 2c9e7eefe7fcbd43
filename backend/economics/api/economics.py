"""Economics endpoints."""

import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, HTTPException, status
from pydantic import TypeAdapter, ValidationError

from backend.economics.core.errors import EconomicsError
from backend.economics.schemas.records import Booking, build_rate_scheme
from backend.economics.schemas.requests import CommissionRequest, CompletionRequest, RevenueRequest
from backend.economics.schemas.results import (
    BookingEconomics,
    CommissionGroup,
    CommissionResult,
    CompletionResult,
    GroupedStatsRead,
    SessionTransaction,
)
from backend.economics.schemas.rows import EquipmentRow, InstructorRow, PackageRow, ReferralRow, StudentRow
from backend.economics.services.booking_economics import booking_economics, group_by_commission, session_transactions
from backend.economics.services.commission import commission
from backend.economics.services.completion import completion
from backend.economics.services.revenue import lesson_revenue
from backend.economics.services.stats import extractor_for, group_rollup

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/economics", tags=["economics"])

ROW_MODELS = {
    "bookings": Booking,
    "students": StudentRow,
    "instructors": InstructorRow,
    "equipment": EquipmentRow,
    "packages": PackageRow,
    "referrals": ReferralRow,
}

GROUP_KEYS = {
    "bookings": {
        "package": lambda row: row.school_package.id,
        "currency": lambda row: row.currency,
        "referral": lambda row: row.referral.code if row.referral else "none",
    },
    "equipment": {"category": lambda row: row.category or "unspecified"},
    "packages": {"category": lambda row: row.package.equipment_category or "unspecified"},
    "referrals": {"type": lambda row: row.referral.type},
}


def _unable_to_compute(exc: EconomicsError) -> HTTPException:
    return HTTPException(
        status_code=422,
        detail={"code": exc.code.value, "message": exc.message},
    )


@router.post("/revenue")
async def compute_revenue(request: RevenueRequest):
    revenue = lesson_revenue(
        request.price_unit, request.participant_count, request.consumed_minutes, request.target_minutes
    )
    return {"revenue": str(revenue)}


@router.post("/commission", response_model=CommissionResult)
async def compute_commission(request: CommissionRequest):
    try:
        scheme = build_rate_scheme(request.type, request.rate)
        return commission(request.consumed_minutes, scheme, request.base_revenue, request.target_minutes)
    except EconomicsError as exc:
        raise _unable_to_compute(exc)


@router.post("/completion", response_model=CompletionResult)
async def compute_completion(request: CompletionRequest):
    return completion(request.sessions, request.target_minutes)


@router.post("/bookings", response_model=BookingEconomics)
async def compute_booking(booking: Booking):
    return booking_economics(booking)


@router.post("/bookings/transactions", response_model=List[SessionTransaction])
async def compute_booking_transactions(booking: Booking):
    return session_transactions(booking)


@router.post("/commission-groups", response_model=List[CommissionGroup])
async def compute_commission_groups(bookings: List[Booking], instructor_id: Optional[str] = None):
    return group_by_commission(bookings, instructor_id=instructor_id)


@router.post("/rollup/{kind}", response_model=GroupedStatsRead)
async def compute_rollup(kind: str, rows: List[Dict[str, Any]], group_by: Optional[str] = None):
    extract = extractor_for(kind)
    if extract is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Unknown rollup kind '{kind}'")

    try:
        parsed = TypeAdapter(List[ROW_MODELS[kind]]).validate_python(rows)
    except ValidationError as exc:
        raise HTTPException(
            status_code=422,
            detail=exc.errors(include_url=False, include_context=False),
        )

    if group_by is None:
        key = lambda row: "all"  # noqa: E731
    else:
        key = GROUP_KEYS.get(kind, {}).get(group_by)
        if key is None:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Cannot group {kind} by '{group_by}'",
            )

    grouped = group_rollup(parsed, extract, key)
    logger.info("Rollup of %s: %d rows, %d groups", kind, grouped.total.count, len(grouped.groups))
    return GroupedStatsRead(
        total=grouped.total.as_dict(),
        groups={name: bundle.as_dict() for name, bundle in grouped.groups.items()},
    )
