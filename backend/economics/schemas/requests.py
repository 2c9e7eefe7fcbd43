"""Request bodies for the economics endpoints."""

from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field

from backend.economics.schemas.records import Session


class CompletionRequest(BaseModel):
    sessions: List[Session] = Field(default_factory=list)
    target_minutes: int = Field(ge=0)


class CommissionRequest(BaseModel):
    consumed_minutes: int = Field(ge=0)
    type: str
    rate: Decimal = Field(ge=0)
    base_revenue: Decimal = Field(default=Decimal("0"), ge=0)
    target_minutes: Optional[int] = Field(default=None, ge=0)


class RevenueRequest(BaseModel):
    price_unit: Decimal = Field(ge=0)
    participant_count: int = Field(default=1, ge=0)
    consumed_minutes: int = Field(ge=0)
    target_minutes: int = Field(ge=0)
