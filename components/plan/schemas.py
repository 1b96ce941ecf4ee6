"""Pydantic schemas for payment plan data validation."""

from datetime import date, datetime
from typing import Optional
from pydantic import BaseModel, Field


class PlanCreate(BaseModel):
    """Schema for plan creation."""
    tenure_months: int = Field(12, description="One of the allowed tenures")


class AutoPayUpdate(BaseModel):
    enabled: bool


class PaymentPlan(BaseModel):
    """Schema for plan response."""
    id: int
    prediction_id: Optional[int] = None
    total_amount: float
    monthly_emi: float
    tenure_months: int
    start_date: date
    is_active: bool
    auto_pay_enabled: bool
    status: str
    created_at: datetime

    class Config:
        from_attributes = True


class PlanProgress(BaseModel):
    """Schema for EMI progress of a plan."""
    total_emis: int
    paid_emis: int
    remaining_emis: int
    total_paid: float
    remaining_amount: float
    progress_percentage: float

    class Config:
        from_attributes = True


class PlanWithProgress(BaseModel):
    plan: PaymentPlan
    progress: PlanProgress


class PlanPreview(BaseModel):
    """EMI the user would pay for the latest prediction at a given tenure."""
    prediction_id: int
    total_amount: float
    tenure_months: int
    monthly_emi: float
