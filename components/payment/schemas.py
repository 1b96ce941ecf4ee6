"""Pydantic schemas for payments."""

from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel

from components.plan.schemas import PaymentPlan, PlanProgress


class Payment(BaseModel):
    id: int
    payment_plan_id: Optional[int] = None
    amount: float
    payment_date: datetime
    payment_method: str
    status: str
    transaction_id: str

    class Config:
        from_attributes = True


class PaymentResult(BaseModel):
    """Schema for the response to paying an installment."""
    payment: Payment
    plan: PaymentPlan
    progress: PlanProgress
    plan_completed: bool


class PaymentList(BaseModel):
    plan_id: int
    payments: List[Payment]
