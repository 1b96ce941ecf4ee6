"""Dashboard endpoint: this month at a glance."""

from typing import Optional
from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from components.alert.repository import AlertRepository
from components.core.init_db import get_db
from components.plan.repository import PlanRepository
from components.prediction.calculator import calculate_current_monthly_cost, check_cost_threshold, round_money
from components.prescription.repository import PrescriptionRepository
from components.user.models import User
from restapi.endpoints.auth import get_current_user

router = APIRouter(
    prefix="/dashboard",
    tags=["dashboard"],
)


class CostStatus(BaseModel):
    is_high: bool
    message: str
    severity: str


class PlanSummary(BaseModel):
    plan_id: int
    monthly_emi: float
    yearly_emi: float
    tenure_months: int
    paid_emis: int
    remaining_emis: int
    remaining_amount: float
    progress_percentage: int
    auto_pay_enabled: bool


class Dashboard(BaseModel):
    current_monthly_cost: float
    active_prescriptions: int
    cost_status: CostStatus
    plan: Optional[PlanSummary] = None
    unread_alerts: int


@router.get("/", response_model=Dashboard)
async def get_dashboard(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Current monthly cost, its threshold status and the active plan's progress."""
    active = await PrescriptionRepository(db).get_for_user(current_user.id, active_only=True)
    monthly_cost = round_money(calculate_current_monthly_cost(active))
    status = check_cost_threshold(monthly_cost)

    plans = PlanRepository(db)
    plan = await plans.get_active(current_user.id)
    summary = None
    if plan is not None:
        progress = await plans.get_progress(plan)
        monthly_emi = float(plan.monthly_emi)
        summary = PlanSummary(
            plan_id=plan.id,
            monthly_emi=monthly_emi,
            yearly_emi=round_money(monthly_emi * 12),
            tenure_months=plan.tenure_months,
            paid_emis=progress.paid_emis,
            remaining_emis=progress.remaining_emis,
            remaining_amount=progress.remaining_amount,
            progress_percentage=round(progress.progress_percentage),
            auto_pay_enabled=plan.auto_pay_enabled,
        )

    return Dashboard(
        current_monthly_cost=monthly_cost,
        active_prescriptions=len(active),
        cost_status=CostStatus(is_high=status.is_high, message=status.message, severity=status.severity),
        plan=summary,
        unread_alerts=await AlertRepository(db).unread_count(current_user.id),
    )
