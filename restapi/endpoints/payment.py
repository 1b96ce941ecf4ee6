"""Payment endpoints for the API."""

from dataclasses import asdict
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from components.core.init_db import get_db
from components.payment import schemas
from components.payment.repository import PaymentRepository
from components.plan import schemas as plan_schemas
from components.plan.repository import PlanRepository
from components.user.models import User
from restapi.endpoints.auth import get_current_user

router = APIRouter(
    prefix="/payments",
    tags=["payments"],
    responses={404: {"description": "Not found"}},
)


@router.get("/", response_model=schemas.PaymentList)
async def list_payments(
    limit: int = Query(50, ge=1, le=100, description="Number of records to return"),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Get payments made against the active plan, latest first."""
    plan = await PlanRepository(db).get_active(current_user.id)
    if plan is None:
        raise HTTPException(status_code=404, detail="No active payment plan")
    payments = await PaymentRepository(db).get_for_plan(current_user.id, plan.id, limit=limit)
    return schemas.PaymentList(
        plan_id=plan.id,
        payments=[schemas.Payment.model_validate(p) for p in payments],
    )


@router.post("/", response_model=schemas.PaymentResult, status_code=201)
async def pay_installment(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """
    Pay the next installment of the active plan.

    The method is "Auto Pay" when auto-pay is enabled, otherwise
    "Manual Payment". Paying the last installment completes the plan.
    """
    payment, plan, completed = await PaymentRepository(db).pay_installment(current_user.id)
    progress = await PlanRepository(db).get_progress(plan)
    return schemas.PaymentResult(
        payment=schemas.Payment.model_validate(payment),
        plan=plan_schemas.PaymentPlan.model_validate(plan),
        progress=plan_schemas.PlanProgress(**asdict(progress)),
        plan_completed=completed,
    )
