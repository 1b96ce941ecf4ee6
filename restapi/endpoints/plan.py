"""Payment plan endpoints for the API."""

from dataclasses import asdict
from typing import List
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from components.core.config import get_settings
from components.core.init_db import get_db
from components.plan import schemas
from components.plan.repository import PlanRepository
from components.user.models import User
from restapi.endpoints.auth import get_current_user

settings = get_settings()

router = APIRouter(
    prefix="/plans",
    tags=["plans"],
    responses={404: {"description": "Not found"}},
)


async def _with_progress(repo: PlanRepository, plan) -> schemas.PlanWithProgress:
    progress = await repo.get_progress(plan)
    return schemas.PlanWithProgress(
        plan=schemas.PaymentPlan.model_validate(plan),
        progress=schemas.PlanProgress(**asdict(progress)),
    )


@router.get("/", response_model=List[schemas.PaymentPlan])
async def list_plans(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Get all plans of the user, latest first."""
    return await PlanRepository(db).get_for_user(current_user.id)


@router.get("/active", response_model=schemas.PlanWithProgress)
async def active_plan(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """
    Get the active plan with its EMI progress.

    Returns:
    - Total amount, monthly EMI, tenure, auto-pay flag
    - EMIs paid and remaining
    - Amount paid and remaining
    - Progress percentage
    """
    repo = PlanRepository(db)
    plan = await repo.get_active(current_user.id)
    if plan is None:
        raise HTTPException(status_code=404, detail="No active payment plan")
    return await _with_progress(repo, plan)


@router.get("/preview", response_model=schemas.PlanPreview)
async def preview_plan(
    tenure_months: int = Query(settings.DEFAULT_TENURE_MONTHS, description="Tenure in months"),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Show the EMI for the latest prediction at the given tenure."""
    return await PlanRepository(db).preview(current_user.id, tenure_months)


@router.post("/", response_model=schemas.PlanWithProgress, status_code=201)
async def create_plan(
    request: schemas.PlanCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """
    Create a payment plan from the latest cost prediction.

    An existing active plan is closed first.
    """
    repo = PlanRepository(db)
    plan = await repo.create(current_user.id, request.tenure_months)
    return await _with_progress(repo, plan)


@router.post("/active/auto-pay", response_model=schemas.PaymentPlan)
async def set_auto_pay(
    request: schemas.AutoPayUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Enable or disable auto-pay on the active plan."""
    return await PlanRepository(db).set_auto_pay(current_user.id, request.enabled)


@router.post("/active/adjust", response_model=schemas.PlanWithProgress)
async def adjust_plan(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Re-size the active plan to the current prescriptions."""
    repo = PlanRepository(db)
    plan = await repo.adjust_on_prescription_change(current_user.id)
    if plan is None:
        plan = await repo.get_active(current_user.id)
    if plan is None:
        raise HTTPException(status_code=404, detail="No active payment plan")
    return await _with_progress(repo, plan)
