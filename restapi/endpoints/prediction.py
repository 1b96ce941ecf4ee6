"""Cost prediction endpoints for the API."""

from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from components.core.init_db import get_db
from components.prediction import schemas
from components.prediction.repository import PredictionRepository
from components.user.models import User
from restapi.endpoints.auth import get_current_user

router = APIRouter(
    prefix="/predictions",
    tags=["predictions"],
    responses={404: {"description": "Not found"}},
)


@router.get("/", response_model=List[schemas.CostPrediction])
async def list_predictions(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Get prediction history, latest first."""
    predictions = await PredictionRepository(db).get_for_user(current_user.id)
    return [schemas.CostPrediction.from_model(p) for p in predictions]


@router.get("/latest", response_model=schemas.CostPrediction)
async def latest_prediction(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Get the most recent prediction."""
    prediction = await PredictionRepository(db).get_latest(current_user.id)
    if prediction is None:
        raise HTTPException(status_code=404, detail="No cost prediction yet")
    return schemas.CostPrediction.from_model(prediction)


@router.post("/", response_model=schemas.CostPrediction, status_code=201)
async def generate_prediction(
    request: Optional[schemas.PredictionCreate] = None,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """
    Generate a 12-month cost prediction from the active prescriptions.

    Any active payment plan is closed, since it was sized on an older
    prediction.
    """
    policy = request.policy if request else None
    prediction = await PredictionRepository(db).generate(current_user.id, policy=policy)
    return schemas.CostPrediction.from_model(prediction)
