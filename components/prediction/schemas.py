"""Pydantic schemas for cost predictions."""

from datetime import date, datetime
from typing import List, Optional
from pydantic import BaseModel


class MonthlyCost(BaseModel):
    month: str
    cost: float


class PredictionCreate(BaseModel):
    """Optional override of the configured projection policy."""
    policy: Optional[str] = None


class CostPrediction(BaseModel):
    id: int
    annual_predicted_cost: float
    average_monthly_cost: float
    monthly_breakdown: List[MonthlyCost]
    policy: str
    prediction_date: date
    created_at: datetime

    @classmethod
    def from_model(cls, prediction) -> "CostPrediction":
        annual = float(prediction.annual_predicted_cost)
        return cls(
            id=prediction.id,
            annual_predicted_cost=annual,
            average_monthly_cost=round(annual / 12, 2),
            monthly_breakdown=prediction.monthly_breakdown,
            policy=prediction.policy,
            prediction_date=prediction.prediction_date,
            created_at=prediction.created_at,
        )
