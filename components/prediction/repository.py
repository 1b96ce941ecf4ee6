"""Repository for cost prediction operations."""

import logging
from dataclasses import asdict
from datetime import date
from typing import List, Optional
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from components.alert import repository as alerts
from components.core.exceptions import PreconditionFailed
from components.plan.repository import PlanRepository
from components.prediction.calculator import format_money, predict_annual_cost
from components.prediction.models import CostPrediction
from components.prescription.repository import PrescriptionRepository

logger = logging.getLogger(__name__)


class PredictionRepository:
    """Repository for cost prediction operations."""

    def __init__(self, session: AsyncSession):
        """Initialize repository with database session."""
        self.session = session

    async def get_for_user(self, user_id: int) -> List[CostPrediction]:
        """All predictions of a user, latest first."""
        result = await self.session.execute(
            select(CostPrediction)
            .where(CostPrediction.user_id == user_id)
            .order_by(CostPrediction.created_at.desc(), CostPrediction.id.desc())
        )
        return list(result.scalars().all())

    async def get_latest(self, user_id: int) -> Optional[CostPrediction]:
        result = await self.session.execute(
            select(CostPrediction)
            .where(CostPrediction.user_id == user_id)
            .order_by(CostPrediction.created_at.desc(), CostPrediction.id.desc())
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def generate(
        self, user_id: int, policy: Optional[str] = None, today: Optional[date] = None
    ) -> CostPrediction:
        """
        Generate and store a prediction from the user's active prescriptions.

        The active payment plan, if any, is superseded and the user is
        notified. Everything is committed together.
        """
        today = today or date.today()
        prescriptions = await PrescriptionRepository(self.session).get_for_user(user_id, active_only=True)
        if not prescriptions:
            raise PreconditionFailed("Please add prescriptions first")

        result = predict_annual_cost(prescriptions, policy=policy, start=today)

        prediction = CostPrediction(
            user_id=user_id,
            annual_predicted_cost=result.annual_cost,
            monthly_breakdown=[asdict(month) for month in result.monthly_breakdown],
            policy=result.policy,
            prediction_date=today,
        )
        self.session.add(prediction)

        try:
            await PlanRepository(self.session).supersede_active(user_id, "a new cost prediction was generated")
            alerts.AlertRepository(self.session).add(
                user_id,
                alerts.PREDICTION_GENERATED,
                "Cost Prediction Generated",
                f"Your annual predicted cost is {format_money(result.annual_cost)}",
                "info",
            )
            await self.session.commit()
        except Exception:
            logger.exception("Failed to store cost prediction for user %s", user_id)
            await self.session.rollback()
            raise

        await self.session.refresh(prediction)
        logger.info(
            "Generated %s prediction %s for user %s: %.2f",
            result.policy, prediction.id, user_id, result.annual_cost,
        )
        return prediction
