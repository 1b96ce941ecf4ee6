"""Repository for payment plan operations."""

import logging
from datetime import date
from typing import List, Optional
from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from components.alert import repository as alerts
from components.core.config import get_settings
from components.core.exceptions import ConcurrentUpdate, InvalidArgument, NotFound, PreconditionFailed
from components.payment.models import Payment
from components.plan import models
from components.plan.models import PaymentPlan
from components.prediction import calculator
from components.prediction.models import CostPrediction
from components.prescription.repository import PrescriptionRepository

logger = logging.getLogger(__name__)
settings = get_settings()


class PlanRepository:
    """Repository for payment plan operations."""

    def __init__(self, session: AsyncSession):
        """Initialize repository with database session."""
        self.session = session

    async def get_active(self, user_id: int) -> Optional[PaymentPlan]:
        """Get the user's active plan, if any."""
        result = await self.session.execute(
            select(PaymentPlan)
            .where(PaymentPlan.user_id == user_id, PaymentPlan.is_active.is_(True))
            .order_by(PaymentPlan.created_at.desc(), PaymentPlan.id.desc())
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def get_for_user(self, user_id: int) -> List[PaymentPlan]:
        """Plan history of a user, latest first."""
        result = await self.session.execute(
            select(PaymentPlan)
            .where(PaymentPlan.user_id == user_id)
            .order_by(PaymentPlan.created_at.desc(), PaymentPlan.id.desc())
        )
        return list(result.scalars().all())

    async def get_payment_amounts(self, plan_id: int) -> List[float]:
        result = await self.session.execute(
            select(Payment.amount).where(Payment.payment_plan_id == plan_id)
        )
        return [float(amount) for amount in result.scalars().all()]

    async def get_progress(self, plan: PaymentPlan) -> calculator.PlanProgress:
        amounts = await self.get_payment_amounts(plan.id)
        return calculator.plan_progress(float(plan.total_amount), plan.tenure_months, amounts)

    async def _latest_prediction(self, user_id: int) -> Optional[CostPrediction]:
        result = await self.session.execute(
            select(CostPrediction)
            .where(CostPrediction.user_id == user_id)
            .order_by(CostPrediction.created_at.desc(), CostPrediction.id.desc())
            .limit(1)
        )
        return result.scalar_one_or_none()

    @staticmethod
    def _check_tenure(tenure_months: int) -> None:
        if tenure_months not in settings.ALLOWED_TENURES:
            allowed = ", ".join(str(t) for t in settings.ALLOWED_TENURES)
            raise InvalidArgument(f"Tenure must be one of: {allowed} months")

    async def _conditional_update(self, plan: PaymentPlan, **values) -> PaymentPlan:
        """
        Write ``values`` only if the plan still has the version we read.

        Raises ConcurrentUpdate when another writer got there first. Nothing
        is written in that case; rolling back pending work is up to the caller.
        """
        result = await self.session.execute(
            update(PaymentPlan)
            .where(PaymentPlan.id == plan.id, PaymentPlan.version == plan.version)
            .values(version=PaymentPlan.version + 1, **values)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            raise ConcurrentUpdate("Payment plan was changed by another request, please retry")
        await self.session.refresh(plan)
        return plan

    async def supersede_active(self, user_id: int, reason: str) -> int:
        """
        Deactivate the user's active plans and stage a reset alert.

        Does not commit; callers fold this into their own write.
        """
        result = await self.session.execute(
            update(PaymentPlan)
            .where(PaymentPlan.user_id == user_id, PaymentPlan.is_active.is_(True))
            .values(
                is_active=False,
                auto_pay_enabled=False,
                status=models.SUPERSEDED,
                version=PaymentPlan.version + 1,
            )
            .execution_options(synchronize_session="fetch")
        )
        if result.rowcount:
            alerts.AlertRepository(self.session).add(
                user_id,
                alerts.PLAN_RESET,
                "Payment Plan Reset",
                f"Your active payment plan was closed because {reason}. Create a new plan to continue.",
                "warning",
            )
            logger.info("Superseded %d plan(s) for user %s: %s", result.rowcount, user_id, reason)
        return result.rowcount

    async def preview(self, user_id: int, tenure_months: int) -> dict:
        self._check_tenure(tenure_months)
        prediction = await self._latest_prediction(user_id)
        if prediction is None:
            raise PreconditionFailed("Please generate a cost prediction first")
        total_amount = float(prediction.annual_predicted_cost)
        return {
            "prediction_id": prediction.id,
            "total_amount": total_amount,
            "tenure_months": tenure_months,
            "monthly_emi": calculator.generate_emi(total_amount, tenure_months),
        }

    async def create(self, user_id: int, tenure_months: int, today: Optional[date] = None) -> PaymentPlan:
        """Create a plan from the latest prediction, replacing any active plan."""
        self._check_tenure(tenure_months)
        prediction = await self._latest_prediction(user_id)
        if prediction is None:
            raise PreconditionFailed("Please generate a cost prediction first")

        total_amount = float(prediction.annual_predicted_cost)
        plan = PaymentPlan(
            user_id=user_id,
            prediction_id=prediction.id,
            total_amount=total_amount,
            monthly_emi=calculator.generate_emi(total_amount, tenure_months),
            tenure_months=tenure_months,
            start_date=today or date.today(),
            is_active=True,
            auto_pay_enabled=False,
            status=models.ACTIVE,
            version=1,
        )

        try:
            await self.supersede_active(user_id, "a new payment plan was created")
            self.session.add(plan)
            await self.session.commit()
        except Exception:
            logger.exception("Failed to create payment plan for user %s", user_id)
            await self.session.rollback()
            raise

        await self.session.refresh(plan)
        logger.info(
            "Created plan %s for user %s: %.2f over %d months",
            plan.id, user_id, total_amount, tenure_months,
        )
        return plan

    async def set_auto_pay(self, user_id: int, enabled: bool) -> PaymentPlan:
        plan = await self.get_active(user_id)
        if plan is None:
            raise NotFound("No active payment plan")
        await self._conditional_update(plan, auto_pay_enabled=enabled)
        await self.session.commit()
        return plan

    async def complete(self, plan: PaymentPlan) -> PaymentPlan:
        """Close a fully paid plan and stage the completion alerts. Does not commit."""
        await self._conditional_update(
            plan,
            is_active=False,
            auto_pay_enabled=False,
            status=models.COMPLETED,
        )
        repo = alerts.AlertRepository(self.session)
        repo.add(
            plan.user_id,
            alerts.PLAN_COMPLETED,
            "Payment Plan Completed",
            "You have successfully completed your payment plan of "
            f"{calculator.format_money(float(plan.total_amount))}.",
            "success",
        )
        repo.add(
            plan.user_id,
            alerts.NEXT_STEPS,
            "What's Next?",
            "Upload a new prescription to generate your next cost prediction.",
            "info",
        )
        logger.info("Plan %s completed", plan.id)
        return plan

    async def adjust_on_prescription_change(self, user_id: int) -> Optional[PaymentPlan]:
        """
        Re-size the active plan after the user's prescriptions changed.

        Recorded payments are kept: the new total minus what was already
        paid is spread over the remaining months. A plan whose payments
        already cover the new total is completed. Returns None when there
        is nothing to adjust.
        """
        plan = await self.get_active(user_id)
        if plan is None:
            return None

        prescriptions = await PrescriptionRepository(self.session).get_for_user(user_id, active_only=True)
        if not prescriptions:
            return None

        amounts = await self.get_payment_amounts(plan.id)
        total_amount, monthly_emi = calculator.recalculate_installment(
            calculator.calculate_current_monthly_cost(prescriptions),
            plan.tenure_months,
            len(amounts),
            sum(amounts),
        )

        fully_paid = bool(amounts) and calculator.round_money(sum(amounts)) >= total_amount
        unchanged = float(plan.total_amount) == total_amount and float(plan.monthly_emi) == monthly_emi
        if unchanged and not fully_paid:
            return plan

        if not unchanged:
            await self._conditional_update(plan, total_amount=total_amount, monthly_emi=monthly_emi)
            logger.info(
                "Adjusted plan %s for user %s: total %.2f, emi %.2f",
                plan.id, user_id, total_amount, monthly_emi,
            )
        if fully_paid:
            await self.complete(plan)
        await self.session.commit()
        return plan
