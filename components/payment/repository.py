"""Repository for payment operations."""

import logging
from typing import List, Tuple
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from components.core.exceptions import NotFound, PreconditionFailed
from components.payment.models import Payment
from components.plan.models import PaymentPlan
from components.plan.repository import PlanRepository
from components.prediction import calculator

logger = logging.getLogger(__name__)

AUTO_PAY = "Auto Pay"
MANUAL_PAYMENT = "Manual Payment"


class PaymentRepository:
    """Repository for payment operations."""

    def __init__(self, session: AsyncSession):
        """Initialize repository with database session."""
        self.session = session

    async def get_for_plan(self, user_id: int, plan_id: int, limit: int = 50) -> List[Payment]:
        """Payments of one plan, latest first."""
        result = await self.session.execute(
            select(Payment)
            .where(Payment.user_id == user_id, Payment.payment_plan_id == plan_id)
            .order_by(Payment.created_at.desc(), Payment.id.desc())
            .limit(limit)
        )
        return list(result.scalars().all())

    async def pay_installment(self, user_id: int) -> Tuple[Payment, PaymentPlan, bool]:
        """
        Record the next installment of the user's active plan.

        The last installment settles whatever is left, and no installment
        pays more than the remaining amount. Returns the payment, the plan
        and whether this payment completed the plan.
        """
        plans = PlanRepository(self.session)
        plan = await plans.get_active(user_id)
        if plan is None:
            raise NotFound("No active payment plan")

        amounts = await plans.get_payment_amounts(plan.id)
        paid_emis = len(amounts)
        if paid_emis >= plan.tenure_months:
            raise PreconditionFailed("Payment plan already completed")

        remaining = max(calculator.round_money(float(plan.total_amount) - sum(amounts)), 0.0)
        if remaining <= 0:
            raise PreconditionFailed("Nothing left to pay on this payment plan")
        is_last_payment = paid_emis + 1 == plan.tenure_months
        amount = remaining if is_last_payment else min(float(plan.monthly_emi), remaining)

        payment = Payment(
            user_id=user_id,
            payment_plan_id=plan.id,
            amount=calculator.round_money(amount),
            payment_method=AUTO_PAY if plan.auto_pay_enabled else MANUAL_PAYMENT,
            status="completed",
            transaction_id=calculator.generate_transaction_id(),
        )

        try:
            self.session.add(payment)
            completed = paid_emis + 1 >= plan.tenure_months
            if completed:
                await self.session.flush()
                await plans.complete(plan)
            await self.session.commit()
        except Exception:
            logger.exception("Failed to record payment for plan %s", plan.id)
            await self.session.rollback()
            raise

        await self.session.refresh(payment)
        await self.session.refresh(plan)
        logger.info(
            "Payment %s of %.2f recorded for plan %s (%d/%d)",
            payment.transaction_id, float(payment.amount), plan.id, paid_emis + 1, plan.tenure_months,
        )
        return payment, plan, completed
