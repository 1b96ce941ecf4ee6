"""Follow-up work after a user's prescriptions change."""

import logging
from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession

from components.alert import repository as alerts
from components.core.exceptions import ConcurrentUpdate
from components.plan.models import PaymentPlan
from components.plan.repository import PlanRepository
from components.prediction.calculator import check_cost_threshold
from components.prescription.repository import PrescriptionRepository

logger = logging.getLogger(__name__)

SEVERITY_RANK = {"info": 0, "warning": 1, "error": 2}


async def on_prescriptions_changed(
    session: AsyncSession, user_id: int, previous_monthly_cost: float
) -> Optional[PaymentPlan]:
    """
    Re-size the active plan and raise a high cost alert when the monthly
    cost moved into a higher band than before the change.
    """
    plan = None
    try:
        plan = await PlanRepository(session).adjust_on_prescription_change(user_id)
    except ConcurrentUpdate:
        # The prescription change is already stored; the next change or an
        # explicit adjust brings the plan up to date.
        logger.warning("Plan adjustment for user %s lost a concurrent update", user_id)

    monthly_cost = await PrescriptionRepository(session).monthly_cost(user_id)
    before = check_cost_threshold(previous_monthly_cost)
    after = check_cost_threshold(monthly_cost)
    if after.is_high and SEVERITY_RANK[after.severity] > SEVERITY_RANK[before.severity]:
        alerts.AlertRepository(session).add(
            user_id,
            alerts.HIGH_COST,
            "High Prescription Cost",
            after.message,
            after.severity,
        )
        await session.commit()
        logger.info("High cost alert (%s) for user %s", after.severity, user_id)
    return plan
