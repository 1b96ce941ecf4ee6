"""Repository for alert operations."""

from typing import List, Optional
from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from components.alert.models import Alert

PREDICTION_GENERATED = "prediction_generated"
PLAN_RESET = "payment_plan_reset"
PLAN_COMPLETED = "payment_plan_completed"
NEXT_STEPS = "next_steps"
HIGH_COST = "high_cost"


class AlertRepository:
    """Repository for alert operations."""

    def __init__(self, session: AsyncSession):
        """Initialize repository with database session."""
        self.session = session

    def add(self, user_id: int, alert_type: str, title: str, message: str, severity: str = "info") -> Alert:
        """Stage a new alert on the session. The caller commits."""
        alert = Alert(
            user_id=user_id,
            alert_type=alert_type,
            title=title,
            message=message,
            severity=severity,
            is_read=False,
        )
        self.session.add(alert)
        return alert

    async def get_for_user(self, user_id: int, unread_only: bool = False) -> List[Alert]:
        query = select(Alert).where(Alert.user_id == user_id)
        if unread_only:
            query = query.where(Alert.is_read.is_(False))
        query = query.order_by(Alert.created_at.desc(), Alert.id.desc())
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def get(self, user_id: int, alert_id: int) -> Optional[Alert]:
        result = await self.session.execute(
            select(Alert).where(Alert.id == alert_id, Alert.user_id == user_id)
        )
        return result.scalar_one_or_none()

    async def unread_count(self, user_id: int) -> int:
        result = await self.session.execute(
            select(func.count(Alert.id)).where(Alert.user_id == user_id, Alert.is_read.is_(False))
        )
        return result.scalar() or 0

    async def mark_read(self, user_id: int, alert_id: int) -> Optional[Alert]:
        alert = await self.get(user_id, alert_id)
        if alert is None:
            return None
        alert.is_read = True
        await self.session.commit()
        return alert

    async def mark_all_read(self, user_id: int) -> int:
        """Mark every unread alert as read and return how many changed."""
        result = await self.session.execute(
            update(Alert)
            .where(Alert.user_id == user_id, Alert.is_read.is_(False))
            .values(is_read=True)
        )
        if not result.rowcount:
            return 0
        await self.session.commit()
        return result.rowcount

    async def delete(self, user_id: int, alert_id: int) -> bool:
        alert = await self.get(user_id, alert_id)
        if alert is None:
            return False
        await self.session.delete(alert)
        await self.session.commit()
        return True
