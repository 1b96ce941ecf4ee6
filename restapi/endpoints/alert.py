"""Alert endpoints for the API."""

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from components.alert import schemas
from components.alert.repository import AlertRepository
from components.core.init_db import get_db
from components.user.models import User
from restapi.endpoints.auth import get_current_user

router = APIRouter(
    prefix="/alerts",
    tags=["alerts"],
    responses={404: {"description": "Not found"}},
)


@router.get("/", response_model=schemas.AlertList)
async def list_alerts(
    unread_only: bool = Query(False, description="Only return unread alerts"),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Get alerts, latest first, with the unread count."""
    repo = AlertRepository(db)
    return schemas.AlertList(
        unread_count=await repo.unread_count(current_user.id),
        alerts=[
            schemas.Alert.model_validate(alert)
            for alert in await repo.get_for_user(current_user.id, unread_only=unread_only)
        ],
    )


@router.post("/read-all", response_model=schemas.MarkAllReadResponse)
async def mark_all_read(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Mark every unread alert as read."""
    updated = await AlertRepository(db).mark_all_read(current_user.id)
    return schemas.MarkAllReadResponse(updated=updated)


@router.post("/{alert_id}/read", response_model=schemas.Alert)
async def mark_read(
    alert_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Mark one alert as read."""
    alert = await AlertRepository(db).mark_read(current_user.id, alert_id)
    if alert is None:
        raise HTTPException(status_code=404, detail="Alert not found")
    return alert


@router.delete("/{alert_id}")
async def delete_alert(
    alert_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Delete an alert."""
    if not await AlertRepository(db).delete(current_user.id, alert_id):
        raise HTTPException(status_code=404, detail="Alert not found")
    return {"message": "Alert deleted successfully"}
