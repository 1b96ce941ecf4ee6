"""Pydantic schemas for alerts."""

from datetime import datetime
from typing import List, Literal
from pydantic import BaseModel

Severity = Literal["info", "warning", "error", "success"]


class Alert(BaseModel):
    id: int
    alert_type: str
    title: str
    message: str
    severity: Severity
    is_read: bool
    created_at: datetime

    class Config:
        from_attributes = True


class AlertList(BaseModel):
    unread_count: int
    alerts: List[Alert]


class MarkAllReadResponse(BaseModel):
    updated: int
