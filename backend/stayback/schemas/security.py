"""Pydantic schemas for security check-ins."""
from __future__ import annotations
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field

from stayback.models.security_checkin import CheckinDirection
from stayback.schemas.stayback import StaybackRequestOut


class CheckinCreate(BaseModel):
    request_id: str
    direction: CheckinDirection  # IN or OUT
    note: Optional[str] = Field(default=None, max_length=500)


class CheckinOut(BaseModel):
    checkin_id: int
    request_id: str
    direction: str
    officer_id: Optional[str] = None
    officer_name: str
    note: Optional[str] = None
    created_at: datetime
    tag: str  # legacy SECURITY_TRACKING rendering

    model_config = {"from_attributes": True}


class SecurityRequestOut(StaybackRequestOut):
    security_status: str
    security_checked_by: Optional[str] = None
    security_checked_at: Optional[datetime] = None


class SecurityDashboardOut(BaseModel):
    requests: list[SecurityRequestOut]
    total_approved_requests: int


class SecurityStatsOut(BaseModel):
    total_checkins: int
    checkins_today: int
    visible_requests: int
    currently_out: int
    security_name: str
    department: str


class SecurityAlertOut(BaseModel):
    request_id: str
    student_name: str
    club_name: str
    security_status: str
    security_checked_by: str
    security_checked_at: datetime


class LegacyImportIn(BaseModel):
    comments: list[str]  # oldest first
