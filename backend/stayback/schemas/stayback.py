"""Pydantic schemas for stayback requests."""
from __future__ import annotations
import re
import datetime as dt
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field, field_validator, ValidationInfo

_TIME_RE = re.compile(r"^([01]?[0-9]|2[0-3]):([0-5][0-9])$")


def _to_minutes(value: str) -> int:
    hours, minutes = value.split(":")
    return int(hours) * 60 + int(minutes)


class StaybackCreate(BaseModel):
    club_name: str = Field(min_length=1)
    date: dt.date
    from_time: str
    to_time: str
    remarks: str = Field(min_length=10, max_length=500)
    # Optional explicit approver selections; resolved automatically when absent
    team_lead_id: Optional[str] = None
    staff_id: Optional[str] = None
    hostel_id: Optional[str] = None

    @field_validator("from_time", "to_time")
    @classmethod
    def _valid_time(cls, value: str) -> str:
        m = _TIME_RE.match(value.strip())
        if not m:
            raise ValueError("Please enter a valid time in HH:MM format")
        return f"{int(m.group(1)):02d}:{m.group(2)}"

    @field_validator("to_time")
    @classmethod
    def _after_from_time(cls, value: str, info: ValidationInfo) -> str:
        from_time = info.data.get("from_time")
        if from_time and _to_minutes(value) <= _to_minutes(from_time):
            raise ValueError("End time must be after start time")
        return value


class StaybackCreated(BaseModel):
    message: str = "Stayback request created successfully"
    request_id: str
    approvals_created: int
    approvers: dict[str, bool]


class StudentBrief(BaseModel):
    student_id: str
    name: str
    club_name: str
    hostel_name: str
    room_no: str

    model_config = {"from_attributes": True}


class ApprovalOut(BaseModel):
    approval_id: str
    request_id: str
    approver_kind: str
    approver_id: str
    status: str
    comments: Optional[str] = None
    decided_at: Optional[datetime] = None
    approved_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class StaybackRequestOut(BaseModel):
    request_id: str
    student_id: str
    club_name: str
    date: dt.date
    from_time: str
    to_time: str
    remarks: str
    status: str
    created_at: datetime
    updated_at: datetime
    student: Optional[StudentBrief] = None
    approvals: list[ApprovalOut] = []

    model_config = {"from_attributes": True}


class RequestLogOut(BaseModel):
    requests: list[StaybackRequestOut]
    stats: dict[str, int]
