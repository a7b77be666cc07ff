"""Pydantic schemas for approval decisions."""
from __future__ import annotations
from datetime import datetime
from typing import Optional
from pydantic import BaseModel

from stayback.models.approval import ApprovalStatus
from stayback.schemas.stayback import ApprovalOut, StaybackRequestOut


class ApprovalDecisionIn(BaseModel):
    status: ApprovalStatus  # APPROVED or REJECTED
    comments: Optional[str] = None


class ApprovalDecisionResult(BaseModel):
    message: str = "Approval updated successfully"
    approval: ApprovalOut
    request_status: str


class ApprovalQueueItem(ApprovalOut):
    request: StaybackRequestOut


class ApprovalDecisionOut(BaseModel):
    decision_id: str
    approval_id: str
    request_id: str
    status: str
    comments: Optional[str] = None
    decided_by_user_id: str
    created_at: datetime

    model_config = {"from_attributes": True}
