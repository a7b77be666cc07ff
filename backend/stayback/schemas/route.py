"""Pydantic schemas for approver routes."""
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field

from stayback.models.approval import ApproverKind


class ApproverRouteCreate(BaseModel):
    kind: ApproverKind
    match_key: str = Field(min_length=1)  # club name, hostel name, or "*" for staff
    approver_id: str


class ApproverRouteOut(BaseModel):
    route_id: str
    kind: str
    match_key: str
    approver_id: str
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}
