"""Approval API routes — role-scoped queues and decisions."""
import logging
from typing import Optional
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from stayback.auth import get_current_user, requires_role
from stayback.database import get_db
from stayback.models.approval import ApprovalStatus
from stayback.models.user import User, UserRole
from stayback.schemas.approval import (
    ApprovalDecisionIn,
    ApprovalDecisionOut,
    ApprovalDecisionResult,
    ApprovalQueueItem,
)
from stayback.schemas.stayback import ApprovalOut
from stayback.services import stayback_service

logger = logging.getLogger(__name__)
router = APIRouter()

_approvers = requires_role(UserRole.team_lead, UserRole.staff, UserRole.hostel)


@router.get("/", response_model=list[ApprovalQueueItem])
def list_my_approvals(
    status_filter: Optional[ApprovalStatus] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(_approvers),
):
    """Approvals assigned to the caller, optionally filtered by status."""
    return stayback_service.list_approvals_for_approver(db, current_user, status_filter)


@router.post("/{request_id}/decision", response_model=ApprovalDecisionResult)
def decide(
    request_id: str,
    payload: ApprovalDecisionIn,
    db: Session = Depends(get_db),
    current_user: User = Depends(_approvers),
):
    """Approve or reject the caller's own approval on a request."""
    approval = stayback_service.decide_approval(
        db, current_user, request_id, payload.status, payload.comments,
    )
    return ApprovalDecisionResult(
        approval=ApprovalOut.model_validate(approval),
        request_status=approval.request.status.value,
    )


@router.get("/{request_id}/history", response_model=list[ApprovalDecisionOut])
def history(
    request_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Every decision ever recorded on the request, oldest first."""
    return stayback_service.decision_history(db, current_user, request_id)
