"""Stayback request API routes — delegates to stayback_service."""
import logging
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from stayback.auth import get_current_user, requires_role
from stayback.database import get_db
from stayback.models.approval import ApproverKind
from stayback.models.user import User, UserRole
from stayback.schemas.stayback import StaybackCreate, StaybackCreated, StaybackRequestOut
from stayback.services import stayback_service

logger = logging.getLogger(__name__)
router = APIRouter()

# Team leads are students too and can still ask for staybacks
_requesters = requires_role(UserRole.student, UserRole.team_lead)


@router.post("/", response_model=StaybackCreated, status_code=status.HTTP_201_CREATED)
def create_request(
    payload: StaybackCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(_requesters),
):
    """Submit a stayback request; one PENDING approval is created per resolved approver."""
    request, approvers = stayback_service.submit_request(
        db,
        current_user,
        club_name=payload.club_name,
        request_date=payload.date,
        from_time=payload.from_time,
        to_time=payload.to_time,
        remarks=payload.remarks,
        team_lead_id=payload.team_lead_id,
        staff_id=payload.staff_id,
        hostel_id=payload.hostel_id,
    )
    return StaybackCreated(
        request_id=request.request_id,
        approvals_created=len(approvers),
        approvers={kind.value: kind in approvers for kind in ApproverKind},
    )


@router.get("/", response_model=list[StaybackRequestOut])
def list_my_requests(db: Session = Depends(get_db), current_user: User = Depends(_requesters)):
    """The caller's own requests, newest first."""
    return stayback_service.list_student_requests(db, current_user)


@router.get("/{request_id}", response_model=StaybackRequestOut)
def get_request(
    request_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return stayback_service.get_request_for_viewer(db, current_user, request_id)
