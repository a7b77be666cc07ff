"""Stayback workflow service — submission, approval decisions, status recompute.

Responsibilities:
- Materialize a request and its approval set in one transaction
- Ownership check: an approver may only decide the row bearing their own id
- Append-only decision history (ApprovalDecision) for every decision
- Recompute the request status through the aggregation rule after each write
"""
import logging
from datetime import date
from typing import Optional

from fastapi import HTTPException, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from stayback.database import utcnow
from stayback.models.approval import Approval, ApprovalStatus, ApproverKind
from stayback.models.approval_decision import ApprovalDecision
from stayback.models.profile import Student, TeamLead, Staff, HostelWarden
from stayback.models.stayback_request import StaybackRequest, RequestStatus
from stayback.models.user import User, UserRole
from stayback.services.aggregation import aggregate_status
from stayback.services.approver_resolution import resolve_approvers
from stayback.services.retry import with_db_retry

logger = logging.getLogger(__name__)

ROLE_TO_KIND = {
    UserRole.team_lead: ApproverKind.team_lead,
    UserRole.staff: ApproverKind.staff,
    UserRole.hostel: ApproverKind.hostel,
}


def get_student_profile(db: Session, user: User) -> Student:
    student = with_db_retry(
        db,
        lambda: db.query(Student).filter(Student.user_id == user.user_id).first(),
        "student profile",
    )
    if not student:
        raise HTTPException(status_code=404, detail="Student not found")
    return student


def get_approver_profile_id(db: Session, user: User) -> tuple[ApproverKind, str]:
    """Map the caller to (approver kind, own profile id); 403 for non-approver roles."""
    kind = ROLE_TO_KIND.get(user.role)
    if kind is None:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Invalid role")

    if kind == ApproverKind.team_lead:
        profile = db.query(TeamLead).filter(TeamLead.user_id == user.user_id).first()
        profile_id = profile.team_lead_id if profile else None
    elif kind == ApproverKind.staff:
        profile = db.query(Staff).filter(Staff.user_id == user.user_id).first()
        profile_id = profile.staff_id if profile else None
    else:
        profile = db.query(HostelWarden).filter(HostelWarden.user_id == user.user_id).first()
        profile_id = profile.hostel_id if profile else None

    if profile_id is None:
        raise HTTPException(status_code=404, detail=f"{kind.value.replace('_', ' ').title()} profile not found")
    return kind, profile_id


def submit_request(
    db: Session,
    user: User,
    club_name: str,
    request_date: date,
    from_time: str,
    to_time: str,
    remarks: str,
    team_lead_id: Optional[str] = None,
    staff_id: Optional[str] = None,
    hostel_id: Optional[str] = None,
) -> tuple[StaybackRequest, dict[ApproverKind, str]]:
    """Create a PENDING request plus one PENDING approval per resolved approver."""
    student = get_student_profile(db, user)

    approvers = resolve_approvers(
        db, student, club_name,
        team_lead_id=team_lead_id, staff_id=staff_id, hostel_id=hostel_id,
    )
    if not approvers:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Please select at least one approver",
        )

    request = StaybackRequest(
        student_id=student.student_id,
        club_name=club_name,
        date=request_date,
        from_time=from_time,
        to_time=to_time,
        remarks=remarks,
        status=RequestStatus.pending,
    )
    try:
        db.add(request)
        db.flush()
        for kind, approver_id in approvers.items():
            db.add(Approval(
                request_id=request.request_id,
                approver_kind=kind,
                approver_id=approver_id,
                status=ApprovalStatus.pending,
            ))
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Approval creation failed for student %s; request rolled back", student.student_id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create approvals. Please try again.",
        )

    db.refresh(request)
    logger.info("Stayback request %s created by student %s with approvers %s",
                request.request_id, student.student_id, sorted(k.value for k in approvers))
    return request, approvers


def recompute_request_status(db: Session, request: StaybackRequest) -> RequestStatus:
    """Re-read the request's approvals and apply the aggregation rule. Idempotent."""
    approvals = db.query(Approval).filter(Approval.request_id == request.request_id).all()
    new_status = aggregate_status(approvals)
    if request.status != new_status:
        logger.info("Stayback request %s status %s -> %s",
                    request.request_id, RequestStatus(request.status).value, new_status.value)
        request.status = new_status
    return new_status


def decide_approval(
    db: Session,
    user: User,
    request_id: str,
    decision: ApprovalStatus,
    comments: Optional[str] = None,
) -> Approval:
    """Record the caller's decision on their own approval row, then re-aggregate."""
    if decision == ApprovalStatus.pending:
        raise HTTPException(status_code=400, detail="Decision must be APPROVED or REJECTED")

    kind, profile_id = get_approver_profile_id(db, user)

    request = db.query(StaybackRequest).filter(StaybackRequest.request_id == request_id).first()
    if not request:
        raise HTTPException(status_code=404, detail="Stayback request not found")

    approval = (
        db.query(Approval)
        .filter(Approval.request_id == request_id, Approval.approver_kind == kind)
        .first()
    )
    if not approval:
        raise HTTPException(status_code=404, detail=f"No {kind.value} approval on this request")
    if approval.approver_id != profile_id:
        logger.warning("User %s attempted to decide approval %s owned by %s",
                       user.user_id, approval.approval_id, approval.approver_id)
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You are not the approver for this request",
        )

    now = utcnow()
    approval.status = decision
    approval.comments = comments
    approval.decided_at = now
    approval.approved_at = now if decision == ApprovalStatus.approved else None

    db.add(ApprovalDecision(
        approval_id=approval.approval_id,
        request_id=request_id,
        status=decision,
        comments=comments,
        decided_by_user_id=user.user_id,
    ))
    db.flush()

    recompute_request_status(db, request)
    db.commit()
    db.refresh(approval)
    logger.info("Approval %s (%s) on request %s set to %s by user %s",
                approval.approval_id, kind.value, request_id, decision.value, user.user_id)
    return approval


def list_approvals_for_approver(
    db: Session,
    user: User,
    status_filter: Optional[ApprovalStatus] = None,
) -> list[Approval]:
    """Approvals bearing the caller's own approver id, newest request first."""
    kind, profile_id = get_approver_profile_id(db, user)
    query = (
        db.query(Approval)
        .join(StaybackRequest)
        .filter(Approval.approver_kind == kind, Approval.approver_id == profile_id)
    )
    if status_filter:
        query = query.filter(Approval.status == status_filter)
    return query.order_by(StaybackRequest.created_at.desc()).all()


def list_student_requests(db: Session, user: User) -> list[StaybackRequest]:
    student = get_student_profile(db, user)
    return (
        db.query(StaybackRequest)
        .filter(StaybackRequest.student_id == student.student_id)
        .order_by(StaybackRequest.created_at.desc())
        .all()
    )


def _is_approver_on(db: Session, user: User, request: StaybackRequest) -> bool:
    if user.role not in ROLE_TO_KIND:
        return False
    kind, profile_id = get_approver_profile_id(db, user)
    return any(
        a.approver_kind == kind and a.approver_id == profile_id for a in request.approvals
    )


def get_request_for_viewer(db: Session, user: User, request_id: str) -> StaybackRequest:
    """Fetch a request visible to the caller: its student, one of its approvers, or an admin."""
    request = db.query(StaybackRequest).filter(StaybackRequest.request_id == request_id).first()
    if not request:
        raise HTTPException(status_code=404, detail="Stayback request not found")

    if user.role == UserRole.admin or request.student.user_id == user.user_id:
        return request
    if _is_approver_on(db, user, request):
        return request
    raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not allowed to view this request")


def decision_history(db: Session, user: User, request_id: str) -> list[ApprovalDecision]:
    get_request_for_viewer(db, user, request_id)
    return (
        db.query(ApprovalDecision)
        .filter(ApprovalDecision.request_id == request_id)
        .order_by(ApprovalDecision.created_at)
        .all()
    )
