"""Security API routes — fully approved requests and IN/OUT check-ins."""
import logging
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from stayback.auth import requires_role
from stayback.database import get_db
from stayback.models.security_checkin import SecurityCheckin
from stayback.models.stayback_request import StaybackRequest
from stayback.models.user import User, UserRole
from stayback.schemas.security import (
    CheckinCreate,
    CheckinOut,
    LegacyImportIn,
    SecurityAlertOut,
    SecurityDashboardOut,
    SecurityRequestOut,
    SecurityStatsOut,
)
from stayback.schemas.stayback import StaybackRequestOut
from stayback.services import security_service

logger = logging.getLogger(__name__)
router = APIRouter()


def _checkin_out(checkin: SecurityCheckin) -> CheckinOut:
    return CheckinOut(
        checkin_id=checkin.checkin_id,
        request_id=checkin.request_id,
        direction=checkin.direction.value,
        officer_id=checkin.officer_id,
        officer_name=checkin.officer_name,
        note=checkin.note,
        created_at=checkin.created_at,
        tag=security_service.checkin_tag(checkin),
    )


def _security_request_out(request: StaybackRequest) -> SecurityRequestOut:
    latest = security_service.latest_checkin(request)
    return SecurityRequestOut(
        **StaybackRequestOut.model_validate(request).model_dump(),
        security_status=security_service.current_security_status(request),
        security_checked_by=latest.officer_name if latest else None,
        security_checked_at=latest.created_at if latest else None,
    )


@router.get("/requests", response_model=SecurityDashboardOut)
def list_visible_requests(
    db: Session = Depends(get_db),
    current_user: User = Depends(requires_role(UserRole.security)),
):
    """Requests approved by team lead, staff and hostel, with derived IN/OUT status."""
    security_service.get_security_profile(db, current_user)
    requests = [_security_request_out(r) for r in security_service.list_visible_requests(db)]
    return SecurityDashboardOut(requests=requests, total_approved_requests=len(requests))


@router.post("/checkins", response_model=CheckinOut, status_code=status.HTTP_201_CREATED)
def record_checkin(
    payload: CheckinCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(requires_role(UserRole.security)),
):
    """Mark the student on a fully approved request as IN or OUT."""
    checkin = security_service.record_checkin(
        db, current_user, payload.request_id, payload.direction, payload.note,
    )
    return _checkin_out(checkin)


@router.get("/requests/{request_id}/checkins", response_model=list[CheckinOut])
def checkin_history(
    request_id: str,
    db: Session = Depends(get_db),
    _: User = Depends(requires_role(UserRole.security, UserRole.admin)),
):
    return [_checkin_out(c) for c in security_service.checkin_history(db, request_id)]


@router.post(
    "/requests/{request_id}/legacy-import",
    response_model=list[CheckinOut],
    status_code=status.HTTP_201_CREATED,
)
def import_legacy(
    request_id: str,
    payload: LegacyImportIn,
    db: Session = Depends(get_db),
    _: User = Depends(requires_role(UserRole.admin)),
):
    """Turn security updates found in old approval comments into check-in events."""
    created = security_service.import_legacy_comments(db, request_id, payload.comments)
    return [_checkin_out(c) for c in created]


@router.get("/stats", response_model=SecurityStatsOut)
def stats(
    db: Session = Depends(get_db),
    current_user: User = Depends(requires_role(UserRole.security)),
):
    return security_service.officer_stats(db, current_user)


@router.get("/alerts", response_model=list[SecurityAlertOut])
def alerts(
    db: Session = Depends(get_db),
    _: User = Depends(requires_role(UserRole.staff, UserRole.hostel, UserRole.admin)),
):
    """The ten most recent security updates."""
    return [
        SecurityAlertOut(
            request_id=c.request_id,
            student_name=c.request.student.name,
            club_name=c.request.club_name,
            security_status=c.direction.value,
            security_checked_by=c.officer_name,
            security_checked_at=c.created_at,
        )
        for c in security_service.recent_alerts(db)
    ]
