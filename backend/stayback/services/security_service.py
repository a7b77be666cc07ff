"""Security check-in service — IN/OUT event log for fully approved requests."""
import logging
from datetime import datetime, time, timedelta
from typing import Optional

import pytz
from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from stayback.config import settings
from stayback.models.profile import SecurityOfficer
from stayback.models.security_checkin import SecurityCheckin, CheckinDirection
from stayback.models.stayback_request import StaybackRequest
from stayback.models.user import User
from stayback.services.aggregation import is_fully_approved
from stayback.services import legacy_comments

logger = logging.getLogger(__name__)

NO_CHECKIN = "PENDING"


def get_security_profile(db: Session, user: User) -> SecurityOfficer:
    officer = db.query(SecurityOfficer).filter(SecurityOfficer.user_id == user.user_id).first()
    if not officer:
        raise HTTPException(status_code=404, detail="Security user not found")
    return officer


def latest_checkin(request: StaybackRequest) -> Optional[SecurityCheckin]:
    """Most recent event by (created_at, checkin_id)."""
    if not request.checkins:
        return None
    return max(request.checkins, key=lambda c: (c.created_at, c.checkin_id))


def current_security_status(request: StaybackRequest) -> str:
    latest = latest_checkin(request)
    return latest.direction.value if latest else NO_CHECKIN


def checkin_tag(checkin: SecurityCheckin) -> str:
    return legacy_comments.format_tracking_comment(
        checkin.officer_id or "legacy",
        checkin.officer_name,
        checkin.direction.value,
        checkin.note,
    )


def list_visible_requests(db: Session) -> list[StaybackRequest]:
    """Requests whose team-lead, staff and hostel approvals are all APPROVED, newest first."""
    requests = db.query(StaybackRequest).order_by(StaybackRequest.created_at.desc()).all()
    return [r for r in requests if is_fully_approved(r.approvals)]


def _get_request(db: Session, request_id: str) -> StaybackRequest:
    request = db.query(StaybackRequest).filter(StaybackRequest.request_id == request_id).first()
    if not request:
        raise HTTPException(status_code=404, detail="Stayback request not found")
    return request


def record_checkin(
    db: Session,
    user: User,
    request_id: str,
    direction: CheckinDirection,
    note: Optional[str] = None,
) -> SecurityCheckin:
    """Append an IN/OUT event. Only allowed once all three approvals are APPROVED."""
    officer = get_security_profile(db, user)
    request = _get_request(db, request_id)

    if not is_fully_approved(request.approvals):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Cannot mark IN/OUT. Request is not fully approved by all 3 approvers.",
        )

    checkin = SecurityCheckin(
        request_id=request_id,
        direction=direction,
        officer_id=officer.security_id,
        officer_name=user.name,
        note=note,
    )
    db.add(checkin)
    db.commit()
    db.refresh(checkin)
    logger.info("Student on request %s marked %s by security %s", request_id, direction.value, officer.security_id)
    return checkin


def checkin_history(db: Session, request_id: str) -> list[SecurityCheckin]:
    _get_request(db, request_id)
    return (
        db.query(SecurityCheckin)
        .filter(SecurityCheckin.request_id == request_id)
        .order_by(SecurityCheckin.created_at, SecurityCheckin.checkin_id)
        .all()
    )


def _today_bounds_utc(now: Optional[datetime] = None) -> tuple[datetime, datetime]:
    """Start/end of the current campus-local day, expressed in UTC."""
    tz = pytz.timezone(settings.CAMPUS_TIMEZONE)
    local_now = (now or datetime.now(pytz.utc)).astimezone(tz)
    start_local = tz.localize(datetime.combine(local_now.date(), time.min))
    end_local = start_local + timedelta(days=1)
    return start_local.astimezone(pytz.utc), end_local.astimezone(pytz.utc)


def officer_stats(db: Session, user: User) -> dict:
    officer = get_security_profile(db, user)
    start_utc, end_utc = _today_bounds_utc()

    own = db.query(SecurityCheckin).filter(SecurityCheckin.officer_id == officer.security_id)
    total = own.count()
    today = own.filter(SecurityCheckin.created_at >= start_utc, SecurityCheckin.created_at < end_utc).count()

    visible = list_visible_requests(db)
    currently_out = sum(1 for r in visible if current_security_status(r) == CheckinDirection.check_out.value)

    return {
        "total_checkins": total,
        "checkins_today": today,
        "visible_requests": len(visible),
        "currently_out": currently_out,
        "security_name": user.name,
        "department": officer.department or "Campus Security",
    }


def recent_alerts(db: Session, limit: int = 10) -> list[SecurityCheckin]:
    """Latest security events across all requests, newest first."""
    return (
        db.query(SecurityCheckin)
        .order_by(SecurityCheckin.created_at.desc(), SecurityCheckin.checkin_id.desc())
        .limit(limit)
        .all()
    )


def import_legacy_comments(db: Session, request_id: str, comments: list[str]) -> list[SecurityCheckin]:
    """Convert security updates embedded in old comment text into check-in events.

    Comments are taken oldest first; the resulting events keep that order.
    Legacy text carries no timestamps, so imports are refused (409) once the
    request has any check-in.
    """
    request = _get_request(db, request_id)
    if request.checkins:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Request already has security check-ins; legacy updates cannot be imported",
        )
    created = []
    for comment in comments:
        for update in legacy_comments.parse_comment(comment):
            officer_id = None
            if update.officer_id:
                known = db.query(SecurityOfficer).filter(SecurityOfficer.security_id == update.officer_id).first()
                officer_id = known.security_id if known else None
            checkin = SecurityCheckin(
                request_id=request_id,
                direction=CheckinDirection(update.direction),
                officer_id=officer_id,
                officer_name=update.officer_name,
                note=update.note,
            )
            db.add(checkin)
            db.flush()
            created.append(checkin)
    db.commit()
    logger.info("Imported %d legacy security updates for request %s", len(created), request_id)
    return created
