"""Approver resolution — picks the team lead, staff member and warden for a request.

Order per kind: explicit id from the submission, then a configured
ApproverRoute, then (if enabled) the legacy name-matching fallback.
"""
import logging
from typing import Optional

from fastapi import HTTPException, status
from sqlalchemy import func
from sqlalchemy.orm import Session

from stayback.config import settings
from stayback.models.approval import ApproverKind
from stayback.models.approver_route import ApproverRoute, WILDCARD
from stayback.models.profile import Student, TeamLead, Staff, HostelWarden
from stayback.services.retry import with_db_retry

logger = logging.getLogger(__name__)

PROFILE_MODELS = {
    ApproverKind.team_lead: (TeamLead, TeamLead.team_lead_id),
    ApproverKind.staff: (Staff, Staff.staff_id),
    ApproverKind.hostel: (HostelWarden, HostelWarden.hostel_id),
}

_KIND_LABELS = {
    ApproverKind.team_lead: "team lead",
    ApproverKind.staff: "staff",
    ApproverKind.hostel: "hostel",
}


def normalize_key(value: str) -> str:
    return value.strip().casefold()


def approver_exists(db: Session, kind: ApproverKind, approver_id: str) -> bool:
    model, pk = PROFILE_MODELS[kind]
    return with_db_retry(
        db,
        lambda: db.query(model).filter(pk == approver_id).first() is not None,
        f"{kind.value} lookup",
    )


def _route_for(db: Session, kind: ApproverKind, key: str) -> Optional[str]:
    route = with_db_retry(
        db,
        lambda: db.query(ApproverRoute)
        .filter(ApproverRoute.kind == kind, ApproverRoute.match_key == key)
        .first(),
        f"{kind.value} route lookup",
    )
    if route is None:
        return None
    if not approver_exists(db, kind, route.approver_id):
        logger.warning("Route %s points at missing %s %s; ignoring it",
                       route.route_id, kind.value, route.approver_id)
        return None
    return route.approver_id


def _fallback_for(db: Session, kind: ApproverKind, student: Student, club_name: str) -> Optional[str]:
    if kind == ApproverKind.team_lead:
        lead = with_db_retry(
            db,
            lambda: db.query(TeamLead)
            .filter(func.lower(TeamLead.club_name) == club_name.strip().lower())
            .first(),
            "team lead by club",
        )
        return lead.team_lead_id if lead else None
    if kind == ApproverKind.hostel:
        warden = with_db_retry(
            db,
            lambda: db.query(HostelWarden)
            .filter(func.lower(HostelWarden.hostel_name) == student.hostel_name.strip().lower())
            .first(),
            "warden by hostel",
        )
        return warden.hostel_id if warden else None
    staff = with_db_retry(
        db,
        lambda: db.query(Staff).order_by(Staff.created_at, Staff.staff_id).first(),
        "default staff",
    )
    return staff.staff_id if staff else None


def resolve_approvers(
    db: Session,
    student: Student,
    club_name: str,
    team_lead_id: Optional[str] = None,
    staff_id: Optional[str] = None,
    hostel_id: Optional[str] = None,
) -> dict[ApproverKind, str]:
    """Return {kind: approver profile id} for every kind that could be resolved."""
    explicit = {
        ApproverKind.team_lead: team_lead_id,
        ApproverKind.staff: staff_id,
        ApproverKind.hostel: hostel_id,
    }
    route_keys = {
        ApproverKind.team_lead: normalize_key(club_name),
        ApproverKind.staff: WILDCARD,
        ApproverKind.hostel: normalize_key(student.hostel_name),
    }

    resolved: dict[ApproverKind, str] = {}
    for kind in (ApproverKind.team_lead, ApproverKind.staff, ApproverKind.hostel):
        chosen = explicit[kind]
        if chosen:
            if not approver_exists(db, kind, chosen):
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail=f"Selected {_KIND_LABELS[kind]} not found",
                )
            resolved[kind] = chosen
            continue

        chosen = _route_for(db, kind, route_keys[kind])
        if chosen is None and settings.ALLOW_FALLBACK_APPROVER_RESOLUTION:
            chosen = _fallback_for(db, kind, student, club_name)

        if chosen:
            resolved[kind] = chosen
        else:
            logger.info("No %s approver resolvable for student %s (club=%s)",
                        _KIND_LABELS[kind], student.student_id, club_name)

    return resolved
