"""User provisioning — accounts, role profiles, promotion."""
import logging
from typing import Optional, Any

from fastapi import HTTPException, status
from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from stayback.auth import hash_password, verify_password
from stayback.models.approval import Approval
from stayback.models.approver_route import ApproverRoute
from stayback.models.profile import Student, TeamLead, Staff, HostelWarden, SecurityOfficer
from stayback.models.security_checkin import SecurityCheckin
from stayback.models.stayback_request import StaybackRequest
from stayback.models.user import User, UserRole
from stayback.services.approver_resolution import PROFILE_MODELS

logger = logging.getLogger(__name__)

PROFILE_BY_ROLE = {
    UserRole.student: Student,
    UserRole.team_lead: TeamLead,
    UserRole.staff: Staff,
    UserRole.hostel: HostelWarden,
    UserRole.security: SecurityOfficer,
}

# Fields each profile accepts from a create payload
PROFILE_FIELDS = {
    UserRole.student: ("club_name", "hostel_name", "room_no", "phone_number"),
    UserRole.team_lead: ("club_name", "department"),
    UserRole.staff: ("department",),
    UserRole.hostel: ("hostel_name",),
    UserRole.security: ("department",),
}

# Contact fields a user may change on their own profile
EDITABLE_PROFILE_FIELDS = {"room_no", "phone_number", "department"}

# Account-level fields every role may change
USER_EDITABLE_FIELDS = ("avatar_url", "gender")


def create_user_account(
    db: Session,
    email: str,
    uid: str,
    password: str,
    name: str,
    role: UserRole,
    profile_data: Optional[dict[str, Any]] = None,
) -> User:
    """Create a user and the profile row for its role in one commit."""
    existing = db.query(User).filter(or_(User.email == email, User.uid == uid)).first()
    if existing:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="User with this email or UID already exists",
        )

    user = User(email=email, uid=uid, name=name, password_hash=hash_password(password), role=role)
    db.add(user)
    db.flush()

    profile_model = PROFILE_BY_ROLE.get(role)
    if profile_model is not None:
        data = profile_data or {}
        fields = {k: data.get(k) for k in PROFILE_FIELDS[role] if data.get(k) is not None}
        db.add(profile_model(user_id=user.user_id, **fields))

    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="User with this email or UID already exists",
        )
    db.refresh(user)
    logger.info("Created %s user %s (%s)", role.value, user.user_id, email)
    return user


def authenticate(db: Session, email: str, password: str) -> User:
    user = db.query(User).filter(User.email == email).first()
    if not user or not verify_password(password, user.password_hash):
        logger.info("Failed login for %s", email)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user


def get_profile(db: Session, user: User):
    """Return the role profile row for a user, or None for admins."""
    model = PROFILE_BY_ROLE.get(user.role)
    if model is None:
        return None
    return db.query(model).filter(model.user_id == user.user_id).first()


def update_own_profile(db: Session, user: User, updates: dict[str, Any]) -> User:
    if "name" in updates and updates["name"]:
        user.name = updates["name"]
    for field in USER_EDITABLE_FIELDS:
        if field in updates:
            setattr(user, field, updates[field])

    profiles = [get_profile(db, user)]
    if user.role == UserRole.team_lead:
        # Promoted team leads keep their student room and phone
        profiles.append(db.query(Student).filter(Student.user_id == user.user_id).first())
    for profile in profiles:
        if profile is None:
            continue
        for field, value in updates.items():
            if field in EDITABLE_PROFILE_FIELDS and hasattr(profile, field):
                setattr(profile, field, value)

    db.commit()
    db.refresh(user)
    logger.info("Updated profile of user %s", user.user_id)
    return user


def list_users(db: Session, viewer: User) -> list[User]:
    """Admins see everyone; staff see students and team leads."""
    query = db.query(User)
    if viewer.role == UserRole.staff:
        query = query.filter(User.role.in_([UserRole.student, UserRole.team_lead]))
    return query.order_by(User.created_at.desc()).all()


def _referenced_by_workflow(db: Session, user_id: str) -> Optional[str]:
    """Name what still points at one of the user's profiles, or None."""
    for kind, (model, pk) in PROFILE_MODELS.items():
        ids = [row[0] for row in db.query(pk).filter(model.user_id == user_id).all()]
        if not ids:
            continue
        approvals = db.query(Approval).filter(
            Approval.approver_kind == kind, Approval.approver_id.in_(ids),
        )
        if approvals.first() is not None:
            return "approvals"
        routes = db.query(ApproverRoute).filter(
            ApproverRoute.kind == kind, ApproverRoute.approver_id.in_(ids),
        )
        if routes.first() is not None:
            return "approver routes"

    student_ids = [row[0] for row in db.query(Student.student_id).filter(Student.user_id == user_id).all()]
    if db.query(StaybackRequest).filter(StaybackRequest.student_id.in_(student_ids)).first() is not None:
        return "stayback requests"
    officer_ids = [row[0] for row in db.query(SecurityOfficer.security_id).filter(SecurityOfficer.user_id == user_id).all()]
    if db.query(SecurityCheckin).filter(SecurityCheckin.officer_id.in_(officer_ids)).first() is not None:
        return "security check-ins"
    return None


def delete_user(db: Session, user_id: str) -> None:
    user = db.query(User).filter(User.user_id == user_id).first()
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    if user.role == UserRole.admin:
        raise HTTPException(status_code=400, detail="Cannot delete admin users")

    blocker = _referenced_by_workflow(db, user_id)
    if blocker:
        logger.info("Refusing to delete user %s: still referenced by %s", user_id, blocker)
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"User is still referenced by {blocker} and cannot be deleted",
        )

    # A promoted team lead keeps its student profile, so clear every profile table
    for model in PROFILE_BY_ROLE.values():
        for profile in db.query(model).filter(model.user_id == user_id).all():
            db.delete(profile)
    db.delete(user)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="User still has stayback records and cannot be deleted",
        )
    logger.info("Deleted user %s", user_id)


def promote_to_team_lead(
    db: Session,
    student_id: str,
    club_name: str,
    department: Optional[str] = None,
) -> TeamLead:
    """Promote a student: TeamLead profile, role change and student flag in one transaction."""
    student = db.query(Student).filter(Student.student_id == student_id).first()
    if not student:
        raise HTTPException(status_code=404, detail="Student not found")

    existing = db.query(TeamLead).filter(TeamLead.user_id == student.user_id).first()
    if existing:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Student is already a team lead")

    try:
        team_lead = TeamLead(user_id=student.user_id, club_name=club_name, department=department)
        db.add(team_lead)
        student.user.role = UserRole.team_lead
        student.is_team_lead = True
        db.commit()
    except IntegrityError:
        db.rollback()
        logger.exception("Promotion of student %s rolled back", student_id)
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Student is already a team lead")

    db.refresh(team_lead)
    logger.info("Promoted student %s to team lead of %s", student_id, club_name)
    return team_lead
