"""User management API routes — admin provisioning, promotion, own profile."""
import logging
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from stayback.auth import get_current_user, requires_role
from stayback.database import get_db
from stayback.models.user import User, UserRole
from stayback.schemas.user import UserCreate, UserOut, ProfileUpdate, PromoteRequest, TeamLeadOut
from stayback.services import user_service

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/", response_model=UserOut, status_code=status.HTTP_201_CREATED)
def create_user(
    payload: UserCreate,
    db: Session = Depends(get_db),
    _: User = Depends(requires_role(UserRole.admin)),
):
    """Create a user of any role together with its role profile."""
    data = payload.model_dump(exclude={"email", "uid", "password", "name", "role"})
    return user_service.create_user_account(
        db,
        email=payload.email,
        uid=payload.uid,
        password=payload.password,
        name=payload.name,
        role=payload.role,
        profile_data=data,
    )


@router.get("/", response_model=list[UserOut])
def list_users(
    db: Session = Depends(get_db),
    current_user: User = Depends(requires_role(UserRole.admin, UserRole.staff)),
):
    return user_service.list_users(db, current_user)


@router.post("/promote", response_model=TeamLeadOut)
def promote_student(
    payload: PromoteRequest,
    db: Session = Depends(get_db),
    _: User = Depends(requires_role(UserRole.staff)),
):
    """Promote a student to team lead of a club."""
    return user_service.promote_to_team_lead(
        db, payload.student_id, payload.club_name, payload.department,
    )


@router.patch("/me", response_model=UserOut)
def update_profile(
    payload: ProfileUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Update own name and contact details (partial update)."""
    return user_service.update_own_profile(db, current_user, payload.model_dump(exclude_unset=True))


@router.get("/{user_id}", response_model=UserOut)
def get_user(
    user_id: str,
    db: Session = Depends(get_db),
    _: User = Depends(requires_role(UserRole.admin)),
):
    user = db.query(User).filter(User.user_id == user_id).first()
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user(
    user_id: str,
    db: Session = Depends(get_db),
    _: User = Depends(requires_role(UserRole.admin)),
):
    user_service.delete_user(db, user_id)
