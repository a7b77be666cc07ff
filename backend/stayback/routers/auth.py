"""Auth API routes — student self-registration, login, current user."""
import logging
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from stayback.auth import create_access_token, get_current_user
from stayback.database import get_db
from stayback.models.user import User, UserRole
from stayback.schemas.user import StudentRegister, LoginRequest, TokenOut, MeOut
from stayback.services import user_service

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/register", response_model=MeOut, status_code=status.HTTP_201_CREATED)
def register_student(payload: StudentRegister, db: Session = Depends(get_db)):
    """Public registration — always creates a STUDENT account."""
    data = payload.model_dump()
    user = user_service.create_user_account(
        db,
        email=data.pop("email"),
        uid=data.pop("uid"),
        password=data.pop("password"),
        name=data.pop("name"),
        role=UserRole.student,
        profile_data=data,
    )
    return _me(db, user)


@router.post("/login", response_model=TokenOut)
def login(payload: LoginRequest, db: Session = Depends(get_db)):
    user = user_service.authenticate(db, payload.email, payload.password)
    logger.info("User %s logged in as %s", user.user_id, user.role.value)
    return TokenOut(access_token=create_access_token(user), role=user.role.value)


@router.get("/me", response_model=MeOut)
def me(current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return _me(db, current_user)


def _me(db: Session, user: User) -> MeOut:
    profile = user_service.get_profile(db, user)
    profile_dict = None
    if profile is not None:
        profile_dict = {c.name: getattr(profile, c.name) for c in profile.__table__.columns}
    return MeOut(
        user_id=user.user_id,
        email=user.email,
        uid=user.uid,
        name=user.name,
        role=user.role.value,
        avatar_url=user.avatar_url,
        gender=user.gender,
        created_at=user.created_at,
        profile=profile_dict,
    )
