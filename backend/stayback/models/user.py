"""User ORM model — login identity and role."""
import uuid
import enum
from sqlalchemy import Column, String, DateTime, Enum as SAEnum
from sqlalchemy.sql import func
from stayback.database import Base


class UserRole(str, enum.Enum):
    admin = "ADMIN"
    student = "STUDENT"
    team_lead = "TEAM_LEAD"
    staff = "STAFF"
    hostel = "HOSTEL"
    security = "SECURITY"


class User(Base):
    __tablename__ = "users"

    user_id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    email = Column(String(255), nullable=False, unique=True)
    uid = Column(String(64), nullable=False, unique=True)  # college roll / staff number
    name = Column(String(100), nullable=False)
    password_hash = Column(String(255), nullable=False)
    role = Column(SAEnum(UserRole), nullable=False, default=UserRole.student)
    avatar_url = Column(String(500), nullable=True)
    gender = Column(String(20), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
