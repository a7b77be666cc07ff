"""Role profile ORM models — one row per non-admin user, keyed by user_id."""
import uuid
from sqlalchemy import Column, String, Boolean, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from stayback.database import Base, utcnow


class NamedProfileMixin:
    """Profiles show the owning user's display name."""

    @property
    def name(self) -> str:
        return self.user.name


def _new_id() -> str:
    return str(uuid.uuid4())


class Student(NamedProfileMixin, Base):
    __tablename__ = "students"

    student_id = Column(String(36), primary_key=True, default=_new_id)
    user_id = Column(String(36), ForeignKey("users.user_id"), nullable=False, unique=True)
    club_name = Column(String(150), nullable=False)
    hostel_name = Column(String(150), nullable=False)
    room_no = Column(String(20), nullable=False)
    phone_number = Column(String(20), nullable=False)
    is_team_lead = Column(Boolean, nullable=False, default=False)

    user = relationship("User")


class TeamLead(NamedProfileMixin, Base):
    __tablename__ = "team_leads"

    team_lead_id = Column(String(36), primary_key=True, default=_new_id)
    user_id = Column(String(36), ForeignKey("users.user_id"), nullable=False, unique=True)
    club_name = Column(String(150), nullable=False)
    department = Column(String(150), nullable=True)

    user = relationship("User")


class Staff(NamedProfileMixin, Base):
    __tablename__ = "staff"

    staff_id = Column(String(36), primary_key=True, default=_new_id)
    user_id = Column(String(36), ForeignKey("users.user_id"), nullable=False, unique=True)
    department = Column(String(150), nullable=True)
    # Ordering key for the "oldest staff member" fallback
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    user = relationship("User")


class HostelWarden(NamedProfileMixin, Base):
    __tablename__ = "hostel_wardens"

    hostel_id = Column(String(36), primary_key=True, default=_new_id)
    user_id = Column(String(36), ForeignKey("users.user_id"), nullable=False, unique=True)
    hostel_name = Column(String(150), nullable=False)

    user = relationship("User")


class SecurityOfficer(NamedProfileMixin, Base):
    __tablename__ = "security_officers"

    security_id = Column(String(36), primary_key=True, default=_new_id)
    user_id = Column(String(36), ForeignKey("users.user_id"), nullable=False, unique=True)
    department = Column(String(150), nullable=True)

    user = relationship("User")
