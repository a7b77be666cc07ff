"""SecurityCheckin ORM model — append-only IN/OUT observations."""
import enum
from sqlalchemy import Column, Integer, String, DateTime, Text, ForeignKey, Enum as SAEnum
from sqlalchemy.orm import relationship
from stayback.database import Base, utcnow


class CheckinDirection(str, enum.Enum):
    check_in = "IN"
    check_out = "OUT"


class SecurityCheckin(Base):
    __tablename__ = "security_checkins"

    # Monotonic id doubles as the tie-breaker for events sharing a timestamp
    checkin_id = Column(Integer, primary_key=True, autoincrement=True)
    request_id = Column(String(36), ForeignKey("stayback_requests.request_id"), nullable=False, index=True)
    direction = Column(SAEnum(CheckinDirection), nullable=False)
    # Null only for events imported from legacy comment text without an officer id
    officer_id = Column(String(36), ForeignKey("security_officers.security_id"), nullable=True)
    officer_name = Column(String(100), nullable=False)
    note = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    request = relationship("StaybackRequest", back_populates="checkins")
