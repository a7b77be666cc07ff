"""StaybackRequest ORM model.

``status`` is derived from the request's approvals by
``stayback.services.aggregation`` and is never written anywhere else
after creation.
"""
import uuid
import enum
from sqlalchemy import Column, String, Date, DateTime, Text, ForeignKey, Enum as SAEnum
from sqlalchemy.orm import relationship
from stayback.database import Base, utcnow


class RequestStatus(str, enum.Enum):
    pending = "PENDING"
    approved = "APPROVED"
    rejected = "REJECTED"


class StaybackRequest(Base):
    __tablename__ = "stayback_requests"

    request_id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    student_id = Column(String(36), ForeignKey("students.student_id"), nullable=False)
    club_name = Column(String(150), nullable=False)
    date = Column(Date, nullable=False)
    from_time = Column(String(5), nullable=False)  # HH:MM
    to_time = Column(String(5), nullable=False)
    remarks = Column(Text, nullable=False)
    status = Column(SAEnum(RequestStatus), nullable=False, default=RequestStatus.pending)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    student = relationship("Student")
    approvals = relationship("Approval", back_populates="request", cascade="all, delete-orphan")
    checkins = relationship(
        "SecurityCheckin",
        back_populates="request",
        cascade="all, delete-orphan",
        order_by="SecurityCheckin.checkin_id",
    )
