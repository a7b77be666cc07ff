"""Approval ORM model — one row per required approver of a request."""
import uuid
import enum
from sqlalchemy import Column, String, DateTime, Text, ForeignKey, UniqueConstraint, Enum as SAEnum
from sqlalchemy.orm import relationship
from stayback.database import Base


class ApproverKind(str, enum.Enum):
    team_lead = "TEAM_LEAD"
    staff = "STAFF"
    hostel = "HOSTEL"


class ApprovalStatus(str, enum.Enum):
    pending = "PENDING"
    approved = "APPROVED"
    rejected = "REJECTED"


class Approval(Base):
    __tablename__ = "approvals"
    __table_args__ = (UniqueConstraint("request_id", "approver_kind", name="uq_approval_request_kind"),)

    approval_id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    request_id = Column(String(36), ForeignKey("stayback_requests.request_id"), nullable=False)
    # approver_id is the profile id of the kind's table (team_leads/staff/hostel_wardens)
    approver_kind = Column(SAEnum(ApproverKind), nullable=False)
    approver_id = Column(String(36), nullable=False, index=True)
    status = Column(SAEnum(ApprovalStatus), nullable=False, default=ApprovalStatus.pending)
    comments = Column(Text, nullable=True)
    decided_at = Column(DateTime(timezone=True), nullable=True)
    approved_at = Column(DateTime(timezone=True), nullable=True)

    request = relationship("StaybackRequest", back_populates="approvals")
