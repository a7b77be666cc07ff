"""ApprovalDecision ORM model — append-only history of approval decisions."""
import uuid
from sqlalchemy import Column, String, DateTime, Text, ForeignKey, Enum as SAEnum
from stayback.database import Base, utcnow
from stayback.models.approval import ApprovalStatus


class ApprovalDecision(Base):
    __tablename__ = "approval_decisions"

    decision_id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    approval_id = Column(String(36), ForeignKey("approvals.approval_id"), nullable=False)
    request_id = Column(String(36), ForeignKey("stayback_requests.request_id"), nullable=False)
    status = Column(SAEnum(ApprovalStatus), nullable=False)
    comments = Column(Text, nullable=True)
    decided_by_user_id = Column(String(36), ForeignKey("users.user_id"), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
