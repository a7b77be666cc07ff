"""ApproverRoute ORM model — explicit club/hostel → approver assignment."""
import uuid
from sqlalchemy import Column, String, DateTime, UniqueConstraint, Enum as SAEnum
from sqlalchemy.sql import func
from stayback.database import Base
from stayback.models.approval import ApproverKind

WILDCARD = "*"


class ApproverRoute(Base):
    __tablename__ = "approver_routes"
    __table_args__ = (UniqueConstraint("kind", "match_key", name="uq_route_kind_key"),)

    route_id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    kind = Column(SAEnum(ApproverKind), nullable=False)
    match_key = Column(String(150), nullable=False)  # casefolded club/hostel name, or "*"
    approver_id = Column(String(36), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
