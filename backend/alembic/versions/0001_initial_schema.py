"""initial_schema

Revision ID: 0001
Revises:
Create Date: 2026-10-17

Creates all tables for the hostel stayback service:
users, role profiles, stayback_requests, approvals, approval_decisions,
security_checkins, approver_routes.

Enum columns hold the SQLAlchemy enum member names (e.g. "pending").
"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # --- users ---
    op.create_table(
        "users",
        sa.Column("user_id", sa.String(36), primary_key=True),
        sa.Column("email", sa.String(255), nullable=False, unique=True),
        sa.Column("uid", sa.String(64), nullable=False, unique=True),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("role", sa.String(20), nullable=False, server_default="student"),
        sa.Column("avatar_url", sa.String(500), nullable=True),
        sa.Column("gender", sa.String(20), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    # --- role profiles ---
    op.create_table(
        "students",
        sa.Column("student_id", sa.String(36), primary_key=True),
        sa.Column("user_id", sa.String(36), sa.ForeignKey("users.user_id"), nullable=False, unique=True),
        sa.Column("club_name", sa.String(150), nullable=False),
        sa.Column("hostel_name", sa.String(150), nullable=False),
        sa.Column("room_no", sa.String(20), nullable=False),
        sa.Column("phone_number", sa.String(20), nullable=False),
        sa.Column("is_team_lead", sa.Boolean, nullable=False, server_default="0"),
    )
    op.create_table(
        "team_leads",
        sa.Column("team_lead_id", sa.String(36), primary_key=True),
        sa.Column("user_id", sa.String(36), sa.ForeignKey("users.user_id"), nullable=False, unique=True),
        sa.Column("club_name", sa.String(150), nullable=False),
        sa.Column("department", sa.String(150), nullable=True),
    )
    op.create_table(
        "staff",
        sa.Column("staff_id", sa.String(36), primary_key=True),
        sa.Column("user_id", sa.String(36), sa.ForeignKey("users.user_id"), nullable=False, unique=True),
        sa.Column("department", sa.String(150), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_table(
        "hostel_wardens",
        sa.Column("hostel_id", sa.String(36), primary_key=True),
        sa.Column("user_id", sa.String(36), sa.ForeignKey("users.user_id"), nullable=False, unique=True),
        sa.Column("hostel_name", sa.String(150), nullable=False),
    )
    op.create_table(
        "security_officers",
        sa.Column("security_id", sa.String(36), primary_key=True),
        sa.Column("user_id", sa.String(36), sa.ForeignKey("users.user_id"), nullable=False, unique=True),
        sa.Column("department", sa.String(150), nullable=True),
    )

    # --- stayback_requests ---
    op.create_table(
        "stayback_requests",
        sa.Column("request_id", sa.String(36), primary_key=True),
        sa.Column("student_id", sa.String(36), sa.ForeignKey("students.student_id"), nullable=False),
        sa.Column("club_name", sa.String(150), nullable=False),
        sa.Column("date", sa.Date, nullable=False),
        sa.Column("from_time", sa.String(5), nullable=False),
        sa.Column("to_time", sa.String(5), nullable=False),
        sa.Column("remarks", sa.Text, nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="pending"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )

    # --- approvals ---
    op.create_table(
        "approvals",
        sa.Column("approval_id", sa.String(36), primary_key=True),
        sa.Column("request_id", sa.String(36), sa.ForeignKey("stayback_requests.request_id"), nullable=False),
        sa.Column("approver_kind", sa.String(20), nullable=False),
        sa.Column("approver_id", sa.String(36), nullable=False, index=True),
        sa.Column("status", sa.String(20), nullable=False, server_default="pending"),
        sa.Column("comments", sa.Text, nullable=True),
        sa.Column("decided_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("approved_at", sa.DateTime(timezone=True), nullable=True),
        sa.UniqueConstraint("request_id", "approver_kind", name="uq_approval_request_kind"),
    )

    # --- approval_decisions ---
    op.create_table(
        "approval_decisions",
        sa.Column("decision_id", sa.String(36), primary_key=True),
        sa.Column("approval_id", sa.String(36), sa.ForeignKey("approvals.approval_id"), nullable=False),
        sa.Column("request_id", sa.String(36), sa.ForeignKey("stayback_requests.request_id"), nullable=False),
        sa.Column("status", sa.String(20), nullable=False),
        sa.Column("comments", sa.Text, nullable=True),
        sa.Column("decided_by_user_id", sa.String(36), sa.ForeignKey("users.user_id"), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )

    # --- security_checkins ---
    op.create_table(
        "security_checkins",
        sa.Column("checkin_id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("request_id", sa.String(36), sa.ForeignKey("stayback_requests.request_id"),
                  nullable=False, index=True),
        sa.Column("direction", sa.String(10), nullable=False),
        sa.Column("officer_id", sa.String(36), sa.ForeignKey("security_officers.security_id"), nullable=True),
        sa.Column("officer_name", sa.String(100), nullable=False),
        sa.Column("note", sa.Text, nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )

    # --- approver_routes ---
    op.create_table(
        "approver_routes",
        sa.Column("route_id", sa.String(36), primary_key=True),
        sa.Column("kind", sa.String(20), nullable=False),
        sa.Column("match_key", sa.String(150), nullable=False),
        sa.Column("approver_id", sa.String(36), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.UniqueConstraint("kind", "match_key", name="uq_route_kind_key"),
    )


def downgrade() -> None:
    op.drop_table("approver_routes")
    op.drop_table("security_checkins")
    op.drop_table("approval_decisions")
    op.drop_table("approvals")
    op.drop_table("stayback_requests")
    op.drop_table("security_officers")
    op.drop_table("hostel_wardens")
    op.drop_table("staff")
    op.drop_table("team_leads")
    op.drop_table("students")
    op.drop_table("users")
