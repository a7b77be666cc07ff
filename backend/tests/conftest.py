"""Pytest fixtures — throwaway SQLite database for fast, isolated tests."""
import os

os.environ.setdefault("DATABASE_URL", "sqlite:///./test.db")

from types import SimpleNamespace

import pytest
from sqlalchemy import create_engine, event, inspect
from sqlalchemy.orm import sessionmaker
from fastapi.testclient import TestClient

from stayback.auth import create_access_token
from stayback.config import settings
from stayback.database import Base, get_db
from stayback.main import app
from stayback.models.user import User, UserRole
from stayback.services import user_service

# Import all models so they register with Base.metadata
from stayback.models.profile import Student, TeamLead, Staff, HostelWarden, SecurityOfficer  # noqa: F401
from stayback.models.stayback_request import StaybackRequest  # noqa: F401
from stayback.models.approval import Approval                 # noqa: F401
from stayback.models.approval_decision import ApprovalDecision  # noqa: F401
from stayback.models.security_checkin import SecurityCheckin  # noqa: F401
from stayback.models.approver_route import ApproverRoute      # noqa: F401

SQLITE_URL = "sqlite:///./test.db"

# Minimum bcrypt cost keeps user creation fast
settings.BCRYPT_ROUNDS = 4


@pytest.fixture(scope="function")
def db_engine():
    """Create a fresh SQLite engine for each test."""
    engine = create_engine(SQLITE_URL, connect_args={"check_same_thread": False})

    # Enable WAL mode for better concurrency
    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_conn, connection_record):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.close()

    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(scope="function")
def db(db_engine):
    """Yield a database session bound to the test engine."""
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(scope="function")
def client(db_engine):
    """FastAPI TestClient with the database dependency overridden to use SQLite."""
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)

    def _override_get_db():
        session = TestingSession()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture(scope="function")
def campus(db):
    """One user per role, wired so a Robotics student in A Block resolves all three approvers."""
    return SimpleNamespace(
        admin=make_user(db, UserRole.admin, "Admin"),
        student=make_user(db, UserRole.student, "Stu Dent", club_name="Robotics",
                          hostel_name="A Block", room_no="101", phone_number="9876543210"),
        team_lead=make_user(db, UserRole.team_lead, "Tea Lead", club_name="robotics"),
        staff=make_user(db, UserRole.staff, "Sta Ff", department="CSE"),
        warden=make_user(db, UserRole.hostel, "War Den", hostel_name="A Block"),
        security=make_user(db, UserRole.security, "Sec Urity", department="Gate 1"),
    )


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------
def make_user(db, role: UserRole, name: str, password: str = "secret123", **profile) -> User:
    """Helper — create a user and its role profile directly through the service."""
    slug = name.lower().replace(" ", ".")
    return user_service.create_user_account(
        db,
        email=f"{slug}@hostel.example.com",
        uid=slug.upper(),
        password=password,
        name=name,
        role=role,
        profile_data=profile,
    )


def auth_headers(user: User) -> dict:
    """Helper — bearer header for a user without going through /login."""
    return {"Authorization": f"Bearer {create_access_token(user)}"}


def profile_id(db, user: User) -> str:
    """Helper — primary key of the user's role profile."""
    profile = user_service.get_profile(db, user)
    return inspect(profile).identity[0]


def submit_request(client: TestClient, student: User, **overrides):
    """Helper — POST /api/stayback as the given student and return the response."""
    body = {
        "club_name": "Robotics",
        "date": "2026-11-01",
        "from_time": "18:00",
        "to_time": "22:30",
        "remarks": "Robot competition practice session",
    }
    body.update(overrides)
    return client.post("/api/stayback/", json=body, headers=auth_headers(student))


def decide(client: TestClient, approver: User, request_id: str, status: str, comments: str = None):
    """Helper — POST a decision for the approver's own approval."""
    body = {"status": status}
    if comments is not None:
        body["comments"] = comments
    return client.post(
        f"/api/approvals/{request_id}/decision", json=body, headers=auth_headers(approver),
    )


def fully_approved_request(client: TestClient, campus) -> str:
    """Helper — submit a request and have all three approvers approve it."""
    resp = submit_request(client, campus.student)
    assert resp.status_code == 201, resp.text
    request_id = resp.json()["request_id"]
    for approver in (campus.team_lead, campus.staff, campus.warden):
        assert decide(client, approver, request_id, "APPROVED").status_code == 200
    return request_id
