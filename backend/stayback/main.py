"""FastAPI application entry point."""
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from stayback.config import settings
from stayback.database import Base, engine

# Import routers
from stayback.routers import auth, users, directory, routes, stayback, approvals, security, logs

# Import all models so Base.metadata knows about them
from stayback.models.user import User                                  # noqa: F401
from stayback.models.profile import Student, TeamLead, Staff, HostelWarden, SecurityOfficer  # noqa: F401
from stayback.models.stayback_request import StaybackRequest          # noqa: F401
from stayback.models.approval import Approval                         # noqa: F401
from stayback.models.approval_decision import ApprovalDecision        # noqa: F401
from stayback.models.security_checkin import SecurityCheckin          # noqa: F401
from stayback.models.approver_route import ApproverRoute              # noqa: F401

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(
    title="Hostel Stayback",
    description="Stayback (late-return) requests with team lead, staff and warden approval and security check-in",
    version="0.1.0",
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS.split(","),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register routers
app.include_router(auth.router, prefix="/api/auth", tags=["Auth"])
app.include_router(users.router, prefix="/api/users", tags=["Users"])
app.include_router(directory.router, prefix="/api/directory", tags=["Directory"])
app.include_router(routes.router, prefix="/api/routes", tags=["ApproverRoutes"])
app.include_router(stayback.router, prefix="/api/stayback", tags=["Stayback"])
app.include_router(approvals.router, prefix="/api/approvals", tags=["Approvals"])
app.include_router(security.router, prefix="/api/security", tags=["Security"])
app.include_router(logs.router, prefix="/api/logs", tags=["Logs"])


@app.on_event("startup")
def on_startup():
    """Create database tables on startup (for SQLite dev mode)."""
    if settings.DATABASE_URL.startswith("sqlite"):
        Base.metadata.create_all(bind=engine)


@app.get("/api/health")
def health_check():
    return {"status": "ok"}
