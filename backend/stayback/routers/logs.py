"""Admin request log — filtered requests plus per-status counts."""
import datetime as dt
from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy import func
from sqlalchemy.orm import Session

from stayback.auth import requires_role
from stayback.database import get_db
from stayback.models.profile import Student
from stayback.models.stayback_request import StaybackRequest, RequestStatus
from stayback.models.user import User, UserRole
from stayback.schemas.stayback import RequestLogOut, StaybackRequestOut

router = APIRouter()


@router.get("/", response_model=RequestLogOut)
def request_log(
    start_date: Optional[dt.date] = Query(None),
    end_date: Optional[dt.date] = Query(None),
    status_filter: Optional[RequestStatus] = Query(None, alias="status"),
    club_name: Optional[str] = Query(None),
    hostel_name: Optional[str] = Query(None),
    db: Session = Depends(get_db),
    _: User = Depends(requires_role(UserRole.admin)),
):
    """All stayback requests matching the filters, newest first."""
    query = db.query(StaybackRequest).join(Student)
    if start_date:
        query = query.filter(StaybackRequest.date >= start_date)
    if end_date:
        query = query.filter(StaybackRequest.date <= end_date)
    if status_filter:
        query = query.filter(StaybackRequest.status == status_filter)
    if club_name:
        query = query.filter(StaybackRequest.club_name == club_name)
    if hostel_name:
        query = query.filter(Student.hostel_name == hostel_name)

    requests = query.order_by(StaybackRequest.created_at.desc()).all()
    counts = (
        query.with_entities(StaybackRequest.status, func.count(StaybackRequest.request_id))
        .group_by(StaybackRequest.status)
        .all()
    )
    return RequestLogOut(
        requests=[StaybackRequestOut.model_validate(r) for r in requests],
        stats={RequestStatus(s).value: n for s, n in counts},
    )
