"""Approver pick-lists for the stayback submission form."""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from stayback.auth import get_current_user
from stayback.database import get_db
from stayback.models.profile import TeamLead, Staff, HostelWarden
from stayback.models.user import User
from stayback.schemas.user import TeamLeadOut, StaffOut, HostelOut

router = APIRouter()


@router.get("/team-leads", response_model=list[TeamLeadOut])
def list_team_leads(db: Session = Depends(get_db), _: User = Depends(get_current_user)):
    return db.query(TeamLead).order_by(TeamLead.club_name).all()


@router.get("/staff", response_model=list[StaffOut])
def list_staff(db: Session = Depends(get_db), _: User = Depends(get_current_user)):
    return db.query(Staff).order_by(Staff.created_at).all()


@router.get("/hostels", response_model=list[HostelOut])
def list_hostels(db: Session = Depends(get_db), _: User = Depends(get_current_user)):
    return db.query(HostelWarden).order_by(HostelWarden.hostel_name).all()
