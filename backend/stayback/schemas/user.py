"""Pydantic schemas for users, auth and profiles."""
from __future__ import annotations
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, EmailStr, Field, model_validator

from stayback.models.user import UserRole


class StudentRegister(BaseModel):
    email: EmailStr
    uid: str = Field(min_length=1)
    password: str = Field(min_length=6)
    name: str = Field(min_length=1)
    club_name: str = Field(min_length=1)
    hostel_name: str = Field(min_length=1)
    room_no: str = Field(min_length=1)
    phone_number: str = Field(min_length=10)


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1)


class TokenOut(BaseModel):
    access_token: str
    token_type: str = "bearer"
    role: str


class UserCreate(BaseModel):
    email: EmailStr
    uid: str = Field(min_length=1)
    password: str = Field(min_length=6)
    name: str = Field(min_length=1)
    role: UserRole
    club_name: Optional[str] = None
    hostel_name: Optional[str] = None
    room_no: Optional[str] = None
    phone_number: Optional[str] = None
    department: Optional[str] = None

    @model_validator(mode="after")
    def _role_fields(self) -> "UserCreate":
        required = {
            UserRole.student: ("club_name", "hostel_name", "room_no", "phone_number"),
            UserRole.team_lead: ("club_name",),
            UserRole.hostel: ("hostel_name",),
        }.get(self.role, ())
        missing = [f for f in required if not getattr(self, f)]
        if missing:
            raise ValueError(f"{', '.join(missing)} required for role {self.role.value}")
        return self


class UserOut(BaseModel):
    user_id: str
    email: str
    uid: str
    name: str
    role: str
    avatar_url: Optional[str] = None
    gender: Optional[str] = None
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class MeOut(UserOut):
    profile: Optional[dict] = None


class ProfileUpdate(BaseModel):
    name: Optional[str] = None
    room_no: Optional[str] = None
    phone_number: Optional[str] = None
    department: Optional[str] = None
    avatar_url: Optional[str] = Field(default=None, max_length=500)
    gender: Optional[str] = Field(default=None, max_length=20)


class PromoteRequest(BaseModel):
    student_id: str = Field(min_length=1)
    club_name: str = Field(min_length=1)
    department: Optional[str] = None


class TeamLeadOut(BaseModel):
    team_lead_id: str
    user_id: str
    name: str
    club_name: str
    department: Optional[str] = None

    model_config = {"from_attributes": True}


class StaffOut(BaseModel):
    staff_id: str
    user_id: str
    name: str
    department: Optional[str] = None

    model_config = {"from_attributes": True}


class HostelOut(BaseModel):
    hostel_id: str
    user_id: str
    name: str
    hostel_name: str

    model_config = {"from_attributes": True}
