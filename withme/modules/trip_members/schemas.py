from pydantic import BaseModel, EmailStr
from typing import Optional, Literal, Dict, Any
from datetime import datetime

TripRole = Literal["admin", "editor", "contributor", "viewer"]


class TripMemberAdd(BaseModel):
    user_id: str
    role: TripRole = "viewer"


class TripMemberUpdate(BaseModel):
    role: TripRole


class TripInviteCreate(BaseModel):
    email: EmailStr
    role: TripRole = "viewer"


class TripMemberResponse(BaseModel):
    id: Optional[str] = None
    trip_id: str
    user_id: str
    role: str
    is_guest: Optional[bool] = None
    joined_at: Optional[datetime] = None
    profile: Optional[Dict[str, Any]] = None

    class Config:
        from_attributes = True


class TripInvitationResponse(BaseModel):
    id: str
    trip_id: str
    email: str
    role: str
    status: str = "pending"
    email_sent: bool = False
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
