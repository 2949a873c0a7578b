from pydantic import BaseModel
from typing import Optional
from datetime import datetime


class AdminStatsResponse(BaseModel):
    total_users: int
    total_trips: int
    total_destinations: int
    total_itinerary_items: int
    total_comments: int
    total_group_plan_ideas: int
    avg_members_per_trip: float
    avg_items_per_trip: float


class AdminUserResponse(BaseModel):
    id: str
    email: Optional[str] = None
    name: Optional[str] = None
    username: Optional[str] = None
    avatar_url: Optional[str] = None
    is_admin: bool = False
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class AdminUserUpdate(BaseModel):
    is_admin: bool

    class Config:
        extra = "forbid"
