from pydantic import BaseModel, Field
from typing import Optional, List, Dict, Any, Literal
from datetime import datetime, date

GroupVisibility = Literal["private", "public", "unlisted"]
GroupRole = Literal["admin", "member"]
IdeaType = Literal["activity", "budget", "date", "destination", "note", "other", "place", "question"]


class GroupCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=1000)
    emoji: Optional[str] = None
    visibility: GroupVisibility = "private"


class GroupUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=1000)
    emoji: Optional[str] = None
    visibility: Optional[GroupVisibility] = None

    class Config:
        extra = "forbid"


class GroupResponse(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    emoji: Optional[str] = None
    visibility: str = "private"
    created_by: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    user_role: Optional[str] = None

    class Config:
        from_attributes = True


class GroupMemberAdd(BaseModel):
    user_id: str
    role: GroupRole = "member"


class GroupMemberUpdate(BaseModel):
    role: GroupRole


class GroupMemberResponse(BaseModel):
    id: str
    group_id: str
    user_id: str
    role: str
    created_at: Optional[datetime] = None
    profile: Optional[Dict[str, Any]] = None

    class Config:
        from_attributes = True


class PlanIdeaCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    type: IdeaType = "other"
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    meta: Optional[Dict[str, Any]] = None


class PlanIdeaUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    type: Optional[IdeaType] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    meta: Optional[Dict[str, Any]] = None

    class Config:
        extra = "forbid"


class PlanIdeaResponse(BaseModel):
    id: str
    group_id: str
    created_by: Optional[str] = None
    title: str
    description: Optional[str] = None
    type: str
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    meta: Optional[Dict[str, Any]] = None
    votes_up: int = 0
    votes_down: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class VoteRequest(BaseModel):
    vote_type: Literal["up", "down"]


class GroupDetailResponse(GroupResponse):
    members: List[GroupMemberResponse] = []
