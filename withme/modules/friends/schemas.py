from pydantic import BaseModel
from typing import Optional, List, Dict, Any
from datetime import datetime


class FriendRequestCreate(BaseModel):
    user_id: str


class FriendRequestResponse(BaseModel):
    id: str
    sender_id: str
    receiver_id: str
    status: str
    created_at: Optional[datetime] = None
    responded_at: Optional[datetime] = None
    sender: Optional[Dict[str, Any]] = None
    receiver: Optional[Dict[str, Any]] = None

    class Config:
        from_attributes = True


class FriendRequestsResponse(BaseModel):
    incoming: List[FriendRequestResponse]
    outgoing: List[FriendRequestResponse]


class FriendResponse(BaseModel):
    id: str
    name: Optional[str] = None
    username: Optional[str] = None
    avatar_url: Optional[str] = None
    since: Optional[datetime] = None
