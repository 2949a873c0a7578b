from pydantic import BaseModel, Field, field_validator
from typing import Optional
from datetime import datetime


class ProfileUpdate(BaseModel):
    name: Optional[str] = Field(default=None, max_length=100)
    username: Optional[str] = Field(default=None, min_length=3, max_length=30, pattern=r"^[a-zA-Z0-9_]+$")
    avatar_url: Optional[str] = None
    bio: Optional[str] = Field(default=None, max_length=500)
    home_location: Optional[str] = Field(default=None, max_length=200)

    @field_validator("avatar_url")
    @classmethod
    def avatar_must_be_https(cls, v: Optional[str]) -> Optional[str]:
        if v and not v.startswith("https://"):
            raise ValueError("avatar_url must be an https URL")
        return v

    class Config:
        extra = "forbid"


class ProfileResponse(BaseModel):
    id: str
    email: Optional[str] = None
    name: Optional[str] = None
    username: Optional[str] = None
    avatar_url: Optional[str] = None
    bio: Optional[str] = None
    home_location: Optional[str] = None
    is_admin: bool = False
    is_guest: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class PublicProfileResponse(BaseModel):
    id: str
    name: Optional[str] = None
    username: Optional[str] = None
    avatar_url: Optional[str] = None
    bio: Optional[str] = None
    home_location: Optional[str] = None

    class Config:
        from_attributes = True
