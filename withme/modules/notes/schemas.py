from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime


class NoteCreate(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    content: Optional[str] = Field(default=None, max_length=50000)


class NoteUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=255)
    content: Optional[str] = Field(default=None, max_length=50000)

    class Config:
        extra = "forbid"


class NoteResponse(BaseModel):
    id: str
    trip_id: str
    title: str
    content: Optional[str] = None
    created_by: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class TagResponse(BaseModel):
    id: str
    name: str


class NoteTagsUpdate(BaseModel):
    tags: List[str]


class NoteTagsResponse(BaseModel):
    tags: List[TagResponse]
