from pydantic import BaseModel, Field
from typing import Optional, Dict, Literal
from datetime import datetime

ContentType = Literal["trip", "itinerary_item", "destination", "group_plan_idea", "collection", "template"]


class CommentCreate(BaseModel):
    entity_type: ContentType
    entity_id: str
    content: str = Field(min_length=1, max_length=5000)
    parent_id: Optional[str] = None
    attachment_url: Optional[str] = None
    attachment_type: Optional[str] = None


class CommentUpdate(BaseModel):
    content: str = Field(min_length=1, max_length=5000)


class CommentResponse(BaseModel):
    id: str
    entity_id: str
    entity_type: str
    content: str
    user_id: str
    parent_id: Optional[str] = None
    is_edited: bool = False
    is_deleted: bool = False
    attachment_url: Optional[str] = None
    attachment_type: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_row(cls, row: dict) -> "CommentResponse":
        """Map stored content_* columns to the entity_* API fields"""
        return cls(
            id=row["id"],
            entity_id=row["content_id"],
            entity_type=row["content_type"],
            content=row["content"],
            user_id=row["user_id"],
            parent_id=row.get("parent_id"),
            is_edited=row.get("is_edited") or False,
            is_deleted=row.get("is_deleted") or False,
            attachment_url=row.get("attachment_url"),
            attachment_type=row.get("attachment_type"),
            created_at=row.get("created_at"),
            updated_at=row.get("updated_at"),
        )


class ReactionToggle(BaseModel):
    emoji: str = Field(min_length=1, max_length=32)


class ReactionToggleResponse(BaseModel):
    reacted: bool
    emoji: str


class ReactionCountsResponse(BaseModel):
    counts: Dict[str, int]
