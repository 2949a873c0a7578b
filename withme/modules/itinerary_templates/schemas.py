from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime, date

from withme.modules.trips.schemas import DESCRIPTION_MAX_LENGTH


class TemplateItemResponse(BaseModel):
    id: str
    template_id: str
    day: int
    item_order: int = 0
    title: str
    description: Optional[str] = None
    item_type: Optional[str] = None
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    location: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None

    class Config:
        from_attributes = True


class TemplateResponse(BaseModel):
    id: str
    slug: str
    title: str
    description: Optional[str] = None
    destination_id: Optional[str] = None
    duration_days: Optional[int] = None
    cover_image_url: Optional[str] = None
    is_published: bool = False
    created_by: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class TemplateDetailResponse(TemplateResponse):
    items: List[TemplateItemResponse] = []


class TemplateUseRequest(BaseModel):
    name: str = Field(..., min_length=3, max_length=100)
    description: Optional[str] = Field(default=None, max_length=DESCRIPTION_MAX_LENGTH)
    start_date: Optional[date] = None


class TemplateUseResponse(BaseModel):
    success: bool
    trip_id: str
