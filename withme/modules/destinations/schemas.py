from pydantic import BaseModel
from typing import Optional, List, Dict, Any, Literal

DestinationSort = Literal["popularity", "trending", "name"]


class DestinationResponse(BaseModel):
    id: str
    city: Optional[str] = None
    country: Optional[str] = None
    continent: Optional[str] = None
    slug: Optional[str] = None
    image_url: Optional[str] = None
    image_metadata: Optional[Dict[str, Any]] = None
    popularity: Optional[int] = None
    travelers_count: Optional[int] = None
    avg_days: Optional[int] = None

    class Config:
        from_attributes = True
        # destination rows carry many descriptive columns; pass them all through
        extra = "allow"


class PaginationMeta(BaseModel):
    total: int
    page: int
    limit: int
    total_pages: int


class DestinationListResponse(BaseModel):
    destinations: List[DestinationResponse]
    meta: PaginationMeta
