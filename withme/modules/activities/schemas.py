from pydantic import BaseModel
from typing import List, Dict, Any


class ActivitySearchResponse(BaseModel):
    data: List[Dict[str, Any]]


class DestinationActivitiesResponse(BaseModel):
    data: List[Dict[str, Any]]
    total_count: int
