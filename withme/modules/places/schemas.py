from pydantic import BaseModel
from typing import Optional, List


class PlaceResponse(BaseModel):
    mapbox_id: str
    name: Optional[str] = None
    full_name: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    place_type: Optional[str] = None


class PlaceSearchResponse(BaseModel):
    places: List[PlaceResponse]
