from pydantic import BaseModel
from typing import Optional, List, Dict, Any


class CityResponse(BaseModel):
    id: str
    name: str
    country: Optional[str] = None
    admin_name: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    mapbox_id: Optional[str] = None
    destination: Optional[Dict[str, Any]] = None

    class Config:
        from_attributes = True


class CitySearchResponse(BaseModel):
    cities: List[CityResponse]
    source: str
