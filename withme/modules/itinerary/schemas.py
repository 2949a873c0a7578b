from pydantic import BaseModel, Field, field_validator, model_validator
from typing import Optional, List, Dict, Any, Literal
from datetime import date as DateType, datetime
import uuid


def _check_section_id(v: Optional[str]) -> Optional[str]:
    if v is None:
        return v
    try:
        uuid.UUID(v)
    except ValueError:
        raise ValueError("Invalid section ID format")
    return v


class ItemFields(BaseModel):
    description: Optional[str] = None
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    url: Optional[str] = None
    address: Optional[str] = None
    latitude: Optional[float] = Field(default=None, ge=-90, le=90)
    longitude: Optional[float] = Field(default=None, ge=-180, le=180)
    place_id: Optional[str] = None
    destination_id: Optional[str] = None
    section_id: Optional[str] = None
    day_number: Optional[int] = Field(default=None, gt=0)
    data: Optional[Dict[str, Any]] = None

    @field_validator("section_id")
    @classmethod
    def section_is_uuid(cls, v: Optional[str]) -> Optional[str]:
        return _check_section_id(v)


class ItineraryItemCreate(ItemFields):
    name: Optional[str] = Field(default=None, max_length=255)
    title: Optional[str] = Field(default=None, max_length=255)
    item_type: str = "activity"

    @model_validator(mode="after")
    def mirror_name_and_title(self):
        if not self.name and not self.title:
            raise ValueError("Either name or title is required")
        if self.title and not self.name:
            self.name = self.title
        elif self.name and not self.title:
            self.title = self.name
        return self


class ItineraryItemUpdate(ItemFields):
    name: Optional[str] = Field(default=None, max_length=255)
    title: Optional[str] = Field(default=None, max_length=255)
    item_type: Optional[str] = None
    status: Optional[Literal["suggested", "confirmed", "rejected"]] = None
    position: Optional[int] = None

    class Config:
        extra = "forbid"


class ItinerarySectionCreate(BaseModel):
    title: Optional[str] = Field(default=None, max_length=255)
    name: Optional[str] = Field(default=None, max_length=255)
    description: Optional[str] = None
    day_number: int = Field(default=0, ge=0)
    date: Optional[DateType] = None
    trip_city_id: Optional[str] = None

    @model_validator(mode="after")
    def name_maps_to_title(self):
        self.title = self.title or self.name
        if not self.title or not self.title.strip():
            raise ValueError("Section title is required")
        return self


class ImportLocation(BaseModel):
    address: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    lat: Optional[float] = None
    lng: Optional[float] = None
    place_id: Optional[str] = None


class ImportedPlace(BaseModel):
    title: Optional[str] = None
    name: Optional[str] = None
    item_type: Optional[str] = None
    category: Optional[str] = None
    notes: Optional[str] = None
    description: Optional[str] = None
    address: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    place_id: Optional[str] = None
    location: Optional[ImportLocation] = None

    def to_item_fields(self) -> Dict[str, Any]:
        """Normalize the alternative field names used by place-list exports"""
        loc = self.location or ImportLocation()
        title = self.title or self.name or "Imported place"
        latitude = self.latitude if self.latitude is not None else (loc.latitude if loc.latitude is not None else loc.lat)
        longitude = self.longitude if self.longitude is not None else (loc.longitude if loc.longitude is not None else loc.lng)
        return {
            "title": title,
            "name": title,
            "item_type": self.item_type or self.category or "place",
            "description": self.notes or self.description,
            "address": self.address or loc.address,
            "latitude": latitude,
            "longitude": longitude,
            "place_id": self.place_id or loc.place_id,
        }


class ItineraryImport(BaseModel):
    items: List[ImportedPlace]


class ReorderRequest(BaseModel):
    section_id: Optional[str] = None
    item_ids: List[str] = Field(min_length=1)

    @field_validator("section_id")
    @classmethod
    def section_is_uuid(cls, v: Optional[str]) -> Optional[str]:
        return _check_section_id(v)


class ItineraryItemResponse(BaseModel):
    id: str
    trip_id: str
    section_id: Optional[str] = None
    title: Optional[str] = None
    name: Optional[str] = None
    description: Optional[str] = None
    item_type: Optional[str] = None
    status: Optional[str] = None
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    day_number: Optional[int] = None
    position: Optional[int] = None
    url: Optional[str] = None
    address: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    place_id: Optional[str] = None
    destination_id: Optional[str] = None
    data: Optional[Dict[str, Any]] = None
    created_by: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ItinerarySectionResponse(BaseModel):
    id: str
    trip_id: str
    trip_city_id: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None
    day_number: Optional[int] = None
    date: Optional[DateType] = None
    position: Optional[int] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ItineraryResponse(BaseModel):
    sections: List[ItinerarySectionResponse]
    items: List[ItineraryItemResponse]


class ImportResponse(BaseModel):
    success: bool
    message: str
    data: List[ItineraryItemResponse]
    imported_count: int


class TravelLeg(BaseModel):
    to_item_id: str
    duration_seconds: Optional[float] = None
    distance_meters: Optional[float] = None
    profile: str
