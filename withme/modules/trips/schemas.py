from pydantic import BaseModel, Field, field_validator, model_validator
from typing import Optional, List, Dict, Any, Literal
from datetime import date, datetime
from urllib.parse import urlparse
import uuid

from withme.config.trip_roles import PLAYLIST_DOMAINS

PrivacySetting = Literal["private", "shared_with_link", "public"]
DESCRIPTION_MAX_LENGTH = 1000


def _check_name(v: Optional[str]) -> Optional[str]:
    if v is not None and not v.strip():
        raise ValueError("Name cannot be empty")
    return v


def _check_uuid(v: Optional[str]) -> Optional[str]:
    if v is None:
        return v
    try:
        uuid.UUID(v)
    except ValueError:
        raise ValueError("Invalid destination ID format")
    return v


def _check_date_range(start: Optional[date], end: Optional[date]):
    if start and end and end < start:
        raise ValueError("End date must be after start date")


def is_supported_playlist_url(url: str) -> bool:
    host = (urlparse(url).hostname or "").lower()
    return any(host == d or host.endswith("." + d) for d in PLAYLIST_DOMAINS)


class TripCreate(BaseModel):
    name: str = Field(min_length=3, max_length=100)
    description: Optional[str] = Field(default=None, max_length=DESCRIPTION_MAX_LENGTH)
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    destination_id: Optional[str] = None
    privacy_setting: PrivacySetting = "private"

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: Optional[str]) -> Optional[str]:
        return _check_name(v)

    @field_validator("destination_id")
    @classmethod
    def destination_is_uuid(cls, v: Optional[str]) -> Optional[str]:
        return _check_uuid(v)

    @model_validator(mode="after")
    def dates_in_order(self):
        _check_date_range(self.start_date, self.end_date)
        return self


class TripUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=3, max_length=100)
    description: Optional[str] = Field(default=None, max_length=DESCRIPTION_MAX_LENGTH)
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    destination_id: Optional[str] = None
    cover_image_url: Optional[str] = None
    budget: Optional[float] = Field(default=None, ge=0)
    cover_image_position_y: Optional[float] = Field(default=None, ge=0, le=100)
    privacy_setting: Optional[PrivacySetting] = None
    playlist_url: Optional[str] = None

    # Omitted fields are left alone; these columns are NOT NULL, so null is not a valid value
    @field_validator("name", "privacy_setting")
    @classmethod
    def not_null(cls, v):
        if v is None:
            raise ValueError("Field cannot be null")
        return v

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: Optional[str]) -> Optional[str]:
        return _check_name(v)

    @field_validator("destination_id")
    @classmethod
    def destination_is_uuid(cls, v: Optional[str]) -> Optional[str]:
        return _check_uuid(v)

    @field_validator("cover_image_url")
    @classmethod
    def cover_image_must_be_https(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        parsed = urlparse(v)
        if parsed.scheme != "https" or not parsed.netloc:
            raise ValueError("Cover image URL must be a valid HTTPS URL")
        return v

    @field_validator("playlist_url")
    @classmethod
    def playlist_must_be_supported(cls, v: Optional[str]) -> Optional[str]:
        if v is None or v == "":
            return v
        parsed = urlparse(v)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ValueError("Must be a valid playlist URL")
        if not is_supported_playlist_url(v):
            raise ValueError("Playlist URL must be from a supported music platform")
        return v

    @model_validator(mode="after")
    def dates_in_order(self):
        _check_date_range(self.start_date, self.end_date)
        return self

    class Config:
        extra = "forbid"


class TripResponse(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    duration_days: Optional[int] = None
    destination_id: Optional[str] = None
    city_id: Optional[str] = None
    destination_name: Optional[str] = None
    privacy_setting: Optional[str] = "private"
    status: Optional[str] = None
    cover_image_url: Optional[str] = None
    cover_image_position_y: Optional[float] = None
    budget: Optional[float] = None
    playlist_url: Optional[str] = None
    is_guest: Optional[bool] = None
    created_by: Optional[str] = None
    user_role: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class TripDetailResponse(BaseModel):
    trip: Dict[str, Any]
    user_role: Optional[str] = None


class GuestTripCreate(BaseModel):
    destination: str = Field(min_length=1, max_length=100)
    custom_name: Optional[str] = Field(default=None, max_length=100)


class GuestTripResponse(BaseModel):
    trip_id: str
    is_guest: bool
    guest_token: Optional[str] = None


class DefaultItem(BaseModel):
    title: str
    day_number: int
    position: int
    item_type: str
    description: Optional[str] = None


def default_guest_items(city_name: str) -> List[DefaultItem]:
    """Starter itinerary items for a freshly created guest trip"""
    return [
        DefaultItem(title=f"Accommodation in {city_name}", day_number=1, position=0,
                    item_type="accommodation", description="Where will you be staying?"),
        DefaultItem(title=f"Transportation to {city_name}", day_number=1, position=1,
                    item_type="transportation", description="How will you get there?"),
        DefaultItem(title=f"Explore {city_name}", day_number=2, position=0,
                    item_type="activity", description=f"Check out the popular sights in {city_name}"),
        DefaultItem(title=f"Dinner in {city_name}", day_number=2, position=1,
                    item_type="food", description=f"Try the local cuisine in {city_name}"),
    ]
