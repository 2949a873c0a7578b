from pydantic import BaseModel, model_validator
from typing import Optional, Dict, Any
from datetime import date, datetime


def _check_stay(arrival: Optional[date], departure: Optional[date]):
    if arrival and departure and departure < arrival:
        raise ValueError("Departure date must be on or after arrival date")


class TripCityAdd(BaseModel):
    city_id: str
    arrival_date: Optional[date] = None
    departure_date: Optional[date] = None

    @model_validator(mode="after")
    def stay_in_order(self):
        _check_stay(self.arrival_date, self.departure_date)
        return self


class TripCityUpdate(BaseModel):
    arrival_date: Optional[date] = None
    departure_date: Optional[date] = None

    @model_validator(mode="after")
    def stay_in_order(self):
        _check_stay(self.arrival_date, self.departure_date)
        return self

    class Config:
        extra = "forbid"


class TripCityResponse(BaseModel):
    id: str
    trip_id: str
    city_id: str
    position: Optional[int] = None
    arrival_date: Optional[date] = None
    departure_date: Optional[date] = None
    city: Optional[Dict[str, Any]] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class TripCityEnvelope(BaseModel):
    trip_city: TripCityResponse
