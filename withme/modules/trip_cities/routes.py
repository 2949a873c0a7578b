from fastapi import APIRouter, Depends
from withme.database.supabase_client import get_supabase
from withme.modules.trip_cities.schemas import TripCityAdd, TripCityUpdate, TripCityResponse, TripCityEnvelope
from withme.modules.trip_cities.service import TripCityService
from withme.core.dependencies import get_current_user, get_optional_user, check_trip_access, validate_uuid
from withme.config.trip_roles import READ_ROLES, EDIT_ROLES
from supabase import Client
from typing import List, Optional, Dict

router = APIRouter(prefix="/trips/{trip_id}/cities", tags=["trip cities"])


def get_trip_city_service(supabase: Client = Depends(get_supabase)) -> TripCityService:
    return TripCityService(supabase)


@router.get("", response_model=List[TripCityResponse])
async def list_cities(
    trip_id: str,
    current_user: Optional[Dict] = Depends(get_optional_user),
    service: TripCityService = Depends(get_trip_city_service),
    supabase: Client = Depends(get_supabase)
):
    """Cities on the trip route, in order"""
    check_trip_access(trip_id, current_user, supabase, READ_ROLES)
    return service.list_cities(trip_id)


@router.post("", response_model=TripCityResponse, status_code=201)
async def add_city(
    trip_id: str,
    city_data: TripCityAdd,
    current_user: Dict = Depends(get_current_user),
    service: TripCityService = Depends(get_trip_city_service),
    supabase: Client = Depends(get_supabase)
):
    """Append a city to the trip"""
    check_trip_access(trip_id, current_user, supabase, EDIT_ROLES)
    validate_uuid(city_data.city_id, "city ID")
    return service.add_city(trip_id, city_data)


@router.get("/{city_id}", response_model=TripCityEnvelope)
async def get_city(
    trip_id: str,
    city_id: str,
    current_user: Optional[Dict] = Depends(get_optional_user),
    service: TripCityService = Depends(get_trip_city_service),
    supabase: Client = Depends(get_supabase)
):
    check_trip_access(trip_id, current_user, supabase, READ_ROLES)
    validate_uuid(city_id, "city ID")
    return {"trip_city": service.get_city(trip_id, city_id)}


@router.patch("/{city_id}", response_model=TripCityEnvelope)
async def update_city(
    trip_id: str,
    city_id: str,
    city_data: TripCityUpdate,
    current_user: Dict = Depends(get_current_user),
    service: TripCityService = Depends(get_trip_city_service),
    supabase: Client = Depends(get_supabase)
):
    """Change arrival/departure dates"""
    check_trip_access(trip_id, current_user, supabase, EDIT_ROLES)
    validate_uuid(city_id, "city ID")
    return {"trip_city": service.update_city(trip_id, city_id, city_data)}


@router.delete("/{city_id}")
async def remove_city(
    trip_id: str,
    city_id: str,
    current_user: Dict = Depends(get_current_user),
    service: TripCityService = Depends(get_trip_city_service),
    supabase: Client = Depends(get_supabase)
):
    """Remove a city from the trip"""
    check_trip_access(trip_id, current_user, supabase, EDIT_ROLES)
    validate_uuid(city_id, "city ID")
    service.remove_city(trip_id, city_id)
    return {"success": True}
