from fastapi import APIRouter, Depends, Query
from withme.database.supabase_client import get_supabase
from withme.modules.itinerary.schemas import (
    ItineraryItemCreate, ItineraryItemUpdate, ItinerarySectionCreate,
    ItineraryImport, ReorderRequest,
    ItineraryItemResponse, ItinerarySectionResponse, ItineraryResponse,
    ImportResponse, TravelLeg
)
from withme.modules.itinerary.service import ItineraryService
from withme.integrations.mapbox import MapboxClient, get_mapbox_client
from withme.core.dependencies import get_current_user, get_optional_user, check_trip_access
from withme.config.trip_roles import READ_ROLES, WRITE_ROLES, EDIT_ROLES
from supabase import Client
from typing import List, Optional, Dict

router = APIRouter(prefix="/trips/{trip_id}/itinerary", tags=["itinerary"])


def get_itinerary_service(supabase: Client = Depends(get_supabase)) -> ItineraryService:
    return ItineraryService(supabase)


@router.get("", response_model=ItineraryResponse)
async def get_itinerary(
    trip_id: str,
    current_user: Optional[Dict] = Depends(get_optional_user),
    service: ItineraryService = Depends(get_itinerary_service),
    supabase: Client = Depends(get_supabase)
):
    """Sections and items of a trip"""
    check_trip_access(trip_id, current_user, supabase, READ_ROLES)
    return service.get_itinerary(trip_id)


@router.post("/items", response_model=ItineraryItemResponse, status_code=201)
async def create_item(
    trip_id: str,
    item_data: ItineraryItemCreate,
    current_user: Dict = Depends(get_current_user),
    service: ItineraryService = Depends(get_itinerary_service),
    supabase: Client = Depends(get_supabase)
):
    """Add an itinerary item"""
    check_trip_access(trip_id, current_user, supabase, WRITE_ROLES)
    return service.create_item(trip_id, item_data, current_user["id"])


@router.post("/sections", response_model=ItinerarySectionResponse, status_code=201)
async def create_section(
    trip_id: str,
    section_data: ItinerarySectionCreate,
    current_user: Dict = Depends(get_current_user),
    service: ItineraryService = Depends(get_itinerary_service),
    supabase: Client = Depends(get_supabase)
):
    """Add an itinerary section (usually a day)"""
    check_trip_access(trip_id, current_user, supabase, WRITE_ROLES)
    return service.create_section(trip_id, section_data)


@router.post("/import", response_model=ImportResponse, status_code=201)
async def import_places(
    trip_id: str,
    import_data: ItineraryImport,
    current_user: Dict = Depends(get_current_user),
    service: ItineraryService = Depends(get_itinerary_service),
    supabase: Client = Depends(get_supabase)
):
    """Import a list of places as unscheduled items"""
    check_trip_access(trip_id, current_user, supabase, WRITE_ROLES)
    return service.import_places(trip_id, import_data, current_user["id"])


@router.post("/reorder", response_model=List[ItineraryItemResponse])
async def reorder_items(
    trip_id: str,
    reorder: ReorderRequest,
    current_user: Dict = Depends(get_current_user),
    service: ItineraryService = Depends(get_itinerary_service),
    supabase: Client = Depends(get_supabase)
):
    """Move items into a section in the given order"""
    check_trip_access(trip_id, current_user, supabase, WRITE_ROLES)
    return service.reorder(trip_id, reorder)


@router.get("/travel-times", response_model=Dict[str, TravelLeg])
async def travel_times(
    trip_id: str,
    profile: str = Query("walking", pattern="^(walking|driving|cycling)$"),
    current_user: Optional[Dict] = Depends(get_optional_user),
    service: ItineraryService = Depends(get_itinerary_service),
    mapbox: MapboxClient = Depends(get_mapbox_client),
    supabase: Client = Depends(get_supabase)
):
    """Travel time between consecutive located items of each day"""
    check_trip_access(trip_id, current_user, supabase, READ_ROLES)
    return service.travel_times(trip_id, mapbox, profile)


@router.get("/items/{item_id}", response_model=ItineraryItemResponse)
async def get_item(
    trip_id: str,
    item_id: str,
    current_user: Optional[Dict] = Depends(get_optional_user),
    service: ItineraryService = Depends(get_itinerary_service),
    supabase: Client = Depends(get_supabase)
):
    """Get a single itinerary item"""
    check_trip_access(trip_id, current_user, supabase, READ_ROLES)
    return service.get_item(trip_id, item_id)


@router.put("/items/{item_id}", response_model=ItineraryItemResponse)
@router.patch("/items/{item_id}", response_model=ItineraryItemResponse)
async def update_item(
    trip_id: str,
    item_id: str,
    item_data: ItineraryItemUpdate,
    current_user: Dict = Depends(get_current_user),
    service: ItineraryService = Depends(get_itinerary_service),
    supabase: Client = Depends(get_supabase)
):
    """Update an itinerary item (admin or editor)"""
    check_trip_access(trip_id, current_user, supabase, EDIT_ROLES)
    return service.update_item(trip_id, item_id, item_data)


@router.delete("/items/{item_id}")
async def delete_item(
    trip_id: str,
    item_id: str,
    current_user: Dict = Depends(get_current_user),
    service: ItineraryService = Depends(get_itinerary_service),
    supabase: Client = Depends(get_supabase)
):
    """Delete an itinerary item (admin or editor)"""
    check_trip_access(trip_id, current_user, supabase, EDIT_ROLES)
    service.delete_item(trip_id, item_id)
    return {"success": True}
