from fastapi import APIRouter, Depends, Request, Response
from withme.database.supabase_client import get_supabase, get_service_supabase
from withme.modules.trips.schemas import (
    TripCreate, TripUpdate, TripResponse, TripDetailResponse,
    GuestTripCreate, GuestTripResponse
)
from withme.modules.trips.service import TripService, GuestTripService
from withme.core.dependencies import get_current_user, get_optional_user, check_trip_access
from withme.core.rate_limit import limiter, MUTATION_LIMIT
from withme.config import settings
from withme.config.trip_roles import READ_ROLES, EDIT_ROLES, ADMIN_ROLES
from supabase import Client
from typing import List, Optional, Dict

router = APIRouter(prefix="/trips", tags=["trips"])

GUEST_COOKIE_MAX_AGE = 365 * 24 * 60 * 60


def get_trip_service(supabase: Client = Depends(get_supabase)) -> TripService:
    return TripService(supabase)


def get_guest_trip_service(supabase: Client = Depends(get_service_supabase)) -> GuestTripService:
    return GuestTripService(supabase)


@router.post("", response_model=TripResponse, status_code=201)
async def create_trip(
    trip_data: TripCreate,
    current_user: Dict = Depends(get_current_user),
    service: TripService = Depends(get_trip_service)
):
    """Create a new trip"""
    return service.create_trip(trip_data, current_user["id"])


@router.get("", response_model=List[TripResponse])
async def list_trips(
    limit: int = 10,
    offset: int = 0,
    current_user: Dict = Depends(get_current_user),
    service: TripService = Depends(get_trip_service)
):
    """List trips the caller is a member of"""
    return service.list_trips(current_user["id"], limit=limit, offset=offset)


@router.post("/guest", response_model=GuestTripResponse, status_code=201)
@limiter.limit(MUTATION_LIMIT)
async def create_guest_trip(
    request: Request,
    response: Response,
    trip_data: GuestTripCreate,
    current_user: Optional[Dict] = Depends(get_optional_user),
    service: GuestTripService = Depends(get_guest_trip_service)
):
    """Create a starter trip for a guest or signed-in user"""
    cookie_token = request.cookies.get(settings.guest_cookie_name)
    result = service.create_guest_trip(trip_data, current_user, cookie_token)
    if result.guest_token:
        response.set_cookie(
            key=settings.guest_cookie_name,
            value=result.guest_token,
            max_age=GUEST_COOKIE_MAX_AGE,
            path="/",
            httponly=True,
            samesite="lax",
            secure=settings.is_production,
        )
    return result


@router.get("/{trip_id}", response_model=TripDetailResponse)
async def get_trip(
    trip_id: str,
    current_user: Optional[Dict] = Depends(get_optional_user),
    service: TripService = Depends(get_trip_service),
    supabase: Client = Depends(get_supabase)
):
    """Get trip details (members, creator, or anyone for public trips)"""
    role = check_trip_access(trip_id, current_user, supabase, READ_ROLES)
    return service.get_trip(trip_id, role)


@router.patch("/{trip_id}", response_model=TripDetailResponse)
@limiter.limit(MUTATION_LIMIT)
async def update_trip(
    request: Request,
    trip_id: str,
    trip_data: TripUpdate,
    current_user: Dict = Depends(get_current_user),
    service: TripService = Depends(get_trip_service),
    supabase: Client = Depends(get_supabase)
):
    """Update trip details (admin or editor)"""
    role = check_trip_access(trip_id, current_user, supabase, EDIT_ROLES)
    updated = service.update_trip(trip_id, trip_data)
    updated.user_role = role
    return updated


@router.delete("/{trip_id}")
@limiter.limit(MUTATION_LIMIT)
async def delete_trip(
    request: Request,
    trip_id: str,
    current_user: Dict = Depends(get_current_user),
    service: TripService = Depends(get_trip_service),
    supabase: Client = Depends(get_supabase)
):
    """Delete a trip (admin only)"""
    check_trip_access(trip_id, current_user, supabase, ADMIN_ROLES)
    service.delete_trip(trip_id)
    return {"success": True}
