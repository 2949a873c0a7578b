from fastapi import APIRouter, Depends, Query
from withme.database.supabase_client import get_supabase
from withme.modules.destinations.schemas import (
    DestinationResponse, DestinationListResponse, DestinationSort
)
from withme.modules.destinations.service import DestinationService
from supabase import Client
from typing import Optional

router = APIRouter(prefix="/destinations", tags=["destinations"])


def get_destination_service(supabase: Client = Depends(get_supabase)) -> DestinationService:
    return DestinationService(supabase)


@router.get("", response_model=DestinationListResponse)
async def list_destinations(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    sort: DestinationSort = Query("popularity"),
    continent: Optional[str] = Query(None),
    country: Optional[str] = Query(None),
    search: Optional[str] = Query(None),
    service: DestinationService = Depends(get_destination_service)
):
    """Browse destinations with paging, filters and sorting"""
    return service.list_destinations(page, limit, sort, continent, country, search)


@router.get("/{slug_or_id}", response_model=DestinationResponse)
async def get_destination(
    slug_or_id: str,
    service: DestinationService = Depends(get_destination_service)
):
    return service.get_destination(slug_or_id)
