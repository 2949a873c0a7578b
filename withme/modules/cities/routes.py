from fastapi import APIRouter, Depends, Query
from withme.database.supabase_client import get_service_supabase
from withme.modules.cities.schemas import CitySearchResponse
from withme.modules.cities.service import CityService
from withme.integrations.mapbox import MapboxClient, get_mapbox_client
from supabase import Client

router = APIRouter(prefix="/cities", tags=["cities"])


def get_city_service(
    supabase: Client = Depends(get_service_supabase),
    mapbox: MapboxClient = Depends(get_mapbox_client)
) -> CityService:
    # service client: Mapbox results are cached into the shared cities table
    return CityService(supabase, mapbox)


@router.get("/search", response_model=CitySearchResponse)
async def search_cities(
    q: str = Query(...),
    limit: int = Query(10, ge=1, le=50),
    service: CityService = Depends(get_city_service)
):
    """Search cities by name"""
    return service.search(q, limit)
