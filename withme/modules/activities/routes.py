from fastapi import APIRouter, Depends, Query
from withme.modules.activities.schemas import ActivitySearchResponse, DestinationActivitiesResponse
from withme.integrations.viator import ViatorClient, get_viator_client
from withme.core.dependencies import get_current_user
from typing import Dict, Optional

router = APIRouter(prefix="/activities", tags=["activities"])


@router.get("/search", response_model=ActivitySearchResponse)
async def search_activities(
    q: str = Query(..., min_length=1),
    dest_id: Optional[str] = Query(None),
    limit: int = Query(10, ge=1, le=50),
    currency: str = Query("USD", min_length=3, max_length=3),
    current_user: Dict = Depends(get_current_user),
    viator: ViatorClient = Depends(get_viator_client)
):
    """Free-text Viator product search; each product carries an affiliate url"""
    return {"data": viator.search_products(q, dest_id, limit, currency.upper())}


@router.get("/destinations/{dest_id}", response_model=DestinationActivitiesResponse)
async def destination_activities(
    dest_id: str,
    limit: int = Query(10, ge=1, le=50),
    currency: str = Query("USD", min_length=3, max_length=3),
    current_user: Dict = Depends(get_current_user),
    viator: ViatorClient = Depends(get_viator_client)
):
    return viator.destination_products(dest_id, limit, currency.upper())
