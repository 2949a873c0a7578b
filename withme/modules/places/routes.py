from fastapi import APIRouter, Depends, HTTPException, Query
from withme.modules.places.schemas import PlaceResponse, PlaceSearchResponse
from withme.integrations.mapbox import MapboxClient, get_mapbox_client
from withme.core.dependencies import get_current_user
from typing import Dict, Optional
import re

router = APIRouter(prefix="/places", tags=["places"])

PROXIMITY_PATTERN = re.compile(r"^-?\d+(\.\d+)?,-?\d+(\.\d+)?$")


@router.get("/search", response_model=PlaceSearchResponse)
async def search_places(
    q: str = Query(..., min_length=1),
    limit: int = Query(5, ge=1, le=10),
    proximity: Optional[str] = Query(None, description="lng,lat to bias results"),
    current_user: Dict = Depends(get_current_user),
    mapbox: MapboxClient = Depends(get_mapbox_client)
):
    """Search places through Mapbox geocoding"""
    if proximity and not PROXIMITY_PATTERN.match(proximity):
        raise HTTPException(status_code=400, detail="Invalid proximity format, expected lng,lat")
    features = mapbox.geocode(q, limit=limit, proximity=proximity)
    return PlaceSearchResponse(places=[
        PlaceResponse(**{k: f.get(k) for k in PlaceResponse.model_fields})
        for f in features if f.get("mapbox_id")
    ])
