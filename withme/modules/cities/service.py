import logging
from supabase import Client
from withme.modules.cities.schemas import CityResponse, CitySearchResponse
from withme.integrations.mapbox import MapboxClient
from typing import List, Optional
from fastapi import HTTPException

logger = logging.getLogger(__name__)

CITY_COLUMNS = "id, name, country, admin_name, latitude, longitude, mapbox_id"
MIN_QUERY_LENGTH = 2


class CityService:
    def __init__(self, supabase: Client, mapbox: Optional[MapboxClient] = None):
        self.supabase = supabase
        self.mapbox = mapbox

    def _match_destination(self, city: dict) -> Optional[dict]:
        """Best-effort lookup of the destination page for a city"""
        try:
            query = self.supabase.table("destinations")\
                .select("id, city, country, slug, image_url")\
                .ilike("city", city["name"])
            if city.get("country"):
                query = query.eq("country", city["country"])
            result = query.limit(1).execute()
            return result.data[0] if result.data else None
        except Exception as e:
            logger.warning(f"Destination match for city {city.get('id')} failed: {e}")
            return None

    def _geocode_and_cache(self, q: str, limit: int) -> List[dict]:
        places = self.mapbox.geocode(q, limit=limit, types="place")
        rows = [
            {
                "name": p["name"],
                "country": p.get("country"),
                "admin_name": p.get("region"),
                "latitude": p.get("latitude"),
                "longitude": p.get("longitude"),
                "mapbox_id": p["mapbox_id"],
            }
            for p in places if p.get("mapbox_id") and p.get("name")
        ]
        if not rows:
            return []
        result = self.supabase.table("cities")\
            .upsert(rows, on_conflict="mapbox_id")\
            .execute()
        logger.info(f"Cached {len(result.data or [])} Mapbox cities for '{q}'")
        return result.data or []

    def search(self, q: str, limit: int = 10) -> CitySearchResponse:
        """Search known cities, falling back to Mapbox when nothing matches locally"""
        q = (q or "").strip()
        if len(q) < MIN_QUERY_LENGTH:
            raise HTTPException(status_code=400, detail="Query must be at least 2 characters")
        try:
            result = self.supabase.table("cities")\
                .select(CITY_COLUMNS)\
                .ilike("name", f"%{q}%")\
                .order("name")\
                .limit(limit)\
                .execute()
        except Exception as e:
            logger.error(f"Error searching cities for '{q}': {e}")
            raise HTTPException(status_code=500, detail="Failed to search cities")

        rows = result.data or []
        source = "database"
        if not rows and self.mapbox is not None and self.mapbox.access_token:
            rows = self._geocode_and_cache(q, limit)
            source = "mapbox"

        cities = []
        for row in rows:
            cities.append(CityResponse(**row, destination=self._match_destination(row)))
        return CitySearchResponse(cities=cities, source=source)
