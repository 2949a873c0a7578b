import logging
from datetime import datetime, timezone
from supabase import Client
from withme.modules.trip_cities.schemas import TripCityAdd, TripCityUpdate, TripCityResponse
from typing import List
from fastapi import HTTPException

logger = logging.getLogger(__name__)

TRIP_CITY_SELECT = "*, city:cities(id, name, country, admin_name, latitude, longitude, mapbox_id)"


class TripCityService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def _find(self, trip_id: str, city_id: str, columns: str = "*") -> dict:
        result = self.supabase.table("trip_cities")\
            .select(columns)\
            .eq("trip_id", trip_id)\
            .eq("city_id", city_id)\
            .limit(1)\
            .execute()
        if not result.data:
            raise HTTPException(status_code=404, detail="City not found in this trip")
        return result.data[0]

    def list_cities(self, trip_id: str) -> List[TripCityResponse]:
        try:
            result = self.supabase.table("trip_cities")\
                .select(TRIP_CITY_SELECT)\
                .eq("trip_id", trip_id)\
                .order("position")\
                .execute()
            return [TripCityResponse(**c) for c in result.data]
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error listing cities of trip {trip_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to fetch trip cities")

    def add_city(self, trip_id: str, city_data: TripCityAdd) -> TripCityResponse:
        """Append a city stop at the end of the route"""
        try:
            city = self.supabase.table("cities")\
                .select("id")\
                .eq("id", city_data.city_id)\
                .limit(1)\
                .execute()
            if not city.data:
                raise HTTPException(status_code=404, detail="City not found")

            existing = self.supabase.table("trip_cities")\
                .select("city_id, position")\
                .eq("trip_id", trip_id)\
                .order("position", desc=True)\
                .execute()
            rows = existing.data or []
            if any(r["city_id"] == city_data.city_id for r in rows):
                raise HTTPException(status_code=400, detail="City is already part of this trip")
            position = rows[0]["position"] + 1 if rows else 0

            payload = city_data.model_dump(mode="json")
            payload.update({"trip_id": trip_id, "position": position})
            result = self.supabase.table("trip_cities").insert(payload).execute()
            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to add city to trip")
            return TripCityResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error adding city to trip {trip_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to add city to trip")

    def get_city(self, trip_id: str, city_id: str) -> TripCityResponse:
        try:
            return TripCityResponse(**self._find(trip_id, city_id, TRIP_CITY_SELECT))
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error fetching city {city_id} of trip {trip_id}: {e}")
            raise HTTPException(status_code=500, detail="An unexpected error occurred")

    def update_city(self, trip_id: str, city_id: str, city_data: TripCityUpdate) -> TripCityResponse:
        update_data = city_data.model_dump(mode="json", exclude_unset=True)
        if not update_data:
            raise HTTPException(status_code=400, detail="No fields provided for update")
        try:
            trip_city = self._find(trip_id, city_id, "id")
            update_data["updated_at"] = datetime.now(timezone.utc).isoformat()
            result = self.supabase.table("trip_cities")\
                .update(update_data)\
                .eq("id", trip_city["id"])\
                .execute()
            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to update city in trip")
            return TripCityResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error updating city {city_id} of trip {trip_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to update city in trip")

    def remove_city(self, trip_id: str, city_id: str) -> bool:
        """Detach sections, delete the stop, then close the gap in positions"""
        try:
            trip_city = self._find(trip_id, city_id, "id, position")

            self.supabase.table("itinerary_sections")\
                .update({"trip_city_id": None})\
                .eq("trip_city_id", trip_city["id"])\
                .execute()

            self.supabase.table("trip_cities")\
                .delete()\
                .eq("id", trip_city["id"])\
                .execute()

            later = self.supabase.table("trip_cities")\
                .select("id, position")\
                .eq("trip_id", trip_id)\
                .gt("position", trip_city["position"])\
                .execute()
            for city in later.data or []:
                self.supabase.table("trip_cities")\
                    .update({"position": city["position"] - 1})\
                    .eq("id", city["id"])\
                    .execute()
            return True
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error removing city {city_id} from trip {trip_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to remove city from trip")
