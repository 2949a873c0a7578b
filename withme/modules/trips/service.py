import logging
import secrets
import uuid
from datetime import date, datetime, timedelta, timezone
from supabase import Client
from withme.modules.trips.schemas import (
    TripCreate, TripUpdate, TripResponse, TripDetailResponse,
    GuestTripCreate, GuestTripResponse, default_guest_items
)
from withme.config import settings
from withme.config.trip_roles import ADMIN
from typing import List, Optional, Dict, Any, Tuple
from fastapi import HTTPException

logger = logging.getLogger(__name__)

TRIP_DETAIL_SELECT = "*, destination:destinations(*), tags:trip_tags(tags(*))"


def new_guest_token() -> str:
    return f"guest_{secrets.token_hex(16)}"


class TripService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def create_trip(self, trip_data: TripCreate, user_id: str) -> TripResponse:
        """Create a trip and make the creator its admin"""
        try:
            payload = trip_data.model_dump(mode="json")
            payload["created_by"] = user_id
            payload["status"] = "planning"
            if trip_data.start_date and trip_data.end_date:
                payload["duration_days"] = (trip_data.end_date - trip_data.start_date).days + 1

            result = self.supabase.table("trips").insert(payload).execute()
            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to create trip")
            trip = result.data[0]

            self.supabase.table("trip_members").insert({
                "trip_id": trip["id"],
                "user_id": user_id,
                "role": ADMIN,
                "joined_at": datetime.now(timezone.utc).isoformat(),
            }).execute()

            return TripResponse(**trip, user_role=ADMIN)
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error creating trip: {e}")
            raise HTTPException(status_code=500, detail="Failed to create trip")

    def list_trips(self, user_id: str, limit: int = 10, offset: int = 0) -> List[TripResponse]:
        """Trips the user is a member of, newest first"""
        try:
            members_result = self.supabase.table("trip_members")\
                .select("trip_id, role")\
                .eq("user_id", user_id)\
                .execute()
            if not members_result.data:
                return []
            roles = {m["trip_id"]: m["role"] for m in members_result.data}

            result = self.supabase.table("trips")\
                .select("*")\
                .in_("id", list(roles))\
                .order("created_at", desc=True)\
                .limit(limit)\
                .offset(offset)\
                .execute()
            return [TripResponse(**trip, user_role=roles.get(trip["id"])) for trip in result.data]
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error listing trips for {user_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to fetch trips")

    def get_trip(self, trip_id: str, user_role: Optional[str]) -> TripDetailResponse:
        """Trip with destination and flattened tags"""
        try:
            result = self.supabase.table("trips")\
                .select(TRIP_DETAIL_SELECT)\
                .eq("id", trip_id)\
                .limit(1)\
                .execute()
            if not result.data:
                raise HTTPException(status_code=404, detail="Trip not found")
            trip = dict(result.data[0])
            trip["tags"] = [t["tags"] for t in (trip.get("tags") or []) if t.get("tags")]
            return TripDetailResponse(trip=trip, user_role=user_role)
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error fetching trip {trip_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to fetch trip data")

    def update_trip(self, trip_id: str, trip_data: TripUpdate) -> TripDetailResponse:
        update_data = trip_data.model_dump(mode="json", exclude_unset=True)
        if not update_data:
            raise HTTPException(status_code=400, detail="No fields provided for update")
        try:
            update_data["updated_at"] = datetime.now(timezone.utc).isoformat()
            result = self.supabase.table("trips")\
                .update(update_data)\
                .eq("id", trip_id)\
                .execute()
            if not result.data:
                raise HTTPException(status_code=404, detail="Trip not found")
            return self.get_trip(trip_id, None)
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error updating trip {trip_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to update trip")

    def delete_trip(self, trip_id: str) -> bool:
        try:
            result = self.supabase.table("trips")\
                .delete()\
                .eq("id", trip_id)\
                .execute()
            if not result.data:
                raise HTTPException(status_code=404, detail="Trip not found")
            return True
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error deleting trip {trip_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to delete trip")


class GuestTripService:
    """Creates starter trips for anonymous visitors and signed-in users alike.

    Runs with the service-role client: guests have no session, so RLS would
    reject every write. Steps after the trip insert are best effort and only
    logged on failure.
    """

    def __init__(self, supabase: Client):
        self.supabase = supabase

    def _find_or_create_city(self, destination: str) -> Dict[str, Any]:
        cities = self.supabase.table("cities")\
            .select("id, name, country")\
            .ilike("name", f"%{destination}%")\
            .limit(1)\
            .execute()
        if cities.data:
            return cities.data[0]
        created = self.supabase.table("cities").insert({"name": destination}).execute()
        if not created.data:
            raise HTTPException(status_code=500, detail="Failed to create city")
        return created.data[0]

    def _resolve_guest(self, cookie_token: Optional[str]) -> Tuple[str, str]:
        """Guest user id and token, reusing the identity behind an existing cookie"""
        if cookie_token:
            existing = self.supabase.table("guest_tokens")\
                .select("user_id")\
                .eq("token", cookie_token)\
                .is_("claimed_at", "null")\
                .limit(1)\
                .execute()
            if existing.data:
                return existing.data[0]["user_id"], cookie_token
        return str(uuid.uuid4()), new_guest_token()

    def _ensure_profile(self, user_id: str, user_data: Optional[dict]):
        if user_data:
            metadata = user_data.get("user_metadata") or {}
            self.supabase.table("profiles").upsert({
                "id": user_id,
                "name": metadata.get("full_name") or "User",
                "avatar_url": metadata.get("avatar_url"),
                "is_guest": False,
            }, on_conflict="id").execute()
            return
        existing = self.supabase.table("profiles")\
            .select("id")\
            .eq("id", user_id)\
            .limit(1)\
            .execute()
        if not existing.data:
            self.supabase.table("profiles").insert({
                "id": user_id,
                "name": "Guest",
                "is_guest": True,
            }).execute()

    def create_guest_trip(
        self,
        trip_data: GuestTripCreate,
        user_data: Optional[dict],
        cookie_token: Optional[str] = None,
    ) -> GuestTripResponse:
        destination = trip_data.destination.strip()
        if not destination:
            raise HTTPException(status_code=400, detail="Destination is required")
        try:
            city = self._find_or_create_city(destination)
            city_name = city.get("name") or destination
            country = city.get("country") or ""

            is_guest = user_data is None
            guest_token = None
            if is_guest:
                user_id, guest_token = self._resolve_guest(cookie_token)
            else:
                user_id = user_data["id"]

            try:
                self._ensure_profile(user_id, user_data)
            except Exception as e:
                logger.error(f"Error creating profile for {user_id}: {e}")
                raise HTTPException(status_code=500, detail="Failed to create guest profile")

            days = settings.guest_trip_days
            start = date.today()
            end = start + timedelta(days=days - 1)
            trip_payload = {
                "name": trip_data.custom_name or f"New trip to {city_name}{', ' + country if country else ''}",
                "description": f"Explore {city_name}{' in ' + country if country else ''}",
                "start_date": start.isoformat(),
                "end_date": end.isoformat(),
                "duration_days": days,
                "created_by": user_id,
                "city_id": city["id"],
                "destination_name": city_name,
                "privacy_setting": "private",
                "status": "planning",
            }
            if is_guest:
                trip_payload["is_guest"] = True

            trip_result = self.supabase.table("trips").insert(trip_payload).execute()
            if not trip_result.data:
                raise HTTPException(status_code=500, detail="Failed to create trip")
            trip_id = trip_result.data[0]["id"]
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error creating guest trip for '{destination}': {e}")
            raise HTTPException(status_code=500, detail="Failed to create trip")

        if is_guest:
            self._best_effort("store guest token", lambda: self.supabase.table("guest_tokens").insert({
                "token": guest_token,
                "user_id": user_id,
                "trip_id": trip_id,
                "created_at": datetime.now(timezone.utc).isoformat(),
            }).execute())

        self._best_effort("add admin member", lambda: self.supabase.table("trip_members").insert({
            "trip_id": trip_id,
            "user_id": user_id,
            "role": ADMIN,
            "joined_at": datetime.now(timezone.utc).isoformat(),
            "is_guest": is_guest,
        }).execute())

        sections = [
            {
                "trip_id": trip_id,
                "title": f"Day {day}",
                "day_number": day,
                "position": day,
                "date": (start + timedelta(days=day - 1)).isoformat(),
            }
            for day in range(1, days + 1)
        ]
        section_result = self._best_effort(
            "create itinerary sections",
            lambda: self.supabase.table("itinerary_sections").insert(sections).execute()
        )
        section_ids = {}
        if section_result is not None and section_result.data:
            section_ids = {s["day_number"]: s["id"] for s in section_result.data}

        items = [
            {
                "trip_id": trip_id,
                "section_id": section_ids.get(item.day_number),
                "title": item.title,
                "day_number": item.day_number,
                "position": item.position,
                "item_type": item.item_type,
                "description": item.description,
                "status": "suggested",
                "created_by": user_id,
            }
            for item in default_guest_items(city_name)
        ]
        self._best_effort(
            "create default itinerary items",
            lambda: self.supabase.table("itinerary_items").insert(items).execute()
        )

        logger.info(f"Created {'guest' if is_guest else 'user'} trip {trip_id} for {city_name}")
        return GuestTripResponse(trip_id=trip_id, is_guest=is_guest, guest_token=guest_token)

    @staticmethod
    def _best_effort(step: str, action):
        try:
            return action()
        except Exception as e:
            logger.warning(f"Guest trip setup could not {step}: {e}")
            return None
