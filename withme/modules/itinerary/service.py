import logging
from datetime import datetime, timezone
from supabase import Client
from withme.modules.itinerary.schemas import (
    ItineraryItemCreate, ItineraryItemUpdate, ItinerarySectionCreate,
    ItineraryImport, ReorderRequest,
    ItineraryItemResponse, ItinerarySectionResponse, ItineraryResponse,
    ImportResponse, TravelLeg
)
from withme.integrations.mapbox import MapboxClient
from typing import List, Optional, Dict
from fastapi import HTTPException

logger = logging.getLogger(__name__)


class ItineraryService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def _next_item_position(self, trip_id: str, section_id: Optional[str]) -> int:
        query = self.supabase.table("itinerary_items")\
            .select("position")\
            .eq("trip_id", trip_id)
        if section_id:
            query = query.eq("section_id", section_id)
        else:
            query = query.is_("section_id", "null")
        result = query.order("position", desc=True).limit(1).execute()
        if result.data and result.data[0].get("position") is not None:
            return result.data[0]["position"] + 1
        return 0

    def _next_section_position(self, trip_id: str) -> int:
        result = self.supabase.table("itinerary_sections")\
            .select("position")\
            .eq("trip_id", trip_id)\
            .order("position", desc=True)\
            .limit(1)\
            .execute()
        if result.data and result.data[0].get("position") is not None:
            return result.data[0]["position"] + 1
        return 0

    def _check_section(self, trip_id: str, section_id: Optional[str]):
        if not section_id:
            return
        result = self.supabase.table("itinerary_sections")\
            .select("id")\
            .eq("id", section_id)\
            .eq("trip_id", trip_id)\
            .limit(1)\
            .execute()
        if not result.data:
            raise HTTPException(status_code=400, detail="Section does not belong to this trip")

    def get_itinerary(self, trip_id: str) -> ItineraryResponse:
        """All sections and items of a trip, each ordered by position"""
        try:
            sections = self.supabase.table("itinerary_sections")\
                .select("*")\
                .eq("trip_id", trip_id)\
                .order("position")\
                .execute()
            items = self.supabase.table("itinerary_items")\
                .select("*")\
                .eq("trip_id", trip_id)\
                .order("position")\
                .execute()
            return ItineraryResponse(
                sections=[ItinerarySectionResponse(**s) for s in sections.data],
                items=[ItineraryItemResponse(**i) for i in items.data],
            )
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error fetching itinerary for trip {trip_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to fetch itinerary")

    def create_item(self, trip_id: str, item_data: ItineraryItemCreate, user_id: str) -> ItineraryItemResponse:
        try:
            self._check_section(trip_id, item_data.section_id)
            payload = item_data.model_dump()
            payload.update({
                "trip_id": trip_id,
                "created_by": user_id,
                "status": "suggested",
                "position": self._next_item_position(trip_id, item_data.section_id),
            })
            result = self.supabase.table("itinerary_items").insert(payload).execute()
            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to create itinerary item")
            return ItineraryItemResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error creating itinerary item on trip {trip_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to create itinerary item")

    def create_section(self, trip_id: str, section_data: ItinerarySectionCreate) -> ItinerarySectionResponse:
        try:
            payload = section_data.model_dump(mode="json", exclude={"name"})
            payload["trip_id"] = trip_id
            payload["position"] = self._next_section_position(trip_id)
            result = self.supabase.table("itinerary_sections").insert(payload).execute()
            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to create section")
            return ItinerarySectionResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error creating section on trip {trip_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to create section")

    def import_places(self, trip_id: str, import_data: ItineraryImport, user_id: str) -> ImportResponse:
        """Bulk-add a place list to the unscheduled bucket"""
        if not import_data.items:
            raise HTTPException(status_code=400, detail="No places to import")
        try:
            start = self._next_item_position(trip_id, None)
            rows = []
            for offset, place in enumerate(import_data.items):
                row = place.to_item_fields()
                row.update({
                    "trip_id": trip_id,
                    "section_id": None,
                    "status": "suggested",
                    "position": start + offset,
                    "created_by": user_id,
                })
                rows.append(row)
            result = self.supabase.table("itinerary_items").insert(rows).execute()
            imported = [ItineraryItemResponse(**i) for i in (result.data or [])]
            return ImportResponse(
                success=True,
                message=f"Imported {len(imported)} places",
                data=imported,
                imported_count=len(imported),
            )
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error importing places into trip {trip_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to import places")

    def get_item(self, trip_id: str, item_id: str) -> ItineraryItemResponse:
        try:
            result = self.supabase.table("itinerary_items")\
                .select("*")\
                .eq("id", item_id)\
                .eq("trip_id", trip_id)\
                .limit(1)\
                .execute()
            if not result.data:
                raise HTTPException(status_code=404, detail="Itinerary item not found")
            return ItineraryItemResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error fetching itinerary item {item_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to fetch itinerary item")

    def update_item(self, trip_id: str, item_id: str, item_data: ItineraryItemUpdate) -> ItineraryItemResponse:
        update_data = item_data.model_dump(exclude_unset=True)
        if not update_data:
            raise HTTPException(status_code=400, detail="No fields provided for update")
        if "title" in update_data and "name" not in update_data:
            update_data["name"] = update_data["title"]
        elif "name" in update_data and "title" not in update_data:
            update_data["title"] = update_data["name"]
        try:
            self._check_section(trip_id, update_data.get("section_id"))
            update_data["updated_at"] = datetime.now(timezone.utc).isoformat()
            result = self.supabase.table("itinerary_items")\
                .update(update_data)\
                .eq("id", item_id)\
                .eq("trip_id", trip_id)\
                .execute()
            if not result.data:
                raise HTTPException(status_code=404, detail="Itinerary item not found")
            return ItineraryItemResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error updating itinerary item {item_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to update itinerary item")

    def delete_item(self, trip_id: str, item_id: str) -> bool:
        try:
            result = self.supabase.table("itinerary_items")\
                .delete()\
                .eq("id", item_id)\
                .eq("trip_id", trip_id)\
                .execute()
            if not result.data:
                raise HTTPException(status_code=404, detail="Itinerary item not found")
            return True
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error deleting itinerary item {item_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to delete itinerary item")

    def reorder(self, trip_id: str, request: ReorderRequest) -> List[ItineraryItemResponse]:
        """Move the listed items into a section, positioned in list order"""
        if len(set(request.item_ids)) != len(request.item_ids):
            raise HTTPException(status_code=400, detail="Duplicate item IDs")
        try:
            self._check_section(trip_id, request.section_id)
            existing = self.supabase.table("itinerary_items")\
                .select("id")\
                .eq("trip_id", trip_id)\
                .in_("id", request.item_ids)\
                .execute()
            found = {row["id"] for row in existing.data or []}
            missing = [i for i in request.item_ids if i not in found]
            if missing:
                raise HTTPException(status_code=400, detail=f"Items not found in this trip: {', '.join(missing)}")

            updated = []
            for position, item_id in enumerate(request.item_ids):
                result = self.supabase.table("itinerary_items")\
                    .update({"section_id": request.section_id, "position": position})\
                    .eq("id", item_id)\
                    .eq("trip_id", trip_id)\
                    .execute()
                updated.extend(ItineraryItemResponse(**i) for i in result.data or [])
            return updated
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error reordering items on trip {trip_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to reorder items")

    def travel_times(self, trip_id: str, mapbox: MapboxClient, profile: str = "walking") -> Dict[str, TravelLeg]:
        """Travel time from each located item to the next located item in the same section"""
        itinerary = self.get_itinerary(trip_id)
        by_section: Dict[str, List[ItineraryItemResponse]] = {}
        for item in itinerary.items:
            if item.section_id and item.latitude is not None and item.longitude is not None:
                by_section.setdefault(item.section_id, []).append(item)

        legs: Dict[str, TravelLeg] = {}
        for section_items in by_section.values():
            if len(section_items) < 2:
                continue
            coordinates = [(i.longitude, i.latitude) for i in section_items]
            route = mapbox.route_legs(coordinates, profile)
            for origin, target, leg in zip(section_items, section_items[1:], route):
                legs[origin.id] = TravelLeg(
                    to_item_id=target.id,
                    duration_seconds=leg["duration_seconds"],
                    distance_meters=leg["distance_meters"],
                    profile=profile,
                )
        return legs
