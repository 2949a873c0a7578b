import logging
from datetime import date, timedelta
from supabase import Client
from withme.modules.itinerary_templates.schemas import (
    TemplateResponse, TemplateDetailResponse, TemplateItemResponse,
    TemplateUseRequest, TemplateUseResponse
)
from withme.modules.trips.schemas import TripCreate, DESCRIPTION_MAX_LENGTH
from withme.modules.trips.service import TripService
from typing import List, Optional
from fastapi import HTTPException
from pydantic import ValidationError

logger = logging.getLogger(__name__)


class TemplateItemsCopyError(Exception):
    """The trip was created but the template's items could not be copied into it"""

    def __init__(self, trip_id: str):
        self.trip_id = trip_id
        super().__init__(f"Failed to copy template items into trip {trip_id}")


def _timestamp(day_date: Optional[date], time_value: Optional[str]) -> Optional[str]:
    if not time_value:
        return None
    if day_date is None:
        return time_value
    return f"{day_date.isoformat()}T{time_value}"


def template_item_to_itinerary_row(
    item: dict,
    trip_id: str,
    user_id: str,
    start_date: Optional[date] = None
) -> dict:
    """Map a template item onto an itinerary item of the new trip"""
    day = item.get("day") or 1
    day_date = start_date + timedelta(days=day - 1) if start_date else None
    return {
        "trip_id": trip_id,
        "title": item["title"],
        "name": item["title"],
        "description": item.get("description"),
        "item_type": item.get("item_type") or "activity",
        "day_number": day,
        "position": item.get("item_order") or 0,
        "start_time": _timestamp(day_date, item.get("start_time")),
        "end_time": _timestamp(day_date, item.get("end_time")),
        "address": item.get("location"),
        "latitude": item.get("latitude"),
        "longitude": item.get("longitude"),
        "status": "suggested",
        "created_by": user_id,
    }


class TemplateService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def list_templates(self, limit: int = 20, offset: int = 0) -> List[TemplateResponse]:
        try:
            result = self.supabase.table("itinerary_templates")\
                .select("*")\
                .eq("is_published", True)\
                .order("created_at", desc=True)\
                .limit(limit)\
                .offset(offset)\
                .execute()
            return [TemplateResponse(**t) for t in result.data]
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error listing itinerary templates: {e}")
            raise HTTPException(status_code=500, detail="Failed to fetch itineraries")

    def _get_template_row(self, slug: str) -> dict:
        result = self.supabase.table("itinerary_templates")\
            .select("*")\
            .eq("slug", slug)\
            .limit(1)\
            .execute()
        if not result.data:
            raise HTTPException(status_code=404, detail="Itinerary not found")
        return result.data[0]

    def _get_items(self, template_id: str) -> List[dict]:
        result = self.supabase.table("itinerary_template_items")\
            .select("*")\
            .eq("template_id", template_id)\
            .order("day")\
            .order("item_order")\
            .execute()
        return result.data or []

    def get_template(self, slug: str) -> TemplateDetailResponse:
        try:
            template = self._get_template_row(slug)
            items = self._get_items(template["id"])
            return TemplateDetailResponse(
                **template,
                items=[TemplateItemResponse(**i) for i in items],
            )
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error fetching itinerary template {slug}: {e}")
            raise HTTPException(status_code=500, detail="Failed to fetch itinerary")

    def use_template(self, slug: str, request: TemplateUseRequest, user_id: str) -> TemplateUseResponse:
        """Create a trip for the user pre-filled with the template's items"""
        try:
            template = self._get_template_row(slug)
            items = self._get_items(template["id"])
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error loading itinerary template {slug}: {e}")
            raise HTTPException(status_code=500, detail="Failed to fetch itinerary")

        duration = template.get("duration_days") or 1
        end_date = request.start_date + timedelta(days=duration - 1) if request.start_date else None
        # Template descriptions are curated content and may exceed the trip limit
        description = request.description or (template.get("description") or "")[:DESCRIPTION_MAX_LENGTH] or None
        try:
            trip_data = TripCreate(
                name=request.name,
                description=description,
                start_date=request.start_date,
                end_date=end_date,
                destination_id=template.get("destination_id"),
            )
        except ValidationError as e:
            logger.warning(f"Itinerary template {slug} cannot seed a trip: {e}")
            raise HTTPException(status_code=400, detail="This itinerary cannot be used to create a trip")
        trip = TripService(self.supabase).create_trip(trip_data, user_id)

        if items:
            rows = [
                template_item_to_itinerary_row(i, trip.id, user_id, request.start_date)
                for i in items
            ]
            try:
                self.supabase.table("itinerary_items").insert(rows).execute()
            except Exception as e:
                logger.error(f"Error copying template {slug} items into trip {trip.id}: {e}")
                raise TemplateItemsCopyError(trip.id)

        logger.info(f"Trip {trip.id} created from itinerary template {slug}")
        return TemplateUseResponse(success=True, trip_id=trip.id)
