import logging
import math
import uuid
from supabase import Client
from withme.modules.destinations.schemas import (
    DestinationResponse, DestinationListResponse, PaginationMeta
)
from withme.config.trip_roles import CONTINENT_AVG_DAYS, DEFAULT_AVG_DAYS
from typing import Optional
from fastapi import HTTPException

logger = logging.getLogger(__name__)

TRAVELERS_PER_POPULARITY_POINT = 50


def add_trending_fields(destination: dict) -> dict:
    """Fill avg_days and travelers_count for the trending listing when the row lacks them"""
    row = dict(destination)
    if row.get("avg_days") is None:
        row["avg_days"] = CONTINENT_AVG_DAYS.get(row.get("continent"), DEFAULT_AVG_DAYS)
    if row.get("travelers_count") is None:
        row["travelers_count"] = (row.get("popularity") or 0) * TRAVELERS_PER_POPULARITY_POINT
    return row


def _is_uuid(value: str) -> bool:
    try:
        uuid.UUID(value)
        return True
    except ValueError:
        return False


class DestinationService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def list_destinations(
        self,
        page: int = 1,
        limit: int = 10,
        sort: str = "popularity",
        continent: Optional[str] = None,
        country: Optional[str] = None,
        search: Optional[str] = None
    ) -> DestinationListResponse:
        try:
            query = self.supabase.table("destinations").select("*", count="exact")
            if continent:
                query = query.eq("continent", continent)
            if country:
                query = query.eq("country", country)
            if search:
                query = query.ilike("city", f"%{search}%")

            if sort == "name":
                query = query.order("city")
            else:
                query = query.order("popularity", desc=True)

            start = (page - 1) * limit
            result = query.range(start, start + limit - 1).execute()

            rows = result.data or []
            if sort == "trending":
                rows = [add_trending_fields(r) for r in rows]
            total = result.count if result.count is not None else len(rows)
            return DestinationListResponse(
                destinations=[DestinationResponse(**r) for r in rows],
                meta=PaginationMeta(
                    total=total,
                    page=page,
                    limit=limit,
                    total_pages=math.ceil(total / limit) if total else 0,
                ),
            )
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error listing destinations: {e}")
            raise HTTPException(status_code=500, detail="Failed to fetch destinations")

    def get_destination(self, slug_or_id: str) -> DestinationResponse:
        """Look a destination up by slug, or by id when given a UUID"""
        column = "id" if _is_uuid(slug_or_id) else "slug"
        try:
            result = self.supabase.table("destinations")\
                .select("*")\
                .eq(column, slug_or_id)\
                .limit(1)\
                .execute()
            if not result.data:
                raise HTTPException(status_code=404, detail="Destination not found")
            return DestinationResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error fetching destination {slug_or_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to fetch destination")
