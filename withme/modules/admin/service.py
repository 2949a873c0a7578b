import logging
from supabase import Client
from withme.modules.admin.schemas import AdminStatsResponse, AdminUserResponse
from typing import List, Optional
from fastapi import HTTPException

logger = logging.getLogger(__name__)

STAT_TABLES = {
    "total_users": "profiles",
    "total_trips": "trips",
    "total_destinations": "destinations",
    "total_itinerary_items": "itinerary_items",
    "total_comments": "comments",
    "total_group_plan_ideas": "group_plan_ideas",
}


def average(total: float, count: int) -> float:
    if not count:
        return 0
    return round(total / count, 2)


class AdminService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def _count(self, table: str) -> int:
        result = self.supabase.table(table)\
            .select("id", count="exact")\
            .limit(1)\
            .execute()
        return result.count or 0

    def get_stats(self) -> AdminStatsResponse:
        try:
            counts = {key: self._count(table) for key, table in STAT_TABLES.items()}
            total_members = self._count("trip_members")
            return AdminStatsResponse(
                **counts,
                avg_members_per_trip=average(total_members, counts["total_trips"]),
                avg_items_per_trip=average(counts["total_itinerary_items"], counts["total_trips"]),
            )
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error computing admin stats: {e}")
            raise HTTPException(status_code=500, detail="Failed to fetch stats")

    def list_users(self, limit: int = 50, offset: int = 0, search: Optional[str] = None) -> List[AdminUserResponse]:
        try:
            query = self.supabase.table("profiles").select("*")
            if search:
                query = query.ilike("name", f"%{search}%")
            result = query.order("created_at", desc=True)\
                .limit(limit)\
                .offset(offset)\
                .execute()
            return [AdminUserResponse(**p) for p in result.data]
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error listing users: {e}")
            raise HTTPException(status_code=500, detail="Failed to fetch users")

    def set_admin(self, user_id: str, is_admin: bool) -> AdminUserResponse:
        try:
            result = self.supabase.table("profiles")\
                .update({"is_admin": is_admin})\
                .eq("id", user_id)\
                .execute()
            if not result.data:
                raise HTTPException(status_code=404, detail="User not found")
            logger.info(f"Admin flag of {user_id} set to {is_admin}")
            return AdminUserResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error updating user {user_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to update user")
