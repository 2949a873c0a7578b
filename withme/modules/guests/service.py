import logging
from datetime import datetime, timezone
from supabase import Client
from withme.modules.guests.schemas import GuestClaimResponse
from typing import Dict
from fastapi import HTTPException

logger = logging.getLogger(__name__)

# (table, owner column) pairs moved after trips and memberships
OWNED_COLUMNS = [
    ("itinerary_items", "created_by"),
    ("comments", "user_id"),
    ("trip_notes", "created_by"),
    ("group_plan_ideas", "created_by"),
]


class GuestMigrationService:
    """Moves everything a guest created over to a registered account.

    Each step is its own statement; a failure part-way leaves earlier
    steps applied, and the migration can simply be re-run.
    """

    def __init__(self, supabase: Client):
        self.supabase = supabase

    def resolve_guest_user(self, guest_token: str) -> str:
        result = self.supabase.table("guest_tokens")\
            .select("user_id")\
            .eq("token", guest_token)\
            .is_("claimed_at", "null")\
            .limit(1)\
            .execute()
        if not result.data:
            raise HTTPException(status_code=404, detail="Guest session not found")
        return result.data[0]["user_id"]

    def _reassign(self, table: str, column: str, guest_user_id: str, user_id: str) -> int:
        result = self.supabase.table(table)\
            .update({column: user_id})\
            .eq(column, guest_user_id)\
            .execute()
        return len(result.data or [])

    def _move_memberships(self, guest_user_id: str, user_id: str) -> int:
        """Reassign guest memberships, dropping those on trips the user already belongs to"""
        guest_rows = self.supabase.table("trip_members")\
            .select("id, trip_id")\
            .eq("user_id", guest_user_id)\
            .execute()
        if not guest_rows.data:
            return 0
        existing = self.supabase.table("trip_members")\
            .select("trip_id")\
            .eq("user_id", user_id)\
            .in_("trip_id", [r["trip_id"] for r in guest_rows.data])\
            .execute()
        already_member = {r["trip_id"] for r in existing.data or []}

        moved = 0
        for row in guest_rows.data:
            if row["trip_id"] in already_member:
                self.supabase.table("trip_members").delete().eq("id", row["id"]).execute()
                continue
            self.supabase.table("trip_members")\
                .update({"user_id": user_id})\
                .eq("id", row["id"])\
                .execute()
            moved += 1
        return moved

    def migrate(self, guest_user_id: str, user_id: str) -> Dict[str, int]:
        updated: Dict[str, int] = {}
        updated["trips"] = self._reassign("trips", "created_by", guest_user_id, user_id)
        updated["trip_members"] = self._move_memberships(guest_user_id, user_id)
        for table, column in OWNED_COLUMNS:
            updated[table] = self._reassign(table, column, guest_user_id, user_id)
        return updated

    def claim(self, guest_token: str, user_id: str) -> GuestClaimResponse:
        guest_user_id = self.resolve_guest_user(guest_token)
        if guest_user_id == user_id:
            raise HTTPException(status_code=400, detail="Guest session already belongs to this user")
        try:
            updated = self.migrate(guest_user_id, user_id)
            self.supabase.table("guest_tokens")\
                .update({
                    "claimed_by": user_id,
                    "claimed_at": datetime.now(timezone.utc).isoformat(),
                })\
                .eq("token", guest_token)\
                .execute()
            self.supabase.table("profiles")\
                .delete()\
                .eq("id", guest_user_id)\
                .eq("is_guest", True)\
                .execute()
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error migrating guest {guest_user_id} to {user_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to claim guest data")

        logger.info(f"Guest {guest_user_id} claimed by {user_id}: {updated}")
        return GuestClaimResponse(guest_user_id=guest_user_id, user_id=user_id, updated=updated)
