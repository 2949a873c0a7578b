import logging
from datetime import datetime, timezone
from supabase import Client
from withme.modules.profiles.schemas import ProfileUpdate, ProfileResponse, PublicProfileResponse
from fastapi import HTTPException

logger = logging.getLogger(__name__)


class ProfileService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def _fetch(self, user_id: str) -> dict:
        result = self.supabase.table("profiles")\
            .select("*")\
            .eq("id", user_id)\
            .limit(1)\
            .execute()
        if not result.data:
            raise HTTPException(status_code=404, detail="Profile not found")
        return result.data[0]

    def get_profile(self, user_id: str) -> ProfileResponse:
        """Full profile of the given user"""
        try:
            return ProfileResponse(**self._fetch(user_id))
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error fetching profile {user_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to fetch profile")

    def get_public_profile(self, user_id: str) -> PublicProfileResponse:
        try:
            return PublicProfileResponse(**self._fetch(user_id))
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error fetching profile {user_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to fetch profile")

    def update_profile(self, user_id: str, profile_data: ProfileUpdate) -> ProfileResponse:
        update_data = profile_data.model_dump(exclude_unset=True)
        if not update_data:
            raise HTTPException(status_code=400, detail="No fields provided for update")
        try:
            if update_data.get("username"):
                taken = self.supabase.table("profiles")\
                    .select("id")\
                    .eq("username", update_data["username"])\
                    .neq("id", user_id)\
                    .limit(1)\
                    .execute()
                if taken.data:
                    raise HTTPException(status_code=400, detail="Username is already taken")

            update_data["updated_at"] = datetime.now(timezone.utc).isoformat()
            result = self.supabase.table("profiles")\
                .update(update_data)\
                .eq("id", user_id)\
                .execute()

            if not result.data:
                raise HTTPException(status_code=404, detail="Profile not found")

            return ProfileResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error updating profile {user_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to update profile")
