import logging
import secrets
from datetime import datetime, timezone
from supabase import Client
from withme.modules.trip_members.schemas import (
    TripMemberAdd, TripMemberUpdate, TripInviteCreate,
    TripMemberResponse, TripInvitationResponse
)
from withme.integrations.email import EmailService
from withme.config import settings
from withme.config.trip_roles import ADMIN
from typing import List, Optional
from fastapi import HTTPException

logger = logging.getLogger(__name__)

MEMBER_SELECT = "*, profile:profiles!user_id(id, name, username, avatar_url)"


class TripMemberService:
    def __init__(self, supabase: Client, email_service: Optional[EmailService] = None):
        self.supabase = supabase
        self.email_service = email_service or EmailService()

    def _get_member(self, trip_id: str, user_id: str) -> Optional[dict]:
        result = self.supabase.table("trip_members")\
            .select("*")\
            .eq("trip_id", trip_id)\
            .eq("user_id", user_id)\
            .limit(1)\
            .execute()
        return result.data[0] if result.data else None

    def _admin_count(self, trip_id: str) -> int:
        result = self.supabase.table("trip_members")\
            .select("user_id")\
            .eq("trip_id", trip_id)\
            .eq("role", ADMIN)\
            .execute()
        return len(result.data or [])

    def _trip_name(self, trip_id: str) -> str:
        result = self.supabase.table("trips")\
            .select("name")\
            .eq("id", trip_id)\
            .limit(1)\
            .execute()
        return result.data[0]["name"] if result.data else "your trip"

    def _display_name(self, user_id: str) -> str:
        result = self.supabase.table("profiles")\
            .select("name, username")\
            .eq("id", user_id)\
            .limit(1)\
            .execute()
        if result.data:
            return result.data[0].get("name") or result.data[0].get("username") or "A friend"
        return "A friend"

    def list_members(self, trip_id: str) -> List[TripMemberResponse]:
        """Members of a trip with their profiles"""
        try:
            result = self.supabase.table("trip_members")\
                .select(MEMBER_SELECT)\
                .eq("trip_id", trip_id)\
                .order("joined_at")\
                .execute()
            return [TripMemberResponse(**m) for m in result.data]
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error listing members of trip {trip_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to fetch trip members")

    def add_member(self, trip_id: str, member_data: TripMemberAdd) -> TripMemberResponse:
        try:
            if self._get_member(trip_id, member_data.user_id):
                raise HTTPException(status_code=400, detail="User is already a member of this trip")

            result = self.supabase.table("trip_members").insert({
                "trip_id": trip_id,
                "user_id": member_data.user_id,
                "role": member_data.role,
                "joined_at": datetime.now(timezone.utc).isoformat(),
            }).execute()
            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to add member")
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error adding member to trip {trip_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to add member")

        self._notify_added(trip_id, member_data)
        return TripMemberResponse(**result.data[0])

    def _notify_added(self, trip_id: str, member_data: TripMemberAdd):
        try:
            profile = self.supabase.table("profiles")\
                .select("email, name")\
                .eq("id", member_data.user_id)\
                .limit(1)\
                .execute()
        except Exception as e:
            logger.warning(f"Could not look up new member {member_data.user_id}: {e}")
            return
        if not profile.data or not profile.data[0].get("email"):
            return
        self.email_service.send_trip_update(
            to=profile.data[0]["email"],
            trip_name=self._trip_name(trip_id),
            update_type="member_joined",
            message=f"You were added to this trip as {member_data.role}.",
            trip_url=f"{settings.app_base_url}/trips/{trip_id}",
            name=profile.data[0].get("name"),
        )

    def invite(self, trip_id: str, invite_data: TripInviteCreate, inviter_id: str) -> TripInvitationResponse:
        """Record an email invitation and send it"""
        try:
            token = secrets.token_urlsafe(32)
            result = self.supabase.table("trip_invitations").insert({
                "trip_id": trip_id,
                "email": invite_data.email,
                "role": invite_data.role,
                "token": token,
                "invited_by": inviter_id,
                "status": "pending",
            }).execute()
            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to create invitation")
            invitation = result.data[0]
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error inviting {invite_data.email} to trip {trip_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to create invitation")

        sent = self.email_service.send_trip_invitation(
            to=invite_data.email,
            inviter_name=self._display_name(inviter_id),
            trip_name=self._trip_name(trip_id),
            invitation_url=f"{settings.app_base_url}/invite/{token}",
        )
        return TripInvitationResponse(**invitation, email_sent=sent)

    def update_role(self, trip_id: str, user_id: str, update: TripMemberUpdate) -> TripMemberResponse:
        try:
            member = self._get_member(trip_id, user_id)
            if not member:
                raise HTTPException(status_code=404, detail="Member not found")
            if member["role"] == ADMIN and update.role != ADMIN and self._admin_count(trip_id) <= 1:
                raise HTTPException(status_code=400, detail="A trip must keep at least one admin")

            result = self.supabase.table("trip_members")\
                .update({"role": update.role})\
                .eq("trip_id", trip_id)\
                .eq("user_id", user_id)\
                .execute()
            if not result.data:
                raise HTTPException(status_code=404, detail="Member not found")
            return TripMemberResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error updating role of {user_id} on trip {trip_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to update member role")

    def remove_member(self, trip_id: str, user_id: str) -> bool:
        try:
            member = self._get_member(trip_id, user_id)
            if not member:
                raise HTTPException(status_code=404, detail="Member not found")
            if member["role"] == ADMIN and self._admin_count(trip_id) <= 1:
                raise HTTPException(status_code=400, detail="A trip must keep at least one admin")

            self.supabase.table("trip_members")\
                .delete()\
                .eq("trip_id", trip_id)\
                .eq("user_id", user_id)\
                .execute()
            return True
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error removing {user_id} from trip {trip_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to remove member")
