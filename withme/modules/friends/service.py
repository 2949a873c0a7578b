import logging
from datetime import datetime, timezone
from supabase import Client
from withme.modules.friends.schemas import (
    FriendRequestResponse, FriendRequestsResponse, FriendResponse
)
from typing import List
from fastapi import HTTPException

logger = logging.getLogger(__name__)

PROFILE_COLUMNS = "id, name, username, avatar_url"
REQUEST_SELECT = (
    f"*, sender:profiles!sender_id({PROFILE_COLUMNS}), "
    f"receiver:profiles!receiver_id({PROFILE_COLUMNS})"
)


class FriendService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def _are_friends(self, user_id: str, other_id: str) -> bool:
        result = self.supabase.table("friends")\
            .select("id")\
            .eq("user_id", user_id)\
            .eq("friend_id", other_id)\
            .limit(1)\
            .execute()
        return bool(result.data)

    def _pending_request(self, sender_id: str, receiver_id: str):
        result = self.supabase.table("friend_requests")\
            .select("*")\
            .eq("sender_id", sender_id)\
            .eq("receiver_id", receiver_id)\
            .eq("status", "pending")\
            .limit(1)\
            .execute()
        return result.data[0] if result.data else None

    def _make_friends(self, user_id: str, other_id: str):
        now = datetime.now(timezone.utc).isoformat()
        self.supabase.table("friends").upsert([
            {"user_id": user_id, "friend_id": other_id, "created_at": now},
            {"user_id": other_id, "friend_id": user_id, "created_at": now},
        ], on_conflict="user_id,friend_id").execute()

    def list_friends(self, user_id: str) -> List[FriendResponse]:
        try:
            result = self.supabase.table("friends")\
                .select(f"created_at, friend:profiles!friend_id({PROFILE_COLUMNS})")\
                .eq("user_id", user_id)\
                .order("created_at", desc=True)\
                .execute()
            return [
                FriendResponse(**row["friend"], since=row.get("created_at"))
                for row in result.data or [] if row.get("friend")
            ]
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error listing friends of {user_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to fetch friends")

    def list_requests(self, user_id: str) -> FriendRequestsResponse:
        """Pending requests sent to and by the user"""
        try:
            incoming = self.supabase.table("friend_requests")\
                .select(REQUEST_SELECT)\
                .eq("receiver_id", user_id)\
                .eq("status", "pending")\
                .order("created_at", desc=True)\
                .execute()
            outgoing = self.supabase.table("friend_requests")\
                .select(REQUEST_SELECT)\
                .eq("sender_id", user_id)\
                .eq("status", "pending")\
                .order("created_at", desc=True)\
                .execute()
            return FriendRequestsResponse(
                incoming=[FriendRequestResponse(**r) for r in incoming.data or []],
                outgoing=[FriendRequestResponse(**r) for r in outgoing.data or []],
            )
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error listing friend requests of {user_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to fetch friend requests")

    def send_request(self, sender_id: str, receiver_id: str) -> FriendRequestResponse:
        """Send a request, or accept the receiver's pending request to the sender"""
        if sender_id == receiver_id:
            raise HTTPException(status_code=400, detail="You cannot send a friend request to yourself")
        try:
            receiver = self.supabase.table("profiles")\
                .select("id")\
                .eq("id", receiver_id)\
                .limit(1)\
                .execute()
            if not receiver.data:
                raise HTTPException(status_code=404, detail="User not found")
            if self._are_friends(sender_id, receiver_id):
                raise HTTPException(status_code=400, detail="You are already friends")
            if self._pending_request(sender_id, receiver_id):
                raise HTTPException(status_code=400, detail="Friend request already sent")

            reverse = self._pending_request(receiver_id, sender_id)
            if reverse:
                return self.respond(reverse["id"], sender_id, accept=True)

            result = self.supabase.table("friend_requests").insert({
                "sender_id": sender_id,
                "receiver_id": receiver_id,
                "status": "pending",
            }).execute()
            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to send friend request")
            return FriendRequestResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error sending friend request {sender_id} -> {receiver_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to send friend request")

    def respond(self, request_id: str, user_id: str, accept: bool) -> FriendRequestResponse:
        """Accept or decline a pending request addressed to the user"""
        try:
            pending = self.supabase.table("friend_requests")\
                .select("*")\
                .eq("id", request_id)\
                .eq("receiver_id", user_id)\
                .eq("status", "pending")\
                .limit(1)\
                .execute()
            if not pending.data:
                raise HTTPException(status_code=404, detail="Friend request not found")

            result = self.supabase.table("friend_requests")\
                .update({
                    "status": "accepted" if accept else "declined",
                    "responded_at": datetime.now(timezone.utc).isoformat(),
                })\
                .eq("id", request_id)\
                .execute()
            if accept:
                self._make_friends(pending.data[0]["sender_id"], user_id)
            return FriendRequestResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error responding to friend request {request_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to respond to friend request")

    def remove_friend(self, user_id: str, friend_id: str) -> bool:
        try:
            if not self._are_friends(user_id, friend_id):
                raise HTTPException(status_code=404, detail="Friend not found")
            self.supabase.table("friends")\
                .delete()\
                .eq("user_id", user_id)\
                .eq("friend_id", friend_id)\
                .execute()
            self.supabase.table("friends")\
                .delete()\
                .eq("user_id", friend_id)\
                .eq("friend_id", user_id)\
                .execute()
            return True
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error removing friend {friend_id} of {user_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to remove friend")
