import logging
from collections import Counter
from datetime import datetime, timezone
from supabase import Client
from withme.modules.comments.schemas import (
    CommentCreate, CommentUpdate, CommentResponse,
    ReactionToggleResponse, ReactionCountsResponse
)
from withme.integrations.email import EmailService
from withme.config import settings
from typing import List, Optional
from fastapi import HTTPException

logger = logging.getLogger(__name__)


class CommentService:
    def __init__(self, supabase: Client, email_service: Optional[EmailService] = None):
        self.supabase = supabase
        self.email_service = email_service or EmailService()

    def get_comment(self, comment_id: str) -> dict:
        """Raw comment row; 404 when it does not exist"""
        return self._get_comment(comment_id)

    def _get_comment(self, comment_id: str) -> dict:
        result = self.supabase.table("comments")\
            .select("*")\
            .eq("id", comment_id)\
            .limit(1)\
            .execute()
        if not result.data:
            raise HTTPException(status_code=404, detail="Comment not found")
        return result.data[0]

    def list_comments(self, entity_type: str, entity_id: str) -> List[CommentResponse]:
        """Comments on an entity, oldest first"""
        try:
            result = self.supabase.table("comments")\
                .select("*")\
                .eq("content_type", entity_type)\
                .eq("content_id", entity_id)\
                .order("created_at")\
                .execute()
            return [CommentResponse.from_row(c) for c in result.data]
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error listing comments on {entity_type} {entity_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to fetch comments")

    def create_comment(self, comment_data: CommentCreate, user_id: str) -> CommentResponse:
        try:
            if comment_data.parent_id:
                parent = self.supabase.table("comments")\
                    .select("id, content_type, content_id")\
                    .eq("id", comment_data.parent_id)\
                    .limit(1)\
                    .execute()
                if not parent.data or parent.data[0]["content_id"] != comment_data.entity_id \
                        or parent.data[0]["content_type"] != comment_data.entity_type:
                    raise HTTPException(status_code=400, detail="Parent comment does not belong to this entity")

            result = self.supabase.table("comments").insert({
                "content_type": comment_data.entity_type,
                "content_id": comment_data.entity_id,
                "user_id": user_id,
                "content": comment_data.content,
                "parent_id": comment_data.parent_id,
                "attachment_url": comment_data.attachment_url,
                "attachment_type": comment_data.attachment_type,
                "is_edited": False,
                "is_deleted": False,
            }).execute()
            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to create comment")
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error creating comment: {e}")
            raise HTTPException(status_code=500, detail="Failed to create comment")

        if comment_data.entity_type == "trip":
            self._notify_trip_owner(comment_data, user_id)
        return CommentResponse.from_row(result.data[0])

    def _notify_trip_owner(self, comment_data: CommentCreate, commenter_id: str):
        try:
            trip = self.supabase.table("trips")\
                .select("name, created_by")\
                .eq("id", comment_data.entity_id)\
                .limit(1)\
                .execute()
            if not trip.data or trip.data[0]["created_by"] == commenter_id:
                return
            profiles = self.supabase.table("profiles")\
                .select("id, name, email")\
                .in_("id", [trip.data[0]["created_by"], commenter_id])\
                .execute()
        except Exception as e:
            logger.warning(f"Could not prepare comment notification: {e}")
            return
        by_id = {p["id"]: p for p in profiles.data or []}
        owner = by_id.get(trip.data[0]["created_by"])
        if not owner or not owner.get("email"):
            return
        commenter = by_id.get(commenter_id, {})
        self.email_service.send_comment_notification(
            to=owner["email"],
            commenter_name=commenter.get("name") or "Someone",
            trip_name=trip.data[0]["name"],
            comment_text=comment_data.content,
            trip_url=f"{settings.app_base_url}/trips/{comment_data.entity_id}",
            name=owner.get("name"),
        )

    def update_comment(self, comment_id: str, comment_data: CommentUpdate, user_id: str) -> CommentResponse:
        """Edit the caller's own comment; other users' comments read as missing"""
        try:
            result = self.supabase.table("comments")\
                .update({
                    "content": comment_data.content,
                    "is_edited": True,
                    "updated_at": datetime.now(timezone.utc).isoformat(),
                })\
                .eq("id", comment_id)\
                .eq("user_id", user_id)\
                .execute()
            if not result.data:
                raise HTTPException(status_code=404, detail="Comment not found")
            return CommentResponse.from_row(result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error updating comment {comment_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to update comment")

    def delete_comment(self, comment_id: str, user_id: str) -> bool:
        try:
            result = self.supabase.table("comments")\
                .delete()\
                .eq("id", comment_id)\
                .eq("user_id", user_id)\
                .execute()
            if not result.data:
                raise HTTPException(status_code=404, detail="Comment not found")
            return True
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error deleting comment {comment_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to delete comment")

    def get_replies(self, comment_id: str) -> List[CommentResponse]:
        try:
            self._get_comment(comment_id)
            result = self.supabase.table("comments")\
                .select("*")\
                .eq("parent_id", comment_id)\
                .order("created_at")\
                .execute()
            return [CommentResponse.from_row(c) for c in result.data]
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error fetching replies of {comment_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to fetch replies")

    def toggle_reaction(self, comment_id: str, emoji: str, user_id: str) -> ReactionToggleResponse:
        """Add the caller's reaction, or remove it if already present"""
        try:
            self._get_comment(comment_id)
            existing = self.supabase.table("comment_reactions")\
                .select("id")\
                .eq("comment_id", comment_id)\
                .eq("user_id", user_id)\
                .eq("emoji", emoji)\
                .limit(1)\
                .execute()
            if existing.data:
                self.supabase.table("comment_reactions")\
                    .delete()\
                    .eq("id", existing.data[0]["id"])\
                    .execute()
                return ReactionToggleResponse(reacted=False, emoji=emoji)

            self.supabase.table("comment_reactions").insert({
                "comment_id": comment_id,
                "user_id": user_id,
                "emoji": emoji,
            }).execute()
            return ReactionToggleResponse(reacted=True, emoji=emoji)
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error toggling reaction on {comment_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to update reaction")

    def reaction_counts(self, comment_id: str) -> ReactionCountsResponse:
        try:
            self._get_comment(comment_id)
            result = self.supabase.table("comment_reactions")\
                .select("emoji")\
                .eq("comment_id", comment_id)\
                .execute()
            return ReactionCountsResponse(counts=dict(Counter(r["emoji"] for r in result.data or [])))
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error counting reactions on {comment_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to fetch reactions")
