import logging
from datetime import datetime, timezone
from supabase import Client
from withme.modules.groups.schemas import (
    GroupCreate, GroupUpdate, GroupResponse, GroupDetailResponse,
    GroupMemberAdd, GroupMemberResponse,
    PlanIdeaCreate, PlanIdeaUpdate, PlanIdeaResponse
)
from typing import List, Optional
from fastapi import HTTPException

logger = logging.getLogger(__name__)

MEMBER_SELECT = "*, profile:profiles!user_id(id, name, username, avatar_url)"


class GroupService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def get_group_row(self, group_id: str) -> dict:
        result = self.supabase.table("groups")\
            .select("*")\
            .eq("id", group_id)\
            .limit(1)\
            .execute()
        if not result.data:
            raise HTTPException(status_code=404, detail="Group not found")
        return result.data[0]

    def create_group(self, group_data: GroupCreate, user_id: str) -> GroupResponse:
        """Create a group with the creator as its admin"""
        try:
            result = self.supabase.table("groups").insert({
                **group_data.model_dump(),
                "created_by": user_id,
            }).execute()
            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to create group")
            group = result.data[0]

            self.supabase.table("group_members").insert({
                "group_id": group["id"],
                "user_id": user_id,
                "role": "admin",
            }).execute()
            logger.info(f"Group {group['id']} created by {user_id}")
            return GroupResponse(**group, user_role="admin")
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error creating group: {e}")
            raise HTTPException(status_code=500, detail="Failed to create group")

    def list_groups(self, user_id: str) -> List[GroupResponse]:
        """Groups the user belongs to, newest first"""
        try:
            members_result = self.supabase.table("group_members")\
                .select("group_id, role")\
                .eq("user_id", user_id)\
                .execute()
            if not members_result.data:
                return []
            roles = {m["group_id"]: m["role"] for m in members_result.data}

            result = self.supabase.table("groups")\
                .select("*")\
                .in_("id", list(roles))\
                .order("created_at", desc=True)\
                .execute()
            return [GroupResponse(**g, user_role=roles.get(g["id"])) for g in result.data]
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error listing groups for {user_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to fetch groups")

    def get_group(self, group_id: str, user_role: Optional[str]) -> GroupDetailResponse:
        try:
            group = self.get_group_row(group_id)
            return GroupDetailResponse(
                **group,
                user_role=user_role,
                members=self.list_members(group_id),
            )
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error fetching group {group_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to fetch group")

    def update_group(self, group_id: str, group_data: GroupUpdate) -> GroupResponse:
        update_data = group_data.model_dump(exclude_unset=True)
        if not update_data:
            raise HTTPException(status_code=400, detail="No fields to update")
        update_data["updated_at"] = datetime.now(timezone.utc).isoformat()
        try:
            result = self.supabase.table("groups")\
                .update(update_data)\
                .eq("id", group_id)\
                .execute()
            if not result.data:
                raise HTTPException(status_code=404, detail="Group not found")
            return GroupResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error updating group {group_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to update group")

    def delete_group(self, group_id: str) -> bool:
        """Delete a group; members, ideas and votes go with it via cascade"""
        try:
            result = self.supabase.table("groups")\
                .delete()\
                .eq("id", group_id)\
                .execute()
            if not result.data:
                raise HTTPException(status_code=404, detail="Group not found")
            logger.info(f"Group {group_id} deleted")
            return True
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error deleting group {group_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to delete group")

    def list_members(self, group_id: str) -> List[GroupMemberResponse]:
        try:
            result = self.supabase.table("group_members")\
                .select(MEMBER_SELECT)\
                .eq("group_id", group_id)\
                .order("created_at")\
                .execute()
            return [GroupMemberResponse(**m) for m in result.data]
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error listing members of group {group_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to fetch group members")

    def add_member(self, group_id: str, member_data: GroupMemberAdd) -> GroupMemberResponse:
        try:
            existing = self.supabase.table("group_members")\
                .select("id")\
                .eq("group_id", group_id)\
                .eq("user_id", member_data.user_id)\
                .limit(1)\
                .execute()
            if existing.data:
                raise HTTPException(status_code=400, detail="User is already a member of this group")

            result = self.supabase.table("group_members").insert({
                "group_id": group_id,
                "user_id": member_data.user_id,
                "role": member_data.role,
            }).execute()
            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to add member")
            return GroupMemberResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error adding member to group {group_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to add member")

    def update_member_role(self, group_id: str, user_id: str, role: str) -> GroupMemberResponse:
        try:
            result = self.supabase.table("group_members")\
                .update({"role": role})\
                .eq("group_id", group_id)\
                .eq("user_id", user_id)\
                .execute()
            if not result.data:
                raise HTTPException(status_code=404, detail="Member not found")
            return GroupMemberResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error updating member {user_id} of group {group_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to update member")

    def remove_member(self, group_id: str, user_id: str) -> bool:
        try:
            result = self.supabase.table("group_members")\
                .delete()\
                .eq("group_id", group_id)\
                .eq("user_id", user_id)\
                .execute()
            if not result.data:
                raise HTTPException(status_code=404, detail="Member not found")
            return True
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error removing member {user_id} from group {group_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to remove member")


class PlanIdeaService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def get_idea(self, group_id: str, idea_id: str) -> PlanIdeaResponse:
        try:
            result = self.supabase.table("group_plan_ideas")\
                .select("*")\
                .eq("id", idea_id)\
                .eq("group_id", group_id)\
                .limit(1)\
                .execute()
            if not result.data:
                raise HTTPException(status_code=404, detail="Idea not found")
            return PlanIdeaResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error fetching idea {idea_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to fetch idea")

    def list_ideas(self, group_id: str) -> List[PlanIdeaResponse]:
        try:
            result = self.supabase.table("group_plan_ideas")\
                .select("*")\
                .eq("group_id", group_id)\
                .order("created_at", desc=True)\
                .execute()
            return [PlanIdeaResponse(**i) for i in result.data]
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error listing ideas of group {group_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to fetch ideas")

    def create_idea(self, group_id: str, idea_data: PlanIdeaCreate, user_id: str) -> PlanIdeaResponse:
        try:
            result = self.supabase.table("group_plan_ideas").insert({
                **idea_data.model_dump(mode="json"),
                "group_id": group_id,
                "created_by": user_id,
                "votes_up": 0,
                "votes_down": 0,
            }).execute()
            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to create idea")
            return PlanIdeaResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error creating idea in group {group_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to create idea")

    def update_idea(self, group_id: str, idea_id: str, idea_data: PlanIdeaUpdate) -> PlanIdeaResponse:
        update_data = idea_data.model_dump(mode="json", exclude_unset=True)
        if not update_data:
            raise HTTPException(status_code=400, detail="No fields to update")
        update_data["updated_at"] = datetime.now(timezone.utc).isoformat()
        try:
            result = self.supabase.table("group_plan_ideas")\
                .update(update_data)\
                .eq("id", idea_id)\
                .eq("group_id", group_id)\
                .execute()
            if not result.data:
                raise HTTPException(status_code=404, detail="Idea not found")
            return PlanIdeaResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error updating idea {idea_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to update idea")

    def delete_idea(self, group_id: str, idea_id: str) -> bool:
        try:
            result = self.supabase.table("group_plan_ideas")\
                .delete()\
                .eq("id", idea_id)\
                .eq("group_id", group_id)\
                .execute()
            if not result.data:
                raise HTTPException(status_code=404, detail="Idea not found")
            return True
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error deleting idea {idea_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to delete idea")

    def vote(self, group_id: str, idea_id: str, user_id: str, vote_type: str) -> PlanIdeaResponse:
        """Record the user's vote and refresh the idea's up/down tallies"""
        self.get_idea(group_id, idea_id)
        try:
            self.supabase.table("group_plan_idea_votes").upsert({
                "idea_id": idea_id,
                "user_id": user_id,
                "vote_type": vote_type,
            }, on_conflict="idea_id,user_id").execute()

            votes = self.supabase.table("group_plan_idea_votes")\
                .select("vote_type")\
                .eq("idea_id", idea_id)\
                .execute()
            tally = [v["vote_type"] for v in votes.data or []]

            result = self.supabase.table("group_plan_ideas")\
                .update({
                    "votes_up": tally.count("up"),
                    "votes_down": tally.count("down"),
                })\
                .eq("id", idea_id)\
                .execute()
            return PlanIdeaResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error voting on idea {idea_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to record vote")
