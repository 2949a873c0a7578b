from fastapi import APIRouter, Depends, HTTPException
from withme.database.supabase_client import get_supabase
from withme.modules.groups.schemas import (
    GroupCreate, GroupUpdate, GroupResponse, GroupDetailResponse,
    GroupMemberAdd, GroupMemberUpdate, GroupMemberResponse,
    PlanIdeaCreate, PlanIdeaUpdate, PlanIdeaResponse, VoteRequest
)
from withme.modules.groups.service import GroupService, PlanIdeaService
from withme.core.dependencies import (
    get_current_user, get_optional_user, get_group_role,
    check_group_member, check_group_admin, validate_uuid
)
from supabase import Client
from typing import List, Dict, Optional

router = APIRouter(prefix="/groups", tags=["groups"])


def get_group_service(supabase: Client = Depends(get_supabase)) -> GroupService:
    return GroupService(supabase)


def get_idea_service(supabase: Client = Depends(get_supabase)) -> PlanIdeaService:
    return PlanIdeaService(supabase)


@router.post("", response_model=GroupResponse, status_code=201)
async def create_group(
    group_data: GroupCreate,
    current_user: Dict = Depends(get_current_user),
    service: GroupService = Depends(get_group_service)
):
    """Create a group"""
    return service.create_group(group_data, current_user["id"])


@router.get("", response_model=List[GroupResponse])
async def list_groups(
    current_user: Dict = Depends(get_current_user),
    service: GroupService = Depends(get_group_service)
):
    """Groups the current user belongs to"""
    return service.list_groups(current_user["id"])


@router.get("/{group_id}", response_model=GroupDetailResponse)
async def get_group(
    group_id: str,
    current_user: Optional[Dict] = Depends(get_optional_user),
    service: GroupService = Depends(get_group_service),
    supabase: Client = Depends(get_supabase)
):
    """Group with members; public groups are readable by anyone"""
    validate_uuid(group_id, "group ID")
    group = service.get_group_row(group_id)
    role = get_group_role(group_id, current_user["id"], supabase) if current_user else None
    if role is None and group.get("visibility") != "public":
        raise HTTPException(status_code=403, detail="You must be a member of this group")
    return service.get_group(group_id, role)


@router.patch("/{group_id}", response_model=GroupResponse)
async def update_group(
    group_id: str,
    group_data: GroupUpdate,
    current_user: Dict = Depends(get_current_user),
    service: GroupService = Depends(get_group_service),
    supabase: Client = Depends(get_supabase)
):
    validate_uuid(group_id, "group ID")
    check_group_admin(group_id, current_user, supabase)
    return service.update_group(group_id, group_data)


@router.delete("/{group_id}")
async def delete_group(
    group_id: str,
    current_user: Dict = Depends(get_current_user),
    service: GroupService = Depends(get_group_service),
    supabase: Client = Depends(get_supabase)
):
    validate_uuid(group_id, "group ID")
    check_group_admin(group_id, current_user, supabase)
    service.delete_group(group_id)
    return {"success": True}


@router.get("/{group_id}/members", response_model=List[GroupMemberResponse])
async def list_members(
    group_id: str,
    current_user: Dict = Depends(get_current_user),
    service: GroupService = Depends(get_group_service),
    supabase: Client = Depends(get_supabase)
):
    validate_uuid(group_id, "group ID")
    check_group_member(group_id, current_user, supabase)
    return service.list_members(group_id)


@router.post("/{group_id}/members", response_model=GroupMemberResponse, status_code=201)
async def add_member(
    group_id: str,
    member_data: GroupMemberAdd,
    current_user: Dict = Depends(get_current_user),
    service: GroupService = Depends(get_group_service),
    supabase: Client = Depends(get_supabase)
):
    """Add a member to the group (group admin)"""
    validate_uuid(group_id, "group ID")
    validate_uuid(member_data.user_id, "user ID")
    check_group_admin(group_id, current_user, supabase)
    return service.add_member(group_id, member_data)


@router.patch("/{group_id}/members/{user_id}", response_model=GroupMemberResponse)
async def update_member(
    group_id: str,
    user_id: str,
    member_data: GroupMemberUpdate,
    current_user: Dict = Depends(get_current_user),
    service: GroupService = Depends(get_group_service),
    supabase: Client = Depends(get_supabase)
):
    validate_uuid(group_id, "group ID")
    validate_uuid(user_id, "user ID")
    check_group_admin(group_id, current_user, supabase)
    return service.update_member_role(group_id, user_id, member_data.role)


@router.delete("/{group_id}/members/{user_id}")
async def remove_member(
    group_id: str,
    user_id: str,
    current_user: Dict = Depends(get_current_user),
    service: GroupService = Depends(get_group_service),
    supabase: Client = Depends(get_supabase)
):
    """Remove a member (group admin, or the member leaving)"""
    validate_uuid(group_id, "group ID")
    validate_uuid(user_id, "user ID")
    if user_id != current_user["id"]:
        check_group_admin(group_id, current_user, supabase)
    service.remove_member(group_id, user_id)
    return {"success": True}


@router.get("/{group_id}/ideas", response_model=List[PlanIdeaResponse])
async def list_ideas(
    group_id: str,
    current_user: Dict = Depends(get_current_user),
    service: PlanIdeaService = Depends(get_idea_service),
    supabase: Client = Depends(get_supabase)
):
    validate_uuid(group_id, "group ID")
    check_group_member(group_id, current_user, supabase)
    return service.list_ideas(group_id)


@router.post("/{group_id}/ideas", response_model=PlanIdeaResponse, status_code=201)
async def create_idea(
    group_id: str,
    idea_data: PlanIdeaCreate,
    current_user: Dict = Depends(get_current_user),
    service: PlanIdeaService = Depends(get_idea_service),
    supabase: Client = Depends(get_supabase)
):
    """Add a plan idea to the group board"""
    validate_uuid(group_id, "group ID")
    check_group_member(group_id, current_user, supabase)
    return service.create_idea(group_id, idea_data, current_user["id"])


@router.get("/{group_id}/ideas/{idea_id}", response_model=PlanIdeaResponse)
async def get_idea(
    group_id: str,
    idea_id: str,
    current_user: Dict = Depends(get_current_user),
    service: PlanIdeaService = Depends(get_idea_service),
    supabase: Client = Depends(get_supabase)
):
    validate_uuid(group_id, "group ID")
    validate_uuid(idea_id, "idea ID")
    check_group_member(group_id, current_user, supabase)
    return service.get_idea(group_id, idea_id)


def check_idea_editor(group_id: str, idea: PlanIdeaResponse, user_data: Dict, supabase: Client):
    """Idea creators may change their own ideas; group admins may change any"""
    if idea.created_by != user_data["id"]:
        check_group_admin(group_id, user_data, supabase)


@router.patch("/{group_id}/ideas/{idea_id}", response_model=PlanIdeaResponse)
async def update_idea(
    group_id: str,
    idea_id: str,
    idea_data: PlanIdeaUpdate,
    current_user: Dict = Depends(get_current_user),
    service: PlanIdeaService = Depends(get_idea_service),
    supabase: Client = Depends(get_supabase)
):
    validate_uuid(group_id, "group ID")
    validate_uuid(idea_id, "idea ID")
    check_group_member(group_id, current_user, supabase)
    check_idea_editor(group_id, service.get_idea(group_id, idea_id), current_user, supabase)
    return service.update_idea(group_id, idea_id, idea_data)


@router.delete("/{group_id}/ideas/{idea_id}")
async def delete_idea(
    group_id: str,
    idea_id: str,
    current_user: Dict = Depends(get_current_user),
    service: PlanIdeaService = Depends(get_idea_service),
    supabase: Client = Depends(get_supabase)
):
    validate_uuid(group_id, "group ID")
    validate_uuid(idea_id, "idea ID")
    check_group_member(group_id, current_user, supabase)
    check_idea_editor(group_id, service.get_idea(group_id, idea_id), current_user, supabase)
    service.delete_idea(group_id, idea_id)
    return {"success": True}


@router.post("/{group_id}/ideas/{idea_id}/vote", response_model=PlanIdeaResponse)
async def vote_on_idea(
    group_id: str,
    idea_id: str,
    vote: VoteRequest,
    current_user: Dict = Depends(get_current_user),
    service: PlanIdeaService = Depends(get_idea_service),
    supabase: Client = Depends(get_supabase)
):
    """Vote an idea up or down; a second vote replaces the first"""
    validate_uuid(group_id, "group ID")
    validate_uuid(idea_id, "idea ID")
    check_group_member(group_id, current_user, supabase)
    return service.vote(group_id, idea_id, current_user["id"], vote.vote_type)
