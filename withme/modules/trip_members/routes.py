from fastapi import APIRouter, Depends
from withme.database.supabase_client import get_supabase
from withme.modules.trip_members.schemas import (
    TripMemberAdd, TripMemberUpdate, TripInviteCreate,
    TripMemberResponse, TripInvitationResponse
)
from withme.modules.trip_members.service import TripMemberService
from withme.integrations.email import EmailService, get_email_service
from withme.core.dependencies import get_current_user, check_trip_access
from withme.config.trip_roles import READ_ROLES, EDIT_ROLES, ADMIN_ROLES
from supabase import Client
from typing import List, Dict

router = APIRouter(prefix="/trips/{trip_id}/members", tags=["trip members"])


def get_member_service(
    supabase: Client = Depends(get_supabase),
    email_service: EmailService = Depends(get_email_service)
) -> TripMemberService:
    return TripMemberService(supabase, email_service)


@router.get("", response_model=List[TripMemberResponse])
async def list_members(
    trip_id: str,
    current_user: Dict = Depends(get_current_user),
    service: TripMemberService = Depends(get_member_service),
    supabase: Client = Depends(get_supabase)
):
    """List trip members"""
    check_trip_access(trip_id, current_user, supabase, READ_ROLES)
    return service.list_members(trip_id)


@router.post("", response_model=TripMemberResponse, status_code=201)
async def add_member(
    trip_id: str,
    member_data: TripMemberAdd,
    current_user: Dict = Depends(get_current_user),
    service: TripMemberService = Depends(get_member_service),
    supabase: Client = Depends(get_supabase)
):
    """Add a member (trip admin only)"""
    check_trip_access(trip_id, current_user, supabase, ADMIN_ROLES)
    return service.add_member(trip_id, member_data)


@router.post("/invite", response_model=TripInvitationResponse, status_code=201)
async def invite_member(
    trip_id: str,
    invite_data: TripInviteCreate,
    current_user: Dict = Depends(get_current_user),
    service: TripMemberService = Depends(get_member_service),
    supabase: Client = Depends(get_supabase)
):
    """Invite someone by email (admin or editor)"""
    check_trip_access(trip_id, current_user, supabase, EDIT_ROLES)
    return service.invite(trip_id, invite_data, current_user["id"])


@router.patch("/{user_id}", response_model=TripMemberResponse)
async def update_member_role(
    trip_id: str,
    user_id: str,
    update: TripMemberUpdate,
    current_user: Dict = Depends(get_current_user),
    service: TripMemberService = Depends(get_member_service),
    supabase: Client = Depends(get_supabase)
):
    """Change a member's role (trip admin only)"""
    check_trip_access(trip_id, current_user, supabase, ADMIN_ROLES)
    return service.update_role(trip_id, user_id, update)


@router.delete("/{user_id}")
async def remove_member(
    trip_id: str,
    user_id: str,
    current_user: Dict = Depends(get_current_user),
    service: TripMemberService = Depends(get_member_service),
    supabase: Client = Depends(get_supabase)
):
    """Remove a member (trip admin, or the member leaving)"""
    if user_id == current_user["id"]:
        check_trip_access(trip_id, current_user, supabase, READ_ROLES)
    else:
        check_trip_access(trip_id, current_user, supabase, ADMIN_ROLES)
    service.remove_member(trip_id, user_id)
    return {"success": True}
