from fastapi import APIRouter, Depends
from withme.database.supabase_client import get_supabase
from withme.modules.profiles.schemas import ProfileUpdate, ProfileResponse, PublicProfileResponse
from withme.modules.profiles.service import ProfileService
from withme.core.dependencies import get_current_user, validate_uuid
from supabase import Client
from typing import Dict

router = APIRouter(prefix="/profiles", tags=["profiles"])


def get_profile_service(supabase: Client = Depends(get_supabase)) -> ProfileService:
    return ProfileService(supabase)


@router.get("/me", response_model=ProfileResponse)
async def get_my_profile(
    current_user: Dict = Depends(get_current_user),
    service: ProfileService = Depends(get_profile_service)
):
    """Get the caller's profile"""
    return service.get_profile(current_user["id"])


@router.patch("/me", response_model=ProfileResponse)
async def update_my_profile(
    profile_data: ProfileUpdate,
    current_user: Dict = Depends(get_current_user),
    service: ProfileService = Depends(get_profile_service)
):
    """Update the caller's profile"""
    return service.update_profile(current_user["id"], profile_data)


@router.get("/{user_id}", response_model=PublicProfileResponse)
async def get_profile(
    user_id: str,
    current_user: Dict = Depends(get_current_user),
    service: ProfileService = Depends(get_profile_service)
):
    """Get another user's public profile"""
    validate_uuid(user_id, "user ID")
    return service.get_public_profile(user_id)
