from fastapi import APIRouter, Depends, HTTPException, Request
from withme.database.supabase_client import get_service_supabase
from withme.modules.guests.schemas import GuestClaimRequest, GuestClaimResponse
from withme.modules.guests.service import GuestMigrationService
from withme.core.dependencies import get_current_user
from withme.config import settings
from supabase import Client
from typing import Dict

router = APIRouter(prefix="/guests", tags=["guests"])


def get_migration_service(supabase: Client = Depends(get_service_supabase)) -> GuestMigrationService:
    return GuestMigrationService(supabase)


@router.post("/claim", response_model=GuestClaimResponse)
async def claim_guest_data(
    request: Request,
    claim_data: GuestClaimRequest,
    current_user: Dict = Depends(get_current_user),
    service: GuestMigrationService = Depends(get_migration_service)
):
    """Move a guest session's trips and content to the signed-in account"""
    guest_token = claim_data.guest_token or request.cookies.get(settings.guest_cookie_name)
    if not guest_token:
        raise HTTPException(status_code=400, detail="Guest token is required")
    return service.claim(guest_token, current_user["id"])
