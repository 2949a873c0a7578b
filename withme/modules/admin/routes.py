from fastapi import APIRouter, Depends, Query
from withme.database.supabase_client import get_service_supabase
from withme.modules.admin.schemas import AdminStatsResponse, AdminUserResponse, AdminUserUpdate
from withme.modules.admin.service import AdminService
from withme.core.dependencies import require_admin, validate_uuid
from supabase import Client
from typing import List, Dict, Optional

router = APIRouter(prefix="/admin", tags=["admin"])


def get_admin_service(supabase: Client = Depends(get_service_supabase)) -> AdminService:
    # service client: counts must span every row, not just those visible to the admin
    return AdminService(supabase)


@router.get("/stats", response_model=AdminStatsResponse)
async def get_stats(
    admin_user: Dict = Depends(require_admin),
    service: AdminService = Depends(get_admin_service)
):
    """Site-wide totals and per-trip averages"""
    return service.get_stats()


@router.get("/users", response_model=List[AdminUserResponse])
async def list_users(
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    search: Optional[str] = Query(None),
    admin_user: Dict = Depends(require_admin),
    service: AdminService = Depends(get_admin_service)
):
    return service.list_users(limit, offset, search)


@router.patch("/users/{user_id}", response_model=AdminUserResponse)
async def update_user(
    user_id: str,
    user_data: AdminUserUpdate,
    admin_user: Dict = Depends(require_admin),
    service: AdminService = Depends(get_admin_service)
):
    """Grant or revoke admin access"""
    validate_uuid(user_id, "user ID")
    return service.set_admin(user_id, user_data.is_admin)
