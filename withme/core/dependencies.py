"""
Core dependencies for authentication and trip/group access checks
"""

from fastapi import Depends, HTTPException, Security, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from withme.database.supabase_client import get_supabase
from withme.modules.auth.service import AuthService
from withme.config.trip_roles import LINK_READABLE_PRIVACY, VIEWER
from supabase import Client
from typing import List, Optional, Dict, Any
import logging
import uuid

logger = logging.getLogger(__name__)

# auto_error=False so a missing header is reported as 401 rather than 403
security = HTTPBearer(auto_error=False)


def get_auth_service(supabase: Client = Depends(get_supabase)) -> AuthService:
    return AuthService(supabase)


def get_current_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Security(security)
) -> str:
    """Extract access token from Authorization header"""
    if credentials is None or not credentials.credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated"
        )
    return credentials.credentials


def get_current_user(
    token: str = Depends(get_current_token),
    auth_service: AuthService = Depends(get_auth_service)
) -> dict:
    """Extract current user info from access token"""
    return auth_service.get_current_user(token)


def get_optional_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Security(security),
    auth_service: AuthService = Depends(get_auth_service)
) -> Optional[dict]:
    """Current user when a valid token is sent, otherwise None (anonymous access)"""
    if credentials is None or not credentials.credentials:
        return None
    try:
        return auth_service.get_current_user(credentials.credentials)
    except HTTPException:
        logger.debug("Ignoring invalid token on optionally authenticated route")
        return None


def validate_uuid(value: str, label: str = "ID") -> str:
    """Raise 400 unless value is a UUID string"""
    try:
        uuid.UUID(str(value))
    except (ValueError, TypeError):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid {label} format"
        )
    return value


def is_admin(user_data: Optional[dict], supabase: Client) -> bool:
    """Check the is_admin flag on the user's profile"""
    if not user_data:
        return False
    try:
        result = supabase.table("profiles")\
            .select("is_admin")\
            .eq("id", user_data["id"])\
            .limit(1)\
            .execute()
        return bool(result.data and result.data[0].get("is_admin"))
    except Exception as e:
        logger.error(f"Error checking admin flag: {e}")
        return False


def require_admin(
    user_data: dict = Depends(get_current_user),
    supabase: Client = Depends(get_supabase)
) -> dict:
    """Dependency allowing only users whose profile has is_admin set"""
    if not is_admin(user_data, supabase):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required"
        )
    return user_data


def get_trip_or_404(trip_id: str, supabase: Client, columns: str = "id, created_by, privacy_setting") -> Dict[str, Any]:
    validate_uuid(trip_id, "trip ID")
    result = supabase.table("trips")\
        .select(columns)\
        .eq("id", trip_id)\
        .limit(1)\
        .execute()
    if not result.data:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Trip not found"
        )
    return result.data[0]


def get_trip_role(
    trip_id: str,
    user_id: Optional[str],
    supabase: Client,
    trip: Optional[Dict[str, Any]] = None
) -> Optional[str]:
    """Resolve the caller's role on a trip.

    Membership wins, then the trip creator counts as admin, then anyone
    (including anonymous callers) gets viewer on public or link-shared trips.
    Returns None when the caller has no access.
    """
    if trip is None:
        trip = get_trip_or_404(trip_id, supabase)
    if user_id:
        member_result = supabase.table("trip_members")\
            .select("role")\
            .eq("trip_id", trip_id)\
            .eq("user_id", user_id)\
            .limit(1)\
            .execute()
        if member_result.data:
            return member_result.data[0]["role"]
        if trip.get("created_by") == user_id:
            return "admin"
    if trip.get("privacy_setting") in LINK_READABLE_PRIVACY:
        return VIEWER
    return None


def check_trip_access(
    trip_id: str,
    user_data: Optional[dict],
    supabase: Client,
    allowed_roles: List[str]
) -> str:
    """Raise 403 unless the caller's trip role is one of allowed_roles; returns the role"""
    user_id = user_data["id"] if user_data else None
    role = get_trip_role(trip_id, user_id, supabase)
    if role is None or role not in allowed_roles:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Access denied"
        )
    return role


def get_group_role(group_id: str, user_id: str, supabase: Client) -> Optional[str]:
    member_result = supabase.table("group_members")\
        .select("role")\
        .eq("group_id", group_id)\
        .eq("user_id", user_id)\
        .limit(1)\
        .execute()
    if member_result.data:
        return member_result.data[0]["role"]
    return None


def check_group_member(group_id: str, user_data: dict, supabase: Client) -> str:
    """Check if user is a member of a group; returns their group role"""
    role = get_group_role(group_id, user_data["id"], supabase)
    if role is None:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You must be a member of this group"
        )
    return role


def check_group_admin(group_id: str, user_data: dict, supabase: Client) -> dict:
    """Check if user is admin or creator of a group"""
    user_id = user_data["id"]

    group_result = supabase.table("groups")\
        .select("created_by")\
        .eq("id", group_id)\
        .limit(1)\
        .execute()
    if not group_result.data:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Group not found"
        )
    if group_result.data[0].get("created_by") == user_id:
        return user_data

    if get_group_role(group_id, user_id, supabase) == "admin":
        return user_data

    raise HTTPException(
        status_code=status.HTTP_403_FORBIDDEN,
        detail="You must be a group admin to perform this action"
    )
