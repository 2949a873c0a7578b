from fastapi import APIRouter, Depends
from withme.database.supabase_client import get_supabase
from withme.modules.friends.schemas import (
    FriendRequestCreate, FriendRequestResponse, FriendRequestsResponse, FriendResponse
)
from withme.modules.friends.service import FriendService
from withme.core.dependencies import get_current_user, validate_uuid
from supabase import Client
from typing import List, Dict

router = APIRouter(prefix="/friends", tags=["friends"])


def get_friend_service(supabase: Client = Depends(get_supabase)) -> FriendService:
    return FriendService(supabase)


@router.get("", response_model=List[FriendResponse])
async def list_friends(
    current_user: Dict = Depends(get_current_user),
    service: FriendService = Depends(get_friend_service)
):
    return service.list_friends(current_user["id"])


@router.get("/requests", response_model=FriendRequestsResponse)
async def list_requests(
    current_user: Dict = Depends(get_current_user),
    service: FriendService = Depends(get_friend_service)
):
    """Pending incoming and outgoing friend requests"""
    return service.list_requests(current_user["id"])


@router.post("/requests", response_model=FriendRequestResponse, status_code=201)
async def send_request(
    request_data: FriendRequestCreate,
    current_user: Dict = Depends(get_current_user),
    service: FriendService = Depends(get_friend_service)
):
    validate_uuid(request_data.user_id, "user ID")
    return service.send_request(current_user["id"], request_data.user_id)


@router.post("/requests/{request_id}/accept", response_model=FriendRequestResponse)
async def accept_request(
    request_id: str,
    current_user: Dict = Depends(get_current_user),
    service: FriendService = Depends(get_friend_service)
):
    validate_uuid(request_id, "request ID")
    return service.respond(request_id, current_user["id"], accept=True)


@router.post("/requests/{request_id}/decline", response_model=FriendRequestResponse)
async def decline_request(
    request_id: str,
    current_user: Dict = Depends(get_current_user),
    service: FriendService = Depends(get_friend_service)
):
    validate_uuid(request_id, "request ID")
    return service.respond(request_id, current_user["id"], accept=False)


@router.delete("/{friend_id}")
async def remove_friend(
    friend_id: str,
    current_user: Dict = Depends(get_current_user),
    service: FriendService = Depends(get_friend_service)
):
    validate_uuid(friend_id, "user ID")
    service.remove_friend(current_user["id"], friend_id)
    return {"success": True}
