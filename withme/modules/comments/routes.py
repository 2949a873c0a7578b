from fastapi import APIRouter, Depends, Query
from withme.database.supabase_client import get_supabase
from withme.modules.comments.schemas import (
    CommentCreate, CommentUpdate, CommentResponse, ContentType,
    ReactionToggle, ReactionToggleResponse, ReactionCountsResponse
)
from withme.modules.comments.service import CommentService
from withme.integrations.email import EmailService, get_email_service
from withme.core.dependencies import get_current_user, check_trip_access, validate_uuid
from withme.config.trip_roles import READ_ROLES
from supabase import Client
from typing import List, Dict

router = APIRouter(prefix="/comments", tags=["comments"])


def get_comment_service(
    supabase: Client = Depends(get_supabase),
    email_service: EmailService = Depends(get_email_service)
) -> CommentService:
    return CommentService(supabase, email_service)


@router.get("", response_model=List[CommentResponse])
async def list_comments(
    content_type: ContentType = Query(...),
    content_id: str = Query(...),
    current_user: Dict = Depends(get_current_user),
    service: CommentService = Depends(get_comment_service),
    supabase: Client = Depends(get_supabase)
):
    """Comments on a trip, item, destination, idea, collection or template"""
    validate_uuid(content_id, "content ID")
    if content_type == "trip":
        check_trip_access(content_id, current_user, supabase, READ_ROLES)
    return service.list_comments(content_type, content_id)


@router.post("", response_model=CommentResponse, status_code=201)
async def create_comment(
    comment_data: CommentCreate,
    current_user: Dict = Depends(get_current_user),
    service: CommentService = Depends(get_comment_service),
    supabase: Client = Depends(get_supabase)
):
    validate_uuid(comment_data.entity_id, "entity ID")
    if comment_data.entity_type == "trip":
        check_trip_access(comment_data.entity_id, current_user, supabase, READ_ROLES)
    return service.create_comment(comment_data, current_user["id"])


@router.patch("/{comment_id}", response_model=CommentResponse)
async def update_comment(
    comment_id: str,
    comment_data: CommentUpdate,
    current_user: Dict = Depends(get_current_user),
    service: CommentService = Depends(get_comment_service)
):
    """Edit own comment"""
    validate_uuid(comment_id, "comment ID")
    return service.update_comment(comment_id, comment_data, current_user["id"])


@router.delete("/{comment_id}")
async def delete_comment(
    comment_id: str,
    current_user: Dict = Depends(get_current_user),
    service: CommentService = Depends(get_comment_service)
):
    """Delete own comment"""
    validate_uuid(comment_id, "comment ID")
    service.delete_comment(comment_id, current_user["id"])
    return {"success": True}


def check_comment_access(comment_id: str, current_user: Dict, service: CommentService, supabase: Client) -> dict:
    """Load a comment; trip comments need the same read access as the trip itself"""
    validate_uuid(comment_id, "comment ID")
    comment = service.get_comment(comment_id)
    if comment.get("content_type") == "trip":
        check_trip_access(comment["content_id"], current_user, supabase, READ_ROLES)
    return comment


@router.get("/{comment_id}/replies", response_model=List[CommentResponse])
async def get_replies(
    comment_id: str,
    current_user: Dict = Depends(get_current_user),
    service: CommentService = Depends(get_comment_service),
    supabase: Client = Depends(get_supabase)
):
    check_comment_access(comment_id, current_user, service, supabase)
    return service.get_replies(comment_id)


@router.post("/{comment_id}/reactions", response_model=ReactionToggleResponse)
async def toggle_reaction(
    comment_id: str,
    reaction: ReactionToggle,
    current_user: Dict = Depends(get_current_user),
    service: CommentService = Depends(get_comment_service),
    supabase: Client = Depends(get_supabase)
):
    """Toggle the caller's emoji reaction"""
    check_comment_access(comment_id, current_user, service, supabase)
    return service.toggle_reaction(comment_id, reaction.emoji, current_user["id"])


@router.get("/{comment_id}/reactions", response_model=ReactionCountsResponse)
async def reaction_counts(
    comment_id: str,
    current_user: Dict = Depends(get_current_user),
    service: CommentService = Depends(get_comment_service),
    supabase: Client = Depends(get_supabase)
):
    check_comment_access(comment_id, current_user, service, supabase)
    return service.reaction_counts(comment_id)
