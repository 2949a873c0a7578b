from fastapi import APIRouter, Depends, HTTPException
from withme.database.supabase_client import get_supabase
from withme.modules.notes.schemas import (
    NoteCreate, NoteUpdate, NoteResponse, NoteTagsUpdate, NoteTagsResponse
)
from withme.modules.notes.service import NoteService
from withme.core.dependencies import get_current_user, check_trip_access, validate_uuid
from withme.config.trip_roles import READ_ROLES, WRITE_ROLES, EDIT_ROLES
from supabase import Client
from typing import List, Dict

router = APIRouter(prefix="/trips/{trip_id}/notes", tags=["notes"])


def get_note_service(supabase: Client = Depends(get_supabase)) -> NoteService:
    return NoteService(supabase)


def check_note_editor(role: str, note: dict, user_id: str):
    """Authors may edit their own notes; admins and editors may edit any"""
    if note.get("created_by") != user_id and role not in EDIT_ROLES:
        raise HTTPException(status_code=403, detail="Not authorized to modify this note")


@router.get("", response_model=List[NoteResponse])
async def list_notes(
    trip_id: str,
    current_user: Dict = Depends(get_current_user),
    service: NoteService = Depends(get_note_service),
    supabase: Client = Depends(get_supabase)
):
    check_trip_access(trip_id, current_user, supabase, READ_ROLES)
    return service.list_notes(trip_id)


@router.post("", response_model=NoteResponse, status_code=201)
async def create_note(
    trip_id: str,
    note_data: NoteCreate,
    current_user: Dict = Depends(get_current_user),
    service: NoteService = Depends(get_note_service),
    supabase: Client = Depends(get_supabase)
):
    """Add a note to the trip"""
    check_trip_access(trip_id, current_user, supabase, WRITE_ROLES)
    return service.create_note(trip_id, note_data, current_user["id"])


@router.patch("/{note_id}", response_model=NoteResponse)
async def update_note(
    trip_id: str,
    note_id: str,
    note_data: NoteUpdate,
    current_user: Dict = Depends(get_current_user),
    service: NoteService = Depends(get_note_service),
    supabase: Client = Depends(get_supabase)
):
    """Update a note (author, admin or editor)"""
    role = check_trip_access(trip_id, current_user, supabase, WRITE_ROLES)
    validate_uuid(note_id, "note ID")
    check_note_editor(role, service.get_note(trip_id, note_id), current_user["id"])
    return service.update_note(trip_id, note_id, note_data)


@router.delete("/{note_id}")
async def delete_note(
    trip_id: str,
    note_id: str,
    current_user: Dict = Depends(get_current_user),
    service: NoteService = Depends(get_note_service),
    supabase: Client = Depends(get_supabase)
):
    """Delete a note (author, admin or editor)"""
    role = check_trip_access(trip_id, current_user, supabase, WRITE_ROLES)
    validate_uuid(note_id, "note ID")
    check_note_editor(role, service.get_note(trip_id, note_id), current_user["id"])
    service.delete_note(trip_id, note_id)
    return {"success": True}


@router.get("/{note_id}/tags", response_model=NoteTagsResponse)
async def get_note_tags(
    trip_id: str,
    note_id: str,
    current_user: Dict = Depends(get_current_user),
    service: NoteService = Depends(get_note_service),
    supabase: Client = Depends(get_supabase)
):
    """Tags attached to a note"""
    check_trip_access(trip_id, current_user, supabase, READ_ROLES)
    validate_uuid(note_id, "note ID")
    service.get_note(trip_id, note_id)
    return {"tags": service.get_tags(note_id)}


@router.put("/{note_id}/tags", response_model=NoteTagsResponse)
async def set_note_tags(
    trip_id: str,
    note_id: str,
    tags_data: NoteTagsUpdate,
    current_user: Dict = Depends(get_current_user),
    service: NoteService = Depends(get_note_service),
    supabase: Client = Depends(get_supabase)
):
    """Replace a note's tags (admin or editor)"""
    check_trip_access(trip_id, current_user, supabase, EDIT_ROLES)
    validate_uuid(note_id, "note ID")
    service.get_note(trip_id, note_id)
    return {"tags": service.set_tags(note_id, tags_data.tags)}
