from fastapi import APIRouter, Depends
from withme.database.supabase_client import get_supabase
from withme.modules.forms.schemas import (
    FormCreate, FormResponse, FormAnswerSubmit, FormAnswerResponse
)
from withme.modules.forms.service import FormService
from withme.core.dependencies import (
    get_current_user, get_optional_user, check_trip_access, validate_uuid
)
from withme.config.trip_roles import READ_ROLES, EDIT_ROLES
from supabase import Client
from typing import List, Dict, Optional

# Trip-scoped listing/creation and form-scoped reads/submissions live on separate prefixes
trip_forms_router = APIRouter(prefix="/trips/{trip_id}/forms", tags=["forms"])
router = APIRouter(prefix="/forms", tags=["forms"])


def get_form_service(supabase: Client = Depends(get_supabase)) -> FormService:
    return FormService(supabase)


@trip_forms_router.get("", response_model=List[FormResponse])
async def list_forms(
    trip_id: str,
    current_user: Dict = Depends(get_current_user),
    service: FormService = Depends(get_form_service),
    supabase: Client = Depends(get_supabase)
):
    check_trip_access(trip_id, current_user, supabase, READ_ROLES)
    return service.list_forms(trip_id)


@trip_forms_router.post("", response_model=FormResponse, status_code=201)
async def create_form(
    trip_id: str,
    form_data: FormCreate,
    current_user: Dict = Depends(get_current_user),
    service: FormService = Depends(get_form_service),
    supabase: Client = Depends(get_supabase)
):
    """Create a survey on the trip (admin or editor)"""
    check_trip_access(trip_id, current_user, supabase, EDIT_ROLES)
    return service.create_form(trip_id, form_data, current_user["id"])


@router.get("/{form_id}", response_model=FormResponse)
async def get_form(
    form_id: str,
    current_user: Optional[Dict] = Depends(get_optional_user),
    service: FormService = Depends(get_form_service)
):
    validate_uuid(form_id, "form ID")
    form = service.get_form(form_id)
    service.check_can_view(form, current_user)
    return form


@router.post("/{form_id}/responses", response_model=FormAnswerResponse, status_code=201)
async def submit_response(
    form_id: str,
    submission: FormAnswerSubmit,
    current_user: Optional[Dict] = Depends(get_optional_user),
    service: FormService = Depends(get_form_service)
):
    """Answer a published form; anonymous answers only where the form allows them"""
    validate_uuid(form_id, "form ID")
    return service.submit_response(form_id, submission.answers, current_user)
