from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse
from withme.database.supabase_client import get_supabase
from withme.modules.itinerary_templates.schemas import (
    TemplateResponse, TemplateDetailResponse, TemplateUseRequest, TemplateUseResponse
)
from withme.modules.itinerary_templates.service import TemplateService, TemplateItemsCopyError
from withme.core.dependencies import get_current_user
from supabase import Client
from typing import List, Dict

router = APIRouter(prefix="/itineraries", tags=["itineraries"])


def get_template_service(supabase: Client = Depends(get_supabase)) -> TemplateService:
    return TemplateService(supabase)


@router.get("", response_model=List[TemplateResponse])
async def list_templates(
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    service: TemplateService = Depends(get_template_service)
):
    """Published itinerary templates"""
    return service.list_templates(limit, offset)


@router.get("/{slug}", response_model=TemplateDetailResponse)
async def get_template(
    slug: str,
    service: TemplateService = Depends(get_template_service)
):
    return service.get_template(slug)


@router.post("/{slug}/use", response_model=TemplateUseResponse)
async def use_template(
    slug: str,
    request: TemplateUseRequest,
    current_user: Dict = Depends(get_current_user),
    service: TemplateService = Depends(get_template_service)
):
    """Start a new trip from a template"""
    try:
        return service.use_template(slug, request, current_user["id"])
    except TemplateItemsCopyError as e:
        return JSONResponse(
            status_code=500,
            content={"error": "Trip created but failed to copy itinerary items", "trip_id": e.trip_id},
        )
