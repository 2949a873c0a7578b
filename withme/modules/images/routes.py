from fastapi import APIRouter, Depends, Query
from withme.modules.images.schemas import ImageSearchResponse, ImageSource
from withme.integrations.images import ImageSearchClient, get_image_client
from withme.core.dependencies import get_current_user
from typing import Dict

router = APIRouter(prefix="/images", tags=["images"])


@router.get("/search", response_model=ImageSearchResponse)
async def search_images(
    q: str = Query(..., min_length=1),
    source: ImageSource = Query("pexels"),
    per_page: int = Query(10, ge=1, le=30),
    page: int = Query(1, ge=1),
    current_user: Dict = Depends(get_current_user),
    images: ImageSearchClient = Depends(get_image_client)
):
    """Stock photo search for trip covers and destination images"""
    return {"images": images.search(q, source, per_page, page), "source": source}
