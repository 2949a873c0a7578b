from pydantic import BaseModel
from typing import Optional, List, Literal

ImageSource = Literal["pexels", "unsplash"]


class ImageResult(BaseModel):
    id: str
    source: str
    url: str
    thumb_url: Optional[str] = None
    alt: Optional[str] = None
    photographer: Optional[str] = None
    photographer_url: Optional[str] = None
    width: Optional[int] = None
    height: Optional[int] = None


class ImageSearchResponse(BaseModel):
    images: List[ImageResult]
    source: str
