import logging
import httpx
from typing import Any, Dict, List, Optional
from withme.config import settings
from withme.integrations.errors import IntegrationNotConfigured, UpstreamError

logger = logging.getLogger(__name__)

PEXELS_SEARCH_URL = "https://api.pexels.com/v1/search"
UNSPLASH_SEARCH_URL = "https://api.unsplash.com/search/photos"

IMAGE_SOURCES = ["pexels", "unsplash"]


def _pexels_photo(photo: Dict[str, Any]) -> Dict[str, Any]:
    src = photo.get("src") or {}
    return {
        "id": str(photo.get("id")),
        "source": "pexels",
        "url": src.get("large2x") or src.get("original"),
        "thumb_url": src.get("medium") or src.get("small"),
        "alt": photo.get("alt"),
        "photographer": photo.get("photographer"),
        "photographer_url": photo.get("photographer_url"),
        "width": photo.get("width"),
        "height": photo.get("height"),
    }


def _unsplash_photo(photo: Dict[str, Any]) -> Dict[str, Any]:
    urls = photo.get("urls") or {}
    user = photo.get("user") or {}
    return {
        "id": photo.get("id"),
        "source": "unsplash",
        "url": urls.get("regular") or urls.get("full"),
        "thumb_url": urls.get("small") or urls.get("thumb"),
        "alt": photo.get("alt_description") or photo.get("description"),
        "photographer": user.get("name"),
        "photographer_url": (user.get("links") or {}).get("html"),
        "width": photo.get("width"),
        "height": photo.get("height"),
    }


class ImageSearchClient:
    def __init__(
        self,
        pexels_api_key: Optional[str] = None,
        unsplash_access_key: Optional[str] = None,
        timeout: Optional[float] = None,
    ):
        self.pexels_api_key = pexels_api_key if pexels_api_key is not None else settings.pexels_api_key
        self.unsplash_access_key = unsplash_access_key if unsplash_access_key is not None else settings.unsplash_access_key
        self.timeout = timeout or settings.http_timeout_seconds

    def _get(self, service: str, url: str, params: Dict[str, Any], headers: Dict[str, str]) -> Dict[str, Any]:
        try:
            response = httpx.get(url, params=params, headers=headers, timeout=self.timeout)
            response.raise_for_status()
            return response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"{service} image search failed: {e}")
            raise UpstreamError(service, f"Request to {service} failed")

    def search_pexels(self, query: str, per_page: int = 10, page: int = 1) -> List[Dict[str, Any]]:
        """Pexels search; an unconfigured key yields no photos rather than an error"""
        if not self.pexels_api_key:
            logger.warning("Pexels API key not configured; returning no photos")
            return []
        data = self._get(
            "Pexels",
            PEXELS_SEARCH_URL,
            {"query": query, "per_page": per_page, "page": page},
            {"Authorization": self.pexels_api_key},
        )
        return [_pexels_photo(p) for p in data.get("photos", [])]

    def search_unsplash(self, query: str, per_page: int = 10, page: int = 1) -> List[Dict[str, Any]]:
        if not self.unsplash_access_key:
            raise IntegrationNotConfigured("Unsplash")
        data = self._get(
            "Unsplash",
            UNSPLASH_SEARCH_URL,
            {"query": query, "per_page": per_page, "page": page, "orientation": "landscape"},
            {"Authorization": f"Client-ID {self.unsplash_access_key}", "Accept-Version": "v1"},
        )
        return [_unsplash_photo(p) for p in data.get("results", [])]

    def search(self, query: str, source: str = "pexels", per_page: int = 10, page: int = 1) -> List[Dict[str, Any]]:
        if source == "unsplash":
            return self.search_unsplash(query, per_page, page)
        return self.search_pexels(query, per_page, page)


def get_image_client() -> ImageSearchClient:
    return ImageSearchClient()
