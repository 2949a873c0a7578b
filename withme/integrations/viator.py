import logging
import re
import httpx
from typing import Any, Dict, List, Optional
from withme.config import settings
from withme.integrations.errors import IntegrationNotConfigured, UpstreamError

logger = logging.getLogger(__name__)

VIATOR_SITE_URL = "https://www.viator.com"


def _slugify(text: str) -> str:
    return re.sub(r"\s+", "-", text.strip())


def append_affiliate_params(url: str, params: Optional[str] = None) -> str:
    """Add the affiliate tracking query string to a Viator URL (idempotent)"""
    params = params if params is not None else settings.viator_affiliate_params
    if not url or not params:
        return url
    first_key = params.split("&")[0].split("=")[0]
    if re.search(rf"[?&]{re.escape(first_key)}=", url):
        return url
    separator = "&" if "?" in url else "?"
    return f"{url}{separator}{params}"


def build_destination_url(destination_id: str, destination_name: str) -> str:
    """Things-to-do page for a Viator destination"""
    return append_affiliate_params(
        f"{VIATOR_SITE_URL}/{_slugify(destination_name)}/d{destination_id}-ttd"
    )


def build_product_url(product_code: str, destination_name: Optional[str] = None, product_slug: Optional[str] = None) -> str:
    """Booking page for a Viator product"""
    if destination_name and product_slug:
        url = f"{VIATOR_SITE_URL}/tours/{_slugify(destination_name)}/{_slugify(product_slug)}/d-{product_code}"
    else:
        url = f"{VIATOR_SITE_URL}/tours/{product_code}"
    return append_affiliate_params(url)


def _normalize_product(product: Dict[str, Any]) -> Dict[str, Any]:
    code = product.get("code") or product.get("productCode")
    url = product.get("webURL") or product.get("productUrl")
    return {
        "product_code": code,
        "title": product.get("title"),
        "description": product.get("shortDescription") or product.get("description"),
        "price": product.get("price") or (product.get("pricing") or {}).get("summary", {}).get("fromPrice"),
        "currency": product.get("currencyCode") or (product.get("pricing") or {}).get("currency"),
        "rating": product.get("rating") or (product.get("reviews") or {}).get("combinedAverageRating"),
        "review_count": product.get("reviewCount") or (product.get("reviews") or {}).get("totalReviews"),
        "image_url": product.get("thumbnailHiResURL") or product.get("thumbnailURL"),
        "duration": product.get("duration"),
        "url": append_affiliate_params(url) if url else build_product_url(code),
    }


class ViatorClient:
    def __init__(self, api_key: Optional[str] = None, timeout: Optional[float] = None):
        self.api_key = api_key if api_key is not None else settings.viator_api_key
        self.base_url = settings.viator_base_url.rstrip("/")
        self.timeout = timeout or settings.http_timeout_seconds

    def _post(self, path: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        if not self.api_key:
            raise IntegrationNotConfigured("Viator")
        try:
            response = httpx.post(
                f"{self.base_url}{path}",
                json=payload,
                headers={
                    "exp-api-key": self.api_key,
                    "Accept": "application/json",
                    "Accept-Language": "en-US",
                },
                timeout=self.timeout,
            )
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"Viator request to {path} failed: {e}")
            raise UpstreamError("Viator", "Request to Viator failed")
        if not isinstance(data, dict):
            raise UpstreamError("Viator", "Unexpected response from Viator")
        if data.get("success") is False:
            raise UpstreamError("Viator", data.get("errorMessageText") or "Viator returned an error")
        return data

    def search_products(
        self,
        text: str,
        destination_id: Optional[str] = None,
        limit: int = 10,
        currency: str = "USD",
    ) -> List[Dict[str, Any]]:
        payload: Dict[str, Any] = {
            "text": text,
            "topX": f"1-{limit}",
            "currencyCode": currency,
            "searchTypes": [{"searchType": "PRODUCTS", "pagination": {"start": 1, "count": limit}}],
        }
        if destination_id:
            payload["destId"] = destination_id
        data = self._post("/search/freetext", payload)
        products = data.get("data") or []
        if isinstance(products, dict):
            products = products.get("products", {}).get("results", [])
        return [_normalize_product(p.get("data", p)) for p in products]

    def destination_products(self, destination_id: str, limit: int = 10, currency: str = "USD") -> Dict[str, Any]:
        data = self._post("/search/products", {
            "destId": destination_id,
            "topX": f"1-{limit}",
            "currencyCode": currency,
            "sortOrder": "TOP_SELLERS",
        })
        products = data.get("data") or []
        return {
            "data": [_normalize_product(p) for p in products],
            "total_count": data.get("totalCount", len(products)),
        }


def get_viator_client() -> ViatorClient:
    return ViatorClient()
