import logging
import httpx
from urllib.parse import quote
from typing import List, Dict, Any, Optional, Tuple
from withme.config import settings
from withme.integrations.errors import IntegrationNotConfigured, UpstreamError

logger = logging.getLogger(__name__)

GEOCODING_URL = "https://api.mapbox.com/geocoding/v5/mapbox.places"
DIRECTIONS_URL = "https://api.mapbox.com/directions/v5/mapbox"

DIRECTIONS_PROFILES = ["walking", "driving", "cycling"]
# Directions API waypoint limit per request
MAX_WAYPOINTS = 25


def _feature_to_place(feature: Dict[str, Any]) -> Dict[str, Any]:
    lng, lat = (feature.get("center") or [None, None])[:2]
    context = {c.get("id", "").split(".")[0]: c for c in feature.get("context", [])}
    country = context.get("country", {})
    region = context.get("region", {})
    return {
        "mapbox_id": feature.get("id"),
        "name": feature.get("text"),
        "full_name": feature.get("place_name"),
        "latitude": lat,
        "longitude": lng,
        "place_type": (feature.get("place_type") or [None])[0],
        "country": country.get("text"),
        "country_code": (country.get("short_code") or "").upper() or None,
        "region": region.get("text"),
    }


def chunk_waypoints(coordinates: List[Tuple[float, float]], size: int = MAX_WAYPOINTS) -> List[List[Tuple[float, float]]]:
    """Split a route into requests of at most `size` waypoints; consecutive chunks share an endpoint"""
    if len(coordinates) <= size:
        return [coordinates]
    chunks = []
    start = 0
    while start < len(coordinates) - 1:
        chunks.append(coordinates[start:start + size])
        start += size - 1
    return chunks


class MapboxClient:
    def __init__(self, access_token: Optional[str] = None, timeout: Optional[float] = None):
        self.access_token = access_token if access_token is not None else settings.mapbox_access_token
        self.timeout = timeout or settings.http_timeout_seconds

    def _get(self, url: str, params: Dict[str, Any]) -> Dict[str, Any]:
        if not self.access_token:
            raise IntegrationNotConfigured("Mapbox")
        try:
            response = httpx.get(
                url,
                params={**params, "access_token": self.access_token},
                timeout=self.timeout,
            )
            response.raise_for_status()
            return response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"Mapbox request failed: {e}")
            raise UpstreamError("Mapbox", "Request to Mapbox failed")

    def geocode(
        self,
        query: str,
        limit: int = 5,
        types: Optional[str] = None,
        proximity: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        """Forward geocode a free-text query into simplified place dicts"""
        params: Dict[str, Any] = {"limit": limit}
        if types:
            params["types"] = types
        if proximity:
            params["proximity"] = proximity
        data = self._get(f"{GEOCODING_URL}/{quote(query)}.json", params)
        return [_feature_to_place(f) for f in data.get("features", [])]

    def route_legs(self, coordinates: List[Tuple[float, float]], profile: str = "walking") -> List[Dict[str, Any]]:
        """Duration and distance for each leg between consecutive (lng, lat) waypoints"""
        if profile not in DIRECTIONS_PROFILES:
            raise ValueError(f"Unsupported directions profile: {profile}")
        if len(coordinates) < 2:
            return []
        legs: List[Dict[str, Any]] = []
        for chunk in chunk_waypoints(coordinates):
            path = ";".join(f"{lng},{lat}" for lng, lat in chunk)
            data = self._get(f"{DIRECTIONS_URL}/{profile}/{path}", {"overview": "false"})
            routes = data.get("routes") or []
            if not routes:
                raise UpstreamError("Mapbox", data.get("message") or "No route found")
            for leg in routes[0].get("legs", []):
                legs.append({
                    "duration_seconds": leg.get("duration"),
                    "distance_meters": leg.get("distance"),
                })
        return legs


def get_mapbox_client() -> MapboxClient:
    return MapboxClient()
