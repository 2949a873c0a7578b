import pytest

from withme.integrations.images import ImageSearchClient, get_image_client
from withme.integrations.mapbox import MapboxClient, get_mapbox_client
from withme.integrations.viator import get_viator_client
from withme.main import app


class StubMapbox(MapboxClient):
    def __init__(self, features):
        super().__init__(access_token="test-token")
        self.features = features
        self.calls = []

    def geocode(self, query, limit=5, types=None, proximity=None):
        self.calls.append({"query": query, "limit": limit, "proximity": proximity})
        return self.features


class StubViator:
    def __init__(self):
        self.calls = []

    def search_products(self, text, destination_id=None, limit=10, currency="USD"):
        self.calls.append((text, destination_id, limit, currency))
        return [{"product_code": "5010SYDNEY", "title": "Harbour cruise", "url": "https://www.viator.com/tours/5010SYDNEY"}]

    def destination_products(self, destination_id, limit=10, currency="USD"):
        self.calls.append((destination_id, limit, currency))
        return {"data": [], "total_count": 0}


@pytest.fixture
def user(make_user):
    return make_user("Alice")


def test_search_endpoints_require_auth(client):
    assert client.get("/api/v1/places/search", params={"q": "cafe"}).status_code == 401
    assert client.get("/api/v1/activities/search", params={"q": "cruise"}).status_code == 401
    assert client.get("/api/v1/images/search", params={"q": "lisbon"}).status_code == 401


def test_place_search_drops_features_without_id(client, user):
    mapbox = StubMapbox([
        {"mapbox_id": "poi.1", "name": "Time Out Market", "full_name": "Time Out Market, Lisbon",
         "latitude": 38.70, "longitude": -9.14, "place_type": "poi", "country": "Portugal"},
        {"mapbox_id": None, "name": "Ghost"},
    ])
    app.dependency_overrides[get_mapbox_client] = lambda: mapbox

    response = client.get(
        "/api/v1/places/search",
        params={"q": "market", "limit": 3, "proximity": "-9.14,38.71"},
        headers=user["headers"],
    )

    assert response.status_code == 200
    assert response.json()["places"] == [{
        "mapbox_id": "poi.1",
        "name": "Time Out Market",
        "full_name": "Time Out Market, Lisbon",
        "latitude": 38.70,
        "longitude": -9.14,
        "place_type": "poi",
    }]
    assert mapbox.calls == [{"query": "market", "limit": 3, "proximity": "-9.14,38.71"}]


def test_place_search_validates_proximity(client, user):
    app.dependency_overrides[get_mapbox_client] = lambda: StubMapbox([])

    response = client.get(
        "/api/v1/places/search",
        params={"q": "market", "proximity": "lisbon"},
        headers=user["headers"],
    )

    assert response.status_code == 400
    assert response.json() == {"error": "Invalid proximity format, expected lng,lat"}


def test_place_search_without_token_is_503(client, user):
    response = client.get("/api/v1/places/search", params={"q": "market"}, headers=user["headers"])

    assert response.status_code == 503
    assert response.json() == {"error": "Mapbox is not configured"}


def test_activity_search_passes_through_to_viator(client, user):
    viator = StubViator()
    app.dependency_overrides[get_viator_client] = lambda: viator

    response = client.get(
        "/api/v1/activities/search",
        params={"q": "cruise", "dest_id": "357", "currency": "eur"},
        headers=user["headers"],
    )

    assert response.status_code == 200
    assert response.json()["data"][0]["product_code"] == "5010SYDNEY"
    assert viator.calls == [("cruise", "357", 10, "EUR")]


def test_destination_activities(client, user):
    viator = StubViator()
    app.dependency_overrides[get_viator_client] = lambda: viator

    response = client.get("/api/v1/activities/destinations/357", params={"limit": 5}, headers=user["headers"])

    assert response.json() == {"data": [], "total_count": 0}
    assert viator.calls == [("357", 5, "USD")]


def test_activity_search_without_key_is_503(client, user):
    response = client.get("/api/v1/activities/search", params={"q": "cruise"}, headers=user["headers"])

    assert response.status_code == 503
    assert response.json() == {"error": "Viator is not configured"}


def test_image_search_without_pexels_key_is_empty(client, user):
    response = client.get("/api/v1/images/search", params={"q": "lisbon"}, headers=user["headers"])

    assert response.status_code == 200
    assert response.json() == {"images": [], "source": "pexels"}


def test_image_search_unsplash_requires_key(client, user):
    app.dependency_overrides[get_image_client] = lambda: ImageSearchClient(pexels_api_key="", unsplash_access_key="")

    response = client.get("/api/v1/images/search", params={"q": "lisbon", "source": "unsplash"}, headers=user["headers"])

    assert response.status_code == 503
    assert response.json() == {"error": "Unsplash is not configured"}
