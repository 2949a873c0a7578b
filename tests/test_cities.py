from withme.integrations.mapbox import get_mapbox_client
from withme.main import app


class StubGeocoder:
    def __init__(self, places, access_token="test-token"):
        self.places = places
        self.access_token = access_token
        self.queries = []

    def geocode(self, query, limit=5, types=None, proximity=None):
        self.queries.append((query, limit, types))
        return self.places


def test_query_too_short(client):
    response = client.get("/api/v1/cities/search", params={"q": " a "})

    assert response.status_code == 400
    assert response.json() == {"error": "Query must be at least 2 characters"}


def test_local_cities_with_destination_match(client, db):
    lisbon_page = db.seed("destinations", {"city": "Lisbon", "country": "Portugal", "slug": "lisbon-portugal"})
    db.seed(
        "cities",
        {"name": "Lisbon", "country": "Portugal", "latitude": 38.72, "longitude": -9.14},
        {"name": "Lisburn", "country": "United Kingdom"},
        {"name": "Porto", "country": "Portugal"},
    )
    geocoder = StubGeocoder([])
    app.dependency_overrides[get_mapbox_client] = lambda: geocoder

    body = client.get("/api/v1/cities/search", params={"q": "lisb"}).json()

    assert body["source"] == "database"
    assert [c["name"] for c in body["cities"]] == ["Lisbon", "Lisburn"]
    assert body["cities"][0]["destination"]["id"] == lisbon_page["id"]
    assert body["cities"][1]["destination"] is None
    assert geocoder.queries == []


def test_falls_back_to_mapbox_and_caches(client, db):
    geocoder = StubGeocoder([
        {"mapbox_id": "place.123", "name": "Hallstatt", "country": "Austria", "region": "Upper Austria",
         "latitude": 47.56, "longitude": 13.65},
        {"mapbox_id": None, "name": "Broken"},
    ])
    app.dependency_overrides[get_mapbox_client] = lambda: geocoder

    first = client.get("/api/v1/cities/search", params={"q": "Hallstatt"}).json()
    second = client.get("/api/v1/cities/search", params={"q": "Hallstatt"}).json()

    assert first["source"] == "mapbox"
    assert [(c["name"], c["admin_name"]) for c in first["cities"]] == [("Hallstatt", "Upper Austria")]
    assert geocoder.queries == [("Hallstatt", 10, "place")]
    assert second["source"] == "database"
    assert len(db.rows("cities")) == 1


def test_no_mapbox_token_returns_empty_result(client, db):
    app.dependency_overrides[get_mapbox_client] = lambda: StubGeocoder([], access_token="")

    body = client.get("/api/v1/cities/search", params={"q": "Nowhere"}).json()

    assert body == {"cities": [], "source": "database"}
