import pytest

from withme.integrations.mapbox import get_mapbox_client
from withme.main import app


@pytest.fixture
def trip_setup(make_user, make_trip, add_member):
    alice = make_user("Alice")
    carl = make_user("Carl")
    vera = make_user("Vera")
    trip = make_trip(alice)
    add_member(trip, carl, "contributor")
    add_member(trip, vera, "viewer")
    return {"trip": trip, "admin": alice, "contributor": carl, "viewer": vera}


def items_url(trip, suffix=""):
    return f"/api/v1/trips/{trip['id']}/itinerary{suffix}"


def test_contributor_adds_items_with_increasing_positions(client, trip_setup):
    trip, carl = trip_setup["trip"], trip_setup["contributor"]

    first = client.post(items_url(trip, "/items"), json={"title": "Tram 28"}, headers=carl["headers"])
    second = client.post(items_url(trip, "/items"), json={"name": "Pastéis de Belém"}, headers=carl["headers"])

    assert first.status_code == 201
    assert first.json()["name"] == "Tram 28"
    assert first.json()["status"] == "suggested"
    assert first.json()["position"] == 0
    assert second.json()["title"] == "Pastéis de Belém"
    assert second.json()["position"] == 1


def test_item_requires_name_or_title(client, trip_setup):
    trip, alice = trip_setup["trip"], trip_setup["admin"]

    response = client.post(items_url(trip, "/items"), json={"description": "no title"}, headers=alice["headers"])

    assert response.status_code == 400


def test_viewer_cannot_add_items(client, trip_setup):
    trip, vera = trip_setup["trip"], trip_setup["viewer"]

    response = client.post(items_url(trip, "/items"), json={"title": "Sneaky"}, headers=vera["headers"])

    assert response.status_code == 403


def test_positions_are_counted_per_section(client, db, trip_setup):
    trip, alice = trip_setup["trip"], trip_setup["admin"]
    section = client.post(items_url(trip, "/sections"), json={"name": "Day 1", "day_number": 1}, headers=alice["headers"])
    assert section.status_code == 201
    assert section.json()["title"] == "Day 1"
    section_id = section.json()["id"]

    client.post(items_url(trip, "/items"), json={"title": "Unscheduled"}, headers=alice["headers"])
    in_section = client.post(
        items_url(trip, "/items"),
        json={"title": "Castle", "section_id": section_id},
        headers=alice["headers"],
    )

    assert in_section.json()["position"] == 0
    assert in_section.json()["section_id"] == section_id


def test_item_in_foreign_section_is_rejected(client, db, trip_setup, make_user, make_trip):
    trip, alice = trip_setup["trip"], trip_setup["admin"]
    other_trip = make_trip(make_user("Olga"))
    foreign = db.seed("itinerary_sections", {"trip_id": other_trip["id"], "title": "Elsewhere", "position": 0})

    response = client.post(
        items_url(trip, "/items"),
        json={"title": "Castle", "section_id": foreign["id"]},
        headers=alice["headers"],
    )

    assert response.status_code == 400
    assert response.json() == {"error": "Section does not belong to this trip"}


def test_get_itinerary_readable_by_viewer(client, db, trip_setup):
    trip, vera = trip_setup["trip"], trip_setup["viewer"]
    db.seed("itinerary_sections", {"trip_id": trip["id"], "title": "Day 2", "position": 1})
    db.seed("itinerary_sections", {"trip_id": trip["id"], "title": "Day 1", "position": 0})

    response = client.get(items_url(trip), headers=vera["headers"])

    assert response.status_code == 200
    assert [s["title"] for s in response.json()["sections"]] == ["Day 1", "Day 2"]


def test_import_places_normalizes_fields(client, db, trip_setup):
    trip, carl = trip_setup["trip"], trip_setup["contributor"]
    db.seed("itinerary_items", {"trip_id": trip["id"], "title": "Existing", "section_id": None, "position": 0})

    response = client.post(items_url(trip, "/import"), json={"items": [
        {"name": "LX Factory", "category": "shopping", "location": {"lat": 38.70, "lng": -9.18}},
        {"title": "Miradouro", "notes": "Sunset", "address": "Graça"},
    ]}, headers=carl["headers"])

    assert response.status_code == 201
    body = response.json()
    assert body["imported_count"] == 2
    first, second = body["data"]
    assert first["item_type"] == "shopping"
    assert first["latitude"] == 38.70
    assert first["position"] == 1
    assert second["item_type"] == "place"
    assert second["description"] == "Sunset"
    assert second["position"] == 2


def test_import_requires_items(client, trip_setup):
    trip, alice = trip_setup["trip"], trip_setup["admin"]

    response = client.post(items_url(trip, "/import"), json={"items": []}, headers=alice["headers"])

    assert response.status_code == 400
    assert response.json() == {"error": "No places to import"}


def test_update_and_delete_need_edit_role(client, db, trip_setup):
    trip, alice, carl = trip_setup["trip"], trip_setup["admin"], trip_setup["contributor"]
    item = db.seed("itinerary_items", {"trip_id": trip["id"], "title": "Museum", "name": "Museum", "position": 0})
    url = items_url(trip, f"/items/{item['id']}")

    assert client.patch(url, json={"status": "confirmed"}, headers=carl["headers"]).status_code == 403

    updated = client.put(url, json={"title": "Gulbenkian", "status": "confirmed"}, headers=alice["headers"])
    assert updated.status_code == 200
    assert updated.json()["name"] == "Gulbenkian"
    assert updated.json()["status"] == "confirmed"

    assert client.patch(url, json={"status": "maybe"}, headers=alice["headers"]).status_code == 400
    assert client.delete(url, headers=alice["headers"]).status_code == 200
    assert client.get(url, headers=alice["headers"]).status_code == 404


def test_reorder_moves_items_into_section(client, db, trip_setup):
    trip, carl = trip_setup["trip"], trip_setup["contributor"]
    section = db.seed("itinerary_sections", {"trip_id": trip["id"], "title": "Day 1", "position": 0})
    a = db.seed("itinerary_items", {"trip_id": trip["id"], "title": "A", "section_id": None, "position": 0})
    b = db.seed("itinerary_items", {"trip_id": trip["id"], "title": "B", "section_id": None, "position": 1})

    response = client.post(items_url(trip, "/reorder"), json={
        "section_id": section["id"],
        "item_ids": [b["id"], a["id"]],
    }, headers=carl["headers"])

    assert response.status_code == 200
    assert [(i["title"], i["position"], i["section_id"]) for i in response.json()] == [
        ("B", 0, section["id"]),
        ("A", 1, section["id"]),
    ]


def test_reorder_rejects_duplicates_and_unknown_items(client, db, trip_setup):
    trip, alice = trip_setup["trip"], trip_setup["admin"]
    a = db.seed("itinerary_items", {"trip_id": trip["id"], "title": "A", "position": 0})

    duplicate = client.post(items_url(trip, "/reorder"), json={"item_ids": [a["id"], a["id"]]}, headers=alice["headers"])
    unknown = client.post(items_url(trip, "/reorder"), json={"item_ids": [a["id"], "missing-id"]}, headers=alice["headers"])

    assert duplicate.status_code == 400
    assert unknown.status_code == 400
    assert "missing-id" in unknown.json()["error"]


class StubMapbox:
    access_token = "test-token"

    def __init__(self):
        self.requests = []

    def route_legs(self, coordinates, profile="walking"):
        self.requests.append((coordinates, profile))
        return [{"duration_seconds": 600.0, "distance_meters": 800.0} for _ in coordinates[1:]]


def test_travel_times_between_located_items(client, db, trip_setup):
    trip, vera = trip_setup["trip"], trip_setup["viewer"]
    section = db.seed("itinerary_sections", {"trip_id": trip["id"], "title": "Day 1", "position": 0})
    first = db.seed("itinerary_items", {"trip_id": trip["id"], "section_id": section["id"], "title": "A",
                                        "position": 0, "latitude": 38.71, "longitude": -9.14})
    second = db.seed("itinerary_items", {"trip_id": trip["id"], "section_id": section["id"], "title": "B",
                                         "position": 1, "latitude": 38.69, "longitude": -9.21})
    db.seed("itinerary_items", {"trip_id": trip["id"], "section_id": section["id"], "title": "No location",
                                "position": 2})
    mapbox = StubMapbox()
    app.dependency_overrides[get_mapbox_client] = lambda: mapbox

    response = client.get(items_url(trip, "/travel-times?profile=driving"), headers=vera["headers"])

    assert response.status_code == 200
    assert response.json() == {
        first["id"]: {
            "to_item_id": second["id"],
            "duration_seconds": 600.0,
            "distance_meters": 800.0,
            "profile": "driving",
        }
    }
    assert mapbox.requests == [([(-9.14, 38.71), (-9.21, 38.69)], "driving")]


def test_travel_times_without_mapbox_token_is_503(client, db, trip_setup):
    trip, alice = trip_setup["trip"], trip_setup["admin"]
    section = db.seed("itinerary_sections", {"trip_id": trip["id"], "title": "Day 1", "position": 0})
    for n in range(2):
        db.seed("itinerary_items", {"trip_id": trip["id"], "section_id": section["id"], "title": str(n),
                                    "position": n, "latitude": 1.0 + n, "longitude": 2.0})

    response = client.get(items_url(trip, "/travel-times"), headers=alice["headers"])

    assert response.status_code == 503
    assert response.json() == {"error": "Mapbox is not configured"}
