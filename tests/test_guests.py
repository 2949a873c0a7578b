import pytest

from withme.config import settings


@pytest.fixture
def guest_session(db, make_user, make_trip):
    guest = make_user("Guest", is_guest=True)
    token_row = db.seed("guest_tokens", {"token": "guest-abc", "user_id": guest["id"], "claimed_at": None})
    trip = make_trip(guest, is_guest=True)
    item = db.seed("itinerary_items", {"trip_id": trip["id"], "title": "Sintra", "created_by": guest["id"]})
    note = db.seed("trip_notes", {"trip_id": trip["id"], "title": "Ideas", "created_by": guest["id"]})
    return {"guest": guest, "token": token_row, "trip": trip, "item": item, "note": note}


def test_claim_moves_guest_content(client, db, make_user, guest_session):
    alice = make_user("Alice")

    response = client.post("/api/v1/guests/claim", json={"guest_token": "guest-abc"}, headers=alice["headers"])

    assert response.status_code == 200
    body = response.json()
    assert body["guest_user_id"] == guest_session["guest"]["id"]
    assert body["updated"]["trips"] == 1
    assert body["updated"]["trip_members"] == 1
    assert guest_session["trip"]["created_by"] == alice["id"]
    assert guest_session["item"]["created_by"] == alice["id"]
    assert guest_session["note"]["created_by"] == alice["id"]
    assert guest_session["token"]["claimed_by"] == alice["id"]
    assert guest_session["token"]["claimed_at"] is not None
    assert [p["id"] for p in db.rows("profiles")] == [alice["id"]]


def test_claim_drops_duplicate_membership(client, db, make_user, guest_session, add_member):
    alice = make_user("Alice")
    add_member(guest_session["trip"], alice, "editor")

    response = client.post("/api/v1/guests/claim", json={"guest_token": "guest-abc"}, headers=alice["headers"])

    assert response.json()["updated"]["trip_members"] == 0
    memberships = [m for m in db.rows("trip_members") if m["trip_id"] == guest_session["trip"]["id"]]
    assert [(m["user_id"], m["role"]) for m in memberships] == [(alice["id"], "editor")]


def test_claim_uses_guest_cookie(client, make_user, guest_session):
    alice = make_user("Alice")
    headers = {**alice["headers"], "Cookie": f"{settings.guest_cookie_name}=guest-abc"}

    response = client.post("/api/v1/guests/claim", json={}, headers=headers)

    assert response.status_code == 200


def test_claim_needs_a_token(client, make_user):
    response = client.post("/api/v1/guests/claim", json={}, headers=make_user("Alice")["headers"])

    assert response.status_code == 400
    assert response.json() == {"error": "Guest token is required"}


def test_claimed_or_unknown_token_is_404(client, make_user, guest_session):
    alice = make_user("Alice")
    client.post("/api/v1/guests/claim", json={"guest_token": "guest-abc"}, headers=alice["headers"])

    again = client.post("/api/v1/guests/claim", json={"guest_token": "guest-abc"}, headers=alice["headers"])
    unknown = client.post("/api/v1/guests/claim", json={"guest_token": "nope"}, headers=alice["headers"])

    assert again.status_code == 404
    assert unknown.json() == {"error": "Guest session not found"}


def test_guest_cannot_claim_own_session(client, guest_session):
    response = client.post(
        "/api/v1/guests/claim",
        json={"guest_token": "guest-abc"},
        headers=guest_session["guest"]["headers"],
    )

    assert response.status_code == 400
