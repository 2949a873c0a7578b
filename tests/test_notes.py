import pytest


@pytest.fixture
def notes_setup(make_user, make_trip, add_member):
    alice = make_user("Alice")
    carl = make_user("Carl")
    dana = make_user("Dana")
    vera = make_user("Vera")
    trip = make_trip(alice)
    add_member(trip, carl, "contributor")
    add_member(trip, dana, "contributor")
    add_member(trip, vera, "viewer")
    return {"trip": trip, "admin": alice, "carl": carl, "dana": dana, "viewer": vera}


def notes_url(trip, suffix=""):
    return f"/api/v1/trips/{trip['id']}/notes{suffix}"


def test_contributor_creates_and_viewer_reads(client, notes_setup):
    trip = notes_setup["trip"]

    created = client.post(
        notes_url(trip),
        json={"title": "Packing", "content": "Sunscreen"},
        headers=notes_setup["carl"]["headers"],
    )
    listed = client.get(notes_url(trip), headers=notes_setup["viewer"]["headers"])

    assert created.status_code == 201
    assert created.json()["created_by"] == notes_setup["carl"]["id"]
    assert [n["title"] for n in listed.json()] == ["Packing"]


def test_viewer_cannot_create(client, notes_setup):
    response = client.post(
        notes_url(notes_setup["trip"]),
        json={"title": "Nope"},
        headers=notes_setup["viewer"]["headers"],
    )

    assert response.status_code == 403


def test_only_author_or_editor_modifies_note(client, db, notes_setup):
    trip = notes_setup["trip"]
    note = db.seed("trip_notes", {"trip_id": trip["id"], "title": "Budget", "created_by": notes_setup["carl"]["id"]})
    url = notes_url(trip, f"/{note['id']}")

    other = client.patch(url, json={"content": "x"}, headers=notes_setup["dana"]["headers"])
    author = client.patch(url, json={"content": "€800 each"}, headers=notes_setup["carl"]["headers"])
    admin = client.delete(url, headers=notes_setup["admin"]["headers"])

    assert other.status_code == 403
    assert other.json() == {"error": "Not authorized to modify this note"}
    assert author.json()["content"] == "€800 each"
    assert admin.status_code == 200
    assert db.rows("trip_notes") == []


def test_update_rejects_empty_and_unknown_fields(client, db, notes_setup):
    trip, alice = notes_setup["trip"], notes_setup["admin"]
    note = db.seed("trip_notes", {"trip_id": trip["id"], "title": "Budget", "created_by": alice["id"]})
    url = notes_url(trip, f"/{note['id']}")

    assert client.patch(url, json={}, headers=alice["headers"]).status_code == 400
    assert client.patch(url, json={"trip_id": "other"}, headers=alice["headers"]).status_code == 400


def test_missing_note_is_404(client, notes_setup):
    response = client.patch(
        notes_url(notes_setup["trip"], "/00000000-0000-0000-0000-000000000000"),
        json={"title": "x"},
        headers=notes_setup["admin"]["headers"],
    )

    assert response.status_code == 404


def test_set_tags_creates_missing_tags_and_replaces_links(client, db, notes_setup):
    trip, alice = notes_setup["trip"], notes_setup["admin"]
    note = db.seed("trip_notes", {"trip_id": trip["id"], "title": "Food", "created_by": alice["id"]})
    existing = db.seed("tags", {"name": "food"})
    url = notes_url(trip, f"/{note['id']}/tags")

    first = client.put(url, json={"tags": [" food ", "budget", "food", ""]}, headers=alice["headers"])
    second = client.put(url, json={"tags": ["budget"]}, headers=alice["headers"])
    fetched = client.get(url, headers=notes_setup["viewer"]["headers"])

    assert first.status_code == 200
    assert [t["name"] for t in first.json()["tags"]] == ["food", "budget"]
    assert first.json()["tags"][0]["id"] == existing["id"]
    assert [t["name"] for t in second.json()["tags"]] == ["budget"]
    assert [t["name"] for t in fetched.json()["tags"]] == ["budget"]
    assert len(db.rows("tags")) == 2


def test_contributor_cannot_tag(client, db, notes_setup):
    trip = notes_setup["trip"]
    note = db.seed("trip_notes", {"trip_id": trip["id"], "title": "Food", "created_by": notes_setup["carl"]["id"]})

    response = client.put(
        notes_url(trip, f"/{note['id']}/tags"),
        json={"tags": ["x"]},
        headers=notes_setup["carl"]["headers"],
    )

    assert response.status_code == 403
