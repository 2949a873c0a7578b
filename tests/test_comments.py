import pytest


@pytest.fixture
def trip_with_members(make_user, make_trip, add_member):
    alice = make_user("Alice")
    bob = make_user("Bob")
    trip = make_trip(alice)
    add_member(trip, bob, "viewer")
    return {"trip": trip, "owner": alice, "member": bob}


def comment_on(trip, content, **extra):
    return {"entity_type": "trip", "entity_id": trip["id"], "content": content, **extra}


def test_member_comments_and_owner_is_notified(client, outbox, trip_with_members):
    trip, alice, bob = trip_with_members["trip"], trip_with_members["owner"], trip_with_members["member"]

    response = client.post("/api/v1/comments", json=comment_on(trip, "Can we add Sintra?"), headers=bob["headers"])

    assert response.status_code == 201
    body = response.json()
    assert body["entity_type"] == "trip"
    assert body["entity_id"] == trip["id"]
    assert body["user_id"] == bob["id"]
    assert body["is_edited"] is False
    assert [m["to"] for m in outbox.sent] == [alice["email"]]
    assert outbox.sent[0]["subject"] == "Bob commented on Lisbon Weekend"


def test_owner_comment_sends_no_email(client, outbox, trip_with_members):
    trip, alice = trip_with_members["trip"], trip_with_members["owner"]

    client.post("/api/v1/comments", json=comment_on(trip, "Booked!"), headers=alice["headers"])

    assert outbox.sent == []


def test_non_member_cannot_comment_on_private_trip(client, make_user, trip_with_members):
    stranger = make_user("Sam")

    response = client.post(
        "/api/v1/comments",
        json=comment_on(trip_with_members["trip"], "hi"),
        headers=stranger["headers"],
    )

    assert response.status_code == 403


def test_list_comments_oldest_first(client, db, trip_with_members):
    trip, bob = trip_with_members["trip"], trip_with_members["member"]
    db.seed("comments", {"content_type": "trip", "content_id": trip["id"], "user_id": bob["id"],
                         "content": "second", "created_at": "2026-03-02T10:00:00+00:00"})
    db.seed("comments", {"content_type": "trip", "content_id": trip["id"], "user_id": bob["id"],
                         "content": "first", "created_at": "2026-03-01T10:00:00+00:00"})

    response = client.get(
        "/api/v1/comments",
        params={"content_type": "trip", "content_id": trip["id"]},
        headers=bob["headers"],
    )

    assert response.status_code == 200
    assert [c["content"] for c in response.json()] == ["first", "second"]


def test_reply_must_share_the_parent_entity(client, db, trip_with_members, make_trip):
    trip, alice = trip_with_members["trip"], trip_with_members["owner"]
    other_trip = make_trip(alice, name="Porto")
    parent = db.seed("comments", {"content_type": "trip", "content_id": other_trip["id"],
                                  "user_id": alice["id"], "content": "elsewhere"})

    response = client.post(
        "/api/v1/comments",
        json=comment_on(trip, "reply", parent_id=parent["id"]),
        headers=alice["headers"],
    )

    assert response.status_code == 400
    assert response.json() == {"error": "Parent comment does not belong to this entity"}


def test_replies_are_listed_under_parent(client, db, trip_with_members):
    trip, alice, bob = trip_with_members["trip"], trip_with_members["owner"], trip_with_members["member"]
    parent = client.post("/api/v1/comments", json=comment_on(trip, "Dinner?"), headers=alice["headers"]).json()
    client.post("/api/v1/comments", json=comment_on(trip, "Yes!", parent_id=parent["id"]), headers=bob["headers"])

    replies = client.get(f"/api/v1/comments/{parent['id']}/replies", headers=alice["headers"])

    assert [r["content"] for r in replies.json()] == ["Yes!"]


def test_only_author_edits_or_deletes(client, db, trip_with_members):
    alice, bob = trip_with_members["owner"], trip_with_members["member"]
    comment = db.seed("comments", {"content_type": "destination", "content_id": "d-1",
                                   "user_id": bob["id"], "content": "Nice"})
    url = f"/api/v1/comments/{comment['id']}"

    assert client.patch(url, json={"content": "hijack"}, headers=alice["headers"]).status_code == 404
    assert client.delete(url, headers=alice["headers"]).status_code == 404

    edited = client.patch(url, json={"content": "Very nice"}, headers=bob["headers"])
    assert edited.json()["content"] == "Very nice"
    assert edited.json()["is_edited"] is True

    assert client.delete(url, headers=bob["headers"]).json() == {"success": True}
    assert db.rows("comments") == []


def test_reactions_toggle_and_count(client, db, trip_with_members):
    alice, bob = trip_with_members["owner"], trip_with_members["member"]
    comment = db.seed("comments", {"content_type": "trip", "content_id": trip_with_members["trip"]["id"],
                                   "user_id": alice["id"], "content": "Flights booked"})
    url = f"/api/v1/comments/{comment['id']}/reactions"

    assert client.post(url, json={"emoji": "🎉"}, headers=alice["headers"]).json() == {"reacted": True, "emoji": "🎉"}
    client.post(url, json={"emoji": "🎉"}, headers=bob["headers"])
    client.post(url, json={"emoji": "👍"}, headers=bob["headers"])
    assert client.post(url, json={"emoji": "👍"}, headers=bob["headers"]).json()["reacted"] is False

    counts = client.get(url, headers=alice["headers"])
    assert counts.json() == {"counts": {"🎉": 2}}


def test_unknown_content_type_is_rejected(client, trip_with_members):
    response = client.get(
        "/api/v1/comments",
        params={"content_type": "planet", "content_id": trip_with_members["trip"]["id"]},
        headers=trip_with_members["owner"]["headers"],
    )

    assert response.status_code == 400
    assert response.json()["error"] == "Invalid input"


def test_stranger_cannot_reach_replies_or_reactions_on_private_trip(client, db, make_user, trip_with_members):
    trip, alice = trip_with_members["trip"], trip_with_members["owner"]
    stranger = make_user("Sam")
    parent = db.seed("comments", {"content_type": "trip", "content_id": trip["id"],
                                  "user_id": alice["id"], "content": "Hotel code is 4711"})
    db.seed("comments", {"content_type": "trip", "content_id": trip["id"], "parent_id": parent["id"],
                         "user_id": alice["id"], "content": "secret reply"})
    base = f"/api/v1/comments/{parent['id']}"

    assert client.get(f"{base}/replies", headers=stranger["headers"]).status_code == 403
    assert client.get(f"{base}/reactions", headers=stranger["headers"]).status_code == 403
    toggled = client.post(f"{base}/reactions", json={"emoji": "👀"}, headers=stranger["headers"])
    assert toggled.status_code == 403
    assert db.rows("comment_reactions") == []


def test_reactions_on_unknown_comment_return_404(client, trip_with_members):
    response = client.get(
        "/api/v1/comments/8b0e8f5c-2f0c-4d55-9d3e-3b8f1f4a6c20/reactions",
        headers=trip_with_members["owner"]["headers"],
    )

    assert response.status_code == 404
    assert response.json() == {"error": "Comment not found"}
