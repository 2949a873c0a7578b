import pytest

from withme.modules.admin.service import average


@pytest.fixture
def admin(make_user):
    return make_user("Root", is_admin=True)


def test_admin_routes_require_admin_flag(client, make_user):
    regular = make_user("Alice")

    assert client.get("/api/v1/admin/stats").status_code == 401
    forbidden = client.get("/api/v1/admin/stats", headers=regular["headers"])
    assert forbidden.status_code == 403
    assert forbidden.json() == {"error": "Admin access required"}


def test_stats_counts_and_averages(client, db, admin, make_user, make_trip, add_member):
    alice = make_user("Alice")
    bob = make_user("Bob")
    first = make_trip(alice)
    make_trip(bob)
    add_member(first, bob, "viewer")
    db.seed("itinerary_items", *({"trip_id": first["id"], "title": f"Item {n}"} for n in range(3)))
    db.seed("destinations", {"city": "Lisbon"})

    response = client.get("/api/v1/admin/stats", headers=admin["headers"])

    assert response.status_code == 200
    assert response.json() == {
        "total_users": 3,
        "total_trips": 2,
        "total_destinations": 1,
        "total_itinerary_items": 3,
        "total_comments": 0,
        "total_group_plan_ideas": 0,
        "avg_members_per_trip": 1.5,
        "avg_items_per_trip": 1.5,
    }


def test_list_users_with_search(client, admin, make_user):
    make_user("Alice")
    make_user("Bob")

    response = client.get("/api/v1/admin/users", params={"search": "ali"}, headers=admin["headers"])

    assert [u["name"] for u in response.json()] == ["Alice"]


def test_grant_and_revoke_admin(client, db, admin, make_user):
    alice = make_user("Alice")
    url = f"/api/v1/admin/users/{alice['id']}"

    granted = client.patch(url, json={"is_admin": True}, headers=admin["headers"])
    assert granted.json()["is_admin"] is True
    assert client.get("/api/v1/admin/stats", headers=alice["headers"]).status_code == 200

    client.patch(url, json={"is_admin": False}, headers=admin["headers"])
    assert client.get("/api/v1/admin/stats", headers=alice["headers"]).status_code == 403


def test_update_unknown_user_or_extra_fields(client, admin):
    missing = client.patch(
        "/api/v1/admin/users/00000000-0000-0000-0000-000000000000",
        json={"is_admin": True},
        headers=admin["headers"],
    )
    extra = client.patch(
        f"/api/v1/admin/users/{admin['id']}",
        json={"is_admin": True, "email": "x@example.com"},
        headers=admin["headers"],
    )

    assert missing.status_code == 404
    assert extra.status_code == 400


def test_average_handles_empty_denominator():
    assert average(5, 0) == 0
    assert average(10, 3) == 3.33
