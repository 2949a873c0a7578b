import pytest


@pytest.fixture
def group(client, make_user):
    alice = make_user("Alice")
    bob = make_user("Bob")
    created = client.post("/api/v1/groups", json={"name": "Climbing crew", "emoji": "🧗"}, headers=alice["headers"])
    assert created.status_code == 201
    group = created.json()
    client.post(f"/api/v1/groups/{group['id']}/members", json={"user_id": bob["id"]}, headers=alice["headers"])
    return {"group": group, "admin": alice, "member": bob}


def group_url(group, suffix=""):
    return f"/api/v1/groups/{group['id']}{suffix}"


def test_creator_becomes_admin(client, db, group):
    assert group["group"]["user_role"] == "admin"
    listed = client.get("/api/v1/groups", headers=group["member"]["headers"]).json()
    assert [(g["name"], g["user_role"]) for g in listed] == [("Climbing crew", "member")]


def test_group_detail_includes_member_profiles(client, group):
    response = client.get(group_url(group["group"]), headers=group["member"]["headers"])

    assert response.status_code == 200
    assert sorted(m["profile"]["name"] for m in response.json()["members"]) == ["Alice", "Bob"]


def test_private_group_hidden_from_outsiders_public_group_visible(client, make_user, group):
    stranger = make_user("Sam")

    assert client.get(group_url(group["group"]), headers=stranger["headers"]).status_code == 403

    client.patch(group_url(group["group"]), json={"visibility": "public"}, headers=group["admin"]["headers"])
    anonymous = client.get(group_url(group["group"]))
    assert anonymous.status_code == 200
    assert anonymous.json()["user_role"] is None


def test_member_cannot_manage_group(client, make_user, group):
    newcomer = make_user("Nina")

    rename = client.patch(group_url(group["group"]), json={"name": "Mine"}, headers=group["member"]["headers"])
    invite = client.post(group_url(group["group"], "/members"), json={"user_id": newcomer["id"]},
                         headers=group["member"]["headers"])
    delete = client.delete(group_url(group["group"]), headers=group["member"]["headers"])

    assert rename.status_code == 403
    assert invite.status_code == 403
    assert delete.status_code == 403


def test_duplicate_member_and_role_change(client, group):
    url = group_url(group["group"], "/members")
    bob = group["member"]

    duplicate = client.post(url, json={"user_id": bob["id"]}, headers=group["admin"]["headers"])
    promoted = client.patch(f"{url}/{bob['id']}", json={"role": "admin"}, headers=group["admin"]["headers"])

    assert duplicate.status_code == 400
    assert promoted.json()["role"] == "admin"


def test_member_may_leave_but_not_remove_others(client, group):
    alice, bob = group["admin"], group["member"]
    url = group_url(group["group"], "/members")

    assert client.delete(f"{url}/{alice['id']}", headers=bob["headers"]).status_code == 403
    assert client.delete(f"{url}/{bob['id']}", headers=bob["headers"]).json() == {"success": True}
    assert client.get(group_url(group["group"], "/ideas"), headers=bob["headers"]).status_code == 403


def test_update_group_requires_fields(client, group):
    response = client.patch(group_url(group["group"]), json={}, headers=group["admin"]["headers"])

    assert response.status_code == 400


def test_ideas_and_voting(client, group):
    alice, bob = group["admin"], group["member"]
    idea = client.post(group_url(group["group"], "/ideas"), json={"title": "Kalymnos in May", "type": "destination"},
                       headers=bob["headers"]).json()
    vote_url = group_url(group["group"], f"/ideas/{idea['id']}/vote")

    client.post(vote_url, json={"vote_type": "up"}, headers=alice["headers"])
    client.post(vote_url, json={"vote_type": "up"}, headers=bob["headers"])
    changed = client.post(vote_url, json={"vote_type": "down"}, headers=alice["headers"])

    assert changed.status_code == 200
    assert (changed.json()["votes_up"], changed.json()["votes_down"]) == (1, 1)
    assert client.post(vote_url, json={"vote_type": "sideways"}, headers=bob["headers"]).status_code == 400


def test_idea_editing_rights(client, make_user, group):
    alice, bob = group["admin"], group["member"]
    carol = make_user("Carol")
    client.post(group_url(group["group"], "/members"), json={"user_id": carol["id"]}, headers=alice["headers"])
    idea = client.post(group_url(group["group"], "/ideas"), json={"title": "Rent a van"},
                       headers=bob["headers"]).json()
    url = group_url(group["group"], f"/ideas/{idea['id']}")

    assert client.patch(url, json={"title": "Hijacked"}, headers=carol["headers"]).status_code == 403
    assert client.patch(url, json={"title": "Rent a camper"}, headers=bob["headers"]).json()["title"] == "Rent a camper"
    assert client.delete(url, headers=alice["headers"]).status_code == 200
    assert client.get(url, headers=bob["headers"]).status_code == 404


def test_bad_group_id(client, group):
    response = client.get("/api/v1/groups/not-a-uuid", headers=group["admin"]["headers"])

    assert response.status_code == 400
    assert response.json() == {"error": "Invalid group ID format"}
