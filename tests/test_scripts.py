from unittest.mock import patch

import pytest

from withme.integrations.errors import IntegrationNotConfigured, UpstreamError
from withme.scripts import backfill_destination_images as backfill
from withme.scripts import migrate_guest_user
from tests.fakes import FakeSupabase


class StubImages:
    def __init__(self, results=None, errors=None):
        self.results = results or {}
        self.errors = errors or {}
        self.queries = []

    def search(self, query, source="pexels", per_page=10, page=1):
        self.queries.append((query, source, per_page))
        if query in self.errors:
            raise self.errors[query]
        return self.results.get(query, [])


def photo(n):
    return {"id": f"p{n}", "source": "unsplash", "url": f"https://img.test/{n}.jpg", "photographer": "Ana"}


@pytest.fixture
def db():
    db = FakeSupabase()
    db.seed(
        "destinations",
        {"city": "Lisbon", "country": "Portugal", "popularity": 90, "image_url": None},
        {"city": "Kyoto", "country": "Japan", "popularity": 95, "image_url": None},
        {"city": "Oslo", "country": "Norway", "popularity": 50, "image_url": None},
        {"city": "Porto", "country": "Portugal", "popularity": 70, "image_url": "https://img.test/porto.jpg"},
    )
    return db


def test_backfill_updates_skips_and_counts_failures(db):
    images = StubImages(
        results={"Kyoto Japan": [photo(1)], "Lisbon Portugal": [photo(2)]},
        errors={"Lisbon Portugal": UpstreamError("Unsplash", "timeout")},
    )

    counts = backfill.backfill_destination_images(db, images)

    assert counts == {"updated": 1, "skipped": 1, "failed": 1}
    assert [q[0] for q in images.queries] == ["Kyoto Japan", "Lisbon Portugal", "Oslo Norway"]
    kyoto = next(d for d in db.rows("destinations") if d["city"] == "Kyoto")
    assert kyoto["image_url"] == "https://img.test/1.jpg"
    assert kyoto["image_metadata"]["source_id"] == "p1"
    assert kyoto["image_metadata"]["photographer"] == "Ana"


def test_backfill_dry_run_and_limit(db):
    images = StubImages(results={"Kyoto Japan": [photo(1)]})

    counts = backfill.backfill_destination_images(db, images, source="pexels", limit=1, dry_run=True)

    assert counts == {"updated": 1, "skipped": 0, "failed": 0}
    assert images.queries == [("Kyoto Japan", "pexels", 1)]
    assert all(d["image_url"] is None for d in db.rows("destinations") if d["city"] != "Porto")


def test_backfill_stops_when_source_not_configured(db):
    images = StubImages(errors={"Kyoto Japan": IntegrationNotConfigured("Unsplash")})

    with pytest.raises(IntegrationNotConfigured):
        backfill.backfill_destination_images(db, images)


def test_backfill_cli_arguments():
    args = backfill.parse_args(["--limit", "5", "--dry-run", "--source", "pexels"])

    assert (args.limit, args.dry_run, args.source) == (5, True, "pexels")
    with pytest.raises(SystemExit):
        backfill.parse_args(["--source", "flickr"])


def test_backfill_main_exits_on_error(db):
    with patch.object(backfill, "get_script_supabase", return_value=db), \
            patch.object(backfill, "ImageSearchClient", return_value=StubImages(
                errors={"Kyoto Japan": IntegrationNotConfigured("Unsplash")})):
        with pytest.raises(SystemExit) as exc:
            backfill.main([])
    assert exc.value.code == 1


def test_migrate_guest_user_script(db):
    db.seed("profiles", {"id": "guest-1", "is_guest": True}, {"id": "user-1", "is_guest": False})
    db.seed("guest_tokens", {"token": "guest-abc", "user_id": "guest-1", "claimed_at": None})
    db.seed("trips", {"name": "Guest trip", "created_by": "guest-1"})

    with patch.object(migrate_guest_user, "get_script_supabase", return_value=db):
        migrate_guest_user.main(["--guest-token", "guest-abc", "--user-id", "user-1"])

    assert db.rows("trips")[0]["created_by"] == "user-1"
    assert [p["id"] for p in db.rows("profiles")] == ["user-1"]


def test_migrate_guest_user_script_unknown_token(db):
    with patch.object(migrate_guest_user, "get_script_supabase", return_value=db):
        with pytest.raises(SystemExit) as exc:
            migrate_guest_user.main(["--guest-token", "missing", "--user-id", "user-1"])
    assert exc.value.code == 1


def test_script_client_requires_service_role_key():
    from withme.database import supabase_client

    with patch.object(supabase_client.SupabaseClient, "_service_client", None), \
            patch.object(supabase_client.settings, "supabase_service_role_key", None):
        with pytest.raises(RuntimeError, match="SUPABASE_SERVICE_ROLE_KEY"):
            supabase_client.get_script_supabase()


def test_service_client_falls_back_to_anon_client():
    from withme.database import supabase_client

    anon = object()
    with patch.object(supabase_client.SupabaseClient, "_service_client", None), \
            patch.object(supabase_client.SupabaseClient, "_client", anon), \
            patch.object(supabase_client.settings, "supabase_service_role_key", None):
        assert supabase_client.get_service_supabase() is anon
