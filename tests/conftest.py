import os
import uuid

# Settings are read at import time
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["SUPABASE_URL"] = "http://supabase.test"
os.environ["SUPABASE_KEY"] = "anon-test-key"
for _key in ("MAPBOX_ACCESS_TOKEN", "VIATOR_API_KEY", "PEXELS_API_KEY", "UNSPLASH_ACCESS_KEY", "PLUNK_API_KEY"):
    os.environ[_key] = ""

import pytest
from fastapi.testclient import TestClient

from withme.main import app
from withme.database.supabase_client import get_supabase, get_service_supabase
from withme.integrations.email import EmailService, get_email_service
from withme.modules.auth.service import clear_auth_cache
from tests.fakes import FakeSupabase


class RecordingEmailService(EmailService):
    """Collects outgoing emails instead of calling Plunk"""

    def __init__(self):
        super().__init__(api_key="test-plunk-key")
        self.sent = []

    def send(self, to, subject, body):
        self.sent.append({"to": to, "subject": subject, "body": body})
        return True


@pytest.fixture
def db():
    return FakeSupabase()


@pytest.fixture
def outbox():
    return RecordingEmailService()


@pytest.fixture
def client(db, outbox):
    app.dependency_overrides[get_supabase] = lambda: db
    app.dependency_overrides[get_service_supabase] = lambda: db
    app.dependency_overrides[get_email_service] = lambda: outbox
    clear_auth_cache()
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
    clear_auth_cache()


@pytest.fixture
def make_user(db):
    """Create an auth user with a profile; returns id, email, token and auth headers"""

    def _make_user(name="Alice", is_admin=False, **profile):
        user_id = str(uuid.uuid4())
        email = f"{name.lower()}-{user_id[:8]}@example.com"
        token = f"token-{user_id}"
        db.auth.add_user(user_id, email, token, {"full_name": name})
        db.seed("profiles", {
            "id": user_id,
            "email": email,
            "name": name,
            "username": None,
            "is_admin": is_admin,
            "is_guest": False,
            **profile,
        })
        return {
            "id": user_id,
            "email": email,
            "token": token,
            "headers": {"Authorization": f"Bearer {token}"},
        }

    return _make_user


@pytest.fixture
def make_trip(db):
    """Seed a trip created by owner, with owner as admin member"""

    def _make_trip(owner, privacy_setting="private", **fields):
        trip = db.seed("trips", {
            "name": "Lisbon Weekend",
            "description": None,
            "created_by": owner["id"],
            "privacy_setting": privacy_setting,
            "status": "planning",
            "destination_id": None,
            "start_date": None,
            "end_date": None,
            **fields,
        })
        db.seed("trip_members", {"trip_id": trip["id"], "user_id": owner["id"], "role": "admin"})
        return trip

    return _make_trip


@pytest.fixture
def add_member(db):
    def _add_member(trip, user, role):
        return db.seed("trip_members", {"trip_id": trip["id"], "user_id": user["id"], "role": role})

    return _add_member
