import pytest
from fastapi.testclient import TestClient

from app.core.rate_limit import limiter
from app.database.supabase_client import get_supabase
from app.main import app
from tests.utils import FakeSupabase

ALICE_ID = "11111111-1111-1111-1111-111111111111"
BOB_ID = "22222222-2222-2222-2222-222222222222"


@pytest.fixture()
def fake_supabase():
    fake = FakeSupabase()
    fake.auth.add_user("token-alice", ALICE_ID, "alice@example.com")
    fake.auth.add_user("token-bob", BOB_ID, "bob@example.com")
    return fake


@pytest.fixture()
def client(fake_supabase):
    limiter.reset()
    app.dependency_overrides[get_supabase] = lambda: fake_supabase
    try:
        with TestClient(app) as test_client:
            yield test_client
    finally:
        app.dependency_overrides.clear()
        limiter.reset()
