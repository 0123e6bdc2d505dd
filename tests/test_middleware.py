import pytest
from fastapi import FastAPI, Request
from fastapi.testclient import TestClient

from app.config.settings import Settings
from app.middleware.csrf import CSRFMiddleware, requires_csrf_check, tokens_match
from app.middleware.session import SessionGuardMiddleware, route_decision
from app.modules.auth.schemas import Principal

PRODUCTION = Settings(supabase_url="https://proj.supabase.co", environment="production")
STAGING = Settings(supabase_url="https://proj.supabase.co", environment="staging")
DEVELOPMENT = Settings(supabase_url="https://proj.supabase.co", environment="development")
PLACEHOLDER = Settings(supabase_url="https://your-supabase-url.supabase.co", environment="production")


def build_site(*middleware):
    site = FastAPI()

    @site.get("/builder/templates")
    async def builder():
        return {"page": "builder"}

    @site.get("/auth/login")
    async def login():
        return {"page": "login"}

    @site.get("/pricing")
    async def pricing():
        return {"page": "pricing"}

    @site.post("/api/things")
    async def create_thing():
        return {"ok": True}

    @site.post("/api/webhooks/stripe")
    async def webhook():
        return {"ok": True}

    for cls, kwargs in middleware:
        site.add_middleware(cls, **kwargs)
    return site


class RecordingResolver:
    def __init__(self, valid_tokens=("good-session",)):
        self.valid_tokens = set(valid_tokens)
        self.calls = []

    def __call__(self, token):
        self.calls.append(token)
        if token in self.valid_tokens:
            return Principal(id="user-1", email="user@example.com")
        return None


def guarded_client(app_settings, resolver):
    site = build_site((SessionGuardMiddleware, {"app_settings": app_settings, "session_resolver": resolver}))
    return TestClient(site, follow_redirects=False)


@pytest.mark.parametrize(
    "path, has_session, app_settings, expected",
    [
        ("/builder/templates", False, PRODUCTION, "/auth/login"),
        ("/builder", False, STAGING, "/auth/login"),
        ("/builder/templates", True, PRODUCTION, None),
        ("/builder/templates", False, DEVELOPMENT, None),
        ("/auth/login", True, PRODUCTION, "/builder/templates"),
        ("/auth/login", True, DEVELOPMENT, "/builder/templates"),
        ("/auth/login", False, PRODUCTION, None),
        ("/pricing", False, PRODUCTION, None),
    ],
)
def test_route_decision(path, has_session, app_settings, expected):
    assert route_decision(path, has_session, app_settings) == expected


def test_protected_page_without_session_redirects_to_login():
    resolver = RecordingResolver()
    client = guarded_client(PRODUCTION, resolver)

    resp = client.get("/builder/templates")

    assert resp.status_code == 307
    assert resp.headers["location"] == "/auth/login"
    assert resolver.calls == []


def test_protected_page_with_invalid_session_redirects():
    resolver = RecordingResolver()
    client = guarded_client(PRODUCTION, resolver)
    client.cookies.set("sb-access-token", "expired")

    resp = client.get("/builder/templates")

    assert resp.status_code == 307
    assert resolver.calls == ["expired"]


def test_protected_page_with_session_passes():
    client = guarded_client(PRODUCTION, RecordingResolver())
    client.cookies.set("sb-access-token", "good-session")

    resp = client.get("/builder/templates")

    assert resp.status_code == 200
    assert resp.json() == {"page": "builder"}


def test_auth_page_with_session_redirects_home():
    client = guarded_client(PRODUCTION, RecordingResolver())
    client.cookies.set("sb-access-token", "good-session")

    resp = client.get("/auth/login")

    assert resp.status_code == 307
    assert resp.headers["location"] == "/builder/templates"


def test_development_allows_protected_pages_without_session():
    client = guarded_client(DEVELOPMENT, RecordingResolver())

    assert client.get("/builder/templates").status_code == 200


def test_placeholder_config_disables_enforcement():
    resolver = RecordingResolver()
    client = guarded_client(PLACEHOLDER, resolver)
    client.cookies.set("sb-access-token", "good-session")

    assert client.get("/builder/templates").status_code == 200
    assert client.get("/auth/login").status_code == 200
    assert resolver.calls == []


def test_unguarded_paths_skip_session_lookup():
    resolver = RecordingResolver()
    client = guarded_client(PRODUCTION, resolver)
    client.cookies.set("sb-access-token", "good-session")

    assert client.get("/pricing").status_code == 200
    assert resolver.calls == []


@pytest.fixture
def csrf_client():
    site = build_site((CSRFMiddleware, {"app_settings": STAGING}))
    return TestClient(site)


def test_csrf_cookie_issued_on_protected_get(csrf_client):
    resp = csrf_client.get("/builder/templates")

    assert resp.status_code == 200
    token = resp.cookies.get("csrf-token")
    assert token and len(token) == 64


def test_csrf_cookie_not_issued_on_public_get(csrf_client):
    resp = csrf_client.get("/pricing")

    assert "csrf-token" not in resp.cookies


def test_session_post_without_csrf_header_is_rejected(csrf_client):
    csrf_client.get("/builder/templates")
    csrf_client.cookies.set("sb-access-token", "session")

    resp = csrf_client.post("/api/things")

    assert resp.status_code == 403
    assert resp.json() == {"detail": "CSRF token mismatch"}


def test_session_post_with_matching_header_passes(csrf_client):
    csrf_client.get("/builder/templates")
    token = csrf_client.cookies.get("csrf-token")
    csrf_client.cookies.set("sb-access-token", "session")

    resp = csrf_client.post("/api/things", headers={"X-CSRF-Token": token})
    wrong = csrf_client.post("/api/things", headers={"X-CSRF-Token": "0" * 64})

    assert resp.status_code == 200
    assert wrong.status_code == 403


@pytest.mark.parametrize(
    "path, headers, with_session",
    [
        ("/api/things", {"Authorization": "Bearer token-alice"}, True),
        ("/api/things", {}, False),
        ("/api/webhooks/stripe", {}, True),
    ],
)
def test_csrf_exemptions(csrf_client, path, headers, with_session):
    if with_session:
        csrf_client.cookies.set("sb-access-token", "session")

    resp = csrf_client.post(path, headers=headers)

    assert resp.status_code == 200


@pytest.mark.parametrize(
    "cookie_token, header_token, expected",
    [("abc", "abc", True), ("abc", "abd", False), (None, "abc", False), ("abc", None, False), ("", "", False)],
)
def test_tokens_match(cookie_token, header_token, expected):
    assert tokens_match(cookie_token, header_token) is expected


def test_requires_csrf_check_ignores_safe_methods():
    site = build_site()
    seen = {}

    @site.get("/inspect")
    async def inspect_request(request: Request):
        seen["check"] = requires_csrf_check(request, STAGING)
        return {}

    client = TestClient(site)
    client.cookies.set("sb-access-token", "session")
    client.get("/inspect")

    assert seen["check"] is False


def test_security_headers_on_api_responses(client):
    resp = client.get("/health")

    assert resp.status_code == 200
    assert resp.headers["x-content-type-options"] == "nosniff"
    assert resp.headers["x-frame-options"] == "DENY"
    assert "referrer-policy" in resp.headers
