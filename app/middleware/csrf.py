"""
Double-submit CSRF protection for cookie-authenticated browser requests.

The token cookie is issued on GETs to protected pages; state-changing
requests carrying the session cookie must echo it in the CSRF header.
Requests authenticated with a bearer token, or carrying no session at all,
skip the check.
"""

import secrets
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse

from app.config import settings
from app.config.security_config import CSRF_CONFIG, CSRF_EXEMPT_PREFIXES, STATE_CHANGING_METHODS
from app.middleware.security import log_security_event


def generate_csrf_token() -> str:
    return secrets.token_hex(CSRF_CONFIG["token_bytes"])


def requires_csrf_check(request: Request, app_settings=settings) -> bool:
    """Only state-changing requests riding on the session cookie can be forged."""
    if request.method.upper() not in STATE_CHANGING_METHODS:
        return False
    if request.url.path.startswith(CSRF_EXEMPT_PREFIXES):
        return False
    if request.headers.get("authorization", "").startswith("Bearer "):
        return False
    return app_settings.session_cookie_name in request.cookies


def tokens_match(cookie_token, header_token) -> bool:
    if not cookie_token or not header_token:
        return False
    return secrets.compare_digest(cookie_token, header_token)


class CSRFMiddleware(BaseHTTPMiddleware):
    def __init__(self, app, app_settings=settings):
        super().__init__(app)
        self.settings = app_settings

    async def dispatch(self, request: Request, call_next):
        cookie_token = request.cookies.get(CSRF_CONFIG["cookie_name"])

        if requires_csrf_check(request, self.settings):
            header_token = request.headers.get(CSRF_CONFIG["header_name"])
            if not tokens_match(cookie_token, header_token):
                log_security_event(
                    request,
                    "CSRF_TOKEN_MISMATCH",
                    has_cookie_token=bool(cookie_token),
                    has_header_token=bool(header_token),
                )
                return JSONResponse(status_code=403, content={"detail": "CSRF token mismatch"})

        response = await call_next(request)

        path = request.url.path
        if (
            request.method == "GET"
            and not cookie_token
            and any(path.startswith(p) for p in self.settings.get_protected_prefixes())
        ):
            response.set_cookie(
                CSRF_CONFIG["cookie_name"],
                generate_csrf_token(),
                max_age=CSRF_CONFIG["max_age"],
                secure=self.settings.is_production,
                httponly=CSRF_CONFIG["http_only"],
                samesite=CSRF_CONFIG["same_site"],
            )
        return response
