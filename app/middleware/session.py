"""
Edge route protection.

Protected pages require a Supabase session; auth pages bounce users who
already have one. Enforcement is skipped entirely while Supabase is not
configured (placeholder URL), and the login redirect is skipped in
development.
"""

import logging
from starlette.concurrency import run_in_threadpool
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import RedirectResponse
from typing import Callable, Optional

from app.config import settings
from app.config.settings import Settings
from app.database.supabase_client import SupabaseNotConfigured, get_supabase
from app.middleware.security import log_security_event
from app.modules.auth.schemas import Principal
from app.modules.auth.service import AuthService

logger = logging.getLogger(__name__)

SessionResolver = Callable[[str], Optional[Principal]]


def resolve_supabase_session(access_token: str) -> Optional[Principal]:
    try:
        supabase = get_supabase()
    except SupabaseNotConfigured as e:
        logger.error(f"Middleware auth error: {e}")
        return None
    return AuthService(supabase).resolve_session(access_token)


def is_protected_path(path: str, app_settings: Settings) -> bool:
    return any(path.startswith(prefix) for prefix in app_settings.get_protected_prefixes())


def is_auth_path(path: str, app_settings: Settings) -> bool:
    return path.startswith(app_settings.auth_path_prefix)


def route_decision(path: str, has_session: bool, app_settings: Settings) -> Optional[str]:
    """Return the redirect target for this request, or None to pass through."""
    if is_protected_path(path, app_settings) and not has_session and not app_settings.is_development:
        return app_settings.login_path
    if is_auth_path(path, app_settings) and has_session:
        return app_settings.app_home_path
    return None


class SessionGuardMiddleware(BaseHTTPMiddleware):
    def __init__(self, app, app_settings: Settings = settings, session_resolver: Optional[SessionResolver] = None):
        super().__init__(app)
        self.settings = app_settings
        self.session_resolver = session_resolver or resolve_supabase_session
        if self.settings.uses_placeholder_supabase:
            logger.warning("Supabase URL is not configured; edge route protection is DISABLED")
        elif self.settings.is_development:
            logger.warning("Development mode: protected pages are reachable without a session")

    async def dispatch(self, request: Request, call_next):
        path = request.url.path
        if self.settings.uses_placeholder_supabase:
            return await call_next(request)
        if not (is_protected_path(path, self.settings) or is_auth_path(path, self.settings)):
            return await call_next(request)

        access_token = request.cookies.get(self.settings.session_cookie_name)
        principal = None
        if access_token:
            principal = await run_in_threadpool(self.session_resolver, access_token)

        target = route_decision(path, principal is not None, self.settings)
        if target is not None:
            if principal is None:
                log_security_event(request, "UNAUTHORIZED_ACCESS")
            return RedirectResponse(url=target, status_code=307)
        return await call_next(request)
