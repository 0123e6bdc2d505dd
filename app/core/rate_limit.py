"""
Shared slowapi limiter. Lives outside main.py so route modules can decorate
endpoints without importing the application.
"""

from fastapi import Request
from slowapi import Limiter
from slowapi.util import get_remote_address

from app.config import settings


def endpoint_key(identifier: str):
    """Key function scoping a limit to the client address plus a fixed endpoint identifier."""
    def key_func(request: Request) -> str:
        return f"{get_remote_address(request)}:{identifier}"
    return key_func


# headers_enabled makes X-RateLimit-* reflect the limiter's real window state
limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[settings.rate_limit],
    headers_enabled=True,
)
