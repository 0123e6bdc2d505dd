import logging
from starlette.requests import Request

from app.config.security_config import SECURITY_HEADERS

logger = logging.getLogger("app.security")


def client_address(request: Request) -> str:
    forwarded_for = request.headers.get("x-forwarded-for")
    if forwarded_for:
        return forwarded_for.split(",")[0].strip()
    return request.headers.get("x-real-ip") or (request.client.host if request.client else "unknown")


def log_security_event(request: Request, event: str, **details) -> None:
    logger.warning(
        "%s method=%s path=%s ip=%s %s",
        event,
        request.method,
        request.url.path,
        client_address(request),
        " ".join(f"{k}={v}" for k, v in details.items()),
    )


class SecurityHeadersMiddleware:
    def __init__(self, app):
        self.app = app

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        async def send_with_headers(message):
            if message["type"] == "http.response.start":
                message.setdefault("headers", [])
                message["headers"].extend(SECURITY_HEADERS)
            await send(message)

        await self.app(scope, receive, send_with_headers)
