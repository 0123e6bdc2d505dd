import logging
from supabase import Client, AuthApiError
from app.core.errors import AuthError
from app.modules.auth.schemas import AuthFailure, Principal
from typing import Optional

logger = logging.getLogger(__name__)

BEARER_PREFIX = "Bearer "


def extract_bearer_token(header_value: Optional[str]) -> Optional[str]:
    """Return the token from an 'Authorization: Bearer <token>' value, or None."""
    if not header_value or not header_value.startswith(BEARER_PREFIX):
        return None
    token = header_value[len(BEARER_PREFIX):].strip()
    return token or None


class AuthService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def verify_token(self, token: str) -> Principal:
        """Resolve the principal behind an access token via Supabase Auth."""
        try:
            user_response = self.supabase.auth.get_user(jwt=token)
        except AuthApiError as e:
            logger.info(f"Token rejected by identity service: {e}")
            raise AuthError(AuthFailure.invalid_token.value, "Invalid or expired token")
        except Exception as e:
            logger.error(f"Authentication error: {e}")
            raise AuthError(AuthFailure.service_error.value, "Authentication failed")

        if not user_response or not user_response.user:
            raise AuthError(AuthFailure.invalid_token.value, "Invalid or expired token")

        user = user_response.user
        return Principal(id=user.id, email=user.email)

    def authenticate(self, authorization: Optional[str]) -> Principal:
        """Authenticate a raw Authorization header value."""
        token = extract_bearer_token(authorization)
        if token is None:
            raise AuthError(AuthFailure.missing_header.value, "Missing or invalid authorization header")
        return self.verify_token(token)

    def resolve_session(self, access_token: Optional[str]) -> Optional[Principal]:
        """Best-effort session lookup for the edge middleware; never raises."""
        if not access_token:
            return None
        try:
            return self.verify_token(access_token)
        except AuthError as e:
            logger.warning("Session cookie did not resolve to a user: %s", e.reason)
            return None
