import logging

from supabase import create_client, Client
from app.config import settings

logger = logging.getLogger(__name__)


class SupabaseNotConfigured(RuntimeError):
    pass


class SupabaseClient:
    _admin_client: Client = None

    @classmethod
    def get_admin_client(cls) -> Client:
        """
        Server-side client. Prefers the service_role key so funnel/user writes
        bypass RLS the same way for every handler; falls back to the anon key.
        """
        if cls._admin_client is None:
            if settings.uses_placeholder_supabase:
                raise SupabaseNotConfigured("SUPABASE_URL is not configured")
            key = settings.supabase_service_role_key or settings.supabase_key
            if not settings.supabase_service_role_key:
                logger.warning("SUPABASE_SERVICE_ROLE_KEY not set, using anon key for server-side queries")
            cls._admin_client = create_client(settings.supabase_url, key)
        return cls._admin_client

    @classmethod
    def reset_client(cls):
        cls._admin_client = None


def get_supabase() -> Client:
    return SupabaseClient.get_admin_client()
