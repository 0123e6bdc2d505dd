from supabase import Client
from app.core.errors import AppError, InternalError, ValidationError
from app.modules.auth.schemas import Principal
from app.modules.users.schemas import UserResponse
import logging

logger = logging.getLogger(__name__)


class UserService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def upsert_user(self, principal: Principal) -> UserResponse:
        """Insert or overwrite the public.users row keyed on the auth user id."""
        if not principal.email:
            raise ValidationError("Authenticated user has no email address")
        try:
            result = self.supabase.table("users")\
                .upsert(
                    {"id": principal.id, "email": principal.email},
                    on_conflict="id",
                    ignore_duplicates=False,
                )\
                .execute()

            if not result.data:
                raise InternalError("Failed to sync user")

            return UserResponse(**result.data[0])
        except AppError:
            raise
        except Exception as e:
            logger.error(f"Error syncing user {principal.id}: {e}")
            raise InternalError("Failed to sync user", e)

    def sync_user(self, principal: Principal) -> UserResponse:
        user = self.upsert_user(principal)
        logger.info("Synced user %s", principal.id)
        return user
