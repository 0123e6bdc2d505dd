from fastapi import APIRouter, Depends, Request, Response
from app.config import settings
from app.core.dependencies import get_auth_service, get_current_principal
from app.core.rate_limit import limiter, endpoint_key
from app.database.supabase_client import get_supabase
from app.modules.auth.service import AuthService
from app.modules.users.schemas import SyncUserResponse
from app.modules.users.service import UserService
from supabase import Client

router = APIRouter(tags=["users"])


def get_user_service(supabase: Client = Depends(get_supabase)) -> UserService:
    return UserService(supabase)


@router.post("/sync-user", response_model=SyncUserResponse)
@limiter.limit(settings.sync_user_rate_limit, key_func=endpoint_key("sync-user"))
async def sync_user(
    request: Request,
    response: Response,
    auth_service: AuthService = Depends(get_auth_service),
    service: UserService = Depends(get_user_service)
):
    """Ensure the authenticated user exists in public.users (idempotent)."""
    # Authenticated here rather than as a dependency so the limiter runs first
    principal = get_current_principal(request, auth_service)
    user = service.sync_user(principal)
    return SyncUserResponse(user=user, message="User synced successfully")
