"""
Core dependencies for route protection and permission checking
"""

from fastapi import Depends, Request
from app.core.errors import AuthError, PermissionDeniedError, InternalError
from app.database.supabase_client import get_supabase
from app.middleware.security import log_security_event
from app.modules.auth.schemas import Principal
from app.modules.auth.service import AuthService
from supabase import Client
from typing import Iterable, Optional, Tuple
import logging

logger = logging.getLogger(__name__)

WORKSPACE_ROLES = ("owner", "admin", "editor", "viewer")


def get_auth_service(supabase: Client = Depends(get_supabase)) -> AuthService:
    return AuthService(supabase)


def get_current_principal(
    request: Request,
    auth_service: AuthService = Depends(get_auth_service)
) -> Principal:
    """Authenticate the request's bearer token. Raises AuthError (401)."""
    try:
        return auth_service.authenticate(request.headers.get("Authorization"))
    except AuthError as e:
        log_security_event(request, "AUTH_FAILED", reason=e.reason)
        raise


def get_workspace_role(workspace_id: str, user_id: str, supabase: Client) -> Optional[str]:
    """Return the user's role in a workspace, or None when not a member."""
    try:
        result = supabase.table("workspace_members")\
            .select("role")\
            .eq("workspace_id", workspace_id)\
            .eq("user_id", user_id)\
            .limit(1)\
            .execute()
    except Exception as e:
        logger.error(f"Error checking workspace membership: {e}")
        raise InternalError("Failed to check workspace permissions", e)
    if not result.data:
        return None
    return result.data[0].get("role")


def check_workspace_permission(
    workspace_id: str,
    principal: Principal,
    supabase: Client,
    allowed_roles: Iterable[str] = WORKSPACE_ROLES,
) -> Tuple[Principal, str]:
    """Allow if the principal holds one of allowed_roles in the workspace, else 403."""
    allowed = tuple(allowed_roles)
    role = get_workspace_role(workspace_id, principal.id, supabase)
    if role not in allowed:
        logger.warning(
            "Workspace access denied: user=%s workspace=%s role=%s", principal.id, workspace_id, role
        )
        raise PermissionDeniedError({
            "error": "Insufficient permissions for this workspace",
            "required_roles": list(allowed),
            "current_role": role,
        })
    return principal, role


def require_workspace_role(*allowed_roles: str):
    """Factory function to create a workspace role check dependency"""
    roles = allowed_roles or WORKSPACE_ROLES

    def check_role(
        workspace_id: str,
        principal: Principal = Depends(get_current_principal),
        supabase: Client = Depends(get_supabase)
    ) -> Principal:
        check_workspace_permission(workspace_id, principal, supabase, roles)
        return principal
    return check_role
