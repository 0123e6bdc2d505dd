from supabase import Client
from app.core.errors import AppError, ConflictError, InternalError, NotFoundError
from app.modules.auth.schemas import Principal
from app.modules.funnels.schemas import (
    FunnelCreate, FunnelResponse, FunnelListResponse, FunnelCreateResponse,
    FunnelPagesResponse, PageCreate, PageCreateResponse, PageResponse, PageSummary, Pagination
)
from app.modules.users.service import UserService
from typing import Optional
import logging

logger = logging.getLogger(__name__)

FUNNEL_WITH_PAGES = "*, pages(id, name, slug, created_at)"

DEFAULT_PAGE = {"name": "Landing Page", "slug": "landing"}


def build_pagination(limit: int, offset: int, total: int) -> Pagination:
    return Pagination(limit=limit, offset=offset, total=total, has_more=total > offset + limit)


class FunnelService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def list_funnels(
        self,
        user_id: str,
        published: Optional[bool] = None,
        limit: int = 10,
        offset: int = 0,
        search: Optional[str] = None,
        sort: str = "created_at",
        order: str = "desc"
    ) -> FunnelListResponse:
        """
        List the user's funnels with their pages embedded.

        Newest first unless sort/order say otherwise; search is a
        case-insensitive substring match on the funnel name.
        """
        try:
            query = self.supabase.table("funnels")\
                .select(FUNNEL_WITH_PAGES, count="exact")\
                .eq("user_id", user_id)
            if published is not None:
                query = query.eq("published", published)
            if search:
                query = query.ilike("name", f"%{search}%")
            result = query.order(sort, desc=order == "desc")\
                .range(offset, offset + limit - 1)\
                .execute()
        except Exception as e:
            logger.error(f"Database error listing funnels for {user_id}: {e}")
            raise InternalError("Failed to fetch funnels", e)

        total = result.count or 0
        return FunnelListResponse(
            funnels=[FunnelResponse(**f) for f in result.data or []],
            pagination=build_pagination(limit, offset, total),
        )

    def create_funnel(self, principal: Principal, funnel_data: FunnelCreate) -> FunnelCreateResponse:
        """
        Create a funnel owned by the principal.

        The user row is upserted first; if that fails nothing is created.
        When a template is requested a default landing page is added on a
        best-effort basis: a failed page insert is logged and reported
        through page_created, the funnel itself is kept.
        """
        UserService(self.supabase).upsert_user(principal)

        try:
            result = self.supabase.table("funnels").insert({
                "name": funnel_data.name,
                "user_id": principal.id,
                "published": False,
            }).execute()

            if not result.data:
                raise InternalError("Failed to create funnel")

            funnel = FunnelResponse(**result.data[0])
        except AppError:
            raise
        except Exception as e:
            logger.error(f"Database error creating funnel: {e}")
            raise InternalError("Failed to create funnel", e)

        page_created = False
        if funnel_data.template is not None:
            page = self._create_default_page(funnel.id)
            if page is not None:
                funnel.pages = [PageSummary(**page.model_dump())]
                page_created = True

        logger.info("Created funnel %s for user %s (page_created=%s)", funnel.id, principal.id, page_created)
        return FunnelCreateResponse(
            funnel=funnel,
            message="Funnel created successfully",
            page_created=page_created,
        )

    def _create_default_page(self, funnel_id: str) -> Optional[PageResponse]:
        try:
            result = self.supabase.table("pages").insert({
                "funnel_id": funnel_id,
                **DEFAULT_PAGE,
            }).execute()
        except Exception as e:
            logger.warning(f"Failed to create initial page for funnel {funnel_id}: {e}")
            return None
        if not result.data:
            logger.warning(f"Initial page insert for funnel {funnel_id} returned no row")
            return None
        return PageResponse(**result.data[0])

    def get_funnel_pages(self, funnel_id: str, user_id: str) -> FunnelPagesResponse:
        """Pages of a funnel owned by the user, oldest first."""
        try:
            funnel = self._require_owned_funnel(funnel_id, user_id)

            pages_result = self.supabase.table("pages")\
                .select("*")\
                .eq("funnel_id", funnel_id)\
                .order("created_at")\
                .execute()
        except AppError:
            raise
        except Exception as e:
            logger.error(f"Database error fetching pages for funnel {funnel_id}: {e}")
            raise InternalError("Failed to fetch pages", e)

        return FunnelPagesResponse(
            pages=[PageResponse(**p) for p in pages_result.data or []],
            funnel=FunnelResponse(**funnel),
        )

    def _require_owned_funnel(self, funnel_id: str, user_id: str) -> dict:
        result = self.supabase.table("funnels")\
            .select("*")\
            .eq("id", funnel_id)\
            .eq("user_id", user_id)\
            .limit(1)\
            .execute()
        if not result.data:
            raise NotFoundError("Funnel not found or access denied")
        return result.data[0]

    def create_page(self, funnel_id: str, user_id: str, page_data: PageCreate) -> PageCreateResponse:
        """Add a page to an owned funnel; slugs are unique per funnel (409)."""
        try:
            self._require_owned_funnel(funnel_id, user_id)

            existing = self.supabase.table("pages")\
                .select("id")\
                .eq("funnel_id", funnel_id)\
                .eq("slug", page_data.slug)\
                .limit(1)\
                .execute()
            if existing.data:
                raise ConflictError("A page with this slug already exists in this funnel")

            result = self.supabase.table("pages").insert({
                "funnel_id": funnel_id,
                "name": page_data.name,
                "slug": page_data.slug,
            }).execute()
            if not result.data:
                raise InternalError("Failed to create page")
        except AppError:
            raise
        except Exception as e:
            logger.error(f"Database error creating page for funnel {funnel_id}: {e}")
            raise InternalError("Failed to create page", e)

        page = PageResponse(**result.data[0])
        logger.info("Created page %s (%s) in funnel %s", page.id, page.slug, funnel_id)
        return PageCreateResponse(page=page, message="Page created successfully")
