from fastapi import APIRouter, Depends, Query, Request, Response
from pydantic import BaseModel
import pydantic
from app.config import settings
from app.core.dependencies import get_current_principal
from app.core.errors import ValidationError
from app.core.rate_limit import limiter, endpoint_key
from app.database.supabase_client import get_supabase
from app.modules.auth.schemas import Principal
from app.modules.funnels.schemas import (
    FunnelCreate, FunnelListResponse, FunnelCreateResponse, FunnelPagesResponse,
    FunnelSortField, PageCreate, PageCreateResponse, SortOrder
)
from app.modules.funnels.service import FunnelService
from supabase import Client
from typing import Optional, Type, TypeVar

router = APIRouter(prefix="/funnels", tags=["funnels"])

BodyModel = TypeVar("BodyModel", bound=BaseModel)


def get_funnel_service(supabase: Client = Depends(get_supabase)) -> FunnelService:
    return FunnelService(supabase)


async def parse_body(request: Request, model: Type[BodyModel]) -> BodyModel:
    """Decode and validate a JSON body; called only after the principal is resolved."""
    try:
        payload = await request.json()
    except ValueError:
        raise ValidationError("Request body must be valid JSON")
    try:
        return model.model_validate(payload)
    except pydantic.ValidationError as e:
        raise ValidationError(e.errors(include_url=False, include_context=False, include_input=False))


@router.get("", response_model=FunnelListResponse)
@limiter.limit(settings.funnel_list_rate_limit, key_func=endpoint_key("get-funnels"))
async def list_funnels(
    request: Request,
    response: Response,
    published: Optional[bool] = None,
    limit: int = Query(10, ge=1),
    offset: int = Query(0, ge=0),
    search: Optional[str] = None,
    sort: FunnelSortField = "created_at",
    order: SortOrder = "desc",
    principal: Principal = Depends(get_current_principal),
    service: FunnelService = Depends(get_funnel_service)
):
    """List funnels owned by the authenticated user."""
    return service.list_funnels(
        principal.id, published=published, limit=limit, offset=offset,
        search=search, sort=sort, order=order,
    )


@router.post("", response_model=FunnelCreateResponse, status_code=201)
@limiter.limit(settings.funnel_create_rate_limit, key_func=endpoint_key("create-funnel"))
async def create_funnel(
    request: Request,
    response: Response,
    principal: Principal = Depends(get_current_principal),
    service: FunnelService = Depends(get_funnel_service)
):
    """Create a funnel; a requested template adds a default landing page."""
    funnel_data = await parse_body(request, FunnelCreate)
    return service.create_funnel(principal, funnel_data)


@router.get("/{funnel_id}/pages", response_model=FunnelPagesResponse)
async def list_funnel_pages(
    funnel_id: str,
    principal: Principal = Depends(get_current_principal),
    service: FunnelService = Depends(get_funnel_service)
):
    """List pages of a funnel owned by the authenticated user."""
    return service.get_funnel_pages(funnel_id, principal.id)


@router.post("/{funnel_id}/pages", response_model=PageCreateResponse, status_code=201)
async def create_funnel_page(
    funnel_id: str,
    request: Request,
    principal: Principal = Depends(get_current_principal),
    service: FunnelService = Depends(get_funnel_service)
):
    """Add a page to a funnel owned by the authenticated user."""
    page_data = await parse_body(request, PageCreate)
    return service.create_page(funnel_id, principal.id, page_data)
