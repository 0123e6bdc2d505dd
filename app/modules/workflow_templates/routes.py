from fastapi import APIRouter, Depends
from app.core.dependencies import require_workspace_role
from app.modules.auth.schemas import Principal
from app.modules.workflow_templates.registry import TemplateRegistry, get_template_registry
from app.modules.workflow_templates.schemas import (
    TemplateDetailResponse, TemplateListResponse,
    TemplateConfigValidateRequest, TemplateConfigValidateResponse
)
from app.modules.workflow_templates.service import WorkflowTemplateService
from typing import Optional

router = APIRouter(prefix="/workspaces/{workspace_id}/workflows/templates", tags=["workflow-templates"])


def get_workflow_template_service(
    registry: TemplateRegistry = Depends(get_template_registry)
) -> WorkflowTemplateService:
    return WorkflowTemplateService(registry)


@router.get("", response_model=TemplateListResponse)
async def list_workflow_templates(
    workspace_id: str,
    category: Optional[str] = None,
    search: Optional[str] = None,
    principal: Principal = Depends(require_workspace_role()),
    service: WorkflowTemplateService = Depends(get_workflow_template_service)
):
    """List template summaries (without workflow definitions)."""
    return service.list_templates(category=category, search=search)


@router.get("/{template_id}", response_model=TemplateDetailResponse)
async def get_workflow_template(
    workspace_id: str,
    template_id: str,
    principal: Principal = Depends(require_workspace_role()),
    service: WorkflowTemplateService = Depends(get_workflow_template_service)
):
    """Get one template including its full workflow definition."""
    return TemplateDetailResponse(template=service.get_template(template_id))


@router.post("/{template_id}/validate", response_model=TemplateConfigValidateResponse)
async def validate_workflow_template_config(
    workspace_id: str,
    template_id: str,
    body: TemplateConfigValidateRequest,
    principal: Principal = Depends(require_workspace_role("owner", "admin", "editor")),
    service: WorkflowTemplateService = Depends(get_workflow_template_service)
):
    """Check a configuration against the template's variable definitions."""
    return service.validate_config(template_id, body.config)
