from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, List, Dict, Any, Tuple


class VariableValidation(BaseModel):
    model_config = ConfigDict(frozen=True)

    pattern: Optional[str] = None
    min: Optional[float] = None
    max: Optional[float] = None
    options: Optional[Tuple[str, ...]] = None


class TemplateVariable(BaseModel):
    model_config = ConfigDict(frozen=True)

    key: str
    label: str
    type: str  # string | number | boolean | array | object
    required: bool
    default_value: Optional[Any] = Field(default=None, serialization_alias="defaultValue")
    description: Optional[str] = None
    validation: Optional[VariableValidation] = None


class TemplateRequirements(BaseModel):
    model_config = ConfigDict(frozen=True)

    nodes: Tuple[str, ...] = ()
    credentials: Tuple[str, ...] = ()
    environment: Tuple[str, ...] = ()


class WorkflowTemplate(BaseModel):
    """Registry entry. The workflow definition is only ever handed out as a copy."""
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    description: str
    category: str
    version: str
    author: str
    tags: Tuple[str, ...]
    variables: Tuple[TemplateVariable, ...]
    requirements: TemplateRequirements
    workflow_definition: Dict[str, Any]


class TemplateSummary(BaseModel):
    id: str
    name: str
    description: str
    category: str
    version: str
    author: str
    tags: List[str]
    variables: List[TemplateVariable]
    requirements: TemplateRequirements


class TemplateDetail(TemplateSummary):
    workflow_definition: Dict[str, Any] = Field(serialization_alias="workflowDefinition")


class TemplateListResponse(BaseModel):
    templates: List[TemplateSummary]
    categories: List[str]
    total: int


class TemplateDetailResponse(BaseModel):
    template: TemplateDetail


class TemplateConfigValidateRequest(BaseModel):
    config: Dict[str, Any] = {}


class ConfigIssue(BaseModel):
    field: str
    message: str
    code: str


class TemplateConfigValidateResponse(BaseModel):
    valid: bool
    errors: List[ConfigIssue]
