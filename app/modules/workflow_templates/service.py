import copy
import re
import logging
import pydantic
from pydantic import EmailStr, TypeAdapter
from app.core.errors import NotFoundError
from app.modules.workflow_templates.registry import TemplateRegistry
from app.modules.workflow_templates.schemas import (
    ConfigIssue, TemplateDetail, TemplateListResponse, TemplateSummary,
    TemplateConfigValidateResponse, WorkflowTemplate
)
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)

EMAIL_KEYS = ("email", "fromEmail")
_email_adapter = TypeAdapter(EmailStr)

_TYPE_CHECKS = {
    "string": lambda v: isinstance(v, str),
    "array": lambda v: isinstance(v, list),
    "object": lambda v: isinstance(v, dict),
    "boolean": lambda v: isinstance(v, bool),
    "number": lambda v: isinstance(v, (int, float)) and not isinstance(v, bool),
}


def is_valid_email(value: str) -> bool:
    try:
        _email_adapter.validate_python(value)
    except pydantic.ValidationError:
        return False
    return True


def to_summary(template: WorkflowTemplate) -> TemplateSummary:
    return TemplateSummary(**template.model_dump(exclude={"workflow_definition"}))


def to_detail(template: WorkflowTemplate) -> TemplateDetail:
    data = template.model_dump(exclude={"workflow_definition"})
    return TemplateDetail(**data, workflow_definition=copy.deepcopy(template.workflow_definition))


class WorkflowTemplateService:
    def __init__(self, registry: TemplateRegistry):
        self.registry = registry

    def _require(self, template_id: str) -> WorkflowTemplate:
        template = self.registry.get(template_id)
        if template is None:
            raise NotFoundError("Template not found")
        return template

    def get_template(self, template_id: str) -> TemplateDetail:
        """Full projection including the workflow definition."""
        return to_detail(self._require(template_id))

    def list_templates(self, category: Optional[str] = None, search: Optional[str] = None) -> TemplateListResponse:
        templates = self.registry.search(category=category, search=search)
        summaries = [to_summary(t) for t in templates]
        return TemplateListResponse(
            templates=summaries,
            categories=list(dict.fromkeys(t.category for t in templates)),
            total=len(summaries),
        )

    def validate_config(self, template_id: str, config: Dict[str, Any]) -> TemplateConfigValidateResponse:
        template = self._require(template_id)
        errors: List[ConfigIssue] = []

        for variable in template.variables:
            value = config.get(variable.key)

            if variable.required and (value is None or value == ""):
                errors.append(ConfigIssue(
                    field=variable.key, message=f"{variable.label} is required", code="REQUIRED_FIELD"
                ))
                continue
            if value is None:
                continue

            type_check = _TYPE_CHECKS.get(variable.type)
            if type_check is not None and not type_check(value):
                errors.append(ConfigIssue(
                    field=variable.key,
                    message=f"{variable.label} must be a{'n' if variable.type[0] in 'aeiou' else ''} {variable.type}",
                    code="INVALID_TYPE",
                ))
                continue

            rules = variable.validation
            if rules and rules.pattern and isinstance(value, str) and not re.search(rules.pattern, value):
                errors.append(ConfigIssue(
                    field=variable.key, message=f"{variable.label} format is invalid", code="INVALID_FORMAT"
                ))
            if rules and rules.options and value not in rules.options:
                errors.append(ConfigIssue(
                    field=variable.key,
                    message=f"{variable.label} must be one of: {', '.join(rules.options)}",
                    code="INVALID_OPTION",
                ))
            if variable.key in EMAIL_KEYS and isinstance(value, str) and not is_valid_email(value):
                errors.append(ConfigIssue(
                    field=variable.key,
                    message=f"{variable.label} must be a valid email address",
                    code="INVALID_EMAIL",
                ))

        if errors:
            logger.info("Config for template %s failed validation: %d issue(s)", template_id, len(errors))
        return TemplateConfigValidateResponse(valid=not errors, errors=errors)
