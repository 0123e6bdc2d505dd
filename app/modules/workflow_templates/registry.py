"""
Process-wide, read-only workflow template registry.

Built once at import from the catalog and exposed through a
MappingProxyType, so concurrent readers never need a lock.
"""

import logging
from types import MappingProxyType
from typing import Callable, Iterable, List, Mapping, Optional

from app.modules.workflow_templates.catalog import BUILT_IN_TEMPLATES
from app.modules.workflow_templates.schemas import WorkflowTemplate

logger = logging.getLogger(__name__)


class TemplateRegistry:
    def __init__(self, builders: Iterable[Callable[[], WorkflowTemplate]]):
        templates = {}
        for build in builders:
            template = build()
            if template.id in templates:
                raise ValueError(f"Duplicate workflow template id: {template.id}")
            templates[template.id] = template
        self._templates: Mapping[str, WorkflowTemplate] = MappingProxyType(templates)
        logger.info("Loaded %d workflow template(s)", len(templates))

    def get(self, template_id: str) -> Optional[WorkflowTemplate]:
        return self._templates.get(template_id)

    def all(self) -> List[WorkflowTemplate]:
        return list(self._templates.values())

    def search(self, category: Optional[str] = None, search: Optional[str] = None) -> List[WorkflowTemplate]:
        """Filter by exact category and by case-insensitive match on name, description or tags."""
        templates = self.all()
        if category:
            templates = [t for t in templates if t.category == category]
        if search:
            needle = search.lower()
            templates = [
                t for t in templates
                if needle in t.name.lower()
                or needle in t.description.lower()
                or any(needle in tag.lower() for tag in t.tags)
            ]
        return templates

    def __len__(self) -> int:
        return len(self._templates)


template_registry = TemplateRegistry(BUILT_IN_TEMPLATES)


def get_template_registry() -> TemplateRegistry:
    return template_registry
