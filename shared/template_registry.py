"""
Registry of document templates, keyed by category
"""
import json
import logging
import os
from dataclasses import dataclass
from typing import Dict, List, Any, Optional, Tuple, FrozenSet

from config.settings import TEMPLATE_CONFIG
from models.template_models import DocumentTemplate, ensure_valid_template
from shared.builtin_templates import load_builtin_templates
from utils.errors import (
    TemplateValidationError,
    TemplateNotFound,
    NoDefaultTemplate,
    AmbiguousDefaultTemplate
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TemplateRegistryConfig:
    """Immutable set of templates a registry is built from"""
    templates: Tuple[DocumentTemplate, ...]
    strict_defaults: bool = False


def read_templates_file(path: str) -> List[DocumentTemplate]:
    """Load templates from a JSON file holding a list (or {"templates": [...]})"""
    with open(path, 'r', encoding='utf-8') as f:
        data = json.load(f)
    if isinstance(data, dict):
        data = data.get('templates', [])
    if not isinstance(data, list):
        raise TemplateValidationError(f"Templates file {path} must contain a list of templates")
    return [DocumentTemplate.from_dict(item) for item in data]


def load_registry_config(templates_file: Optional[str] = None,
                         strict_defaults: Optional[bool] = None) -> TemplateRegistryConfig:
    """Built-in templates plus the configured templates file.

    A file template with the same id as a built-in one replaces it.
    """
    templates_file = templates_file if templates_file is not None else TEMPLATE_CONFIG['templates_file']
    if strict_defaults is None:
        strict_defaults = TEMPLATE_CONFIG['strict_defaults']

    by_id: Dict[str, DocumentTemplate] = {t.id: t for t in load_builtin_templates()}
    if templates_file:
        if not os.path.exists(templates_file):
            raise TemplateValidationError(f"Templates file not found: {templates_file}")
        for template in read_templates_file(templates_file):
            if template.id in by_id:
                logger.info(f"Template '{template.id}' from {templates_file} replaces the built-in definition")
            by_id[template.id] = template
        logger.info(f"Loaded templates file {templates_file}")

    return TemplateRegistryConfig(templates=tuple(by_id.values()), strict_defaults=bool(strict_defaults))


class TemplateRegistry:
    """Read-only lookup of templates; validated once on construction"""

    def __init__(self, config: TemplateRegistryConfig):
        self.strict_defaults = config.strict_defaults
        self._templates: Dict[str, DocumentTemplate] = {}
        self._by_category: Dict[str, List[DocumentTemplate]] = {}

        for template in config.templates:
            if template.id in self._templates:
                raise TemplateValidationError(f"Duplicate template id '{template.id}'")
            ensure_valid_template(template)
            self._templates[template.id] = template
            self._by_category.setdefault(template.category, []).append(template)

        for templates in self._by_category.values():
            templates.sort(key=lambda t: t.id)

    @classmethod
    def from_settings(cls) -> 'TemplateRegistry':
        return cls(load_registry_config())

    def get_template(self, category: str, template_id: Optional[str] = None) -> DocumentTemplate:
        """Exact template when an id is given, otherwise the category's default"""
        if template_id:
            template = self._templates.get(template_id)
            if template is None or template.category != category:
                raise TemplateNotFound(category, template_id)
            return template

        templates = self._by_category.get(category)
        if not templates:
            raise TemplateNotFound(category)

        active = [t for t in templates if t.is_active]
        if not active:
            raise NoDefaultTemplate(category)

        defaults = [t for t in active if t.is_default]
        if not defaults:
            if self.strict_defaults:
                raise NoDefaultTemplate(category)
            logger.warning(
                f"Category '{category}' has no default template, using '{active[0].id}'"
            )
            return active[0]

        if len(defaults) > 1:
            if self.strict_defaults:
                raise AmbiguousDefaultTemplate(category, [t.id for t in defaults])
            logger.warning(
                f"Category '{category}' has {len(defaults)} default templates "
                f"({', '.join(t.id for t in defaults)}), using '{defaults[0].id}'"
            )
        return defaults[0]

    def list_categories(self) -> List[str]:
        return sorted(self._by_category)

    def list_variables(self, category: str) -> FrozenSet[str]:
        templates = self._by_category.get(category)
        if not templates:
            raise TemplateNotFound(category)
        names = set()
        for template in templates:
            names.update(template.variables)
        return frozenset(names)

    def list_templates(self, category: Optional[str] = None) -> List[DocumentTemplate]:
        if category is None:
            return sorted(self._templates.values(), key=lambda t: (t.category, t.id))
        return list(self._by_category.get(category, []))

    def check_defaults(self) -> Dict[str, List[str]]:
        """Categories whose active templates do not have exactly one default"""
        problems: Dict[str, List[str]] = {}
        for category, templates in sorted(self._by_category.items()):
            active = [t for t in templates if t.is_active]
            defaults = [t.id for t in active if t.is_default]
            if not active:
                problems[category] = ['no active template']
            elif not defaults:
                problems[category] = ['no default among active templates: ' + ', '.join(t.id for t in active)]
            elif len(defaults) > 1:
                problems[category] = ['multiple defaults: ' + ', '.join(defaults)]
        return problems

    def to_dict(self) -> Dict[str, Any]:
        return {
            'categories': self.list_categories(),
            'templates': [
                {
                    'id': t.id,
                    'name': t.name,
                    'category': t.category,
                    'language': t.language,
                    'isActive': t.is_active,
                    'isDefault': t.is_default,
                    'version': t.version
                }
                for t in self.list_templates()
            ]
        }
