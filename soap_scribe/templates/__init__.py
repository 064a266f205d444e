"""Note templates: schemas, built-in catalogue, custom templates and suggestion."""

from soap_scribe.templates.custom import TERMINOLOGY, build_custom_template
from soap_scribe.templates.models import (
    InvalidTemplateError,
    Profession,
    TemplateCategory,
    TemplateDefinition,
    TemplateError,
    TemplateNotFoundError,
    TemplateProfessionError,
)
from soap_scribe.templates.registry import (
    DEFAULT_TEMPLATE_KEY,
    TEMPLATE_REGISTRY,
    get_template,
    is_template_for_profession,
    list_templates,
    validate_template_profession,
)
from soap_scribe.templates.schema import CORE_SECTIONS, InvalidSchemaError, SectionType
from soap_scribe.templates.suggest import TemplateSuggestion, suggest_template

__all__ = [
    "CORE_SECTIONS",
    "DEFAULT_TEMPLATE_KEY",
    "InvalidSchemaError",
    "InvalidTemplateError",
    "Profession",
    "SectionType",
    "TEMPLATE_REGISTRY",
    "TERMINOLOGY",
    "TemplateCategory",
    "TemplateDefinition",
    "TemplateError",
    "TemplateNotFoundError",
    "TemplateProfessionError",
    "TemplateSuggestion",
    "build_custom_template",
    "get_template",
    "is_template_for_profession",
    "list_templates",
    "suggest_template",
    "validate_template_profession",
]
