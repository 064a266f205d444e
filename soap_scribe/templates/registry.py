"""Template registry: lookup and profession filtering for built-in templates."""

import logging
from typing import Optional, Union

from soap_scribe.templates import chiropractic, physical_therapy
from soap_scribe.templates.models import (
    Profession,
    TemplateDefinition,
    TemplateNotFoundError,
    TemplateProfessionError,
)

logger = logging.getLogger(__name__)

TEMPLATE_REGISTRY: dict[str, TemplateDefinition] = {
    template.key: template
    for template in (*physical_therapy.TEMPLATES, *chiropractic.TEMPLATES)
}

DEFAULT_TEMPLATE_KEY = "knee"


def _as_profession(profession: Union[Profession, str]) -> Profession:
    return profession if isinstance(profession, Profession) else Profession(profession)


def get_template(key: str) -> TemplateDefinition:
    """Look up a built-in template.

    Args:
        key: Template key, e.g. ``knee`` or ``cervical-adjustment``

    Returns:
        The registered template definition

    Raises:
        TemplateNotFoundError: If no template uses that key
    """
    template = TEMPLATE_REGISTRY.get(key)
    if template is None:
        raise TemplateNotFoundError(key)
    return template


def list_templates(profession: Optional[Union[Profession, str]] = None) -> list[TemplateDefinition]:
    """All templates in registration order, optionally for one profession only."""
    if profession is None:
        return list(TEMPLATE_REGISTRY.values())
    wanted = _as_profession(profession)
    return [t for t in TEMPLATE_REGISTRY.values() if t.profession == wanted]


def is_template_for_profession(key: str, profession: Union[Profession, str]) -> bool:
    """True if the template exists and belongs to the profession."""
    template = TEMPLATE_REGISTRY.get(key)
    return template is not None and template.profession == _as_profession(profession)


def validate_template_profession(key: str, profession: Union[Profession, str]) -> TemplateDefinition:
    """Resolve a template and check the caller's profession may use it.

    Raises:
        TemplateNotFoundError: Unknown key
        TemplateProfessionError: Template belongs to the other profession
    """
    template = get_template(key)
    wanted = _as_profession(profession)
    if template.profession != wanted:
        logger.info(f"Rejected template {key} for profession {wanted.value}")
        raise TemplateProfessionError(template.name, wanted)
    return template
