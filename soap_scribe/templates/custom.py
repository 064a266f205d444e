"""User-defined templates.

Clinicians build templates in several loose shapes: a section may be a
plain string of guidance, an object with ``content``, a list of
``measurements``, a categorized table, a list of assessment ``prompts``, a
list of plan ``sections``, or a composite of named sub-sections. All of
them are normalized here into the same schema model the built-in templates
use, so prompt building and merging need no special cases.
"""

import copy
import logging
import re
from dataclasses import dataclass
from typing import Any, Optional, Union

from pydantic import ValidationError

from soap_scribe.templates.models import (
    InvalidTemplateError,
    Profession,
    TemplateCategory,
    TemplateDefinition,
)
from soap_scribe.templates.schema import (
    CORE_SECTIONS,
    SectionType,
    categorized_table,
    composite,
    list_section,
    section_type,
    table,
    wysiwyg,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProfessionTerminology:
    """Prompt vocabulary for one profession."""

    role_description: str
    documentation_type: str
    guidelines: tuple[str, ...]
    default_objective_categories: tuple[str, ...]


TERMINOLOGY: dict[Profession, ProfessionTerminology] = {
    Profession.PHYSICAL_THERAPY: ProfessionTerminology(
        role_description="expert physical therapist",
        documentation_type="physical therapy SOAP note",
        guidelines=(
            "Use physical therapy terminology: therapeutic exercise, manual therapy, ROM, strength (MMT grades)",
            "Focus on functional outcomes and measurable goals",
            "Document special tests with clinical findings",
            "Include interventions: stretching, strengthening, modalities",
            "Write SMART goals (Specific, Measurable, Achievable, Relevant, Time-bound)",
        ),
        default_objective_categories=(
            "Observation",
            "Palpation",
            "Range of Motion",
            "Strength Testing",
            "Special Tests",
            "Functional Testing",
        ),
    ),
    Profession.CHIROPRACTIC: ProfessionTerminology(
        role_description="expert chiropractor",
        documentation_type="chiropractic SOAP note",
        guidelines=(
            "Use chiropractic terminology: subluxation, vertebral listings (PL, PR, PI, PS), fixation, hypomobility",
            "Focus on spinal segment levels (C1-C7, T1-T12, L1-L5, Sacrum)",
            "Document motion palpation and static palpation findings",
            "Include adjustment techniques when mentioned (Diversified, Gonstead, Drop Table, Activator, etc.)",
            "Document vertebral listings when described",
        ),
        default_objective_categories=(
            "Postural Assessment",
            "Static Palpation",
            "Motion Palpation",
            "Range of Motion",
            "Orthopedic Tests",
            "Subluxation Analysis",
        ),
    ),
}

_RESERVED_KEYS = {"type", "label", "placeholder", "content"}


def _slug(text: str) -> str:
    return re.sub(r"[^a-z0-9]+", "_", text.lower()).strip("_")


def _item_label(item: Any) -> str:
    if isinstance(item, dict):
        return str(item.get("label") or item.get("name") or item.get("test") or item.get("id") or "")
    return str(item) if item is not None else ""


def _first(config: dict[str, Any], *keys: str) -> Any:
    for key in keys:
        value = config.get(key)
        if value:
            return value
    return None


def _normalize_categories(categories: list[Any]) -> dict[str, list[str]]:
    normalized: dict[str, list[str]] = {}
    for category in categories:
        if not isinstance(category, dict) or not category.get("name"):
            continue
        entries = category.get("rows") or category.get("tests") or []
        normalized[str(category["name"])] = [label for label in map(_item_label, entries) if label]
    return normalized


def _normalize_section(
    section: Any,
    name: str,
    terminology: ProfessionTerminology,
    nested: bool = False,
) -> dict[str, Any]:
    """Turn one loosely-shaped section config into a schema section."""
    if section is None or section == "" or section == {}:
        if name == "objective" and not nested:
            return categorized_table({c: [] for c in terminology.default_objective_categories})
        return wysiwyg(f"Enter {name.replace('_', ' ')} information...")

    if isinstance(section, str):
        if name == "objective" and not nested:
            fields = ", ".join(terminology.default_objective_categories)
            return wysiwyg(f"{section} (document: {fields})")
        return wysiwyg(section)

    if isinstance(section, list):
        return list_section(", ".join(filter(None, map(_item_label, section))))

    if not isinstance(section, dict):
        raise InvalidTemplateError(f"Section {name!r} must be text or an object")

    label = section.get("label")
    declared = section_type(section)

    if "content" in section and declared in (None, SectionType.WYSIWYG):
        placeholder = section.get("placeholder") or section.get("content") or ""
        return wysiwyg(str(placeholder), label=label)

    if isinstance(section.get("fields"), list):
        labels = [_item_label(f) for f in section["fields"]]
        return wysiwyg("; ".join(filter(None, labels)), label=label)

    if isinstance(section.get("measurements"), list) and section["measurements"]:
        tests = [t for t in map(_item_label, section["measurements"]) if t]
        return table(tests, common_results=section.get("common_results") or section.get("commonResults"), label=label)

    if isinstance(section.get("categories"), list):
        return categorized_table(
            _normalize_categories(section["categories"]),
            common_results=section.get("common_results") or section.get("commonResults"),
            label=label,
        )

    if isinstance(section.get("rows"), list):
        return table([t for t in map(_item_label, section["rows"]) if t], label=label)

    if isinstance(section.get("prompts"), list):
        return wysiwyg("; ".join(filter(None, map(_item_label, section["prompts"]))), label=label)

    if isinstance(section.get("items"), list) or declared == SectionType.LIST:
        return list_section(str(section.get("placeholder") or ""), label=label)

    if isinstance(section.get("sections"), list):
        fields: dict[str, dict[str, Any]] = {}
        for entry in section["sections"]:
            entry_label = _item_label(entry)
            key = _slug(str(entry.get("id") or entry_label)) if isinstance(entry, dict) else _slug(entry_label)
            if not key:
                continue
            if isinstance(entry, dict) and entry.get("type") == SectionType.LIST.value:
                fields[key] = list_section(entry.get("placeholder") or "", label=entry_label)
            else:
                fields[key] = wysiwyg(
                    (entry.get("placeholder") if isinstance(entry, dict) else None) or "",
                    label=entry_label,
                )
        if not fields:
            raise InvalidTemplateError(f"Section {name!r} lists no usable sub-sections")
        return composite(label=label, **fields)

    if not nested:
        sub_config = section.get("fields") if isinstance(section.get("fields"), dict) else section
        subsections = {
            key: value
            for key, value in sub_config.items()
            if key not in _RESERVED_KEYS and isinstance(value, (dict, str))
        }
        if declared == SectionType.COMPOSITE or any(
            isinstance(v, dict) and v.get("type") for v in subsections.values()
        ):
            fields = {
                key: _normalize_section(value, key, terminology, nested=True)
                for key, value in subsections.items()
            }
            if not fields:
                raise InvalidTemplateError(f"Composite section {name!r} has no sub-sections")
            return composite(label=label, **fields)

    logger.warning(f"Unrecognized section format for {name}, treating as free text")
    return wysiwyg(str(section.get("placeholder") or ""), label=label)


def build_custom_template(
    config: Optional[dict[str, Any]],
    profession: Union[Profession, str] = Profession.PHYSICAL_THERAPY,
) -> TemplateDefinition:
    """Normalize a user template configuration into a template definition.

    Args:
        config: Template configuration as stored by the client. ``None``
            yields a generic four-section template.
        profession: Profession of the clinician using the template

    Returns:
        Template definition in the same shape as the built-in templates

    Raises:
        InvalidTemplateError: If the configuration cannot be normalized
    """
    if config is None:
        config = {}
    if not isinstance(config, dict):
        raise InvalidTemplateError("Template configuration must be a JSON object")

    profession = profession if isinstance(profession, Profession) else Profession(profession)
    terminology = TERMINOLOGY[profession]
    config = copy.deepcopy(config)

    sections = {name: _normalize_section(config.get(name), name, terminology) for name in CORE_SECTIONS}
    if config.get("billing") is not None:
        sections["billing"] = _normalize_section(config["billing"], "billing", terminology)

    custom_prompts = _first(config, "custom_prompts", "customPrompts", "ai_prompts")
    instructions = _first(config, "ai_instructions", "aiInstructions")
    if not instructions and isinstance(custom_prompts, dict):
        instructions = custom_prompts.get("system")

    try:
        return TemplateDefinition(
            key=str(config.get("key") or config.get("id") or "custom"),
            name=str(config.get("name") or "Custom Template"),
            profession=profession,
            category=TemplateCategory.CUSTOM,
            session_type=str(_first(config, "session_type", "sessionType") or "custom"),
            description=str(config.get("description") or ""),
            body_region=_first(config, "body_region", "bodyRegion"),
            role=f"You are an {terminology.role_description} creating a professional {terminology.documentation_type}.",
            focus=list(terminology.guidelines),
            custom_instructions=str(instructions) if instructions else None,
            sections=sections,
        )
    except ValidationError as e:
        raise InvalidTemplateError(f"Invalid custom template: {e.errors()[0]['msg']}") from e
