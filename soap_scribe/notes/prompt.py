"""Prompt construction for SOAP note generation.

The user prompt is assembled from the template: its role line, the
transcript, a fixed privacy instruction, numbered instructions, and an
example JSON document derived from the schema so the model sees exactly the
shape the merger expects back.
"""

import json
from typing import Any

from soap_scribe.llm.base import Message, MessageRole
from soap_scribe.templates.models import Profession, TemplateCategory, TemplateDefinition
from soap_scribe.templates.schema import SectionType, iter_fields, section_type, table_columns

PRIVACY_INSTRUCTION = (
    "CRITICAL PRIVACY INSTRUCTION:\n"
    '**NEVER include patient names or identifiers in the note. ALWAYS use "patient" or '
    '"the patient" instead of names.**\n'
    'If the transcript says "John reports..." or "Mrs. Smith states...", write '
    '"Patient reports..." or "The patient states..."'
)

SYSTEM_PROMPTS = {
    Profession.PHYSICAL_THERAPY: (
        "You are an expert physical therapist creating professional SOAP notes. "
        "Always return valid JSON matching the requested structure exactly."
    ),
    Profession.CHIROPRACTIC: (
        "You are an expert chiropractor creating professional SOAP notes. "
        "Always return valid JSON matching the requested structure exactly."
    ),
}

_TERMINOLOGY = {
    Profession.PHYSICAL_THERAPY: "PT",
    Profession.CHIROPRACTIC: "CHIROPRACTIC",
}

_CARE = {
    Profession.PHYSICAL_THERAPY: "PT",
    Profession.CHIROPRACTIC: "chiropractic care",
}

_RESULT_HINT = 'Finding from the transcript, or "Not assessed"'
_NOTES_HINT = "Clinical context for the finding"


def _label(key: str, section: dict[str, Any]) -> str:
    return section.get("label") or key.replace("_", " ").capitalize()


def _example_text(key: str, section: dict[str, Any]) -> str:
    return section.get("placeholder") or f"{_label(key, section)} from the transcript"


def _example_row(section: dict[str, Any], test: Any = None) -> dict[str, str]:
    columns = table_columns(section)
    headers = section.get("headers") or []
    # Categorized tables carry a leading "Category" header with no column of its own.
    offset = len(headers) - len(columns)
    row: dict[str, str] = {}
    for index, column in enumerate(columns):
        if index == 0:
            row[column] = test or (headers[offset] if 0 <= offset < len(headers) else "Test or measurement")
        elif column == "result":
            row[column] = _RESULT_HINT
        elif column == "notes":
            row[column] = _NOTES_HINT
        else:
            header = headers[offset + index] if 0 <= offset and offset + index < len(headers) else column
            row[column] = f"{header} value"
    return row


def _example_rows(section: dict[str, Any], rows: list[Any]) -> list[dict[str, str]]:
    first = table_columns(section)[0]
    examples = [_example_row(section, row.get(first)) for row in rows if isinstance(row, dict)]
    return examples or [_example_row(section)]


def _example_section(key: str, section: dict[str, Any], nested: bool) -> Any:
    kind = section_type(section)

    if kind == SectionType.WYSIWYG:
        text = _example_text(key, section)
        return text if nested else {"content": text}

    if kind == SectionType.LIST:
        return [_example_text(key, section)]

    if kind == SectionType.TABLE:
        if "categories" in section:
            return {
                "categories": [
                    {"name": category.get("name", ""), "rows": _example_rows(section, category.get("rows") or [])}
                    for category in section.get("categories") or []
                    if isinstance(category, dict)
                ]
            }
        rows = _example_rows(section, section.get("rows") or [])
        return rows if nested else {"rows": rows}

    if kind == SectionType.COMPOSITE:
        return {
            sub_key: _example_section(sub_key, sub_section, nested=True)
            for sub_key, sub_section in (section.get("fields") or {}).items()
        }

    return {}


def build_example(schema: dict[str, Any]) -> dict[str, Any]:
    """Example JSON document in the shape the merger reads back."""
    return {key: _example_section(key, section, nested=False) for key, section in schema.items()}


def _objective_tables(schema: dict[str, Any]) -> list[dict[str, Any]]:
    objective = schema.get("objective")
    if section_type(objective) == SectionType.TABLE:
        return [objective]
    if section_type(objective) == SectionType.COMPOSITE:
        return [
            section
            for _, section in iter_fields(objective.get("fields") or {})
            if section_type(section) == SectionType.TABLE
        ]
    return []


def build_instructions(template: TemplateDefinition, schema: dict[str, Any]) -> list[str]:
    """Numbered instruction lines for the user prompt."""
    profession = template.profession
    fields = [path.rsplit(".", 1)[-1] for path, _ in iter_fields(schema)]

    lines = [
        "Extract relevant information for each SOAP section",
        f"Use professional {_TERMINOLOGY[profession]} terminology",
        *template.focus,
    ]
    if any(name.endswith("goals") for name in fields):
        lines.append("Write SMART goals (Specific, Measurable, Achievable, Relevant, Time-bound)")
    if "medical_necessity" in fields:
        lines.append(
            f"Clearly document medical necessity and why {_CARE[profession]} is needed for insurance"
        )
    if "billing" in schema:
        lines.append("Suggest appropriate billing codes based on interventions")
    if template.category == TemplateCategory.CUSTOM:
        lines.append("ONLY use information explicitly stated in the transcript; never infer findings")
    lines.append("Return ONLY a JSON object matching this exact structure:")
    return lines


def _objective_rules(tables: list[dict[str, Any]]) -> list[str]:
    results: list[str] = []
    for section in tables:
        for value in section.get("common_results") or []:
            if value not in results:
                results.append(value)

    standard = ", ".join(results) if results else "Positive, Negative, Not Tested, WNL, Limited, Painful"
    return [
        'ALWAYS fill in the "result" field with ACTUAL values from the transcript',
        'NEVER use placeholder text like "Result" or "Notes" - these are INVALID',
        f"Use standard results: {standard}, specific measurements",
        'If a test wasn\'t mentioned, use "Not assessed" in the result field',
        "Include specific measurements when mentioned (degrees, MMT grades, time durations)",
        'The "notes" field should add clinical context, NOT be a placeholder',
        "Return valid JSON only, no additional text before or after",
    ]


def _numbered(lines: list[str]) -> str:
    return "\n".join(f"{i}. {line}" for i, line in enumerate(lines, start=1))


def _template_context(template: TemplateDefinition) -> str:
    lines = [f"- Template Name: {template.name}"]
    if template.description:
        lines.append(f"- Description: {template.description}")
    if template.body_region:
        lines.append(f"- Body Region/Focus: {template.body_region}")
    if template.session_type:
        lines.append(f"- Session Type: {template.session_type}")
    return "TEMPLATE CONTEXT:\n" + "\n".join(lines)


def build_prompt(template: TemplateDefinition, transcript: str) -> str:
    """Build the user prompt for one generation.

    Args:
        template: Template whose schema and guidance drive the prompt
        transcript: Session transcript

    Returns:
        Prompt text ending with the example JSON structure and, for
        templates with an objective table, the rules for filling it
    """
    schema = template.build_schema()

    parts = [f"{template.role} Generate a professional SOAP note from this session transcript."]
    if template.custom_instructions:
        parts.append(f"CUSTOM TEMPLATE INSTRUCTIONS:\n{template.custom_instructions}")
    if template.category == TemplateCategory.CUSTOM:
        parts.append(_template_context(template))
    parts.append(f"TRANSCRIPT:\n{transcript}")
    parts.append(PRIVACY_INSTRUCTION)
    parts.append(
        "INSTRUCTIONS:\n"
        + _numbered(build_instructions(template, schema))
        + "\n"
        + json.dumps(build_example(schema), indent=2)
    )

    tables = _objective_tables(schema)
    if tables:
        parts.append("CRITICAL INSTRUCTIONS FOR OBJECTIVE SECTION:\n" + _numbered(_objective_rules(tables)))

    return "\n\n".join(parts) + "\n"


def build_messages(template: TemplateDefinition, transcript: str) -> list[Message]:
    """System and user messages for a generation request."""
    return [
        Message(role=MessageRole.SYSTEM, content=SYSTEM_PROMPTS[template.profession]),
        Message(role=MessageRole.USER, content=build_prompt(template, transcript)),
    ]
