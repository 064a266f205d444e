"""Structural validation of generated notes."""

from typing import Any, Optional

from pydantic import BaseModel, Field

from soap_scribe.templates.schema import CORE_SECTIONS, SectionType


class ValidationResult(BaseModel):
    """Outcome of validating a note."""

    is_valid: bool
    errors: list[str] = Field(default_factory=list)


def _objective_errors(objective: Any) -> list[str]:
    if not isinstance(objective, dict) or objective.get("type") != SectionType.TABLE.value:
        return []

    if "categories" in objective:
        categories = objective["categories"]
        if not isinstance(categories, list):
            return ["Objective section must contain categories array"]
        errors = []
        for index, category in enumerate(categories):
            if not isinstance(category, dict) or not isinstance(category.get("rows"), list):
                name = category.get("name") if isinstance(category, dict) else None
                errors.append(f"Objective category {name or index + 1} must contain rows array")
        return errors

    if not isinstance(objective.get("rows"), list):
        return ["Objective section must contain rows array"]
    return []


def validate_note(note: Any, schema: Optional[dict[str, Any]] = None) -> ValidationResult:
    """Check that a note has the SOAP sections and well-formed tables.

    Args:
        note: Structured note, typically the output of ``fill_schema``
        schema: When given, every section it declares must be present too

    Returns:
        ValidationResult listing every problem found; never raises
    """
    if not isinstance(note, dict):
        return ValidationResult(is_valid=False, errors=["Note must be a JSON object"])

    errors = [f"Missing {key} section" for key in CORE_SECTIONS if not note.get(key)]
    errors.extend(_objective_errors(note.get("objective")))

    if schema:
        for key in schema:
            message = f"Missing {key} section"
            if key not in note and message not in errors:
                errors.append(message)

    return ValidationResult(is_valid=not errors, errors=errors)
