"""Template definition models."""

import copy
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator

from soap_scribe.templates.schema import InvalidSchemaError, validate_schema


class Profession(str, Enum):
    """Clinician profession. PT and chiropractic templates never cross over."""

    PHYSICAL_THERAPY = "physical_therapy"
    CHIROPRACTIC = "chiropractic"

    @property
    def display_name(self) -> str:
        return "Chiropractors" if self == Profession.CHIROPRACTIC else "Physical Therapists"


class TemplateCategory(str, Enum):
    """Grouping used for template pickers."""

    UNIVERSAL = "universal"
    BODY_PART = "body_part"
    SPINAL_REGION = "spinal_region"
    SPECIALIZED = "specialized"
    CUSTOM = "custom"


class TemplateError(Exception):
    """Base exception for template errors."""

    pass


class TemplateNotFoundError(TemplateError):
    """No template registered under the requested key."""

    def __init__(self, key: str):
        super().__init__(f'Template "{key}" not found')
        self.key = key


class TemplateProfessionError(TemplateError):
    """Template belongs to a different profession than the caller."""

    def __init__(self, template_name: str, profession: Profession):
        super().__init__(f'Template "{template_name}" is not available for {profession.display_name}')
        self.template_name = template_name
        self.profession = profession


class InvalidTemplateError(TemplateError):
    """Template configuration cannot be turned into a schema."""

    pass


class TemplateDefinition(BaseModel):
    """A note template: metadata, prompt guidance, and the section schema."""

    key: str
    name: str
    profession: Profession
    category: TemplateCategory
    session_type: str
    description: str = ""
    body_region: Optional[str] = None
    spinal_region: Optional[str] = None

    role: str = Field(..., description="Opening line of the prompt describing the clinician and visit")
    focus: list[str] = Field(default_factory=list, description="Template-specific prompt instructions")
    custom_instructions: Optional[str] = None

    sections: dict[str, Any] = Field(..., description="Ordered section schema")

    @field_validator("sections")
    @classmethod
    def _check_sections(cls, value: dict[str, Any]) -> dict[str, Any]:
        try:
            validate_schema(value)
        except InvalidSchemaError as e:
            raise ValueError(str(e)) from e
        return value

    def build_schema(self) -> dict[str, Any]:
        """Return a fresh copy of the schema; callers may mutate it freely."""
        return copy.deepcopy(self.sections)

    def metadata(self) -> dict[str, Any]:
        """Template metadata without the schema, for listings."""
        return self.model_dump(
            mode="json",
            exclude={"sections", "role", "focus", "custom_instructions"},
            exclude_none=True,
        )
