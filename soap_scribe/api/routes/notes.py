"""SOAP note generation and validation endpoints.

Generation always answers 200 with a complete note; ``success`` and
``error`` in the body report LLM or parsing failures. Only template
problems are HTTP errors.
"""

import logging
from typing import Any, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field, model_validator

from soap_scribe.notes import GenerationResult, NoteGenerator, ValidationResult, validate_note
from soap_scribe.templates import (
    InvalidTemplateError,
    Profession,
    TemplateNotFoundError,
    TemplateProfessionError,
    build_custom_template,
    get_template,
)
from soap_scribe.api.dependencies import get_note_generator

router = APIRouter(prefix="/notes", tags=["notes"])

logger = logging.getLogger(__name__)


class GenerateNoteRequest(BaseModel):
    """Transcript plus either a built-in template key or a custom template."""

    transcript: str
    template_key: Optional[str] = None
    custom_template: Optional[dict[str, Any]] = None
    profession: Optional[Profession] = None

    @model_validator(mode="after")
    def _one_template(self) -> "GenerateNoteRequest":
        if self.template_key and self.custom_template is not None:
            raise ValueError("Provide either template_key or custom_template, not both")
        return self


class ValidateNoteRequest(BaseModel):
    """Note to check, optionally against a template's sections."""

    note: Any
    template_key: Optional[str] = None


@router.post("/generate", response_model=GenerationResult)
async def generate_note(
    req: GenerateNoteRequest,
    generator: NoteGenerator = Depends(get_note_generator),
) -> GenerationResult:
    """Generate a structured SOAP note from a transcript."""
    try:
        template = None
        if req.custom_template is not None:
            template = build_custom_template(
                req.custom_template, req.profession or Profession.PHYSICAL_THERAPY
            )

        result = await generator.generate(
            req.transcript,
            req.template_key,
            template=template,
            profession=req.profession,
        )
    except TemplateNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except TemplateProfessionError as e:
        raise HTTPException(status_code=403, detail=str(e))
    except InvalidTemplateError as e:
        raise HTTPException(status_code=422, detail=str(e))

    if not result.success:
        logger.warning(f"Generation degraded for {result.template_key}: {result.error}")
    return result


@router.post("/validate", response_model=ValidationResult)
async def validate(req: ValidateNoteRequest) -> ValidationResult:
    """Validate a note's structure."""
    schema = None
    if req.template_key:
        try:
            schema = get_template(req.template_key).build_schema()
        except TemplateNotFoundError as e:
            raise HTTPException(status_code=404, detail=str(e))
    return validate_note(req.note, schema)
