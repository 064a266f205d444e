"""Template catalogue endpoints."""

import logging
from typing import Any, Optional

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from soap_scribe.notes import empty_note
from soap_scribe.templates import (
    Profession,
    TemplateDefinition,
    TemplateNotFoundError,
    TemplateSuggestion,
    get_template,
    list_templates,
    suggest_template,
)

router = APIRouter(prefix="/templates", tags=["templates"])

logger = logging.getLogger(__name__)


class TemplateSummary(BaseModel):
    """Template metadata for pickers."""

    key: str
    name: str
    profession: Profession
    category: str
    session_type: str
    description: str = ""
    body_region: Optional[str] = None
    spinal_region: Optional[str] = None


class TemplateDetail(TemplateSummary):
    """Template metadata plus its schema."""

    schema_: dict[str, Any] = Field(..., alias="schema", serialization_alias="schema")


class SuggestRequest(BaseModel):
    """Transcript to pick a template for."""

    transcript: str = Field(..., min_length=1)


def _lookup(key: str) -> TemplateDefinition:
    try:
        return get_template(key)
    except TemplateNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.get("", response_model=list[TemplateSummary])
async def get_templates(profession: Optional[Profession] = None) -> list[TemplateSummary]:
    """List built-in templates, optionally for one profession."""
    return [TemplateSummary(**t.metadata()) for t in list_templates(profession)]


@router.get("/{key}", response_model=TemplateDetail, response_model_by_alias=True)
async def get_template_detail(key: str) -> TemplateDetail:
    """Template metadata and schema."""
    template = _lookup(key)
    return TemplateDetail(**template.metadata(), schema=template.build_schema())


@router.get("/{key}/empty")
async def get_empty_note(key: str) -> dict[str, Any]:
    """Blank note for a template, as returned when generation fails."""
    _lookup(key)
    return {"template_key": key, "data": empty_note(key)}


@router.post("/suggest", response_model=TemplateSuggestion)
async def suggest(req: SuggestRequest) -> TemplateSuggestion:
    """Suggest a body-region template from transcript keywords."""
    suggestion = suggest_template(req.transcript)
    logger.info(f"Suggested template {suggestion.suggested} (confidence {suggestion.confidence})")
    return suggestion
