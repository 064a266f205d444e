"""Transcript-to-note generation pipeline."""

import logging
from datetime import datetime, timezone
from typing import Any, Optional, Union

from pydantic import BaseModel, Field

from soap_scribe.llm import LLMError, LLMRouter, LLMValidationError, parse_json_response
from soap_scribe.notes.confidence import ConfidenceScores, calculate_confidence
from soap_scribe.notes.merger import fill_schema
from soap_scribe.notes.prompt import build_messages
from soap_scribe.notes.validator import ValidationResult, validate_note
from soap_scribe.observability import get_observability_logger
from soap_scribe.templates import (
    DEFAULT_TEMPLATE_KEY,
    Profession,
    TemplateDefinition,
    TemplateProfessionError,
    get_template,
    validate_template_profession,
)

logger = logging.getLogger(__name__)


class GenerationResult(BaseModel):
    """Outcome of one generation request.

    ``data`` is always a complete note for the template; on failure it holds
    the template defaults and ``error`` says what went wrong.
    """

    success: bool
    template_key: str
    data: dict[str, Any]
    error: Optional[str] = None
    confidence: ConfidenceScores = Field(default_factory=ConfidenceScores)
    validation: ValidationResult
    request_id: Optional[str] = None
    model: Optional[str] = None
    generated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


def resolve_template(
    template_key: Optional[str] = None,
    template: Optional[TemplateDefinition] = None,
    profession: Optional[Union[Profession, str]] = None,
) -> TemplateDefinition:
    """Pick the template for a request, enforcing the caller's profession.

    Raises:
        TemplateNotFoundError: Unknown template key
        TemplateProfessionError: Template belongs to the other profession
    """
    if template is None:
        key = template_key or DEFAULT_TEMPLATE_KEY
        if profession is None:
            return get_template(key)
        return validate_template_profession(key, profession)

    if profession is not None:
        wanted = profession if isinstance(profession, Profession) else Profession(profession)
        if template.profession != wanted:
            raise TemplateProfessionError(template.name, wanted)
    return template


def empty_note(template_key: str = DEFAULT_TEMPLATE_KEY) -> dict[str, Any]:
    """Defaults-only note for a built-in template."""
    return fill_schema(get_template(template_key).build_schema(), {})


class NoteGenerator:
    """Generates structured SOAP notes from transcripts.

    Each call is independent: the template schema is copied per request and
    the result carries its own status, so concurrent generations never share
    state beyond the router's provider health.
    """

    def __init__(
        self,
        llm: LLMRouter,
        temperature: float = 0.3,
        max_tokens: int = 2000,
    ):
        """Initialize generator.

        Args:
            llm: LLM router (or any object with a compatible ``complete``)
            temperature: Sampling temperature for generation
            max_tokens: Maximum tokens for the LLM response
        """
        self.llm = llm
        self.temperature = temperature
        self.max_tokens = max_tokens

    async def generate(
        self,
        transcript: str,
        template_key: Optional[str] = None,
        *,
        template: Optional[TemplateDefinition] = None,
        profession: Optional[Union[Profession, str]] = None,
        request_id: Optional[str] = None,
    ) -> GenerationResult:
        """Generate a note for a transcript.

        LLM and parsing failures do not raise; they come back as a result
        with ``success=False`` and the template defaults in ``data``.

        Args:
            transcript: Session transcript
            template_key: Built-in template key (defaults to knee)
            template: Template definition, e.g. a normalized custom template;
                takes precedence over ``template_key``
            profession: Caller's profession; when given the template must match
            request_id: Optional request ID for observability

        Returns:
            GenerationResult with a fully-shaped note

        Raises:
            TemplateNotFoundError: Unknown template key
            TemplateProfessionError: Template belongs to the other profession
        """
        resolved = resolve_template(template_key, template, profession)
        schema = resolved.build_schema()
        transcript = transcript or ""

        obs = get_observability_logger()
        request_id = request_id or obs.generate_request_id()

        with obs.note_generation(
            template_key=resolved.key,
            transcript=transcript,
            profession=resolved.profession.value,
            request_id=request_id,
        ) as event:
            if not transcript.strip():
                result = self._failure(resolved, schema, "Transcript is required", request_id)
                event.error_message = result.error
                return result

            messages = build_messages(resolved, transcript)
            try:
                response = await self.llm.complete(
                    messages,
                    temperature=self.temperature,
                    max_tokens=self.max_tokens,
                    request_id=request_id,
                )
            except LLMError as e:
                logger.error(f"Note generation failed for {resolved.key}: {e}")
                result = self._failure(resolved, schema, f"AI generation failed: {e}", request_id)
                event.error_type = type(e).__name__
                event.error_message = str(e)[:200]
                return result

            try:
                parsed = parse_json_response(response.content)
                if not isinstance(parsed, dict):
                    raise LLMValidationError(f"Expected a JSON object, got {type(parsed).__name__}")
            except LLMValidationError as e:
                logger.warning(f"Unusable LLM output for {resolved.key}, returning defaults: {e}")
                result = self._failure(
                    resolved, schema, "AI returned invalid JSON", request_id, model=response.model
                )
                event.error_type = type(e).__name__
                event.error_message = str(e)[:200]
                return result

            event.json_parsed = True
            event.sections_from_llm = [key for key in schema if key in parsed]
            missing = [key for key in schema if key not in parsed]
            if missing:
                logger.info(f"LLM omitted sections {missing} for {resolved.key}; using defaults")

            data = fill_schema(schema, parsed)
            validation = validate_note(data, schema)
            confidence = calculate_confidence(data, transcript)

            event.success = True
            event.validation_errors = validation.errors
            event.overall_confidence = confidence.overall

            return GenerationResult(
                success=True,
                template_key=resolved.key,
                data=data,
                confidence=confidence,
                validation=validation,
                request_id=request_id,
                model=response.model,
            )

    def _failure(
        self,
        template: TemplateDefinition,
        schema: dict[str, Any],
        error: str,
        request_id: str,
        model: Optional[str] = None,
    ) -> GenerationResult:
        data = fill_schema(schema, {})
        return GenerationResult(
            success=False,
            template_key=template.key,
            data=data,
            error=error,
            confidence=ConfidenceScores.zero(list(schema)),
            validation=validate_note(data, schema),
            request_id=request_id,
            model=model,
        )
