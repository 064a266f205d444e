"""SOAP note generation: prompt, merge, validation and scoring."""

from soap_scribe.notes.confidence import ConfidenceScores, calculate_confidence
from soap_scribe.notes.generator import GenerationResult, NoteGenerator, empty_note, resolve_template
from soap_scribe.notes.merger import fill_schema, fill_section
from soap_scribe.notes.prompt import SYSTEM_PROMPTS, build_example, build_messages, build_prompt
from soap_scribe.notes.validator import ValidationResult, validate_note

__all__ = [
    "ConfidenceScores",
    "GenerationResult",
    "NoteGenerator",
    "SYSTEM_PROMPTS",
    "ValidationResult",
    "build_example",
    "build_messages",
    "build_prompt",
    "calculate_confidence",
    "empty_note",
    "fill_schema",
    "fill_section",
    "resolve_template",
    "validate_note",
]
