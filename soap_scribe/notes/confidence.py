"""Heuristic confidence scores for generated notes."""

from typing import Any

from pydantic import BaseModel, Field

from soap_scribe.templates.schema import CORE_SECTIONS, SectionType, section_type, table_rows

MIN_CONFIDENCE = 0.1
MAX_CONFIDENCE = 1.0
EMPTY_TEXT_CONFIDENCE = 0.2
FULL_TEXT_LENGTH = 200


class ConfidenceScores(BaseModel):
    """Per-section confidence in [0.1, 1.0]; all zero when generation failed."""

    sections: dict[str, float] = Field(default_factory=dict)
    overall: float = 0.0

    @classmethod
    def zero(cls, section_keys: list[str]) -> "ConfidenceScores":
        return cls(sections={key: 0.0 for key in section_keys}, overall=0.0)


def _boost(score: float, transcript_words: int) -> float:
    if transcript_words > 100:
        score *= 1.2
    if transcript_words > 200:
        score *= 1.1
    return min(max(score, MIN_CONFIDENCE), MAX_CONFIDENCE)


def _text_score(text: str, transcript_words: int) -> float:
    if len(text) < 10:
        return EMPTY_TEXT_CONFIDENCE
    return _boost(min(len(text) / FULL_TEXT_LENGTH, 1.0), transcript_words)


def _table_score(section: dict[str, Any], transcript_words: int) -> float:
    rows = [row for row in table_rows(section) if isinstance(row, dict)]
    if not rows:
        return EMPTY_TEXT_CONFIDENCE
    completed = sum(1 for row in rows if str(row.get("result") or "").strip())
    return _boost(completed / len(rows), transcript_words)


def _leaf_scores(section: Any, transcript_words: int) -> list[float]:
    kind = section_type(section)
    if kind == SectionType.WYSIWYG:
        return [_text_score(str(section.get("content") or ""), transcript_words)]
    if kind == SectionType.LIST:
        items = section.get("items") or []
        return [_text_score(" ".join(str(item) for item in items), transcript_words)]
    if kind == SectionType.TABLE:
        return [_table_score(section, transcript_words)]
    if kind == SectionType.COMPOSITE:
        scores: list[float] = []
        for sub_section in (section.get("fields") or {}).values():
            scores.extend(_leaf_scores(sub_section, transcript_words))
        return scores
    return []


def section_confidence(section: Any, transcript_words: int = 0) -> float:
    """Confidence for one section; composites average their leaves.

    Empty leaves stay at the floor score however long the transcript is.
    """
    scores = _leaf_scores(section, transcript_words)
    if not scores:
        return MIN_CONFIDENCE
    return round(sum(scores) / len(scores), 3)


def calculate_confidence(note: dict[str, Any], transcript: str) -> ConfidenceScores:
    """Score every section of a filled note.

    Text scales with length up to 200 characters, tables with the share of
    rows that have a result. Longer transcripts raise every non-empty score. The
    overall score is the mean of the four SOAP sections.
    """
    words = len(transcript.split())
    sections = {key: section_confidence(section, words) for key, section in note.items()}
    core = [sections[key] for key in CORE_SECTIONS if key in sections]
    overall = round(sum(core) / len(core), 3) if core else 0.0
    return ConfidenceScores(sections=sections, overall=overall)
