"""Keyword-based body region suggestion for PT transcripts."""

import re

from pydantic import BaseModel, Field

from soap_scribe.templates.registry import DEFAULT_TEMPLATE_KEY

# Whole-word matches (plurals included), so "lower back" also counts once for
# "back" but "discomfort" never counts for "disc".
REGION_KEYWORDS: dict[str, list[str]] = {
    "knee": ["knee", "patella", "meniscus", "acl", "pcl", "mcl", "lcl", "quadriceps", "hamstring", "kneecap"],
    "shoulder": [
        "shoulder", "rotator cuff", "impingement", "deltoid", "supraspinatus", "infraspinatus", "arm",
    ],
    "back": ["back", "spine", "lumbar", "thoracic", "lower back", "upper back", "sciatica", "disc"],
    "neck": ["neck", "cervical", "headache", "whiplash", "cervical spine", "head"],
    "hip": ["hip", "groin", "pelvis", "piriformis", "hip flexor", "glute", "gluteus"],
    "ankle_foot": ["ankle", "foot", "achilles", "plantar fasciitis", "calf", "toe", "heel"],
}


class TemplateSuggestion(BaseModel):
    """Suggested body-region template for a transcript."""

    suggested: str
    confidence: float = Field(ge=0.0, le=1.0, description="Share of keyword hits for the suggestion")
    scores: dict[str, int]


def _keyword_pattern(keyword: str) -> "re.Pattern[str]":
    return re.compile(rf"\b{re.escape(keyword)}(?:e?s)?\b")


_PATTERNS: dict[str, list["re.Pattern[str]"]] = {
    region: [_keyword_pattern(keyword) for keyword in keywords]
    for region, keywords in REGION_KEYWORDS.items()
}


def score_transcript(transcript: str) -> dict[str, int]:
    """Count whole-word keyword occurrences per region."""
    text = transcript.lower()
    return {
        region: sum(len(pattern.findall(text)) for pattern in patterns)
        for region, patterns in _PATTERNS.items()
    }


def suggest_template(transcript: str) -> TemplateSuggestion:
    """Suggest the body-region template that best matches a transcript.

    Ties go to the region listed first. With no keyword hits the suggestion
    is the knee template with zero confidence.
    """
    scores = score_transcript(transcript or "")
    best = max(scores, key=lambda region: scores[region])
    total = sum(scores.values())

    if scores[best] == 0:
        return TemplateSuggestion(suggested=DEFAULT_TEMPLATE_KEY, confidence=0.0, scores=scores)

    return TemplateSuggestion(
        suggested=best,
        confidence=round(scores[best] / total, 3),
        scores=scores,
    )
