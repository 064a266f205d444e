"""Audio transcription."""

from soap_scribe.transcription.transcriber import (
    SUPPORTED_CONTENT_TYPES,
    Transcriber,
    TranscriptionError,
    create_transcriber_from_settings,
)

__all__ = [
    "SUPPORTED_CONTENT_TYPES",
    "Transcriber",
    "TranscriptionError",
    "create_transcriber_from_settings",
]
