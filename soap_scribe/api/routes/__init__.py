"""API route modules."""

from soap_scribe.api.routes import health, notes, templates, transcription

__all__ = ["health", "notes", "templates", "transcription"]
