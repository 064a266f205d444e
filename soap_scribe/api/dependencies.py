"""FastAPI dependencies for components created in the app lifespan."""

from fastapi import HTTPException, Request

from soap_scribe.llm import LLMRouter
from soap_scribe.notes import NoteGenerator
from soap_scribe.transcription import Transcriber


def get_llm_router(request: Request) -> LLMRouter:
    """LLM router shared by all requests."""
    router = getattr(request.app.state, "llm_router", None)
    if router is None:
        raise HTTPException(status_code=503, detail="LLM router not initialized")
    return router


def get_note_generator(request: Request) -> NoteGenerator:
    """Note generator bound to the shared router."""
    generator = getattr(request.app.state, "note_generator", None)
    if generator is None:
        raise HTTPException(status_code=503, detail="Note generator not initialized")
    return generator


def get_transcriber(request: Request) -> Transcriber:
    """Whisper transcriber."""
    transcriber = getattr(request.app.state, "transcriber", None)
    if transcriber is None:
        raise HTTPException(status_code=503, detail="Transcription is not configured")
    return transcriber
