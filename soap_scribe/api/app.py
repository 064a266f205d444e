"""FastAPI application for SOAP Scribe."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from soap_scribe import __version__
from soap_scribe.api.middleware import APIKeyMiddleware, RequestLoggingMiddleware
from soap_scribe.api.routes import health, notes, templates, transcription
from soap_scribe.config import get_settings

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    logger.info("Starting SOAP Scribe API")

    settings = get_settings()

    from soap_scribe.llm import create_router_from_settings
    from soap_scribe.notes import NoteGenerator
    from soap_scribe.transcription import create_transcriber_from_settings

    llm_router = create_router_from_settings()

    app.state.llm_router = llm_router
    app.state.note_generator = NoteGenerator(
        llm=llm_router,
        temperature=settings.generation_temperature,
        max_tokens=settings.generation_max_tokens,
    )
    if settings.has_openai_key:
        app.state.transcriber = create_transcriber_from_settings()
    else:
        logger.warning("OPENAI_API_KEY not set; transcription endpoint disabled")
        app.state.transcriber = None

    logger.info("SOAP Scribe API started successfully")

    yield

    logger.info("Shutting down SOAP Scribe API")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title="SOAP Scribe API",
        description="Transcript-to-SOAP-note generation for physical therapists and chiropractors",
        version=__version__,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_middleware(RequestLoggingMiddleware)

    if settings.api_key:
        app.add_middleware(APIKeyMiddleware, api_key=settings.api_key)

    app.include_router(health.router, tags=["health"])
    app.include_router(health.router, prefix="/api/v1", tags=["health"])
    app.include_router(templates.router, prefix="/api/v1")
    app.include_router(notes.router, prefix="/api/v1")
    app.include_router(transcription.router, prefix="/api/v1")

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled exception: {exc}")
        return JSONResponse(
            status_code=500,
            content={
                "error": "Internal server error",
                "detail": str(exc) if settings.debug_mode else None,
            },
        )

    return app
