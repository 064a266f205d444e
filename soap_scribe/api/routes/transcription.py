"""Audio transcription endpoint."""

import logging

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from pydantic import BaseModel

from soap_scribe.transcription import Transcriber, TranscriptionError
from soap_scribe.api.dependencies import get_transcriber

router = APIRouter(tags=["transcription"])

logger = logging.getLogger(__name__)


class TranscriptionResponse(BaseModel):
    """Transcript of an uploaded recording."""

    transcript: str


@router.post("/transcribe", response_model=TranscriptionResponse)
async def transcribe_audio(
    file: UploadFile = File(...),
    transcriber: Transcriber = Depends(get_transcriber),
) -> TranscriptionResponse:
    """Transcribe a recorded session.

    The audio is held in memory for the request only and never written to disk.
    """
    try:
        audio = await file.read()
        transcript = await transcriber.transcribe(
            audio,
            filename=file.filename or "recording.webm",
            content_type=file.content_type,
        )
    except TranscriptionError as e:
        status_code = 400 if e.is_client_error else 502
        raise HTTPException(status_code=status_code, detail=str(e))
    finally:
        await file.close()

    return TranscriptionResponse(transcript=transcript)
