"""Session audio transcription via the OpenAI Whisper API."""

import logging
import time
from typing import Optional

import httpx
from openai import (
    APIConnectionError,
    APIStatusError,
    APITimeoutError,
    AsyncOpenAI,
    BadRequestError,
)

from soap_scribe.config import get_settings
from soap_scribe.observability import get_observability_logger

logger = logging.getLogger(__name__)

SUPPORTED_CONTENT_TYPES = frozenset(
    {
        "audio/webm",
        "audio/mp3",
        "audio/mp4",
        "audio/mpeg",
        "audio/m4a",
        "audio/x-m4a",
        "audio/wav",
        "audio/x-wav",
        "audio/flac",
        "audio/ogg",
    }
)

DEFAULT_FILENAME = "recording.webm"
DEFAULT_CONTENT_TYPE = "audio/webm"


class TranscriptionError(Exception):
    """Transcription failed; the message is safe to show to the clinician.

    ``is_client_error`` separates bad uploads (empty, too large, wrong
    format) from provider or network failures.
    """

    def __init__(self, message: str, is_client_error: bool = False):
        super().__init__(message)
        self.is_client_error = is_client_error


class Transcriber:
    """Transcribes recorded sessions with Whisper."""

    def __init__(
        self,
        api_key: str,
        model: str = "whisper-1",
        language: str = "en",
        timeout: int = 120,
        max_audio_bytes: int = 25 * 1024 * 1024,
        base_url: Optional[str] = None,
    ):
        """Initialize transcriber.

        Args:
            api_key: OpenAI API key
            model: Whisper model name
            language: Spoken language hint
            timeout: Request timeout in seconds
            max_audio_bytes: Largest upload accepted (Whisper caps at 25MB)
            base_url: Override for OpenAI-compatible transcription servers
        """
        self.model = model
        self.language = language
        self.max_audio_bytes = max_audio_bytes
        self._client = AsyncOpenAI(
            api_key=api_key or "not-needed",
            base_url=base_url,
            timeout=httpx.Timeout(timeout, connect=10.0),
        )

    def check_audio(self, audio: bytes, content_type: Optional[str] = None) -> None:
        """Reject uploads Whisper would refuse before spending a request.

        Raises:
            TranscriptionError: Empty or oversized audio
        """
        if not audio:
            raise TranscriptionError(
                "Invalid audio file: empty or missing audio data", is_client_error=True
            )
        if len(audio) > self.max_audio_bytes:
            raise TranscriptionError(
                "Audio file is too large. Please record a shorter session.", is_client_error=True
            )
        if content_type and content_type.split(";")[0] not in SUPPORTED_CONTENT_TYPES:
            logger.warning(f"Potentially unsupported audio type: {content_type}")

    async def transcribe(
        self,
        audio: bytes,
        filename: str = DEFAULT_FILENAME,
        content_type: Optional[str] = None,
        request_id: Optional[str] = None,
    ) -> str:
        """Transcribe audio to text.

        Args:
            audio: Raw audio bytes
            filename: Upload filename; Whisper infers the format from its extension
            content_type: MIME type of the upload
            request_id: Optional request ID for observability

        Returns:
            Transcript text, stripped

        Raises:
            TranscriptionError: On bad audio, provider failure or an empty result
        """
        obs = get_observability_logger()
        content_type = content_type or DEFAULT_CONTENT_TYPE
        start_time = time.time()

        try:
            self.check_audio(audio, content_type)
            transcript = await self._request(audio, filename or DEFAULT_FILENAME, content_type)
        except TranscriptionError as e:
            obs.log_transcription(
                model=self.model,
                audio_bytes=len(audio or b""),
                content_type=content_type,
                success=False,
                error_message=str(e),
                duration_ms=(time.time() - start_time) * 1000,
                request_id=request_id,
            )
            raise

        obs.log_transcription(
            model=self.model,
            audio_bytes=len(audio),
            content_type=content_type,
            transcript_chars=len(transcript),
            duration_ms=(time.time() - start_time) * 1000,
            request_id=request_id,
        )
        logger.info(f"Transcribed {len(audio)} bytes of audio into {len(transcript)} characters")
        return transcript

    async def _request(self, audio: bytes, filename: str, content_type: str) -> str:
        try:
            result = await self._client.audio.transcriptions.create(
                file=(filename, audio, content_type),
                model=self.model,
                language=self.language,
                response_format="text",
            )
        except APITimeoutError as e:
            logger.error(f"Whisper timeout: {e}")
            raise TranscriptionError(
                "Network error during transcription. Please check your connection and try again."
            ) from e
        except APIConnectionError as e:
            logger.error(f"Whisper connection error: {e}")
            raise TranscriptionError(
                "Network error during transcription. Please check your connection and try again."
            ) from e
        except BadRequestError as e:
            logger.warning(f"Whisper rejected audio: {e}")
            message = str(e).lower()
            if "size" in message or "too large" in message:
                raise TranscriptionError(
                    "Audio file is too large. Please record a shorter session.", is_client_error=True
                ) from e
            if "format" in message:
                raise TranscriptionError(
                    "Unsupported audio format. Please try recording again.", is_client_error=True
                ) from e
            raise TranscriptionError("Transcription request was rejected", is_client_error=True) from e
        except APIStatusError as e:
            logger.error(f"Whisper API error {e.status_code}: {e}")
            raise TranscriptionError(f"Transcription failed with status {e.status_code}") from e

        # response_format="text" returns a bare string; older clients wrap it
        text = result if isinstance(result, str) else getattr(result, "text", None)
        if not isinstance(text, str):
            raise TranscriptionError("Invalid transcription response from Whisper API")
        if not text.strip():
            raise TranscriptionError(
                "Empty transcription - no speech detected in audio", is_client_error=True
            )
        return text.strip()


def create_transcriber_from_settings() -> Transcriber:
    """Create a transcriber from application settings."""
    settings = get_settings()
    return Transcriber(
        api_key=settings.openai_api_key,
        model=settings.transcription_model,
        language=settings.transcription_language,
        timeout=settings.transcription_timeout,
        max_audio_bytes=settings.max_audio_bytes,
    )
