"""Configuration management for SOAP Scribe."""

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Primary LLM (any OpenAI-compatible endpoint)
    llm_base_url: str = Field(
        default="https://api.openai.com/v1",
        description="OpenAI-compatible endpoint for note generation",
    )
    llm_model: str = Field(
        default="gpt-4o",
        description="Model name for note generation",
    )
    llm_api_key: str = Field(
        default="",
        description="API key for the primary LLM endpoint (falls back to openai_api_key)",
    )
    llm_timeout: int = Field(
        default=60,
        description="Timeout in seconds for primary LLM requests",
    )

    # Anthropic Claude (fallback)
    anthropic_api_key: str = Field(
        default="",
        description="Anthropic API key for Claude fallback",
    )
    anthropic_model: str = Field(
        default="claude-sonnet-4-20250514",
        description="Claude model to use",
    )

    # OpenAI (Whisper transcription)
    openai_api_key: str = Field(
        default="",
        description="OpenAI API key used for Whisper transcription",
    )
    transcription_model: str = Field(default="whisper-1")
    transcription_language: str = Field(default="en")
    transcription_timeout: int = Field(default=120)
    max_audio_bytes: int = Field(
        default=25 * 1024 * 1024,
        description="Largest audio upload accepted by the transcription endpoint",
    )

    # Note generation
    generation_temperature: float = Field(
        default=0.3,
        description="Sampling temperature for SOAP generation",
    )
    generation_max_tokens: int = Field(default=2000)

    # API Settings
    api_host: str = Field(default="0.0.0.0")
    api_port: int = Field(default=8080)
    api_key: str = Field(
        default="",
        description="API key for authenticating requests",
    )

    # CORS
    cors_origins: list[str] = Field(
        default=["http://localhost:3000"],
        description="Allowed CORS origins",
    )

    # Observability
    observability_enabled: bool = Field(default=True)
    observability_log_dir: Path = Field(default=Path("./data/logs"))

    # Debug
    debug_mode: bool = Field(
        default=False,
        description="Enable debug mode (exposes error details in responses)",
    )

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(default="INFO")

    max_retries: int = Field(default=3, description="Max retries for LLM calls")

    @property
    def has_anthropic_key(self) -> bool:
        """Check if Anthropic API key is configured."""
        return bool(self.anthropic_api_key)

    @property
    def has_openai_key(self) -> bool:
        """Check if an OpenAI API key is configured."""
        return bool(self.openai_api_key)

    @property
    def primary_api_key(self) -> str:
        """API key for the primary LLM endpoint."""
        return self.llm_api_key or self.openai_api_key or "not-needed"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
