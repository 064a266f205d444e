"""Main entry point for SOAP Scribe."""

import logging
import sys
from typing import Optional

from soap_scribe.config import get_settings


def setup_logging():
    """Configure logging based on settings."""
    settings = get_settings()

    logging.basicConfig(
        level=getattr(logging, settings.log_level),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )


def main():
    """Main entry point - runs CLI."""
    setup_logging()

    from soap_scribe.cli.commands import app

    app()


async def generate_note(
    transcript: str,
    template_key: Optional[str] = None,
    profession: Optional[str] = None,
    custom_template: Optional[dict] = None,
):
    """Programmatic API for generating a note.

    Example:
        import asyncio
        from soap_scribe.main import generate_note

        result = asyncio.run(generate_note(
            "Patient reports right knee pain on stairs for three weeks...",
            template_key="knee",
        ))
        print(result.data["objective"])
    """
    from soap_scribe.llm import create_router_from_settings
    from soap_scribe.notes import NoteGenerator
    from soap_scribe.templates import Profession, build_custom_template

    setup_logging()
    settings = get_settings()

    generator = NoteGenerator(
        llm=create_router_from_settings(),
        temperature=settings.generation_temperature,
        max_tokens=settings.generation_max_tokens,
    )

    template = None
    if custom_template is not None:
        template = build_custom_template(custom_template, profession or Profession.PHYSICAL_THERAPY)

    return await generator.generate(transcript, template_key, template=template, profession=profession)


if __name__ == "__main__":
    main()
