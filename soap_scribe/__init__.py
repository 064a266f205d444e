"""SOAP Scribe: transcript-to-SOAP-note generation for PT and chiropractic."""

__version__ = "0.1.0"
