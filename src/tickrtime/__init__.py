"""TickrTime: earnings calendar backend for technology-sector stocks."""

__version__ = "0.1.0"
