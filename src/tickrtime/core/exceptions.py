"""Custom exceptions for TickrTime."""

from datetime import date


class TickrTimeError(Exception):
    """Base exception for all TickrTime errors."""

    def __init__(self, message: str, *args: object) -> None:
        self.message = message
        super().__init__(message, *args)


class ConfigurationError(TickrTimeError):
    """A required credential or setting is missing."""


# Provider errors
class ProviderError(TickrTimeError):
    """Base error for upstream data providers."""


class UpstreamFetchError(ProviderError):
    """Upstream request failed (non-2xx response or network error)."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.status_code = status_code
        super().__init__(message)


class MalformedResponseError(ProviderError):
    """Upstream responded with an unexpected JSON shape."""


class AllSubRangesFailedError(ProviderError):
    """Every sub-range of a calendar query failed."""

    def __init__(self, start: date, end: date, attempts: int) -> None:
        self.start = start
        self.end = end
        self.attempts = attempts
        super().__init__(
            f"All {attempts} sub-range fetches failed for {start.isoformat()}..{end.isoformat()}"
        )


# Request errors
class RequestValidationError(TickrTimeError):
    """Caller supplied missing or invalid parameters."""


class AuthError(TickrTimeError):
    """Missing, invalid or expired credentials."""


class NotFoundError(TickrTimeError):
    """Requested resource does not exist."""


class ConflictError(TickrTimeError):
    """Resource already exists."""


# Storage errors
class StorageError(TickrTimeError):
    """Base error for storage layer."""
