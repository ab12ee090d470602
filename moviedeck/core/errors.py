# moviedeck/core/errors.py
from typing import Optional


class MovieDeckError(Exception):
    """Base class for every error raised by moviedeck."""


class ConfigurationError(MovieDeckError):
    """Missing or placeholder credential; blocks startup."""


class RemoteError(MovieDeckError):
    """TMDb answered with a non-success status."""

    def __init__(self, status_code: int, status_text: str, endpoint: str = ""):
        self.status_code = status_code
        self.status_text = status_text
        self.endpoint = endpoint
        super().__init__(f"HTTP error! status: {status_code} - {status_text}")


class TransportError(MovieDeckError):
    """The request never completed (DNS, connect, read, timeout)."""

    def __init__(self, endpoint: str, cause: Optional[BaseException] = None):
        self.endpoint = endpoint
        self.cause = cause
        super().__init__(f"Request to {endpoint} failed: {cause}")


class StorageError(MovieDeckError):
    """Persisted watchlist could not be serialized or deserialized."""
