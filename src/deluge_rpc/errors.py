"""Error hierarchy for the Deluge JSON-RPC client."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(slots=True)
class RequestDetails:
    url: str
    method: str | None = None
    status_code: int | None = None
    response_body: Any | None = None


class DelugeError(Exception):
    """Base class for all client errors."""


class ConfigurationError(DelugeError):
    """Raised when connection parameters cannot be parsed."""


class DelugeConnectionError(DelugeError):
    """Raised when the HTTP handle cannot be created or the daemon cannot be reached."""


class SessionError(DelugeError):
    """Raised when the probe/login preamble cannot establish an authenticated session."""


class RequestError(DelugeError):
    """Raised when the HTTP exchange itself fails."""

    def __init__(self, message: str, *, details: RequestDetails | None = None) -> None:
        super().__init__(message)
        self.details = details


class RequestTimeoutError(RequestError):
    """Raised when the HTTP exchange times out."""


class ResponseError(DelugeError):
    """Raised when a response is malformed or does not belong to its request."""


class AddressingError(DelugeError):
    """Raised when a caller addresses a name absent from the discovered tree."""

    def __init__(self, message: str, *, name: str | int, path: str) -> None:
        super().__init__(message)
        self.name = name
        self.path = path


class UnknownNamespaceError(AddressingError):
    pass


class UnknownCommandError(AddressingError):
    pass


class CommandError(DelugeError):
    """Raised when the daemon reports an error for a well-formed call."""

    def __init__(self, message: str, *, code: int | None = None, method: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.method = method

    def __str__(self) -> str:
        prefix = f"{self.method}: " if self.method else ""
        suffix = f" (code {self.code})" if self.code is not None else ""
        return f"{prefix}{self.message}{suffix}"
