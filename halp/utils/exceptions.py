"""
Error types shared by the streaming pipeline.

Usage:
    from halp.utils.exceptions import EmptyResponse, TransportError

    raise TransportError("API error (401): invalid x-api-key", status_code=401)
    raise EmptyResponse("Could not extract command from response")
"""

from typing import Optional


class HalpError(Exception):
    """Base class for every failure surfaced to the CLI.

    `explanation` carries any explanation text already streamed to the user
    before the failure, so callers can report it alongside the message.
    """

    def __init__(self, message: str, explanation: str = ""):
        super().__init__(message)
        self.message = message
        self.explanation = explanation

    def __str__(self) -> str:
        return self.message


class ConfigError(HalpError):
    """Configuration could not be resolved (missing key, bad value)."""


class UnknownProvider(ConfigError):
    """Provider name has no registered implementation."""

    def __init__(self, name: str, known: Optional[list[str]] = None):
        message = f"Unknown provider '{name}'."
        if known:
            message += f" Use one of: {', '.join(known)}."
        super().__init__(message)
        self.name = name


class TransportError(HalpError):
    """Connection failure, timeout or non-2xx response."""

    def __init__(
        self, message: str, status_code: Optional[int] = None, explanation: str = ""
    ):
        super().__init__(message, explanation)
        self.status_code = status_code


class ResponseTooLarge(TransportError):
    """Generated text exceeded the configured size limit."""

    def __init__(self, limit: int):
        super().__init__(f"Response too large (>{limit} bytes)")
        self.limit = limit


class MalformedFrame(HalpError):
    """A frame payload could not be decoded."""

    def __init__(self, message: str, data: str = ""):
        super().__init__(message)
        self.data = data


class ProviderReportedError(HalpError):
    """The provider sent an error payload inside the stream."""


class EmptyResponse(HalpError):
    """The stream ended without a resolvable command."""
