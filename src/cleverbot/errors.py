"""
Exception hierarchy for the Cleverbot web client.

Transient failures (``CookieFetchFailed``, ``RemoteCallFailed``,
``MalformedResponse``) are retried by :mod:`.retry`; ``Banned`` and
``InvalidConfiguration`` never are.
"""

from __future__ import annotations


class CleverbotError(Exception):
    """Base class for every error raised by this package."""


class InvalidConfiguration(CleverbotError, ValueError):
    """A configuration value (or per-call language) failed validation."""


class Banned(CleverbotError):
    """The remote service answered 403: the caller's IP address is blocked."""

    def __init__(self, message: str, attempt: int | None = None) -> None:
        super().__init__(message)
        self.attempt = attempt


class CookieFetchFailed(CleverbotError):
    """The cookie bootstrap request failed for a reason other than a ban."""


class RemoteCallFailed(CleverbotError):
    """The conversational exchange failed at the network level or returned nothing."""


class MalformedResponse(CleverbotError):
    """The reply body had fewer than three carriage-return separated segments."""

    def __init__(self, message: str, body: str = "") -> None:
        super().__init__(message)
        self.body = body


class ExhaustedRetries(CleverbotError):
    """Every attempt allowed by ``max_retry_attempts`` failed."""

    def __init__(self, attempts: int) -> None:
        super().__init__(
            f"Failed to get a response from Cleverbot after {attempts} attempts."
        )
        self.attempts = attempts
