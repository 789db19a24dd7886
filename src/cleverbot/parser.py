"""
Reply body parsing.

No I/O occurs here; the functions are pure transformations of the raw body
string so they can be unit tested without a network.
"""

from __future__ import annotations

from typing import NamedTuple

from .errors import MalformedResponse

SEGMENT_SEPARATOR = "\r"
MIN_SEGMENTS = 3


class ExchangeReply(NamedTuple):
    reply: str
    session_id: str
    auth_token: str


def derive_auth_token(session_id: str, token_suffix: str) -> str:
    """
    Build the ``XAI`` token the next exchange must present.

    Args:
        session_id: New session id (second reply segment).
        token_suffix: Third reply segment.

    Returns:
        ``"<first three characters of session_id>,<token_suffix>"``.
    """
    return f"{session_id[:3]},{token_suffix}"


def parse_exchange_response(body: str) -> ExchangeReply:
    """
    Split a reply body into the reply text and the rotated session tokens.

    The body is carriage-return separated: segment 0 is the reply, segment 1
    the session id, segment 2 the auth token suffix.  Further segments are
    ignored.

    Args:
        body: Non-empty response text.

    Returns:
        :class:`ExchangeReply`.

    Raises:
        MalformedResponse: Fewer than three segments.
    """
    segments = body.split(SEGMENT_SEPARATOR)
    if len(segments) < MIN_SEGMENTS:
        raise MalformedResponse(
            f"The response format from Cleverbot is invalid: expected at least "
            f"{MIN_SEGMENTS} segments, got {len(segments)}.",
            body=body,
        )

    reply, session_id, token_suffix = segments[:MIN_SEGMENTS]
    return ExchangeReply(
        reply=reply,
        session_id=session_id,
        auth_token=derive_auth_token(session_id, token_suffix),
    )
