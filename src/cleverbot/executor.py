"""
Request construction and single-exchange execution.

Design notes:
- Every builder here reproduces the browser's wire format byte for byte,
  including the self-duplicated payload body and the unencoded ``xai``
  URL parameter.  The remote service rejects anything else.
- ``call_remote_api`` performs one attempt only; retrying is the caller's
  job (see :mod:`.retry`).
"""

from __future__ import annotations

import hashlib
import logging
from collections.abc import Sequence
from urllib.parse import quote

import requests

from .config import (
    CHECKSUM_END,
    CHECKSUM_START,
    CONTINUATION_PARAMS,
    EXCHANGE_TIMEOUT_SECONDS,
    EXCHANGE_URL,
    HEADERS,
    PAYLOAD_TRAILER,
    ClientConfig,
)
from .errors import Banned, RemoteCallFailed
from .parser import parse_exchange_response
from .retry import FailureKind, classify_failure
from .session import RequestCounters, SessionState, refresh_cookies_if_needed

logger = logging.getLogger(__name__)

# Characters JavaScript's encodeURIComponent leaves alone beyond quote()'s own
_COMPONENT_SAFE = "!*'()"

AUTH_TOKEN_COOKIE_LENGTH = 3


# ---------------------------------------------------------------------------
# Encoding helpers
# ---------------------------------------------------------------------------

def encode_component(text: str) -> str:
    """Percent-encode ``text`` exactly like JavaScript's ``encodeURIComponent``."""
    return quote(text, safe=_COMPONENT_SAFE)


def checksum(text: str) -> str:
    """Return the lowercase hex MD5 digest of ``text``."""
    return hashlib.md5(text.encode("utf-8")).hexdigest()


# ---------------------------------------------------------------------------
# Request construction
# ---------------------------------------------------------------------------

def build_request_payload(
    message: str,
    history: Sequence[str],
    language: str | None,
) -> str:
    """
    Construct the form-encoded request body.

    History is emitted most-recent-first, so ``vText0`` is the last element
    of ``history``.  The ``icognocheck`` checksum covers characters 7..32 of
    the payload, and the transmitted body is the payload twice followed by
    that checksum.

    Args:
        message: The user's new utterance.
        history: Prior utterances, oldest first.  Not modified.
        language: Language code, or ``None`` to omit the field.

    Returns:
        Request body string.
    """
    payload = f"stimulus={encode_component(message)}&"

    for i, entry in enumerate(reversed(history)):
        payload += f"vText{i}={encode_component(entry)}&"

    if language:
        payload += f"cb_config_language={language}&"
    payload += PAYLOAD_TRAILER

    return payload + payload + checksum(payload[CHECKSUM_START:CHECKSUM_END])


def build_cookie_header(state: SessionState) -> str:
    """
    Synthesize the ``Cookie`` header for an exchange from session state.

    Args:
        state: Current session.

    Returns:
        Header value, e.g.
        ``"_cbsid=-1; XVIS=abc; XAI=WXY; CBSID=WXYZ; note=1; CBALT=1~hi;"``.
    """
    header = ""
    if state.cookie_jar:
        primary = state.cookie_jar[0].split(";")[0]
        header = f"_cbsid=-1; {primary};"
    if state.auth_token:
        header += f" XAI={state.auth_token[:AUTH_TOKEN_COOKIE_LENGTH]};"
    if state.session_id:
        header += f" CBSID={state.session_id};"
    header += " note=1;"
    if state.last_reply:
        header += f" CBALT=1~{encode_component(state.last_reply)};"
    return header


def build_endpoint_url(message: str, state: SessionState) -> str:
    """
    Return the exchange URL, with continuation parameters once a session exists.

    Args:
        message: The user's new utterance.
        state: Current session; ``exchange_count`` must already be incremented.

    Returns:
        Full URL string ready for ``requests.post()``.
    """
    if not state.has_session:
        return EXCHANGE_URL

    return (
        f"{EXCHANGE_URL}"
        f"out={encode_component(state.last_reply or '')}&"
        f"in={encode_component(message)}&"
        f"bot=c&cbsid={state.session_id}&xai={state.auth_token}&"
        f"ns={state.exchange_count}&"
        f"{CONTINUATION_PARAMS}"
    )


def build_request_headers(payload: bytes, state: SessionState) -> dict[str, str]:
    return {
        **HEADERS,
        "Content-Length": str(len(payload)),
        "Cookie": build_cookie_header(state),
    }


# ---------------------------------------------------------------------------
# API call execution
# ---------------------------------------------------------------------------

def call_remote_api(
    message: str,
    history: Sequence[str],
    language: str | None,
    state: SessionState,
    counters: RequestCounters,
    config: ClientConfig,
    now_ms: int,
) -> str:
    """
    Execute a single exchange and rotate the session tokens.

    Args:
        message: The user's new utterance.
        history: Prior utterances, oldest first.
        language: Language code for ``cb_config_language``.
        state: Session to read and update.
        counters: Incremented once per network call outcome.
        config: Client settings.
        now_ms: Current time in epoch milliseconds (cookie validity).

    Returns:
        The reply text.

    Raises:
        Banned: The remote answered 403 (cookie fetch or exchange).
        CookieFetchFailed: The cookie bootstrap failed otherwise.
        RemoteCallFailed: Network failure, non-2xx status, or empty body.
        MalformedResponse: The body had fewer than three segments.
    """
    if config.debug:
        logger.debug(
            "Calling Cleverbot with message=%r history=%r language=%r",
            message, list(history), language,
        )

    refresh_cookies_if_needed(state, counters, config, now_ms)

    payload = build_request_payload(message, history, language)
    state.exchange_count += 1

    url = build_endpoint_url(message, state)
    body = payload.encode("utf-8")
    headers = build_request_headers(body, state)

    if config.debug:
        logger.debug("Preparing exchange: url=%s payload=%s", url, payload)
        logger.debug("Cookie header: %s", headers["Cookie"])

    try:
        response = requests.post(
            url,
            data=body,
            headers=headers,
            timeout=EXCHANGE_TIMEOUT_SECONDS,
        )
        response.raise_for_status()
    except requests.RequestException as exc:
        counters.failure_count += 1
        if classify_failure(exc) == FailureKind.BANNED:
            raise Banned(
                "Error code 403. The response could not be obtained because "
                "your IP address has been banned."
            ) from exc
        raise RemoteCallFailed(f"Cleverbot API call failed: {exc}") from exc

    text = response.text
    if not text:
        counters.failure_count += 1
        raise RemoteCallFailed("Cleverbot API call failed: the response body is empty.")

    counters.success_count += 1
    if config.debug:
        logger.debug("Received response from Cleverbot: %r", text)

    parsed = parse_exchange_response(text)
    state.record_exchange(parsed.reply, parsed.session_id, parsed.auth_token)
    return parsed.reply
