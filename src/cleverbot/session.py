"""
Conversation session state, request counters, and cookie management.

A :class:`SessionState` belongs to exactly one client handle.  Nothing here
is locked: two threads driving the same state will interleave cookie and
session-id updates.

Key behaviours:
- The cookie jar is refreshed lazily, only when missing or older than
  ``cookie_expiration_time`` milliseconds.
- The bootstrap URL carries a UTC ``YYYYMMDD`` query string so that a cached
  copy of the script is never served.
- ``session_id``, ``auth_token`` and ``last_reply`` are only ever written
  together by :meth:`SessionState.record_exchange`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone

import requests

from .config import (
    BOOTSTRAP_COOKIE,
    COOKIE_TIMEOUT_SECONDS,
    COOKIE_URL,
    HEADERS,
    ClientConfig,
)
from .errors import Banned, CookieFetchFailed
from .retry import FailureKind, classify_failure

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# State containers
# ---------------------------------------------------------------------------

@dataclass
class RequestCounters:
    """Network call outcomes.  Survives :meth:`SessionState.reset`."""

    success_count: int = 0
    failure_count: int = 0


@dataclass
class SessionState:
    """Mutable record of one remote conversation."""

    cookie_jar: list[str] | None = None
    last_cookie_refresh: int = 0   # epoch ms, 0 = never
    session_id: str | None = None
    auth_token: str | None = None
    exchange_count: int = 0
    last_reply: str | None = None

    @property
    def has_session(self) -> bool:
        return bool(self.session_id)

    def cookie_is_fresh(self, now_ms: int, expiration_ms: int) -> bool:
        """Return ``True`` if a non-empty jar is younger than ``expiration_ms``."""
        return (
            bool(self.cookie_jar)
            and now_ms - self.last_cookie_refresh < expiration_ms
        )

    def record_exchange(self, reply: str, session_id: str, auth_token: str) -> None:
        self.last_reply = reply
        self.session_id = session_id
        self.auth_token = auth_token

    def reset(self) -> None:
        """Return every field to its initial unset/zero value."""
        self.cookie_jar = None
        self.last_cookie_refresh = 0
        self.session_id = None
        self.auth_token = None
        self.exchange_count = 0
        self.last_reply = None


# ---------------------------------------------------------------------------
# Cookie bootstrap
# ---------------------------------------------------------------------------

def build_cookie_url(now_ms: int) -> str:
    """
    Return the bootstrap script URL bucketed by the current UTC date.

    Args:
        now_ms: Current time in epoch milliseconds.

    Returns:
        URL such as ``.../conversation-social-min.js?20261016``.
    """
    day = datetime.fromtimestamp(now_ms / 1000, tz=timezone.utc).strftime("%Y%m%d")
    return f"{COOKIE_URL}?{day}"


def extract_cookies(response: requests.Response) -> list[str]:
    """Return the response's set-cookie values as ``name=value`` strings."""
    return [f"{cookie.name}={cookie.value}" for cookie in response.cookies]


def refresh_cookies_if_needed(
    state: SessionState,
    counters: RequestCounters,
    config: ClientConfig,
    now_ms: int,
) -> bool:
    """
    Make sure ``state`` holds a usable cookie jar before an exchange.

    Performs at most one GET.  On success the jar is replaced and the refresh
    time stamped; on failure the existing state is left untouched.

    Args:
        state: Session to update.
        counters: Incremented once for the GET outcome, if a GET is made.
        config: Supplies ``cookie_expiration_time`` and ``debug``.
        now_ms: Current time in epoch milliseconds.

    Returns:
        ``True`` if the cookies were fetched, ``False`` if still valid.

    Raises:
        Banned: The remote answered 403.
        CookieFetchFailed: Any other network failure, chained to the cause.
    """
    if state.cookie_is_fresh(now_ms, config.cookie_expiration_time):
        if config.debug:
            logger.debug("Cookies are still valid.")
        return False

    if config.debug:
        logger.debug("Attempting to update cookies.")

    try:
        response = requests.get(
            build_cookie_url(now_ms),
            headers={**HEADERS, "Cookie": BOOTSTRAP_COOKIE},
            timeout=COOKIE_TIMEOUT_SECONDS,
        )
        response.raise_for_status()
    except requests.RequestException as exc:
        counters.failure_count += 1
        if classify_failure(exc) == FailureKind.BANNED:
            raise Banned(
                "Error code 403. Cookies cannot be updated because your IP "
                "address has been banned."
            ) from exc
        raise CookieFetchFailed(f"Failed to update cookies. {exc}") from exc

    counters.success_count += 1
    state.cookie_jar = extract_cookies(response) or None
    state.last_cookie_refresh = now_ms

    if config.debug:
        logger.debug("Cookies have been updated: %s", state.cookie_jar)
    return True
