"""
Failure classification, jittered incremental backoff, and the retry loop.

The schedule for attempt ``n`` (1-based) that failed transiently is::

    wait_n = retry_base_cooldown + U(0, 1999) + 1000 + increment_n
    increment_1 = 0
    increment_{n+1} = increment_n + U(0, 2999) + 1000

so every wait grows on the previous one by at least a second.  A 403 from
the remote is a ban and is never retried.
"""

from __future__ import annotations

import logging
import random
import time
from collections.abc import Callable

import requests

from .config import (
    BACKOFF_FLOOR_MS,
    BACKOFF_JITTER_MS,
    INCREMENT_FLOOR_MS,
    INCREMENT_JITTER_MS,
    ClientConfig,
)
from .errors import Banned, CleverbotError, ExhaustedRetries

logger = logging.getLogger(__name__)

FORBIDDEN_STATUS = 403


# ---------------------------------------------------------------------------
# Error classification
# ---------------------------------------------------------------------------

class FailureKind:
    """
    Failure category constants.

    Categories drive retry decisions: transient failures are retried with
    backoff; a ban aborts the interaction immediately.
    """

    BANNED = "banned"
    TRANSIENT = "transient"


def classify_failure(error: BaseException) -> str:
    """
    Classify an exception raised while talking to the remote service.

    Args:
        error: A :class:`requests.RequestException` or a package error.

    Returns:
        :attr:`FailureKind.BANNED` for 403 responses and :class:`Banned`,
        :attr:`FailureKind.TRANSIENT` for everything else.
    """
    if isinstance(error, Banned):
        return FailureKind.BANNED

    response = getattr(error, "response", None)
    if isinstance(error, requests.HTTPError) and response is not None:
        if response.status_code == FORBIDDEN_STATUS:
            return FailureKind.BANNED

    return FailureKind.TRANSIENT


# ---------------------------------------------------------------------------
# Backoff helpers
# ---------------------------------------------------------------------------

def backoff_delay(base_cooldown: int, increment: int, rng: random.Random) -> int:
    """
    Return the wait in milliseconds before the next attempt.

    Args:
        base_cooldown: ``retry_base_cooldown`` in milliseconds.
        increment: Accumulated growth from earlier retries.
        rng: Source of jitter.

    Returns:
        Milliseconds to wait.
    """
    return base_cooldown + rng.randrange(BACKOFF_JITTER_MS) + BACKOFF_FLOOR_MS + increment


def next_increment(increment: int, rng: random.Random) -> int:
    """Grow the incremental delay by one jittered step."""
    return increment + rng.randrange(INCREMENT_JITTER_MS) + INCREMENT_FLOOR_MS


def wait_before_retry(milliseconds: int) -> None:
    time.sleep(milliseconds / 1000)


# ---------------------------------------------------------------------------
# Main retry wrapper
# ---------------------------------------------------------------------------

def interact_with_retry(
    exchange: Callable[[], str],
    config: ClientConfig,
    rng: random.Random,
) -> str:
    """
    Run ``exchange`` until it returns a reply or the attempts run out.

    No wait follows the final attempt.

    Args:
        exchange: Zero-argument callable performing one full exchange.
        config: Supplies ``max_retry_attempts`` and ``retry_base_cooldown``.
        rng: Source of backoff jitter.

    Returns:
        The reply text of the first successful attempt.

    Raises:
        Banned: The remote signalled a ban; carries the attempt number.
        ExhaustedRetries: Every attempt failed; chained to the last error.
    """
    max_attempts = config.max_retry_attempts
    increment = 0
    last_error: CleverbotError | None = None

    for attempt in range(1, max_attempts + 1):
        try:
            return exchange()
        except CleverbotError as exc:
            if classify_failure(exc) == FailureKind.BANNED:
                raise Banned(
                    f"Attempt {attempt} failed: Error code 403. The response "
                    f"could not be obtained because your IP address has been banned.",
                    attempt=attempt,
                ) from exc

            last_error = exc
            if attempt == max_attempts:
                break

            wait_ms = backoff_delay(config.retry_base_cooldown, increment, rng)
            logger.warning(
                "Attempt %d/%d failed: %s. Waiting %.3fs...",
                attempt, max_attempts, exc, wait_ms / 1000,
            )
            wait_before_retry(wait_ms)
            increment = next_increment(increment, rng)

    logger.warning("Attempt %d/%d failed: %s", max_attempts, max_attempts, last_error)
    raise ExhaustedRetries(max_attempts) from last_error
