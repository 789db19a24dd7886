"""
Public client handle.

Each :class:`CleverbotClient` owns its configuration, session state and
request counters, so independent conversations are simply independent
instances.  A single instance is not safe to drive from several threads.
"""

from __future__ import annotations

import copy
import logging
import random
import time
from collections.abc import Callable, Mapping, Sequence
from typing import Any

from .config import HEADERS, ClientConfig, validate_language
from .errors import InvalidConfiguration
from .executor import call_remote_api
from .retry import interact_with_retry
from .session import RequestCounters, SessionState

__version__ = "1.0.0"

logger = logging.getLogger(__name__)


class CleverbotClient:
    """Browser-emulating client for the Cleverbot website endpoint."""

    version = __version__

    def __init__(
        self,
        config: ClientConfig | None = None,
        rng: random.Random | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """
        Args:
            config: Initial settings; defaults to :class:`ClientConfig()`.
            rng: Jitter source for retry backoff.
            clock: Returns the current time in epoch seconds.
        """
        self.config = config or ClientConfig()
        self.session = SessionState()
        self.counters = RequestCounters()
        self._rng = rng or random.Random()
        self._clock = clock

    def configure(self, updates: Mapping[str, Any] | None = None, **kwargs: Any) -> ClientConfig:
        """
        Validate and apply a partial settings update atomically.

        Raises:
            InvalidConfiguration: Nothing is applied.
        """
        if updates is None:
            merged = dict(kwargs)
        elif isinstance(updates, Mapping):
            merged = {**updates, **kwargs}
        else:
            raise InvalidConfiguration(
                f"The configuration must be provided as a mapping, "
                f"got {type(updates).__name__}."
            )
        self.config = self.config.apply(merged)
        return self.config

    def interact(
        self,
        message: str,
        history: Sequence[str] = (),
        language: str | None = None,
    ) -> str:
        """
        Send ``message`` and return Cleverbot's reply, retrying transient failures.

        Args:
            message: The user's new utterance.
            history: Prior utterances of the conversation, oldest first.
                The caller maintains it; it is not modified.
            language: Overrides ``config.default_language`` for this call.

        Returns:
            Reply text.

        Raises:
            InvalidConfiguration: ``language`` is not a supported code.
            Banned: The remote blocked this IP address.
            ExhaustedRetries: All attempts failed.
        """
        if language is None:
            language = self.config.default_language
        else:
            validate_language("language", language)

        config = self.config

        def exchange() -> str:
            return call_remote_api(
                message,
                history,
                language,
                self.session,
                self.counters,
                config,
                self._now_ms(),
            )

        return interact_with_retry(exchange, config, self._rng)

    def new_session(self) -> None:
        """Forget cookies and the remote conversation.  Counters are kept."""
        self.session.reset()
        if self.config.debug:
            logger.debug("new_session(): session data deleted")

    def get_diagnostics(self) -> dict[str, Any]:
        """Return a detached snapshot of configuration, session and counters."""
        state = self.session
        return {
            "version": self.version,
            "config": self.config.as_dict(),
            "cookie": {
                "expiration_time": self.config.cookie_expiration_time,
                "content": copy.deepcopy(state.cookie_jar),
                "last_update": state.last_cookie_refresh,
            },
            "session": {
                "session_id": state.session_id,
                "auth_token": state.auth_token,
                "exchange_count": state.exchange_count,
                "last_reply": state.last_reply,
            },
            "request": {
                "success_count": self.counters.success_count,
                "failure_count": self.counters.failure_count,
                "headers": dict(HEADERS),
            },
        }

    def _now_ms(self) -> int:
        return int(self._clock() * 1000)


def create_client(config: ClientConfig | None = None, **settings: Any) -> CleverbotClient:
    """
    Build a client, applying ``settings`` on top of ``config`` (or defaults).

    Example::

        client = create_client(default_language="fr", max_retry_attempts=5)
        reply = client.interact("Bonjour")

    Raises:
        InvalidConfiguration: A setting failed validation.
    """
    base = config or ClientConfig()
    return CleverbotClient(config=base.apply(settings))
