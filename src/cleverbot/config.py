"""
Endpoint constants, browser header set, client defaults, and the validated
client configuration.

All constants used across the client modules are centralized here so that
configuration is separated from logic.  The endpoints, header names and
fixed payload fields mirror what the Cleverbot website sends from a browser.
"""

from __future__ import annotations

import dataclasses
import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from .errors import InvalidConfiguration
from .languages import SUPPORTED_LANGUAGES

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Remote endpoints
# ---------------------------------------------------------------------------

BASE_URL = "https://www.cleverbot.com"

# Cookie bootstrap script; a YYYYMMDD query string is appended per request.
COOKIE_URL = f"{BASE_URL}/extras/conversation-social-min.js"

# Conversational exchange endpoint (the ``uc`` value is the one the site uses).
EXCHANGE_URL = f"{BASE_URL}/webservicemin?uc=UseOfficialCleverbotAPI&ncf=V2&"

# Cookie header sent with the bootstrap request, before any jar exists
BOOTSTRAP_COOKIE = "_cbsid=-1; note=1"

# ---------------------------------------------------------------------------
# Browser header set
# ---------------------------------------------------------------------------

HEADERS: dict[str, str] = {
    "User-Agent": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36"
    ),
    "Accept": "*/*",
    "Accept-Language": "en-US,en;q=0.9",
    "Accept-Encoding": "gzip, deflate",
    "Content-Type": "text/plain;charset=UTF-8",
    "Origin": BASE_URL,
    "Referer": f"{BASE_URL}/",
    "Sec-Fetch-Dest": "empty",
    "Sec-Fetch-Mode": "cors",
    "Sec-Fetch-Site": "same-origin",
    "Connection": "keep-alive",
}

# ---------------------------------------------------------------------------
# Fixed payload fields
# ---------------------------------------------------------------------------

PAYLOAD_TRAILER = "cb_config_scripting=no&islearning=1&icognoid=wsf&icognocheck="

# Checksum window: characters 7..32 of the pre-checksum payload
CHECKSUM_START = 7
CHECKSUM_END = 33

# Placeholder parameters the exchange URL carries once a session exists
CONTINUATION_PARAMS = "al=&dl=&flag=&user=&mode=1&alt=0&reac=&emo=&sou=website&xed=&"

# ---------------------------------------------------------------------------
# Timeouts (seconds)
# ---------------------------------------------------------------------------

COOKIE_TIMEOUT_SECONDS: int = 25
EXCHANGE_TIMEOUT_SECONDS: int = 20

# ---------------------------------------------------------------------------
# Retry jitter (milliseconds)
# ---------------------------------------------------------------------------

BACKOFF_JITTER_MS: int = 2000       # uniform 0..1999 added to every wait
BACKOFF_FLOOR_MS: int = 1000        # constant added to every wait
INCREMENT_JITTER_MS: int = 3000     # uniform 0..2999 added to the growth step
INCREMENT_FLOOR_MS: int = 1000      # constant added to the growth step

# ---------------------------------------------------------------------------
# Client defaults
# ---------------------------------------------------------------------------

DEFAULT_LANGUAGE = "en"
DEFAULT_MAX_RETRY_ATTEMPTS = 3
DEFAULT_RETRY_BASE_COOLDOWN = 3000           # 3 seconds
DEFAULT_COOKIE_EXPIRATION_TIME = 15_768_000  # 4.38 hours

# Environment variable → config field
ENV_OVERRIDES: dict[str, str] = {
    "CLEVERBOT_DEBUG": "debug",
    "CLEVERBOT_LANGUAGE": "default_language",
    "CLEVERBOT_MAX_RETRY_ATTEMPTS": "max_retry_attempts",
    "CLEVERBOT_RETRY_BASE_COOLDOWN": "retry_base_cooldown",
    "CLEVERBOT_COOKIE_EXPIRATION_TIME": "cookie_expiration_time",
}


# ---------------------------------------------------------------------------
# Validated configuration
# ---------------------------------------------------------------------------

def _validate_positive_int(key: str, value: Any) -> int:
    # bool is an int subclass; True must not pass as 1
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise InvalidConfiguration(
            f"Invalid value for '{key}': {value!r}. It must be a positive integer."
        )
    return value


def _validate_debug(key: str, value: Any) -> bool:
    if not isinstance(value, bool):
        raise InvalidConfiguration(
            f"Invalid value for '{key}': {value!r}. It must be a boolean."
        )
    return value


def validate_language(key: str, value: Any) -> str:
    """
    Check that ``value`` is one of :data:`SUPPORTED_LANGUAGES`.

    Args:
        key: Name reported in the error message.
        value: Candidate language code.

    Returns:
        The language code unchanged.

    Raises:
        InvalidConfiguration: Not a string, or not a supported code.
    """
    if not isinstance(value, str) or value not in SUPPORTED_LANGUAGES:
        supported = ", ".join(sorted(SUPPORTED_LANGUAGES))
        raise InvalidConfiguration(
            f"Invalid value for '{key}': {value!r}. "
            f"Supported languages are: {supported}"
        )
    return value


_VALIDATORS = {
    "debug": _validate_debug,
    "default_language": validate_language,
    "max_retry_attempts": _validate_positive_int,
    "retry_base_cooldown": _validate_positive_int,
    "cookie_expiration_time": _validate_positive_int,
}


@dataclass(frozen=True)
class ClientConfig:
    """
    Immutable client settings.

    Durations are in milliseconds.  Instances are never mutated; use
    :meth:`apply` to obtain an updated copy.
    """

    debug: bool = False
    default_language: str = DEFAULT_LANGUAGE
    max_retry_attempts: int = DEFAULT_MAX_RETRY_ATTEMPTS
    retry_base_cooldown: int = DEFAULT_RETRY_BASE_COOLDOWN
    cookie_expiration_time: int = DEFAULT_COOKIE_EXPIRATION_TIME

    def apply(self, updates: Mapping[str, Any]) -> ClientConfig:
        """
        Return a copy with ``updates`` applied, or raise without applying any.

        Every recognized key is validated before anything is replaced, so a
        single bad value rejects the whole update.  Unrecognized keys are
        ignored.

        Args:
            updates: Partial settings keyed by field name.

        Returns:
            New :class:`ClientConfig`.

        Raises:
            InvalidConfiguration: ``updates`` is not a mapping, or a
                recognized key holds an invalid value.
        """
        if not isinstance(updates, Mapping):
            raise InvalidConfiguration(
                f"The configuration must be provided as a mapping, "
                f"got {type(updates).__name__}."
            )

        validated: dict[str, Any] = {}
        for key, value in updates.items():
            validator = _VALIDATORS.get(key)
            if validator is None:
                logger.debug("Ignoring unrecognized configuration key %r", key)
                continue
            validated[key] = validator(key, value)

        return dataclasses.replace(self, **validated)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> ClientConfig:
        """
        Build a config from defaults overridden by ``CLEVERBOT_*`` variables.

        Args:
            environ: Mapping to read instead of ``os.environ``.

        Returns:
            Validated :class:`ClientConfig`.

        Raises:
            InvalidConfiguration: An override does not convert or validate.
        """
        environ = os.environ if environ is None else environ
        overrides: dict[str, Any] = {}
        for env_var, key in ENV_OVERRIDES.items():
            raw = environ.get(env_var)
            if raw is not None:
                overrides[key] = _convert_env_value(raw)
        return cls().apply(overrides)

    def as_dict(self) -> dict[str, Any]:
        return dataclasses.asdict(self)


def _convert_env_value(value: str) -> Any:
    """Convert an environment string to bool or int where it looks like one."""
    if value.lower() in ("true", "false"):
        return value.lower() == "true"
    try:
        return int(value)
    except ValueError:
        return value
