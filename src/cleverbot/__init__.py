"""
src/cleverbot - unofficial client for the Cleverbot website endpoint.

Module layout
-------------
config.py     - endpoints, browser headers, timeouts, defaults, ClientConfig
languages.py  - supported ``cb_config_language`` codes
errors.py     - exception hierarchy
session.py    - session state, request counters, cookie bootstrap
executor.py   - payload/cookie/URL construction, single exchange
parser.py     - reply body parsing
retry.py      - failure classification, jittered backoff, retry loop
client.py     - CleverbotClient handle and create_client factory
cli.py        - interactive terminal chat

Public interface
----------------
Create a client and talk:
    client = create_client(default_language="en")
    reply = client.interact("Hello", history=[])

Start over, inspect state:
    client.new_session()
    client.get_diagnostics()
"""

from .client import CleverbotClient, __version__, create_client
from .config import ClientConfig
from .errors import (
    Banned,
    CleverbotError,
    CookieFetchFailed,
    ExhaustedRetries,
    InvalidConfiguration,
    MalformedResponse,
    RemoteCallFailed,
)
from .languages import SUPPORTED_LANGUAGES

__all__ = [
    # Client
    "CleverbotClient",
    "ClientConfig",
    "create_client",
    "SUPPORTED_LANGUAGES",
    "__version__",
    # Errors
    "CleverbotError",
    "InvalidConfiguration",
    "Banned",
    "CookieFetchFailed",
    "RemoteCallFailed",
    "MalformedResponse",
    "ExhaustedRetries",
]
