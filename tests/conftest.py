"""
Shared pytest fixtures for the Cleverbot client tests.

No test touches the network: ``requests.get`` / ``requests.post`` are patched
per test and ``time.sleep`` is patched for every test so retry backoff
returns immediately.
"""

from __future__ import annotations

import random
from unittest.mock import patch

import pytest
import requests
from requests.cookies import RequestsCookieJar

from cleverbot.client import CleverbotClient
from cleverbot.config import ClientConfig


# 2023-11-14T22:13:20Z
NOW_SECONDS = 1_700_000_000.0
NOW_MS = 1_700_000_000_000

# A well-formed reply: text, session id, auth token suffix
REPLY_BODY = "Hello there!\rWXYZ1234\rabcdef"
SECOND_REPLY_BODY = "I am fine.\rWXYZ5678\rghijkl"


def make_response(
    status: int = 200,
    text: str = "",
    cookies: dict[str, str] | None = None,
) -> requests.Response:
    """Build a real ``requests.Response`` without touching the network."""
    response = requests.Response()
    response.status_code = status
    response._content = text.encode("utf-8")
    response.encoding = "utf-8"
    response.url = "https://www.cleverbot.com/"
    jar = RequestsCookieJar()
    for name, value in (cookies or {}).items():
        jar.set(name, value)
    response.cookies = jar
    return response


@pytest.fixture(autouse=True)
def no_sleep():
    """Replace the backoff sleep with a recording mock."""
    with patch("cleverbot.retry.time.sleep") as mock_sleep:
        yield mock_sleep


@pytest.fixture
def response_factory():
    return make_response


@pytest.fixture
def cookie_response():
    """Successful cookie bootstrap response carrying one cookie."""
    return make_response(200, "", cookies={"XVIS": "TE1939AFFIAGAYQCZTA"})


@pytest.fixture
def client():
    """Client with default config, seeded jitter, and a frozen clock."""
    return CleverbotClient(
        config=ClientConfig(),
        rng=random.Random(7),
        clock=lambda: NOW_SECONDS,
    )
