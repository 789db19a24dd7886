"""
Unit tests for src/cleverbot/parser.py.
"""

from __future__ import annotations

import pytest

from cleverbot.errors import MalformedResponse
from cleverbot.parser import derive_auth_token, parse_exchange_response


class TestParseExchangeResponse:

    def test_three_segments(self):
        parsed = parse_exchange_response("Hi!\rABCDEFG\rtoken123")

        assert parsed.reply == "Hi!"
        assert parsed.session_id == "ABCDEFG"
        assert parsed.auth_token == "ABC,token123"

    def test_extra_segments_are_ignored(self):
        parsed = parse_exchange_response("Hi!\rABCDEFG\rtoken123\r42\r\r")

        assert parsed.reply == "Hi!"
        assert parsed.auth_token == "ABC,token123"

    @pytest.mark.parametrize("body", ["just a reply", "reply\rsession"])
    def test_fewer_than_three_segments_raises(self, body):
        with pytest.raises(MalformedResponse) as excinfo:
            parse_exchange_response(body)

        assert excinfo.value.body == body

    def test_newlines_do_not_split(self):
        with pytest.raises(MalformedResponse):
            parse_exchange_response("a\nb\nc")


def test_derive_auth_token_short_session_id():
    assert derive_auth_token("AB", "x") == "AB,x"
