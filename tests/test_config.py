"""
Unit tests for ClientConfig validation (src/cleverbot/config.py).
"""

from __future__ import annotations

import pytest

from cleverbot.config import ClientConfig
from cleverbot.errors import InvalidConfiguration


class TestApply:

    def test_defaults(self):
        config = ClientConfig()

        assert config.debug is False
        assert config.default_language == "en"
        assert config.max_retry_attempts == 3
        assert config.retry_base_cooldown == 3000
        assert config.cookie_expiration_time == 15_768_000

    def test_valid_update(self):
        config = ClientConfig().apply({
            "debug": True,
            "default_language": "fr",
            "max_retry_attempts": 5,
            "retry_base_cooldown": 500,
            "cookie_expiration_time": 60_000,
        })

        assert config == ClientConfig(True, "fr", 5, 500, 60_000)

    def test_apply_returns_copy(self):
        base = ClientConfig()
        base.apply({"max_retry_attempts": 9})

        assert base.max_retry_attempts == 3

    def test_negative_retry_attempts_rejected_atomically(self):
        base = ClientConfig()

        with pytest.raises(InvalidConfiguration, match="max_retry_attempts"):
            base.apply({"debug": True, "max_retry_attempts": -1})

        assert base == ClientConfig()

    def test_unknown_language_rejected_atomically(self):
        with pytest.raises(InvalidConfiguration, match="Supported languages"):
            ClientConfig().apply({
                "retry_base_cooldown": 10,
                "default_language": "xx-not-real",
            })

    @pytest.mark.parametrize("key, value", [
        ("debug", "yes"),
        ("debug", 1),
        ("max_retry_attempts", 0),
        ("max_retry_attempts", True),
        ("max_retry_attempts", 2.5),
        ("retry_base_cooldown", "3000"),
        ("cookie_expiration_time", -5),
        ("default_language", 42),
    ])
    def test_invalid_values(self, key, value):
        with pytest.raises(InvalidConfiguration, match=key):
            ClientConfig().apply({key: value})

    def test_unknown_keys_ignored(self):
        assert ClientConfig().apply({"colour": "blue"}) == ClientConfig()

    def test_non_mapping_rejected(self):
        with pytest.raises(InvalidConfiguration, match="mapping"):
            ClientConfig().apply(["debug", True])

    def test_invalid_configuration_is_value_error(self):
        with pytest.raises(ValueError):
            ClientConfig().apply({"max_retry_attempts": -1})


class TestFromEnv:

    def test_overrides_are_converted(self):
        config = ClientConfig.from_env({
            "CLEVERBOT_DEBUG": "true",
            "CLEVERBOT_LANGUAGE": "de",
            "CLEVERBOT_MAX_RETRY_ATTEMPTS": "7",
            "CLEVERBOT_RETRY_BASE_COOLDOWN": "250",
            "CLEVERBOT_COOKIE_EXPIRATION_TIME": "1000",
            "UNRELATED": "x",
        })

        assert config == ClientConfig(True, "de", 7, 250, 1000)

    def test_empty_environment_gives_defaults(self):
        assert ClientConfig.from_env({}) == ClientConfig()

    def test_bad_override_raises(self):
        with pytest.raises(InvalidConfiguration):
            ClientConfig.from_env({"CLEVERBOT_MAX_RETRY_ATTEMPTS": "many"})
