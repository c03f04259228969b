"""Tests for EngineConfig."""

import pytest

from chuk_oauth2_engine.config import EngineConfig


class TestEngineConfig:
    """Test configuration loading."""

    def test_defaults(self):
        config = EngineConfig()
        assert config.log_http is False
        assert config.timeout == 30.0
        assert config.client_options == {}

    def test_from_env(self):
        config = EngineConfig.from_env(
            {"CHUK_OAUTH2_LOG_HTTP": "true", "CHUK_OAUTH2_TIMEOUT": "5"}
        )
        assert config.log_http is True
        assert config.timeout == 5.0

    @pytest.mark.parametrize("value", ["0", "false", "no", ""])
    def test_from_env_false_values(self, value):
        assert EngineConfig.from_env({"CHUK_OAUTH2_LOG_HTTP": value}).log_http is False

    def test_from_env_empty(self):
        assert EngineConfig.from_env({}) == EngineConfig()

    def test_from_os_environ(self, monkeypatch):
        monkeypatch.setenv("CHUK_OAUTH2_LOG_HTTP", "1")
        assert EngineConfig.from_env().log_http is True

    def test_httpx_client_kwargs(self):
        """Test client options pass through and override the timeout."""
        config = EngineConfig(
            timeout=10.0, client_options={"verify": False, "timeout": 2.0}
        )
        assert config.httpx_client_kwargs() == {"timeout": 2.0, "verify": False}
