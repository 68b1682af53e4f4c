"""Tests for configuration loading."""

import json

import pytest

from parlaid.config import (
    DEFAULT_AUTH_FILE,
    DEFAULT_BASE_URL,
    Config,
    get_config,
    load_credentials,
    set_config,
)
from parlaid.exceptions import EXIT_CONFIGURATION, ConfigurationError


class TestLoadCredentials:
    """Tests for load_credentials."""

    def test_reads_tokens(self, tmp_path):
        path = tmp_path / "auth.json"
        path.write_text(json.dumps({"mst": "mst=one", "jst": "jst=two"}))

        credentials = load_credentials(path)

        assert credentials.mst == "one"
        assert credentials.jst == "two"

    def test_secondary_token_is_optional(self, tmp_path):
        path = tmp_path / "auth.json"
        path.write_text(json.dumps({"mst": "one"}))
        assert load_credentials(path).jst == ""

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError, match="Unable to read authorization data") as exc_info:
            load_credentials(tmp_path / "missing.json")
        assert exc_info.value.exit_code == EXIT_CONFIGURATION == 2

    @pytest.mark.parametrize("content", ["{not json", "[1, 2]", '{"jst": "only"}', '"text"'])
    def test_invalid_documents(self, tmp_path, content):
        path = tmp_path / "auth.json"
        path.write_text(content)
        with pytest.raises(ConfigurationError):
            load_credentials(path)

    def test_null_token(self, tmp_path):
        path = tmp_path / "auth.json"
        path.write_text('{"mst": null}')
        with pytest.raises(ConfigurationError, match="Invalid authorization data"):
            load_credentials(path)


class TestConfig:
    """Tests for Config."""

    def test_defaults(self):
        config = Config()
        assert config.base_url == DEFAULT_BASE_URL
        assert config.auth_file == DEFAULT_AUTH_FILE
        assert config.page_size == 20
        assert config.rate_limiting_enabled is True

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("PARLAID_BASE_URL", "https://api.example.test/")
        monkeypatch.setenv("PARLAID_AUTH_FILE", "/tmp/auth.json")
        monkeypatch.setenv("PARLAID_RATE_LIMITING", "off")

        config = Config.from_env()

        assert config.base_url == "https://api.example.test/"
        assert config.auth_file == "/tmp/auth.json"
        assert config.rate_limiting_enabled is False

    def test_rate_limiting_flag_truthy(self, monkeypatch):
        monkeypatch.setenv("PARLAID_RATE_LIMITING", "1")
        assert Config.from_env().rate_limiting_enabled is True

    def test_global_config(self):
        config = Config(base_url="https://one.test/")
        set_config(config)
        assert get_config() is config
