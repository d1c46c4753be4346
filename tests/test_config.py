"""
Tests for configuration resolution.
"""

import logging

from ayeaye import ApiConfig
from ayeaye.config import ENV_ALLOWED_METHODS, ENV_DEFAULT_FORMAT


class TestApiConfig:
    """Test argument, environment and default resolution."""

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv(ENV_DEFAULT_FORMAT, raising=False)
        monkeypatch.delenv(ENV_ALLOWED_METHODS, raising=False)

        config = ApiConfig.from_env()

        assert config.default_format == "json"
        assert config.allowed_methods == (
            "GET", "HEAD", "POST", "PUT", "DELETE", "TRACE", "OPTIONS", "CONNECT", "PATCH",
        )

    def test_environment(self, monkeypatch):
        monkeypatch.setenv(ENV_DEFAULT_FORMAT, "XML")
        monkeypatch.setenv(ENV_ALLOWED_METHODS, "get, put")

        config = ApiConfig.from_env()

        assert config.default_format == "xml"
        assert config.allowed_methods == ("GET", "PUT")

    def test_arguments_win_over_environment(self, monkeypatch):
        monkeypatch.setenv(ENV_DEFAULT_FORMAT, "xml")
        monkeypatch.setenv(ENV_ALLOWED_METHODS, "GET")

        config = ApiConfig.from_env(default_format="html", allowed_methods=("POST",))

        assert config.default_format == "html"
        assert config.allowed_methods == ("POST",)

    def test_unknown_methods_are_skipped(self, monkeypatch, caplog):
        monkeypatch.setenv(ENV_ALLOWED_METHODS, "GET,BREW")

        with caplog.at_level(logging.WARNING, logger="ayeaye.config"):
            config = ApiConfig.from_env()

        assert config.allowed_methods == ("GET",)
        assert "BREW" in caplog.text
