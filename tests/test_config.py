"""Tests for GlobalSettings and VisigateConfig."""

from __future__ import annotations

import logging
import os
from unittest.mock import patch

import pytest

from visigate import (
    DEFAULT_MESSAGE,
    EnforcementAction,
    GlobalSettings,
    LogLevel,
    VisigateConfig,
    load_config_from_env,
)
from visigate.config import sanitize_forward_url


class TestGlobalSettings:
    """Tests for GlobalSettings model."""

    def test_defaults(self) -> None:
        settings = GlobalSettings()
        assert settings.admin_override_enabled is True
        assert settings.default_enforcement_action is EnforcementAction.CUSTOM_MESSAGE
        assert settings.default_message == DEFAULT_MESSAGE
        assert settings.default_forward_url == ""

    def test_action_from_string(self) -> None:
        settings = GlobalSettings(default_enforcement_action="custom_url")
        assert settings.default_enforcement_action is EnforcementAction.CUSTOM_URL

    @pytest.mark.parametrize("raw", ["teleport", "default", "", None])
    def test_invalid_action_falls_back_to_message(self, raw) -> None:
        settings = GlobalSettings(default_enforcement_action=raw)
        assert settings.default_enforcement_action is EnforcementAction.CUSTOM_MESSAGE

    def test_forward_url_is_sanitized(self) -> None:
        assert GlobalSettings(default_forward_url="  /members/login ").default_forward_url == "/members/login"
        assert GlobalSettings(default_forward_url="javascript:alert(1)").default_forward_url == ""

    def test_frozen(self) -> None:
        settings = GlobalSettings()
        with pytest.raises(Exception):  # Pydantic validation error
            settings.admin_override_enabled = False  # type: ignore[misc]


class TestSanitizeForwardUrl:
    """Tests for sanitize_forward_url()."""

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("", ""),
            (None, ""),
            ("/", "/"),
            ("/members/login", "/members/login"),
            (" https://example.com/join ", "https://example.com/join"),
            ("http://example.com", "http://example.com"),
            ("/path with spaces", ""),
            ("ftp://example.com/file", ""),
            ("example.com/join", ""),
            ("https://", ""),
        ],
    )
    def test_values(self, raw, expected: str) -> None:
        assert sanitize_forward_url(raw) == expected

    def test_rejected_url_is_redacted_in_logs(self, caplog) -> None:
        with caplog.at_level(logging.WARNING, logger="visigate.config"):
            assert sanitize_forward_url("ftp://example.com/file?token=abc123") == ""
        assert "Discarding invalid forward URL" in caplog.text
        assert "abc123" not in caplog.text


class TestVisigateConfig:
    """Tests for VisigateConfig model."""

    def test_create_default_config(self) -> None:
        config = VisigateConfig()
        assert config.log_level == LogLevel.INFO
        assert config.log_json is False
        assert config.service_name is None
        assert config.settings == GlobalSettings()

    def test_log_level_from_string(self) -> None:
        config = VisigateConfig(log_level="debug")
        assert config.log_level == LogLevel.DEBUG

    def test_log_level_invalid(self) -> None:
        with pytest.raises(ValueError, match="Invalid log level"):
            VisigateConfig(log_level="LOUD")

    def test_nested_settings(self) -> None:
        config = VisigateConfig(settings={"admin_override_enabled": False})
        assert config.settings.admin_override_enabled is False

    def test_extra_fields_forbidden(self) -> None:
        with pytest.raises(Exception):  # Pydantic validation error
            VisigateConfig(extra_field="value")  # type: ignore[call-arg]


class TestLoadConfigFromEnv:
    """Tests for load_config_from_env function."""

    @patch.dict(os.environ, {}, clear=True)
    def test_load_defaults(self) -> None:
        config = load_config_from_env()
        assert config.log_level == LogLevel.INFO
        assert config.log_json is False
        assert config.settings.admin_override_enabled is True
        assert config.settings.default_enforcement_action is EnforcementAction.CUSTOM_MESSAGE
        assert config.settings.default_message == DEFAULT_MESSAGE

    @patch.dict(
        os.environ,
        {
            "LOG_LEVEL": "WARNING",
            "LOG_JSON": "yes",
            "SERVICE_NAME": "gatekeeper",
            "VISIGATE_ALWAYS_ALLOW_ADMINS": "0",
            "VISIGATE_DEFAULT_ACTION": "custom_url",
            "VISIGATE_DEFAULT_MESSAGE": "Please sign in.",
            "VISIGATE_DEFAULT_FORWARD_URL": "/login",
        },
        clear=True,
    )
    def test_load_from_env(self) -> None:
        config = load_config_from_env()
        assert config.log_level == LogLevel.WARNING
        assert config.log_json is True
        assert config.service_name == "gatekeeper"
        assert config.settings.admin_override_enabled is False
        assert config.settings.default_enforcement_action is EnforcementAction.CUSTOM_URL
        assert config.settings.default_message == "Please sign in."
        assert config.settings.default_forward_url == "/login"

    @patch.dict(os.environ, {"VISIGATE_DEFAULT_FORWARD_URL": "not a url"}, clear=True)
    def test_invalid_forward_url_from_env(self) -> None:
        assert load_config_from_env().settings.default_forward_url == ""
