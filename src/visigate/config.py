"""Configuration contract for visigate.

This module provides Pydantic-validated configuration models:
- ``GlobalSettings``: the immutable snapshot of site-wide enforcement
  settings passed explicitly to every evaluation.
- ``VisigateConfig``: process settings (logging) plus the settings snapshot.

Direct os.environ/os.getenv usage is limited to load_config_from_env().
The decision core never reads configuration on its own; callers pass the
GlobalSettings snapshot in.
"""

from __future__ import annotations

import logging
import re
from enum import Enum
from typing import Any, Optional
from urllib.parse import urlsplit

from pydantic import BaseModel, Field, ValidationError, field_validator

from .access.constants import DEFAULT_MESSAGE, EnforcementAction
from .exceptions import AmbiguousEnforcementConfig, ConfigurationError

logger = logging.getLogger(__name__)

_RELATIVE_PATH = re.compile(r"^/[a-zA-Z0-9\-._~/]*$")
_TRUTHY = ("true", "1", "yes", "on")


class LogLevel(str, Enum):
    """Standard log levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


def sanitize_forward_url(url: Any) -> str:
    """Trim and validate a forward URL.

    Returns the URL when it is empty, a site-relative path
    (``/members/login``) or an absolute http(s) URL; anything else becomes "".
    """
    text = str(url or "").strip()
    if not text or _RELATIVE_PATH.match(text):
        return text
    parts = urlsplit(text)
    if parts.scheme in ("http", "https") and parts.netloc:
        return text
    from .logging import safe_log_value

    logger.warning("Discarding invalid forward URL %s", safe_log_value(text))
    return ""


class GlobalSettings(BaseModel):
    """Site-wide enforcement settings, read-only to the decision core.

    Environment variables (see load_config_from_env):
        VISIGATE_ALWAYS_ALLOW_ADMINS   admin override switch (default: on)
        VISIGATE_DEFAULT_ACTION        custom_message | custom_url
        VISIGATE_DEFAULT_MESSAGE       message shown on DENY
        VISIGATE_DEFAULT_FORWARD_URL   redirect target on DENY
    """

    model_config = {"frozen": True, "extra": "ignore"}

    admin_override_enabled: bool = Field(
        default=True,
        description="Requesters holding the override capability bypass every policy.",
    )
    default_enforcement_action: EnforcementAction = Field(
        default=EnforcementAction.CUSTOM_MESSAGE,
        description="Action used when a resource has no explicit enforcement config.",
    )
    default_message: str = Field(
        default=DEFAULT_MESSAGE,
        description="Message shown when a resource uses the message action without its own text.",
    )
    default_forward_url: str = Field(
        default="",
        description="Redirect target (absolute or site-relative) for the URL action.",
    )

    @field_validator("default_enforcement_action", mode="before")
    @classmethod
    def validate_default_action(cls, v: Any) -> EnforcementAction:
        """Unknown or "default" values fall back to the message action."""
        try:
            action = EnforcementAction.parse(v)
        except AmbiguousEnforcementConfig:
            logger.warning("Unknown default enforcement action %r, using custom_message", v)
            return EnforcementAction.CUSTOM_MESSAGE
        if action is EnforcementAction.USE_DEFAULT:
            return EnforcementAction.CUSTOM_MESSAGE
        return action

    @field_validator("default_forward_url", mode="before")
    @classmethod
    def validate_forward_url(cls, v: Any) -> str:
        return sanitize_forward_url(v)


class VisigateConfig(BaseModel):
    """Process configuration for services embedding the decision core."""

    # Logging
    log_level: LogLevel = Field(
        default=LogLevel.INFO,
        description="Logging level",
    )
    log_json: bool = Field(
        default=False,
        description="Use JSON log format (default: plain text)",
    )

    # Service identification
    service_name: Optional[str] = Field(
        default=None,
        description="Service name used as the package logger name",
    )

    settings: GlobalSettings = Field(
        default_factory=GlobalSettings,
        description="Enforcement settings snapshot",
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def validate_log_level(cls, v: str | LogLevel) -> LogLevel:
        """Convert string to LogLevel enum."""
        if isinstance(v, LogLevel):
            return v
        if isinstance(v, str):
            try:
                return LogLevel[v.upper()]
            except KeyError:
                raise ValueError(f"Invalid log level: {v}. Must be one of {[e.value for e in LogLevel]}")
        raise ValueError(f"Log level must be string or LogLevel enum, got {type(v)}")

    model_config = {
        "use_enum_values": True,
        "extra": "forbid",
    }


def load_config_from_env() -> VisigateConfig:
    """Load configuration from environment variables.

    This is the ONLY place where os.getenv is allowed.

    Environment variables:
    - LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    - LOG_JSON: Use JSON log format (true/false, default: false)
    - SERVICE_NAME: Service name
    - VISIGATE_ALWAYS_ALLOW_ADMINS: Admin override (true/false, default: true)
    - VISIGATE_DEFAULT_ACTION: custom_message | custom_url
    - VISIGATE_DEFAULT_MESSAGE: Default DENY message
    - VISIGATE_DEFAULT_FORWARD_URL: Default redirect target

    Returns:
        VisigateConfig instance with values from environment or defaults.

    Raises:
        ConfigurationError: a variable holds a value the models reject.
    """
    import os

    try:
        settings = GlobalSettings(
            admin_override_enabled=os.getenv("VISIGATE_ALWAYS_ALLOW_ADMINS", "true").lower() in _TRUTHY,
            default_enforcement_action=os.getenv("VISIGATE_DEFAULT_ACTION", "custom_message"),
            default_message=os.getenv("VISIGATE_DEFAULT_MESSAGE", DEFAULT_MESSAGE),
            default_forward_url=os.getenv("VISIGATE_DEFAULT_FORWARD_URL", ""),
        )
        return VisigateConfig(
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            log_json=os.getenv("LOG_JSON", "false").lower() in _TRUTHY,
            service_name=os.getenv("SERVICE_NAME"),
            settings=settings,
        )
    except ValidationError as e:
        raise ConfigurationError(
            f"Invalid environment configuration: {e}",
            fields=[".".join(str(part) for part in err["loc"]) for err in e.errors()],
        ) from e


__all__ = [
    "GlobalSettings",
    "LogLevel",
    "VisigateConfig",
    "load_config_from_env",
    "sanitize_forward_url",
]
