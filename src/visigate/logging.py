"""Centralized logging utilities for visigate.

This module provides:
- Logging configuration from VisigateConfig
- Safe preview utilities for logged values (forward URLs, messages)
- Secret redaction
- Request-scoped logging with request_id propagation
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any, Optional
from uuid import UUID

from .config import LogLevel, VisigateConfig

# Patterns for detecting secrets (forward URLs can carry tokens in query strings)
SECRET_PATTERNS = [
    r'(?i)(?:password|passwd|pwd|secret|token|key|api[_-]?key|auth[_-]?token)\s*[:=]\s*["\']?([^"\'\s&]+)',
    r'(?i)(?:bearer|basic)\s+([a-zA-Z0-9+/=]+)',
    r'(?i)(?:sk-|pk-)[a-zA-Z0-9]{32,}',
    r'[a-f0-9]{32,}',  # Long hex strings (session ids, nonces)
]

_RESERVED_ATTRS = frozenset(
    {
        "name", "msg", "args", "created", "filename", "funcName",
        "levelname", "levelno", "lineno", "module", "msecs",
        "message", "pathname", "process", "processName", "relativeCreated",
        "thread", "threadName", "exc_info", "exc_text", "stack_info",
        "taskName", "request_id",
    }
)


def safe_preview(value: Any, limit: int = 240) -> str:
    """Create a safe, length-bounded, single-line preview of a value for logging.

    Args:
        value: The value to preview (any type)
        limit: Maximum length of the preview (default: 240)

    Returns:
        A truncated string representation
    """
    if value is None:
        return ""

    if isinstance(value, str):
        s = value
    elif isinstance(value, (dict, list, tuple, set, frozenset)):
        try:
            s = json.dumps(value if isinstance(value, (dict, list)) else sorted(value, key=str), default=str, ensure_ascii=False)
        except (TypeError, ValueError):
            s = str(value)
    else:
        s = str(value)

    s = " ".join(s.split())

    if len(s) > limit:
        return s[: limit - 1] + "…"

    return s


def redact_secrets(text: str, replacement: str = "[REDACTED]") -> str:
    """Redact secret patterns (tokens, passwords, keys) from text."""
    if not isinstance(text, str):
        return text

    result = text
    for pattern in SECRET_PATTERNS:
        result = re.sub(pattern, replacement, result, flags=re.IGNORECASE | re.DOTALL)

    return result


def safe_log_value(value: Any, limit: int = 240, redact: bool = True) -> str:
    """Preview plus optional redaction. Use this for any caller-supplied value."""
    preview = safe_preview(value, limit=limit)
    if redact:
        preview = redact_secrets(preview)
    return preview


class DecisionLogFormatter(logging.Formatter):
    """Formatter with request_id support and optional JSON output.

    Extra fields attached to a record are previewed and redacted before
    being written out.
    """

    def __init__(
        self,
        include_request_id: bool = True,
        json_format: bool = True,
        redact_secrets: bool = True,
        *args: Any,
        **kwargs: Any,
    ):
        super().__init__(*args, **kwargs)
        self.include_request_id = include_request_id
        self.json_format = json_format
        self.redact_secrets = redact_secrets

    def format(self, record: logging.LogRecord) -> str:
        request_id = getattr(record, "request_id", None)

        log_data: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if self.include_request_id and request_id:
            log_data["request_id"] = str(request_id) if isinstance(request_id, UUID) else request_id

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS:
                log_data[key] = safe_log_value(value, redact=self.redact_secrets)

        if self.redact_secrets:
            log_data["message"] = redact_secrets(log_data["message"])

        if self.json_format:
            return json.dumps(log_data, default=str, ensure_ascii=False)

        parts = [
            f"[{log_data['timestamp']}]",
            f"{log_data['level']}",
            f"{log_data['logger']}",
        ]
        if self.include_request_id and request_id:
            parts.append(f"request_id={log_data['request_id']}")
        parts.append(f": {log_data['message']}")
        return " ".join(parts)


class RequestLoggerAdapter(logging.LoggerAdapter):
    """Logger adapter that stamps a request_id on every record.

    Usage:
        logger = get_request_logger(__name__, request_id=req.id)
        logger.info("Denied %s", path)
    """

    def __init__(self, logger: logging.Logger, request_id: Optional[UUID | str] = None):
        super().__init__(logger, {})
        self.request_id = request_id

    def process(self, msg: str, kwargs: dict[str, Any]) -> tuple[str, dict[str, Any]]:
        request_id = kwargs.pop("request_id", self.request_id)

        extra = dict(kwargs.get("extra") or {})
        if request_id:
            extra["request_id"] = request_id
        kwargs["extra"] = extra

        return msg, kwargs


def setup_logging(
    config: Optional[VisigateConfig] = None,
    json_format: Optional[bool] = None,
    redact_secrets: bool = True,
) -> None:
    """Configure root logging for a service embedding visigate.

    Args:
        config: VisigateConfig instance (if None, loads from environment)
        json_format: Override config.log_json
        redact_secrets: Whether to redact secrets (default: True)
    """
    if config is None:
        from .config import load_config_from_env

        config = load_config_from_env()

    level_map = {
        LogLevel.DEBUG: logging.DEBUG,
        LogLevel.INFO: logging.INFO,
        LogLevel.WARNING: logging.WARNING,
        LogLevel.ERROR: logging.ERROR,
        LogLevel.CRITICAL: logging.CRITICAL,
    }
    log_level = level_map.get(config.log_level, logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(log_level)
    console_handler.setFormatter(
        DecisionLogFormatter(
            include_request_id=True,
            json_format=config.log_json if json_format is None else json_format,
            redact_secrets=redact_secrets,
        )
    )
    root_logger.addHandler(console_handler)

    if config.service_name:
        logging.getLogger(config.service_name).setLevel(log_level)


def get_request_logger(name: str, request_id: Optional[UUID | str] = None) -> RequestLoggerAdapter:
    """Get a logger adapter bound to a request id.

    Example:
        logger = get_request_logger(__name__, request_id="req-42")
        logger.info("Redirect loop detected")
    """
    return RequestLoggerAdapter(logging.getLogger(name), request_id=request_id)


__all__ = [
    "safe_preview",
    "redact_secrets",
    "safe_log_value",
    "DecisionLogFormatter",
    "RequestLoggerAdapter",
    "setup_logging",
    "get_request_logger",
]
