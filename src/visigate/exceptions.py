"""Exception hierarchy for visigate.

Every error the decision core raises inherits from VisigateError and carries
a stable ``code`` that :mod:`visigate.rpc` maps onto a gRPC status.

- InvalidPolicy: a stored login requirement is not recognized
- AmbiguousEnforcementConfig: an enforcement action cannot be resolved
- ConfigurationError: environment values rejected at load time

``evaluate`` and ``compare`` never raise; malformed input is rejected when
the value objects are built.
"""

from __future__ import annotations

from typing import Any

__all__ = [
    "VisigateError",
    "ConfigurationError",
    "InvalidPolicy",
    "AmbiguousEnforcementConfig",
]


class VisigateError(Exception):
    """Base exception for the visibility decision engine.

    Attributes:
        code: Stable error code string (e.g. "INVALID_POLICY").
        message: Human-readable error description.
        details: The offending values, as keyword arguments.
    """

    code: str = "INTERNAL_ERROR"
    message: str = "An internal error occurred"

    def __init__(self, message: str | None = None, code: str | None = None, **kwargs: Any) -> None:
        self.message = message or self.message
        self.code = code or self.code
        self.details = kwargs
        super().__init__(self.message)


class ConfigurationError(VisigateError):
    """Environment configuration that the settings models reject."""

    code: str = "CONFIGURATION_ERROR"
    message: str = "Invalid configuration"


class InvalidPolicy(VisigateError):
    """A restriction policy carries an unrecognized login requirement."""

    code: str = "INVALID_POLICY"
    message: str = "Unrecognized login requirement"


class AmbiguousEnforcementConfig(VisigateError):
    """Enforcement configuration cannot be resolved to a concrete action."""

    code: str = "AMBIGUOUS_ENFORCEMENT"
    message: str = "Enforcement configuration cannot be resolved"
