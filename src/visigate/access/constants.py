"""Enumerations shared by the decision core.

Provides:
- ``LoginRequirement``: who a policy admits by authentication state.
- ``Decision``: evaluator output (allow / deny).
- ``EnforcementAction``: what to do on DENY.
- ``MismatchResult``: consistency of two independently authored policies.
- ``VisibilityKind``: closed set of visibility key variants.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from ..exceptions import AmbiguousEnforcementConfig, InvalidPolicy

DEFAULT_MESSAGE = "You do not have permission to view this content."


class LoginRequirement(str, Enum):
    """Authentication state a policy requires."""

    EVERYONE = "everyone"
    LOGGED_IN = "logged_in"
    LOGGED_OUT = "logged_out"

    @classmethod
    def parse(cls, value: Any) -> LoginRequirement:
        """Convert a stored value into a LoginRequirement.

        Accepts enum members, the canonical values, and the ``*_users``
        spellings found in stored page records. Empty or None means EVERYONE.

        Raises:
            InvalidPolicy: for any other value.
        """
        if isinstance(value, cls):
            return value
        if value is None:
            return cls.EVERYONE
        if isinstance(value, str):
            key = value.strip().lower()
            found = _LOGIN_ALIASES.get(key)
            if found is not None:
                return found
        raise InvalidPolicy(
            f"Unrecognized login requirement: {value!r}",
            value=value,
        )


_LOGIN_ALIASES: dict[str, LoginRequirement] = {
    "": LoginRequirement.EVERYONE,
    "everyone": LoginRequirement.EVERYONE,
    "logged_in": LoginRequirement.LOGGED_IN,
    "logged_in_users": LoginRequirement.LOGGED_IN,
    "logged_out": LoginRequirement.LOGGED_OUT,
    "logged_out_users": LoginRequirement.LOGGED_OUT,
}


class Decision(str, Enum):
    """Binary evaluator output."""

    ALLOW = "allow"
    DENY = "deny"

    @property
    def allowed(self) -> bool:
        return self is Decision.ALLOW


class EnforcementAction(str, Enum):
    """Enforcement action kinds.

    ``USE_DEFAULT`` is only valid on a per-resource config; global settings
    always name a concrete action.
    """

    USE_DEFAULT = "default"
    CUSTOM_MESSAGE = "custom_message"
    CUSTOM_URL = "custom_url"

    @classmethod
    def parse(cls, value: Any) -> EnforcementAction:
        """Convert a stored action value. Empty or None means USE_DEFAULT.

        Raises:
            AmbiguousEnforcementConfig: for any other value.
        """
        if isinstance(value, cls):
            return value
        if value is None:
            return cls.USE_DEFAULT
        if isinstance(value, str):
            key = value.strip().lower()
            if key in ("", "default", "use_default"):
                return cls.USE_DEFAULT
            for member in cls:
                if member.value == key:
                    return member
        raise AmbiguousEnforcementConfig(
            f"Unrecognized enforcement action: {value!r}",
            value=value,
        )


class MismatchResult(str, Enum):
    """Outcome of comparing two policies."""

    MATCH = "match"
    MISMATCH = "mismatch"
    NEUTRAL = "neutral"  # Nothing to compare against


class DiscrepancyKind(str, Enum):
    """Dimension on which an entry disagrees with the resource it links to."""

    ROLES = "roles"
    VISIBILITY = "visibility"
    UNRESTRICTED = "unrestricted"  # Linked resource is open, entry is not
    INVALID_SETUP = "invalid_setup"  # EVERYONE combined with roles


class VisibilityKind(str, Enum):
    """Variants of a content-block or navigation visibility key."""

    EVERYONE = "everyone"
    LOGGED_IN = "logged_in"
    LOGGED_OUT = "logged_out"
    ROLES = "roles"  # Explicit role list mode, kept for older content
    ROLE = "role"  # Single role, from ``role_<name>`` keys
    UNKNOWN = "unknown"


__all__ = [
    "DEFAULT_MESSAGE",
    "Decision",
    "DiscrepancyKind",
    "EnforcementAction",
    "LoginRequirement",
    "MismatchResult",
    "VisibilityKind",
]
