"""Value types for the decision core.

Policy, Identity and EnforcementConfig are built by the caller once per
request from whatever store it owns. All of them are frozen: the core never
mutates its inputs.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable

from .constants import EnforcementAction, LoginRequirement, VisibilityKind

ROLE_KEY_PREFIX = "role_"


def normalize_roles(raw: Iterable[Any] | str | None) -> frozenset[str]:
    """Normalize a raw role collection into a set of role identifiers.

    Accepts any iterable of strings or a single comma-separated string.
    Whitespace is trimmed and empty entries dropped. Case is preserved;
    comparisons lower-case at evaluation time.

    Example::

        normalize_roles([" editor", "", "Author "])  # frozenset({"editor", "Author"})
        normalize_roles("editor, subscriber")        # frozenset({"editor", "subscriber"})
    """
    if raw is None:
        return frozenset()
    if isinstance(raw, str):
        raw = raw.split(",")
    return frozenset(str(role).strip() for role in raw if role is not None and str(role).strip())


def fold_roles(roles: Iterable[str]) -> frozenset[str]:
    """Lower-case a role set for comparison."""
    return frozenset(role.lower() for role in roles)


@dataclass(frozen=True)
class Policy:
    """Restriction rule attached to a page, menu item, block or navigation post.

    Attributes:
        login_requirement: Authentication state the resource requires.
        allowed_roles: Roles admitted. Empty means no role restriction,
            not "deny all".

    Raw values are accepted and validated on construction::

        Policy("logged_in_users", ["editor", " author "])
        # Policy(login_requirement=LOGGED_IN, allowed_roles=frozenset({"editor", "author"}))

    Raises:
        InvalidPolicy: if ``login_requirement`` is not recognized.
    """

    login_requirement: LoginRequirement = LoginRequirement.EVERYONE
    allowed_roles: frozenset[str] = frozenset()

    def __post_init__(self) -> None:
        object.__setattr__(self, "login_requirement", LoginRequirement.parse(self.login_requirement))
        object.__setattr__(self, "allowed_roles", normalize_roles(self.allowed_roles))

    @classmethod
    def from_raw(cls, login_requirement: Any = None, allowed_roles: Any = None) -> Policy:
        """Build a policy from stored values (None for either means unset)."""
        return cls(login_requirement=login_requirement, allowed_roles=allowed_roles)

    @property
    def is_open(self) -> bool:
        """True when the policy restricts nothing."""
        return self.login_requirement is LoginRequirement.EVERYONE and not self.allowed_roles


OPEN_POLICY = Policy()


@dataclass(frozen=True)
class Identity:
    """Resolved authentication and role state of the current requester.

    ``roles`` is taken as supplied; callers resolving an anonymous visitor
    should pass no roles (see :meth:`anonymous`).
    """

    is_authenticated: bool = False
    roles: frozenset[str] = frozenset()
    has_admin_override_capability: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "roles", normalize_roles(self.roles))

    @classmethod
    def anonymous(cls) -> Identity:
        return cls()

    @classmethod
    def authenticated(cls, roles: Iterable[str] | str | None = None, *, admin: bool = False) -> Identity:
        return cls(is_authenticated=True, roles=normalize_roles(roles), has_admin_override_capability=admin)


@dataclass(frozen=True)
class EnforcementConfig:
    """Per-resource enforcement overrides.

    Attributes:
        action: ``USE_DEFAULT`` (or unset) discards the custom fields below.
        custom_message: Message shown for ``CUSTOM_MESSAGE``.
        custom_forward_url: Redirect target for ``CUSTOM_URL``.

    Raises:
        AmbiguousEnforcementConfig: if ``action`` is not recognized.
    """

    action: EnforcementAction = EnforcementAction.USE_DEFAULT
    custom_message: str | None = None
    custom_forward_url: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "action", EnforcementAction.parse(self.action))

    @classmethod
    def from_raw(
        cls,
        action: Any = None,
        custom_message: str | None = None,
        custom_forward_url: str | None = None,
    ) -> EnforcementConfig:
        return cls(action=action, custom_message=custom_message, custom_forward_url=custom_forward_url)


@dataclass(frozen=True)
class ResolvedAction:
    """Concrete enforcement action for a DENY decision.

    Attributes:
        kind: ``CUSTOM_MESSAGE`` or ``CUSTOM_URL``.
        message: Text to display (message kind only).
        url: Redirect target (URL kind only).
        use_login_fallback: Redirect selected but no URL is configured;
            the caller should send the requester to its login page.
    """

    kind: EnforcementAction
    message: str = ""
    url: str = ""
    use_login_fallback: bool = False

    @property
    def is_redirect(self) -> bool:
        return self.kind is EnforcementAction.CUSTOM_URL


@dataclass(frozen=True)
class VisibilityKey:
    """Parsed content-block / navigation visibility key.

    Legacy string keys are converted once at the boundary::

        VisibilityKey.parse("role_editor")  # VisibilityKey(kind=ROLE, role="editor")
        VisibilityKey.parse("")             # VisibilityKey(kind=EVERYONE)
        VisibilityKey.parse("bogus")        # VisibilityKey(kind=UNKNOWN)
    """

    kind: VisibilityKind
    role: str | None = None

    @classmethod
    def parse(cls, key: str | None) -> VisibilityKey:
        if key is None:
            return cls(VisibilityKind.EVERYONE)
        text = key
        if text in ("", "everyone"):
            return cls(VisibilityKind.EVERYONE)
        if text == "logged_in":
            return cls(VisibilityKind.LOGGED_IN)
        if text == "logged_out":
            return cls(VisibilityKind.LOGGED_OUT)
        if text == "roles":
            return cls(VisibilityKind.ROLES)
        if text.startswith(ROLE_KEY_PREFIX):
            role = text[len(ROLE_KEY_PREFIX) :].strip().lower()
            if role:
                return cls(VisibilityKind.ROLE, role)
        return cls(VisibilityKind.UNKNOWN)


__all__ = [
    "OPEN_POLICY",
    "EnforcementConfig",
    "Identity",
    "Policy",
    "ResolvedAction",
    "VisibilityKey",
    "fold_roles",
    "normalize_roles",
]
