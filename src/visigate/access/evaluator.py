"""Visibility evaluation: policy + identity + settings -> ALLOW / DENY.

Every function here is pure. Inputs are read once per call and never
mutated or cached, so callers may evaluate concurrently from any number of
requests without coordination.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Callable, Iterable, TypeVar

from .constants import Decision, LoginRequirement, VisibilityKind
from .models import Identity, Policy, VisibilityKey, fold_roles, normalize_roles

if TYPE_CHECKING:
    from ..config import GlobalSettings

logger = logging.getLogger(__name__)

T = TypeVar("T")


def admin_bypass(identity: Identity, settings: GlobalSettings) -> bool:
    """True when the admin override applies to this requester."""
    return settings.admin_override_enabled and identity.has_admin_override_capability


def evaluate(policy: Policy, identity: Identity, settings: GlobalSettings) -> Decision:
    """Decide whether ``identity`` may see a resource guarded by ``policy``.

    Precedence, in order:
    1. Admin override (setting enabled and requester holds the capability) → ALLOW.
    2. Role and identity sets are lower-cased for comparison.
    3. Non-empty ``allowed_roles``: ALLOW iff the requester holds one of them.
       A role match short-circuits; the login requirement is not re-checked.
    4. No roles: LOGGED_IN denies anonymous requesters, LOGGED_OUT denies
       authenticated ones, everything else is allowed.

    A policy of EVERYONE with roles still goes through step 3.

    Example::

        evaluate(Policy("logged_out", {"editor"}), Identity.authenticated({"Editor"}), settings)
        # Decision.ALLOW (role match wins over LOGGED_OUT)
    """
    if admin_bypass(identity, settings):
        logger.debug("Admin override applied")
        return Decision.ALLOW

    if policy.allowed_roles:
        allowed = fold_roles(policy.allowed_roles)
        held = fold_roles(identity.roles)
        if not held or not (allowed & held):
            return Decision.DENY
        return Decision.ALLOW

    requirement = policy.login_requirement
    if requirement is LoginRequirement.LOGGED_IN and not identity.is_authenticated:
        return Decision.DENY
    if requirement is LoginRequirement.LOGGED_OUT and identity.is_authenticated:
        return Decision.DENY
    return Decision.ALLOW


def is_allowed(policy: Policy, identity: Identity, settings: GlobalSettings) -> bool:
    """Boolean form of :func:`evaluate`."""
    return evaluate(policy, identity, settings) is Decision.ALLOW


def evaluate_by_key(
    visibility_key: str | VisibilityKey | None,
    roles: Iterable[str] | str | None,
    identity: Identity,
    settings: GlobalSettings,
) -> Decision:
    """Evaluate a content-block or navigation visibility key.

    ``roles`` is normalized like :attr:`Policy.allowed_roles`, so a
    comma-separated string is accepted. Keys must match exactly.

    Keys:
    - ``""`` / ``everyone`` → ALLOW.
    - ``logged_in`` → authenticated requesters; narrowed to ``roles`` when given.
    - ``logged_out`` → anonymous requesters only.
    - ``roles`` → authenticated requesters holding one of ``roles``
      (an empty list admits nobody).
    - ``role_<name>`` → authenticated requesters holding that role.
    - anything else → DENY.

    The admin override applies first, as in :func:`evaluate`.
    """
    if admin_bypass(identity, settings):
        logger.debug("Admin override applied")
        return Decision.ALLOW

    key = visibility_key if isinstance(visibility_key, VisibilityKey) else VisibilityKey.parse(visibility_key)
    wanted = fold_roles(normalize_roles(roles))
    held = fold_roles(identity.roles) if identity.is_authenticated else frozenset()

    kind = key.kind
    if kind is VisibilityKind.EVERYONE:
        return Decision.ALLOW

    if kind is VisibilityKind.LOGGED_IN:
        if not identity.is_authenticated:
            return Decision.DENY
        if not wanted:
            return Decision.ALLOW
        return Decision.ALLOW if wanted & held else Decision.DENY

    if kind is VisibilityKind.LOGGED_OUT:
        return Decision.DENY if identity.is_authenticated else Decision.ALLOW

    if kind is VisibilityKind.ROLES:
        if not identity.is_authenticated or not wanted:
            return Decision.DENY
        return Decision.ALLOW if wanted & held else Decision.DENY

    if kind is VisibilityKind.ROLE:
        if not identity.is_authenticated:
            return Decision.DENY
        return Decision.ALLOW if key.role in held else Decision.DENY

    logger.warning("Unknown visibility key %r, denying", visibility_key)
    return Decision.DENY


def evaluate_menu_item(
    item_policy: Policy,
    linked_policy: Policy | None,
    identity: Identity,
    settings: GlobalSettings,
) -> Decision:
    """Decide whether a navigation entry should be shown.

    The entry's own policy is checked first. Only when the entry itself is
    open does the policy of the resource it links to take over, so an open
    link to a restricted page is hidden from requesters who could not open it.
    """
    if admin_bypass(identity, settings):
        return Decision.ALLOW

    if evaluate(item_policy, identity, settings) is Decision.DENY:
        return Decision.DENY

    if linked_policy is not None and item_policy.is_open:
        return evaluate(linked_policy, identity, settings)

    return Decision.ALLOW


def filter_visible(
    entries: Iterable[T],
    policy_of: Callable[[T], Policy | None],
    identity: Identity,
    settings: GlobalSettings,
) -> list[T]:
    """Keep the entries ``identity`` may see, in their original order.

    ``policy_of`` returns the policy for an entry, or None for unrestricted
    entries.

    Example::

        visible = filter_visible(pages, lambda page: policies.get(page.id), identity, settings)
    """
    if admin_bypass(identity, settings):
        return list(entries)

    visible: list[T] = []
    for entry in entries:
        policy = policy_of(entry)
        if policy is None or evaluate(policy, identity, settings) is Decision.ALLOW:
            visible.append(entry)
    return visible


__all__ = [
    "admin_bypass",
    "evaluate",
    "evaluate_by_key",
    "evaluate_menu_item",
    "filter_visible",
    "is_allowed",
]
