"""Consistency checks between independently authored policies.

Used by authoring tools to flag, for example, a menu entry whose policy
disagrees with the page it links to.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

from .constants import DiscrepancyKind, LoginRequirement, MismatchResult
from .models import Policy


@dataclass(frozen=True)
class Discrepancy:
    """One reason an entry's policy disagrees with its linked resource.

    Attributes:
        kind: Dimension that disagrees.
        message: Warning text suitable for an authoring UI.
        extra_roles: Roles the entry allows that the linked resource does not.
        missing_roles: Roles the linked resource allows that the entry does not.
        required: Login requirement of the linked resource (VISIBILITY only).
    """

    kind: DiscrepancyKind
    message: str
    extra_roles: frozenset[str] = field(default_factory=frozenset)
    missing_roles: frozenset[str] = field(default_factory=frozenset)
    required: LoginRequirement | None = None


def is_contradictory(policy: Policy) -> bool:
    """EVERYONE combined with a role list is an invalid setup."""
    return policy.login_requirement is LoginRequirement.EVERYONE and bool(policy.allowed_roles)


def compare_unlinked(policy: Policy) -> MismatchResult:
    """Classify a policy that has nothing to be compared against (custom links)."""
    if is_contradictory(policy):
        return MismatchResult.MISMATCH
    return MismatchResult.NEUTRAL


def compare(policy_a: Policy, policy_b: Policy | None) -> MismatchResult:
    """Compare two policies.

    - both open → MATCH
    - exactly one open → MISMATCH
    - both restricted → MATCH iff login requirements and role sets are equal

    Role sets are compared as stored: order does not matter, case does.
    Passing ``None`` for ``policy_b`` defers to :func:`compare_unlinked`.
    The result is symmetric in its two arguments.
    """
    if policy_b is None:
        return compare_unlinked(policy_a)

    a_open = policy_a.is_open
    b_open = policy_b.is_open
    if a_open and b_open:
        return MismatchResult.MATCH
    if a_open != b_open:
        return MismatchResult.MISMATCH

    if policy_a.login_requirement is not policy_b.login_requirement:
        return MismatchResult.MISMATCH
    if policy_a.allowed_roles != policy_b.allowed_roles:
        return MismatchResult.MISMATCH
    return MismatchResult.MATCH


def _role_list(roles: frozenset[str]) -> str:
    return ", ".join(role[:1].upper() + role[1:] for role in sorted(roles))


def explain(entry: Policy, linked: Policy | None) -> list[Discrepancy]:
    """List the ways ``entry`` disagrees with the ``linked`` resource policy.

    Unlike :func:`compare` this is directional: ``entry`` is the policy being
    authored (a menu item), ``linked`` the one it should agree with (the page).
    An empty list means there is nothing to warn about.

    A contradictory entry is always reported as INVALID_SETUP, even when the
    linked resource carries the same contradiction.
    """
    found: list[Discrepancy] = []
    if is_contradictory(entry):
        found.append(
            Discrepancy(
                DiscrepancyKind.INVALID_SETUP,
                'Invalid setup: "Everyone" cannot have role restrictions selected.',
            )
        )
    if linked is None or (entry.is_open and linked.is_open):
        return found

    if linked.is_open:
        found.append(
            Discrepancy(
                DiscrepancyKind.UNRESTRICTED,
                'Linked resource has no restrictions. Entry should be set to "Everyone" with no roles.',
            )
        )
        return found

    extra = entry.allowed_roles - linked.allowed_roles
    missing = linked.allowed_roles - entry.allowed_roles
    if extra or missing:
        if not linked.allowed_roles:
            message = "Role mismatch. Linked resource has no role restrictions."
        elif not entry.allowed_roles:
            message = (
                "Role mismatch. Entry has no role restrictions. "
                f"Linked resource allows only: {_role_list(linked.allowed_roles)}"
            )
        else:
            message = f"Role mismatch. Linked resource allows only: {_role_list(linked.allowed_roles)}"
        found.append(Discrepancy(DiscrepancyKind.ROLES, message, extra_roles=extra, missing_roles=missing))

    required = linked.login_requirement
    if entry.login_requirement is not required:
        label = required.value.replace("_", " ").capitalize()
        found.append(
            Discrepancy(
                DiscrepancyKind.VISIBILITY,
                f"Visibility mismatch. Linked resource requires: {label}",
                required=required,
            )
        )
    return found


def count_mismatches(pairs: Iterable[tuple[Policy, Policy | None]]) -> int:
    """Count MISMATCH results over ``(item_policy, linked_policy)`` pairs."""
    return sum(1 for item, linked in pairs if compare(item, linked) is MismatchResult.MISMATCH)


__all__ = [
    "Discrepancy",
    "compare",
    "compare_unlinked",
    "count_mismatches",
    "explain",
    "is_contradictory",
]
