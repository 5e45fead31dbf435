"""Recognized role identifiers for role pickers and validation.

The baseline catalog exposes the five standard tiers. An identity provider
can be plugged in to supply display names, and an ``extend`` hook lets the
embedding application substitute a fuller list.
"""

from __future__ import annotations

from typing import Callable, Iterable, Mapping

RoleEntry = tuple[str, str]

CORE_ROLES: tuple[RoleEntry, ...] = (
    ("administrator", "Administrator"),
    ("editor", "Editor"),
    ("author", "Author"),
    ("contributor", "Contributor"),
    ("subscriber", "Subscriber"),
)


class RoleCatalog:
    """Lookup of role ids and display names.

    Args:
        provider: Returns every role known to the identity provider as
            ``{role_id: display_name}``. Only the core tiers the provider
            knows about are exposed. Without a provider, :data:`CORE_ROLES`
            is used as-is.
        extend: Receives the curated list and returns the list to expose.

    Example::

        catalog = RoleCatalog(
            provider=lambda: {"editor": "Editor", "shop_manager": "Shop Manager"},
            extend=lambda roles: [*roles, ("shop_manager", "Shop Manager")],
        )
        catalog.available_roles()  # [("editor", "Editor"), ("shop_manager", "Shop Manager")]
    """

    __slots__ = ("_provider", "_extend")

    def __init__(
        self,
        *,
        provider: Callable[[], Mapping[str, str]] | None = None,
        extend: Callable[[list[RoleEntry]], Iterable[RoleEntry]] | None = None,
    ) -> None:
        self._provider = provider
        self._extend = extend

    def available_roles(self) -> list[RoleEntry]:
        """Ordered ``(role_id, display_name)`` pairs."""
        if self._provider is None:
            roles = list(CORE_ROLES)
        else:
            known = dict(self._provider())
            roles = [(role_id, known[role_id]) for role_id, _ in CORE_ROLES if role_id in known]

        if self._extend is not None:
            roles = [(str(role_id), str(name)) for role_id, name in self._extend(roles)]
        return roles

    def role_ids(self) -> list[str]:
        return [role_id for role_id, _ in self.available_roles()]

    def is_known_role(self, role_id: str) -> bool:
        """Case-insensitive membership test."""
        wanted = role_id.strip().lower()
        return any(known.lower() == wanted for known in self.role_ids())

    def __repr__(self) -> str:
        return f"RoleCatalog(provider={self._provider!r}, extend={self._extend!r})"


# ── Process default ────────────────────────────────────

_catalog: RoleCatalog | None = None


def get_role_catalog() -> RoleCatalog:
    """Get or create the process-wide RoleCatalog."""
    global _catalog
    if _catalog is None:
        _catalog = RoleCatalog()
    return _catalog


def set_role_catalog(catalog: RoleCatalog) -> None:
    """Install a catalog, typically once at start-up."""
    global _catalog
    _catalog = catalog


def reset_role_catalog() -> None:
    """Reset to the baseline catalog (for testing)."""
    global _catalog
    _catalog = None


def available_roles() -> list[RoleEntry]:
    """Roles exposed by the process-wide catalog."""
    return get_role_catalog().available_roles()


__all__ = [
    "CORE_ROLES",
    "RoleCatalog",
    "available_roles",
    "get_role_catalog",
    "reset_role_catalog",
    "set_role_catalog",
]
