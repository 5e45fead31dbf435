"""Tests for the role catalog."""

from __future__ import annotations

import pytest

from visigate import (
    CORE_ROLES,
    RoleCatalog,
    available_roles,
    get_role_catalog,
    reset_role_catalog,
    set_role_catalog,
)


@pytest.fixture(autouse=True)
def _reset_catalog():
    reset_role_catalog()
    yield
    reset_role_catalog()


class TestRoleCatalog:
    """RoleCatalog tests."""

    def test_baseline_tiers(self) -> None:
        roles = RoleCatalog().available_roles()
        assert [role_id for role_id, _ in roles] == [
            "administrator",
            "editor",
            "author",
            "contributor",
            "subscriber",
        ]
        assert roles == list(CORE_ROLES)

    def test_provider_is_filtered_to_core_tiers(self) -> None:
        catalog = RoleCatalog(
            provider=lambda: {
                "subscriber": "Reader",
                "shop_manager": "Shop Manager",
                "editor": "Editor",
            }
        )
        assert catalog.available_roles() == [("editor", "Editor"), ("subscriber", "Reader")]

    def test_extend_hook_substitutes_list(self) -> None:
        catalog = RoleCatalog(extend=lambda roles: [*roles, ("shop_manager", "Shop Manager")])
        roles = catalog.available_roles()
        assert roles[-1] == ("shop_manager", "Shop Manager")
        assert len(roles) == len(CORE_ROLES) + 1

    def test_extend_hook_can_replace(self) -> None:
        catalog = RoleCatalog(extend=lambda roles: [("member", "Member")])
        assert catalog.role_ids() == ["member"]

    def test_is_known_role(self) -> None:
        catalog = RoleCatalog()
        assert catalog.is_known_role("editor")
        assert catalog.is_known_role(" Editor ")
        assert not catalog.is_known_role("shop_manager")


class TestProcessCatalog:
    """Module-level catalog management."""

    def test_default_catalog(self) -> None:
        assert available_roles() == list(CORE_ROLES)

    def test_singleton(self) -> None:
        assert get_role_catalog() is get_role_catalog()

    def test_set_and_reset(self) -> None:
        custom = RoleCatalog(extend=lambda roles: roles[:1])
        set_role_catalog(custom)
        assert get_role_catalog() is custom
        assert available_roles() == [("administrator", "Administrator")]

        reset_role_catalog()
        assert available_roles() == list(CORE_ROLES)
