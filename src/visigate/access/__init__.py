"""Visibility decision core.

Defines:
- Policy / Identity / EnforcementConfig: immutable inputs
- evaluate() / evaluate_by_key(): ALLOW / DENY decisions
- select() / is_redirect_loop(): enforcement on DENY
- compare() / explain(): policy mismatch detection for authoring tools
- RoleCatalog: recognized role identifiers
"""

from .constants import (
    DEFAULT_MESSAGE,
    Decision,
    DiscrepancyKind,
    EnforcementAction,
    LoginRequirement,
    MismatchResult,
    VisibilityKind,
)
from .enforcement import is_redirect_loop, normalize_url, select
from .evaluator import (
    admin_bypass,
    evaluate,
    evaluate_by_key,
    evaluate_menu_item,
    filter_visible,
    is_allowed,
)
from .mismatch import (
    Discrepancy,
    compare,
    compare_unlinked,
    count_mismatches,
    explain,
    is_contradictory,
)
from .models import (
    OPEN_POLICY,
    EnforcementConfig,
    Identity,
    Policy,
    ResolvedAction,
    VisibilityKey,
    normalize_roles,
)
from .roles import (
    CORE_ROLES,
    RoleCatalog,
    available_roles,
    get_role_catalog,
    reset_role_catalog,
    set_role_catalog,
)

__all__ = [
    "CORE_ROLES",
    "DEFAULT_MESSAGE",
    "OPEN_POLICY",
    "Decision",
    "Discrepancy",
    "DiscrepancyKind",
    "EnforcementAction",
    "EnforcementConfig",
    "Identity",
    "LoginRequirement",
    "MismatchResult",
    "Policy",
    "ResolvedAction",
    "RoleCatalog",
    "VisibilityKey",
    "VisibilityKind",
    "admin_bypass",
    "available_roles",
    "compare",
    "compare_unlinked",
    "count_mismatches",
    "evaluate",
    "evaluate_by_key",
    "evaluate_menu_item",
    "explain",
    "filter_visible",
    "get_role_catalog",
    "is_allowed",
    "is_contradictory",
    "is_redirect_loop",
    "normalize_roles",
    "normalize_url",
    "reset_role_catalog",
    "select",
    "set_role_catalog",
]
