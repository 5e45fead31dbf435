from .access import (
    CORE_ROLES,
    DEFAULT_MESSAGE,
    OPEN_POLICY,
    Decision,
    Discrepancy,
    DiscrepancyKind,
    EnforcementAction,
    EnforcementConfig,
    Identity,
    LoginRequirement,
    MismatchResult,
    Policy,
    ResolvedAction,
    RoleCatalog,
    VisibilityKey,
    VisibilityKind,
    admin_bypass,
    available_roles,
    compare,
    compare_unlinked,
    count_mismatches,
    evaluate,
    evaluate_by_key,
    evaluate_menu_item,
    explain,
    filter_visible,
    get_role_catalog,
    is_allowed,
    is_contradictory,
    is_redirect_loop,
    normalize_roles,
    normalize_url,
    reset_role_catalog,
    select,
    set_role_catalog,
)
from .config import GlobalSettings, LogLevel, VisigateConfig, load_config_from_env
from .exceptions import (
    AmbiguousEnforcementConfig,
    ConfigurationError,
    InvalidPolicy,
    VisigateError,
)
from .logging import (
    DecisionLogFormatter,
    RequestLoggerAdapter,
    get_request_logger,
    redact_secrets,
    safe_log_value,
    safe_preview,
    setup_logging,
)

__version__ = "0.1.0"

__all__ = [
    'CORE_ROLES',
    'DEFAULT_MESSAGE',
    'OPEN_POLICY',
    'AmbiguousEnforcementConfig',
    'ConfigurationError',
    'Decision',
    'Discrepancy',
    'DiscrepancyKind',
    'DecisionLogFormatter',
    'EnforcementAction',
    'EnforcementConfig',
    'GlobalSettings',
    'Identity',
    'InvalidPolicy',
    'LogLevel',
    'LoginRequirement',
    'MismatchResult',
    'Policy',
    'RequestLoggerAdapter',
    'ResolvedAction',
    'RoleCatalog',
    'VisibilityKey',
    'VisibilityKind',
    'VisigateConfig',
    'VisigateError',
    'admin_bypass',
    'available_roles',
    'compare',
    'compare_unlinked',
    'count_mismatches',
    'evaluate',
    'evaluate_by_key',
    'evaluate_menu_item',
    'explain',
    'filter_visible',
    'get_request_logger',
    'get_role_catalog',
    'is_allowed',
    'is_contradictory',
    'is_redirect_loop',
    'load_config_from_env',
    'normalize_roles',
    'normalize_url',
    'redact_secrets',
    'reset_role_catalog',
    'safe_log_value',
    'safe_preview',
    'select',
    'set_role_catalog',
    'setup_logging',
]
