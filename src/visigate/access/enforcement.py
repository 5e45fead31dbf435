"""Enforcement resolution for DENY decisions.

Turns a per-resource :class:`EnforcementConfig` plus the global settings
snapshot into a concrete :class:`ResolvedAction`. The core only signals
conditions (message, redirect target, login fallback, redirect loop); the
caller renders the page or issues the redirect.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING
from urllib.parse import urljoin, urlsplit, urlunsplit

from ..exceptions import AmbiguousEnforcementConfig
from .constants import DEFAULT_MESSAGE, EnforcementAction
from .models import EnforcementConfig, ResolvedAction

if TYPE_CHECKING:
    from ..config import GlobalSettings

logger = logging.getLogger(__name__)


def select(
    config: EnforcementConfig | None,
    settings: GlobalSettings,
    *,
    strict: bool = False,
) -> ResolvedAction:
    """Resolve the enforcement action for a denied resource.

    Resolution:
    1. ``USE_DEFAULT`` (or no config): the global action, message and URL
       are used and any per-resource text is discarded.
    2. ``CUSTOM_MESSAGE``: the custom message, else the global message.
    3. ``CUSTOM_URL``: the custom URL, else the global forward URL. With no
       URL anywhere, the result asks the caller to fall back to its login
       page, or raises in strict mode.

    Args:
        config: Per-resource overrides (None means use defaults).
        settings: Global settings snapshot.
        strict: Raise instead of signalling the login fallback.

    Returns:
        ResolvedAction with ``kind`` either CUSTOM_MESSAGE or CUSTOM_URL.

    Raises:
        AmbiguousEnforcementConfig: strict mode and no redirect URL available.

    Example::

        select(EnforcementConfig("default", custom_message="ignored"), settings)
        # ResolvedAction(kind=settings.default_enforcement_action, message=settings.default_message, ...)
    """
    action = config.action if config is not None else EnforcementAction.USE_DEFAULT

    if action is EnforcementAction.USE_DEFAULT:
        kind = EnforcementAction.parse(settings.default_enforcement_action)
        message = settings.default_message
        url = settings.default_forward_url
    else:
        kind = action
        message = (config.custom_message or "").strip() or settings.default_message
        url = (config.custom_forward_url or "").strip() or settings.default_forward_url

    if kind is EnforcementAction.USE_DEFAULT:
        # Settings snapshot that still says "default"; treat as message.
        kind = EnforcementAction.CUSTOM_MESSAGE

    if kind is EnforcementAction.CUSTOM_MESSAGE:
        return ResolvedAction(kind=kind, message=message or DEFAULT_MESSAGE)

    url = (url or "").strip()
    if url:
        return ResolvedAction(kind=kind, url=url)

    if strict:
        raise AmbiguousEnforcementConfig(
            "Redirect selected but no forward URL is configured",
            action=action.value,
        )
    logger.info("No forward URL configured, signalling login fallback")
    return ResolvedAction(kind=kind, use_login_fallback=True)


def normalize_url(url: str | None, *, site_url: str | None = None) -> str:
    """Normalize a URL for loop comparison.

    Site-relative paths are resolved against ``site_url`` when given.
    Scheme and host are lower-cased, the fragment dropped, and a trailing
    slash removed from non-root paths.
    """
    text = (url or "").strip()
    if not text:
        return ""
    if site_url and text.startswith("/") and not text.startswith("//"):
        text = urljoin(site_url.rstrip("/") + "/", text.lstrip("/"))

    parts = urlsplit(text)
    path = parts.path
    if len(path) > 1:
        path = path.rstrip("/") or "/"
    elif parts.netloc and not path:
        path = "/"
    return urlunsplit((parts.scheme.lower(), parts.netloc.lower(), path, parts.query, ""))


def is_redirect_loop(current_url: str | None, target_url: str | None, *, site_url: str | None = None) -> bool:
    """True when redirecting to ``target_url`` would land on ``current_url``.

    Callers must check this before redirecting and answer with a 403
    "redirect loop" page instead.
    """
    current = normalize_url(current_url, site_url=site_url)
    target = normalize_url(target_url, site_url=site_url)
    return bool(current) and current == target


__all__ = [
    "is_redirect_loop",
    "normalize_url",
    "select",
]
