"""gRPC glue for services that serve visibility decisions.

Turns the outputs of the decision core into servicer-context calls:

- :func:`enforce` aborts a call whose decision is DENY, carrying the
  resolved enforcement action in trailing metadata so the client can
  render the message or follow the redirect.
- :func:`abort_with_error` reports a VisigateError with its mapped status.
- :func:`decision_handler` wraps a unary servicer method so that errors
  raised while building policies or resolving enforcement are reported
  the same way.

``grpc`` is imported inside each function; importing this module does not
require it.

Usage:
    class VisibilityServicer(...):
        @decision_handler
        async def Check(self, request, context):
            identity = Identity.authenticated(request.roles)
            decision = evaluate(Policy.from_raw(request.login, request.roles), identity, settings)
            await enforce(context, decision, identity, None, settings, current_url=request.url)
            return CheckResponse(allowed=True)
"""

from __future__ import annotations

import functools
import logging
from typing import Any

from .access import (
    DEFAULT_MESSAGE,
    Decision,
    EnforcementAction,
    EnforcementConfig,
    Identity,
    ResolvedAction,
    is_redirect_loop,
    select,
)
from .config import GlobalSettings
from .exceptions import VisigateError
from .logging import safe_log_value

__all__ = [
    "REDIRECT_LOOP_MESSAGE",
    "abort_with_error",
    "decision_handler",
    "deny_metadata",
    "deny_status",
    "enforce",
    "get_grpc_status_code",
]

logger = logging.getLogger(__name__)

REDIRECT_LOOP_MESSAGE = "Redirect loop detected: you cannot access this content."


def get_grpc_status_code(error: VisigateError) -> Any:
    """Map a VisigateError to a gRPC status code by its ``code``."""
    import grpc

    error_to_status = {
        "INVALID_POLICY": grpc.StatusCode.INVALID_ARGUMENT,
        "AMBIGUOUS_ENFORCEMENT": grpc.StatusCode.INVALID_ARGUMENT,
        "CONFIGURATION_ERROR": grpc.StatusCode.FAILED_PRECONDITION,
    }
    return error_to_status.get(error.code, grpc.StatusCode.INTERNAL)


def deny_status(action: ResolvedAction, identity: Identity) -> Any:
    """Status for a denied call.

    An anonymous requester sent to the login fallback gets UNAUTHENTICATED
    so the client knows signing in may help; every other denial is
    PERMISSION_DENIED.
    """
    import grpc

    if action.use_login_fallback and not identity.is_authenticated:
        return grpc.StatusCode.UNAUTHENTICATED
    return grpc.StatusCode.PERMISSION_DENIED


def deny_metadata(action: ResolvedAction) -> list[tuple[str, str]]:
    """Trailing metadata describing the enforcement action."""
    metadata = [("enforcement-action", action.kind.value)]
    if action.url:
        metadata.append(("forward-url", action.url))
    if action.use_login_fallback:
        metadata.append(("login-fallback", "true"))
    return metadata


async def enforce(
    context: Any,
    decision: Decision,
    identity: Identity,
    config: EnforcementConfig | None,
    settings: GlobalSettings,
    *,
    current_url: str | None = None,
    site_url: str | None = None,
) -> ResolvedAction | None:
    """Abort the call when ``decision`` is DENY.

    The enforcement action comes from :func:`~visigate.access.select`. A
    redirect that would land on ``current_url`` is reported as a plain
    denial with :data:`REDIRECT_LOOP_MESSAGE` instead.

    Returns:
        None for ALLOW, otherwise the action the call was aborted with.
    """
    if decision.allowed:
        return None

    action = select(config, settings)
    if action.url and is_redirect_loop(current_url, action.url, site_url=site_url):
        logger.warning("Redirect to %s would loop, denying instead", safe_log_value(action.url))
        action = ResolvedAction(kind=EnforcementAction.CUSTOM_MESSAGE, message=REDIRECT_LOOP_MESSAGE)

    status_code = deny_status(action, identity)
    logger.debug("Denied with %s (%s)", action.kind.value, status_code)

    context.set_trailing_metadata(deny_metadata(action))
    await context.abort(status_code, action.message or DEFAULT_MESSAGE)
    return action


async def abort_with_error(context: Any, error: VisigateError) -> None:
    """Abort with the status mapped from ``error`` and its code in metadata."""
    error_message = f"[{error.code}] {error.message}"
    logger.error(
        "Decision call failed: %s",
        error_message,
        extra={"error_code": error.code, "error_details": error.details},
    )
    context.set_trailing_metadata([("error-code", error.code)])
    await context.abort(get_grpc_status_code(error), error_message)


def decision_handler(method):
    """Decorator for unary decision endpoints.

    A VisigateError raised by the wrapped method is reported through
    :func:`abort_with_error`; anything else propagates to the server.
    """

    @functools.wraps(method)
    async def wrapper(self, request, context):
        try:
            return await method(self, request, context)
        except VisigateError as e:
            await abort_with_error(context, e)
            return None

    return wrapper
