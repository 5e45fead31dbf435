"""Tests for the gRPC glue in visigate.rpc."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import grpc
import pytest

from visigate import (
    DEFAULT_MESSAGE,
    AmbiguousEnforcementConfig,
    ConfigurationError,
    Decision,
    EnforcementAction,
    EnforcementConfig,
    GlobalSettings,
    Identity,
    InvalidPolicy,
    Policy,
    ResolvedAction,
    VisigateError,
    evaluate,
)
from visigate.rpc import (
    REDIRECT_LOOP_MESSAGE,
    abort_with_error,
    decision_handler,
    deny_metadata,
    deny_status,
    enforce,
    get_grpc_status_code,
)

SETTINGS = GlobalSettings(admin_override_enabled=False)
REDIRECTING = GlobalSettings(
    admin_override_enabled=False,
    default_enforcement_action="custom_url",
    default_forward_url="/members/login",
)

ANON = Identity.anonymous()
SUBSCRIBER = Identity.authenticated({"subscriber"})


def _context() -> MagicMock:
    context = MagicMock()
    context.abort = AsyncMock()
    return context


class TestGrpcMapping:
    """Tests for get_grpc_status_code."""

    def test_mapping(self) -> None:
        assert get_grpc_status_code(InvalidPolicy()) == grpc.StatusCode.INVALID_ARGUMENT
        assert get_grpc_status_code(AmbiguousEnforcementConfig()) == grpc.StatusCode.INVALID_ARGUMENT
        assert get_grpc_status_code(ConfigurationError()) == grpc.StatusCode.FAILED_PRECONDITION
        assert get_grpc_status_code(VisigateError()) == grpc.StatusCode.INTERNAL


class TestDenyStatus:
    """Tests for deny_status and deny_metadata."""

    def test_message_denial(self) -> None:
        action = ResolvedAction(EnforcementAction.CUSTOM_MESSAGE, message="No.")
        assert deny_status(action, ANON) == grpc.StatusCode.PERMISSION_DENIED
        assert deny_metadata(action) == [("enforcement-action", "custom_message")]

    def test_redirect(self) -> None:
        action = ResolvedAction(EnforcementAction.CUSTOM_URL, url="/members/login")
        assert deny_status(action, SUBSCRIBER) == grpc.StatusCode.PERMISSION_DENIED
        assert deny_metadata(action) == [
            ("enforcement-action", "custom_url"),
            ("forward-url", "/members/login"),
        ]

    def test_login_fallback(self) -> None:
        action = ResolvedAction(EnforcementAction.CUSTOM_URL, use_login_fallback=True)
        assert deny_status(action, ANON) == grpc.StatusCode.UNAUTHENTICATED
        assert deny_status(action, SUBSCRIBER) == grpc.StatusCode.PERMISSION_DENIED
        assert ("login-fallback", "true") in deny_metadata(action)


class TestEnforce:
    """Tests for enforce()."""

    @pytest.mark.asyncio
    async def test_allow_passes_through(self) -> None:
        context = _context()
        decision = evaluate(Policy(), ANON, SETTINGS)
        assert await enforce(context, decision, ANON, None, SETTINGS) is None
        context.abort.assert_not_awaited()
        context.set_trailing_metadata.assert_not_called()

    @pytest.mark.asyncio
    async def test_deny_aborts_with_message(self) -> None:
        context = _context()
        decision = evaluate(Policy("logged_in"), ANON, SETTINGS)
        config = EnforcementConfig("custom_message", custom_message="Members only.")

        action = await enforce(context, decision, ANON, config, SETTINGS)

        assert action.message == "Members only."
        context.abort.assert_awaited_once_with(grpc.StatusCode.PERMISSION_DENIED, "Members only.")
        context.set_trailing_metadata.assert_called_once_with([("enforcement-action", "custom_message")])

    @pytest.mark.asyncio
    async def test_deny_with_redirect(self) -> None:
        context = _context()
        action = await enforce(context, Decision.DENY, ANON, None, REDIRECTING, current_url="/premium")

        assert action.url == "/members/login"
        status, message = context.abort.await_args.args
        assert status == grpc.StatusCode.PERMISSION_DENIED
        assert message == DEFAULT_MESSAGE
        metadata = context.set_trailing_metadata.call_args.args[0]
        assert ("forward-url", "/members/login") in metadata

    @pytest.mark.asyncio
    async def test_redirect_loop_becomes_denial(self) -> None:
        context = _context()
        action = await enforce(context, Decision.DENY, ANON, None, REDIRECTING, current_url="/members/login/")

        assert action.kind is EnforcementAction.CUSTOM_MESSAGE
        assert action.url == ""
        context.abort.assert_awaited_once_with(grpc.StatusCode.PERMISSION_DENIED, REDIRECT_LOOP_MESSAGE)

    @pytest.mark.asyncio
    async def test_login_fallback_for_anonymous(self) -> None:
        context = _context()
        config = EnforcementConfig("custom_url")

        await enforce(context, Decision.DENY, ANON, config, SETTINGS)

        status, _ = context.abort.await_args.args
        assert status == grpc.StatusCode.UNAUTHENTICATED


class _VisibilityServicer:
    @decision_handler
    async def Check(self, request, context):
        if request == "boom":
            raise RuntimeError("boom")
        policy = Policy.from_raw(request, None)
        return evaluate(policy, ANON, SETTINGS)


class TestDecisionHandler:
    """Tests for decision_handler and abort_with_error."""

    @pytest.mark.asyncio
    async def test_passes_through_result(self) -> None:
        context = _context()
        assert await _VisibilityServicer().Check("logged_out", context) is Decision.ALLOW
        context.abort.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_invalid_policy_aborts_with_mapped_status(self) -> None:
        context = _context()
        assert await _VisibilityServicer().Check("members_only", context) is None
        context.set_trailing_metadata.assert_called_once_with([("error-code", "INVALID_POLICY")])
        status, message = context.abort.await_args.args
        assert status == grpc.StatusCode.INVALID_ARGUMENT
        assert message.startswith("[INVALID_POLICY]")

    @pytest.mark.asyncio
    async def test_unexpected_error_propagates(self) -> None:
        context = _context()
        with pytest.raises(RuntimeError, match="boom"):
            await _VisibilityServicer().Check("boom", context)
        context.abort.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_abort_with_error(self) -> None:
        context = _context()
        await abort_with_error(context, ConfigurationError("LOG_LEVEL rejected"))
        context.abort.assert_awaited_once_with(
            grpc.StatusCode.FAILED_PRECONDITION,
            "[CONFIGURATION_ERROR] LOG_LEVEL rejected",
        )

    def test_preserves_method_name(self) -> None:
        assert _VisibilityServicer.Check.__name__ == "Check"
