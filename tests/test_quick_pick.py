"""Tests for the quick pick protocol and its implementations."""

import asyncio
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest
from test_utils import ScriptedQuickPick

from variables_mcp.engine import (
    ContextualQuickPick,
    ElicitationQuickPick,
    QuickPickCancelledError,
    QuickPickItem,
    QuickPickRequest,
    QuickPickUnavailableError,
    active_quick_pick,
)
from variables_mcp.engine.quick_pick import QuickPickAnswer


@pytest.fixture
def target_request() -> QuickPickRequest:
    return QuickPickRequest(
        placeholder="Enter the target to build...",
        fixed_items=[QuickPickItem(label="", value="", description="No target")],
        candidates=[
            QuickPickItem(
                label="debug", value="debug", group_label="Available Targets", show_border=True
            ),
            QuickPickItem(label="release", value="release"),
        ],
    )


def elicitation_ctx(action: str, choice: str = "") -> MagicMock:
    ctx = MagicMock()
    data = QuickPickAnswer(choice=choice) if action == "accept" else None
    ctx.elicit = AsyncMock(return_value=SimpleNamespace(action=action, data=data))
    return ctx


class TestQuickPickRequest:
    def test_items_for_echoes_trimmed_input(self, target_request):
        items = target_request.items_for("  foo ")

        assert [item.value for item in items] == ["", "foo", "debug", "release"]
        assert items[1].group_label == "Input"

    def test_echo_disabled(self, target_request):
        request = target_request.model_copy(update={"echo_input": False})

        assert [item.value for item in request.items_for("foo")] == ["", "debug", "release"]


class TestContextualQuickPick:
    @pytest.mark.asyncio
    async def test_unbound_raises_unavailable(self, target_request):
        with pytest.raises(QuickPickUnavailableError):
            await ContextualQuickPick().pick(target_request)

    @pytest.mark.asyncio
    async def test_unavailable_is_a_cancellation(self, target_request):
        with pytest.raises(QuickPickCancelledError):
            await ContextualQuickPick().pick(target_request)

    @pytest.mark.asyncio
    async def test_delegates_to_bound_service(self, target_request):
        scripted = ScriptedQuickPick(select="release")
        token = active_quick_pick.set(scripted)
        try:
            assert await ContextualQuickPick().pick(target_request) == "release"
        finally:
            active_quick_pick.reset(token)

        assert scripted.requests == [target_request]

    @pytest.mark.asyncio
    async def test_binding_visible_to_child_tasks(self, target_request):
        token = active_quick_pick.set(ScriptedQuickPick(select="debug"))
        try:
            results = await asyncio.gather(
                ContextualQuickPick().pick(target_request),
                ContextualQuickPick().pick(target_request),
            )
        finally:
            active_quick_pick.reset(token)

        assert results == ["debug", "debug"]


class TestElicitationQuickPick:
    @pytest.mark.asyncio
    async def test_accept_matching_label(self, target_request):
        ctx = elicitation_ctx("accept", "release")

        assert await ElicitationQuickPick(ctx).pick(target_request) == "release"

        kwargs = ctx.elicit.call_args.kwargs
        assert kwargs["schema"] is QuickPickAnswer
        assert "Enter the target to build..." in kwargs["message"]
        assert "Available Targets:" in kwargs["message"]
        assert "- release" in kwargs["message"]

    @pytest.mark.asyncio
    async def test_accept_free_text(self, target_request):
        ctx = elicitation_ctx("accept", " custom-target ")

        assert await ElicitationQuickPick(ctx).pick(target_request) == "custom-target"

    @pytest.mark.asyncio
    async def test_accept_blank_selects_first_fixed_item(self, target_request):
        ctx = elicitation_ctx("accept", "")

        assert await ElicitationQuickPick(ctx).pick(target_request) == ""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("answer", ["No target", "(No target)"])
    async def test_accept_unlabeled_item_by_description(self, target_request, answer):
        ctx = elicitation_ctx("accept", answer)

        assert await ElicitationQuickPick(ctx).pick(target_request) == ""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("action", ["decline", "cancel"])
    async def test_decline_or_cancel_raises(self, target_request, action):
        ctx = elicitation_ctx(action)

        with pytest.raises(QuickPickCancelledError) as exc_info:
            await ElicitationQuickPick(ctx).pick(target_request)

        assert exc_info.value.reason == action

    def test_message_lists_no_target_choice(self, target_request):
        message = ElicitationQuickPick(MagicMock()).format_message(target_request)

        assert "- (No target)" in message
        assert "Leave the answer blank for: No target" in message
