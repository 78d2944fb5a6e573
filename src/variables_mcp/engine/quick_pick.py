"""Interactive choice protocol for variables that ask the user for a value.

A variable that needs user input builds a QuickPickRequest and awaits
QuickPickService.pick(). The request carries everything a front end needs:
- fixed items, always offered
- an input-echo rule: the current non-blank input string is offered verbatim
- candidate items computed by the variable (e.g. enumerated build targets)

pick() has exactly two terminal outcomes: the value of the chosen item, or
QuickPickCancelledError. Choosing an item whose value is "" is a selection,
not a cancellation.

Implementations:
    - QuickPickService: Abstract base class defining the protocol
    - ContextualQuickPick: Delegates to the service bound to the current task
    - ElicitationQuickPick: Asks the connected MCP client through elicitation
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from contextvars import ContextVar
from typing import Any

from pydantic import BaseModel, Field

from .exceptions import QuickPickCancelledError, QuickPickUnavailableError

logger = logging.getLogger(__name__)


class QuickPickItem(BaseModel):
    """A single choice offered to the user."""

    label: str = Field(description="Text shown for the item")
    value: str = Field(description="Value the pick resolves to when this item is chosen")
    description: str | None = Field(default=None, description="Secondary text")
    group_label: str | None = Field(
        default=None, description="Label of the group this item starts"
    )
    show_border: bool = Field(
        default=False, description="Draw a separator above the item (presentation only)"
    )


class QuickPickRequest(BaseModel):
    """A "present choices" request.

    items_for() is the live input-changed callback: front ends call it with the
    current input string and display the returned items.
    """

    placeholder: str = Field(description="Hint shown in the empty input box")
    fixed_items: list[QuickPickItem] = Field(default_factory=list)
    candidates: list[QuickPickItem] = Field(default_factory=list)
    echo_input: bool = Field(
        default=True, description="Offer the typed (non-blank) input as a choice"
    )
    echo_group_label: str | None = Field(default="Input")

    def input_item(self, typed: str) -> QuickPickItem | None:
        """Item echoing the typed input, or None if blank or echo is off."""
        text = typed.strip()
        if not self.echo_input or not text:
            return None
        return QuickPickItem(label=text, value=text, group_label=self.echo_group_label)

    def items_for(self, typed: str = "") -> list[QuickPickItem]:
        """Choices for the current input: fixed, then input echo, then candidates."""
        items = list(self.fixed_items)
        echo = self.input_item(typed)
        if echo is not None:
            items.append(echo)
        items.extend(self.candidates)
        return items


class QuickPickService(ABC):
    """Abstract base class for interactive choice front ends.

    Example:
        >>> class FirstItemQuickPick(QuickPickService):
        ...     async def pick(self, request: QuickPickRequest) -> str:
        ...         return request.items_for("")[0].value
    """

    @abstractmethod
    async def pick(self, request: QuickPickRequest) -> str:
        """Present the request and wait for exactly one selection.

        Returns:
            The value of the chosen item

        Raises:
            QuickPickCancelledError: If the interaction was abandoned
        """
        pass


# Quick pick service for the current resolve call.
#
# Set by: resolve_variables tool before resolving
# Read by: ContextualQuickPick.pick()
#
# asyncio tasks copy the context on creation, so every variable resolved
# concurrently by the same call sees the same binding.
active_quick_pick: ContextVar[QuickPickService | None] = ContextVar(
    "active_quick_pick", default=None
)


class ContextualQuickPick(QuickPickService):
    """Quick pick that forwards to the service bound in ``active_quick_pick``.

    Variables are registered once per process but the user to ask differs per
    request; this indirection lets a long-lived variable reach the front end of
    whichever call is resolving it.

    Usage:
        token = active_quick_pick.set(ElicitationQuickPick(ctx))
        try:
            text = await resolver.resolve(text, context)
        finally:
            active_quick_pick.reset(token)
    """

    async def pick(self, request: QuickPickRequest) -> str:
        service = active_quick_pick.get()
        if service is None:
            raise QuickPickUnavailableError(request.placeholder)
        return await service.pick(request)


class QuickPickAnswer(BaseModel):
    """Elicitation schema: one free-text answer."""

    choice: str = Field(
        default="",
        description="Label of the chosen item, or any text to use it verbatim",
    )


class ElicitationQuickPick(QuickPickService):
    """Quick pick backed by MCP elicitation.

    The client is shown the placeholder and the full choice list and answers
    with a single string. The answer is matched against item labels first
    (the description of an unlabeled item counts as its label); otherwise it
    is taken as typed input. A blank answer selects the first
    fixed item. Declining or cancelling the elicitation cancels the pick.

    Attributes:
        ctx: MCP tool context of the current request
    """

    def __init__(self, ctx: Any) -> None:
        self.ctx = ctx

    def format_message(self, request: QuickPickRequest) -> str:
        """Render the choice list as the elicitation message."""
        lines = [request.placeholder, ""]
        for item in request.items_for(""):
            if item.group_label:
                lines.append(f"{item.group_label}:")
            line = f"- {item.label}" if item.label else f"- ({item.description})"
            if item.label and item.description:
                line += f" ({item.description})"
            lines.append(line)
        lines.append("")
        if request.fixed_items:
            first = request.fixed_items[0]
            lines.append(f"Leave the answer blank for: {first.label or first.description}")
        if request.echo_input:
            lines.append("Or type any other value to use it as is.")
        return "\n".join(lines)

    def select(self, request: QuickPickRequest, answer: str) -> str:
        """Map a free-text answer onto the live choice list."""
        typed = answer.strip()
        items = request.items_for(typed)

        for item in items:
            if item.label and item.label == typed:
                return item.value
            # Unlabeled items are shown by description
            if not item.label and item.description and typed in (
                item.description,
                f"({item.description})",
            ):
                return item.value

        echo = request.input_item(typed)
        if echo is not None:
            return echo.value

        if items:
            return items[0].value

        raise QuickPickCancelledError(request.placeholder, reason="nothing to choose from")

    async def pick(self, request: QuickPickRequest) -> str:
        result = await self.ctx.elicit(
            message=self.format_message(request),
            schema=QuickPickAnswer,
        )

        if result.action != "accept":
            logger.info(f"Quick pick '{request.placeholder}' ended with action: {result.action}")
            raise QuickPickCancelledError(request.placeholder, reason=result.action)

        return self.select(request, result.data.choice)
