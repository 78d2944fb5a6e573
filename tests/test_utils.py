"""Test doubles shared across the test suite.

- FakeBuildManager: Returns a fixed target list (or raises) and records calls
- ScriptedQuickPick: Simulates a user typing and choosing, or cancelling
"""

import asyncio

from variables_mcp.engine import (
    BuildManager,
    BuildManagerError,
    QuickPickCancelledError,
    QuickPickItem,
    QuickPickRequest,
    QuickPickService,
)


class FakeBuildManager(BuildManager):
    """Build manager returning canned targets."""

    def __init__(
        self,
        targets: list[str] | None = None,
        error: str | None = None,
        directory: str | None = None,
    ) -> None:
        self.targets = targets or []
        self.error = error
        self.directory = directory
        self.calls: list[str | None] = []

    async def get_targets(self, configuration: str | None = None) -> list[str]:
        self.calls.append(configuration)
        await asyncio.sleep(0)
        if self.error is not None:
            raise BuildManagerError(configuration, self.error)
        return list(self.targets)

    async def get_build_directory(self, configuration: str | None = None) -> str | None:
        return self.directory


class ScriptedQuickPick(QuickPickService):
    """Quick pick that plays back one user interaction.

    Args:
        typed: Text the user types before choosing
        select: Label of the item to choose (None chooses the first item)
        cancel: Dismiss the picker instead of choosing
    """

    def __init__(self, typed: str = "", select: str | None = None, cancel: bool = False) -> None:
        self.typed = typed
        self.select = select
        self.cancel = cancel
        self.requests: list[QuickPickRequest] = []
        self.offered: list[list[QuickPickItem]] = []

    async def pick(self, request: QuickPickRequest) -> str:
        self.requests.append(request)
        await asyncio.sleep(0)

        if self.cancel:
            raise QuickPickCancelledError(request.placeholder)

        items = request.items_for(self.typed)
        self.offered.append(items)

        if self.select is None:
            return items[0].value
        for item in items:
            if item.label == self.select:
                return item.value
        raise AssertionError(f"No item labelled {self.select!r} in {[i.label for i in items]}")
