"""Build variables, including the interactive build target picker.

Variables (all require the ``buildTaskContext`` context key):
    - build.target: Target to build; asks the user unless the task pins one
    - build.configuration: Name of the task's (or the active) build configuration
    - build.directory: Build directory of that configuration

Example task definition:
    command: "make -C ${build.directory} ${build.target}"

Resolving it with a task context that does not pin a target enumerates the
configuration's targets and asks the user to choose one of:
    1. No target (builds the default goal)
    2. The text typed so far, used verbatim
    3. One of the enumerated targets
"""

import logging
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from .build_manager import BuildManager
from .quick_pick import QuickPickItem, QuickPickRequest, QuickPickService
from .registry import VariableRegistry
from .variable import ContextKey, Variable, VariableContext, VariableContribution

logger = logging.getLogger(__name__)

BUILD_TARGET_VARIABLE = "build.target"
BUILD_CONFIGURATION_VARIABLE = "build.configuration"
BUILD_DIRECTORY_VARIABLE = "build.directory"

TARGET_PLACEHOLDER = "Enter the target to build..."


class BuildTaskContext(BaseModel):
    """Payload of the ``buildTaskContext`` context key.

    Accepts both snake_case and the camelCase names used in task definitions.
    """

    model_config = ConfigDict(populate_by_name=True)

    build_configuration: str | None = Field(
        default=None,
        alias="buildConfiguration",
        description="Build configuration name (None for the active configuration)",
    )
    build_target: str | None = Field(
        default=None,
        alias="buildTarget",
        description="Target already decided by the task; skips the picker",
    )

    @classmethod
    def from_context(cls, context: VariableContext) -> "BuildTaskContext":
        """Read the build task payload from a resolution context."""
        payload: Any = context[ContextKey.BUILD_TASK]
        if isinstance(payload, cls):
            return payload
        if isinstance(payload, Mapping):
            return cls.model_validate(dict(payload))
        raise TypeError(
            f"{ContextKey.BUILD_TASK} must be a BuildTaskContext or a mapping, "
            f"got {type(payload).__name__}"
        )


class BuildTargetVariableContribution(VariableContribution):
    """Registers the build variables.

    Attributes:
        build_manager: Enumerates the targets of a build configuration
        quick_pick: Presents the target choice to the user
    """

    def __init__(self, build_manager: BuildManager, quick_pick: QuickPickService) -> None:
        self.build_manager = build_manager
        self.quick_pick = quick_pick

    def register_variables(self, registry: VariableRegistry) -> None:
        registry.register_variable(
            Variable(
                name=BUILD_TARGET_VARIABLE,
                description="Build target to use when building a project",
                contexts=[ContextKey.BUILD_TASK],
                resolve=self.resolve_target,
            )
        )
        registry.register_variable(
            Variable(
                name=BUILD_CONFIGURATION_VARIABLE,
                description="Name of the build configuration used by the build task",
                contexts=[ContextKey.BUILD_TASK],
                resolve=self.resolve_configuration,
            )
        )
        registry.register_variable(
            Variable(
                name=BUILD_DIRECTORY_VARIABLE,
                description="Build directory of the build configuration used by the build task",
                contexts=[ContextKey.BUILD_TASK],
                resolve=self.resolve_directory,
            )
        )

    async def resolve_target(self, context: VariableContext) -> str:
        """Resolve ``build.target``.

        Raises:
            QuickPickCancelledError: If the user dismissed the picker
            BuildManagerError: If the targets could not be enumerated
        """
        task = BuildTaskContext.from_context(context)

        # Target already specified, do not ask
        if isinstance(task.build_target, str):
            return task.build_target

        targets = await self.build_manager.get_targets(task.build_configuration)
        logger.debug(f"Offering {len(targets)} build targets")

        return await self.quick_pick.pick(self.create_target_request(targets))

    def create_target_request(self, targets: list[str]) -> QuickPickRequest:
        """Build the target choice: no target, typed input, then each target."""
        candidates = [QuickPickItem(label=target, value=target) for target in targets]
        if candidates:
            candidates[0] = candidates[0].model_copy(
                update={"group_label": "Available Targets", "show_border": True}
            )

        return QuickPickRequest(
            placeholder=TARGET_PLACEHOLDER,
            fixed_items=[QuickPickItem(label="", value="", description="No target")],
            candidates=candidates,
            echo_input=True,
            echo_group_label="Input",
        )

    async def resolve_configuration(self, context: VariableContext) -> str | None:
        """Resolve ``build.configuration``."""
        task = BuildTaskContext.from_context(context)
        return await self.build_manager.get_configuration_name(task.build_configuration)

    async def resolve_directory(self, context: VariableContext) -> str | None:
        """Resolve ``build.directory``."""
        task = BuildTaskContext.from_context(context)
        return await self.build_manager.get_build_directory(task.build_configuration)
