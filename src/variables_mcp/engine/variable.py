"""Variable definitions and the provider contract.

A Variable is a named unit of resolution referenced from text as ``${name}``.
Providers (contributions) create variables once at startup and register them
into the VariableRegistry; the resolver only ever reads them back.

Resolution contexts are plain mappings owned by the caller. The resolver only
checks that the keys a variable declares in ``contexts`` are present; the
payloads behind those keys are interpreted by the variables themselves.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable, Mapping
from enum import StrEnum
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, Field

if TYPE_CHECKING:
    from .registry import VariableRegistry

# Caller-supplied resolution context: context key -> payload
VariableContext = Mapping[str, Any]

# Sync or async: may return a str, an awaitable of one, or anything else for "no value"
ResolveFunction = Callable[[VariableContext], Any]


class ContextKey(StrEnum):
    """Known resolution context keys.

    Members compare equal to their string values, so callers may use either
    the enum member or the raw string as a mapping key.
    """

    BUILD_TASK = "buildTaskContext"  # BuildTaskContext payload
    WORKSPACE = "workspaceContext"  # workspace root path or {"root": path}


class Variable(BaseModel):
    """A named, registered unit of resolution.

    Example:
        Variable(
            name="build.target",
            description="Build target to use when building a project",
            contexts=[ContextKey.BUILD_TASK],
            resolve=pick_target,
        )
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(description="Unique identifier, also the token used in ${name}")
    description: str | None = Field(
        default=None,
        description="Human-readable documentation (not used in resolution)",
    )
    contexts: list[str] | None = Field(
        default=None,
        description="Context keys that must all be present for the variable to resolve",
    )
    resolve: ResolveFunction | None = Field(
        default=None,
        exclude=True,
        description="Sync or async resolution function; non-str results mean no value",
    )

    def applies_to(self, context: VariableContext) -> bool:
        """Check that every required context key is present in the context."""
        if not self.contexts:
            return True
        return all(key in context for key in self.contexts)


class VariableContribution(ABC):
    """Base class for variable providers.

    A contribution registers its variables once, when the registry is built.
    It depends only on the registry's registration contract plus whatever
    collaborators it needs to produce values.

    Example:
        class GitVariableContribution(VariableContribution):
            def register_variables(self, registry: VariableRegistry) -> None:
                registry.register_variable(
                    Variable(name="git.branch", resolve=self._current_branch)
                )
    """

    @abstractmethod
    def register_variables(self, registry: VariableRegistry) -> None:
        """Register this contribution's variables into the registry."""
        pass
