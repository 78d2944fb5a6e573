"""
Variable registry for managing registered variable definitions.

This module provides the VariableRegistry class, the name-keyed store that
contributions write to at startup and the resolver reads from on every call.

Features:
- Register variables (re-registration replaces, last writer wins)
- Look up variables by name (None when unknown)
- Register contributions and discover third-party ones from entry points
- Clear registry for testing
- Thread-safe read operations (dict reads and single assignments are atomic in CPython)
"""

import inspect
import logging
from collections.abc import Iterable
from typing import TYPE_CHECKING

from .variable import Variable, VariableContribution

if TYPE_CHECKING:
    from .build_manager import BuildManager
    from .quick_pick import QuickPickService

logger = logging.getLogger(__name__)

CONTRIBUTIONS_ENTRY_POINT_GROUP = "variables_mcp.contributions"


class VariableRegistry:
    """
    Central registry of resolvable variables.

    Registration never fails: a variable registered under an existing name
    replaces the previous definition. Every write is a single dict assignment,
    so a concurrent resolve call sees either the old or the new entry, never a
    partially-registered one.

    Example:
        registry = VariableRegistry()
        registry.register_contribution(CommonVariableContribution())

        variable = registry.get_variable("cwd")
        resolver = VariableResolverService(registry)
        text = await resolver.resolve("cd ${cwd}")
    """

    def __init__(self) -> None:
        """Initialize empty registry."""
        self._variables: dict[str, Variable] = {}

    def register_variable(self, variable: Variable) -> None:
        """
        Register a variable, replacing any previous definition of the same name.

        Args:
            variable: Variable to register
        """
        replaced = variable.name in self._variables
        self._variables[variable.name] = variable

        if replaced:
            logger.info(f"Replaced variable: {variable.name}")
        else:
            logger.info(f"Registered variable: {variable.name}")

    def unregister_variable(self, name: str) -> None:
        """
        Unregister a variable by name.

        Args:
            name: Variable name to unregister

        Raises:
            KeyError: If variable not found
        """
        if name not in self._variables:
            raise KeyError(f"Variable '{name}' not found in registry")

        del self._variables[name]
        logger.info(f"Unregistered variable: {name}")

    def get_variable(self, name: str) -> Variable | None:
        """
        Get variable by name.

        Args:
            name: Variable name (case-sensitive)

        Returns:
            Variable instance, or None if no variable has that name
        """
        return self._variables.get(name)

    def get_variables(self) -> list[Variable]:
        """List all registered variables in registration order."""
        return list(self._variables.values())

    def list_names(self) -> list[str]:
        """List variable names, sorted."""
        return sorted(self._variables.keys())

    def has(self, name: str) -> bool:
        """Check if a variable is registered under this name."""
        return name in self._variables

    def clear(self) -> None:
        """Remove all variables (primarily for testing)."""
        count = len(self._variables)
        self._variables.clear()
        logger.info(f"Cleared {count} variables from registry")

    def register_contribution(self, contribution: VariableContribution) -> None:
        """Let a contribution register its variables."""
        contribution.register_variables(self)
        logger.debug(f"Applied contribution: {contribution.__class__.__name__}")

    def register_contributions(self, contributions: Iterable[VariableContribution]) -> None:
        """Apply contributions in order (later ones win on name clashes)."""
        for contribution in contributions:
            self.register_contribution(contribution)

    def discover_entry_points(self, group: str = CONTRIBUTIONS_ENTRY_POINT_GROUP) -> int:
        """Discover and apply contributions from entry points.

        This enables third-party packages to provide variables by declaring
        entry points in their pyproject.toml:

            [project.entry-points."variables_mcp.contributions"]
            git = "my_package.variables:GitVariableContribution"

        Entry points must load to a VariableContribution subclass with a
        no-argument constructor. Invalid entry points are skipped with a warning.

        Args:
            group: Entry point group name (default: "variables_mcp.contributions")

        Returns:
            Number of contributions discovered and applied
        """
        from importlib.metadata import entry_points

        discovered = 0

        for entry_point in entry_points().select(group=group):
            try:
                contribution_class = entry_point.load()

                if not (
                    inspect.isclass(contribution_class)
                    and issubclass(contribution_class, VariableContribution)
                ):
                    logger.warning(
                        f"Skipping entry point {entry_point.name}: "
                        "not a VariableContribution subclass"
                    )
                    continue

                self.register_contribution(contribution_class())
                discovered += 1

            except Exception as e:
                logger.warning(f"Skipping invalid entry point {entry_point.name}: {e}")
                continue

        return discovered

    def __contains__(self, name: str) -> bool:
        """Support 'name in registry' syntax."""
        return name in self._variables

    def __len__(self) -> int:
        """Return number of registered variables."""
        return len(self._variables)

    def __repr__(self) -> str:
        """Developer-friendly representation."""
        return f"VariableRegistry(variables={len(self._variables)})"


def create_default_registry(
    build_manager: "BuildManager",
    quick_pick: "QuickPickService",
) -> VariableRegistry:
    """Create VariableRegistry with all built-in contributions registered.

    Collaborators are passed in explicitly so each caller (server lifespan,
    individual tests) gets an isolated registry wired to its own services.

    Args:
        build_manager: Enumerates build targets for the build variables
        quick_pick: Presents the interactive build target choice

    Returns:
        VariableRegistry instance with all built-in variables registered

    Example:
        # In application startup
        registry = create_default_registry(
            ConfiguredBuildManager(BuildConfigLoader()),
            ContextualQuickPick(),
        )
        resolver = VariableResolverService(registry)
    """
    from .build_variable import BuildTargetVariableContribution
    from .common_variables import CommonVariableContribution

    registry = VariableRegistry()

    registry.register_contributions(
        [
            CommonVariableContribution(),
            BuildTargetVariableContribution(build_manager, quick_pick),
        ]
    )

    return registry
