"""Variable resolution engine.

Key Components:

- VariableResolverService: Expands ${name} tokens in strings and string lists
- VariableRegistry: Name-keyed store of variables (last registration wins)
- Variable: A named variable with an optional sync/async resolve function
- VariableContribution: Base class for variable providers
- ContextKey: Known resolution context keys
- QuickPickService: Protocol for interactive "choose one value" prompts
- BuildManager: Enumerates build targets for the build variables
- BuildConfigLoader: Loads build configurations from YAML

Architecture:
- Contributions register variables once, at registry creation
- The resolver reads the registry on every call and never caches values
- Variables are resolved concurrently, once per distinct name per call
- Failing or cancelled variables leave their tokens unresolved; resolve()
  itself never raises because of a variable
"""

from .build_config import BuildConfig, BuildConfigLoader, BuildConfiguration
from .build_manager import BuildManager, ConfiguredBuildManager, scan_makefile_targets
from .build_variable import (
    BUILD_CONFIGURATION_VARIABLE,
    BUILD_DIRECTORY_VARIABLE,
    BUILD_TARGET_VARIABLE,
    BuildTargetVariableContribution,
    BuildTaskContext,
)
from .common_variables import CommonVariableContribution
from .exceptions import (
    BuildConfigError,
    BuildManagerError,
    QuickPickCancelledError,
    QuickPickUnavailableError,
    VariableError,
)
from .quick_pick import (
    ContextualQuickPick,
    ElicitationQuickPick,
    QuickPickItem,
    QuickPickRequest,
    QuickPickService,
    active_quick_pick,
)
from .registry import VariableRegistry, create_default_registry
from .resolver import VARIABLE_PATTERN, VariableResolverService
from .variable import ContextKey, Variable, VariableContext, VariableContribution

__all__ = [
    # Resolution
    "VariableResolverService",
    "VARIABLE_PATTERN",
    # Registry and contract
    "VariableRegistry",
    "create_default_registry",
    "Variable",
    "VariableContext",
    "VariableContribution",
    "ContextKey",
    # Contributions
    "CommonVariableContribution",
    "BuildTargetVariableContribution",
    "BuildTaskContext",
    "BUILD_TARGET_VARIABLE",
    "BUILD_CONFIGURATION_VARIABLE",
    "BUILD_DIRECTORY_VARIABLE",
    # Interactive prompts
    "QuickPickService",
    "QuickPickRequest",
    "QuickPickItem",
    "ContextualQuickPick",
    "ElicitationQuickPick",
    "active_quick_pick",
    # Build system
    "BuildManager",
    "ConfiguredBuildManager",
    "BuildConfigLoader",
    "BuildConfig",
    "BuildConfiguration",
    "scan_makefile_targets",
    # Exceptions
    "VariableError",
    "QuickPickCancelledError",
    "QuickPickUnavailableError",
    "BuildManagerError",
    "BuildConfigError",
]
