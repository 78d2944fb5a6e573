"""Build manager abstraction and the configuration-backed implementation.

The build manager is the only thing the build variables know about the build
system: it lists the targets offered by a build configuration.

Managers:
    - BuildManager: Abstract base class defining the manager interface
    - ConfiguredBuildManager: Targets from the build config file, or scanned
      from the Makefile in the configuration's build directory

Example:
    >>> manager = ConfiguredBuildManager(BuildConfigLoader())
    >>> targets = await manager.get_targets("debug")
"""

import asyncio
import logging
import re
from abc import ABC, abstractmethod
from pathlib import Path

from .build_config import BuildConfigLoader, BuildConfiguration
from .exceptions import BuildConfigError, BuildManagerError

logger = logging.getLogger(__name__)

# Rule definitions: "name [name...]:" but not "name := value" or "name::=" assignments
MAKEFILE_RULE_PATTERN = re.compile(r"^([^\s:#=][^:#=]*?)\s*::?(?![:=])")


def scan_makefile_targets(content: str) -> list[str]:
    """Extract rule targets from Makefile text, in file order.

    Special targets (``.PHONY``, ``.DEFAULT`` ...), pattern rules (``%.o``) and
    variable references are skipped; duplicates are reported once.
    """
    targets: dict[str, None] = {}
    for line in content.splitlines():
        if line.startswith("\t"):
            continue
        match = MAKEFILE_RULE_PATTERN.match(line)
        if not match:
            continue
        for name in match.group(1).split():
            if name.startswith(".") or "%" in name or "$" in name:
                continue
            targets.setdefault(name, None)
    return list(targets)


class BuildManager(ABC):
    """Abstract base class for build managers.

    All methods are async so implementations may query a real build system.
    """

    @abstractmethod
    async def get_targets(self, configuration: str | None = None) -> list[str]:
        """List the targets of a build configuration.

        Args:
            configuration: Configuration name (None for the active configuration)

        Returns:
            Target names, in the order they should be offered

        Raises:
            BuildManagerError: If the targets cannot be enumerated
        """
        pass

    async def get_configuration_name(self, configuration: str | None = None) -> str | None:
        """Name of the configuration that ``configuration`` selects."""
        return configuration

    async def get_build_directory(self, configuration: str | None = None) -> str | None:
        """Build directory of a configuration, or None if unknown."""
        return None


class ConfiguredBuildManager(BuildManager):
    """Build manager backed by the YAML build configuration.

    Attributes:
        loader: Build configuration loader
        makefile_name: File scanned when a configuration lists no targets
    """

    def __init__(self, loader: BuildConfigLoader, makefile_name: str = "Makefile") -> None:
        self.loader = loader
        self.makefile_name = makefile_name

    def _require_configuration(self, configuration: str | None) -> BuildConfiguration | None:
        try:
            found = self.loader.get_configuration(configuration)
        except BuildConfigError as e:
            raise BuildManagerError(configuration, str(e)) from e

        if found is None and configuration is not None:
            available = ", ".join(self.loader.load_config().configurations.keys()) or "none"
            raise BuildManagerError(
                configuration,
                f"Unknown build configuration. Available configurations: {available}",
            )
        return found

    async def get_targets(self, configuration: str | None = None) -> list[str]:
        found = self._require_configuration(configuration)
        if found is None:
            logger.info("No active build configuration; offering no targets")
            return []

        if found.targets is not None:
            return list(found.targets)

        makefile = self.loader.resolve_directory(found) / self.makefile_name
        return await asyncio.to_thread(self._scan_makefile, configuration, makefile)

    def _scan_makefile(self, configuration: str | None, makefile: Path) -> list[str]:
        if not makefile.exists():
            logger.info(f"No {self.makefile_name} at {makefile}; offering no targets")
            return []

        try:
            content = makefile.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise BuildManagerError(configuration, f"Cannot read {makefile}: {e}") from e

        targets = scan_makefile_targets(content)
        logger.debug(f"Scanned {len(targets)} targets from {makefile}")
        return targets

    async def get_configuration_name(self, configuration: str | None = None) -> str | None:
        if configuration is not None:
            self._require_configuration(configuration)
            return configuration
        return self.loader.get_active_configuration_name()

    async def get_build_directory(self, configuration: str | None = None) -> str | None:
        found = self._require_configuration(configuration)
        if found is None:
            return None
        return str(self.loader.resolve_directory(found))
