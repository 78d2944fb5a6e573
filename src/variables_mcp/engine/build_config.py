"""Build configuration management for the build variables.

Build configurations name the build directories a project can be built in and,
optionally, the targets each one offers. They back the ``build.*`` variables.

Configuration file location priority:
1. Explicit path passed to BuildConfigLoader
2. VARIABLES_BUILD_CONFIG environment variable
3. Standard location: ~/.variables-mcp/build-config.yml
4. Empty configuration (if no config file found)

Example config file:
```yaml
version: "1.0"

configurations:
  debug:
    directory: build/debug
    description: "Unoptimized build with symbols"

  release:
    directory: build/release
    targets: [all, install, package]

active_configuration: debug
```

Configurations without ``targets`` get them scanned from the Makefile in their
directory (see ConfiguredBuildManager). Relative directories are resolved
against the directory containing the config file.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from .exceptions import BuildConfigError

logger = logging.getLogger(__name__)

# ===========================================================================
# Configuration Models
# ===========================================================================


class BuildConfiguration(BaseModel):
    """A named build configuration."""

    directory: str = Field(description="Build directory (relative to the config file)")
    targets: list[str] | None = Field(
        default=None,
        description="Explicit target list; scanned from the Makefile when omitted",
    )
    description: str | None = Field(default=None, description="Human-readable description")


class BuildConfig(BaseModel):
    """Root build configuration model."""

    version: str = Field(default="1.0", description="Configuration schema version")
    configurations: dict[str, BuildConfiguration] = Field(
        default_factory=dict,
        description="Build configurations by name",
    )
    active_configuration: str | None = Field(
        default=None,
        description="Configuration used when a build task does not name one",
    )

    @field_validator("active_configuration")
    @classmethod
    def validate_active_configuration(cls, v: str | None, info: Any) -> str | None:
        """Validate that active_configuration references an existing configuration."""
        if v is not None:
            configurations = info.data.get("configurations", {})
            if v not in configurations:
                raise ValueError(
                    f"active_configuration '{v}' not found in configurations. "
                    f"Available configurations: {', '.join(configurations.keys())}"
                )
        return v


# ===========================================================================
# Configuration Loader
# ===========================================================================


class BuildConfigLoader:
    """Loader for build configuration from YAML file.

    Usage:
        ```python
        loader = BuildConfigLoader()
        config = loader.load_config()

        debug = loader.get_configuration("debug")
        directory = loader.resolve_directory(debug)
        ```

    The loaded config is cached; call load_config() once during startup.
    """

    def __init__(self, config_path: str | Path | None = None):
        """Initialize config loader with optional explicit path.

        Args:
            config_path: Explicit path to config file (optional).
                If not provided, uses environment variable or standard location.
        """
        self._config: BuildConfig | None = None
        self._explicit_path = Path(config_path) if config_path else None
        self._base_dir: Path = Path.cwd()

    def get_config_path(self) -> Path | None:
        """Determine config file path using priority order.

        Returns:
            Path to config file, or None if file doesn't exist
        """
        if self._explicit_path:
            if self._explicit_path.exists():
                return self._explicit_path
            logger.warning(f"Explicit build config path does not exist: {self._explicit_path}")
            return None

        env_path_str = os.getenv("VARIABLES_BUILD_CONFIG")
        if env_path_str:
            env_path = Path(env_path_str).expanduser()
            if env_path.exists():
                return env_path
            logger.warning(f"VARIABLES_BUILD_CONFIG path does not exist: {env_path}")
            return None

        standard_path = Path.home() / ".variables-mcp" / "build-config.yml"
        if standard_path.exists():
            return standard_path

        return None

    def load_config(self) -> BuildConfig:
        """Load and validate build configuration from file.

        Returns:
            Validated BuildConfig instance (empty if no config file found)

        Raises:
            BuildConfigError: If the config file cannot be parsed or fails validation
        """
        if self._config is not None:
            return self._config

        config_path = self.get_config_path()

        if config_path is None:
            logger.info("No build config file found. Build variables will offer no targets.")
            self._config = BuildConfig()
            return self._config

        logger.info(f"Loading build config from: {config_path}")

        try:
            with open(config_path, encoding="utf-8") as f:
                raw_config = yaml.safe_load(f)

            if raw_config is None:
                raw_config = {}
            if not isinstance(raw_config, dict):
                raise ValueError("Config file must contain a YAML dictionary")

            config = BuildConfig(**raw_config)

        except (yaml.YAMLError, ValidationError, ValueError) as e:
            raise BuildConfigError(str(config_path), str(e)) from e

        logger.info(f"Loaded build config: {len(config.configurations)} configurations")
        if config.active_configuration:
            logger.info(f"Active build configuration: {config.active_configuration}")

        self._base_dir = config_path.parent
        self._config = config
        return config

    def get_configuration(self, name: str | None = None) -> BuildConfiguration | None:
        """Get a configuration by name (None selects the active configuration).

        Returns:
            The configuration, or None if it does not exist
        """
        config = self.load_config()
        if name is None:
            name = config.active_configuration
            if name is None:
                return None
        return config.configurations.get(name)

    def get_active_configuration_name(self) -> str | None:
        """Get the active configuration name from config."""
        return self.load_config().active_configuration

    def resolve_directory(self, configuration: BuildConfiguration) -> Path:
        """Absolute build directory of a configuration."""
        self.load_config()
        directory = Path(configuration.directory).expanduser()
        if not directory.is_absolute():
            directory = self._base_dir / directory
        return directory
