"""FastMCP server initialization for variables-mcp.

This module initializes the MCP server and manages shared resources via lifespan context.
All tool implementations are in the tools module.

Following the official Anthropic Python SDK patterns:
- Lifespan context manager for resource initialization and cleanup
- Context injection for tool access to shared resources
- FastMCP server with stdio transport
"""

import logging
import os
import sys
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from mcp.server.fastmcp import FastMCP

from .context import AppContext, AppContextType
from .engine import (
    BuildConfigLoader,
    ConfiguredBuildManager,
    ContextualQuickPick,
    VariableResolverService,
    create_default_registry,
)

logger = logging.getLogger(__name__)

# =============================================================================
# Shared Resources and Lifespan Management
# =============================================================================


def plugins_enabled() -> bool:
    """Whether third-party contributions are discovered from entry points.

    Reads VARIABLES_PLUGINS_ENABLED environment variable (default: true).
    """
    return os.getenv("VARIABLES_PLUGINS_ENABLED", "true").lower() == "true"


def create_app_context(build_config_loader: BuildConfigLoader | None = None) -> AppContext:
    """Build the shared resources used by every tool call.

    Args:
        build_config_loader: Loader to use (default: environment/standard location)

    Returns:
        AppContext with registry, resolver and build manager wired together

    Raises:
        BuildConfigError: If the build configuration file is invalid
    """
    loader = build_config_loader or BuildConfigLoader()
    build_config = loader.load_config()
    logger.info(f"Build config: {len(build_config.configurations)} configurations")

    build_manager = ConfiguredBuildManager(loader)

    # Interactive variables ask whichever client is resolving them (bound per tool call)
    registry = create_default_registry(build_manager, ContextualQuickPick())

    if plugins_enabled():
        discovered = registry.discover_entry_points()
        if discovered:
            logger.info(f"Loaded {discovered} variable contributions from entry points")
    else:
        logger.info("Variable contribution plugins disabled")

    logger.info(f"Registered {len(registry)} variables")

    return AppContext(
        registry=registry,
        resolver=VariableResolverService(registry),
        build_manager=build_manager,
        build_config_loader=loader,
    )


@asynccontextmanager
async def app_lifespan(_server: FastMCP) -> AsyncIterator[AppContext]:
    """Manage application lifecycle with resource initialization and cleanup.

    Environment Variables:
        VARIABLES_BUILD_CONFIG: Path to the build configuration YAML file
        VARIABLES_PLUGINS_ENABLED: Discover contributions from entry points (default: true)

    Args:
        _server: FastMCP server instance (unused, required by FastMCP signature)

    Yields:
        AppContext with initialized resources
    """
    logger.info("Initializing MCP server resources...")

    app_context = create_app_context()

    try:
        yield app_context
    finally:
        # Registry and resolver are in-memory only, nothing to close
        logger.info("Shutting down MCP server...")


# Initialize MCP server with lifespan management
# Following Python MCP naming convention: {service}_mcp
mcp = FastMCP("variables_mcp", lifespan=app_lifespan)


# =============================================================================
# Server Entry Point
# =============================================================================


def configure_logging() -> int:
    """Send logs to stderr at the level named by VARIABLES_LOG_LEVEL (default: INFO).

    stdout carries the MCP protocol, so nothing else may write there.

    Returns:
        The logging level applied
    """
    level_name = os.getenv("VARIABLES_LOG_LEVEL", "INFO").upper()
    level = logging.getLevelNamesMapping().get(level_name, logging.INFO)

    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )
    if level_name not in logging.getLevelNamesMapping():
        logger.warning(f"Invalid VARIABLES_LOG_LEVEL '{level_name}', using INFO")
    return level


def main() -> None:
    """Run the server over stdio (``python -m variables_mcp`` or ``variables-mcp``)."""
    configure_logging()

    try:
        mcp.run()
    except KeyboardInterrupt:
        logger.info("Interrupted, shutting down")


__all__ = [
    "mcp",
    "main",
    "configure_logging",
    "AppContext",
    "AppContextType",
    "create_app_context",
]
