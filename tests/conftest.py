"""Shared test configuration for variables-mcp tests.

Provides:
- Isolated registries and resolvers (no shared global state between tests)
- Fake build manager and scripted quick pick collaborators
- A mock MCP context for calling tools directly
"""

from pathlib import Path
from unittest.mock import MagicMock

import pytest
from test_utils import FakeBuildManager, ScriptedQuickPick

from variables_mcp.context import AppContext
from variables_mcp.engine import (
    BuildConfigLoader,
    ConfiguredBuildManager,
    ContextualQuickPick,
    VariableRegistry,
    VariableResolverService,
    create_default_registry,
)


@pytest.fixture
def registry() -> VariableRegistry:
    """Empty registry for a single test."""
    return VariableRegistry()


@pytest.fixture
def resolver(registry: VariableRegistry) -> VariableResolverService:
    """Resolver reading the test's registry."""
    return VariableResolverService(registry)


@pytest.fixture
def build_manager() -> FakeBuildManager:
    """Build manager offering debug and release targets."""
    return FakeBuildManager(targets=["debug", "release"])


@pytest.fixture
def quick_pick() -> ScriptedQuickPick:
    """Quick pick choosing the first offered item."""
    return ScriptedQuickPick()


@pytest.fixture
def build_config_file(tmp_path: Path) -> Path:
    """Build config with an explicit-target and a Makefile-scanned configuration."""
    (tmp_path / "build" / "debug").mkdir(parents=True)
    (tmp_path / "build" / "debug" / "Makefile").write_text(
        ".PHONY: all clean\n"
        "all: app\n"
        "app: main.o util.o\n"
        "\t$(CC) -o $@ $^\n"
        "%.o: %.c\n"
        "\t$(CC) -c $<\n"
        "clean:\n"
        "\trm -f app *.o\n",
        encoding="utf-8",
    )

    config_file = tmp_path / "build-config.yml"
    config_file.write_text(
        'version: "1.0"\n'
        "configurations:\n"
        "  debug:\n"
        "    directory: build/debug\n"
        '    description: "Unoptimized build with symbols"\n'
        "  release:\n"
        "    directory: build/release\n"
        "    targets: [all, install, package]\n"
        "active_configuration: debug\n",
        encoding="utf-8",
    )
    return config_file


@pytest.fixture
def mock_context(build_config_file: Path):
    """Create mock MCP context with AppContext for unit testing MCP tools.

    Wires the real registry, resolver and configuration-backed build manager;
    interactive prompts go through mock_ctx.elicit.
    """
    loader = BuildConfigLoader(build_config_file)
    build_manager = ConfiguredBuildManager(loader)
    registry = create_default_registry(build_manager, ContextualQuickPick())

    app_context = AppContext(
        registry=registry,
        resolver=VariableResolverService(registry),
        build_manager=build_manager,
        build_config_loader=loader,
    )

    mock_ctx = MagicMock()
    mock_ctx.request_context.lifespan_context = app_context

    return mock_ctx
