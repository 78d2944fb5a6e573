"""Common environment and workspace variables.

Variables:
    - cwd: Current working directory of the server process
    - userHome: Home directory of the current user
    - pathSeparator: OS path separator ("/" or "\\")
    - workspaceFolder: Workspace root (requires the ``workspaceContext`` key)
    - workspaceFolderBasename: Last path segment of the workspace root
"""

import os
from collections.abc import Mapping
from pathlib import Path

from .registry import VariableRegistry
from .variable import ContextKey, Variable, VariableContext, VariableContribution


def workspace_root(context: VariableContext) -> str | None:
    """Workspace root from a ``workspaceContext`` payload (path or {"root": path})."""
    payload = context[ContextKey.WORKSPACE]
    if isinstance(payload, Mapping):
        payload = payload.get("root")
    if isinstance(payload, (str, os.PathLike)):
        return str(Path(payload).expanduser())
    return None


def workspace_basename(context: VariableContext) -> str | None:
    root = workspace_root(context)
    return Path(root).name if root is not None else None


class CommonVariableContribution(VariableContribution):
    """Registers process and workspace variables."""

    def register_variables(self, registry: VariableRegistry) -> None:
        registry.register_variable(
            Variable(
                name="cwd",
                description="Current working directory of the server process",
                resolve=lambda context: os.getcwd(),
            )
        )
        registry.register_variable(
            Variable(
                name="userHome",
                description="Home directory of the current user",
                resolve=lambda context: str(Path.home()),
            )
        )
        registry.register_variable(
            Variable(
                name="pathSeparator",
                description="Path separator of the operating system",
                resolve=lambda context: os.sep,
            )
        )
        registry.register_variable(
            Variable(
                name="workspaceFolder",
                description="Root directory of the workspace",
                contexts=[ContextKey.WORKSPACE],
                resolve=workspace_root,
            )
        )
        registry.register_variable(
            Variable(
                name="workspaceFolderBasename",
                description="Name of the workspace root directory",
                contexts=[ContextKey.WORKSPACE],
                resolve=workspace_basename,
            )
        )
