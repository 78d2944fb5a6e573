"""Tests for the common process and workspace variables."""

import os
from pathlib import Path

import pytest

from variables_mcp.engine import CommonVariableContribution, ContextKey


@pytest.fixture
def common_resolver(registry, resolver):
    registry.register_contribution(CommonVariableContribution())
    return resolver


@pytest.mark.asyncio
async def test_process_variables(common_resolver, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)

    result = await common_resolver.resolve("${cwd}|${userHome}|${pathSeparator}")

    assert result == f"{os.getcwd()}|{Path.home()}|{os.sep}"


@pytest.mark.asyncio
async def test_workspace_folder_from_path(common_resolver, tmp_path):
    context = {ContextKey.WORKSPACE: str(tmp_path / "project")}

    result = await common_resolver.resolve(
        "${workspaceFolder} ${workspaceFolderBasename}", context
    )

    assert result == f"{tmp_path / 'project'} project"


@pytest.mark.asyncio
async def test_workspace_folder_from_mapping(common_resolver, tmp_path):
    context = {"workspaceContext": {"root": tmp_path}}

    assert await common_resolver.resolve("${workspaceFolder}", context) == str(tmp_path)


@pytest.mark.asyncio
async def test_workspace_variables_need_workspace_context(common_resolver):
    result = await common_resolver.resolve("${workspaceFolder}")

    assert result == "${workspaceFolder}"


@pytest.mark.asyncio
async def test_workspace_payload_without_root(common_resolver):
    context = {ContextKey.WORKSPACE: {"name": "no root here"}}

    assert await common_resolver.resolve("${workspaceFolderBasename}", context) == (
        "${workspaceFolderBasename}"
    )
