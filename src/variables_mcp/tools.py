"""MCP tool implementations for variable resolution.

Following official Anthropic MCP Python SDK patterns:
- Tool functions decorated with @mcp.tool()
- Flat parameter signatures with Annotated types for validation
- Async functions for all tools
- Clear docstrings (become tool descriptions)
"""

import json
from typing import Annotated, Any, Literal

from mcp.types import ToolAnnotations
from pydantic import Field

from .context import AppContextType
from .engine import BuildManagerError, ElicitationQuickPick, active_quick_pick
from .formatting import find_unresolved_tokens, format_variable_list_markdown, variable_to_dict
from .server import mcp

CONTEXT_UNAVAILABLE = {
    "status": "failure",
    "error": "Server context not available. Tool requires context to access resources.",
}


@mcp.tool(
    annotations=ToolAnnotations(
        title="Resolve Variables",
        readOnlyHint=True,
        destructiveHint=False,
        idempotentHint=False,  # Interactive variables may ask the user again
        openWorldHint=False,
    )
)
async def resolve_variables(
    text: Annotated[
        str | list[str],
        Field(description="String or list of strings containing ${name} tokens"),
    ],
    context: Annotated[
        dict[str, Any] | None,
        Field(
            description=(
                "Resolution context, e.g. "
                '{"buildTaskContext": {"buildConfiguration": "debug"}, '
                '"workspaceContext": {"root": "/path/to/project"}}'
            )
        ),
    ] = None,
    *,
    ctx: AppContextType,
) -> dict[str, Any]:
    """Expand ${name} variables in a string or list of strings. Unresolved tokens are kept."""
    if ctx is None:
        return dict(CONTEXT_UNAVAILABLE)

    resolver = ctx.request_context.lifespan_context.resolver

    # Interactive variables (build.target) ask this client
    token = active_quick_pick.set(ElicitationQuickPick(ctx))
    try:
        if isinstance(text, str):
            result: str | list[str] = await resolver.resolve(text, context)
        else:
            result = await resolver.resolve_array(text, context)
    finally:
        active_quick_pick.reset(token)

    return {
        "status": "success",
        "result": result,
        "unresolved": find_unresolved_tokens(result),
    }


@mcp.tool(
    annotations=ToolAnnotations(
        title="List Variables",
        readOnlyHint=True,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=False,
    )
)
async def list_variables(
    format: Annotated[
        Literal["json", "markdown"],
        Field(description="Response format"),
    ] = "json",
    *,
    ctx: AppContextType,
) -> str:
    """List registered variables with their descriptions and required context keys."""
    if ctx is None:
        return json.dumps(CONTEXT_UNAVAILABLE)

    variables = ctx.request_context.lifespan_context.registry.get_variables()

    if format == "markdown":
        return format_variable_list_markdown(variables)

    return json.dumps([variable_to_dict(v) for v in variables], indent=2)


@mcp.tool(
    annotations=ToolAnnotations(
        title="Get Build Targets",
        readOnlyHint=True,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=False,
    )
)
async def get_build_targets(
    configuration: Annotated[
        str | None,
        Field(description="Build configuration name (omit for the active configuration)"),
    ] = None,
    *,
    ctx: AppContextType,
) -> dict[str, Any]:
    """List the targets offered by a build configuration."""
    if ctx is None:
        return dict(CONTEXT_UNAVAILABLE)

    build_manager = ctx.request_context.lifespan_context.build_manager

    try:
        targets = await build_manager.get_targets(configuration)
    except BuildManagerError as e:
        return {
            "status": "failure",
            "configuration": configuration,
            "error": str(e),
        }

    return {
        "status": "success",
        "configuration": await build_manager.get_configuration_name(configuration),
        "targets": targets,
    }
