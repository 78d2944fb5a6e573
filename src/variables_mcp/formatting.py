"""Shared formatting utilities for MCP tool responses.

Following MCP best practices:
- Markdown format: Human-readable with headers, lists, and formatting
- JSON format: Machine-readable structured data for programmatic access
"""

from typing import Any

from .engine import VARIABLE_PATTERN, Variable


def variable_to_dict(variable: Variable) -> dict[str, Any]:
    """Serialize a variable's metadata (the resolve function is never included)."""
    return {
        "name": variable.name,
        "description": variable.description,
        "contexts": list(variable.contexts or []),
        "token": f"${{{variable.name}}}",
    }


def format_variable_list_markdown(variables: list[Variable]) -> str:
    """Format variable list as markdown.

    Args:
        variables: Registered variables

    Returns:
        Markdown-formatted variable list with headers
    """
    if not variables:
        return "No variables registered"

    lines = [f"## Available Variables ({len(variables)})", ""]
    for variable in sorted(variables, key=lambda v: v.name):
        line = f"- **${{{variable.name}}}**"
        if variable.description:
            line += f": {variable.description}"
        if variable.contexts:
            line += f" (requires: {', '.join(variable.contexts)})"
        lines.append(line)

    return "\n".join(lines)


def find_unresolved_tokens(text: str | list[str]) -> list[str]:
    """List the ${...} tokens still present in resolved output, in order, once each."""
    values = [text] if isinstance(text, str) else text
    tokens: dict[str, None] = {}
    for value in values:
        for match in VARIABLE_PATTERN.finditer(value):
            tokens.setdefault(match.group(0), None)
    return list(tokens)
