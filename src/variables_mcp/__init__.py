"""variables-mcp: expand ${variable} placeholders for developer tooling."""

__version__ = "0.1.0"
