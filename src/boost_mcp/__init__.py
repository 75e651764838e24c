"""boost-mcp: MCP server exposing application introspection tools over stdio."""

__version__ = "1.0.0"
