"""mcp-maker - scaffold and extend TypeScript MCP server projects."""

__version__ = "0.1.4"
