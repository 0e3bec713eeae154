"""MCP server for mcp-maker, exposing server scaffolding via Model Context Protocol."""

from fastmcp import FastMCP


def create_server() -> FastMCP:
    """Create and configure the FastMCP server instance."""
    mcp = FastMCP(
        name="mcp-maker",
        instructions=(
            "MCP server for mcp-maker, a scaffolding tool for TypeScript MCP servers. "
            "Use tools to create a new server project, add tools, services, prompts and "
            "authentication to an existing one, and check a project's structure."
        ),
    )

    from mcpmaker.mcp_server.tools import register_tools

    register_tools(mcp)

    return mcp


def main() -> None:
    """Entry point for the mcp-maker-mcp CLI command."""
    server = create_server()
    server.run()
