"""MCP tool handlers, the actions an AI assistant can invoke."""

from __future__ import annotations

import json
from pathlib import Path
from typing import TYPE_CHECKING, Annotated, Any

from pydantic import Field

if TYPE_CHECKING:
    from fastmcp import FastMCP

    from mcpmaker.models import AddResult


def _add_result_payload(result: AddResult) -> dict[str, Any]:
    return {
        "component": result.component.value,
        "name": result.name,
        "files_created": [f.path.as_posix() for f in result.files_created],
        "registrations": [
            {
                "target": r.target.value,
                "path": str(r.path),
                "changed": r.changed,
                "created": r.created,
                "skipped": r.skipped,
                "note": r.note,
            }
            for r in result.registrations
        ],
    }


def register_tools(mcp: FastMCP) -> None:
    """Register all tool handlers on the given MCP server."""

    # ------------------------------------------------------------------
    # create_server_project
    # ------------------------------------------------------------------
    @mcp.tool(
        name="create_server_project",
        description=(
            "Create a new TypeScript MCP server project. "
            "Returns the project directory and any non-fatal warnings."
        ),
        tags={"project", "create"},
    )
    def create_server_project(
        project_name: Annotated[
            str, Field(description="Project name: lowercase letters, numbers and hyphens")
        ],
        output_dir: Annotated[str, Field(description="Directory to create the project in")] = ".",
        use_http_transport: Annotated[
            bool, Field(description="Use HTTP transport instead of stdio")
        ] = False,
        enable_cors: Annotated[
            bool, Field(description="Enable wildcard CORS (HTTP transport only)")
        ] = False,
        port: Annotated[int, Field(description="HTTP port", ge=1, le=65535)] = 8080,
        install_dependencies: Annotated[
            bool, Field(description="Run npm install and compile the project")
        ] = True,
        initialize_git: Annotated[bool, Field(description="Initialize a git repository")] = True,
    ) -> str:
        from mcpmaker.generator import create_server_project as _create
        from mcpmaker.models import ServerOptions

        options = ServerOptions(
            use_http_transport=use_http_transport,
            enable_cors=enable_cors,
            port=port,
            install_dependencies=install_dependencies,
            initialize_git=initialize_git,
        )
        result = _create(project_name, options, Path(output_dir))

        return json.dumps(
            {
                "project_dir": str(result.project_dir),
                "project_name": project_name,
                "transport": "http" if use_http_transport else "stdio",
                "files_created": [f.path.as_posix() for f in result.files_created],
                "installed": result.installed,
                "built": result.built,
                "warnings": result.warnings,
            }
        )

    # ------------------------------------------------------------------
    # add_tool / add_service / add_prompt
    # ------------------------------------------------------------------
    @mcp.tool(
        name="add_tool",
        description=(
            "Add a tool to an existing MCP server and register it in the tools index "
            "and the tool handler dispatch."
        ),
        tags={"component", "add"},
    )
    def add_tool(
        project_dir: Annotated[str, Field(description="Path to the MCP server project root")],
        name: Annotated[str, Field(description="Tool name, e.g. 'forecast'")],
        description: Annotated[
            str | None, Field(description="Tool description shown to MCP clients")
        ] = None,
    ) -> str:
        from mcpmaker.components import add_tool as _add

        return json.dumps(_add_result_payload(_add(Path(project_dir), name, description)))

    @mcp.tool(
        name="add_service",
        description=(
            "Add a service to an existing MCP server and export it from the services index."
        ),
        tags={"component", "add"},
    )
    def add_service(
        project_dir: Annotated[str, Field(description="Path to the MCP server project root")],
        name: Annotated[str, Field(description="Service name, e.g. 'weather-api'")],
        description: Annotated[str | None, Field(description="Service description")] = None,
    ) -> str:
        from mcpmaker.components import add_service as _add

        return json.dumps(_add_result_payload(_add(Path(project_dir), name, description)))

    @mcp.tool(
        name="add_prompt",
        description="Add a prompt to an existing MCP server and append it to the prompts index.",
        tags={"component", "add"},
    )
    def add_prompt(
        project_dir: Annotated[str, Field(description="Path to the MCP server project root")],
        name: Annotated[str, Field(description="Prompt name, e.g. 'summarize'")],
        description: Annotated[str | None, Field(description="Prompt description")] = None,
    ) -> str:
        from mcpmaker.components import add_prompt as _add

        return json.dumps(_add_result_payload(_add(Path(project_dir), name, description)))

    # ------------------------------------------------------------------
    # add_auth
    # ------------------------------------------------------------------
    @mcp.tool(
        name="add_auth",
        description="Add basic, token and OAuth authentication providers under src/auth.",
        tags={"component", "add", "auth"},
    )
    def add_auth(
        project_dir: Annotated[str, Field(description="Path to the MCP server project root")],
    ) -> str:
        from mcpmaker.components import add_auth as _add

        return json.dumps(_add_result_payload(_add(Path(project_dir))))

    # ------------------------------------------------------------------
    # validate_project
    # ------------------------------------------------------------------
    @mcp.tool(
        name="validate_project",
        description="Check that a directory has the structure of an MCP server project.",
        tags={"project", "validate"},
    )
    def validate_project(
        project_dir: Annotated[str, Field(description="Path to the project directory to check")],
    ) -> str:
        from mcpmaker.validator import ProjectValidator

        validator = ProjectValidator(Path(project_dir))
        results = validator.validate_all()

        return json.dumps(
            {
                "valid": all(results),
                "checks": [
                    {"passed": r.passed, "message": r.message, "marker": r.marker}
                    for r in results
                ],
            }
        )
