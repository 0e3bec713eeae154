"""CLI interface for mcp-maker."""

import logging
from collections.abc import Callable
from pathlib import Path
from typing import Annotated

import typer
from rich import print as rprint
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from mcpmaker import __version__
from mcpmaker.components import add_auth, add_prompt, add_service, add_tool, default_description
from mcpmaker.errors import McpMakerError
from mcpmaker.generator import create_server_project
from mcpmaker.help_text import display_help
from mcpmaker.interactive_prompts import prompt_for_description, prompt_for_name
from mcpmaker.models import AddResult, ComponentKind, CreateResult, ServerOptions
from mcpmaker.user_config import (
    apply_user_defaults,
    coerce_config_value,
    get_config_path,
    get_default_config_template,
    load_user_config,
    save_user_config,
)
from mcpmaker.validator import ProjectValidator, validate_project

app = typer.Typer(
    name="mcp-maker",
    help="CLI utility to create and manage TypeScript MCP servers.",
    invoke_without_command=True,
)

create_app = typer.Typer(
    name="create",
    help="Create new components.",
    no_args_is_help=True,
)
app.add_typer(create_app, name="create")

add_app = typer.Typer(
    name="add",
    help="Add new components to an existing MCP server.",
    no_args_is_help=True,
)
app.add_typer(add_app, name="add")

config_app = typer.Typer(
    name="config",
    help="Manage user-level default preferences.",
    no_args_is_help=True,
)
app.add_typer(config_app, name="config")

console = Console()

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(levelname)s: %(message)s",
)
logger = logging.getLogger(__name__)

_state = {"verbose": False}


def _version_callback(value: bool) -> None:
    if value:
        rprint(f"mcp-maker {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    ctx: typer.Context,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable verbose output")] = False,
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            "-V",
            callback=_version_callback,
            is_eager=True,
            help="Show the version and exit",
        ),
    ] = False,
) -> None:
    """CLI utility to create and manage TypeScript MCP servers."""
    _state["verbose"] = verbose
    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    if ctx.invoked_subcommand is None:
        rprint("[blue]Welcome to mcp-maker![/blue]")
        rprint("[dim]Run 'mcp-maker help' or 'mcp-maker --help' to see available commands[/dim]")
        display_help(console=console)


def _handle_errors(action: Callable[[], None]) -> None:
    """Run ``action``, turning errors into a red message and exit code 1."""
    try:
        action()
    except McpMakerError as e:
        rprint(f"[red]Error: {e}[/red]")
        raise typer.Exit(1) from None
    except Exception as e:
        rprint(f"[red]Unexpected error: {e}[/red]")
        if _state["verbose"]:
            import traceback

            traceback.print_exc()
        raise typer.Exit(1) from None


@create_app.command("server")
def create_server_cmd(
    name: Annotated[str | None, typer.Argument(help="Name of the project to create")] = None,
    http: Annotated[
        bool | None,
        typer.Option("--http/--stdio", help="Use HTTP transport instead of default stdio"),
    ] = None,
    cors: Annotated[
        bool | None,
        typer.Option("--cors/--no-cors", help="Enable CORS with wildcard (*) access"),
    ] = None,
    port: Annotated[
        int | None,
        typer.Option("--port", min=1, max=65535, help="HTTP port (only valid with --http)"),
    ] = None,
    install: Annotated[
        bool | None,
        typer.Option("--install/--no-install", help="Run npm install and build steps"),
    ] = None,
    init_git: Annotated[
        bool | None, typer.Option("--git/--no-git", help="Initialize git repository")
    ] = None,
    output_dir: Annotated[
        Path, typer.Option("--output", "-o", help="Output directory for the project")
    ] = Path("."),
) -> None:
    """Create a new MCP server project."""

    def action() -> None:
        project_name = name or prompt_for_name("MCP server project")

        merged = apply_user_defaults(
            {
                "use_http_transport": http,
                "enable_cors": cors,
                "port": port,
                "install_dependencies": install,
                "initialize_git": init_git,
            }
        )
        options = ServerOptions(**merged)
        if not options.use_http_transport and (port is not None or cors):
            rprint("[yellow]--port and --cors only apply with --http; ignoring them[/yellow]")

        rprint(f"[blue]Creating project '{project_name}'...[/blue]")
        result = create_server_project(project_name, options, output_dir.absolute())
        _display_create_result(project_name, options, result)

    _handle_errors(action)


def _display_create_result(name: str, options: ServerOptions, result: CreateResult) -> None:
    for warning in result.warnings:
        rprint(f"[yellow]⚠ {warning}[/yellow]")

    steps = [f"cd {name}"]
    if not result.installed:
        steps += ["npm install", "npm run build"]
    elif not result.built:
        steps.append("npm run build")
    steps += ["mcp-maker add tool <tool-name>", "mcp-maker add service <service-name>"]
    numbered = "\n".join(f"  {i}. {step}" for i, step in enumerate(steps, start=1))

    transport = f"HTTP on port {options.port}" if options.use_http_transport else "stdio"
    rprint(
        Panel.fit(
            f"[green]✓ Project '{name}' created successfully![/green]\n\n"
            f"Location: [cyan]{result.project_dir}[/cyan]\n"
            f"Transport: {transport}\n\n"
            f"[dim]Next steps:[/dim]\n{numbered}",
            title="Success",
        )
    )


def _display_add_result(result: AddResult, project_dir: Path) -> None:
    label = result.component.value.capitalize()
    if result.component == ComponentKind.AUTH:
        rprint("[green]Authentication setup completed successfully![/green]")
    else:
        rprint(f"[green]{label} {result.name} created successfully![/green]")

    rprint("[blue]Files created:[/blue]")
    for generated in result.files_created:
        rprint(f"[blue]- {generated.path.as_posix()}[/blue]")

    for outcome in result.registrations:
        relative = outcome.path.relative_to(project_dir).as_posix()
        if outcome.skipped:
            rprint(f"[yellow]⚠ Skipped {relative}: {outcome.note}[/yellow]")
            rprint("[yellow]  Register it manually.[/yellow]")
        elif outcome.created:
            rprint(f"[blue]Created {relative}[/blue]")
        elif outcome.changed:
            rprint(f"[blue]Updated {relative}[/blue]")
        else:
            rprint(f"[dim]{relative} already up to date[/dim]")


def _add_named_component(
    kind: ComponentKind,
    name: str | None,
    description: str | None,
    project_dir: Path,
) -> None:
    adders = {
        ComponentKind.TOOL: add_tool,
        ComponentKind.SERVICE: add_service,
        ComponentKind.PROMPT: add_prompt,
    }

    def action() -> None:
        root = project_dir.absolute()
        validate_project(root)
        component_name = name or prompt_for_name(kind.value)
        component_description = description or prompt_for_description(
            kind.value, default_description(kind, component_name)
        )
        result = adders[kind](root, component_name, component_description)
        _display_add_result(result, root)

    _handle_errors(action)


_DescriptionOption = Annotated[
    str | None, typer.Option("--description", "-d", help="Description (prompted if omitted)")
]
_ProjectDirOption = Annotated[
    Path, typer.Option("--project-dir", "-C", help="Project root (defaults to current directory)")
]


@add_app.command("tool")
def add_tool_cmd(
    name: Annotated[str | None, typer.Argument(help="Tool name")] = None,
    description: _DescriptionOption = None,
    project_dir: _ProjectDirOption = Path("."),
) -> None:
    """Add a new tool to an existing MCP server."""
    _add_named_component(ComponentKind.TOOL, name, description, project_dir)


@add_app.command("service")
def add_service_cmd(
    name: Annotated[str | None, typer.Argument(help="Service name")] = None,
    description: _DescriptionOption = None,
    project_dir: _ProjectDirOption = Path("."),
) -> None:
    """Add a new service to an existing MCP server."""
    _add_named_component(ComponentKind.SERVICE, name, description, project_dir)


@add_app.command("prompt")
def add_prompt_cmd(
    name: Annotated[str | None, typer.Argument(help="Prompt name")] = None,
    description: _DescriptionOption = None,
    project_dir: _ProjectDirOption = Path("."),
) -> None:
    """Add a new prompt to an existing MCP server."""
    _add_named_component(ComponentKind.PROMPT, name, description, project_dir)


@add_app.command("auth")
def add_auth_cmd(project_dir: _ProjectDirOption = Path(".")) -> None:
    """Add authentication to an existing MCP server."""

    def action() -> None:
        root = project_dir.absolute()
        rprint("[blue]Adding all authentication types...[/blue]")
        result = add_auth(root)
        _display_add_result(result, root)
        rprint("[yellow]\nNext steps:[/yellow]")
        rprint("[yellow]1. Configure your authentication in your application[/yellow]")
        rprint("[yellow]2. Use the auth providers in your services or tools[/yellow]")

    _handle_errors(action)


@app.command("help")
def help_cmd(
    command: Annotated[str | None, typer.Argument(help="Command name")] = None,
    subcommand: Annotated[str | None, typer.Argument(help="Subcommand name")] = None,
) -> None:
    """Display help for a command."""
    display_help(command, subcommand, console=console)


@app.command("validate")
def validate_cmd(
    project_dir: Annotated[Path, typer.Argument(help="Path to the project root")] = Path("."),
) -> None:
    """Check that a directory is an MCP server project."""
    validator = ProjectValidator(project_dir.absolute())
    results = validator.validate_all()

    table = Table(title=f"Project checks: {project_dir}")
    table.add_column("Marker", style="cyan")
    table.add_column("Status")
    for result in results:
        status = "[green]✓ found[/green]" if result.passed else "[red]✗ missing[/red]"
        table.add_row(result.marker, status)
    console.print(table)

    if not validator.is_valid():
        rprint("[red]Not an MCP server project.[/red]")
        raise typer.Exit(1)
    rprint("[green]✓ MCP server project structure is valid[/green]")


@config_app.command("show")
def config_show_cmd() -> None:
    """Show current user configuration."""
    config_path = get_config_path()
    user_cfg = load_user_config()

    if not user_cfg:
        rprint(f"[yellow]No user config found at {config_path}[/yellow]")
        rprint("[dim]Run 'mcp-maker config init' to create one.[/dim]")
        return

    rprint(f"[cyan]Config file:[/cyan] {config_path}\n")
    table = Table(title="User Defaults")
    table.add_column("Setting", style="cyan")
    table.add_column("Value")

    for key, value in user_cfg.items():
        table.add_row(key, str(value))

    console.print(table)


@config_app.command("init")
def config_init_cmd(
    force: Annotated[bool, typer.Option("--force", "-f", help="Overwrite existing config")] = False,
) -> None:
    """Create a default user configuration file."""
    config_path = get_config_path()

    if config_path.exists() and not force:
        rprint(f"[yellow]Config already exists at {config_path}[/yellow]")
        rprint("[dim]Use --force to overwrite.[/dim]")
        raise typer.Exit(1)

    saved_path = save_user_config(get_default_config_template())
    rprint(f"[green]Created default config at {saved_path}[/green]")
    rprint("[dim]Edit this file to customize your defaults.[/dim]")


@config_app.command("set")
def config_set_cmd(
    key: Annotated[str, typer.Argument(help="Config key to set")],
    value: Annotated[str, typer.Argument(help="Value to set")],
) -> None:
    """Set a single configuration value."""
    if key not in get_default_config_template():
        valid = ", ".join(get_default_config_template())
        rprint(f"[red]Error: unknown config key '{key}'. Valid keys: {valid}[/red]")
        raise typer.Exit(1)

    try:
        coerced = coerce_config_value(key, value)
    except ValueError as e:
        rprint(f"[red]Error: {e}[/red]")
        raise typer.Exit(1) from None

    user_cfg = load_user_config()
    user_cfg[key] = coerced
    save_user_config(user_cfg)
    rprint(f"[green]Set {key} = {coerced}[/green]")


@config_app.command("path")
def config_path_cmd() -> None:
    """Print the path to the user config file."""
    rprint(str(get_config_path()))


def main() -> None:
    """Main entry point."""
    app()


if __name__ == "__main__":
    main()
