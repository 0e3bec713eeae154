"""GNU-style help pages for the ``help`` command."""

from dataclasses import dataclass, field

from rich.console import Console
from rich.markup import escape

PROGRAM = "mcp-maker"
_COLUMN = 22


@dataclass
class HelpPage:
    """One help page: NAME, SYNOPSIS, DESCRIPTION and optional sections."""

    name: str
    summary: str
    synopsis: str
    description: str
    arguments: list[tuple[str, str]] = field(default_factory=list)
    options: list[tuple[str, str]] = field(default_factory=list)
    commands: list[tuple[str, str]] = field(default_factory=list)
    examples: list[tuple[str, str]] = field(default_factory=list)


_HELP_OPTION = ("-h, --help", "display help information")

MAIN_PAGE = HelpPage(
    name=PROGRAM,
    summary="CLI utility to create and manage TypeScript MCP servers",
    synopsis=f"{PROGRAM} [OPTION]... [COMMAND]",
    description="A command-line utility to create and manage TypeScript MCP servers.",
    options=[_HELP_OPTION],
    commands=[
        ("create", "Create new components"),
        ("add", "Add components to an existing MCP server"),
        ("validate", "Check that a directory is an MCP server project"),
        ("config", "Manage user-level default preferences"),
        ("help", "Display help for a command"),
    ],
    examples=[
        (f"{PROGRAM} create server my-server", 'Create a new MCP server project named "my-server"'),
        (f"{PROGRAM} add tool my-tool", 'Add a new tool named "my-tool" to an existing MCP server'),
        (
            f"{PROGRAM} add service my-service",
            'Add a new service named "my-service" to an existing MCP server',
        ),
    ],
)

CREATE_PAGE = HelpPage(
    name=f"{PROGRAM} create",
    summary="Create new components",
    synopsis=f"{PROGRAM} create [OPTION]... COMMAND",
    description="Create new components for MCP servers",
    options=[_HELP_OPTION],
    commands=[("server", "Create a new MCP server project")],
    examples=[
        (f"{PROGRAM} create server my-server", 'Create a new MCP server project named "my-server"'),
        (
            f"{PROGRAM} create server my-server --http --port 3000",
            "Create a new MCP server with HTTP transport on port 3000",
        ),
    ],
)

CREATE_SERVER_PAGE = HelpPage(
    name=f"{PROGRAM} create server",
    summary="Create a new MCP server project",
    synopsis=f"{PROGRAM} create server [OPTION]... [NAME]",
    description="Create a new MCP server project with a predefined structure",
    arguments=[("NAME", "Name of the project (optional, will prompt if not provided)")],
    options=[
        _HELP_OPTION,
        ("--http", "use HTTP transport instead of default stdio"),
        ("--cors", "enable CORS with wildcard (*) access"),
        ("--port <number>", "specify HTTP port (only valid with --http)"),
        ("--no-install", "skip npm install and build steps"),
        ("--no-git", "skip git repository initialization"),
        ("-o, --output <dir>", "directory to create the project in"),
    ],
    examples=[
        (f"{PROGRAM} create server my-server", "Create a new MCP server with stdio transport"),
        (
            f"{PROGRAM} create server my-server --http --port 3000",
            "Create with HTTP transport on port 3000",
        ),
        (
            f"{PROGRAM} create server my-server --http --cors",
            "Create with HTTP transport and CORS enabled",
        ),
        (
            f"{PROGRAM} create server my-server --no-install",
            "Create without installing dependencies",
        ),
    ],
)

ADD_PAGE = HelpPage(
    name=f"{PROGRAM} add",
    summary="Add components to an existing MCP server",
    synopsis=f"{PROGRAM} add [OPTION]... COMMAND",
    description="Add new components to an existing MCP server",
    options=[_HELP_OPTION],
    commands=[
        ("tool", "Add a new tool to an existing MCP server"),
        ("service", "Add a new service to an existing MCP server"),
        ("prompt", "Add a new prompt to an existing MCP server"),
        ("auth", "Add authentication to an existing MCP server"),
    ],
    examples=[
        (f"{PROGRAM} add tool my-tool", 'Add a new tool named "my-tool" to an existing MCP server'),
        (
            f"{PROGRAM} add service my-service",
            'Add a new service named "my-service" to an existing MCP server',
        ),
    ],
)


def _named_component_page(kind: str) -> HelpPage:
    return HelpPage(
        name=f"{PROGRAM} add {kind}",
        summary=f"Add a new {kind} to an existing MCP server",
        synopsis=f"{PROGRAM} add {kind} [OPTION]... [NAME]",
        description=f"Add a new {kind} to an existing MCP server",
        arguments=[
            ("NAME", f"Name of the {kind} (optional, will prompt if not provided)"),
        ],
        options=[
            _HELP_OPTION,
            ("--description <text>", f"description of the {kind} (prompted if omitted)"),
            ("-C, --project-dir <dir>", "project root (defaults to the current directory)"),
        ],
        examples=[
            (
                f"{PROGRAM} add {kind} my-{kind}",
                f'Add a new {kind} named "my-{kind}" to an existing MCP server',
            ),
        ],
    )


ADD_AUTH_PAGE = HelpPage(
    name=f"{PROGRAM} add auth",
    summary="Add authentication to an existing MCP server",
    synopsis=f"{PROGRAM} add auth [OPTION]...",
    description="Add basic, token and OAuth authentication providers under src/auth",
    options=[
        _HELP_OPTION,
        ("-C, --project-dir <dir>", "project root (defaults to the current directory)"),
    ],
    examples=[(f"{PROGRAM} add auth", "Add all authentication providers")],
)

PAGES: dict[tuple[str, str | None], HelpPage] = {
    ("create", None): CREATE_PAGE,
    ("create", "server"): CREATE_SERVER_PAGE,
    ("add", None): ADD_PAGE,
    ("add", "tool"): _named_component_page("tool"),
    ("add", "service"): _named_component_page("service"),
    ("add", "prompt"): _named_component_page("prompt"),
    ("add", "auth"): ADD_AUTH_PAGE,
}


def render_page(page: HelpPage, console: Console) -> None:
    """Print ``page`` in GNU man-page layout."""

    def section(title: str, rows: list[tuple[str, str]], style: str = "green") -> None:
        if not rows:
            return
        console.print(f"\n[bold]{title}[/bold]")
        for left, right in rows:
            console.print(f"  [{style}]{escape(left.ljust(_COLUMN))}[/{style}]{escape(right)}")

    console.print("\n[bold]NAME[/bold]")
    console.print(f"  {page.name} - {page.summary}")
    console.print("\n[bold]SYNOPSIS[/bold]")
    console.print(f"  {escape(page.synopsis)}")
    console.print("\n[bold]DESCRIPTION[/bold]")
    console.print(f"  {page.description}")
    section("ARGUMENTS", page.arguments)
    section("OPTIONS", page.options)
    section("COMMANDS", page.commands)

    if page.examples:
        console.print("\n[bold]EXAMPLES[/bold]")
        for command, explanation in page.examples:
            console.print(f"  [cyan]{escape(command)}[/cyan]")
            console.print(f"    {escape(explanation)}")
    console.print()


def display_help(
    command: str | None = None,
    subcommand: str | None = None,
    console: Console | None = None,
) -> None:
    """Show the help page for ``command``/``subcommand``.

    Unknown commands print a warning followed by the main page; unknown
    subcommands fall back to the command's own page.
    """
    console = console or Console()

    if command is None:
        render_page(MAIN_PAGE, console)
        return

    page = PAGES.get((command, subcommand)) or PAGES.get((command, None))
    if page is None:
        console.print(f"[yellow]Unknown command: {escape(command)}[/yellow]")
        render_page(MAIN_PAGE, console)
        return

    render_page(page, console)
