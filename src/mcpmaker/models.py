"""Option and result models for mcp-maker."""

from dataclasses import dataclass, field
from enum import StrEnum
from pathlib import Path

from pydantic import BaseModel, Field


class TargetKind(StrEnum):
    """Shared project files that new components are registered in."""

    TOOL_INDEX = "tool-index"
    SERVICE_INDEX = "service-index"
    PROMPT_INDEX = "prompt-index"
    TOOL_HANDLER = "tool-handler"

    @property
    def relative_path(self) -> Path:
        """Location of the target file relative to the project root."""
        return _TARGET_PATHS[self]


_TARGET_PATHS: dict[TargetKind, Path] = {
    TargetKind.TOOL_INDEX: Path("src/tools/index.ts"),
    TargetKind.SERVICE_INDEX: Path("src/services/index.ts"),
    TargetKind.PROMPT_INDEX: Path("src/prompts/index.ts"),
    TargetKind.TOOL_HANDLER: Path("src/server/toolHandler.ts"),
}


class ComponentKind(StrEnum):
    """Components that can be added to an existing server."""

    TOOL = "tool"
    SERVICE = "service"
    PROMPT = "prompt"
    AUTH = "auth"


class AuthType(StrEnum):
    """Authentication providers scaffolded by ``add auth``."""

    BASIC = "basic"
    TOKEN = "token"
    OAUTH = "oauth"


class ServerOptions(BaseModel):
    """Options for creating a new server project."""

    use_http_transport: bool = Field(False, description="Use HTTP transport instead of stdio")
    enable_cors: bool = Field(False, description="Enable wildcard CORS (HTTP only)")
    port: int = Field(8080, ge=1, le=65535, description="HTTP port (HTTP only)")
    install_dependencies: bool = Field(True, description="Run npm install and build")
    initialize_git: bool = Field(True, description="Run git init in the new project")


@dataclass
class GeneratedFile:
    """A file written by mcp-maker."""

    path: Path
    content: str


@dataclass
class CreateResult:
    """Result of creating a new server project."""

    project_dir: Path
    files_created: list[GeneratedFile]
    warnings: list[str] = field(default_factory=list)
    installed: bool = False
    built: bool = False


@dataclass
class RegistrationOutcome:
    """What happened when registering a component in one target file."""

    target: TargetKind
    path: Path
    changed: bool
    created: bool = False
    skipped: bool = False
    note: str | None = None


@dataclass
class AddResult:
    """Result of adding a component to an existing project."""

    component: ComponentKind
    name: str
    files_created: list[GeneratedFile]
    registrations: list[RegistrationOutcome] = field(default_factory=list)

    @property
    def skipped_registrations(self) -> list[RegistrationOutcome]:
        return [r for r in self.registrations if r.skipped]
