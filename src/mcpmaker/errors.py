"""Error types raised by mcp-maker."""

from __future__ import annotations

from dataclasses import dataclass


class McpMakerError(Exception):
    """Base class for all mcp-maker errors."""


class ValidationError(McpMakerError):
    """Raised for invalid user input (bad component name, wrong directory)."""


class NotAProjectError(ValidationError):
    """Raised when a directory is not a recognised MCP server project."""

    def __init__(self, root: str, marker: str) -> None:
        self.root = root
        self.marker = marker
        super().__init__(f"Not in an MCP server project. No {marker} found in {root}.")


class AlreadyExistsError(McpMakerError):
    """Raised when the target project directory already exists."""


class NotFoundError(McpMakerError):
    """Raised when an expected template, file or code construct is missing."""


class TemplateNotFoundError(NotFoundError):
    """Raised when a named template is not shipped with the package."""


class TargetNotFoundError(NotFoundError):
    """Raised when a registration target file does not exist and cannot be authored."""


class DispatchNotFoundError(NotFoundError):
    """Raised when a handler file has no recognisable switch/default construct."""


class FileAccessError(McpMakerError):
    """Raised when a project file cannot be read or written."""


@dataclass(frozen=True)
class SubprocessWarning(McpMakerError):
    """Non-fatal failure of a best-effort subprocess step (git, npm, tsc)."""

    command: list[str]
    returncode: int | None
    stderr: str = ""

    def __str__(self) -> str:
        command_str = " ".join(self.command)
        if self.returncode is None:
            return f"{self.command[0]} not found, skipped '{command_str}'"
        parts = [f"'{command_str}' exited with code {self.returncode}"]
        if self.stderr.strip():
            parts.append(self.stderr.strip())
        return ": ".join(parts)
