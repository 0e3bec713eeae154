"""Project validation utilities."""

import logging
from pathlib import Path

from mcpmaker.errors import NotAProjectError

logger = logging.getLogger(__name__)

# Checked in order; the first missing marker is reported.
PROJECT_MARKERS: tuple[str, ...] = (
    "package.json",
    "src",
    "src/server",
    "src/tools",
    "src/services",
)


class ValidationResult:
    """Result of a validation check."""

    def __init__(self, passed: bool, message: str, marker: str) -> None:
        self.passed = passed
        self.message = message
        self.marker = marker

    def __bool__(self) -> bool:
        return self.passed

    def __repr__(self) -> str:
        status = "✓" if self.passed else "✗"
        return f"{status} {self.message}"


class ProjectValidator:
    """Checks that a directory is an MCP server project root."""

    def __init__(self, project_dir: Path) -> None:
        self.project_dir = project_dir
        self.results: list[ValidationResult] = []

    def validate_all(self) -> list[ValidationResult]:
        """Run every marker check without stopping at the first failure."""
        self.results = [self._check_marker(marker) for marker in PROJECT_MARKERS]
        return self.results

    def is_valid(self) -> bool:
        """Check if all validations passed."""
        if not self.results:
            self.validate_all()
        return all(self.results)

    def _check_marker(self, marker: str) -> ValidationResult:
        if (self.project_dir / marker).exists():
            return ValidationResult(True, f"{marker} exists", marker)
        return ValidationResult(False, f"{marker} is missing", marker)


def validate_project(project_dir: Path) -> None:
    """Raise ``NotAProjectError`` naming the first missing project marker."""
    for marker in PROJECT_MARKERS:
        if not (project_dir / marker).exists():
            logger.debug(f"Project marker missing: {project_dir / marker}")
            raise NotAProjectError(str(project_dir), marker)
