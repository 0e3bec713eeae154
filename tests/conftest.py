"""Pytest fixtures for mcp-maker tests."""

from collections.abc import Generator
from pathlib import Path
from unittest.mock import patch

import pytest

from mcpmaker.generator import ServerGenerator
from mcpmaker.models import ServerOptions


@pytest.fixture(autouse=True)
def isolated_user_config(tmp_path: Path) -> Generator[Path, None, None]:
    """Point the user config at a temporary file so real defaults never leak in."""
    config_path = tmp_path / "user-config" / "config.yaml"
    with (
        patch("mcpmaker.user_config.get_config_path", return_value=config_path),
        patch("mcpmaker.cli.get_config_path", return_value=config_path),
    ):
        yield config_path


@pytest.fixture
def temp_output_dir(tmp_path: Path) -> Generator[Path, None, None]:
    """Provide a temporary directory for project generation."""
    output_dir = tmp_path / "projects"
    output_dir.mkdir(parents=True, exist_ok=True)
    yield output_dir


@pytest.fixture
def project_dir(temp_output_dir: Path) -> Path:
    """A freshly scaffolded server project, without git or npm steps."""
    options = ServerOptions(install_dependencies=False, initialize_git=False)
    return ServerGenerator("demo", options, temp_output_dir).generate()


@pytest.fixture
def handler_with_case() -> str:
    """A tool handler whose dispatch already holds one case."""
    return """import { handleWeather } from '../tools/weather/index.js';

export async function dispatch(name: string, args: unknown) {
  switch (name) {
    case "weather":
      return await handleWeather(args as { message: string });

    default:
      throw new Error(`Unknown tool: ${name}`);
  }
}
"""
