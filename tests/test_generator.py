"""Tests for server project generation."""

import json
import subprocess
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from mcpmaker.errors import AlreadyExistsError, SubprocessWarning, ValidationError
from mcpmaker.generator import (
    PROJECT_DIRECTORIES,
    PROJECT_TEMPLATES,
    create_server_project,
)
from mcpmaker.models import ServerOptions

NO_STEPS = ServerOptions(install_dependencies=False, initialize_git=False)


class TestCreateServerProject:
    """Tests for create_server_project."""

    def test_weather_stdio_project(self, temp_output_dir: Path) -> None:
        result = create_server_project("weather", NO_STEPS, temp_output_dir)
        project_dir = temp_output_dir / "weather"

        assert result.project_dir == project_dir
        package = json.loads((project_dir / "package.json").read_text())
        assert package["name"] == "weather"
        assert "@modelcontextprotocol/sdk" in package["dependencies"]

        entry = (project_dir / "src" / "index.ts").read_text()
        assert "StdioServerTransport" in entry
        assert "config.port" not in entry
        assert "http" not in entry.lower()
        assert "port:" not in (project_dir / "src" / "config" / "index.ts").read_text()

    def test_http_project_with_cors(self, temp_output_dir: Path) -> None:
        options = NO_STEPS.model_copy(
            update={"use_http_transport": True, "enable_cors": True, "port": 3000}
        )
        create_server_project("web", options, temp_output_dir)
        project_dir = temp_output_dir / "web"

        entry = (project_dir / "src" / "index.ts").read_text()
        assert "StreamableHTTPServerTransport" in entry
        assert "StdioServerTransport" not in entry
        assert "Access-Control-Allow-Origin" in entry
        assert "3000" in (project_dir / "src" / "config" / "index.ts").read_text()

    def test_http_project_without_cors(self, temp_output_dir: Path) -> None:
        options = NO_STEPS.model_copy(update={"use_http_transport": True})
        create_server_project("web", options, temp_output_dir)

        entry = (temp_output_dir / "web" / "src" / "index.ts").read_text()
        assert "Access-Control-Allow-Origin" not in entry

    def test_creates_full_layout(self, temp_output_dir: Path) -> None:
        result = create_server_project("demo", NO_STEPS, temp_output_dir)

        for directory in PROJECT_DIRECTORIES:
            assert (result.project_dir / directory).is_dir()
        for relative_path in PROJECT_TEMPLATES:
            assert (result.project_dir / relative_path).is_file()
        assert (result.project_dir / "tsconfig.json").is_file()
        written = {f.path.as_posix() for f in result.files_created}
        assert "package.json" in written
        assert "src/server/toolHandler.ts" in written

    def test_generated_files_have_registration_anchors(self, temp_output_dir: Path) -> None:
        result = create_server_project("demo", NO_STEPS, temp_output_dir)

        handler = (result.project_dir / "src/server/toolHandler.ts").read_text()
        assert "switch (name) {" in handler
        assert "default:" in handler
        tools_index = (result.project_dir / "src/tools/index.ts").read_text()
        assert "export const serverTools" in tools_index

    def test_existing_directory(self, temp_output_dir: Path) -> None:
        (temp_output_dir / "taken").mkdir()
        with pytest.raises(AlreadyExistsError):
            create_server_project("taken", NO_STEPS, temp_output_dir)

    def test_invalid_name(self, temp_output_dir: Path) -> None:
        with pytest.raises(ValidationError):
            create_server_project("My Server", NO_STEPS, temp_output_dir)
        assert list(temp_output_dir.iterdir()) == []


class TestSubprocessSteps:
    """Tests for git init, npm install and tsc steps."""

    def test_runs_git_install_and_build(self, temp_output_dir: Path) -> None:
        with patch("mcpmaker.generator.subprocess.run", return_value=MagicMock()) as mock_run:
            result = create_server_project("demo", ServerOptions(), temp_output_dir)

        commands = [call.args[0] for call in mock_run.call_args_list]
        assert commands == [["git", "init"], ["npm", "install"], ["npx", "tsc"]]
        assert result.installed
        assert result.built
        assert result.warnings == []

    def test_failed_install_skips_build(self, temp_output_dir: Path) -> None:
        def fake_run(cmd: list[str], **kwargs: object) -> MagicMock:
            if cmd[0] == "npm":
                raise subprocess.CalledProcessError(1, cmd, stderr="ERR! network")
            return MagicMock()

        with patch("mcpmaker.generator.subprocess.run", side_effect=fake_run) as mock_run:
            result = create_server_project("demo", ServerOptions(), temp_output_dir)

        commands = [call.args[0] for call in mock_run.call_args_list]
        assert ["npx", "tsc"] not in commands
        assert not result.installed
        assert not result.built
        assert len(result.warnings) == 1
        assert "ERR! network" in result.warnings[0]
        assert (result.project_dir / "package.json").exists()

    def test_missing_git_is_a_warning(self, temp_output_dir: Path) -> None:
        options = ServerOptions(install_dependencies=False)
        with patch("mcpmaker.generator.subprocess.run", side_effect=FileNotFoundError):
            result = create_server_project("demo", options, temp_output_dir)

        assert result.warnings == ["git not found, skipped 'git init'"]

    def test_no_steps_when_disabled(self, temp_output_dir: Path) -> None:
        with patch("mcpmaker.generator.subprocess.run") as mock_run:
            create_server_project("demo", NO_STEPS, temp_output_dir)
        mock_run.assert_not_called()


class TestSubprocessWarning:
    """Tests for SubprocessWarning messages."""

    def test_exit_code_message(self) -> None:
        warning = SubprocessWarning(["npm", "install"], 1, "boom\n")
        assert str(warning) == "'npm install' exited with code 1: boom"

    def test_not_found_message(self) -> None:
        warning = SubprocessWarning(["npx", "tsc"], None)
        assert str(warning) == "npx not found, skipped 'npx tsc'"
