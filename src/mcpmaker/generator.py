"""Project generator - creates new MCP server projects."""

import json
import logging
import subprocess
from pathlib import Path
from typing import Any

from mcpmaker.errors import AlreadyExistsError, FileAccessError, SubprocessWarning
from mcpmaker.models import CreateResult, GeneratedFile, ServerOptions
from mcpmaker.naming import validate_component_name
from mcpmaker.template_engine import (
    create_jinja_environment,
    get_project_context,
    render_template,
)

logger = logging.getLogger(__name__)

PROJECT_DIRECTORIES: tuple[str, ...] = (
    "src",
    "src/server",
    "src/tools",
    "src/services",
    "src/utils",
    "src/prompts",
    "src/resources",
    "src/config",
)

# Output path -> template name, one per architectural slot
PROJECT_TEMPLATES: dict[str, str] = {
    "src/index.ts": "project/index.ts.j2",
    "src/server/toolHandler.ts": "project/server/toolHandler.ts.j2",
    "src/server/promptHandler.ts": "project/server/promptHandler.ts.j2",
    "src/server/resourceHandler.ts": "project/server/resourceHandler.ts.j2",
    "src/tools/index.ts": "project/tools/index.ts.j2",
    "src/tools/utils.ts": "project/tools/utils.ts.j2",
    "src/services/index.ts": "project/services/index.ts.j2",
    "src/prompts/index.ts": "project/prompts/index.ts.j2",
    "src/resources/index.ts": "project/resources/index.ts.j2",
    "src/utils/logger.ts": "project/utils/logger.ts.j2",
    "src/utils/serverUtils.ts": "project/utils/serverUtils.ts.j2",
    "src/config/index.ts": "project/config/index.ts.j2",
    ".gitignore": "project/gitignore.j2",
    "README.md": "project/README.md.j2",
}


def build_package_json(name: str) -> dict[str, Any]:
    """Return the package.json manifest for a new server."""
    return {
        "name": name,
        "version": "0.1.0",
        "description": f"{name} MCP server",
        "type": "module",
        "scripts": {
            "build": "tsc",
            "watch": "tsc --watch",
            "start": "node dist/index.js",
        },
        "dependencies": {
            "@modelcontextprotocol/sdk": "^1.17.5",
            "pino": "^8.18.0",
            "pino-pretty": "^10.3.1",
        },
        "devDependencies": {
            "@types/node": "^20.11.24",
            "typescript": "^5.3.3",
        },
        "engines": {
            "node": ">=18.19.0",
        },
    }


def build_tsconfig() -> dict[str, Any]:
    """Return the tsconfig.json for a new server."""
    return {
        "compilerOptions": {
            "target": "ESNext",
            "module": "ESNext",
            "moduleResolution": "node",
            "outDir": "./dist",
            "rootDir": "./src",
            "strict": True,
            "esModuleInterop": True,
            "skipLibCheck": True,
            "forceConsistentCasingInFileNames": True,
        },
        "include": ["src/**/*"],
        "exclude": ["node_modules"],
    }


class ServerGenerator:
    """Generates a new MCP server project tree."""

    def __init__(self, name: str, options: ServerOptions, output_dir: Path) -> None:
        self.name = name
        self.options = options
        self.output_dir = output_dir
        self.project_dir = output_dir / name
        self.env = create_jinja_environment()
        self.context = get_project_context(name, options)
        self.files_created: list[GeneratedFile] = []

    def generate(self) -> Path:
        """Write the complete project structure."""
        if self.project_dir.exists():
            raise AlreadyExistsError(f"Directory '{self.project_dir}' already exists")

        logger.info(f"Generating server '{self.name}' at {self.project_dir}")

        self._create_directories()
        self._write_json("package.json", build_package_json(self.name))
        self._write_json("tsconfig.json", build_tsconfig())

        for relative_path, template_name in PROJECT_TEMPLATES.items():
            content = render_template(self.env, template_name, self.context)
            self._write_file(relative_path, content)

        logger.info(f"Server '{self.name}' generated successfully")
        return self.project_dir

    def _create_directories(self) -> None:
        try:
            self.project_dir.mkdir(parents=True)
            for directory in PROJECT_DIRECTORIES:
                (self.project_dir / directory).mkdir(parents=True, exist_ok=True)
        except FileExistsError as e:
            raise AlreadyExistsError(f"Directory '{self.project_dir}' already exists") from e
        except OSError as e:
            raise FileAccessError(f"Cannot create {self.project_dir}: {e}") from e

    def _write_json(self, relative_path: str, data: dict[str, Any]) -> None:
        self._write_file(relative_path, json.dumps(data, indent=2) + "\n")

    def _write_file(self, relative_path: str, content: str) -> None:
        full_path = self.project_dir / relative_path
        try:
            full_path.parent.mkdir(parents=True, exist_ok=True)
            full_path.write_text(content)
        except OSError as e:
            raise FileAccessError(f"Cannot write {full_path}: {e}") from e
        self.files_created.append(GeneratedFile(path=Path(relative_path), content=content))
        logger.debug(f"Created file: {full_path}")


def create_server_project(
    name: str,
    options: ServerOptions | None = None,
    output_dir: Path = Path("."),
) -> CreateResult:
    """Create a new MCP server project.

    Args:
        name: Project name (lowercase letters, numbers and hyphens)
        options: Transport, install and git options
        output_dir: Directory to create the project in

    Returns:
        CreateResult with the written files and any non-fatal warnings
    """
    validate_component_name(name, "Project")
    options = options or ServerOptions()

    generator = ServerGenerator(name, options, output_dir)
    project_dir = generator.generate()
    result = CreateResult(project_dir=project_dir, files_created=generator.files_created)

    if options.initialize_git:
        _best_effort(["git", "init"], project_dir, result.warnings)

    if options.install_dependencies:
        result.installed = _best_effort(["npm", "install"], project_dir, result.warnings)
        if result.installed:
            result.built = _best_effort(["npx", "tsc"], project_dir, result.warnings)

    return result


def _run_step(cmd: list[str], project_dir: Path) -> None:
    """Run a subprocess step, raising ``SubprocessWarning`` on failure."""
    try:
        subprocess.run(
            cmd,
            cwd=project_dir,
            capture_output=True,
            text=True,
            check=True,
        )
    except subprocess.CalledProcessError as e:
        raise SubprocessWarning(command=cmd, returncode=e.returncode, stderr=e.stderr or "") from e
    except FileNotFoundError as e:
        raise SubprocessWarning(command=cmd, returncode=None) from e


def _best_effort(cmd: list[str], project_dir: Path, warnings: list[str]) -> bool:
    """Run ``cmd``; a failure is logged and recorded instead of raised."""
    try:
        _run_step(cmd, project_dir)
    except SubprocessWarning as w:
        logger.warning(str(w))
        warnings.append(str(w))
        return False
    logger.info(f"Ran '{' '.join(cmd)}'")
    return True
