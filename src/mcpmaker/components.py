"""Component generators - add tools, services, prompts and auth to existing servers."""

import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

from mcpmaker.errors import FileAccessError
from mcpmaker.models import (
    AddResult,
    AuthType,
    ComponentKind,
    GeneratedFile,
    RegistrationOutcome,
    TargetKind,
)
from mcpmaker.naming import NameVariants, validate_component_name
from mcpmaker.registrar import register_in_project
from mcpmaker.template_engine import (
    create_jinja_environment,
    get_component_context,
    render_template,
)
from mcpmaker.validator import validate_project

logger = logging.getLogger(__name__)

# (interface file, implementation file) per auth type, without extension
AUTH_PROVIDER_FILES: dict[AuthType, tuple[str, str]] = {
    AuthType.BASIC: ("IBasicAuthProvider", "BasicAuthProvider"),
    AuthType.TOKEN: ("ITokenAuthProvider", "TokenAuthProvider"),
    AuthType.OAUTH: ("IOAuthProvider", "OAuthProvider"),
}


def default_description(kind: ComponentKind, name: str) -> str:
    """Description offered when the user does not supply one."""
    return f"{NameVariants.from_name(name).pascal} {kind.value}"


class ComponentGenerator(ABC):
    """Base class for component generators.

    Subclasses write the component's own files and list the shared targets
    it has to be registered in.
    """

    kind: ComponentKind
    targets: tuple[TargetKind, ...] = ()

    def __init__(self, project_dir: Path) -> None:
        self.project_dir = project_dir
        self.env = create_jinja_environment()
        self.files_created: list[GeneratedFile] = []

    @abstractmethod
    def generate_files(self) -> None:
        """Write the component's own files."""
        ...

    def register(self) -> list[RegistrationOutcome]:
        """Register the component in every shared target file."""
        return []

    def run(self) -> AddResult:
        """Validate the project, write the component and register it."""
        validate_project(self.project_dir)
        self.generate_files()
        registrations = self.register()
        return AddResult(
            component=self.kind,
            name=self.display_name,
            files_created=self.files_created,
            registrations=registrations,
        )

    @property
    def display_name(self) -> str:
        return self.kind.value

    def _render_template(self, template_name: str, context: dict[str, Any]) -> str:
        return render_template(self.env, template_name, context)

    def _write_file(self, path: Path, content: str, *, overwrite: bool = True) -> None:
        """Write ``content`` to ``path`` relative to the project root."""
        full_path = self.project_dir / path
        if full_path.exists() and not overwrite:
            logger.info(f"Skipping {path} (already exists)")
            return
        try:
            full_path.parent.mkdir(parents=True, exist_ok=True)
            full_path.write_text(content)
        except OSError as e:
            raise FileAccessError(f"Cannot write {full_path}: {e}") from e
        self.files_created.append(GeneratedFile(path=path, content=content))
        logger.debug(f"Created {path}")


class NamedComponentGenerator(ComponentGenerator):
    """A component identified by a user-supplied name (tool, service, prompt)."""

    def __init__(self, project_dir: Path, name: str, description: str | None = None) -> None:
        super().__init__(project_dir)
        validate_component_name(name, self.kind.value.capitalize())
        self.variants = NameVariants.from_name(name)
        self.description = description or default_description(self.kind, name)
        self.context = get_component_context(self.variants, self.description)

    @property
    def display_name(self) -> str:
        return self.variants.raw

    @property
    def component_dir(self) -> Path:
        return self.targets[0].relative_path.parent / self.variants.slug

    def register(self) -> list[RegistrationOutcome]:
        return [register_in_project(self.project_dir, t, self.variants) for t in self.targets]


class ToolGenerator(NamedComponentGenerator):
    """Adds ``src/tools/<name>/`` and wires it into the tools barrel and tool handler."""

    kind = ComponentKind.TOOL
    targets = (TargetKind.TOOL_INDEX, TargetKind.TOOL_HANDLER)

    def generate_files(self) -> None:
        slug = self.variants.slug
        self._write_file(
            self.component_dir / f"{slug}.ts",
            self._render_template("tool/tool.ts.j2", self.context),
        )
        self._write_file(
            self.component_dir / "index.ts",
            self._render_template("tool/index.ts.j2", self.context),
        )


class ServiceGenerator(NamedComponentGenerator):
    """Adds ``src/services/<name>/`` and re-exports it from the services barrel."""

    kind = ComponentKind.SERVICE
    targets = (TargetKind.SERVICE_INDEX,)

    def generate_files(self) -> None:
        slug = self.variants.slug
        self._write_file(
            self.component_dir / f"{slug}.ts",
            self._render_template("service/service.ts.j2", self.context),
        )
        self._write_file(
            self.component_dir / "index.ts",
            self._render_template("service/index.ts.j2", self.context),
        )


class PromptGenerator(NamedComponentGenerator):
    """Adds ``src/prompts/<name>/`` and appends it to ``serverPrompts``."""

    kind = ComponentKind.PROMPT
    targets = (TargetKind.PROMPT_INDEX,)

    def generate_files(self) -> None:
        slug = self.variants.slug
        self._write_file(
            self.component_dir / f"{slug}Prompt.ts",
            self._render_template("prompt/prompt.ts.j2", self.context),
        )
        self._write_file(
            self.component_dir / "index.ts",
            self._render_template("prompt/index.ts.j2", self.context),
        )
        self._write_file(
            self.component_dir / "README.md",
            self._render_template("prompt/README.md.j2", self.context),
        )
        # The overview README describes the first prompt only and is never rewritten
        self._write_file(
            self.component_dir.parent / "README.md",
            self._render_template("prompt/prompts_README.md.j2", self.context),
            overwrite=False,
        )


class AuthGenerator(ComponentGenerator):
    """Adds ``src/auth/`` with basic, token and OAuth providers."""

    kind = ComponentKind.AUTH

    def __init__(self, project_dir: Path) -> None:
        super().__init__(project_dir)
        self.auth_types = list(AuthType)

    def generate_files(self) -> None:
        auth_dir = Path("src/auth")
        providers = [
            {"interface": AUTH_PROVIDER_FILES[t][0], "implementation": AUTH_PROVIDER_FILES[t][1]}
            for t in self.auth_types
        ]
        context: dict[str, Any] = {"providers": providers}

        logger.info("Setting up base authentication interfaces...")
        self._write_auth_file(auth_dir / "interfaces" / "IAuthProvider.ts", context)

        for auth_type, provider in zip(self.auth_types, providers, strict=True):
            logger.info(f"Setting up {auth_type.value} authentication...")
            self._write_auth_file(auth_dir / "interfaces" / f"{provider['interface']}.ts", context)
            implementation = auth_dir / "methods" / f"{provider['implementation']}.ts"
            self._write_auth_file(implementation, context)

        self._write_auth_file(auth_dir / "interfaces" / "index.ts", context)
        self._write_auth_file(auth_dir / "methods" / "index.ts", context)
        self._write_auth_file(auth_dir / "AuthFactory.ts", context)
        self._write_auth_file(auth_dir / "AuthService.ts", context)
        self._write_auth_file(auth_dir / "index.ts", context)

    def _write_auth_file(self, path: Path, context: dict[str, Any]) -> None:
        template_name = f"auth/{path.relative_to('src/auth').as_posix()}.j2"
        self._write_file(path, self._render_template(template_name, context))


def add_tool(project_dir: Path, name: str, description: str | None = None) -> AddResult:
    """Add a tool to the server at ``project_dir``."""
    logger.info(f"Creating tool {name}...")
    return ToolGenerator(project_dir, name, description).run()


def add_service(project_dir: Path, name: str, description: str | None = None) -> AddResult:
    """Add a service to the server at ``project_dir``."""
    logger.info(f"Creating service {name}...")
    return ServiceGenerator(project_dir, name, description).run()


def add_prompt(project_dir: Path, name: str, description: str | None = None) -> AddResult:
    """Add a prompt to the server at ``project_dir``."""
    logger.info(f"Creating prompt {name}...")
    return PromptGenerator(project_dir, name, description).run()


def add_auth(project_dir: Path) -> AddResult:
    """Add authentication support to the server at ``project_dir``."""
    logger.info("Adding authentication providers...")
    return AuthGenerator(project_dir).run()
