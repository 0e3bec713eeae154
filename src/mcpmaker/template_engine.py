"""Template engine for rendering generated TypeScript files."""

import logging
from pathlib import Path
from typing import Any

from jinja2 import (
    ChainableUndefined,
    Environment,
    FileSystemLoader,
    TemplateNotFound,
    select_autoescape,
)

from mcpmaker.errors import TemplateNotFoundError
from mcpmaker.models import ServerOptions
from mcpmaker.naming import NameVariants

logger = logging.getLogger(__name__)


def get_templates_dir() -> Path:
    """Get the directory containing built-in templates."""
    return Path(__file__).parent / "templates"


def create_jinja_environment() -> Environment:
    """Create a Jinja2 environment with the templates directory."""
    templates_dir = get_templates_dir()
    return Environment(
        loader=FileSystemLoader(templates_dir),
        autoescape=select_autoescape(["html", "xml"]),
        undefined=ChainableUndefined,
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
    )


def get_project_context(name: str, options: ServerOptions) -> dict[str, Any]:
    """Build the template context for a new server project."""
    return {
        "name": name,
        "http": options.use_http_transport,
        "cors": options.use_http_transport and options.enable_cors,
        "port": options.port,
    }


def get_component_context(variants: NameVariants, description: str) -> dict[str, Any]:
    """Build the template context for a tool, service or prompt."""
    return {
        "name": variants.raw,
        "pascalName": variants.pascal,
        "camelName": variants.camel,
        "fileName": variants.slug,
        "description": description,
    }


def render_template(env: Environment, template_name: str, context: dict[str, Any]) -> str:
    """Render a named template with the given context."""
    try:
        template = env.get_template(template_name)
    except TemplateNotFound as e:
        raise TemplateNotFoundError(f"Template '{template_name}' not found") from e
    return template.render(**context)


def render(template_text: str, data: dict[str, Any]) -> str:
    """Render inline template text.

    Unknown placeholders render as empty strings.
    """
    env = Environment(
        undefined=ChainableUndefined,
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
    )
    template = env.from_string(template_text)
    return template.render(**data)
