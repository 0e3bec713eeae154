"""Interactive prompts for names and descriptions missing from the command line."""

import logging

from rich import print as rprint
from rich.prompt import Prompt

from mcpmaker.errors import ValidationError
from mcpmaker.naming import is_valid_component_name

logger = logging.getLogger(__name__)


def _title(kind: str) -> str:
    return kind[:1].upper() + kind[1:]


class PromptCancelled(ValidationError):
    """Raised when the user leaves a required prompt empty."""


def prompt_for_name(kind: str) -> str:
    """Ask for a component name until it is valid.

    An empty answer cancels the operation.
    """
    while True:
        value = Prompt.ask(f"What is the name of your {kind}?", default="").strip()
        if not value:
            raise PromptCancelled(f"{_title(kind)} creation cancelled")
        if is_valid_component_name(value):
            return value
        logger.debug(f"Rejected {kind} name '{value}'")
        rprint(
            f"[red]{_title(kind)} name can only contain lowercase letters, "
            "numbers, and hyphens[/red]"
        )


def prompt_for_description(kind: str, default: str) -> str:
    """Ask for a description, offering ``default``."""
    value = Prompt.ask(f"Enter a description for your {kind}", default=default).strip()
    if not value:
        raise PromptCancelled(f"{_title(kind)} creation cancelled")
    return value
