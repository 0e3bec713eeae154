"""Identifier casing for component names.

A component name is a hyphenated lower-case token such as ``weather-alerts``.
Generated TypeScript needs it in several shapes: ``WeatherAlerts`` for
handler functions, ``weatherAlerts`` for exported collections and
``weather-alerts`` for directory and file names.
"""

import re
from dataclasses import dataclass

from mcpmaker.errors import ValidationError

COMPONENT_NAME_PATTERN = re.compile(r"^[a-z0-9-]+$")

_SEGMENT_SPLIT = re.compile(r"[^a-zA-Z0-9]+")
_SLUG_REPLACE = re.compile(r"[^a-z0-9]")


def _segments(name: str) -> list[str]:
    return [segment for segment in _SEGMENT_SPLIT.split(name) if segment]


def _capitalize_first(segment: str) -> str:
    # Only the first letter changes; the rest of the segment is kept as-is.
    return segment[:1].upper() + segment[1:]


def to_pascal_case(name: str) -> str:
    """Convert ``my-tool`` to ``MyTool``."""
    return "".join(_capitalize_first(segment) for segment in _segments(name))


def to_camel_case(name: str) -> str:
    """Convert ``my-tool`` to ``myTool``."""
    segments = _segments(name)
    if not segments:
        return ""
    first, *rest = segments
    return first[:1].lower() + first[1:] + "".join(_capitalize_first(s) for s in rest)


def to_slug(name: str) -> str:
    """Lower-case ``name`` and replace every non-alphanumeric character with ``-``."""
    return _SLUG_REPLACE.sub("-", name.lower())


def is_valid_component_name(name: str) -> bool:
    return bool(COMPONENT_NAME_PATTERN.match(name))


def validate_component_name(name: str | None, kind: str = "Component") -> str:
    """Return ``name`` unchanged or raise ``ValidationError``."""
    if not name:
        raise ValidationError(f"{kind} name is required")
    if not is_valid_component_name(name):
        raise ValidationError(
            f"{kind} name can only contain lowercase letters, numbers, and hyphens "
            f"(got '{name}')"
        )
    return name


@dataclass(frozen=True)
class NameVariants:
    """All casings of one component name."""

    raw: str
    pascal: str
    camel: str
    slug: str

    @classmethod
    def from_name(cls, name: str) -> "NameVariants":
        return cls(
            raw=name,
            pascal=to_pascal_case(name),
            camel=to_camel_case(name),
            slug=to_slug(name),
        )
