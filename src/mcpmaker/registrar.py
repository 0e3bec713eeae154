"""Incremental registration of components in generated project files.

Adding a tool, service or prompt to an existing server means touching a few
shared files that were generated earlier and may since have been edited by
hand: the barrel ``index.ts`` files under ``src/tools``, ``src/services`` and
``src/prompts`` and the ``switch (name)`` dispatch in
``src/server/toolHandler.ts``.

Registration works on plain text. Each line is classified by a small set of
patterns (import, ``export * from``, collection literal opening, dispatch
opening, ``default:`` clause) and new lines are inserted after the last line
of the same kind. Every insertion first checks whether its exact text is
already present, so registering the same component twice leaves the file
as it was after the first time. Existing entries are never moved or removed.
"""

import logging
import re
from collections.abc import Mapping
from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path

from mcpmaker.errors import (
    DispatchNotFoundError,
    FileAccessError,
    NotFoundError,
    TargetNotFoundError,
)
from mcpmaker.models import RegistrationOutcome, TargetKind
from mcpmaker.naming import NameVariants

logger = logging.getLogger(__name__)

TOOLS_COLLECTION = "serverTools"
PROMPTS_COLLECTION = "serverPrompts"
DEFAULT_ARGS_TYPE = "{ message: string }"

_COLLECTION_COMMENTS = {
    TOOLS_COLLECTION: "// Export all tools combined",
    PROMPTS_COLLECTION: "// Export the array of all available MCP-compatible prompts",
}

_IMPORT_LINE = re.compile(r"^\s*import\b.*\bfrom\b.*;\s*$")
_EXPORT_STAR_LINE = re.compile(r"^\s*export \* from\b")
_DISPATCH_OPEN = re.compile(r"switch\s*\(\s*name\s*\)\s*\{")
_DISPATCH_DEFAULT = re.compile(r"^([ \t]*)default\s*:", re.MULTILINE)


class LineKind(StrEnum):
    """Classification of a single source line."""

    IMPORT = "import"
    EXPORT_STAR = "export-star"
    COLLECTION_OPEN = "collection-open"
    DISPATCH_OPEN = "dispatch-open"
    DISPATCH_DEFAULT = "dispatch-default"
    OTHER = "other"


def _collection_open_pattern(collection: str) -> re.Pattern[str]:
    # ``[^=]*`` skips a type annotation such as ``: Tool[]`` before the literal
    return re.compile(rf"export const {re.escape(collection)}\b[^=\n]*=\s*\[")


def classify_line(line: str, collection: str | None = None) -> LineKind:
    """Return the kind of ``line``; the first matching pattern wins."""
    if _IMPORT_LINE.match(line):
        return LineKind.IMPORT
    if _EXPORT_STAR_LINE.match(line):
        return LineKind.EXPORT_STAR
    if collection is not None and _collection_open_pattern(collection).search(line):
        return LineKind.COLLECTION_OPEN
    if _DISPATCH_OPEN.search(line):
        return LineKind.DISPATCH_OPEN
    if _DISPATCH_DEFAULT.match(line):
        return LineKind.DISPATCH_DEFAULT
    return LineKind.OTHER


def _last_index_of(lines: list[str], kind: LineKind) -> int | None:
    last: int | None = None
    for index, line in enumerate(lines):
        if classify_line(line) == kind:
            last = index
    return last


@dataclass(frozen=True)
class RegistrationEntry:
    """Text fragments that register one component in one target file."""

    import_line: str | None = None
    export_line: str | None = None
    collection: str | None = None
    collection_entry: str | None = None
    case_label: str | None = None
    case_body: str | None = None


def build_entry(
    kind: TargetKind,
    variants: NameVariants,
    extra: Mapping[str, str] | None = None,
) -> RegistrationEntry:
    """Build the fragments ``kind`` needs for the component named by ``variants``."""
    extra = extra or {}
    module = f"./{variants.slug}/index.js"

    match kind:
        case TargetKind.TOOL_INDEX:
            return RegistrationEntry(
                import_line=f"import {{ {variants.camel}Tools }} from '{module}';",
                export_line=f"export * from '{module}';",
                collection=TOOLS_COLLECTION,
                collection_entry=f"  ...{variants.camel}Tools,",
            )
        case TargetKind.SERVICE_INDEX:
            return RegistrationEntry(export_line=f"export * from '{module}';")
        case TargetKind.PROMPT_INDEX:
            return RegistrationEntry(
                import_line=f"import {{ {variants.camel}PromptMcp }} from '{module}';",
                collection=PROMPTS_COLLECTION,
                collection_entry=f"\t{variants.camel}PromptMcp,",
            )
        case TargetKind.TOOL_HANDLER:
            import_line, case_label, case_body = _handler_fragments(variants, extra)
            return RegistrationEntry(
                import_line=import_line, case_label=case_label, case_body=case_body
            )


def _handler_fragments(
    variants: NameVariants, extra: Mapping[str, str]
) -> tuple[str, str, str]:
    """Import line, case label and case body for a tool handler dispatch case."""
    args_type = extra.get("args_type", DEFAULT_ARGS_TYPE)
    return (
        f"import {{ handle{variants.pascal} }} from '../tools/{variants.slug}/index.js';",
        f'case "{variants.raw}":',
        f"return await handle{variants.pascal}(args as {args_type});",
    )


def insert_import(text: str, import_line: str) -> str:
    """Insert ``import_line`` after the last import, or at the top of the file."""
    if import_line in text:
        return text
    lines = text.split("\n")
    last = _last_index_of(lines, LineKind.IMPORT)
    position = 0 if last is None else last + 1
    lines.insert(position, import_line)
    return "\n".join(lines)


def insert_export(text: str, export_line: str) -> str:
    """Insert ``export_line`` after the last ``export * from``, or at the end of the file."""
    if export_line in text:
        return text
    lines = text.split("\n")
    last = _last_index_of(lines, LineKind.EXPORT_STAR)
    if last is None:
        return _append_block(text, export_line + "\n", blank_line=False)
    lines.insert(last + 1, export_line)
    return "\n".join(lines)


def insert_collection_entry(text: str, collection: str, entry: str) -> str:
    """Insert ``entry`` right after the opening bracket of ``collection``.

    The new entry becomes the first element; elements already in the literal
    keep their text and order. When the declaration is missing a new one is
    appended holding only ``entry``.
    """
    if entry in text:
        return text
    match = _collection_open_pattern(collection).search(text)
    if match is None:
        comment = _COLLECTION_COMMENTS.get(collection, "// Export all registered components")
        block = f"{comment}\nexport const {collection} = [\n{entry}\n];\n"
        return _append_block(text, block, blank_line=True)
    position = match.end()
    return text[:position] + "\n" + entry + text[position:]


def insert_dispatch_case(text: str, case_label: str, case_body: str) -> str:
    """Insert a case immediately before the ``default:`` clause of ``switch (name)``.

    Raises ``DispatchNotFoundError`` when either the switch or its default
    clause cannot be found; the text is never appended to blindly.
    """
    if case_label in text:
        return text
    switch = _DISPATCH_OPEN.search(text)
    if switch is None:
        raise DispatchNotFoundError("no 'switch (name) {' dispatch found")
    default = _DISPATCH_DEFAULT.search(text, switch.end())
    if default is None:
        raise DispatchNotFoundError("dispatch has no 'default:' clause")
    indent = default.group(1)
    block = f"{indent}{case_label}\n{indent}  {case_body}\n\n"
    position = default.start()
    return text[:position] + block + text[position:]


def _append_block(text: str, block: str, *, blank_line: bool) -> str:
    if not text:
        return block
    separator = "" if text.endswith("\n") else "\n"
    if blank_line:
        separator += "\n"
    return text + separator + block


def render_skeleton(kind: TargetKind, variants: NameVariants) -> str:
    """Canonical content of a target file created for its first component."""
    entry = build_entry(kind, variants)

    match kind:
        case TargetKind.TOOL_INDEX:
            return f"""/**
 * Tools exports and definitions
 * This file re-exports all tools and handlers from the modular structure
 */

// Import from modular structure
{entry.import_line}

// Re-export everything
{entry.export_line}

// Export all tools combined
export const {TOOLS_COLLECTION} = [
{entry.collection_entry}
];
"""
        case TargetKind.SERVICE_INDEX:
            return f"""/**
 * Services exports
 * This file re-exports all services from the modular structure
 */

// Re-export from modular structure
{entry.export_line}
"""
        case TargetKind.PROMPT_INDEX:
            return f"""/**
 * MCP Prompts Index
 *
 * This file collects and exports all MCP-compatible prompts.
 */

{entry.import_line}

// Export the array of all available MCP-compatible prompts
export const {PROMPTS_COLLECTION} = [
{entry.collection_entry}
];

/**
 * Get all available MCP prompts
 */
export function getAllMcpPrompts() {{
\treturn {PROMPTS_COLLECTION};
}}

/**
 * Get a specific MCP prompt by name
 * @param name The name of the prompt (e.g., '{variants.raw}')
 */
export function getMcpPrompt(name: string) {{
\treturn {PROMPTS_COLLECTION}.find((prompt) => prompt.name === name);
}}
"""
        case TargetKind.TOOL_HANDLER:
            raise TargetNotFoundError(
                f"{kind.relative_path} does not exist; the tool handler is only "
                "created by 'create server'"
            )


def register_component(
    kind: TargetKind,
    existing_text: str | None,
    variants: NameVariants,
    extra: Mapping[str, str] | None = None,
) -> str:
    """Return the text of ``kind``'s target file with the component registered.

    Args:
        kind: Which shared file is being patched.
        existing_text: Current content of the file, or ``None`` if it does not exist.
        variants: Name casings of the component being registered.
        extra: Optional overrides; ``args_type`` sets the argument cast used in
            a tool handler case.

    Raises:
        TargetNotFoundError: The tool handler file does not exist.
        DispatchNotFoundError: The tool handler has no recognisable dispatch.
    """
    if existing_text is None:
        return render_skeleton(kind, variants)

    text = existing_text

    if kind == TargetKind.TOOL_HANDLER:
        import_line, case_label, case_body = _handler_fragments(variants, extra or {})
        text = insert_import(text, import_line)
        # Raises before anything is written, so the file stays untouched
        return insert_dispatch_case(text, case_label, case_body)

    entry = build_entry(kind, variants, extra)

    if entry.import_line:
        text = insert_import(text, entry.import_line)
    if entry.export_line:
        text = insert_export(text, entry.export_line)
    if entry.collection and entry.collection_entry:
        text = insert_collection_entry(text, entry.collection, entry.collection_entry)
    return text


def _read_target(path: Path) -> str | None:
    if not path.exists():
        return None
    try:
        return path.read_text()
    except OSError as e:
        raise FileAccessError(f"Cannot read {path}: {e}") from e


def _write_target(path: Path, content: str) -> None:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content)
    except OSError as e:
        raise FileAccessError(f"Cannot write {path}: {e}") from e


def register_in_project(
    project_dir: Path,
    kind: TargetKind,
    variants: NameVariants,
    extra: Mapping[str, str] | None = None,
) -> RegistrationOutcome:
    """Read, patch and rewrite one target file of the project at ``project_dir``.

    Each target is its own unit of work: a missing dispatch construct or
    missing handler file skips this target with a warning, while read and
    write failures raise ``FileAccessError``.
    """
    path = project_dir / kind.relative_path
    existing = _read_target(path)

    try:
        updated = register_component(kind, existing, variants, extra)
    except NotFoundError as e:
        logger.warning(f"Skipping registration of '{variants.raw}' in {kind.relative_path}: {e}")
        logger.warning("Add the entry manually if it is needed")
        return RegistrationOutcome(
            target=kind, path=path, changed=False, skipped=True, note=str(e)
        )

    if updated == existing:
        logger.debug(f"'{variants.raw}' already registered in {kind.relative_path}")
        return RegistrationOutcome(target=kind, path=path, changed=False)

    _write_target(path, updated)
    created = existing is None
    logger.debug(f"{'Created' if created else 'Updated'} {path}")
    return RegistrationOutcome(target=kind, path=path, changed=True, created=created)
