"""Tests for incremental registration in barrel and handler files."""

from pathlib import Path

import pytest

from mcpmaker.errors import DispatchNotFoundError, TargetNotFoundError
from mcpmaker.models import TargetKind
from mcpmaker.naming import NameVariants
from mcpmaker.registrar import (
    LineKind,
    build_entry,
    classify_line,
    insert_collection_entry,
    insert_dispatch_case,
    insert_export,
    insert_import,
    register_component,
    register_in_project,
)

WEATHER = NameVariants.from_name("weather")
FORECAST = NameVariants.from_name("forecast")

HEADER_ONLY = "/**\n * Tools exports and definitions\n */\n"


class TestClassifyLine:
    """Tests for line classification."""

    @pytest.mark.parametrize(
        ("line", "kind"),
        [
            ("import { a } from './a.js';", LineKind.IMPORT),
            ("import type { McpPrompt } from '../index.js';", LineKind.IMPORT),
            ("export * from './utils.js';", LineKind.EXPORT_STAR),
            ("      switch (name) {", LineKind.DISPATCH_OPEN),
            ("        default:", LineKind.DISPATCH_DEFAULT),
            ("// import nothing", LineKind.OTHER),
            ("export const x = 1;", LineKind.OTHER),
        ],
    )
    def test_kinds(self, line: str, kind: LineKind) -> None:
        assert classify_line(line) == kind

    def test_collection_open_with_type_annotation(self) -> None:
        line = "export const serverTools: Tool[] = ["
        assert classify_line(line, "serverTools") == LineKind.COLLECTION_OPEN
        assert classify_line(line) == LineKind.OTHER


class TestBuildEntry:
    """Tests for the per-target registration fragments."""

    def test_tool_index(self) -> None:
        entry = build_entry(TargetKind.TOOL_INDEX, WEATHER)
        assert entry.import_line == "import { weatherTools } from './weather/index.js';"
        assert entry.export_line == "export * from './weather/index.js';"
        assert entry.collection == "serverTools"
        assert entry.collection_entry == "  ...weatherTools,"

    def test_service_index_exports_only(self) -> None:
        entry = build_entry(TargetKind.SERVICE_INDEX, WEATHER)
        assert entry.import_line is None
        assert entry.export_line == "export * from './weather/index.js';"
        assert entry.collection is None

    def test_prompt_index(self) -> None:
        entry = build_entry(TargetKind.PROMPT_INDEX, WEATHER)
        assert entry.import_line == "import { weatherPromptMcp } from './weather/index.js';"
        assert entry.collection == "serverPrompts"

    def test_tool_handler_args_type_override(self) -> None:
        entry = build_entry(
            TargetKind.TOOL_HANDLER, WEATHER, {"args_type": "{ city: string }"}
        )
        assert entry.case_label == 'case "weather":'
        assert entry.case_body == "return await handleWeather(args as { city: string });"


class TestInsertions:
    """Tests for the individual insertion primitives."""

    def test_import_goes_after_last_import(self) -> None:
        text = "import a from 'a';\nconst x = 1;\nimport b from 'b';\n\ncode();\n"
        result = insert_import(text, "import c from 'c';")
        assert result == (
            "import a from 'a';\nconst x = 1;\nimport b from 'b';\nimport c from 'c';\n\ncode();\n"
        )

    def test_import_without_imports_goes_to_top(self) -> None:
        assert insert_import("code();\n", "import c from 'c';") == "import c from 'c';\ncode();\n"

    def test_export_without_exports_appends(self) -> None:
        result = insert_export("// header", "export * from './a/index.js';")
        assert result == "// header\nexport * from './a/index.js';\n"

    def test_collection_entry_becomes_first(self) -> None:
        text = "export const serverTools = [\n  ...aTools,\n];\n"
        result = insert_collection_entry(text, "serverTools", "  ...bTools,")
        assert result == "export const serverTools = [\n  ...bTools,\n  ...aTools,\n];\n"

    def test_missing_collection_is_appended(self) -> None:
        result = insert_collection_entry("const x = 1;\n", "serverTools", "  ...aTools,")
        assert result.endswith("\n\n// Export all tools combined\n"
                               "export const serverTools = [\n  ...aTools,\n];\n")

    def test_dispatch_without_switch(self) -> None:
        with pytest.raises(DispatchNotFoundError):
            insert_dispatch_case("export {};\n", 'case "a":', "return a();")

    def test_dispatch_without_default(self) -> None:
        text = "switch (name) {\n  case \"a\":\n    return a();\n}\n"
        with pytest.raises(DispatchNotFoundError, match="default"):
            insert_dispatch_case(text, 'case "b":', "return b();")


class TestRegisterComponent:
    """Tests for register_component on tool, service and prompt barrels."""

    def test_add_tool_to_header_only_barrel(self) -> None:
        result = register_component(TargetKind.TOOL_INDEX, HEADER_ONLY, WEATHER)

        assert "import { weatherTools } from './weather/index.js';" in result
        assert "export * from './weather/index.js';" in result
        assert "export const serverTools = [\n  ...weatherTools,\n];" in result
        assert result.startswith("import { weatherTools }")

    def test_add_second_tool(self) -> None:
        first = register_component(TargetKind.TOOL_INDEX, HEADER_ONLY, WEATHER)
        second = register_component(TargetKind.TOOL_INDEX, first, FORECAST)

        assert "export const serverTools = [\n  ...forecastTools,\n  ...weatherTools,\n];" in (
            second
        )
        assert second.count("serverTools = [") == 1
        weather_import = second.index("import { weatherTools }")
        forecast_import = second.index("import { forecastTools }")
        assert weather_import < forecast_import
        assert second.index("export * from './weather/") < second.index(
            "export * from './forecast/"
        )

    @pytest.mark.parametrize(
        "kind", [TargetKind.TOOL_INDEX, TargetKind.SERVICE_INDEX, TargetKind.PROMPT_INDEX]
    )
    def test_idempotent(self, kind: TargetKind) -> None:
        once = register_component(kind, HEADER_ONLY, WEATHER)
        twice = register_component(kind, once, WEATHER)
        assert once == twice

    def test_idempotent_from_absent_file(self) -> None:
        once = register_component(TargetKind.TOOL_INDEX, None, WEATHER)
        assert register_component(TargetKind.TOOL_INDEX, once, WEATHER) == once

    def test_order_preserved(self) -> None:
        first = register_component(TargetKind.TOOL_INDEX, HEADER_ONLY, WEATHER)
        second = register_component(TargetKind.TOOL_INDEX, first, FORECAST)

        weather_lines = [line for line in first.split("\n") if "weather" in line]
        assert [line for line in second.split("\n") if "weather" in line] == weather_lines

    def test_fresh_tool_index(self) -> None:
        result = register_component(TargetKind.TOOL_INDEX, None, WEATHER)
        lines = result.split("\n")

        assert sum(classify_line(line) == LineKind.IMPORT for line in lines) == 1
        assert sum(classify_line(line) == LineKind.EXPORT_STAR for line in lines) == 1
        assert result.count("...") == 1
        assert "export const serverTools = [\n  ...weatherTools,\n];" in result

    def test_fresh_service_index(self) -> None:
        result = register_component(TargetKind.SERVICE_INDEX, None, WEATHER)
        assert result.count("export * from") == 1
        assert "import " not in result

    def test_fresh_prompt_index(self) -> None:
        result = register_component(TargetKind.PROMPT_INDEX, None, WEATHER)
        assert "import { weatherPromptMcp } from './weather/index.js';" in result
        assert "export const serverPrompts = [\n\tweatherPromptMcp,\n];" in result

    def test_generated_tools_barrel(self, project_dir: Path) -> None:
        text = (project_dir / "src/tools/index.ts").read_text()
        result = register_component(TargetKind.TOOL_INDEX, text, WEATHER)

        assert "export const serverTools: Tool[] = [\n  ...weatherTools,\n];" in result
        assert "import { Tool } from '@modelcontextprotocol/sdk/types.js';\n" \
            "import { weatherTools } from './weather/index.js';" in result
        assert "export * from './utils.js';\nexport * from './weather/index.js';" in result


class TestToolHandler:
    """Tests for dispatch-case registration in the tool handler."""

    def test_case_before_default(self, handler_with_case: str) -> None:
        result = register_component(TargetKind.TOOL_HANDLER, handler_with_case, FORECAST)

        expected = (
            '    case "forecast":\n'
            "      return await handleForecast(args as { message: string });\n"
            "\n"
            "    default:"
        )
        assert expected in result
        assert result.index('case "weather":') < result.index('case "forecast":')
        assert (
            'case "weather":\n      return await handleWeather(args as { message: string });'
            in result
        )
        assert "import { handleForecast } from '../tools/forecast/index.js';" in result

    def test_case_uses_args_type_override(self, handler_with_case: str) -> None:
        result = register_component(
            TargetKind.TOOL_HANDLER, handler_with_case, FORECAST, {"args_type": "{ city: string }"}
        )

        assert "return await handleForecast(args as { city: string });" in result
        assert result.count("import { handleForecast }") == 1

    def test_case_idempotent(self, handler_with_case: str) -> None:
        once = register_component(TargetKind.TOOL_HANDLER, handler_with_case, FORECAST)
        assert register_component(TargetKind.TOOL_HANDLER, once, FORECAST) == once

    def test_existing_case_is_skipped(self, handler_with_case: str) -> None:
        assert register_component(TargetKind.TOOL_HANDLER, handler_with_case, WEATHER) == (
            handler_with_case
        )

    def test_missing_dispatch_raises(self) -> None:
        with pytest.raises(DispatchNotFoundError):
            register_component(TargetKind.TOOL_HANDLER, "export const x = 1;\n", FORECAST)

    def test_absent_handler_raises(self) -> None:
        with pytest.raises(TargetNotFoundError):
            register_component(TargetKind.TOOL_HANDLER, None, FORECAST)


class TestRegisterInProject:
    """Tests for reading and writing target files in a project."""

    def test_registers_in_generated_project(self, project_dir: Path) -> None:
        outcome = register_in_project(project_dir, TargetKind.TOOL_HANDLER, WEATHER)

        assert outcome.changed
        assert not outcome.created
        content = (project_dir / "src/server/toolHandler.ts").read_text()
        assert 'case "weather":' in content

    def test_second_registration_reports_unchanged(self, project_dir: Path) -> None:
        register_in_project(project_dir, TargetKind.SERVICE_INDEX, WEATHER)
        outcome = register_in_project(project_dir, TargetKind.SERVICE_INDEX, WEATHER)
        assert not outcome.changed

    def test_absent_barrel_is_created(self, tmp_path: Path) -> None:
        outcome = register_in_project(tmp_path, TargetKind.TOOL_INDEX, WEATHER)

        assert outcome.created
        assert (tmp_path / "src/tools/index.ts").exists()

    def test_missing_dispatch_is_skipped_and_file_untouched(self, project_dir: Path) -> None:
        handler = project_dir / "src/server/toolHandler.ts"
        original = "export function registerToolHandlers() {}\n"
        handler.write_text(original)

        handler_outcome = register_in_project(project_dir, TargetKind.TOOL_HANDLER, FORECAST)
        index_outcome = register_in_project(project_dir, TargetKind.TOOL_INDEX, FORECAST)

        assert handler_outcome.skipped
        assert "dispatch" in (handler_outcome.note or "")
        assert handler.read_text() == original
        assert index_outcome.changed
        assert "...forecastTools," in (project_dir / "src/tools/index.ts").read_text()

    def test_absent_handler_is_skipped(self, tmp_path: Path) -> None:
        outcome = register_in_project(tmp_path, TargetKind.TOOL_HANDLER, WEATHER)

        assert outcome.skipped
        assert not (tmp_path / "src/server/toolHandler.ts").exists()
