"""Tests for xaheen.presenter: Rich rendering helpers."""

from __future__ import annotations

from xaheen.presenter import (
    confidence_style,
    format_routes,
    format_suggestions,
    format_usage,
    format_workflow,
    format_workflows,
    suggestions_to_json,
)
from xaheen.routing.catalog import WORKFLOWS, find_workflow
from xaheen.routing.matcher import CommandSuggestion
from xaheen.routing.routes import CommandRoute


def _suggestion(command: str, score: float) -> CommandSuggestion:
    return CommandSuggestion(
        command=command,
        description="Create a thing",
        similarity=score,
        category="generation",
        usage=f"{command} <name>",
        aliases=("mc",),
    )


class TestConfidenceStyle:
    def test_bands(self) -> None:
        assert confidence_style(100) == "green"
        assert confidence_style(80) == "green"
        assert confidence_style(79) == "yellow"
        assert confidence_style(60) == "yellow"
        assert confidence_style(59) == "grey50"


class TestFormatSuggestions:
    def test_rows(self) -> None:
        output = format_suggestions(
            [_suggestion("make:component", 0.926), _suggestion("make:service", 0.5)],
            title="Did you mean?",
            color=False,
        )
        assert "Did you mean?" in output
        assert "make:component" in output
        assert "93%" in output
        assert "50%" in output
        assert output.index("make:component") < output.index("make:service")

    def test_plain_output_has_no_escape_codes(self) -> None:
        output = format_suggestions([_suggestion("make:component", 1.0)], color=False)
        assert "\x1b[" not in output

    def test_empty(self) -> None:
        assert "No matching commands." in format_suggestions([], color=False)


class TestFormatOthers:
    def test_routes(self) -> None:
        route = CommandRoute(
            "project create <name>", "project", "create",
            legacy={"xala": ("init",)}, description="Create a new project",
        )
        output = format_routes([route], lambda key: "project", color=False)
        assert "project:create" in output
        assert "init" in output

    def test_usage(self) -> None:
        output = format_usage([("make:model", 3)], [("generation", 3)], color=False)
        assert "Most Used Commands" in output
        assert "make:model" in output
        assert "generation" in output

    def test_usage_empty(self) -> None:
        assert "No command usage recorded yet." in format_usage([], [], color=False)

    def test_workflow(self) -> None:
        workflow = find_workflow("API Development Workflow")
        assert workflow is not None
        output = format_workflow(workflow, color=False)
        assert "1. make:model" in output
        assert "security:scan (optional)" in output
        assert "Database connection" in output

    def test_workflows_table(self) -> None:
        output = format_workflows(WORKFLOWS, color=False)
        for workflow in WORKFLOWS:
            assert workflow.name in output


class TestSuggestionsToJson:
    def test_fields(self) -> None:
        data = suggestions_to_json([_suggestion("make:component", 0.928571428)])
        assert data == [{
            "command": "make:component",
            "description": "Create a thing",
            "similarity": 0.9286,
            "category": "generation",
            "usage": "make:component <name>",
            "aliases": ["mc"],
        }]
