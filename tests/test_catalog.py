"""Tests for xaheen.routing.catalog: categories and workflow templates."""

from __future__ import annotations

import pytest

from xaheen.routing.catalog import (
    CATEGORIES,
    WORKFLOWS,
    CommandCategory,
    WorkflowStep,
    WorkflowTemplate,
    build_category_map,
    build_workflows,
    find_workflow,
    workflow_from_dict,
)


class TestBuildCategoryMap:
    def test_defaults(self) -> None:
        mapping = build_category_map()
        assert mapping["make:component"] == "generation"
        assert mapping["project:create"] == "project"
        assert mapping["docs:generate"] == "documentation"

    def test_extra_overrides(self) -> None:
        mapping = build_category_map(extra={" Make:Component ": "frontend", "auth:login": "security"})
        assert mapping["make:component"] == "frontend"
        assert mapping["auth:login"] == "security"

    def test_custom_categories(self) -> None:
        custom = (CommandCategory("mine", "Mine", "Only mine", ("a:b",)),)
        assert build_category_map(custom) == {"a:b": "mine"}

    def test_every_category_has_commands(self) -> None:
        for category in CATEGORIES:
            assert category.commands, category.name


class TestWorkflows:
    def test_find_case_insensitive(self) -> None:
        workflow = find_workflow("api development workflow")
        assert workflow is not None
        assert workflow.steps[0].command == "make:model"

    def test_find_unknown(self) -> None:
        assert find_workflow("Nothing Like This") is None

    def test_required_steps(self) -> None:
        workflow = find_workflow("New React Project Setup")
        assert workflow is not None
        assert [step.command for step in workflow.required_steps()] == ["project:create"]

    def test_names_unique(self) -> None:
        names = [w.name.lower() for w in WORKFLOWS]
        assert len(names) == len(set(names))


def _workflow(name: str, *commands: str) -> WorkflowTemplate:
    return WorkflowTemplate(
        name=name,
        description="",
        category="Custom",
        steps=tuple(WorkflowStep(command=c, description="") for c in commands),
    )


class TestBuildWorkflows:
    def test_defaults(self) -> None:
        assert build_workflows() == WORKFLOWS

    def test_extra_appended(self) -> None:
        release = _workflow("Release", "security:audit")
        result = build_workflows(extra=[release])
        assert result[:-1] == WORKFLOWS
        assert result[-1] is release

    def test_extra_replaces_same_name_in_place(self) -> None:
        replacement = _workflow("api development workflow", "make:crud")
        result = build_workflows(extra=[replacement])
        assert len(result) == len(WORKFLOWS)
        position = [w.name for w in WORKFLOWS].index("API Development Workflow")
        assert result[position] is replacement

    def test_find_in_custom_list(self) -> None:
        release = _workflow("Release", "security:audit")
        available = build_workflows(extra=[release])
        assert find_workflow("release", available) is release
        assert find_workflow("release") is None


class TestWorkflowFromDict:
    def test_string_and_mapping_steps(self) -> None:
        workflow = workflow_from_dict({
            "name": " Release ",
            "description": "Cut a release",
            "steps": [
                "Security:Audit",
                {"command": "docs:generate", "optional": True, "parameters": {"format": "md"}},
            ],
            "prerequisites": "clean tree",
        })
        assert workflow.name == "Release"
        assert workflow.category == "Custom"
        assert [s.command for s in workflow.steps] == ["security:audit", "docs:generate"]
        assert [s.command for s in workflow.required_steps()] == ["security:audit"]
        assert workflow.steps[1].parameters == {"format": "md"}
        assert workflow.prerequisites == ("clean tree",)

    def test_optional_must_be_true(self) -> None:
        workflow = workflow_from_dict({
            "name": "Release",
            "steps": [{"command": "security:audit", "optional": "yes"}],
        })
        assert workflow.steps[0].optional is False

    @pytest.mark.parametrize(
        "data",
        [
            {"steps": ["security:audit"]},
            {"name": "  ", "steps": ["security:audit"]},
            {"name": "Release"},
            {"name": "Release", "steps": []},
            {"name": "Release", "steps": [{"description": "no command"}]},
            {"name": "Release", "steps": [{"command": "a:b", "parameters": ["x"]}]},
        ],
    )
    def test_malformed_rejected(self, data: dict[str, object]) -> None:
        with pytest.raises(ValueError, match="workflow"):
            workflow_from_dict(data)
