"""Command categories and guided workflow templates.

Categories feed the matcher's category map (a scoring signal only);
workflows are multi-step recipes shown by ``xaheen workflows``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

DEFAULT_CATEGORY = "general"


@dataclass(frozen=True)
class CommandCategory:
    """A named group of canonical command keys."""

    name: str
    title: str
    description: str
    commands: tuple[str, ...]
    popularity: int = 50


@dataclass(frozen=True)
class WorkflowStep:
    command: str
    description: str
    optional: bool = False
    parameters: dict[str, Any] = field(default_factory=dict, compare=False)


@dataclass(frozen=True)
class WorkflowTemplate:
    """An ordered sequence of commands for a common task."""

    name: str
    description: str
    category: str
    steps: tuple[WorkflowStep, ...]
    prerequisites: tuple[str, ...] = ()
    estimated_time: str = ""

    def required_steps(self) -> list[WorkflowStep]:
        return [step for step in self.steps if not step.optional]


CATEGORIES: tuple[CommandCategory, ...] = (
    CommandCategory(
        name="project",
        title="Project Management",
        description="Create, validate, and manage projects",
        commands=("project:create", "project:validate", "app:create", "package:create"),
        popularity=95,
    ),
    CommandCategory(
        name="generation",
        title="Code Generation",
        description="Generate components, models, and services",
        commands=("make:component", "make:model", "make:service", "make:controller"),
        popularity=90,
    ),
    CommandCategory(
        name="ai",
        title="AI Integration",
        description="AI-powered development tools",
        commands=("ai:generate", "ai:code", "mcp:connect", "mcp:generate"),
        popularity=85,
    ),
    CommandCategory(
        name="devops",
        title="DevOps & Deployment",
        description="Docker, Kubernetes, and CI/CD",
        commands=("devops:docker", "devops:kubernetes", "devops:helm"),
        popularity=70,
    ),
    CommandCategory(
        name="security",
        title="Security & Compliance",
        description="Security audits and compliance reports",
        commands=("security:audit", "security:scan", "compliance:report"),
        popularity=60,
    ),
    CommandCategory(
        name="documentation",
        title="Documentation",
        description="Generate and manage documentation",
        commands=("docs:generate", "docs:portal", "docs:sync"),
        popularity=55,
    ),
    CommandCategory(
        name="templates",
        title="Templates & Themes",
        description="Template modernization and themes",
        commands=("theme:create", "template:create", "template:extend"),
        popularity=45,
    ),
)


WORKFLOWS: tuple[WorkflowTemplate, ...] = (
    WorkflowTemplate(
        name="New React Project Setup",
        description="Complete setup for a new React project with modern tooling",
        category="Frontend Development",
        steps=(
            WorkflowStep(
                "project:create",
                "Create a new project structure",
                parameters={"template": "react", "features": ["typescript", "tailwind", "testing"]},
            ),
            WorkflowStep("make:component", "Create your first component", optional=True),
            WorkflowStep("docs:generate", "Generate project documentation", optional=True),
        ),
        prerequisites=("Node.js 18+", "Git"),
        estimated_time="5-10 minutes",
    ),
    WorkflowTemplate(
        name="API Development Workflow",
        description="Set up a complete API with models, controllers, and documentation",
        category="Backend Development",
        steps=(
            WorkflowStep("make:model", "Create data models"),
            WorkflowStep("make:controller", "Create API controllers"),
            WorkflowStep("docs:generate", "Generate API documentation", parameters={"type": "api"}),
            WorkflowStep("security:scan", "Run security scan", optional=True),
        ),
        prerequisites=("Database connection", "Authentication setup"),
        estimated_time="15-20 minutes",
    ),
    WorkflowTemplate(
        name="Production Deployment",
        description="Deploy your application to production with monitoring",
        category="DevOps",
        steps=(
            WorkflowStep("security:audit", "Run security audit"),
            WorkflowStep("devops:docker", "Create Docker configuration"),
            WorkflowStep("devops:kubernetes", "Set up Kubernetes deployment", optional=True),
            WorkflowStep(
                "docs:generate",
                "Generate deployment documentation",
                parameters={"type": "deployment"},
            ),
        ),
        prerequisites=("Docker installed", "Cloud provider account"),
        estimated_time="20-30 minutes",
    ),
)


def build_category_map(
    categories: Iterable[CommandCategory] = CATEGORIES,
    extra: Mapping[str, str] | None = None,
) -> dict[str, str]:
    """Map canonical command key -> category name.

    Entries in *extra* override the category definitions.
    """
    result: dict[str, str] = {}
    for category in categories:
        for command in category.commands:
            result[command] = category.name
    if extra:
        result.update({key.strip().lower(): value for key, value in extra.items()})
    return result


def build_workflows(
    templates: Iterable[WorkflowTemplate] = WORKFLOWS,
    extra: Iterable[WorkflowTemplate] | None = None,
) -> tuple[WorkflowTemplate, ...]:
    """Built-in workflows plus *extra* ones.

    An extra workflow replaces a built-in of the same name (case-insensitive)
    in place; new names are appended.
    """
    result: dict[str, WorkflowTemplate] = {w.name.strip().lower(): w for w in templates}
    for workflow in extra or ():
        result[workflow.name.strip().lower()] = workflow
    return tuple(result.values())


def workflow_from_dict(data: Mapping[str, Any]) -> WorkflowTemplate:
    """Build a workflow from its YAML form.

    Raises ValueError if the name or steps are missing or malformed.
    """
    name = data.get("name")
    if not isinstance(name, str) or not name.strip():
        msg = "workflow needs a non-empty 'name'"
        raise ValueError(msg)

    raw_steps = data.get("steps")
    if not isinstance(raw_steps, list) or not raw_steps:
        msg = f"workflow {name!r} needs a non-empty 'steps' list"
        raise ValueError(msg)

    steps: list[WorkflowStep] = []
    for raw in raw_steps:
        if isinstance(raw, str):
            raw = {"command": raw}
        if not isinstance(raw, dict) or not isinstance(raw.get("command"), str):
            msg = f"workflow {name!r}: every step needs a 'command'"
            raise ValueError(msg)
        parameters = raw.get("parameters") or {}
        if not isinstance(parameters, dict):
            msg = f"workflow {name!r}: step parameters must be a mapping"
            raise ValueError(msg)
        steps.append(WorkflowStep(
            command=raw["command"].strip().lower(),
            description=str(raw.get("description", "")),
            optional=raw.get("optional") is True,
            parameters=dict(parameters),
        ))

    prerequisites = data.get("prerequisites") or []
    if not isinstance(prerequisites, list):
        prerequisites = [prerequisites]
    return WorkflowTemplate(
        name=name.strip(),
        description=str(data.get("description", "")),
        category=str(data.get("category", "Custom")),
        steps=tuple(steps),
        prerequisites=tuple(str(p) for p in prerequisites),
        estimated_time=str(data.get("estimated_time", "")),
    )


def find_workflow(
    name: str, workflows: Iterable[WorkflowTemplate] = WORKFLOWS,
) -> WorkflowTemplate | None:
    """Case-insensitive lookup of a workflow by name."""
    wanted = name.strip().lower()
    for workflow in workflows:
        if workflow.name.lower() == wanted:
            return workflow
    return None
