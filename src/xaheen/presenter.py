"""Terminal rendering of suggestions, routes, usage and workflows (Rich)."""

from __future__ import annotations

from dataclasses import asdict
from io import StringIO
from typing import TYPE_CHECKING, Any

from rich.console import Console
from rich.table import Table
from rich.text import Text

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from xaheen.routing.catalog import WorkflowTemplate
    from xaheen.routing.matcher import CommandSuggestion
    from xaheen.routing.routes import CommandRoute

HIGH_CONFIDENCE = 80
MEDIUM_CONFIDENCE = 60


def confidence_style(confidence: int) -> str:
    """Colour band for a confidence percentage."""
    if confidence >= HIGH_CONFIDENCE:
        return "green"
    if confidence >= MEDIUM_CONFIDENCE:
        return "yellow"
    return "grey50"


def _render(renderables: Sequence[Any], *, color: bool, width: int) -> str:
    buf = StringIO()
    console = Console(
        file=buf,
        force_terminal=color,
        no_color=not color,
        width=width,
        highlight=False,
    )
    for renderable in renderables:
        console.print(renderable)
    return buf.getvalue()


def format_suggestions(
    suggestions: Sequence[CommandSuggestion],
    *,
    title: str = "Suggestions",
    color: bool = True,
    width: int = 100,
) -> str:
    """Ranked suggestions with confidence percentage and usage line."""
    if not suggestions:
        return _render([Text("No matching commands.", style="yellow")], color=color, width=width)

    table = Table(title=title, box=None, padding=(0, 1), title_justify="left")
    table.add_column("#", justify="right", style="dim", width=3)
    table.add_column("Command", style="cyan", no_wrap=True)
    table.add_column("Match", justify="right")
    table.add_column("Description")
    table.add_column("Usage", style="dim")

    for idx, suggestion in enumerate(suggestions, start=1):
        confidence = suggestion.confidence
        table.add_row(
            f"{idx}.",
            Text(suggestion.command),
            Text(f"{confidence}%", style=confidence_style(confidence)),
            Text(suggestion.description),
            Text(suggestion.usage),
        )
    return _render([table], color=color, width=width)


def format_routes(
    routes: Sequence[CommandRoute],
    category_for: Callable[[str], str],
    *,
    color: bool = True,
    width: int = 120,
) -> str:
    table = Table(box=None, padding=(0, 1))
    table.add_column("Command", style="cyan", no_wrap=True)
    table.add_column("Pattern")
    table.add_column("Category", style="magenta")
    table.add_column("Legacy", style="dim")
    table.add_column("Description")

    for route in sorted(routes, key=lambda r: r.key):
        table.add_row(
            Text(route.key),
            Text(route.pattern),
            category_for(route.key),
            Text(", ".join(route.legacy_commands())),
            Text(route.description),
        )
    return _render([table], color=color, width=width)


def format_usage(
    most_used: Sequence[tuple[str, int]],
    categories: Sequence[tuple[str, int]],
    *,
    color: bool = True,
    width: int = 80,
) -> str:
    """Most used commands and per-category totals."""
    if not most_used:
        return _render([Text("No command usage recorded yet.", style="yellow")],
                       color=color, width=width)

    commands = Table(title="Most Used Commands", box=None, padding=(0, 1), title_justify="left")
    commands.add_column("#", justify="right", style="dim", width=3)
    commands.add_column("Command", style="cyan")
    commands.add_column("Count", justify="right")
    for idx, (command, count) in enumerate(most_used, start=1):
        commands.add_row(f"{idx}.", command, str(count))

    by_category = Table(title="Category Preferences", box=None, padding=(0, 1),
                        title_justify="left")
    by_category.add_column("Category", style="magenta")
    by_category.add_column("Count", justify="right")
    for category, count in categories:
        by_category.add_row(category, str(count))

    return _render([commands, Text(""), by_category], color=color, width=width)


def format_workflow(workflow: WorkflowTemplate, *, color: bool = True, width: int = 80) -> str:
    lines: list[Any] = [
        Text(workflow.name, style="bold blue"),
        Text(workflow.description),
        Text(f"Category: {workflow.category}", style="dim"),
    ]
    if workflow.estimated_time:
        lines.append(Text(f"Estimated time: {workflow.estimated_time}", style="dim"))
    if workflow.prerequisites:
        lines.append(Text("Prerequisites:", style="yellow"))
        lines.extend(Text(f"  - {item}") for item in workflow.prerequisites)

    lines.append(Text("Steps:", style="green"))
    for idx, step in enumerate(workflow.steps, start=1):
        line = Text(f"  {idx}. ")
        line.append(step.command, style="cyan")
        if step.optional:
            line.append(" (optional)", style="dim")
        lines.append(line)
        lines.append(Text(f"     {step.description}", style="grey50"))
    return _render(lines, color=color, width=width)


def format_workflows(
    workflows: Sequence[WorkflowTemplate], *, color: bool = True, width: int = 100,
) -> str:
    table = Table(box=None, padding=(0, 1))
    table.add_column("Workflow", style="cyan", no_wrap=True)
    table.add_column("Steps", justify="right")
    table.add_column("Time", style="dim")
    table.add_column("Description")
    for workflow in sorted(workflows, key=lambda w: w.name):
        table.add_row(
            workflow.name, str(len(workflow.steps)), workflow.estimated_time, workflow.description,
        )
    return _render([table], color=color, width=width)


def suggestions_to_json(suggestions: Sequence[CommandSuggestion]) -> list[dict[str, Any]]:
    """JSON-ready dicts; similarity rounded to 4 places."""
    result: list[dict[str, Any]] = []
    for suggestion in suggestions:
        data = asdict(suggestion)
        data["similarity"] = round(suggestion.similarity, 4)
        data["aliases"] = list(suggestion.aliases)
        result.append(data)
    return result
