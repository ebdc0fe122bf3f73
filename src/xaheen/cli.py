"""Xaheen CLI entry point."""

from __future__ import annotations

import dataclasses
import json
import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING, Any

import click

from xaheen import __version__

if TYPE_CHECKING:
    from xaheen.bootstrap import Session

_project_option = click.option(
    "--project",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=None,
    help="Project root (default: current directory).",
)


@click.group()
@click.version_option(version=__version__, prog_name="xaheen")
@click.option("--verbose", "-v", is_flag=True, help="Verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Minimal output (errors only).")
@click.pass_context
def main(ctx: click.Context, *, verbose: bool, quiet: bool) -> None:
    """Xaheen - project scaffolding with fuzzy command discovery."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet

    level = logging.WARNING
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.ERROR
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


def _color() -> bool:
    return sys.stdout.isatty()


def _open(project: Path | None) -> Session:
    from xaheen.bootstrap import open_session

    try:
        return open_session(project or Path.cwd())
    except ValueError as exc:
        click.echo(f"Error: invalid configuration: {exc}", err=True)
        sys.exit(1)


def _echo_json(data: Any) -> None:
    click.echo(json.dumps(data, ensure_ascii=False, indent=2))


@main.command()
@click.argument("words", nargs=-1)
@click.option("--limit", type=click.IntRange(min=0), default=None, help="Max suggestions.")
@click.option(
    "--min-similarity",
    type=click.FloatRange(0.0, 1.0),
    default=None,
    help="Drop matches scoring below this.",
)
@click.option("--no-aliases", is_flag=True, help="Do not resolve aliases.")
@click.option("--no-boost", is_flag=True, help="Ignore history and project context.")
@click.option("--json", "output_json", is_flag=True, help="Output as JSON.")
@_project_option
def suggest(
    words: tuple[str, ...],
    *,
    limit: int | None,
    min_similarity: float | None,
    no_aliases: bool,
    no_boost: bool,
    output_json: bool,
    project: Path | None,
) -> None:
    """Suggest commands matching WORDS (no WORDS: what to run next)."""
    from xaheen.presenter import format_suggestions, suggestions_to_json

    session = _open(project)
    context = session.context()
    text = " ".join(words).strip()

    if text:
        overrides: dict[str, Any] = {}
        if limit is not None:
            overrides["max_suggestions"] = limit
        if min_similarity is not None:
            overrides["min_similarity"] = min_similarity
        if no_aliases:
            overrides["include_aliases"] = False
        if no_boost:
            overrides["contextual_boost"] = False
        options = dataclasses.replace(session.config.options, **overrides)
        suggestions = session.matcher.find_matches(text, context, options)
        title = f'Matches for "{text}"'
    else:
        suggestions = session.matcher.get_contextual_suggestions(context)
        if limit is not None:
            suggestions = suggestions[:limit]
        title = "Suggested commands"

    if output_json:
        _echo_json(suggestions_to_json(suggestions))
        return
    click.echo(format_suggestions(suggestions, title=title, color=_color()), nl=False)


@main.command()
@click.argument("command")
@click.argument("values", nargs=-1)
@click.option("--dry-run", is_flag=True, help="Resolve and show the command without running it.")
@_project_option
def run(command: str, values: tuple[str, ...], *, dry_run: bool, project: Path | None) -> None:
    """Run COMMAND (key, pattern, alias or a close spelling) with VALUES."""
    from xaheen.presenter import format_suggestions
    from xaheen.routing.dispatch import bind_arguments, dispatch, resolve_command
    from xaheen.routing.providers import HandlerNotFoundError

    session = _open(project)
    context = session.context()
    threshold = session.config.dispatch_threshold

    try:
        if dry_run:
            result = resolve_command(session.matcher, command, context, threshold=threshold)
            arguments = bind_arguments(result.route, values) if result.route else {}
        else:
            result = dispatch(session.matcher, command, values, context, threshold=threshold)
            arguments = {}
    except (HandlerNotFoundError, ValueError) as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)

    if result.route is None:
        problem = "ambiguous" if result.ambiguous else "unknown"
        click.echo(f"Error: {problem} command {command!r}", err=True)
        title = "Popular commands" if result.fallback else "Did you mean?"
        click.echo(
            format_suggestions(result.suggestions, title=title, color=_color()),
            nl=False,
            err=True,
        )
        sys.exit(1)

    route = result.route
    if result.matched_by != "exact":
        click.echo(f"Resolved {command!r} to {route.key} ({result.matched_by})")

    if dry_run:
        click.echo(f"Command: {route.key}")
        click.echo(f"Pattern: {route.pattern}")
        for name, value in arguments.items():
            click.echo(f"  {name} = {value}")
        return

    session.save_usage()
    if result.output is not None:
        click.echo(result.output)


@main.command()
@click.option("--domain", default=None, help="Only routes of this domain.")
@click.option("--json", "output_json", is_flag=True, help="Output as JSON.")
@_project_option
def routes(*, domain: str | None, output_json: bool, project: Path | None) -> None:
    """List registered commands."""
    from xaheen.presenter import format_routes

    session = _open(project)
    matcher = session.matcher
    selected = [r for r in matcher.routes() if domain is None or r.domain == domain]

    if output_json:
        _echo_json([
            {
                "command": r.key,
                "pattern": r.pattern,
                "domain": r.domain,
                "action": r.action,
                "category": matcher.category_for(r.key),
                "description": r.description,
                "legacy": {tool: list(cmds) for tool, cmds in r.legacy.items()},
                "examples": list(r.examples),
            }
            for r in sorted(selected, key=lambda r: r.key)
        ])
        return

    if not selected:
        click.echo(f"No routes for domain {domain!r}.")
        return
    click.echo(format_routes(selected, matcher.category_for, color=_color()), nl=False)


@main.command()
@click.option("--json", "output_json", is_flag=True, help="Output as JSON.")
@click.option("--reset", is_flag=True, help="Clear recorded usage.")
@_project_option
def usage(*, output_json: bool, reset: bool, project: Path | None) -> None:
    """Show command usage analytics."""
    from xaheen.presenter import format_usage

    session = _open(project)
    tracker = session.matcher.usage

    if reset:
        tracker.reset()
        session.save_usage()
        click.echo("Usage history cleared.")
        return

    most_used = tracker.most_used()
    categories = tracker.category_usage(
        {cmd: session.matcher.category_for(cmd) for cmd in tracker.stats()}
    )

    if output_json:
        _echo_json({
            "most_used": [{"command": c, "count": n} for c, n in most_used],
            "categories": [{"category": c, "count": n} for c, n in categories],
            "recent": tracker.recent(),
            "favorites": tracker.favorites(),
        })
        return
    click.echo(format_usage(most_used, categories, color=_color()), nl=False)


@main.command()
@click.argument("name", required=False)
@click.option("--json", "output_json", is_flag=True, help="Output as JSON.")
@_project_option
def workflows(name: str | None, *, output_json: bool, project: Path | None) -> None:
    """List guided workflows, or show the steps of NAME."""
    from xaheen.presenter import format_workflow, format_workflows
    from xaheen.routing.catalog import find_workflow

    available = _open(project).workflows

    if name is None:
        if output_json:
            _echo_json([dataclasses.asdict(w) for w in available])
            return
        click.echo(format_workflows(available, color=_color()), nl=False)
        return

    workflow = find_workflow(name, available)
    if workflow is None:
        click.echo(f"Error: unknown workflow {name!r}", err=True)
        sys.exit(1)

    if output_json:
        _echo_json(dataclasses.asdict(workflow))
        return
    click.echo(format_workflow(workflow, color=_color()), nl=False)
