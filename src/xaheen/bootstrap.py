"""Application wiring: config, routes, matcher and usage for one project."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from xaheen.config import XaheenConfig, load_config, usage_path
from xaheen.project import detect_project
from xaheen.routing.aliases import DEFAULT_ALIASES, AliasIndex
from xaheen.routing.catalog import build_category_map, build_workflows
from xaheen.routing.matcher import CommandContext, FuzzyCommandMatcher, UserPreferences
from xaheen.routing.providers import HandlerRegistry, builtin_providers, collect_routes
from xaheen.routing.usage import load_usage, save_usage

if TYPE_CHECKING:
    from pathlib import Path

    from xaheen.routing.catalog import WorkflowTemplate

logger = logging.getLogger(__name__)


@dataclass
class Session:
    """Everything a CLI invocation needs, built once at startup."""

    project_root: Path
    config: XaheenConfig
    matcher: FuzzyCommandMatcher
    handlers: HandlerRegistry

    def context(self) -> CommandContext:
        """Context snapshot; ``recent_commands`` is oldest first."""
        usage = self.matcher.usage
        project = self.config.project or detect_project(self.project_root)
        return CommandContext(
            recent_commands=tuple(reversed(usage.recent())),
            current_project=project,
            user_preferences=UserPreferences(preferred_commands=tuple(usage.favorites())),
        )

    @property
    def workflows(self) -> tuple[WorkflowTemplate, ...]:
        """Built-in workflows with the configured ones merged in."""
        return build_workflows(extra=self.config.workflows)

    def save_usage(self) -> None:
        save_usage(self.matcher.usage, usage_path(self.project_root))


def open_session(project_root: Path, handlers: HandlerRegistry | None = None) -> Session:
    """Load config and usage, register built-in routes.

    Raises ValueError if the config holds invalid matcher settings.
    """
    config = load_config(project_root)
    handlers = handlers or HandlerRegistry()

    matcher = FuzzyCommandMatcher(
        aliases=AliasIndex({**DEFAULT_ALIASES, **config.aliases}),
        category_map=build_category_map(extra=config.categories),
        usage=load_usage(usage_path(project_root)),
        options=config.options,
    )
    matcher.register_commands(collect_routes(builtin_providers(handlers)))
    logger.debug("Session ready: %d routes", len(matcher.routes()))

    return Session(project_root=project_root, config=config, matcher=matcher, handlers=handlers)
