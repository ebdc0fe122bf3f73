"""Fuzzy command matcher: ranks registered commands against user input.

Combines the similarity engine, the alias index, the category map and the
usage tracker. Scoring passes:

1. exact alias hit -> similarity 1.0, emitted first
2. every indexed key (pattern and ``domain:action``) scored by similarity
3. scores below ``min_similarity`` dropped
4. survivors boosted from the ``CommandContext`` (capped at 1.0)
5. sorted by similarity desc, then command asc; truncated
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from xaheen.routing.aliases import AliasIndex
from xaheen.routing.catalog import DEFAULT_CATEGORY, build_category_map
from xaheen.routing.routes import CommandRoute, RouteRegistry, normalize_key
from xaheen.routing.similarity import similarity
from xaheen.routing.usage import UsageTracker

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

logger = logging.getLogger(__name__)

# Contextual boost terms.
RECENT_BOOST = 0.10
USAGE_BOOST_STEP = 0.01
USAGE_BOOST_CAP = 0.15
CATEGORY_WEIGHT_SCALE = 0.1
PREFERRED_BOOST = 0.20

MAX_CONTEXTUAL_SUGGESTIONS = 10
POPULAR_BASE_SCORE = 0.7
POPULAR_DECAY = 0.1

# ---------------------------------------------------------------------------
# Data structures
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ProjectContext:
    """Detected or configured metadata about the active project."""

    type: str = "unknown"
    framework: str = "unknown"
    features: tuple[str, ...] = ()


@dataclass(frozen=True)
class UserPreferences:
    preferred_commands: tuple[str, ...] = ()


@dataclass(frozen=True)
class CommandContext:
    """Read-only session snapshot used to bias suggestions."""

    recent_commands: tuple[str, ...] = ()
    current_project: ProjectContext | None = None
    user_preferences: UserPreferences | None = None


@dataclass(frozen=True)
class FuzzyMatchOptions:
    """Knobs for :meth:`FuzzyCommandMatcher.find_matches`.

    With ``deduplicate`` off, a route may appear twice (once per key form)
    and each entry reports the key that was scored.
    """

    max_suggestions: int = 5
    min_similarity: float = 0.3
    include_aliases: bool = True
    contextual_boost: bool = True
    deduplicate: bool = True
    category_weights: dict[str, float] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if self.max_suggestions < 0:
            msg = f"max_suggestions must be >= 0, got {self.max_suggestions}"
            raise ValueError(msg)
        if not 0.0 <= self.min_similarity <= 1.0:
            msg = f"min_similarity must be within [0, 1], got {self.min_similarity}"
            raise ValueError(msg)
        for category, weight in self.category_weights.items():
            if weight < 0:
                msg = f"category weight for {category!r} must be >= 0, got {weight}"
                raise ValueError(msg)


@dataclass(frozen=True)
class CommandSuggestion:
    """One ranked match, built fresh per lookup."""

    command: str
    description: str
    similarity: float
    category: str = DEFAULT_CATEGORY
    usage: str = ""
    aliases: tuple[str, ...] = ()

    @property
    def confidence(self) -> int:
        """Similarity as a whole percentage."""
        return round(self.similarity * 100)


@dataclass(frozen=True)
class ProjectBoostRule:
    """Boost commands whose key contains *keyword* for a matching project.

    A rule with both *framework* and *feature* requires both.
    """

    keyword: str
    boost: float
    framework: str | None = None
    feature: str | None = None

    def applies(self, key: str, project: ProjectContext) -> bool:
        if self.keyword not in key:
            return False
        if self.framework is not None and project.framework != self.framework:
            return False
        return not (self.feature is not None and self.feature not in project.features)


PROJECT_BOOST_RULES: tuple[ProjectBoostRule, ...] = (
    ProjectBoostRule("component", 0.10, framework="react"),
    ProjectBoostRule("component", 0.10, framework="vue"),
    ProjectBoostRule("page", 0.10, framework="nextjs"),
    ProjectBoostRule("controller", 0.10, framework="nestjs"),
    ProjectBoostRule("service", 0.05, framework="nestjs"),
    ProjectBoostRule("auth", 0.15, feature="auth"),
    ProjectBoostRule("model", 0.10, feature="database"),
    ProjectBoostRule("migration", 0.10, feature="database"),
)

# (command, description, similarity) per framework.
FRAMEWORK_SUGGESTIONS: dict[str, tuple[tuple[str, str, float], ...]] = {
    "react": (
        ("make:component", "Create a React component", 0.9),
        ("page:create", "Create a page", 0.8),
    ),
    "nextjs": (
        ("page:generate", "Generate a Next.js page", 0.9),
        ("make:component", "Create a component", 0.85),
    ),
    "vue": (
        ("make:component", "Create a Vue component", 0.9),
    ),
    "nestjs": (
        ("make:controller", "Create a NestJS controller", 0.9),
        ("make:service", "Create a NestJS service", 0.85),
        ("make:model", "Create a data model", 0.8),
    ),
}

# What usually follows a command: (next command, description, similarity).
WORKFLOW_SEQUENCES: dict[str, tuple[tuple[str, str, float], ...]] = {
    "make:model": (
        ("make:controller", "Create a controller for the model", 0.85),
        ("make:migration", "Create a migration for the model", 0.8),
    ),
    "make:migration": (
        ("make:seeder", "Seed the new table", 0.75),
    ),
    "make:controller": (
        ("make:service", "Extract business logic into a service", 0.8),
    ),
    "project:create": (
        ("service:add", "Add a service to the new project", 0.8),
        ("make:component", "Create your first component", 0.75),
    ),
    "make:component": (
        ("docs:generate", "Document the new component", 0.7),
    ),
    "security:audit": (
        ("devops:docker", "Containerize the audited application", 0.75),
    ),
}

POPULAR_COMMANDS: tuple[tuple[str, str], ...] = (
    ("project:create", "Create a new project"),
    ("make:component", "Create a component"),
    ("ai:generate", "Generate code with AI"),
    ("service:add", "Add a service"),
    ("make:model", "Create a data model"),
)


# ---------------------------------------------------------------------------
# Matcher
# ---------------------------------------------------------------------------


class FuzzyCommandMatcher:
    """Resolve mistyped or abbreviated input to registered commands.

    The matcher owns its route registry, alias index and category map;
    callers only reach them through the methods below.
    """

    def __init__(
        self,
        *,
        aliases: AliasIndex | None = None,
        category_map: Mapping[str, str] | None = None,
        usage: UsageTracker | None = None,
        boost_rules: Iterable[ProjectBoostRule] = PROJECT_BOOST_RULES,
        options: FuzzyMatchOptions | None = None,
    ) -> None:
        self._registry = RouteRegistry()
        self._aliases = aliases if aliases is not None else AliasIndex()
        self._categories: dict[str, str] = (
            dict(category_map) if category_map is not None else build_category_map()
        )
        self._usage = usage if usage is not None else UsageTracker()
        self._boost_rules = tuple(boost_rules)
        self._options = options or FuzzyMatchOptions()

    # -- registration ------------------------------------------------------

    def register_commands(self, routes: Mapping[str, CommandRoute]) -> None:
        """Replace all routes; legacy names become aliases of their route."""
        self._registry.register_commands(routes)
        self._aliases.reset()
        self._aliases.register_many(self._registry.legacy_aliases())

    def lookup(self, key: str) -> CommandRoute | None:
        return self._registry.lookup(key)

    def routes(self) -> list[CommandRoute]:
        return self._registry.routes()

    def resolve_alias(self, alias: str) -> CommandRoute | None:
        """Route an alias points at, or None if unknown or unregistered."""
        target = self._aliases.resolve(alias)
        if target is None:
            return None
        route = self._registry.lookup(target)
        if route is None:
            logger.debug("Alias %r points at unregistered command %s", alias, target)
        return route

    def category_for(self, key: str) -> str:
        return self._categories.get(normalize_key(key), DEFAULT_CATEGORY)

    @property
    def options(self) -> FuzzyMatchOptions:
        return self._options

    # -- usage -------------------------------------------------------------

    @property
    def usage(self) -> UsageTracker:
        return self._usage

    def record_command_usage(self, command: str) -> None:
        """Count one use of *command* (normalized; blank names are skipped)."""
        self._usage.record(command)

    def get_usage_stats(self) -> dict[str, int]:
        """Copy of the usage counters; mutating it does not affect the matcher."""
        return self._usage.stats()

    # -- fuzzy matching ----------------------------------------------------

    def find_matches(
        self,
        input_value: str,
        context: CommandContext | None = None,
        options: FuzzyMatchOptions | None = None,
    ) -> list[CommandSuggestion]:
        """Rank registered commands against *input_value*."""
        opts = options or self._options
        query = normalize_key(input_value)
        results: list[CommandSuggestion] = []

        if opts.include_aliases and query:
            route = self.resolve_alias(query)
            if route is not None:
                results.append(self._suggest(route, route.key, 1.0))

        for key, route in self._registry.items():
            score = similarity(query, key)
            if score < opts.min_similarity:
                continue
            if opts.contextual_boost and context is not None:
                score = min(1.0, score + self.contextual_boost(route, context, opts))
            command = route.key if opts.deduplicate else key
            results.append(self._suggest(route, command, score))

        if opts.deduplicate:
            results = _best_per_command(results)

        results.sort(key=lambda s: (-s.similarity, s.command))
        return results[: opts.max_suggestions]

    def contextual_boost(
        self,
        route: CommandRoute,
        context: CommandContext,
        options: FuzzyMatchOptions | None = None,
    ) -> float:
        """Additive boost for *route* given the session context (uncapped)."""
        opts = options or self._options
        key = normalize_key(route.key)
        boost = 0.0

        if key in {normalize_key(cmd) for cmd in context.recent_commands}:
            boost += RECENT_BOOST

        boost += min(USAGE_BOOST_CAP, self._usage.count(key) * USAGE_BOOST_STEP)

        weight = opts.category_weights.get(self.category_for(key))
        if weight:
            boost += weight * CATEGORY_WEIGHT_SCALE

        if context.current_project is not None:
            boost += sum(
                rule.boost for rule in self._boost_rules
                if rule.applies(key, context.current_project)
            )

        prefs = context.user_preferences
        if prefs is not None and key in {normalize_key(cmd) for cmd in prefs.preferred_commands}:
            boost += PREFERRED_BOOST

        return boost

    # -- contextual suggestions (no input) ---------------------------------

    def get_contextual_suggestions(self, context: CommandContext) -> list[CommandSuggestion]:
        """Suggestions from project framework, last command and popularity.

        Does not use string similarity. Duplicates keep their best score.
        """
        results: list[CommandSuggestion] = []
        if context.current_project is not None:
            results.extend(self.get_framework_suggestions(context.current_project.framework))
        if context.recent_commands:
            results.extend(self.get_workflow_suggestions(context.recent_commands[-1]))
        results.extend(self.get_popular_suggestions())

        results = _best_per_command(results)
        results.sort(key=lambda s: (-s.similarity, s.command))
        return results[:MAX_CONTEXTUAL_SUGGESTIONS]

    def get_framework_suggestions(self, framework: str) -> list[CommandSuggestion]:
        return [
            self._suggest_key(command, description, score)
            for command, description, score in FRAMEWORK_SUGGESTIONS.get(
                normalize_key(framework), ()
            )
        ]

    def get_workflow_suggestions(self, last_command: str) -> list[CommandSuggestion]:
        return [
            self._suggest_key(command, description, score)
            for command, description, score in WORKFLOW_SEQUENCES.get(
                normalize_key(last_command), ()
            )
        ]

    def get_popular_suggestions(self) -> list[CommandSuggestion]:
        return [
            self._suggest_key(
                command, description, round(POPULAR_BASE_SCORE - idx * POPULAR_DECAY, 4),
            )
            for idx, (command, description) in enumerate(POPULAR_COMMANDS)
        ]

    # -- helpers -----------------------------------------------------------

    def _suggest(self, route: CommandRoute, command: str, score: float) -> CommandSuggestion:
        return CommandSuggestion(
            command=command,
            description=route.description or f"{route.domain} {route.action}",
            similarity=max(0.0, min(1.0, score)),
            category=self.category_for(route.key),
            usage=route.pattern,
            aliases=tuple(self._aliases.aliases_for(route.key)),
        )

    def _suggest_key(self, command: str, description: str, score: float) -> CommandSuggestion:
        """Suggestion for a canned command, enriched from its route if registered."""
        route = self._registry.lookup(command)
        if route is not None:
            return self._suggest(route, route.key, score)
        return CommandSuggestion(
            command=command,
            description=description,
            similarity=score,
            category=self.category_for(command),
            usage=command,
            aliases=tuple(self._aliases.aliases_for(command)),
        )


def _best_per_command(suggestions: list[CommandSuggestion]) -> list[CommandSuggestion]:
    """Keep the highest-scoring suggestion per command (earliest wins ties)."""
    best: dict[str, CommandSuggestion] = {}
    for suggestion in suggestions:
        current = best.get(suggestion.command)
        if current is None or suggestion.similarity > current.similarity:
            best[suggestion.command] = suggestion
    return list(best.values())
