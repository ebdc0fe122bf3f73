"""Command routing domain: route registry, aliases, fuzzy matching, usage."""

from xaheen.routing.aliases import DEFAULT_ALIASES, AliasIndex
from xaheen.routing.catalog import (
    CATEGORIES,
    DEFAULT_CATEGORY,
    WORKFLOWS,
    CommandCategory,
    WorkflowStep,
    WorkflowTemplate,
    build_category_map,
    build_workflows,
    find_workflow,
    workflow_from_dict,
)
from xaheen.routing.dispatch import (
    DispatchResult,
    bind_arguments,
    dispatch,
    pattern_placeholders,
    resolve_command,
)
from xaheen.routing.matcher import (
    CommandContext,
    CommandSuggestion,
    FuzzyCommandMatcher,
    FuzzyMatchOptions,
    ProjectBoostRule,
    ProjectContext,
    UserPreferences,
)
from xaheen.routing.providers import (
    BUILTIN_ROUTES,
    CommandInvocation,
    HandlerNotFoundError,
    HandlerRegistry,
    HandlerResolver,
    RouteProvider,
    RouteSpec,
    builtin_providers,
    collect_routes,
)
from xaheen.routing.routes import CommandRoute, RouteRegistry
from xaheen.routing.similarity import levenshtein, similarity, token_overlap, tokenize
from xaheen.routing.usage import UsageTracker, load_usage, save_usage

__all__ = [
    "BUILTIN_ROUTES",
    "CATEGORIES",
    "DEFAULT_ALIASES",
    "DEFAULT_CATEGORY",
    "WORKFLOWS",
    "AliasIndex",
    "CommandCategory",
    "CommandContext",
    "CommandInvocation",
    "CommandRoute",
    "CommandSuggestion",
    "DispatchResult",
    "FuzzyCommandMatcher",
    "FuzzyMatchOptions",
    "HandlerNotFoundError",
    "HandlerRegistry",
    "HandlerResolver",
    "ProjectBoostRule",
    "ProjectContext",
    "RouteProvider",
    "RouteRegistry",
    "RouteSpec",
    "UsageTracker",
    "UserPreferences",
    "WorkflowStep",
    "WorkflowTemplate",
    "bind_arguments",
    "build_category_map",
    "build_workflows",
    "builtin_providers",
    "collect_routes",
    "dispatch",
    "find_workflow",
    "levenshtein",
    "load_usage",
    "pattern_placeholders",
    "resolve_command",
    "save_usage",
    "similarity",
    "token_overlap",
    "tokenize",
    "workflow_from_dict",
]
