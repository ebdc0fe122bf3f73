"""Turn raw user input into a handler call.

Resolution order: exact route key, alias, then the top fuzzy suggestion if
it clears the dispatch threshold and leads the next different command by the
dispatch margin. When nothing clears it, the caller gets
the suggestions back; with no suggestions at all, the popular commands.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Any

from xaheen.routing.providers import CommandInvocation, HandlerNotFoundError

if TYPE_CHECKING:
    from collections.abc import Sequence

    from xaheen.routing.matcher import (
        CommandContext,
        CommandSuggestion,
        FuzzyCommandMatcher,
        FuzzyMatchOptions,
    )
    from xaheen.routing.routes import CommandRoute

logger = logging.getLogger(__name__)

DEFAULT_DISPATCH_THRESHOLD = 0.8
# Lead the top fuzzy match needs over the next different command.
DEFAULT_DISPATCH_MARGIN = 0.05

_PLACEHOLDER = re.compile(r"<([^<>]+)>|\[([^\[\]]+)\]")


@dataclass(frozen=True)
class Placeholder:
    name: str
    required: bool
    variadic: bool = False


@dataclass(frozen=True)
class DispatchResult:
    """Outcome of resolving (and possibly running) a command."""

    route: CommandRoute | None
    matched_by: str  # exact | alias | fuzzy | none
    suggestions: tuple[CommandSuggestion, ...] = ()
    fallback: bool = False  # suggestions are the popular-commands list
    ambiguous: bool = False  # several routes cleared the threshold too closely
    output: Any = None

    @property
    def found(self) -> bool:
        return self.route is not None


def pattern_placeholders(pattern: str) -> list[Placeholder]:
    """Placeholders of a route pattern: ``<required>``, ``[optional]``, ``<many...>``."""
    result: list[Placeholder] = []
    for match in _PLACEHOLDER.finditer(pattern):
        required_name, optional_name = match.groups()
        raw = required_name if required_name is not None else optional_name
        variadic = raw.endswith("...")
        result.append(Placeholder(
            name=raw.removesuffix("..."),
            required=required_name is not None,
            variadic=variadic,
        ))
    return result


def bind_arguments(route: CommandRoute, values: Sequence[str]) -> dict[str, str]:
    """Bind positional *values* to the route's placeholders.

    A variadic placeholder takes the rest, space-joined. Raises ValueError
    on a missing required argument or leftover values.
    """
    placeholders = pattern_placeholders(route.pattern)
    bound: dict[str, str] = {}
    remaining = list(values)

    for placeholder in placeholders:
        if not remaining:
            if placeholder.required:
                msg = f"missing argument <{placeholder.name}> for {route.pattern!r}"
                raise ValueError(msg)
            continue
        if placeholder.variadic:
            bound[placeholder.name] = " ".join(remaining)
            remaining = []
        else:
            bound[placeholder.name] = remaining.pop(0)

    if remaining:
        msg = f"unexpected arguments for {route.pattern!r}: {' '.join(remaining)}"
        raise ValueError(msg)
    return bound


def resolve_command(
    matcher: FuzzyCommandMatcher,
    raw_input: str,
    context: CommandContext | None = None,
    *,
    threshold: float = DEFAULT_DISPATCH_THRESHOLD,
    margin: float = DEFAULT_DISPATCH_MARGIN,
    options: FuzzyMatchOptions | None = None,
) -> DispatchResult:
    """Find the route for *raw_input* without running it.

    A fuzzy match only resolves when it scores at least *threshold* and beats
    the best match for a different route by at least *margin*; otherwise the
    input is ambiguous and the suggestions are returned instead.
    """
    route = matcher.lookup(raw_input)
    if route is not None:
        return DispatchResult(route=route, matched_by="exact")

    route = matcher.resolve_alias(raw_input)
    if route is not None:
        return DispatchResult(route=route, matched_by="alias")

    opts = options or matcher.options
    # Score one extra candidate so the runner-up is known even at a limit of 1.
    ranked = matcher.find_matches(
        raw_input, context, replace(opts, max_suggestions=max(2, opts.max_suggestions)),
    )
    suggestions = tuple(ranked[: opts.max_suggestions])
    ambiguous = False
    if ranked and ranked[0].similarity >= threshold:
        top = matcher.lookup(ranked[0].command)
        if top is not None and _leads_by(top, ranked, matcher, margin):
            logger.debug(
                "Resolved %r to %s (%.2f)", raw_input, top.key, ranked[0].similarity,
            )
            return DispatchResult(route=top, matched_by="fuzzy", suggestions=suggestions)
        ambiguous = top is not None

    if not suggestions:
        return DispatchResult(
            route=None,
            matched_by="none",
            suggestions=tuple(matcher.get_popular_suggestions()),
            fallback=True,
        )
    return DispatchResult(
        route=None, matched_by="none", suggestions=suggestions, ambiguous=ambiguous,
    )


def _leads_by(
    top: CommandRoute,
    ranked: Sequence[CommandSuggestion],
    matcher: FuzzyCommandMatcher,
    margin: float,
) -> bool:
    """True if no other route scores within *margin* of the top suggestion."""
    best = ranked[0].similarity
    for suggestion in ranked[1:]:
        if matcher.lookup(suggestion.command) is not top:
            return best - suggestion.similarity >= margin
    return True


def dispatch(
    matcher: FuzzyCommandMatcher,
    raw_input: str,
    values: Sequence[str] = (),
    context: CommandContext | None = None,
    *,
    threshold: float = DEFAULT_DISPATCH_THRESHOLD,
    margin: float = DEFAULT_DISPATCH_MARGIN,
    options: FuzzyMatchOptions | None = None,
) -> DispatchResult:
    """Resolve *raw_input*, call its handler and record the usage.

    Handler exceptions propagate; usage is only recorded on success.
    """
    result = resolve_command(
        matcher, raw_input, context, threshold=threshold, margin=margin, options=options,
    )
    if result.route is None:
        return result

    route = result.route
    arguments = bind_arguments(route, values)
    if route.handler is None:
        raise HandlerNotFoundError(route.domain, route.action)

    output = route.handler(CommandInvocation(route=route, arguments=arguments))
    matcher.record_command_usage(route.key)
    return DispatchResult(
        route=route,
        matched_by=result.matched_by,
        suggestions=result.suggestions,
        output=output,
    )
