"""Shared test fixtures for Xaheen."""

from __future__ import annotations

import pytest

from xaheen.routing.aliases import AliasIndex
from xaheen.routing.matcher import FuzzyCommandMatcher
from xaheen.routing.routes import CommandRoute


def _route(pattern: str, domain: str, action: str, **kwargs: object) -> CommandRoute:
    return CommandRoute(pattern=pattern, domain=domain, action=action, **kwargs)  # type: ignore[arg-type]


@pytest.fixture()
def make_routes() -> dict[str, CommandRoute]:
    """The two ``make:`` routes used throughout the matcher tests."""
    return {
        "make:component <name>": _route(
            "make:component <name>", "make", "component", description="Create a UI component",
        ),
        "make:service <name>": _route(
            "make:service <name>", "make", "service", description="Create a service class",
        ),
    }


@pytest.fixture()
def matcher(make_routes: dict[str, CommandRoute]) -> FuzzyCommandMatcher:
    """Matcher with the make routes and a single ``mc`` alias."""
    m = FuzzyCommandMatcher(aliases=AliasIndex({"mc": "make:component"}))
    m.register_commands(make_routes)
    return m
