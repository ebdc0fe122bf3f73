"""Command route descriptors and the registry that indexes them."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator, Mapping

logger = logging.getLogger(__name__)


def normalize_key(value: str) -> str:
    """Lowercase and trim a command key."""
    return value.strip().lower()


@dataclass(frozen=True)
class CommandRoute:
    """An immutable command descriptor.

    ``handler`` is opaque to the matching core; only the dispatcher calls it.
    ``legacy`` maps an external tool name (``xaheen``, ``xala``) to the
    command strings that tool used for the same operation.
    """

    pattern: str  # e.g. "license activate <key>"
    domain: str
    action: str
    handler: Callable[..., Any] | None = field(default=None, compare=False, repr=False)
    legacy: dict[str, tuple[str, ...]] = field(default_factory=dict, compare=False)
    description: str = ""
    examples: tuple[str, ...] = ()

    @property
    def key(self) -> str:
        """Canonical ``domain:action`` key."""
        return f"{self.domain}:{self.action}"

    def legacy_commands(self) -> list[str]:
        """All legacy command strings, across every tool."""
        return [cmd for cmds in self.legacy.values() for cmd in cmds]


class RouteRegistry:
    """Routes indexed by literal pattern and by canonical key.

    ``register_commands`` always starts from an empty registry. Two routes
    sharing a canonical key: the later one wins that key, the earlier one is
    dropped along with its pattern key, and a warning is logged.
    """

    def __init__(self) -> None:
        self._index: dict[str, CommandRoute] = {}
        self._canonical: dict[str, CommandRoute] = {}

    def register_commands(self, routes: Mapping[str, CommandRoute]) -> None:
        """Replace the registry contents with *routes* (keyed by pattern)."""
        self._index.clear()
        self._canonical.clear()

        for pattern, route in routes.items():
            canonical = normalize_key(route.key)
            previous = self._canonical.get(canonical)
            if previous is not None and previous is not route:
                logger.warning(
                    "Duplicate command key %s: %r replaces %r",
                    canonical, route.pattern, previous.pattern,
                )
                for key in [k for k, r in self._index.items() if r is previous]:
                    del self._index[key]
            self._canonical[canonical] = route
            self._index[normalize_key(pattern)] = route
            self._index[canonical] = route

        logger.debug(
            "Registered %d routes under %d keys", len(self._canonical), len(self._index),
        )

    def lookup(self, key: str) -> CommandRoute | None:
        """Exact lookup by pattern or canonical key."""
        return self._index.get(normalize_key(key))

    def keys(self) -> list[str]:
        """Every indexed key (pattern and canonical forms), in insertion order."""
        return list(self._index)

    def items(self) -> Iterator[tuple[str, CommandRoute]]:
        yield from self._index.items()

    def routes(self) -> list[CommandRoute]:
        """One route per canonical key."""
        return list(self._canonical.values())

    def legacy_aliases(self) -> Iterator[tuple[str, str]]:
        """Yield ``(legacy_command, canonical_key)`` pairs for registered routes."""
        for canonical, route in self._canonical.items():
            for legacy in route.legacy_commands():
                yield normalize_key(legacy), canonical

    def __len__(self) -> int:
        return len(self._canonical)

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and normalize_key(key) in self._index
