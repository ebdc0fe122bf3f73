"""Alias index: short and legacy command names resolved to canonical keys."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from xaheen.routing.routes import normalize_key

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

logger = logging.getLogger(__name__)

# Shortcuts available before any route registers legacy names.
DEFAULT_ALIASES: dict[str, str] = {
    "mc": "make:component",
    "mm": "make:model",
    "ms": "make:service",
    "mctl": "make:controller",
    "mmig": "make:migration",
    "mf": "make:factory",
    "mcrud": "make:crud",
    "pc": "project:create",
    "pv": "project:validate",
    "new": "project:create",
    "cg": "component:generate",
    "pg": "page:generate",
    "ag": "ai:generate",
    "sa": "service:add",
    "la": "license:activate",
}


class AliasIndex:
    """Many-to-one mapping from alias to canonical command key.

    The base set (seed plus configured extras) survives :meth:`reset`;
    legacy names added through :meth:`register` do not.
    """

    def __init__(self, seed: Mapping[str, str] | None = None) -> None:
        base = DEFAULT_ALIASES if seed is None else seed
        self._base: dict[str, str] = {
            normalize_key(alias): normalize_key(key) for alias, key in base.items()
        }
        self._aliases: dict[str, str] = dict(self._base)

    def reset(self) -> None:
        """Drop registered aliases, keeping the base set."""
        self._aliases = dict(self._base)

    def register(self, alias: str, key: str) -> None:
        alias = normalize_key(alias)
        key = normalize_key(key)
        current = self._aliases.get(alias)
        if current is not None and current != key:
            logger.debug("Alias %r rebound from %s to %s", alias, current, key)
        self._aliases[alias] = key

    def register_many(self, pairs: Iterable[tuple[str, str]]) -> None:
        for alias, key in pairs:
            self.register(alias, key)

    def resolve(self, alias: str) -> str | None:
        """Return the canonical key for *alias*, or None."""
        return self._aliases.get(normalize_key(alias))

    def aliases_for(self, key: str) -> list[str]:
        """All aliases pointing at *key*, sorted."""
        key = normalize_key(key)
        return sorted(alias for alias, target in self._aliases.items() if target == key)

    def as_dict(self) -> dict[str, str]:
        return dict(self._aliases)

    def __len__(self) -> int:
        return len(self._aliases)

    def __contains__(self, alias: object) -> bool:
        return isinstance(alias, str) and normalize_key(alias) in self._aliases
