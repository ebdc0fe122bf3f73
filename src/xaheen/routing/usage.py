"""Command usage tracking: invocation counters, recent history, favorites.

State lives in memory for the lifetime of the process. Persistence is an
explicit caller action through :meth:`UsageTracker.snapshot` /
:meth:`UsageTracker.restore`, or the YAML helpers :func:`load_usage` and
:func:`save_usage`.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import yaml

from xaheen.routing.catalog import DEFAULT_CATEGORY
from xaheen.routing.routes import normalize_key

if TYPE_CHECKING:
    from collections.abc import Mapping
    from pathlib import Path

logger = logging.getLogger(__name__)

MAX_RECENT = 20
FAVORITE_MIN_USES = 3
MAX_FAVORITES = 10
MAX_MOST_USED = 10


class UsageTracker:
    """Monotonic per-command counters plus a most-recent-first history."""

    def __init__(self) -> None:
        self._counts: dict[str, int] = {}
        self._recent: list[str] = []

    def record(self, command: str) -> None:
        """Count one invocation of *command* and move it to the front of history.

        A blank command names nothing and is not recorded.
        """
        key = normalize_key(command)
        if not key:
            return
        self._counts[key] = self._counts.get(key, 0) + 1
        self._recent = [key, *(cmd for cmd in self._recent if cmd != key)][:MAX_RECENT]

    def count(self, command: str) -> int:
        return self._counts.get(normalize_key(command), 0)

    def stats(self) -> dict[str, int]:
        """Copy of the counter map."""
        return dict(self._counts)

    def recent(self) -> list[str]:
        return list(self._recent)

    def most_used(self, limit: int = MAX_MOST_USED) -> list[tuple[str, int]]:
        """``(command, count)`` pairs, highest count first, ties by name."""
        ranked = sorted(self._counts.items(), key=lambda item: (-item[1], item[0]))
        return ranked[:limit]

    def favorites(self) -> list[str]:
        """Commands used at least ``FAVORITE_MIN_USES`` times, most used first."""
        return [
            cmd for cmd, count in self.most_used(limit=len(self._counts))
            if count >= FAVORITE_MIN_USES
        ][:MAX_FAVORITES]

    def category_usage(self, category_map: Mapping[str, str]) -> list[tuple[str, int]]:
        """Total invocations per category, highest first."""
        totals: dict[str, int] = {}
        for cmd, count in self._counts.items():
            category = category_map.get(cmd, DEFAULT_CATEGORY)
            totals[category] = totals.get(category, 0) + count
        return sorted(totals.items(), key=lambda item: (-item[1], item[0]))

    def reset(self) -> None:
        self._counts.clear()
        self._recent.clear()

    def snapshot(self) -> dict[str, Any]:
        """Plain-data copy of the tracker state, suitable for YAML/JSON."""
        return {"counts": dict(self._counts), "recent": list(self._recent)}

    def restore(self, data: Mapping[str, Any]) -> None:
        """Replace the tracker state with a previous :meth:`snapshot`.

        Raises ValueError if the data is malformed.
        """
        counts = data.get("counts", {})
        recent = data.get("recent", [])
        if not isinstance(counts, dict) or not isinstance(recent, list):
            msg = "usage snapshot must contain a 'counts' mapping and a 'recent' list"
            raise ValueError(msg)

        restored: dict[str, int] = {}
        for cmd, count in counts.items():
            if not isinstance(count, int) or isinstance(count, bool) or count < 0:
                msg = f"invalid usage count for {cmd!r}: {count!r}"
                raise ValueError(msg)
            restored[normalize_key(str(cmd))] = count

        self._counts = restored
        seen: set[str] = set()
        self._recent = []
        for cmd in recent:
            key = normalize_key(str(cmd))
            if key and key not in seen:
                seen.add(key)
                self._recent.append(key)
        del self._recent[MAX_RECENT:]

    def __len__(self) -> int:
        return len(self._counts)


def load_usage(path: Path) -> UsageTracker:
    """Load a tracker from a YAML snapshot; missing or unreadable -> empty."""
    tracker = UsageTracker()
    if not path.is_file():
        return tracker

    try:
        with path.open("r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh)
    except (OSError, yaml.YAMLError):
        logger.warning("Failed to read %s, starting with empty usage", path)
        return tracker

    if not isinstance(data, dict):
        return tracker

    try:
        tracker.restore(data)
    except ValueError as exc:
        logger.warning("Ignoring usage file %s: %s", path, exc)
        tracker.reset()
    return tracker


def save_usage(tracker: UsageTracker, path: Path) -> None:
    """Write the tracker snapshot as YAML, creating parent directories."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(
        yaml.safe_dump(tracker.snapshot(), sort_keys=True),
        encoding="utf-8",
    )
