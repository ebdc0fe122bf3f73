"""Project detection from ``package.json``."""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING

from xaheen.routing.matcher import ProjectContext

if TYPE_CHECKING:
    from pathlib import Path

logger = logging.getLogger(__name__)

# Checked in order; first dependency present wins. Next.js apps also
# depend on react, so "next" comes first.
_FRAMEWORK_MARKERS: tuple[tuple[str, str, str], ...] = (
    ("next", "frontend", "nextjs"),
    ("react", "frontend", "react"),
    ("vue", "frontend", "vue"),
    ("@nestjs/core", "backend", "nestjs"),
)


def detect_project(project_root: Path) -> ProjectContext:
    """Infer project type and framework from declared dependencies.

    Features are the dependency names. Returns an ``unknown`` context when
    there is no readable ``package.json``.
    """
    path = project_root / "package.json"
    if not path.is_file():
        return ProjectContext()

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError, UnicodeDecodeError):
        logger.warning("Failed to read %s, project type unknown", path)
        return ProjectContext()

    if not isinstance(data, dict):
        return ProjectContext()

    dependencies: dict[str, object] = {}
    for section in ("dependencies", "devDependencies"):
        value = data.get(section)
        if isinstance(value, dict):
            dependencies.update(value)

    features = tuple(dependencies)
    for marker, project_type, framework in _FRAMEWORK_MARKERS:
        if marker in dependencies:
            return ProjectContext(type=project_type, framework=framework, features=features)

    return ProjectContext(features=features)
