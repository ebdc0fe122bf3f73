"""Project configuration: ``.xaheen/config.yml``.

Example::

    matcher:
      max_suggestions: 8
      min_similarity: 0.4
      include_aliases: true
      contextual_boost: true
      deduplicate: true
      dispatch_threshold: 0.85
      category_weights:
        generation: 1.5
    aliases:
      mk: make:component
    categories:
      make:crud: generation
    project:
      framework: react
      features: [auth]
    workflows:
      - name: Release
        description: Cut a release
        steps:
          - security:audit
          - command: docs:generate
            optional: true
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

import yaml

from xaheen.routing.catalog import WorkflowTemplate, workflow_from_dict
from xaheen.routing.dispatch import DEFAULT_DISPATCH_THRESHOLD
from xaheen.routing.matcher import FuzzyMatchOptions, ProjectContext

if TYPE_CHECKING:
    from pathlib import Path

logger = logging.getLogger(__name__)

CONFIG_DIR = ".xaheen"
CONFIG_FILE = "config.yml"
USAGE_FILE = "usage.yml"

_BOOL_OPTIONS = ("include_aliases", "contextual_boost", "deduplicate")


@dataclass(frozen=True)
class XaheenConfig:
    """Resolved settings; every field has a working default."""

    options: FuzzyMatchOptions = field(default_factory=FuzzyMatchOptions)
    dispatch_threshold: float = DEFAULT_DISPATCH_THRESHOLD
    aliases: dict[str, str] = field(default_factory=dict)
    categories: dict[str, str] = field(default_factory=dict)
    project: ProjectContext | None = None  # overrides detection when set
    workflows: tuple[WorkflowTemplate, ...] = ()


def config_path(project_root: Path) -> Path:
    return project_root / CONFIG_DIR / CONFIG_FILE


def usage_path(project_root: Path) -> Path:
    return project_root / CONFIG_DIR / USAGE_FILE


def _read_yaml(path: Path) -> dict[str, Any]:
    """Parse a YAML mapping; missing, unreadable or non-mapping -> empty dict."""
    if not path.is_file():
        return {}
    try:
        with path.open("r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh)
    except (OSError, yaml.YAMLError):
        logger.warning("Failed to read %s, using defaults", path)
        return {}
    return data if isinstance(data, dict) else {}


def _string_map(section: object, name: str) -> dict[str, str]:
    if section is None:
        return {}
    if not isinstance(section, dict):
        logger.warning("Ignoring config section %r: expected a mapping", name)
        return {}
    return {str(key): str(value) for key, value in section.items()}


def _parse_options(section: dict[str, Any]) -> tuple[FuzzyMatchOptions, float]:
    """Build matcher options from the ``matcher`` section.

    Raises ValueError on out-of-range or non-numeric values.
    """
    kwargs: dict[str, Any] = {}

    if "max_suggestions" in section:
        kwargs["max_suggestions"] = int(section["max_suggestions"])
    if "min_similarity" in section:
        kwargs["min_similarity"] = float(section["min_similarity"])
    for name in _BOOL_OPTIONS:
        if name in section:
            value = section[name]
            if not isinstance(value, bool):
                msg = f"{name} must be true or false, got {value!r}"
                raise ValueError(msg)
            kwargs[name] = value

    weights = section.get("category_weights")
    if isinstance(weights, dict):
        kwargs["category_weights"] = {str(k): float(v) for k, v in weights.items()}

    threshold = float(section.get("dispatch_threshold", DEFAULT_DISPATCH_THRESHOLD))
    if not 0.0 <= threshold <= 1.0:
        msg = f"dispatch_threshold must be within [0, 1], got {threshold}"
        raise ValueError(msg)

    return FuzzyMatchOptions(**kwargs), threshold


def _parse_project(section: object) -> ProjectContext | None:
    if not isinstance(section, dict):
        return None
    features = section.get("features", [])
    if not isinstance(features, list):
        features = []
    return ProjectContext(
        type=str(section.get("type", "unknown")),
        framework=str(section.get("framework", "unknown")).lower(),
        features=tuple(str(f) for f in features),
    )


def _parse_workflows(section: object) -> tuple[WorkflowTemplate, ...]:
    """Custom workflows; raises ValueError on a malformed entry."""
    if section is None:
        return ()
    if not isinstance(section, list):
        msg = "workflows must be a list"
        raise ValueError(msg)
    workflows: list[WorkflowTemplate] = []
    for entry in section:
        if not isinstance(entry, dict):
            msg = f"workflow entries must be mappings, got {entry!r}"
            raise ValueError(msg)
        workflows.append(workflow_from_dict(entry))
    return tuple(workflows)


def load_config(project_root: Path) -> XaheenConfig:
    """Load ``.xaheen/config.yml`` under *project_root*.

    Falls back to defaults for a missing file or missing keys.
    """
    data = _read_yaml(config_path(project_root))
    if not data:
        return XaheenConfig()

    matcher_section = data.get("matcher", {})
    if not isinstance(matcher_section, dict):
        matcher_section = {}
    try:
        options, threshold = _parse_options(matcher_section)
    except TypeError as exc:
        msg = f"invalid matcher setting in {config_path(project_root)}: {exc}"
        raise ValueError(msg) from exc

    return XaheenConfig(
        options=options,
        dispatch_threshold=threshold,
        aliases=_string_map(data.get("aliases"), "aliases"),
        categories=_string_map(data.get("categories"), "categories"),
        project=_parse_project(data.get("project")),
        workflows=_parse_workflows(data.get("workflows")),
    )
