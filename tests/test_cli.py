"""Tests for the xaheen CLI commands."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

import yaml
from click.testing import CliRunner, Result

from xaheen import __version__
from xaheen.cli import main
from xaheen.config import config_path, usage_path

if TYPE_CHECKING:
    from pathlib import Path


def _invoke(*args: str) -> Result:
    return CliRunner().invoke(main, list(args))


def _write_usage(root: Path, counts: dict[str, int]) -> None:
    path = usage_path(root)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(
        yaml.safe_dump({"counts": counts, "recent": list(counts)}), encoding="utf-8",
    )


class TestMain:
    def test_version(self) -> None:
        result = _invoke("--version")
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_invalid_config(self, tmp_path: Path) -> None:
        path = config_path(tmp_path)
        path.parent.mkdir()
        path.write_text("matcher:\n  min_similarity: 2\n", encoding="utf-8")

        result = _invoke("suggest", "make", "--project", str(tmp_path))
        assert result.exit_code == 1
        assert "invalid configuration" in result.output


class TestSuggest:
    def test_typo_json(self, tmp_path: Path) -> None:
        result = _invoke("suggest", "make:componnt", "--json", "--project", str(tmp_path))
        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data[0]["command"] == "make:component"
        assert 0.3 < data[0]["similarity"] < 1.0

    def test_alias_json(self, tmp_path: Path) -> None:
        result = _invoke("suggest", "mc", "--json", "--project", str(tmp_path))
        data = json.loads(result.output)
        assert data[0]["command"] == "make:component"
        assert data[0]["similarity"] == 1.0
        assert "mc" in data[0]["aliases"]

    def test_no_aliases_flag(self, tmp_path: Path) -> None:
        result = _invoke("suggest", "mc", "--no-aliases", "--json", "--project", str(tmp_path))
        data = json.loads(result.output)
        assert all(item["similarity"] < 1.0 for item in data)

    def test_limit(self, tmp_path: Path) -> None:
        result = _invoke("suggest", "make", "--limit", "2", "--json", "--project", str(tmp_path))
        assert len(json.loads(result.output)) == 2

    def test_contextual_without_words(self, tmp_path: Path) -> None:
        _write_usage(tmp_path, {"make:model": 1})
        result = _invoke("suggest", "--json", "--project", str(tmp_path))
        data = json.loads(result.output)
        assert data[0]["command"] == "make:controller"
        assert "project:create" in [item["command"] for item in data]

    def test_table_output(self, tmp_path: Path) -> None:
        result = _invoke("suggest", "make:componnt", "--project", str(tmp_path))
        assert result.exit_code == 0
        assert 'Matches for "make:componnt"' in result.output
        assert "make:component" in result.output


class TestRun:
    def test_dry_run_alias(self, tmp_path: Path) -> None:
        result = _invoke("run", "mc", "Button", "--dry-run", "--project", str(tmp_path))
        assert result.exit_code == 0, result.output
        assert "Resolved 'mc' to make:component (alias)" in result.output
        assert "Command: make:component" in result.output
        assert "name = Button" in result.output

    def test_dry_run_exact(self, tmp_path: Path) -> None:
        result = _invoke("run", "make:model", "User", "--dry-run", "--project", str(tmp_path))
        assert result.exit_code == 0
        assert "Resolved" not in result.output
        assert "Pattern: make:model <name>" in result.output

    def test_missing_argument(self, tmp_path: Path) -> None:
        result = _invoke("run", "make:model", "--dry-run", "--project", str(tmp_path))
        assert result.exit_code == 1
        assert "missing argument <name>" in result.output

    def test_no_handler_installed(self, tmp_path: Path) -> None:
        result = _invoke("run", "make:model", "User", "--project", str(tmp_path))
        assert result.exit_code == 1
        assert "no handler installed for make:model" in result.output
        assert not usage_path(tmp_path).exists()

    def test_ambiguous_prefix(self, tmp_path: Path) -> None:
        result = _invoke("run", "m", "--dry-run", "--project", str(tmp_path))
        assert result.exit_code == 1
        assert "ambiguous command 'm'" in result.output
        assert "Did you mean?" in result.output
        assert not usage_path(tmp_path).exists()

    def test_unknown_command(self, tmp_path: Path) -> None:
        result = _invoke("run", "qqqqzzzz", "--project", str(tmp_path))
        assert result.exit_code == 1
        assert "unknown command 'qqqqzzzz'" in result.output
        assert "Popular commands" in result.output
        assert "project:create" in result.output


class TestRoutes:
    def test_domain_json(self, tmp_path: Path) -> None:
        result = _invoke("routes", "--domain", "make", "--json", "--project", str(tmp_path))
        data = json.loads(result.output)
        assert data
        assert {item["domain"] for item in data} == {"make"}
        component = next(item for item in data if item["command"] == "make:component")
        assert component["pattern"] == "make:component <name>"
        assert component["category"] == "generation"

    def test_unknown_domain(self, tmp_path: Path) -> None:
        result = _invoke("routes", "--domain", "nope", "--project", str(tmp_path))
        assert result.exit_code == 0
        assert "No routes for domain 'nope'." in result.output

    def test_table(self, tmp_path: Path) -> None:
        result = _invoke("routes", "--domain", "project", "--project", str(tmp_path))
        assert "project:create" in result.output
        assert "project:validate" in result.output


class TestUsage:
    def test_json(self, tmp_path: Path) -> None:
        _write_usage(tmp_path, {"make:model": 3, "ai:generate": 1})
        result = _invoke("usage", "--json", "--project", str(tmp_path))
        data = json.loads(result.output)

        assert data["most_used"][0] == {"command": "make:model", "count": 3}
        assert data["favorites"] == ["make:model"]
        assert {"category": "generation", "count": 3} in data["categories"]

    def test_empty(self, tmp_path: Path) -> None:
        result = _invoke("usage", "--project", str(tmp_path))
        assert "No command usage recorded yet." in result.output

    def test_reset(self, tmp_path: Path) -> None:
        _write_usage(tmp_path, {"make:model": 3})
        result = _invoke("usage", "--reset", "--project", str(tmp_path))
        assert result.exit_code == 0
        assert "Usage history cleared." in result.output

        data = yaml.safe_load(usage_path(tmp_path).read_text(encoding="utf-8"))
        assert data == {"counts": {}, "recent": []}


class TestWorkflows:
    def test_list(self, tmp_path: Path) -> None:
        result = _invoke("workflows", "--project", str(tmp_path))
        assert result.exit_code == 0
        assert "Production Deployment" in result.output

    def test_show_json(self, tmp_path: Path) -> None:
        result = _invoke(
            "workflows", "api development workflow", "--json", "--project", str(tmp_path),
        )
        data = json.loads(result.output)
        assert data["name"] == "API Development Workflow"
        assert [step["command"] for step in data["steps"]][:2] == ["make:model", "make:controller"]

    def test_unknown(self, tmp_path: Path) -> None:
        result = _invoke("workflows", "nope", "--project", str(tmp_path))
        assert result.exit_code == 1
        assert "unknown workflow 'nope'" in result.output

    def test_custom_workflow_from_config(self, tmp_path: Path) -> None:
        path = config_path(tmp_path)
        path.parent.mkdir()
        path.write_text(
            yaml.safe_dump({
                "workflows": [{"name": "Release", "steps": ["security:audit", "docs:generate"]}],
            }),
            encoding="utf-8",
        )
        result = _invoke("workflows", "release", "--json", "--project", str(tmp_path))
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["name"] == "Release"
        assert [step["command"] for step in data["steps"]] == ["security:audit", "docs:generate"]
