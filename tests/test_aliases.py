"""Tests for xaheen.routing.aliases: alias resolution."""

from __future__ import annotations

from xaheen.routing.aliases import DEFAULT_ALIASES, AliasIndex


class TestAliasIndex:
    def test_default_seed(self) -> None:
        index = AliasIndex()
        assert index.resolve("mc") == "make:component"
        assert len(index) == len(DEFAULT_ALIASES)

    def test_custom_seed_replaces_defaults(self) -> None:
        index = AliasIndex({"gen": "ai:generate"})
        assert index.resolve("gen") == "ai:generate"
        assert index.resolve("mc") is None

    def test_resolve_normalizes(self) -> None:
        index = AliasIndex({"MC": "Make:Component"})
        assert index.resolve("  mc ") == "make:component"
        assert "Mc" in index

    def test_unknown_alias(self) -> None:
        assert AliasIndex({}).resolve("nope") is None

    def test_register_and_rebind(self) -> None:
        index = AliasIndex({})
        index.register("init", "project:create")
        index.register("init", "app:create")
        assert index.resolve("init") == "app:create"

    def test_reset_keeps_base(self) -> None:
        index = AliasIndex({"mc": "make:component"})
        index.register_many([("init", "project:create"), ("create", "project:create")])
        assert len(index) == 3

        index.reset()
        assert index.as_dict() == {"mc": "make:component"}

    def test_aliases_for_sorted(self) -> None:
        index = AliasIndex({"pc": "project:create", "new": "project:create", "mc": "make:component"})
        assert index.aliases_for("Project:Create") == ["new", "pc"]
        assert index.aliases_for("ai:generate") == []

    def test_as_dict_is_copy(self) -> None:
        index = AliasIndex({"mc": "make:component"})
        snapshot = index.as_dict()
        snapshot["zz"] = "x:y"
        assert "zz" not in index
