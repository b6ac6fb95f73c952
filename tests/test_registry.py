"""Tests for the version registry."""

import logging

import pytest

from decor import AliasTargetMissingError, CapabilityModule, UnknownVersionError
from decor.versions import (
    VersionRegistry,
    VersionSummary,
    find_registry,
    registered_types,
    registry_for,
)


def make_module(name):
    return CapabilityModule(name, {"label": lambda self: name})


class TestDefine:
    def test_define_stores_and_resolves(self, registry):
        module = make_module("one")
        assert registry.define("v1", lambda: module) is module
        assert registry.resolve("v1") is module
        assert registry.get("v1") is module
        assert "v1" in registry

    def test_define_is_idempotent(self, registry, caplog):
        original = registry.define("v1", lambda: make_module("original"))

        with caplog.at_level(logging.WARNING, logger="decor.versions.registry"):
            again = registry.define("v1", lambda: make_module("replacement"))

        assert again is original
        assert registry.resolve("v1") is original
        assert "already defined" in caplog.text

    def test_redefinition_does_not_evaluate_builder(self, registry):
        registry.define("v1", lambda: make_module("original"))
        calls = []

        def builder():
            calls.append(1)
            return make_module("never")

        registry.define("v1", builder)
        assert calls == []

    def test_define_from_class_body(self, registry):
        class Body:
            def label(self):
                return "body"

        module = registry.define("v1", Body)
        assert isinstance(module, CapabilityModule)
        assert module.defines("label")

    def test_builder_must_return_module(self, registry):
        with pytest.raises(TypeError, match="CapabilityModule"):
            registry.define("v1", lambda: {"label": None})
        assert "v1" not in registry

    def test_version_decorator_rebinds_to_module(self, registry):
        @registry.version("v1")
        class V1:
            TAG = "x"

        assert isinstance(V1, CapabilityModule)
        assert registry.resolve("v1") is V1

    def test_any_hashable_key(self, registry):
        module = make_module("typed")
        registry.define(int, lambda: module)
        registry.define(("v", 2), lambda: module)
        assert registry.resolve(int) is module
        assert registry.resolve(("v", 2)) is module


class TestSet:
    def test_set_overwrites(self, registry):
        registry.define("v1", lambda: make_module("original"))
        replacement = make_module("replacement")
        registry.set("v1", replacement)
        assert registry.resolve("v1") is replacement

    def test_set_requires_module(self, registry):
        with pytest.raises(TypeError):
            registry.set("v1", object())


class TestAlias:
    def test_alias_to_module(self, registry):
        module = make_module("m")
        registry.alias({"v2": module, "v2010-12-08": module})
        assert registry.resolve("v2") is module
        assert registry.resolve("v2010-12-08") is module

    def test_alias_to_key_copies_current_module(self, registry):
        module = registry.define("v4", lambda: make_module("four"))
        registry.alias({"v5": "v4"})
        assert registry.resolve("v5") is module

    def test_alias_is_not_a_live_reference(self, registry):
        original = registry.define("v4", lambda: make_module("four"))
        registry.alias({"v5": "v4"})
        registry.set("v4", make_module("newer"))
        assert registry.resolve("v5") is original

    def test_alias_to_missing_key_is_not_retroactive(self, registry, caplog):
        with caplog.at_level(logging.WARNING, logger="decor.versions.registry"):
            registry.alias({"later": "v9"})
        registry.define("v9", lambda: make_module("nine"))

        assert registry.resolve("later") is None
        assert "later" not in registry
        assert "unregistered" in caplog.text

    def test_alias_to_missing_key_clears_existing_entry(self, registry):
        registry.define("a", lambda: make_module("a"))
        registry.alias({"a": "missing"})

        assert registry.resolve("a") is None
        with pytest.raises(UnknownVersionError):
            registry.require("a")

    def test_alias_to_missing_key_drops_previous_alias(self, registry):
        registry.define("v1", lambda: make_module("one"))
        registry.alias({"latest": "v1"})
        registry.alias({"latest": "v9"})

        assert "latest" not in registry
        assert [s.version for s in registry.list_summaries()] == ["v1"]

    def test_strict_alias_keeps_existing_entry(self):
        strict = VersionRegistry(strict_aliases=True)
        module = strict.define("a", lambda: make_module("a"))
        with pytest.raises(AliasTargetMissingError):
            strict.alias({"a": "missing"})
        assert strict.resolve("a") is module

    def test_strict_alias_raises(self):
        strict = VersionRegistry(strict_aliases=True)
        with pytest.raises(AliasTargetMissingError) as exc:
            strict.alias({"v5": "v4"})
        assert exc.value.alias == "v5"
        assert exc.value.target == "v4"

    def test_strict_aliases_from_settings(self, monkeypatch):
        monkeypatch.setenv("DECOR_STRICT_ALIASES", "true")
        with pytest.raises(AliasTargetMissingError):
            VersionRegistry().alias({"v5": "v4"})

    def test_pairs_processed_in_order(self, registry):
        module = make_module("m")
        registry.alias({"a": module, "b": "a"})
        assert registry.resolve("b") is module


class TestLookup:
    def test_resolve_missing_returns_none(self, registry):
        assert registry.resolve("nope") is None

    def test_require_names_the_version(self, registry):
        with pytest.raises(UnknownVersionError, match="nope") as exc:
            registry.require("nope")
        assert exc.value.version == "nope"
        assert isinstance(exc.value, LookupError)

    def test_summaries(self, registry):
        registry.define("v1", lambda: CapabilityModule("V1", {"b": lambda s: 1, "a": lambda s: 2}, {"K": 1}))
        registry.alias({"v1-old": "v1"})

        summaries = registry.list_summaries()
        assert [s.version for s in summaries] == ["v1", "v1-old"]
        assert summaries[0] == VersionSummary(
            version="v1", module_name="V1", operations=["a", "b"], constants=["K"]
        )
        assert summaries[1].alias_of == "v1"
        assert registry.count() == 2
        assert registry.list_keys() == ["v1", "v1-old"]


class TestPerTypeRegistries:
    def test_one_registry_per_type(self):
        class Owner:
            pass

        assert registry_for(Owner) is registry_for(Owner)
        assert registry_for(Owner).owner is Owner

    def test_subclass_falls_back_to_base(self):
        class Parent:
            pass

        class Child(Parent):
            pass

        inherited = registry_for(Parent).define("v1", lambda: make_module("parent"))
        own = registry_for(Child).define("v2", lambda: make_module("child"))

        assert registry_for(Child).resolve("v1") is inherited
        assert registry_for(Child).resolve("v2") is own
        assert registry_for(Parent).resolve("v2") is None
        assert registry_for(Child).list_keys() == ["v2", "v1"]

    def test_subclass_can_define_its_own_version(self):
        class Parent:
            pass

        class Child(Parent):
            pass

        registry_for(Parent).define("v1", lambda: make_module("parent"))
        own = registry_for(Child).define("v1", lambda: make_module("child"))

        assert registry_for(Child).resolve("v1") is own

    def test_find_registry_does_not_create(self):
        class Lonely:
            pass

        assert find_registry(Lonely) is None
        assert Lonely not in registered_types()

    def test_find_registry_uses_nearest_base(self):
        class Parent:
            pass

        class Child(Parent):
            pass

        assert find_registry(Child) is registry_for(Parent)
        assert Child not in registered_types()

    def test_unknown_version_names_owner(self):
        class Owner:
            pass

        with pytest.raises(UnknownVersionError, match="Owner"):
            registry_for(Owner).require("v1")
