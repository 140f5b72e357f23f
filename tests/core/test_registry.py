"""
Tests for the kind registry: registration, sealing, paternity and key chains.
"""

from __future__ import annotations

import pytest

from burrow.core.errors import (
    ConfigError,
    ContractViolation,
    InvalidHierarchyError,
    InvalidPathError,
    ModelNotRegisteredError,
)
from burrow.core.keys import parse_path
from burrow.core.payload import Payload
from burrow.core.registry import (
    KindRegistry,
    get_registry,
    load_models,
    register_kind,
    register_paternity,
)
from tests._support.kinds import Account, Order


class NeedsArgs(Payload):
    name: str


class TestRegistration:
    def test_register_and_instantiate(self):
        registry = KindRegistry()
        registry.register_kind("account", Account)
        payload = registry.instantiate("account")
        assert isinstance(payload, Account)
        assert payload.name == ""

    def test_instantiate_returns_fresh_payloads(self):
        registry = KindRegistry()
        registry.register_kind("account", Account)
        assert registry.instantiate("account") is not registry.instantiate("account")

    def test_duplicate_kind_is_fatal(self):
        registry = KindRegistry()
        registry.register_kind("account", Account)
        with pytest.raises(ContractViolation, match="already registered"):
            registry.register_kind("account", Order)

    @pytest.mark.parametrize("name", ["", "Account", "order_line", "v2", "account\n"])
    def test_invalid_kind_name_is_fatal(self, name):
        with pytest.raises(ContractViolation):
            KindRegistry().register_kind(name, Account)

    def test_factory_must_build_without_arguments(self):
        with pytest.raises(ContractViolation, match="cannot be instantiated"):
            KindRegistry().register_kind("broken", NeedsArgs)

    def test_unregistered_kind(self):
        with pytest.raises(ModelNotRegisteredError):
            KindRegistry().instantiate("ghost")

    def test_kinds_sorted(self, registry):
        assert registry.kinds() == ["account", "fragile", "item", "note", "order"]


class TestSealing:
    def test_register_after_seal_is_fatal(self):
        registry = KindRegistry()
        registry.seal()
        with pytest.raises(ContractViolation, match="sealed"):
            registry.register_kind("account", Account)
        with pytest.raises(ContractViolation, match="sealed"):
            registry.register_paternity("", "account")

    def test_seal_checks_integrity(self):
        registry = KindRegistry()
        registry.register_kind("account", Account)
        registry.register_paternity("account", "order")
        with pytest.raises(ContractViolation, match="child kind 'order'"):
            registry.seal()
        assert not registry.sealed

    def test_unregistered_parent_fails_integrity(self):
        registry = KindRegistry()
        registry.register_kind("order", Order)
        registry.register_paternity("account", "order")
        with pytest.raises(ContractViolation, match="parent kind 'account'"):
            registry.check_integrity()

    def test_seal_is_idempotent(self, registry):
        registry.seal()
        assert registry.sealed


class TestPaternity:
    def test_children_of(self, registry):
        assert registry.children_of("") == ["account", "note"]
        assert registry.children_of("account") == ["fragile", "order"]
        assert registry.children_of("item") == []

    def test_validate_paternity(self, registry):
        registry.validate_paternity("account", "order")
        with pytest.raises(InvalidHierarchyError, match="hierarchy"):
            registry.validate_paternity("account", "item")

    def test_hint_names_the_edge(self, registry):
        with pytest.raises(InvalidHierarchyError) as exc_info:
            registry.validate_paternity("account", "item")
        assert exc_info.value.hint == "[account] kind doesn't accept the paternity of [item] kids"


class TestValidateKeyChain:
    @pytest.mark.parametrize(
        "path",
        ["/account/1", "/account", "/account/1/order", "/account/1/order/2/item/3", "/note/4"],
    )
    def test_valid_chains(self, registry, path):
        registry.validate_key_chain(parse_path(path))

    @pytest.mark.parametrize(
        "path",
        ["/order/1", "/account/1/item/2", "/account/1/order/2/account/3", "/item"],
    )
    def test_unregistered_edges(self, registry, path):
        with pytest.raises(InvalidHierarchyError):
            registry.validate_key_chain(parse_path(path))

    def test_root_edge_is_checked(self, registry):
        with pytest.raises(InvalidHierarchyError, match="hierarchy"):
            registry.validate_key_chain(parse_path("/order/1/item/2"))

    def test_zero_id_above_leaf_is_invalid_path(self, registry):
        with pytest.raises(InvalidPathError) as exc_info:
            registry.validate_key_chain(parse_path("/account/0/order/2"))
        assert exc_info.value.hint == "key id 0 at level 0"

    def test_zero_id_at_leaf_is_allowed(self, registry):
        registry.validate_key_chain(parse_path("/account/1/order/0"))


class TestDefaultRegistry:
    def test_decorator_registers_kind_and_parents(self, clean_default_registry):
        @register_kind("widget", parents=[""])
        class Widget(Payload):
            size: int = 0

        assert clean_default_registry.is_registered("widget")
        assert clean_default_registry.children_of("") == ["widget"]
        assert get_registry() is clean_default_registry

    def test_register_paternity_helper(self, clean_default_registry):
        register_kind("widget")(Account)
        register_paternity("", "widget")
        assert get_registry().children_of("") == ["widget"]

    def test_explicit_registry(self):
        registry = KindRegistry()
        register_kind("widget", registry=registry, parents=[""])(Account)
        assert registry.children_of("") == ["widget"]


class TestLoadModels:
    def test_imports_and_seals(self, clean_default_registry):
        registry = load_models(["tests._support.models"])
        assert registry is clean_default_registry
        assert registry.sealed
        assert registry.kinds() == ["member", "team"]
        assert registry.children_of("team") == ["member"]

    def test_missing_module(self, clean_default_registry):
        with pytest.raises(ConfigError, match="cannot import models module"):
            load_models(["tests._support.does_not_exist"])

    def test_no_modules_seals_empty_registry(self):
        registry = load_models([], registry=KindRegistry())
        assert registry.sealed
        assert registry.kinds() == []
