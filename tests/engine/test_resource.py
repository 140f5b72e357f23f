"""
Tests for the Resource action stack.

Tests cover:
- enter/exit pairing and nesting
- Misuse raises ContractViolation (repeated, wrong, nothing to exit, unknown)
- First error wins; later steps are no-ops
- Child resources inherit the action context
- Response dict shape for single and list resources
"""

import pytest

from burrow.core.errors import ContractViolation, InvalidPathError, StorageReadError
from burrow.core.keys import parse_path
from burrow.engine.resource import Action, Resource
from tests._support.kinds import Account


def _resource(path: str = "/account/1") -> Resource:
    return Resource(parse_path(path))


# =============================================================================
# Action stack
# =============================================================================


class TestActionStack:
    def test_enter_and_exit(self):
        resource = _resource()
        assert resource.enter_action(Action.READ) is True
        assert resource.current_action is Action.READ
        resource.exit_action(Action.READ)
        assert resource.actions == []
        assert resource.current_action is None

    def test_nested_actions(self):
        resource = _resource()
        resource.enter_action(Action.PATCH)
        resource.enter_action(Action.READ)
        assert resource.actions == [Action.PATCH, Action.READ]
        resource.exit_action(Action.READ)
        resource.exit_action(Action.PATCH)
        assert resource.history == [Action.PATCH, Action.READ]

    def test_repeated_action(self):
        resource = _resource()
        resource.enter_action(Action.READ)
        with pytest.raises(ContractViolation, match="repeated_action"):
            resource.enter_action(Action.READ)

    def test_exiting_wrong_action(self):
        resource = _resource()
        resource.enter_action(Action.DELETE)
        resource.enter_action(Action.READ)
        with pytest.raises(ContractViolation, match="exiting_wrong_action"):
            resource.exit_action(Action.DELETE)

    def test_nothing_to_exit(self):
        with pytest.raises(ContractViolation, match="nothing_to_exit"):
            _resource().exit_action(Action.READ)

    @pytest.mark.parametrize("action", [Action.ERROR, "read", None])
    def test_unknown_action(self, action):
        with pytest.raises(ContractViolation, match="unknown_action"):
            _resource().enter_action(action)


# =============================================================================
# Errors
# =============================================================================


class TestMarkError:
    def test_first_error_wins(self):
        resource = _resource()
        first = InvalidPathError()
        resource.mark_error(first)
        resource.mark_error(StorageReadError())
        assert resource.error is first
        assert resource.failed
        assert resource.actions == [Action.ERROR]

    def test_enter_after_failure_is_noop(self):
        resource = _resource()
        resource.enter_action(Action.READ)
        resource.mark_error(StorageReadError())
        assert resource.enter_action(Action.UPDATE) is False
        assert resource.actions == [Action.ERROR]
        assert resource.history == [Action.READ, Action.UPDATE]

    def test_exit_after_failure_is_noop(self):
        resource = _resource()
        resource.mark_error(StorageReadError())
        resource.exit_action(Action.DELETE)
        assert resource.actions == [Action.ERROR]

    def test_repr_shows_state(self):
        resource = _resource()
        assert repr(resource) == "Resource('/account/1', idle)"
        resource.mark_error(StorageReadError())
        assert "storage_read_failed" in repr(resource)


# =============================================================================
# Children and response shape
# =============================================================================


class TestChildrenAndDict:
    def test_spawn_child_copies_actions(self):
        parent = _resource("/account/1/order")
        parent.enter_action(Action.LIST)
        child = parent.spawn_child(parse_path("/account/1/order/7"))
        assert child.actions == [Action.LIST]
        assert child.error is None
        child.mark_error(StorageReadError())
        assert parent.actions == [Action.LIST]

    def test_path_falls_back_to_raw_path(self):
        assert Resource(None, raw_path="/Bad/0").path == "/Bad/0"
        assert Resource(None).path == ""

    def test_single_resource_dict(self):
        resource = Resource(parse_path("/account/1"), Account(name="acme"))
        body = resource.to_dict()
        assert body["path"] == "/account/1"
        assert body["data"] == {"name": "acme"}
        assert body["error"] is None
        assert "resources" not in body

    def test_list_resource_dict(self):
        parent = _resource("/account")
        parent.is_list = True
        parent.next_cursor = "abc"
        parent.resources = [parent.spawn_child(parse_path("/account/1"))]
        body = parent.to_dict()
        assert body["resources_count"] == 1
        assert body["next_cursor"] == "abc"
        assert body["resources"][0]["path"] == "/account/1"

    def test_error_dict(self):
        resource = _resource()
        resource.mark_error(StorageReadError(hint="nope"))
        assert resource.to_dict()["error"]["name"] == "storage_read_failed"
        assert resource.to_dict()["error"]["status"] == "not_found"
