"""Tests for the Payload base class."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from burrow.core.payload import Payload
from tests._support.kinds import Order


class Plain(Payload):
    label: str = ""
    count: int = 0


class TestPayload:
    def test_zero_valued_instance(self):
        assert Plain().model_dump() == {"label": "", "count": 0}

    @pytest.mark.parametrize(
        "hook", ["before_save", "after_save", "before_load", "after_load", "before_delete", "after_delete"]
    )
    def test_default_hooks_are_noops(self, hook):
        assert getattr(Plain(), hook)(None) is None

    def test_to_row_is_json_compatible(self):
        assert Order(number=3, status="open", total=10).to_row() == {"number": 3, "status": "open", "total": 10}

    def test_load_row_in_place(self):
        payload = Plain(label="old")
        same = payload
        payload.load_row({"label": "new", "count": 4, "stray": True})
        assert same.label == "new"
        assert same.count == 4

    def test_load_row_missing_fields_get_defaults(self):
        payload = Plain(label="old", count=9)
        payload.load_row({"label": "x"})
        assert payload.count == 0

    def test_load_row_rejects_wrong_types(self):
        with pytest.raises(ValidationError):
            Plain().load_row({"count": "many"})

    def test_locked_fields_class_level(self):
        assert Order.locked_fields == frozenset({"number"})
        assert Plain.locked_fields == frozenset()
