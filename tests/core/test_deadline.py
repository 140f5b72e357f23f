"""Tests for request deadlines."""

from __future__ import annotations

import time

import pytest

from burrow.core.deadline import Deadline, DeadlineExceeded


class TestDeadline:
    def test_fresh_deadline_has_time_left(self):
        deadline = Deadline.after(10, operation="GET /account/1")
        assert deadline.remaining() > 9
        assert not deadline.is_expired()
        deadline.check("get")

    def test_zero_timeout_is_expired(self):
        deadline = Deadline.after(0)
        assert deadline.is_expired()
        assert deadline.remaining() <= 0

    def test_check_raises_with_step_name(self):
        deadline = Deadline.after(0, operation="POST /account")
        with pytest.raises(DeadlineExceeded) as exc_info:
            deadline.check("put")
        assert exc_info.value.operation == "put"
        assert exc_info.value.timeout == 0
        assert "put" in str(exc_info.value)

    def test_check_defaults_to_operation_name(self):
        with pytest.raises(DeadlineExceeded) as exc_info:
            Deadline.after(0, operation="POST /account").check()
        assert exc_info.value.operation == "POST /account"

    def test_negative_timeout_rejected(self):
        with pytest.raises(ValueError):
            Deadline.after(-1)

    def test_elapsed_grows(self):
        deadline = Deadline.after(5)
        time.sleep(0.01)
        assert deadline.elapsed >= 0.01

    def test_is_a_timeout_error(self):
        assert issubclass(DeadlineExceeded, TimeoutError)
