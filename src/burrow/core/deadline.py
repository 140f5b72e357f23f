"""Request deadlines observed at storage suspension points.

The engine never interrupts a running storage call. It checks the deadline
of the unit of work before each call into storage (get, put, delete, count,
query next) and fails the action with :class:`DeadlineExceeded` when the
time is up. The engine records that like any other storage failure.

Examples:
    >>> deadline = Deadline.after(2.5, operation="GET /account/1")
    >>> deadline.remaining() > 0
    True
    >>> deadline.check("get")   # raises DeadlineExceeded once expired

Tags:
    burrow-core, deadline, timeout, cancellation
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field


class DeadlineExceeded(TimeoutError):
    """Raised when a unit of work passes its deadline.

    Attributes:
        timeout: The timeout value that was exceeded
        elapsed: How long the unit of work had run
        operation: Name of the step that observed the expiry
    """

    def __init__(self, timeout: float, elapsed: float | None = None, operation: str = "operation"):
        self.timeout = timeout
        self.elapsed = elapsed
        self.operation = operation

        msg = f"Operation '{operation}' exceeded its deadline of {timeout}s"
        if elapsed is not None:
            msg += f" (ran for {elapsed:.2f}s)"
        super().__init__(msg)


@dataclass(frozen=True)
class Deadline:
    """Absolute deadline on the monotonic clock.

    Attributes:
        deadline: Absolute deadline timestamp (monotonic clock)
        timeout_seconds: Original timeout value in seconds
        operation: Name of the unit of work
        start_time: When the deadline started
    """

    deadline: float
    timeout_seconds: float
    operation: str = "operation"
    start_time: float = field(default_factory=time.monotonic)

    @classmethod
    def after(cls, seconds: float, operation: str = "operation") -> Deadline:
        if seconds < 0:
            raise ValueError(f"Timeout must be non-negative, got {seconds}")
        now = time.monotonic()
        return cls(deadline=now + seconds, timeout_seconds=seconds, operation=operation, start_time=now)

    def remaining(self) -> float:
        """Seconds left; negative once expired."""
        return self.deadline - time.monotonic()

    @property
    def elapsed(self) -> float:
        return time.monotonic() - self.start_time

    def is_expired(self) -> bool:
        return time.monotonic() >= self.deadline

    def check(self, op_name: str | None = None) -> None:
        """Raise :class:`DeadlineExceeded` if the deadline has passed."""
        if self.is_expired():
            raise DeadlineExceeded(
                timeout=self.timeout_seconds,
                elapsed=self.elapsed,
                operation=op_name or self.operation,
            )


__all__ = ["Deadline", "DeadlineExceeded"]
