"""Cancellable call context passed to every request.

A context is either cancelled explicitly with ``cancel()`` or expires once
its deadline passes. The client checks it before sending and caps the
transport timeout at the time that is left, so cancellation is cooperative:
a request already on the wire runs until the socket timeout fires.
"""
from __future__ import annotations
import threading
import time
from typing import Optional

from .exceptions import CancellationError, ContextCancelledError, DeadlineExceededError


class CallContext:
    def __init__(self, deadline: Optional[float] = None):
        # deadline is a time.monotonic() value
        self.deadline = deadline
        self._cancelled = threading.Event()

    @classmethod
    def background(cls) -> 'CallContext':
        return cls()

    @classmethod
    def with_timeout(cls, seconds: float) -> 'CallContext':
        return cls(deadline=time.monotonic() + seconds)

    def cancel(self) -> None:
        self._cancelled.set()

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    def expired(self) -> bool:
        return self.deadline is not None and time.monotonic() >= self.deadline

    def done(self) -> bool:
        return self.cancelled or self.expired()

    def err(self) -> Optional[CancellationError]:
        """Return the error describing why the context is done, or None."""
        if self.cancelled:
            return ContextCancelledError()
        if self.expired():
            return DeadlineExceededError()
        return None

    def remaining(self) -> Optional[float]:
        if self.deadline is None:
            return None
        return max(0.0, self.deadline - time.monotonic())

    def __enter__(self) -> 'CallContext':
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.cancel()
