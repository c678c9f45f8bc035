"""Cancellation and time-budget signal passed through an extraction call."""

import threading
import time

from newsscraper.engines.errors import ExtractionCancelled


class ExtractionContext:
    """Deadline plus cancellation flag observed at every suspension point.

    Listing fetches, content fetches and politeness delays all consult
    the context: fetch timeouts are capped by the remaining budget and
    sleeps wake up early when the context is cancelled.

    Attributes:
        deadline: Monotonic clock value after which the context expires,
                  or None for no time limit
    """

    def __init__(
        self,
        timeout: float | None = None,
        parent: "ExtractionContext | None" = None,
    ):
        self._parent = parent
        self._cancelled = threading.Event()
        self.deadline: float | None = None
        if timeout is not None:
            self.deadline = time.monotonic() + timeout
        if parent is not None and parent.deadline is not None:
            if self.deadline is None or parent.deadline < self.deadline:
                self.deadline = parent.deadline

    @classmethod
    def background(cls) -> "ExtractionContext":
        """Return a context that never expires on its own."""
        return cls()

    def child(self, timeout: float | None = None) -> "ExtractionContext":
        """Derive a context that is cancelled whenever this one is."""
        return ExtractionContext(timeout=timeout, parent=self)

    def cancel(self) -> None:
        self._cancelled.set()

    @property
    def cancelled(self) -> bool:
        if self._cancelled.is_set():
            return True
        if self._parent is not None and self._parent.cancelled:
            return True
        return self.deadline is not None and time.monotonic() >= self.deadline

    def remaining(self) -> float | None:
        """Seconds left before the deadline, or None when unbounded."""
        if self.deadline is None:
            return None
        return max(0.0, self.deadline - time.monotonic())

    def check(self) -> None:
        """Raise ExtractionCancelled if the context is no longer live."""
        if self.cancelled:
            raise ExtractionCancelled("extraction cancelled or deadline exceeded")

    def timeout_for(self, default: float) -> float:
        """Cap a per-request timeout by the remaining budget."""
        self.check()
        remaining = self.remaining()
        if remaining is None:
            return default
        return max(min(default, remaining), 0.001)

    def sleep(self, seconds: float) -> None:
        """Sleep up to `seconds`, returning early and raising if cancelled."""
        self.check()
        if seconds <= 0:
            return
        end = time.monotonic() + seconds
        while True:
            left = end - time.monotonic()
            remaining = self.remaining()
            if remaining is not None:
                left = min(left, remaining)
            if left <= 0:
                break
            # Short slices so a cancelled parent is noticed promptly
            if self._cancelled.wait(min(left, 0.1)):
                break
            if self._parent is not None and self._parent.cancelled:
                break
        self.check()
