"""Unit tests for the extraction context."""

import threading
import time

import pytest

from newsscraper.engines.context import ExtractionContext
from newsscraper.engines.errors import ExtractionCancelled


class TestExtractionContext:
    """Tests for cancellation and deadlines."""

    def test_background_never_expires(self):
        context = ExtractionContext.background()

        assert not context.cancelled
        assert context.remaining() is None
        assert context.timeout_for(15.0) == 15.0

    def test_cancel_sets_flag(self):
        context = ExtractionContext()
        context.cancel()

        assert context.cancelled
        with pytest.raises(ExtractionCancelled):
            context.check()

    def test_child_follows_parent_cancellation(self):
        parent = ExtractionContext()
        child = parent.child(60.0)

        parent.cancel()

        assert child.cancelled

    def test_child_cancellation_does_not_reach_parent(self):
        parent = ExtractionContext()
        child = parent.child()

        child.cancel()

        assert not parent.cancelled

    def test_child_deadline_capped_by_parent(self):
        parent = ExtractionContext(timeout=1.0)
        child = parent.child(60.0)

        assert child.deadline == parent.deadline

    def test_deadline_expires(self):
        context = ExtractionContext(timeout=0.01)
        time.sleep(0.02)

        assert context.cancelled
        assert context.remaining() == 0.0

    def test_timeout_for_capped_by_remaining(self):
        context = ExtractionContext(timeout=2.0)

        assert 0 < context.timeout_for(15.0) <= 2.0
        assert context.timeout_for(0.5) == 0.5

    def test_sleep_returns_after_duration(self):
        context = ExtractionContext()
        started = time.monotonic()

        context.sleep(0.05)

        assert time.monotonic() - started >= 0.05

    def test_sleep_interrupted_by_deadline(self):
        context = ExtractionContext(timeout=0.05)
        started = time.monotonic()

        with pytest.raises(ExtractionCancelled):
            context.sleep(5.0)

        assert time.monotonic() - started < 1.0

    def test_sleep_interrupted_by_cancel_from_other_thread(self):
        parent = ExtractionContext()
        child = parent.child()
        timer = threading.Timer(0.05, parent.cancel)
        timer.start()
        started = time.monotonic()

        try:
            with pytest.raises(ExtractionCancelled):
                child.sleep(5.0)
        finally:
            timer.cancel()

        assert time.monotonic() - started < 1.0

    def test_zero_sleep_still_checks(self):
        context = ExtractionContext()
        context.cancel()

        with pytest.raises(ExtractionCancelled):
            context.sleep(0)
