#!/usr/bin/env python3
"""
Tests for the event tracker
"""

import logging

from randobot.events import EventKind, EventTracker


class TestEventTracker:
    """Test event recording and log mirroring"""

    def test_records_events(self):
        tracker = EventTracker()

        tracker.emit(EventKind.PAGE_LOADING, url="https://hikes.test", depth=0, attempt=1)
        tracker.emit(EventKind.PAGE_STORED, url="https://hikes.test", depth=0)

        assert tracker.kinds() == [EventKind.PAGE_LOADING, EventKind.PAGE_STORED]
        assert tracker.of_kind(EventKind.PAGE_STORED)[0].depth == 0

    def test_failures_logged_as_warnings(self, caplog):
        tracker = EventTracker()

        with caplog.at_level(logging.INFO, logger="randobot.events"):
            tracker.emit(EventKind.PAGE_FAILED, url="https://hikes.test/x", attempt=3, detail="all retries failed")

        assert caplog.records[-1].levelno == logging.WARNING
        assert "page_failed https://hikes.test/x attempt=3 all retries failed" in caplog.text

    def test_clear(self):
        tracker = EventTracker()
        tracker.emit(EventKind.NO_MATCH, detail="xyzzy")

        tracker.clear()

        assert tracker.events == []
