"""
Unit tests for the event bus.
"""

import logging

from tac.core.events import AuctionEnded, EventBus, NewBid


class TestEventBus:
    """Tests for event fan-out."""

    def test_history_recorded_without_subscribers(self):
        bus = EventBus()
        bus.emit(NewBid("alice", 10))
        assert bus.history == [NewBid("alice", 10)]
        assert len(bus) == 1

    def test_subscribers_called_in_order(self):
        bus = EventBus()
        calls = []
        bus.subscribe(lambda e: calls.append(("first", e)))
        bus.subscribe(lambda e: calls.append(("second", e)))

        event = AuctionEnded("alice", 10)
        bus.emit(event)

        assert calls == [("first", event), ("second", event)]

    def test_failing_handler_is_logged_and_skipped(self, caplog):
        bus = EventBus()
        received = []

        def broken(event):
            raise RuntimeError("boom")

        bus.subscribe(broken)
        bus.subscribe(received.append)

        with caplog.at_level(logging.ERROR, logger="tac.events"):
            bus.emit(NewBid("bob", 5))

        assert received == [NewBid("bob", 5)]
        assert "failed" in caplog.text

    def test_unsubscribe_twice_is_harmless(self):
        bus = EventBus()
        unsubscribe = bus.subscribe(lambda e: None)
        unsubscribe()
        unsubscribe()
        bus.emit(NewBid("alice", 1))

    def test_events_are_immutable_values(self):
        assert NewBid("alice", 1) == NewBid("alice", 1)
        assert AuctionEnded(None, 0).winner is None
