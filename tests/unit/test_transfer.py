"""
Unit tests for transfer backends and clocks.
"""

import pytest

from tac.core.clock import ManualClock, SystemClock
from tac.core.transfer import InMemoryTransfer, TransferRecord, ValueTransfer


class TestInMemoryTransfer:
    """Tests for the reference transfer backend."""

    def test_satisfies_protocol(self):
        assert isinstance(InMemoryTransfer(), ValueTransfer)

    def test_send_credits_balance(self):
        transfer = InMemoryTransfer()

        assert transfer.send("alice", 100)
        assert transfer.send("alice", 50)

        assert transfer.balance_of("alice") == 150
        assert transfer.history == [TransferRecord("alice", 100), TransferRecord("alice", 50)]
        assert transfer.total_sent == 150

    def test_rejected_recipient(self):
        transfer = InMemoryTransfer()
        transfer.reject("mallory")

        assert not transfer.send("mallory", 100)
        assert transfer.balance_of("mallory") == 0

        transfer.accept("mallory")
        assert transfer.send("mallory", 100)

    def test_hook_runs_before_credit(self):
        seen = []
        transfer = InMemoryTransfer(on_send=lambda r, a: seen.append(transfer.balance_of(r)))

        transfer.send("alice", 10)

        assert seen == [0]


class TestClocks:
    """Tests for host clocks."""

    def test_manual_clock(self):
        clock = ManualClock(start=100)
        assert clock.now() == 100
        assert clock.advance(5) == 105
        assert clock.set(200) == 200

    def test_manual_clock_never_goes_back(self):
        clock = ManualClock(start=100)
        with pytest.raises(ValueError):
            clock.set(99)
        with pytest.raises(ValueError):
            clock.advance(-1)
        with pytest.raises(ValueError):
            ManualClock(start=-1)

    def test_system_clock_is_integer_seconds(self):
        assert isinstance(SystemClock().now(), int)
