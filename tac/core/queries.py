"""
Read-only projections over an auction's state and ledger.
"""

from typing import List, Optional, Tuple

from tac.core.settlement import SettlementEngine
from tac.core.state import AuctionState, BidLedger, LedgerEntry


class AuctionQueries:
    """Read-side view; never mutates what it reads."""

    def __init__(self, state: AuctionState, ledger: BidLedger, engine: SettlementEngine):
        self.state = state
        self.ledger = ledger
        self.engine = engine

    def get_winner(self, now: int) -> Tuple[Optional[str], int]:
        """
        Leader once the auction has ended.

        Raises:
            AuctionStillOngoing: before the deadline, unless finalized
        """
        self.state.require_ended(now)
        return self.state.highest_bidder, self.state.highest_bid

    def get_all_bids(self) -> Tuple[List[str], List[int]]:
        """Bidders in first-bid order with their current deposits."""
        return self.ledger.all_deposits()

    def is_auction_active(self, now: int) -> bool:
        return self.state.is_active(now)

    def get_entry(self, party: str) -> Optional[LedgerEntry]:
        return self.ledger.get_entry(party)

    def pending_excess(self, party: str) -> int:
        return self.ledger.excess(party)

    def minimum_bid(self) -> int:
        return self.engine.minimum_bid(self.state)

    def stats(self) -> dict:
        return {
            "phase": self.state.phase.name,
            "deadline": self.state.deadline,
            "highest_bidder": self.state.highest_bidder,
            "highest_bid": self.state.highest_bid,
            "bidder_count": len(self.ledger),
            "total_held": self.ledger.total_held,
            "retained_commission": self.engine.retained_commission,
        }
