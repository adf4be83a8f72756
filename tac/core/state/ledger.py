"""
Bid Ledger - Per-party deposit bookkeeping for TAC.

Conceptual Background:
---------------------
Every party that ever placed an accepted bid owns one LedgerEntry:

1. **total_deposited**: Value the party has sent and not yet taken back
2. **last_valid_bid**: Amount of the party's most recent accepted bid

The two fields move differently. Deposits accumulate across bids, while
the valid bid is overwritten by each accepted bid. Their difference is
the party's excess, withdrawable while the auction is still running.

Registry:
--------
Parties are kept in first-bid order. Entries are never removed; a party
that withdrew everything keeps an entry with zero deposit.
"""

from dataclasses import dataclass, replace
from typing import Dict, List, Optional, Tuple

from tac.utils.logger import get_logger

logger = get_logger("ledger")


# =============================================================================
# Ledger Entry
# =============================================================================


@dataclass
class LedgerEntry:
    """
    Deposit record of a single party.

    Attributes:
        party: Party identity
        total_deposited: Value currently held for the party
        last_valid_bid: Most recent accepted bid amount
    """
    party: str
    total_deposited: int = 0
    last_valid_bid: int = 0

    @property
    def excess(self) -> int:
        """Deposit not backing the party's current bid."""
        return self.total_deposited - self.last_valid_bid


# =============================================================================
# Bid Ledger
# =============================================================================


class BidLedger:
    """
    Ledger of deposits with an insertion-ordered bidder registry.

    Attributes:
        entries: Mapping of party -> LedgerEntry
        bidders: Parties in first-bid order
    """

    def __init__(self):
        self.entries: Dict[str, LedgerEntry] = {}
        self.bidders: List[str] = []

    # =========================================================================
    # State Access
    # =========================================================================

    def has_entry(self, party: str) -> bool:
        return party in self.entries

    def get_entry(self, party: str) -> Optional[LedgerEntry]:
        """Get a copy of a party's entry, or None if it never bid."""
        entry = self.entries.get(party)
        return replace(entry) if entry else None

    def deposited(self, party: str) -> int:
        entry = self.entries.get(party)
        return entry.total_deposited if entry else 0

    def excess(self, party: str) -> int:
        entry = self.entries.get(party)
        return entry.excess if entry else 0

    @property
    def total_held(self) -> int:
        """Sum of all deposits currently held."""
        return sum(e.total_deposited for e in self.entries.values())

    def all_deposits(self) -> Tuple[List[str], List[int]]:
        """Parties in first-bid order paired with their current deposits."""
        parties = list(self.bidders)
        amounts = [self.entries[p].total_deposited for p in parties]
        return parties, amounts

    # =========================================================================
    # Mutation
    # =========================================================================

    def record_bid(self, party: str, amount: int) -> LedgerEntry:
        """
        Record an accepted bid.

        Registers the party on first bid, adds the amount to its deposit
        and makes it the party's valid bid.

        Args:
            party: Bidding party
            amount: Accepted bid amount

        Returns:
            The updated entry
        """
        entry = self.entries.get(party)
        if entry is None:
            entry = LedgerEntry(party=party)
            self.entries[party] = entry
            self.bidders.append(party)
            logger.debug(f"Registered bidder #{len(self.bidders)}: {party}")

        entry.total_deposited += amount
        entry.last_valid_bid = amount
        return entry

    def release_excess(self, party: str) -> int:
        """
        Reduce a party's deposit to its valid bid.

        Returns:
            The released amount (0 if nothing to release)
        """
        entry = self.entries.get(party)
        if entry is None:
            return 0

        excess = entry.excess
        entry.total_deposited = entry.last_valid_bid
        return excess

    def release_all(self, party: str) -> int:
        """
        Zero a party's deposit.

        Returns:
            The released amount (0 if nothing to release)
        """
        entry = self.entries.get(party)
        if entry is None:
            return 0

        amount = entry.total_deposited
        entry.total_deposited = 0
        return amount

    def restore_deposit(self, party: str, total_deposited: int) -> None:
        """Put back a deposit released for a transfer that did not go through."""
        self.entries[party].total_deposited = total_deposited

    # =========================================================================
    # Utility
    # =========================================================================

    def __len__(self) -> int:
        return len(self.bidders)

    def __repr__(self) -> str:
        return f"BidLedger(bidders={len(self.bidders)}, held={self.total_held})"
