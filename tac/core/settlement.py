"""
Settlement - Bid acceptance rules, withdrawals and commission for TAC.

Rules:
- A bid must carry value and beat the leader by the minimum increment
  (integer percentage, rounded down). The first bid only has to be
  non-zero.
- While the auction runs, a party may take back its excess deposit.
- After the auction ends, each losing party takes back its deposit minus
  the commission. The commission stays in the instance's custody.
- The owner closes the auction once, after the deadline.

The engine decides and computes; the Auction applies the results and
moves value.
"""

from dataclasses import dataclass
from typing import Optional, Tuple

from tac.core.config import AuctionConfig
from tac.core.errors import (
    AlreadyFinalized,
    InsufficientIncrement,
    NoExcess,
    NoFunds,
    NotOwner,
    WinnerCannotWithdraw,
    ZeroValue,
)
from tac.core.state import AuctionState, BidLedger
from tac.utils.logger import get_logger

logger = get_logger("settlement")


# =============================================================================
# Helpers
# =============================================================================


def required_bid(highest_bid: int, increment_percent: int) -> int:
    """Smallest amount that outbids `highest_bid`."""
    return highest_bid + highest_bid * increment_percent // 100


def compute_commission(amount: int, commission_percent: int) -> int:
    """Fee retained on a losing-party refund, rounded down."""
    return amount * commission_percent // 100


@dataclass
class WithdrawalReceipt:
    """Breakdown of a settlement withdrawal."""
    party: str
    amount: int        # Deposit released from the ledger
    commission: int    # Retained by the instance
    refund: int        # Sent to the party


# =============================================================================
# Settlement Engine
# =============================================================================


class SettlementEngine:
    """
    Applies the auction's money rules.

    Tracks the commission retained from settlement withdrawals.
    """

    def __init__(self, config: Optional[AuctionConfig] = None):
        self.config = config or AuctionConfig()
        self.retained_commission: int = 0

    # =========================================================================
    # Bidding
    # =========================================================================

    def minimum_bid(self, state: AuctionState) -> int:
        """Smallest acceptable next bid (1 before the first bid)."""
        if state.highest_bid == 0:
            return 1
        return required_bid(state.highest_bid, self.config.min_bid_increment_percent)

    def check_bid(self, state: AuctionState, amount: int, now: int) -> None:
        """
        Validate a bid without touching state.

        Raises:
            AuctionNotActive, ZeroValue, InsufficientIncrement
        """
        state.require_active(now)

        if amount == 0:
            raise ZeroValue()

        if state.highest_bid > 0:
            required = required_bid(state.highest_bid, self.config.min_bid_increment_percent)
            if amount < required:
                raise InsufficientIncrement(amount, required)

    def apply_bid(
        self,
        state: AuctionState,
        ledger: BidLedger,
        bidder: str,
        amount: int,
        now: int,
    ) -> bool:
        """
        Record an accepted bid and extend the deadline if needed.

        Returns:
            True if the deadline was extended
        """
        ledger.record_bid(bidder, amount)
        state.set_leader(bidder, amount)
        return state.maybe_extend(now, self.config.extension_time)

    # =========================================================================
    # Withdrawals
    # =========================================================================

    def check_excess(self, state: AuctionState, ledger: BidLedger, party: str, now: int) -> int:
        """
        Validate an excess withdrawal.

        Returns:
            The withdrawable excess

        Raises:
            AuctionNotActive, NoExcess
        """
        state.require_active(now)

        excess = ledger.excess(party)
        if excess <= 0:
            raise NoExcess(party)
        return excess

    def check_withdrawal(
        self,
        state: AuctionState,
        ledger: BidLedger,
        party: str,
        now: int,
    ) -> WithdrawalReceipt:
        """
        Validate a settlement withdrawal and compute its breakdown.

        Raises:
            AuctionStillOngoing, WinnerCannotWithdraw, NoFunds
        """
        state.require_ended(now)

        if party == state.highest_bidder:
            raise WinnerCannotWithdraw(party)

        amount = ledger.deposited(party)
        if amount == 0:
            raise NoFunds(party)

        commission = compute_commission(amount, self.config.commission_percent)
        return WithdrawalReceipt(
            party=party,
            amount=amount,
            commission=commission,
            refund=amount - commission,
        )

    def retain(self, receipt: WithdrawalReceipt) -> None:
        self.retained_commission += receipt.commission

    def release(self, receipt: WithdrawalReceipt) -> None:
        """Undo retain() for a refund that could not be delivered."""
        self.retained_commission -= receipt.commission

    # =========================================================================
    # Finalization
    # =========================================================================

    def finalize(
        self,
        state: AuctionState,
        owner: str,
        caller: str,
        now: int,
    ) -> Tuple[Optional[str], int]:
        """
        Close the auction on behalf of the owner.

        Returns:
            (winner, winning_amount); winner is None if nobody bid

        Raises:
            NotOwner, AlreadyFinalized, AuctionStillOngoing
        """
        if caller != owner:
            raise NotOwner(caller)

        if state.finalized:
            raise AlreadyFinalized()

        state.require_ended(now)
        return state.finalize()

    def stats(self) -> dict:
        return {
            "min_bid_increment_percent": self.config.min_bid_increment_percent,
            "extension_time": self.config.extension_time,
            "commission_percent": self.config.commission_percent,
            "retained_commission": self.retained_commission,
        }
