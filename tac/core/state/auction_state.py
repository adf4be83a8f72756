"""
Auction State - Phase, deadline and leader of a TAC auction.

The auction is ACTIVE until its deadline passes; it is ENDED once the
owner finalizes it. The deadline only moves forward, pushed by bids that
land inside the trailing extension window.
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import Optional, Tuple

from tac.core.errors import AlreadyFinalized, AuctionNotActive, AuctionStillOngoing
from tac.utils.logger import get_logger

logger = get_logger("state")


class AuctionPhase(IntEnum):
    """Lifecycle phase of the auction."""
    ACTIVE = 0   # Accepting bids until the deadline
    ENDED = 1    # Finalized by the owner


@dataclass
class AuctionState:
    """
    Mutable state of a single auction.

    Attributes:
        deadline: Timestamp at which bidding closes
        phase: Current lifecycle phase
        highest_bidder: Current leader, None before the first bid
        highest_bid: Current leading amount
    """
    deadline: int
    phase: AuctionPhase = AuctionPhase.ACTIVE
    highest_bidder: Optional[str] = None
    highest_bid: int = 0

    # =========================================================================
    # Phase Checks
    # =========================================================================

    def is_active(self, now: int) -> bool:
        """Whether bids and excess withdrawals are accepted at `now`."""
        return now < self.deadline and self.phase == AuctionPhase.ACTIVE

    def is_ended(self, now: int) -> bool:
        """Whether settlement is open: deadline passed or finalized."""
        return now >= self.deadline or self.phase == AuctionPhase.ENDED

    @property
    def finalized(self) -> bool:
        return self.phase == AuctionPhase.ENDED

    def require_active(self, now: int) -> None:
        if not self.is_active(now):
            raise AuctionNotActive()

    def require_ended(self, now: int) -> None:
        if not self.is_ended(now):
            raise AuctionStillOngoing(
                f"Auction still ongoing: {self.deadline - now}s remaining"
            )

    def time_remaining(self, now: int) -> int:
        return max(0, self.deadline - now)

    # =========================================================================
    # Transitions
    # =========================================================================

    def set_leader(self, bidder: str, amount: int) -> None:
        self.highest_bidder = bidder
        self.highest_bid = amount

    def maybe_extend(self, now: int, extension_time: int) -> bool:
        """
        Push the deadline if `now` is inside the trailing extension window.

        Returns:
            True if the deadline moved
        """
        if self.deadline - now <= extension_time:
            self.deadline += extension_time
            logger.info(f"Deadline extended by {extension_time}s to {self.deadline}")
            return True
        return False

    def finalize(self) -> Tuple[Optional[str], int]:
        """
        Move to ENDED.

        Returns:
            (highest_bidder, highest_bid) snapshot

        Raises:
            AlreadyFinalized: if already ENDED
        """
        if self.phase == AuctionPhase.ENDED:
            raise AlreadyFinalized()

        self.phase = AuctionPhase.ENDED
        return self.highest_bidder, self.highest_bid
