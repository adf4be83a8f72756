"""
Auction - A single timed English auction with escrowed settlement.

Lifecycle:
---------
1. **Bidding**: Parties send value with each bid. A bid must beat the
   leader by the minimum increment. Bids close to the deadline push it
   forward, with no upper bound on the total duration.
2. **Excess withdrawal**: While bidding is open, a party may take back
   whatever it deposited beyond its most recent accepted bid.
3. **Finalization**: After the deadline the owner ends the auction once.
4. **Settlement**: Every party except the winner takes back its deposit
   minus the commission. The winner's stake stays frozen.

Ordering:
--------
Each mutating call runs under the instance lock and follows the same
order: check preconditions, update bookkeeping, then move value. A
transfer that fails restores the bookkeeping of its call and raises
TransferFailed. Mutating calls made from inside a transfer or an event
handler are refused with ReentrantCall; queries are allowed and see the
updated bookkeeping.
"""

import threading
from contextlib import contextmanager
from typing import Callable, Iterator, List, Optional, Tuple

from tac.core.config import AuctionConfig
from tac.core.errors import AuctionError, ReentrantCall, TransferFailed
from tac.core.events import AuctionEnded, AuctionEvent, EventBus, EventHandler, NewBid
from tac.core.queries import AuctionQueries
from tac.core.settlement import SettlementEngine, WithdrawalReceipt
from tac.core.state import AuctionPhase, AuctionState, BidLedger, LedgerEntry
from tac.core.transfer import InMemoryTransfer, ValueTransfer
from tac.utils.logger import get_logger
from tac.utils.validation import (
    ensure_valid,
    validate_amount,
    validate_identity,
    validate_integer,
    validate_timestamp,
)

logger = get_logger("auction")


class Auction:
    """
    One auction instance.

    Owns its state, ledger and settlement engine exclusively. Caller
    identity, attached value and current time are explicit arguments
    relayed by the host.

    Attributes:
        owner: Identity allowed to end the auction
        config: Bidding and settlement parameters
        transfer: Backend used to pay parties
        events: Event bus with the emitted event history
    """

    def __init__(
        self,
        owner: str,
        duration: Optional[int] = None,
        start_time: int = 0,
        transfer: Optional[ValueTransfer] = None,
        config: Optional[AuctionConfig] = None,
    ):
        """
        Create an auction.

        Args:
            owner: Identity allowed to end the auction
            duration: Seconds until the initial deadline; config.duration if None
            start_time: Creation timestamp
            transfer: Payment backend; an InMemoryTransfer if None
            config: Auction parameters; defaults if None
        """
        ensure_valid(validate_identity(owner, "owner"))
        ensure_valid(validate_timestamp(start_time))

        self.config = config or AuctionConfig()
        if duration is None:
            duration = self.config.duration
        ensure_valid(validate_integer(duration, "duration", min_val=1))

        self._owner = owner
        self.transfer: ValueTransfer = transfer if transfer is not None else InMemoryTransfer()
        self.events = EventBus()

        self._state = AuctionState(deadline=start_time + duration)
        self._ledger = BidLedger()
        self._engine = SettlementEngine(self.config)
        self._queries = AuctionQueries(self._state, self._ledger, self._engine)

        # Value accounting across the instance's lifetime
        self.total_received: int = 0
        self.total_paid_out: int = 0

        self._lock = threading.RLock()
        # Set while a transfer or an event dispatch is running
        self._in_callout = False

        logger.info(f"Auction created by {owner}: deadline={self._state.deadline}")

    # =========================================================================
    # Guards
    # =========================================================================

    @contextmanager
    def _mutation(self, operation: str) -> Iterator[None]:
        """Serialize a mutating call and refuse re-entry from a callout."""
        with self._lock:
            if self._in_callout:
                logger.warning(f"Refused re-entrant {operation}")
                raise ReentrantCall(operation)
            yield

    def _pay(self, recipient: str, amount: int, rollback: Callable[[], None]) -> None:
        """
        Send value after bookkeeping has been committed.

        On failure, runs `rollback` and raises TransferFailed.
        """
        self._in_callout = True
        try:
            delivered = self.transfer.send(recipient, amount)
        except Exception as e:
            rollback()
            logger.warning(f"Transfer of {amount} to {recipient} raised: {e}")
            raise TransferFailed(recipient, amount, str(e)) from e
        finally:
            self._in_callout = False

        if not delivered:
            rollback()
            logger.warning(f"Transfer of {amount} to {recipient} declined")
            raise TransferFailed(recipient, amount, "declined by transfer backend")

        self.total_paid_out += amount

    def _emit(self, event: AuctionEvent) -> None:
        """Notify subscribers; mutating calls from a handler are refused."""
        self._in_callout = True
        try:
            self.events.emit(event)
        finally:
            self._in_callout = False

    @staticmethod
    def _check_call(caller: str, now: int) -> None:
        ensure_valid(validate_identity(caller))
        ensure_valid(validate_timestamp(now))

    # =========================================================================
    # Bidding
    # =========================================================================

    def place_bid(self, caller: str, amount: int, now: int) -> bool:
        """
        Place a bid carrying `amount`.

        The full amount is added to the caller's deposit and becomes the
        caller's valid bid.

        Returns:
            True if the bid extended the deadline

        Raises:
            AuctionNotActive, ZeroValue, InsufficientIncrement
        """
        self._check_call(caller, now)
        ensure_valid(validate_amount(amount))

        with self._mutation("place_bid"):
            try:
                self._engine.check_bid(self._state, amount, now)
            except AuctionError as e:
                logger.debug(f"Bid of {amount} from {caller} rejected: {e}")
                raise

            extended = self._engine.apply_bid(self._state, self._ledger, caller, amount, now)
            self.total_received += amount

            logger.debug(f"Bid accepted: {caller} -> {amount}, deadline={self._state.deadline}")
            self._emit(NewBid(bidder=caller, amount=amount))
            return extended

    def withdraw_excess(self, caller: str, now: int) -> int:
        """
        Take back the deposit exceeding the caller's valid bid.

        Returns:
            The amount transferred

        Raises:
            AuctionNotActive, NoExcess, TransferFailed
        """
        self._check_call(caller, now)

        with self._mutation("withdraw_excess"):
            excess = self._engine.check_excess(self._state, self._ledger, caller, now)

            previous = self._ledger.deposited(caller)
            self._ledger.release_excess(caller)

            def rollback() -> None:
                self._ledger.restore_deposit(caller, previous)

            self._pay(caller, excess, rollback)

            logger.info(f"Excess withdrawn: {caller} <- {excess}")
            return excess

    # =========================================================================
    # Finalization & Settlement
    # =========================================================================

    def end_auction(self, caller: str, now: int) -> Tuple[Optional[str], int]:
        """
        Finalize the auction. Owner only, once, after the deadline.

        Returns:
            (winner, winning_amount); winner is None if nobody bid

        Raises:
            NotOwner, AlreadyFinalized, AuctionStillOngoing
        """
        self._check_call(caller, now)

        with self._mutation("end_auction"):
            winner, amount = self._engine.finalize(self._state, self._owner, caller, now)

            logger.info(f"Auction ended: winner={winner}, amount={amount}")
            self._emit(AuctionEnded(winner=winner, amount=amount))
            return winner, amount

    def withdraw(self, caller: str, now: int) -> WithdrawalReceipt:
        """
        Settle a losing party: pay its deposit minus the commission.

        Open once the deadline has passed or the auction was finalized.

        Returns:
            WithdrawalReceipt with the commission/refund breakdown

        Raises:
            AuctionStillOngoing, WinnerCannotWithdraw, NoFunds, TransferFailed
        """
        self._check_call(caller, now)

        with self._mutation("withdraw"):
            receipt = self._engine.check_withdrawal(self._state, self._ledger, caller, now)

            self._ledger.release_all(caller)
            self._engine.retain(receipt)

            def rollback() -> None:
                self._ledger.restore_deposit(caller, receipt.amount)
                self._engine.release(receipt)

            if receipt.refund > 0:
                self._pay(caller, receipt.refund, rollback)

            logger.info(
                f"Settled {caller}: deposit={receipt.amount}, "
                f"commission={receipt.commission}, refund={receipt.refund}"
            )
            return receipt

    # =========================================================================
    # Queries
    # =========================================================================

    def get_winner(self, now: int) -> Tuple[Optional[str], int]:
        """
        Raises:
            AuctionStillOngoing: before the deadline, unless finalized
        """
        ensure_valid(validate_timestamp(now))
        with self._lock:
            return self._queries.get_winner(now)

    def get_all_bids(self) -> Tuple[List[str], List[int]]:
        with self._lock:
            return self._queries.get_all_bids()

    def is_auction_active(self, now: int) -> bool:
        ensure_valid(validate_timestamp(now))
        with self._lock:
            return self._queries.is_auction_active(now)

    def get_entry(self, party: str) -> Optional[LedgerEntry]:
        with self._lock:
            return self._queries.get_entry(party)

    def pending_excess(self, party: str) -> int:
        with self._lock:
            return self._queries.pending_excess(party)

    def minimum_bid(self) -> int:
        """Smallest amount the next bid must carry."""
        with self._lock:
            return self._queries.minimum_bid()

    def time_remaining(self, now: int) -> int:
        ensure_valid(validate_timestamp(now))
        with self._lock:
            return self._state.time_remaining(now)

    def subscribe(self, handler: EventHandler) -> Callable[[], None]:
        with self._lock:
            return self.events.subscribe(handler)

    @property
    def event_history(self) -> List[AuctionEvent]:
        with self._lock:
            return list(self.events.history)

    @property
    def owner(self) -> str:
        return self._owner

    @property
    def deadline(self) -> int:
        with self._lock:
            return self._state.deadline

    @property
    def phase(self) -> AuctionPhase:
        with self._lock:
            return self._state.phase

    @property
    def highest_bidder(self) -> Optional[str]:
        with self._lock:
            return self._state.highest_bidder

    @property
    def highest_bid(self) -> int:
        with self._lock:
            return self._state.highest_bid

    @property
    def retained_commission(self) -> int:
        with self._lock:
            return self._engine.retained_commission

    @property
    def custody_balance(self) -> int:
        """Value held by the instance: deposits plus retained commission."""
        with self._lock:
            return self.total_received - self.total_paid_out

    # =========================================================================
    # Utility
    # =========================================================================

    def __repr__(self) -> str:
        return (
            f"Auction(owner={self._owner}, phase={self._state.phase.name}, "
            f"deadline={self._state.deadline}, highest={self._state.highest_bid})"
        )

    def stats(self) -> dict:
        """Get auction statistics."""
        with self._lock:
            stats = self._queries.stats()
            stats["owner"] = self._owner
            stats["custody_balance"] = self.custody_balance
            stats["total_received"] = self.total_received
            stats["total_paid_out"] = self.total_paid_out
            return stats
