"""
Value Transfer - Outbound payments from the auction's custody.

The auction never moves value itself; it asks a ValueTransfer backend to
pay a recipient. A backend reports failure by returning False or raising.
It may also call back into the auction before returning.

InMemoryTransfer is a reference backend that credits balances in a dict.
It is used by the CLI and the tests.
"""

from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Protocol, Set, runtime_checkable

from tac.utils.logger import get_logger

logger = get_logger("transfer")


# =============================================================================
# Protocol
# =============================================================================


@runtime_checkable
class ValueTransfer(Protocol):
    """Capability to send value to a recipient."""

    def send(self, recipient: str, amount: int) -> bool:
        """Pay `amount` to `recipient`. Returns False if not delivered."""
        ...


# =============================================================================
# In-Memory Backend
# =============================================================================


@dataclass
class TransferRecord:
    """A delivered payment."""
    recipient: str
    amount: int


class InMemoryTransfer:
    """
    Transfer backend that credits in-memory balances.

    Attributes:
        balances: recipient -> total value received
        history: Delivered payments in order
        rejected: Recipients whose payments are declined
        on_send: Optional hook called before crediting a payment
    """

    def __init__(self, on_send: Optional[Callable[[str, int], None]] = None):
        self.balances: Dict[str, int] = {}
        self.history: List[TransferRecord] = []
        self.rejected: Set[str] = set()
        self.on_send = on_send

    def reject(self, recipient: str) -> None:
        """Decline all future payments to `recipient`."""
        self.rejected.add(recipient)

    def accept(self, recipient: str) -> None:
        self.rejected.discard(recipient)

    def send(self, recipient: str, amount: int) -> bool:
        if self.on_send is not None:
            self.on_send(recipient, amount)

        if recipient in self.rejected:
            logger.debug(f"Payment of {amount} to {recipient} declined")
            return False

        self.balances[recipient] = self.balances.get(recipient, 0) + amount
        self.history.append(TransferRecord(recipient=recipient, amount=amount))
        return True

    def balance_of(self, recipient: str) -> int:
        return self.balances.get(recipient, 0)

    @property
    def total_sent(self) -> int:
        return sum(r.amount for r in self.history)
