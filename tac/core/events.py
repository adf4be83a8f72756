"""
Auction Events - Notifications for external observers.

Events are emitted after the state change they describe has been
committed. Subscribers are called synchronously, in subscription order.
A subscriber that raises is logged and skipped; the operation that
emitted the event still stands.
"""

from dataclasses import dataclass
from typing import Callable, List, Optional, Union

from tac.utils.logger import get_logger

logger = get_logger("events")


@dataclass(frozen=True)
class NewBid:
    """An accepted bid."""
    bidder: str
    amount: int


@dataclass(frozen=True)
class AuctionEnded:
    """The owner finalized the auction. winner is None if nobody bid."""
    winner: Optional[str]
    amount: int


AuctionEvent = Union[NewBid, AuctionEnded]
EventHandler = Callable[[AuctionEvent], None]


class EventBus:
    """Synchronous fan-out of auction events with an in-memory log."""

    def __init__(self):
        self._handlers: List[EventHandler] = []
        self.history: List[AuctionEvent] = []

    def subscribe(self, handler: EventHandler) -> Callable[[], None]:
        """
        Register a handler.

        Returns:
            A callable that removes the handler
        """
        self._handlers.append(handler)

        def unsubscribe() -> None:
            if handler in self._handlers:
                self._handlers.remove(handler)

        return unsubscribe

    def emit(self, event: AuctionEvent) -> None:
        self.history.append(event)

        for handler in list(self._handlers):
            try:
                handler(event)
            except Exception:
                logger.exception(f"Event handler {handler!r} failed on {event}")

    def __len__(self) -> int:
        return len(self.history)
