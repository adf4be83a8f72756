"""
Error kinds raised by the auction.

Precondition errors are raised before any state is touched; the instance
remains usable afterwards. TransferFailed is reported when the value
transfer backend declines or raises.
"""

from typing import Optional


class AuctionError(Exception):
    """Base class for all auction failures."""


class PreconditionError(AuctionError):
    """A guard rejected the call; no state was changed."""


class AuctionNotActive(PreconditionError):
    def __init__(self, message: str = "Auction is not active"):
        super().__init__(message)


class AuctionStillOngoing(PreconditionError):
    def __init__(self, message: str = "Auction has not ended yet"):
        super().__init__(message)


class AlreadyFinalized(PreconditionError):
    def __init__(self, message: str = "Auction already finalized"):
        super().__init__(message)


class NotOwner(PreconditionError):
    def __init__(self, caller: str):
        self.caller = caller
        super().__init__(f"Caller {caller} is not the owner")


class ZeroValue(PreconditionError):
    def __init__(self, message: str = "Bid must carry a non-zero value"):
        super().__init__(message)


class InsufficientIncrement(PreconditionError):
    """Bid is below the current highest bid plus the minimum increment."""

    def __init__(self, amount: int, required: int):
        self.amount = amount
        self.required = required
        super().__init__(f"Bid {amount} below required minimum {required}")


class NoExcess(PreconditionError):
    def __init__(self, caller: str):
        self.caller = caller
        super().__init__(f"No excess deposit to withdraw for {caller}")


class WinnerCannotWithdraw(PreconditionError):
    def __init__(self, caller: str):
        self.caller = caller
        super().__init__(f"Winner {caller} cannot withdraw the winning stake")


class NoFunds(PreconditionError):
    def __init__(self, caller: str):
        self.caller = caller
        super().__init__(f"No funds to withdraw for {caller}")


class ReentrantCall(PreconditionError):
    def __init__(self, operation: str):
        self.operation = operation
        super().__init__(f"Re-entrant call to {operation} during a value transfer")


class TransferFailed(AuctionError):
    """The value transfer backend did not deliver the funds."""

    def __init__(self, recipient: str, amount: int, reason: Optional[str] = None):
        self.recipient = recipient
        self.amount = amount
        self.reason = reason
        message = f"Transfer of {amount} to {recipient} failed"
        if reason:
            message += f": {reason}"
        super().__init__(message)


__all__ = [
    "AuctionError",
    "PreconditionError",
    "AuctionNotActive",
    "AuctionStillOngoing",
    "AlreadyFinalized",
    "NotOwner",
    "ZeroValue",
    "InsufficientIncrement",
    "NoExcess",
    "WinnerCannotWithdraw",
    "NoFunds",
    "ReentrantCall",
    "TransferFailed",
]
