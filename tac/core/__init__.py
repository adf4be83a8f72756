"""Auction core: state machine, ledger, settlement and collaborators"""
from tac.core.auction import Auction
from tac.core.clock import ManualClock, SystemClock
from tac.core.config import (
    AuctionConfig,
    load_config,
    COMMISSION_PERCENT,
    EXTENSION_TIME,
    MIN_BID_INCREMENT_PERCENT,
)
from tac.core.errors import (
    AuctionError,
    PreconditionError,
    AuctionNotActive,
    AuctionStillOngoing,
    AlreadyFinalized,
    NotOwner,
    ZeroValue,
    InsufficientIncrement,
    NoExcess,
    WinnerCannotWithdraw,
    NoFunds,
    ReentrantCall,
    TransferFailed,
)
from tac.core.events import AuctionEnded, EventBus, NewBid
from tac.core.settlement import (
    SettlementEngine,
    WithdrawalReceipt,
    compute_commission,
    required_bid,
)
from tac.core.state import AuctionPhase, AuctionState, BidLedger, LedgerEntry
from tac.core.transfer import InMemoryTransfer, TransferRecord, ValueTransfer

__all__ = [
    # Auction
    "Auction",
    "AuctionConfig",
    "load_config",
    "MIN_BID_INCREMENT_PERCENT",
    "EXTENSION_TIME",
    "COMMISSION_PERCENT",
    # State
    "AuctionPhase",
    "AuctionState",
    "BidLedger",
    "LedgerEntry",
    # Settlement
    "SettlementEngine",
    "WithdrawalReceipt",
    "compute_commission",
    "required_bid",
    # Collaborators
    "ValueTransfer",
    "InMemoryTransfer",
    "TransferRecord",
    "ManualClock",
    "SystemClock",
    # Events
    "EventBus",
    "NewBid",
    "AuctionEnded",
    # Errors
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
