"""Auction phase and deposit ledger"""
from tac.core.state.auction_state import AuctionPhase, AuctionState
from tac.core.state.ledger import BidLedger, LedgerEntry

__all__ = [
    "AuctionPhase",
    "AuctionState",
    "BidLedger",
    "LedgerEntry",
]
