"""
Scenario runner - Replays a scripted sequence of calls against an auction.

A scenario is a JSON object:

    {
        "owner": "owner",
        "duration": 300,
        "start_time": 0,
        "config": {"commission_percent": 2},
        "reject": ["mallory"],
        "steps": [
            {"at": 0, "caller": "alice", "action": "bid", "amount": 10},
            {"at": 400, "caller": "owner", "action": "end"}
        ]
    }

Step times must not go backwards. Failed steps are recorded, not raised.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from tac.core.auction import Auction
from tac.core.clock import ManualClock
from tac.core.config import AuctionConfig
from tac.core.errors import AuctionError
from tac.core.transfer import InMemoryTransfer
from tac.utils.logger import get_logger

logger = get_logger("scenario")

ACTIONS = ("bid", "withdraw_excess", "end", "withdraw", "winner", "bids", "active", "stats")


@dataclass
class StepResult:
    """Outcome of one scenario step."""
    index: int
    at: int
    action: str
    caller: Optional[str]
    ok: bool
    result: Any = None
    error: str = ""


def _run_step(auction: Auction, step: Dict[str, Any], now: int) -> Any:
    action = step.get("action")
    caller = step.get("caller")

    if action == "bid":
        extended = auction.place_bid(caller, step.get("amount"), now)
        return {"extended": extended, "deadline": auction.deadline}
    if action == "withdraw_excess":
        return auction.withdraw_excess(caller, now)
    if action == "end":
        winner, amount = auction.end_auction(caller, now)
        return {"winner": winner, "amount": amount}
    if action == "withdraw":
        receipt = auction.withdraw(caller, now)
        return {"refund": receipt.refund, "commission": receipt.commission}
    if action == "winner":
        winner, amount = auction.get_winner(now)
        return {"winner": winner, "amount": amount}
    if action == "bids":
        parties, amounts = auction.get_all_bids()
        return dict(zip(parties, amounts))
    if action == "active":
        return auction.is_auction_active(now)
    if action == "stats":
        return auction.stats()

    raise ValueError(f"Unknown action: {action!r} (expected one of {', '.join(ACTIONS)})")


def run_scenario(
    scenario: Dict[str, Any],
    config: Optional[AuctionConfig] = None,
) -> Tuple[Auction, InMemoryTransfer, List[StepResult]]:
    """
    Build an auction from a scenario and replay its steps.

    Args:
        scenario: Parsed scenario object
        config: Base config; scenario "config" keys override it

    Returns:
        (auction, transfer backend, per-step results)

    Raises:
        ValueError: on a malformed scenario (wrong shape, unknown action,
            time going backwards)
    """
    if not isinstance(scenario, dict):
        raise ValueError(f"Scenario must be a JSON object, got {type(scenario).__name__}")

    steps = scenario.get("steps", [])
    if not isinstance(steps, list):
        raise ValueError(f"\"steps\" must be a list, got {type(steps).__name__}")
    for index, step in enumerate(steps):
        if not isinstance(step, dict):
            raise ValueError(f"Step {index} must be an object, got {type(step).__name__}")

    base = config or AuctionConfig()
    overrides = scenario.get("config", {})
    if not isinstance(overrides, dict):
        raise ValueError("\"config\" must be an object")
    if overrides:
        base = AuctionConfig(**{**base.model_dump(), **overrides})

    start_time = scenario.get("start_time", 0)
    clock = ManualClock(start=start_time)

    transfer = InMemoryTransfer()
    for recipient in scenario.get("reject", []):
        transfer.reject(recipient)

    auction = Auction(
        owner=scenario.get("owner", "owner"),
        duration=scenario.get("duration"),
        start_time=start_time,
        transfer=transfer,
        config=base,
    )

    results = []
    for index, step in enumerate(steps):
        now = clock.set(step.get("at", clock.now()))
        action = step.get("action")
        caller = step.get("caller")

        try:
            outcome = _run_step(auction, step, now)
        except AuctionError as e:
            logger.debug(f"Step {index} ({action}) failed: {e}")
            results.append(StepResult(index, now, action, caller, ok=False,
                                      error=f"{type(e).__name__}: {e}"))
            continue

        results.append(StepResult(index, now, action, caller, ok=True, result=outcome))

    return auction, transfer, results
