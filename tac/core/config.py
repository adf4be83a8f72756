"""
Auction configuration parameters for TAC.

Defines the bidding rule, the extension window and the settlement fee.
Values come from defaults, then TAC_* environment variables (a .env file
is honoured), then an optional JSON file.
"""

import json
import os
from pathlib import Path
from typing import Any, Dict, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field

# Defaults
MIN_BID_INCREMENT_PERCENT = 5
EXTENSION_TIME = 600  # seconds
COMMISSION_PERCENT = 2
DEFAULT_DURATION = 3600  # seconds

ENV_PREFIX = "TAC_"


class AuctionConfig(BaseModel):
    """Per-instance auction parameters"""

    model_config = ConfigDict(frozen=True, extra="forbid")

    # Bidding
    min_bid_increment_percent: int = Field(MIN_BID_INCREMENT_PERCENT, ge=0, le=100)

    # Anti-sniping: bids inside this trailing window push the deadline
    extension_time: int = Field(EXTENSION_TIME, ge=0)

    # Settlement fee on losing-party refunds
    commission_percent: int = Field(COMMISSION_PERCENT, ge=0, le=100)

    # Used by hosts that do not pass an explicit duration
    duration: int = Field(DEFAULT_DURATION, gt=0)


def _env_overrides() -> Dict[str, Any]:
    """Collect TAC_* overrides for known config fields."""
    overrides = {}
    for name in AuctionConfig.model_fields:
        raw = os.getenv(f"{ENV_PREFIX}{name.upper()}")
        if raw is not None:
            overrides[name] = raw
    return overrides


def load_config(config_path: Optional[str] = None, env_file: Optional[str] = None) -> AuctionConfig:
    """
    Load configuration from environment and optional JSON file.

    Args:
        config_path: Optional path to a JSON object of config fields
        env_file: Optional .env file; defaults to searching from the cwd

    Returns:
        AuctionConfig instance

    Raises:
        pydantic.ValidationError: on out-of-range or unknown fields
    """
    load_dotenv(dotenv_path=env_file)

    values: Dict[str, Any] = _env_overrides()

    if config_path:
        data = json.loads(Path(config_path).read_text(encoding="utf-8"))
        if not isinstance(data, dict):
            raise ValueError(f"Config file {config_path} must contain a JSON object")
        values.update(data)

    return AuctionConfig(**values)
