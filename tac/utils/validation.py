"""
Input Validation - Sanity checks for values relayed by the host.

The host supplies caller identity, attached value and the current time
on every call. These checks reject malformed values before any auction
rule is consulted:
- Non-integer or negative amounts
- Amounts beyond the 256-bit word range
- Empty or oversized identities
- Non-integer or negative timestamps
"""

from typing import Any, Tuple

# =============================================================================
# Constants
# =============================================================================

MAX_IDENTITY_LENGTH = 128

MIN_AMOUNT = 0
MAX_AMOUNT = 2**256 - 1
MIN_TIMESTAMP = 0
MAX_TIMESTAMP = 2**64 - 1


# =============================================================================
# Validation Functions
# =============================================================================


def validate_integer(
    value: Any,
    name: str,
    min_val: int = MIN_AMOUNT,
    max_val: int = MAX_AMOUNT,
) -> Tuple[bool, str]:
    """
    Validate integer within bounds.

    Args:
        value: Value to validate
        name: Field name for errors
        min_val: Minimum allowed value
        max_val: Maximum allowed value

    Returns:
        (is_valid, error_message)
    """
    # bool is an int subclass; True is not an amount
    if not isinstance(value, int) or isinstance(value, bool):
        return False, f"{name} must be int, got {type(value).__name__}"

    if value < min_val:
        return False, f"{name} must be >= {min_val}, got {value}"

    if value > max_val:
        return False, f"{name} must be <= {max_val}, got {value}"

    return True, ""


def validate_amount(amount: Any) -> Tuple[bool, str]:
    """Validate a value amount (smallest unit)."""
    return validate_integer(amount, "amount", MIN_AMOUNT, MAX_AMOUNT)


def validate_timestamp(timestamp: Any) -> Tuple[bool, str]:
    """Validate a timestamp in seconds."""
    return validate_integer(timestamp, "timestamp", MIN_TIMESTAMP, MAX_TIMESTAMP)


def validate_identity(identity: Any, name: str = "caller") -> Tuple[bool, str]:
    """
    Validate a party identity.

    Identities are opaque non-empty strings (addresses, account names).
    """
    if not isinstance(identity, str):
        return False, f"{name} must be str, got {type(identity).__name__}"

    if not identity.strip():
        return False, f"{name} must not be empty"

    if len(identity) > MAX_IDENTITY_LENGTH:
        return False, f"{name} exceeds max length {MAX_IDENTITY_LENGTH}"

    return True, ""


def ensure_valid(result: Tuple[bool, str]) -> None:
    """Raise ValueError for a failed validation result."""
    is_valid, error = result
    if not is_valid:
        raise ValueError(error)


# =============================================================================
# Module Exports
# =============================================================================

__all__ = [
    "validate_integer",
    "validate_amount",
    "validate_timestamp",
    "validate_identity",
    "ensure_valid",
    "MAX_IDENTITY_LENGTH",
    "MAX_AMOUNT",
    "MAX_TIMESTAMP",
]
