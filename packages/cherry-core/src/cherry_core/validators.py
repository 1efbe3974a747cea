"""
Input validation for identifiers and balances.

Balances are unsigned 128-bit integers. Validation runs before any table
is read so a rejected call never touches state.
"""
from __future__ import annotations

from typing import Any

from .exceptions import CherryValidationError

# Unsigned 128-bit balance ceiling
MAX_BALANCE = 2**128 - 1


def validate_identifier(value: Any, field: str) -> str:
    """Validate an opaque token/agent/address identifier."""
    if not isinstance(value, str):
        raise CherryValidationError(
            f"{field} must be a string, got {type(value).__name__}",
            field=field,
        )
    if not value.strip():
        raise CherryValidationError(f"{field} cannot be empty", field=field)
    return value


def validate_amount(value: Any, field: str = "amount") -> int:
    """
    Validate a balance or transfer amount.

    Args:
        value: Candidate amount
        field: Field name used in the error

    Returns:
        The amount as int

    Raises:
        CherryValidationError: If the amount is not an int in [0, MAX_BALANCE]
    """
    # bool is an int subclass; True is never a meaningful amount
    if isinstance(value, bool) or not isinstance(value, int):
        raise CherryValidationError(
            f"{field} must be an integer, got {type(value).__name__}",
            field=field,
        )
    if value < 0:
        raise CherryValidationError(f"{field} cannot be negative: {value}", field=field)
    if value > MAX_BALANCE:
        raise CherryValidationError(
            f"{field} exceeds the 128-bit balance ceiling",
            field=field,
        )
    return value
