"""Unified exception hierarchy for the Cherry escrow ledger and bridge.

Every Cherry error inherits from CherryException and carries:
- error_code: Machine-readable code (e.g., "INSUFFICIENT_ALLOWANCE")
- http_status: Status used by the API layer
- message: Human-readable message
- details: Additional context dictionary

Errors fall into two families:

RecoverableError
    The operation was refused before any state changed. Callers are
    expected to branch on these (InsufficientAllowanceError,
    InvalidRecipientError, ...).

InvocationAborted
    The whole invocation must unwind. The contract host restores every
    checkpointed table and the event log before the error reaches the
    caller (UnknownTokenError, RemoteCallFailure, ...).

Usage:
    from cherry_core.exceptions import InsufficientAllowanceError

    try:
        ledger.withdraw(token, amount, agent)
    except InsufficientAllowanceError as e:
        logger.warning(e.to_dict())
"""
from __future__ import annotations

import logging
from typing import Any, Optional, Type

logger = logging.getLogger(__name__)


class CherryException(Exception):
    """Base exception for all Cherry errors."""

    error_code: str = "CHERRY_ERROR"
    http_status: int = 500

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        if error_code:
            self.error_code = error_code
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to API response format."""
        result = {
            "error": self.error_code,
            "message": self.message,
        }
        if self.details:
            result["details"] = self.details
        return result


class RecoverableError(CherryException):
    """Refused before any state change; safe to branch on."""

    error_code = "RECOVERABLE_ERROR"
    http_status = 400


class InvocationAborted(CherryException):
    """Unwinds the entire invocation, leaving state as it was before."""

    error_code = "INVOCATION_ABORTED"
    http_status = 500


# =============================================================================
# Recoverable errors
# =============================================================================

class CherryValidationError(RecoverableError):
    """Malformed identifier or amount."""

    error_code = "VALIDATION_ERROR"
    http_status = 400

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        details = details or {}
        if field:
            details["field"] = field
        super().__init__(message, details=details)


class InsufficientAllowanceError(RecoverableError):
    """Withdrawal exceeds the token's current allowance."""

    error_code = "INSUFFICIENT_ALLOWANCE"
    http_status = 409

    def __init__(
        self,
        token: str,
        requested: int,
        available: int,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        details = details or {}
        details.update({"token": token, "requested": requested, "available": available})
        super().__init__(
            f"Insufficient allowance for {token}: requested {requested}, available {available}",
            details=details,
        )
        self.token = token
        self.requested = requested
        self.available = available


class InvalidRecipientError(RecoverableError):
    """Bridge-out target is not a contract."""

    error_code = "INVALID_RECIPIENT"
    http_status = 422

    def __init__(self, recipient: str, details: Optional[dict[str, Any]] = None) -> None:
        details = details or {}
        details["recipient"] = recipient
        super().__init__(
            f"Recipient {recipient} is not a contract and cannot receive bridge calls",
            details=details,
        )
        self.recipient = recipient


class TokenAlreadyInitializedError(RecoverableError):
    """Allowance entry already exists and re-initialization is rejected."""

    error_code = "TOKEN_ALREADY_INITIALIZED"
    http_status = 409

    def __init__(self, token: str, current: int, details: Optional[dict[str, Any]] = None) -> None:
        details = details or {}
        details.update({"token": token, "current": current})
        super().__init__(f"Token {token} is already initialized", details=details)
        self.token = token


class UnauthorizedCallerError(RecoverableError):
    """Caller is not on the ledger's allowlist."""

    error_code = "UNAUTHORIZED_CALLER"
    http_status = 403

    def __init__(self, caller: Optional[str], operation: str) -> None:
        super().__init__(
            f"Caller {caller or '<anonymous>'} may not {operation}",
            details={"caller": caller, "operation": operation},
        )
        self.caller = caller


# =============================================================================
# Invocation aborts
# =============================================================================

class UnknownTokenError(InvocationAborted):
    """Lookup against a token that was never initialized."""

    error_code = "UNKNOWN_TOKEN"
    http_status = 404

    def __init__(self, token: str, details: Optional[dict[str, Any]] = None) -> None:
        details = details or {}
        details["token"] = token
        super().__init__(f"Token {token} has no allowance entry", details=details)
        self.token = token


class BalanceOverflowError(InvocationAborted):
    """Arithmetic result does not fit in an unsigned 128-bit balance."""

    error_code = "BALANCE_OVERFLOW"
    http_status = 422

    def __init__(self, token: str, current: int, amount: int) -> None:
        super().__init__(
            f"Depositing {amount} into {token} overflows the balance ceiling",
            details={"token": token, "current": current, "amount": amount},
        )


class ContractNotFoundError(InvocationAborted):
    """No contract is deployed at the callee address."""

    error_code = "CONTRACT_NOT_FOUND"
    http_status = 404

    def __init__(self, address: str) -> None:
        super().__init__(f"No contract deployed at {address}", details={"address": address})
        self.address = address


class RoutingError(InvocationAborted):
    """Selector does not match any entry point on the callee."""

    error_code = "ROUTING_ERROR"
    http_status = 502

    def __init__(self, callee: str, selector: str) -> None:
        super().__init__(
            f"Contract {callee} has no entry point for selector {selector}",
            details={"callee": callee, "selector": selector},
        )
        self.callee = callee
        self.selector = selector


class ContractTrapped(InvocationAborted):
    """Callee raised something other than a CherryException."""

    error_code = "CONTRACT_TRAPPED"
    http_status = 500

    def __init__(self, callee: str, selector: str, exception_type: str) -> None:
        super().__init__(
            f"Contract {callee} trapped in {selector}: {exception_type}",
            details={"callee": callee, "selector": selector, "exception_type": exception_type},
        )
        self.callee = callee
        self.selector = selector


class RemoteCallFailure(InvocationAborted):
    """Downstream contract call failed; the outer operation aborts."""

    error_code = "REMOTE_CALL_FAILED"
    http_status = 502

    def __init__(
        self,
        callee: str,
        selector: str,
        cause: Optional[CherryException] = None,
    ) -> None:
        details: dict[str, Any] = {"callee": callee, "selector": selector}
        if cause is not None:
            details["cause"] = cause.to_dict()
        reason = cause.message if cause is not None else "unknown failure"
        super().__init__(
            f"Remote call to {callee} ({selector}) failed: {reason}",
            details=details,
        )
        self.callee = callee
        self.selector = selector
        self.cause = cause


# =============================================================================
# Registry
# =============================================================================

EXCEPTION_REGISTRY: dict[str, Type[CherryException]] = {
    cls.error_code: cls
    for cls in (
        CherryException,
        RecoverableError,
        InvocationAborted,
        CherryValidationError,
        InsufficientAllowanceError,
        InvalidRecipientError,
        TokenAlreadyInitializedError,
        UnauthorizedCallerError,
        UnknownTokenError,
        BalanceOverflowError,
        ContractNotFoundError,
        RoutingError,
        ContractTrapped,
        RemoteCallFailure,
    )
}


def get_exception_class(error_code: str) -> Type[CherryException]:
    """Get the exception class for an error code.

    Defaults to CherryException for unknown codes.
    """
    return EXCEPTION_REGISTRY.get(error_code, CherryException)


def is_recoverable(error: BaseException) -> bool:
    """Whether the caller may branch on this error instead of unwinding."""
    return isinstance(error, RecoverableError)
