"""
Cherry Core - shared building blocks for the escrow ledger and bridge.

This package provides:
- Settings loaded from CHERRY_* environment variables
- The unified exception hierarchy
- Structured logging with correlation IDs
- Entry-point selectors shared by ledger and bridge
- Event types and the append-only event log
"""
from .config import CherrySettings, ReinitializePolicy, load_settings
from .events import (
    BridgeEvent,
    BridgeIn,
    BridgeOut,
    Deposited,
    EVENT_TYPES,
    EventLog,
    EventRecord,
    Initiated,
    Withdrawn,
    event_fields,
    event_topics,
)
from .exceptions import (
    BalanceOverflowError,
    CherryException,
    CherryValidationError,
    ContractNotFoundError,
    ContractTrapped,
    InsufficientAllowanceError,
    InvalidRecipientError,
    InvocationAborted,
    RecoverableError,
    RemoteCallFailure,
    RoutingError,
    TokenAlreadyInitializedError,
    UnauthorizedCallerError,
    UnknownTokenError,
    get_exception_class,
    is_recoverable,
)
from .logging_config import setup_logging
from .selectors import (
    BRIDGE_IN_SELECTOR,
    DEPOSIT_SELECTOR,
    WITHDRAW_SELECTOR,
    Selector,
)
from .validators import MAX_BALANCE, validate_amount, validate_identifier

__version__ = "0.1.0"

__all__ = [
    "__version__",
    # Config
    "CherrySettings",
    "ReinitializePolicy",
    "load_settings",
    # Events
    "BridgeEvent",
    "BridgeIn",
    "BridgeOut",
    "Deposited",
    "EVENT_TYPES",
    "EventLog",
    "EventRecord",
    "Initiated",
    "Withdrawn",
    "event_fields",
    "event_topics",
    # Exceptions
    "BalanceOverflowError",
    "CherryException",
    "CherryValidationError",
    "ContractNotFoundError",
    "ContractTrapped",
    "InsufficientAllowanceError",
    "InvalidRecipientError",
    "InvocationAborted",
    "RecoverableError",
    "RemoteCallFailure",
    "RoutingError",
    "TokenAlreadyInitializedError",
    "UnauthorizedCallerError",
    "UnknownTokenError",
    "get_exception_class",
    "is_recoverable",
    # Logging
    "setup_logging",
    # Selectors
    "BRIDGE_IN_SELECTOR",
    "DEPOSIT_SELECTOR",
    "WITHDRAW_SELECTOR",
    "Selector",
    # Validation
    "MAX_BALANCE",
    "validate_amount",
    "validate_identifier",
]
