"""
Cherry Escrow - allowance ledger with agent deposit/withdraw records.

Example usage:

    from cherry_escrow import EscrowLedger

    ledger = EscrowLedger.with_allowance("tokenA", 100)
    ledger.deposit("tokenA", 50, depositor="agent_x")
    ledger.get_allowance("tokenA")   # 150
"""
from .endpoint import LedgerEndpoint
from .ledger import EscrowLedger, LedgerSnapshot

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "EscrowLedger",
    "LedgerEndpoint",
    "LedgerSnapshot",
]
