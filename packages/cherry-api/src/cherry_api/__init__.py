"""Cherry API - HTTP surface for the escrow ledger and bridge gateway."""
from .main import API_VERSION, create_app

__all__ = ["API_VERSION", "create_app"]
