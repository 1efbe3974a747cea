"""
Pytest configuration for cherry-escrow tests.
"""
from __future__ import annotations

import os
import sys
from pathlib import Path

import pytest

# Add package source to path
package_src = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(package_src))

# Add cross-package imports
packages_dir = Path(__file__).parent.parent.parent
for pkg in ["cherry-core"]:
    pkg_path = packages_dir / pkg / "src"
    if pkg_path.exists() and str(pkg_path) not in sys.path:
        sys.path.insert(0, str(pkg_path))

# Set test environment
os.environ.setdefault("CHERRY_ENVIRONMENT", "dev")


@pytest.fixture
def ledger():
    """Ledger seeded with tokenA = 100 (scenario 1)."""
    from cherry_escrow import EscrowLedger
    return EscrowLedger.with_allowance("tokenA", 100, address="escrow")
