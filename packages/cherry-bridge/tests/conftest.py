"""
Pytest configuration for cherry-bridge tests.
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
for pkg in ["cherry-core", "cherry-escrow"]:
    pkg_path = packages_dir / pkg / "src"
    if pkg_path.exists() and str(pkg_path) not in sys.path:
        sys.path.insert(0, str(pkg_path))

# Set test environment
os.environ.setdefault("CHERRY_ENVIRONMENT", "dev")


@pytest.fixture
def host():
    from cherry_bridge import ContractHost
    return ContractHost()


@pytest.fixture
def ledger(host):
    """Escrow ledger deployed at 'escrow' with tokenA = 150."""
    from cherry_bridge import deploy_escrow
    return deploy_escrow(host, "escrow", initial_allowances={"tokenA": 150})


@pytest.fixture
def gateway(host, ledger):
    from cherry_bridge import deploy_gateway
    return deploy_gateway(host, "gateway")
