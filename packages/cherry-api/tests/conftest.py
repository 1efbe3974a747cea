"""
Pytest configuration for cherry-api tests.
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
for pkg in ["cherry-core", "cherry-escrow", "cherry-bridge"]:
    pkg_path = packages_dir / pkg / "src"
    if pkg_path.exists() and str(pkg_path) not in sys.path:
        sys.path.insert(0, str(pkg_path))

# Set test environment
os.environ.setdefault("CHERRY_ENVIRONMENT", "dev")


@pytest.fixture
def settings():
    from cherry_core import CherrySettings
    return CherrySettings(
        _env_file=None,
        escrow_address="escrow",
        gateway_address="gateway",
        initial_allowances={"tokenA": 150},
    )


@pytest.fixture
def app(settings):
    from cherry_api import create_app
    return create_app(settings)


@pytest.fixture
def client(app):
    from fastapi.testclient import TestClient
    with TestClient(app) as test_client:
        yield test_client
