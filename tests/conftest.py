"""
Pytest configuration and shared fixtures.
This file ensures the project root is in sys.path for imports.
"""

import sys
from pathlib import Path

import pytest

# Add project root to sys.path so we can import domain, services, etc.
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))


@pytest.fixture(autouse=True)
def _isolate_app_state():
    """Fresh rate-limit windows and no leftover dependency overrides per test."""
    from test_fixtures import app
    from api.rate_limiter import reset_all

    reset_all()
    yield
    app.dependency_overrides.clear()
    reset_all()
