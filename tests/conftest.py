"""
Shared fixtures for ThreatLens tests.
"""

import pytest

from services.model_gateway import reset_model_gateway


@pytest.fixture(autouse=True)
def fresh_model_gateway():
    """Each test starts without a cached model gateway."""
    reset_model_gateway()
    yield
    reset_model_gateway()
