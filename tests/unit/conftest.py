"""
Global fixtures for all unit tests.

This conftest provides autouse fixtures that prevent real external service calls:
- Environment variable isolation (prevents credential leakage)

These fixtures apply automatically to ALL tests in tests/unit/.
"""

import pytest


@pytest.fixture(autouse=True)
def isolate_environment(monkeypatch):
    """
    Isolate test environment from real credentials and configurations.

    Uses a mock API key so an accidental SDK call fails fast instead of
    spending quota.
    """
    monkeypatch.setenv("ENVIRONMENT", "development")
    monkeypatch.setenv("GOOGLE_AI_API_KEY", "test-google-ai-key")
    monkeypatch.delenv("OVERFLOW_POLICY", raising=False)
