"""
Shared fixtures for unit and service tests.

Set test environment BEFORE any imports so settings never load real values.
"""

import os
import pytest
from unittest.mock import AsyncMock, MagicMock

os.environ["ENVIRONMENT"] = "development"
os.environ["GOOGLE_AI_API_KEY"] = "test-google-ai-key"


@pytest.fixture
def fake_playwright():
    """
    Build the async_playwright() -> chromium -> browser -> page mock chain.

    Returns a dict with the factory to patch in plus the browser and page
    mocks for assertions. page.pdf() returns a minimal PDF header.
    """
    mock_page = AsyncMock()
    mock_page.pdf = AsyncMock(return_value=b"%PDF-1.4 fake pdf content")
    mock_page.evaluate = AsyncMock(return_value=500)

    mock_browser = AsyncMock()
    mock_browser.new_page = AsyncMock(return_value=mock_page)

    mock_chromium = MagicMock(launch=AsyncMock(return_value=mock_browser))

    factory = MagicMock()
    factory.return_value.__aenter__ = AsyncMock(return_value=MagicMock(chromium=mock_chromium))
    factory.return_value.__aexit__ = AsyncMock(return_value=False)

    return {
        "factory": factory,
        "chromium": mock_chromium,
        "browser": mock_browser,
        "page": mock_page,
    }
