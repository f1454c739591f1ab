"""
Pytest configuration and fixtures for linkscout tests.
"""

from __future__ import annotations

import pytest

from linkscout.config.settings import Settings
from tests.fakes import FakeFetcher


@pytest.fixture
def mock_settings() -> Settings:
    """Settings with explicit test values."""
    return Settings(
        log_level="DEBUG",
        lookup_timeout=2.0,
        page_timeout=3.0,
        max_page_bytes=1024 * 1024,
        max_json_scan_chars=2_000_000,
        max_title_length=200,
        max_description_length=2000,
    )


@pytest.fixture
def fake_fetcher() -> FakeFetcher:
    """Empty fake fetcher; tests add routes as needed."""
    return FakeFetcher()
