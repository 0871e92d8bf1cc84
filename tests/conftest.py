"""
Shared fixtures for the SiteQualifier test suite.

Browser and language-model collaborators are replaced with the fakes in
``tests.helpers`` so that no test launches Chromium or talks to the network.
"""

from unittest.mock import AsyncMock

import pytest

from sitequalifier.config import Config
from sitequalifier.storage import MemoryRecordStore
from tests.helpers import LANDING_PAGE_HTML, FakePage, FakeSession, RecordingSleep

# ============================================================================
# Pytest Configuration
# ============================================================================


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests for individual components")
    config.addinivalue_line("markers", "integration: Integration tests across modules")


# ============================================================================
# Core Test Fixtures
# ============================================================================


@pytest.fixture
def landing_page_html() -> str:
    return LANDING_PAGE_HTML


@pytest.fixture
def fake_page() -> FakePage:
    return FakePage()


@pytest.fixture
def fake_session(fake_page: FakePage) -> FakeSession:
    return FakeSession(fake_page)


@pytest.fixture
def recording_sleep() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture
def memory_store() -> MemoryRecordStore:
    return MemoryRecordStore()


@pytest.fixture
def service() -> AsyncMock:
    """Classification service whose complete() answers a QUALIFY verdict."""
    mock = AsyncMock()
    mock.complete.return_value = '{"verdict": "QUALIFY", "score": 9, "reason": "Cold email infrastructure."}'
    return mock


@pytest.fixture
def test_config(tmp_path) -> Config:
    """Configuration writing into a temporary directory, without waits."""
    config = Config()
    config.storage.output_dir = tmp_path / "storage"
    config.pipeline.delay_between_requests_ms = 0
    config.retry.base_delay_ms = 0
    return config
