"""
FitLog Backend - Test Configuration (conftest.py)
===================================================

What:  Shared pytest fixtures for the entire test suite.
How:   Google Sheets and Gemini are replaced by mocks; the app is exercised
       in-process through HTTPX's ASGITransport. No network access.

Fixtures:
    ├── test_settings: Frozen Settings with fake ids and no seeding delay
    ├── mock_sheets: MagicMock standing in for SheetsService
    ├── mock_llm: MagicMock standing in for GeminiService
    ├── log_service: Real LogService wired to the two mocks
    ├── sample_image_bytes: Minimal JPEG bytes for upload tests
    └── test_client: HTTPX AsyncClient bound to a fresh app
"""

import os

# Must be set before app modules build the process-wide settings
os.environ["SPREADSHEET_ID"] = "test-spreadsheet-id"
os.environ["GEMINI_API_KEY"] = "test-key-not-real"
os.environ["LOG_LEVEL"] = "WARNING"

from unittest.mock import MagicMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from app.config import Settings
from app.main import create_app
from app.services.llm_base import LLMService
from app.services.log_service import LogService
from app.services.sheets_service import SheetsService

CARDIO_JSON = '{"duration": "32:10", "distance": "5.2", "calories": "410"}'


@pytest.fixture
def test_settings():
    return Settings(
        _env_file=None,
        spreadsheet_id="test-spreadsheet-id",
        gemini_api_key="test-key-not-real",
        seed_delay_seconds=0,
        log_level="WARNING",
    )


@pytest.fixture
def mock_sheets():
    sheets = MagicMock(spec=SheetsService)
    sheets.read_rows.return_value = []
    return sheets


@pytest.fixture
def mock_llm():
    llm = MagicMock(spec=LLMService)
    llm.analyze_image.return_value = CARDIO_JSON
    return llm


@pytest.fixture
def log_service(mock_sheets, mock_llm):
    return LogService(sheets=mock_sheets, llm=mock_llm, default_sheet="Logs", seed_delay_seconds=0)


@pytest.fixture
def sample_image_bytes():
    """Minimal JPEG: SOI marker + JFIF header + EOI marker."""
    return (
        b'\xff\xd8\xff\xe0\x00\x10JFIF\x00\x01\x01\x00\x00\x01\x00\x01\x00\x00'
        b'\xff\xd9'
    )


@pytest.fixture
def app(test_settings, log_service):
    return create_app(test_settings, log_service=log_service)


@pytest_asyncio.fixture
async def test_client(app):
    """
    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
            assert response.status_code == 200
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
