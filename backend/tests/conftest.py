"""
Shared fixtures for the EvaLegalAI Core test suite.
"""
import os
from unittest.mock import AsyncMock, MagicMock

import pytest

# main.py builds the application at import time
os.environ.setdefault("OPENAI_API_KEY", "test-openai-key")
os.environ.setdefault("BITRIX_URL", "https://bitrix.example.com/rest/1/webhook/")

from evalegal.config.settings import load_settings  # noqa: E402
from evalegal.controllers.legal_controller import LegalAnalysisController  # noqa: E402

TEST_ENV = {
    "OPENAI_API_KEY": "test-openai-key",
    "BITRIX_URL": "https://bitrix.example.com/rest/1/webhook/",
}


@pytest.fixture
def settings():
    return load_settings(TEST_ENV)


@pytest.fixture
def fetcher():
    fetcher = MagicMock()
    fetcher.fetch = AsyncMock(return_value=b"%PDF-1.4 binary")
    return fetcher


@pytest.fixture
def ai_client():
    client = MagicMock()
    client.generate = AsyncMock(return_value="Готовый отчёт")
    return client


@pytest.fixture
def bitrix_client():
    client = MagicMock()
    client.send_message = AsyncMock(return_value=True)
    return client


@pytest.fixture
def make_controller(ai_client, fetcher):
    def _make(allowlist=()):
        return LegalAnalysisController(
            ai_client=ai_client,
            document_fetcher=fetcher,
            chat_allowlist=allowlist,
        )

    return _make
