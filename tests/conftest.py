"""Shared test fixtures for ollama-stream tests."""

import pytest

from ollama_stream.config import OllamaOptions
from tests.ollama_mock import MOCK_BASE_URL, MOCK_MODEL


@pytest.fixture
def options():
    """Options pointing at the mock host, streaming on."""
    return OllamaOptions(ollama_base_url=MOCK_BASE_URL, ollama_model_id=MOCK_MODEL)


@pytest.fixture(autouse=True)
def clean_ollama_env(monkeypatch):
    """Keep developer OLLAMA_* variables out of the tests."""
    for key in (
        "OLLAMA_BASE_URL",
        "OLLAMA_MODEL_ID",
        "OLLAMA_NUM_CTX",
        "OLLAMA_REQUEST_TIMEOUT_MS",
        "OLLAMA_STREAM",
        "OLLAMA_RETRY_ATTEMPTS",
        "OLLAMA_RETRY_MIN_WAIT",
        "OLLAMA_RETRY_MAX_WAIT",
    ):
        monkeypatch.delenv(key, raising=False)
