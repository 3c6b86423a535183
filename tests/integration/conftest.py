"""
Pytest configuration for integration tests.

Loads .env file so tests can access Ollama server configuration.
"""

import pytest
from dotenv import load_dotenv


def pytest_configure(config):
    """Load .env file before tests run."""
    load_dotenv()


@pytest.fixture(autouse=True)
def clean_ollama_env():
    """Integration tests read the real OLLAMA_* configuration."""
    yield
