"""
Configuration constants and Pydantic models for ollama-stream.
"""

import os
from typing import Optional

from pydantic import BaseModel, ConfigDict


# ─────────────────────────────────────────────────────────────────────
# DEFAULTS
# ─────────────────────────────────────────────────────────────────────

DEFAULT_OLLAMA_BASE_URL: str = "http://localhost:11434"
DEFAULT_REQUEST_TIMEOUT_MS: int = 30_000

# OpenAI-compatible model metadata defaults
DEFAULT_CONTEXT_WINDOW: int = 128_000
# Used when a context-size override is set but unusable
FALLBACK_CONTEXT_WINDOW: int = 32_768


# ─────────────────────────────────────────────────────────────────────
# RETRY CONFIGURATION - For transient connection / server failures
# ─────────────────────────────────────────────────────────────────────

def get_retry_attempts() -> int:
    """
    Get max retry attempts from environment or default.

    Set OLLAMA_RETRY_ATTEMPTS in .env (default: 3).
    """
    try:
        return int(os.environ.get("OLLAMA_RETRY_ATTEMPTS", "3"))
    except ValueError:
        return 3


def get_retry_min_wait() -> int:
    """
    Get minimum wait between retries in seconds.

    Set OLLAMA_RETRY_MIN_WAIT in .env (default: 1).
    """
    try:
        return int(os.environ.get("OLLAMA_RETRY_MIN_WAIT", "1"))
    except ValueError:
        return 1


def get_retry_max_wait() -> int:
    """
    Get maximum wait between retries in seconds.

    Set OLLAMA_RETRY_MAX_WAIT in .env (default: 10).
    """
    try:
        return int(os.environ.get("OLLAMA_RETRY_MAX_WAIT", "10"))
    except ValueError:
        return 10


# ─────────────────────────────────────────────────────────────────────
# DATA MODELS
# ─────────────────────────────────────────────────────────────────────

class OllamaOptions(BaseModel):
    """
    Options for a single OllamaHandler.

    Fixed for the lifetime of the handler; every create_message call
    reads the same values.
    """
    model_config = ConfigDict(frozen=True)

    ollama_base_url: Optional[str] = None
    ollama_model_id: Optional[str] = None
    # Kept as a string: it usually arrives from a settings field or env var
    ollama_api_options_ctx_num: Optional[str] = None
    request_timeout_ms: Optional[int] = None
    ollama_stream_enabled: bool = True

    @property
    def base_url(self) -> str:
        return self.ollama_base_url or DEFAULT_OLLAMA_BASE_URL

    @property
    def timeout_ms(self) -> int:
        return self.request_timeout_ms or DEFAULT_REQUEST_TIMEOUT_MS


# ─────────────────────────────────────────────────────────────────────
# ENVIRONMENT LOADING
# ─────────────────────────────────────────────────────────────────────

_FALSE_VALUES = {"0", "false", "no", "off"}


def _get_env_int(key: str) -> Optional[int]:
    value = os.environ.get(key)
    if value is None or not value.strip():
        return None
    try:
        return int(value)
    except ValueError:
        return None


def load_options_from_env() -> OllamaOptions:
    """
    Build OllamaOptions from environment variables.

    Recognized variables:
        OLLAMA_BASE_URL, OLLAMA_MODEL_ID, OLLAMA_NUM_CTX,
        OLLAMA_REQUEST_TIMEOUT_MS, OLLAMA_STREAM

    Unset or blank variables leave the option at its default.
    """
    stream_flag = os.environ.get("OLLAMA_STREAM", "").strip().lower()
    return OllamaOptions(
        ollama_base_url=os.environ.get("OLLAMA_BASE_URL") or None,
        ollama_model_id=os.environ.get("OLLAMA_MODEL_ID") or None,
        ollama_api_options_ctx_num=os.environ.get("OLLAMA_NUM_CTX") or None,
        request_timeout_ms=_get_env_int("OLLAMA_REQUEST_TIMEOUT_MS"),
        ollama_stream_enabled=stream_flag not in _FALSE_VALUES,
    )
