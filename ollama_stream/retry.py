"""
Retry composition for whole, buffered chat calls.

OllamaHandler never retries internally. Callers that want retries wrap a
complete call: each attempt drains create_message into a fresh buffer, so
a restarted attempt cannot duplicate tokens already handed to the caller.
"""

import logging

from tenacity import (
    retry,
    stop_after_attempt,
    wait_exponential,
    retry_if_exception,
    before_sleep_log,
)

from ollama_stream.adapters.base import ApiHandler
from ollama_stream.adapters.ollama import ApiError, ConnectivityError, RequestTimeoutError
from ollama_stream.adapters.schema import ApiResponse
from ollama_stream.config import get_retry_attempts, get_retry_min_wait, get_retry_max_wait
from ollama_stream.stream import collect_message

logger = logging.getLogger(__name__)

RETRYABLE_STATUS_CODES = {429, 500, 502, 503, 504}


def is_retryable_error(exception: BaseException) -> bool:
    """
    Determine if an exception is retryable.

    Retryable errors include:
    - Connection errors (Ollama not up yet, transient network issues)
    - Timeout errors (server busy loading a model)
    - Rate limiting and 5xx server errors

    Configuration errors, other 4xx responses and mid-stream failures
    are not retried.
    """
    if isinstance(exception, (ConnectivityError, RequestTimeoutError)):
        return True
    if isinstance(exception, ApiError):
        return exception.status_code in RETRYABLE_STATUS_CODES
    return False


async def complete_with_retry(
    handler: ApiHandler,
    system_prompt: str,
    messages: list[dict],
) -> ApiResponse:
    """
    Run a full chat call with retry for transient errors.

    Attempt count and backoff bounds come from OLLAMA_RETRY_* (see config).
    The last error is re-raised once attempts are exhausted.
    """

    @retry(
        stop=stop_after_attempt(get_retry_attempts()),
        wait=wait_exponential(multiplier=2, min=get_retry_min_wait(), max=get_retry_max_wait()),
        retry=retry_if_exception(is_retryable_error),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        reraise=True,
    )
    async def complete_once() -> ApiResponse:
        return await collect_message(handler.create_message(system_prompt, messages))

    return await complete_once()
