"""
OllamaHandler - Ollama implementation of ApiHandler.

Translates a system prompt plus Anthropic-style conversation into an
/api/chat request and normalizes the reply into TextChunk / UsageChunk
events.

Retries are deliberately not done here: restarting a partially consumed
stream would re-emit tokens the caller already received. See
ollama_stream.retry for the buffered, retryable composition.
"""

import asyncio
import errno
import logging
import math
from typing import AsyncGenerator, Optional

import httpx

from ollama_stream.adapters.schema import (
    ModelDescriptor,
    ModelInfo,
    StreamChunk,
    TextChunk,
    UsageChunk,
)
from ollama_stream.client import OllamaClient, OllamaResponseError
from ollama_stream.config import FALLBACK_CONTEXT_WINDOW, OllamaOptions
from ollama_stream.transform import convert_to_ollama_messages

logger = logging.getLogger(__name__)


# ─────────────────────────────────────────────────────────────────────
# ERRORS
# ─────────────────────────────────────────────────────────────────────

class OllamaError(Exception):
    """Base class for errors surfaced by OllamaHandler."""
    pass


class ConfigurationError(OllamaError):
    """Handler options are missing something the call needs."""
    pass


class ConnectivityError(OllamaError):
    """The Ollama host could not be reached."""

    def __init__(self, host: str, code: str, detail: str):
        super().__init__(f"Could not reach Ollama at {host}: {code}: {detail}")
        self.host = host
        self.code = code


class ApiError(OllamaError):
    """The Ollama server rejected the request."""

    def __init__(self, status_code, detail: str):
        super().__init__(f"Ollama API error ({status_code}): {detail}")
        self.status_code = status_code


class RequestTimeoutError(OllamaError, TimeoutError):
    """No response arrived within the configured budget."""

    def __init__(self, timeout_ms: int):
        super().__init__(f"Ollama request timed out after {timeout_ms / 1000:g} seconds")
        self.timeout_ms = timeout_ms


class StreamProcessingError(OllamaError):
    """Failure after streaming started. Chunks already yielded stand."""
    pass


def _error_code(exc: BaseException) -> str:
    """Symbolic errno (e.g. ECONNREFUSED) from the exception chain, else the class name."""
    current: Optional[BaseException] = exc
    seen = set()
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        if isinstance(current, OSError) and current.errno:
            return errno.errorcode.get(current.errno, str(current.errno))
        current = current.__cause__ or current.__context__
    return type(exc).__name__


def _parse_context_window(value: Optional[str]) -> Optional[int]:
    """
    Resolve the context-size override.

    Returns None when no override is configured, the parsed size when it is
    a positive number, and FALLBACK_CONTEXT_WINDOW otherwise.
    """
    if value is None or value == "":
        return None
    try:
        size = float(value)
    except ValueError:
        return FALLBACK_CONTEXT_WINDOW
    if not math.isfinite(size) or size <= 0:
        return FALLBACK_CONTEXT_WINDOW
    return int(size)


def _chunk_events(chunk: dict) -> list[StreamChunk]:
    """Normalize one Ollama response (partial or complete) into events."""
    events: list[StreamChunk] = []
    if not isinstance(chunk, dict):
        return events

    message = chunk.get("message")
    content = message.get("content") if isinstance(message, dict) else None
    if isinstance(content, str) and content:
        events.append(TextChunk(text=content))

    prompt_eval_count = chunk.get("prompt_eval_count")
    eval_count = chunk.get("eval_count")
    if prompt_eval_count is not None or eval_count is not None:
        events.append(UsageChunk(
            input_tokens=prompt_eval_count or 0,
            output_tokens=eval_count or 0,
        ))
    return events


# ─────────────────────────────────────────────────────────────────────
# HANDLER
# ─────────────────────────────────────────────────────────────────────

class OllamaHandler:
    """
    Ollama implementation of ApiHandler protocol.

    Design decisions:
    - One handler per session; options are frozen at construction
    - The handler owns its OllamaClient (exposed as .client for stubbing)
    - Deadline via asyncio.wait_for: a timed-out request is cancelled,
      not left running in the background
    - Missing model id fails before any network call

    Usage:
        handler = OllamaHandler(OllamaOptions(ollama_model_id="llama3.1"))
        async for chunk in handler.create_message("Be brief.", messages):
            ...
    """

    def __init__(self, options: OllamaOptions, client: Optional[OllamaClient] = None):
        self.options = options
        self.client = client or OllamaClient(host=options.base_url)

    async def create_message(
        self,
        system_prompt: str,
        messages: list[dict],
    ) -> AsyncGenerator[StreamChunk, None]:
        """
        Stream a response from Ollama.

        Yields:
            TextChunk for each non-empty content piece, UsageChunk whenever
            the server reports eval counters

        Raises:
            ConfigurationError: model id not configured
            RequestTimeoutError: no response within request_timeout_ms
            ConnectivityError: host unreachable
            ApiError: server rejected the request
            StreamProcessingError: failure after streaming started
        """
        model_id = self.options.ollama_model_id
        if not model_id:
            raise ConfigurationError("Ollama model id is required")

        ollama_messages = [
            {"role": "system", "content": system_prompt},
            *convert_to_ollama_messages(messages),
        ]
        stream = self.options.ollama_stream_enabled
        timeout_ms = self.options.timeout_ms

        logger.info(
            f"Sending chat request to Ollama at {self.options.base_url} "
            f"(model={model_id}, stream={stream}, timeout={timeout_ms}ms)"
        )

        try:
            response = await asyncio.wait_for(
                self.client.chat(
                    model=model_id,
                    messages=ollama_messages,
                    stream=stream,
                    options=self._request_options(),
                ),
                timeout=timeout_ms / 1000,
            )
        except asyncio.TimeoutError:
            logger.error(f"Ollama request timed out after {timeout_ms}ms (model={model_id})")
            raise RequestTimeoutError(timeout_ms) from None
        except Exception as e:
            error = self._translate_error(e)
            logger.error(str(error))
            raise error from e

        if not stream:
            try:
                events = _chunk_events(response)
            except Exception as e:
                error = ApiError("unknown", f"Malformed Ollama response: {e}")
                logger.error(str(error))
                raise error from e
            for event in events:
                yield event
            return

        try:
            async for chunk in response:
                for event in _chunk_events(chunk):
                    yield event
        except Exception as e:
            logger.error(f"Ollama stream failed for {model_id}: {e}")
            raise StreamProcessingError(f"Error processing Ollama stream: {e}") from e
        finally:
            aclose = getattr(response, "aclose", None)
            if aclose is not None:
                await aclose()

    def get_model(self) -> ModelDescriptor:
        context_window = _parse_context_window(self.options.ollama_api_options_ctx_num)
        info = ModelInfo()
        if context_window is not None:
            info = info.model_copy(update={"context_window": context_window})
        return ModelDescriptor(id=self.options.ollama_model_id or "", info=info)

    async def aclose(self) -> None:
        """Close the underlying transport client."""
        await self.client.aclose()

    def _request_options(self) -> Optional[dict]:
        """Ollama runtime options; num_ctx only when an override is set."""
        context_window = _parse_context_window(self.options.ollama_api_options_ctx_num)
        if context_window is None:
            return None
        return {"num_ctx": context_window}

    def _translate_error(self, exc: Exception) -> OllamaError:
        """Map a request-phase exception onto the handler's error taxonomy."""
        if isinstance(exc, OllamaError):
            return exc
        if isinstance(exc, httpx.TimeoutException):
            return RequestTimeoutError(self.options.timeout_ms)
        if isinstance(exc, (httpx.TransportError, OSError)):
            return ConnectivityError(self.options.base_url, _error_code(exc), str(exc) or repr(exc))
        if isinstance(exc, OllamaResponseError):
            return ApiError(exc.status_code if exc.status_code > 0 else "unknown", exc.error)
        status_code = getattr(exc, "status_code", None) or "unknown"
        return ApiError(status_code, str(exc))
