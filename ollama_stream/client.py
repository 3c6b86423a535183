"""
Transport client for Ollama's chat API.

Each OllamaClient owns its own httpx.AsyncClient. Body and header timeouts
are disabled on that client only, so long generations are not cut off by
httpx defaults; callers bound request duration themselves.
"""

import json
import logging
from typing import Any, AsyncGenerator, Optional, Union

import httpx

from ollama_stream.config import DEFAULT_OLLAMA_BASE_URL

logger = logging.getLogger(__name__)


class OllamaResponseError(Exception):
    """Error reported by the Ollama server (HTTP status or in-stream error)."""

    def __init__(self, error: str, status_code: int = -1):
        super().__init__(error)
        self.error = error
        self.status_code = status_code


def parse_ollama_error(response: httpx.Response) -> str:
    """Extract a user-friendly error message from an Ollama response body."""
    try:
        data = response.json()
        # Ollama returns {"error": "..."}
        if isinstance(data, dict) and data.get("error"):
            return str(data["error"])
        return response.text[:200]
    except ValueError:
        return response.text[:200]


class OllamaClient:
    """
    Minimal async client for POST /api/chat.

    Usage:
        async with OllamaClient("http://localhost:11434") as client:
            response = await client.chat(model="llama3.1", messages=[...])
    """

    def __init__(
        self,
        host: str = DEFAULT_OLLAMA_BASE_URL,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._host = host.rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=self._host,
            timeout=httpx.Timeout(None),
            transport=transport,
        )

    @property
    def host(self) -> str:
        return self._host

    async def chat(
        self,
        model: str,
        messages: list[dict],
        stream: bool = False,
        options: Optional[dict[str, Any]] = None,
    ) -> Union[dict, AsyncGenerator[dict, None]]:
        """
        Send a chat request.

        Returns the decoded response dict, or when stream=True an async
        generator of partial response dicts (one per NDJSON line). The
        generator closes the underlying response when it finishes.

        Raises:
            OllamaResponseError: on HTTP status >= 400
            httpx.HTTPError: on transport failures
        """
        payload: dict[str, Any] = {
            "model": model,
            "messages": messages,
            "stream": stream,
        }
        if options:
            payload["options"] = options

        if not stream:
            response = await self._client.post("/api/chat", json=payload)
            if response.status_code >= 400:
                raise OllamaResponseError(parse_ollama_error(response), response.status_code)
            return response.json()

        request = self._client.build_request("POST", "/api/chat", json=payload)
        response = await self._client.send(request, stream=True)
        if response.status_code >= 400:
            # Read the error body for streaming responses
            try:
                await response.aread()
                msg = parse_ollama_error(response)
            finally:
                await response.aclose()
            raise OllamaResponseError(msg, response.status_code)

        return self._iter_chunks(response)

    async def _iter_chunks(self, response: httpx.Response) -> AsyncGenerator[dict, None]:
        try:
            async for line in response.aiter_lines():
                if not line.strip():
                    continue
                try:
                    chunk = json.loads(line)
                except json.JSONDecodeError:
                    logger.debug(f"Skipping undecodable stream line: {line[:200]!r}")
                    continue
                if isinstance(chunk, dict) and chunk.get("error"):
                    raise OllamaResponseError(str(chunk["error"]), response.status_code)
                yield chunk
        finally:
            await response.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "OllamaClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()
