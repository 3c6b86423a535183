"""
Integration tests against a live Ollama server - skip if not configured.

Prerequisites:
- Ollama running with at least one model pulled
- .env configured with OLLAMA_MODEL_ID (and OLLAMA_BASE_URL if not local)

Run with: pytest tests/integration/ -v -m integration
"""

import pytest

from ollama_stream.adapters.ollama import OllamaHandler
from ollama_stream.adapters.schema import TextChunk, UsageChunk
from ollama_stream.config import load_options_from_env
from ollama_stream.stream import collect_message


@pytest.fixture
def live_handler():
    """Create a real handler from environment configuration."""
    options = load_options_from_env()
    if not options.ollama_model_id:
        pytest.skip("OLLAMA_MODEL_ID not configured in .env")
    return OllamaHandler(options)


@pytest.mark.integration
@pytest.mark.asyncio
async def test_live_stream_produces_text_and_usage(live_handler):
    chunks = []
    async for chunk in live_handler.create_message(
        "Answer with a single word.",
        [{"role": "user", "content": "What color is the sky on a clear day?"}],
    ):
        chunks.append(chunk)
    await live_handler.aclose()

    assert any(isinstance(c, TextChunk) for c in chunks)
    assert isinstance(chunks[-1], UsageChunk)
    assert chunks[-1].output_tokens > 0


@pytest.mark.integration
@pytest.mark.asyncio
async def test_live_collect_message(live_handler):
    response = await collect_message(live_handler.create_message(
        "Answer with a single word.",
        [{"role": "user", "content": "Say hello."}],
    ))
    await live_handler.aclose()

    assert response.text.strip()
    assert response.input_tokens > 0
