"""
Consumers for StreamChunk sequences.
"""

from typing import AsyncIterable

from ollama_stream.adapters.schema import ApiResponse, StreamChunk, TextChunk, UsageChunk


async def collect_message(stream: AsyncIterable[StreamChunk]) -> ApiResponse:
    """
    Drain a create_message stream into a single ApiResponse.

    Text is concatenated in emission order; usage counters are summed
    across every UsageChunk.
    """
    parts: list[str] = []
    input_tokens = 0
    output_tokens = 0

    async for chunk in stream:
        if isinstance(chunk, TextChunk):
            parts.append(chunk.text)
        elif isinstance(chunk, UsageChunk):
            input_tokens += chunk.input_tokens
            output_tokens += chunk.output_tokens

    return ApiResponse(
        text="".join(parts),
        input_tokens=input_tokens,
        output_tokens=output_tokens,
    )
