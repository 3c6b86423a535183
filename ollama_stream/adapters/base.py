"""
ApiHandler Protocol - defines the contract for chat providers.

This is the WHAT (interface), not the HOW (implementation).
See ollama.py for the concrete implementation.
"""

from typing import Protocol, AsyncGenerator

from ollama_stream.adapters.schema import ModelDescriptor, StreamChunk


class ApiHandler(Protocol):
    """
    Contract for chat-completion providers.

    Implementations must provide:
    - Streaming message creation (create_message)
    - Model resolution (get_model)
    """

    def create_message(
        self,
        system_prompt: str,
        messages: list[dict],
    ) -> AsyncGenerator[StreamChunk, None]:
        """
        Stream a response to the conversation.

        Args:
            system_prompt: Instructions sent ahead of the conversation
            messages: Anthropic-style messages [{"role": "...", "content": ...}]

        Yields:
            TextChunk for generated text, UsageChunk for token counters

        Raises:
            OllamaError subclasses on failure (nothing is swallowed)
        """
        ...

    def get_model(self) -> ModelDescriptor:
        """
        Return the configured model id and its metadata.
        """
        ...
