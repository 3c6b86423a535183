from typing import Literal, Union

from pydantic import BaseModel

from ollama_stream.config import DEFAULT_CONTEXT_WINDOW


class TextChunk(BaseModel):
    """A fragment of generated text."""
    type: Literal["text"] = "text"
    text: str


class UsageChunk(BaseModel):
    """Token counters reported by the server (prompt_eval_count / eval_count)."""
    type: Literal["usage"] = "usage"
    input_tokens: int = 0
    output_tokens: int = 0


StreamChunk = Union[TextChunk, UsageChunk]


class ModelInfo(BaseModel):
    """
    Model metadata consumed by callers for context budgeting and cost display.

    Defaults match what an OpenAI-compatible local server can be assumed
    to offer when nothing more specific is known.
    """
    max_tokens: int = -1
    context_window: int = DEFAULT_CONTEXT_WINDOW
    supports_images: bool = True
    supports_prompt_cache: bool = False
    input_price: float = 0.0
    output_price: float = 0.0


class ModelDescriptor(BaseModel):
    id: str
    info: ModelInfo


class ApiResponse(BaseModel):
    """
    A whole chat response accumulated from a StreamChunk sequence.
    """
    text: str = ""
    input_tokens: int = 0
    output_tokens: int = 0
