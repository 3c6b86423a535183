"""
Adapters for chat providers.

Protocol defines WHAT, implementations define HOW.
"""

from .base import ApiHandler
from .ollama import (
    ApiError,
    ConfigurationError,
    ConnectivityError,
    OllamaError,
    OllamaHandler,
    RequestTimeoutError,
    StreamProcessingError,
)
from .schema import ApiResponse, ModelDescriptor, ModelInfo, StreamChunk, TextChunk, UsageChunk

__all__ = [
    "ApiHandler",
    "OllamaHandler",
    "OllamaError",
    "ConfigurationError",
    "ConnectivityError",
    "ApiError",
    "RequestTimeoutError",
    "StreamProcessingError",
    "ApiResponse",
    "ModelDescriptor",
    "ModelInfo",
    "StreamChunk",
    "TextChunk",
    "UsageChunk",
]
