"""Ollama client wrapper and integration layer.

This package provides the async client that sends requests to Ollama with
tool descriptors and generation directives attached, and runs the
model/tool round trip.
"""

from ollama_toolkit.ollama.client import MaxToolRoundsExceededError, OllamaClient
from ollama_toolkit.ollama.types import ExecutedToolCall, ToolChatResult

__all__ = [
    "ExecutedToolCall",
    "MaxToolRoundsExceededError",
    "OllamaClient",
    "ToolChatResult",
]
