"""Pydantic models for API request and response schemas.

This package contains all Pydantic models used for validating and
serializing API requests and responses across all endpoints.
"""

from ollama_toolkit.models.chat import (
    ChatMessage,
    ChatRequest,
    ChatResponse,
    ExecutedToolCallResponse,
)
from ollama_toolkit.models.health import HealthResponse
from ollama_toolkit.models.tools import (
    ToolCallResponse,
    ToolListResponse,
)

__all__ = [
    "ChatMessage",
    "ChatRequest",
    "ChatResponse",
    "ExecutedToolCallResponse",
    "HealthResponse",
    "ToolCallResponse",
    "ToolListResponse",
]
