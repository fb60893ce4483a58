"""Pydantic models for the tools API.

Tool descriptors and incoming tool calls reuse the wire models from
ollama_toolkit.tools so the HTTP surface matches what Ollama sees.
"""

from pydantic import BaseModel, Field

from ollama_toolkit.tools import ToolInfo


class ToolListResponse(BaseModel):
    """Response model for listing registered tools.

    Attributes:
        tools: Descriptors in dispatch order, as advertised to the model
    """

    tools: list[ToolInfo] = Field(..., description="Registered tool descriptors")


class ToolCallResponse(BaseModel):
    """Result of dispatching a single tool call."""

    name: str = Field(..., description="Name of the tool that ran")
    result: str = Field(..., description="JSON-encoded tool result")
