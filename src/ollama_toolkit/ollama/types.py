"""Type definitions for Ollama integration.

This module contains dataclasses describing the outcome of a chat that may
have gone through several model/tool rounds.
"""

from dataclasses import dataclass, field
from typing import Any


@dataclass
class ExecutedToolCall:
    """A tool call the model requested and the content sent back for it.

    Attributes:
        name: Tool name requested by the model
        arguments: Raw arguments as sent by the model
        result: Content of the tool message returned to the model. For calls
                that named an unknown tool or carried invalid arguments this
                is the error text the model was shown.
        error: True if dispatch failed and ``result`` is an error message
    """

    name: str
    arguments: Any
    result: str
    error: bool = False


@dataclass
class ToolChatResult:
    """Final state of a chat that was allowed to call tools.

    Attributes:
        response: The last raw response from Ollama (as a dict)
        messages: Full message history including tool messages and the
                  final assistant message
        tool_calls: Every tool call dispatched along the way, in order
        rounds: Number of requests sent to Ollama
    """

    response: dict[str, Any]
    messages: list[dict[str, Any]] = field(default_factory=list)
    tool_calls: list[ExecutedToolCall] = field(default_factory=list)
    rounds: int = 0

    @property
    def message(self) -> dict[str, Any]:
        """The final assistant message."""
        return self.response.get("message") or {}

    @property
    def content(self) -> str:
        return self.message.get("content") or ""
