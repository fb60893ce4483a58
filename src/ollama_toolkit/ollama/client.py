"""Async Ollama client wrapper.

This module provides an async wrapper around ollama.AsyncClient that attaches
tool descriptors, the response format and the keep-alive directive to chat
requests, and drives the model/tool round trip through a ToolGroup. The client
is designed to be created once at startup and reused.
"""

import asyncio
import logging
from contextlib import nullcontext
from typing import Any

import ollama

from ollama_toolkit.generation import FormatType, Image, KeepAlive
from ollama_toolkit.ollama.types import ExecutedToolCall, ToolChatResult
from ollama_toolkit.tools import (
    ArgumentDecodeError,
    ToolCall,
    ToolGroup,
    UnknownToolNameError,
)

logger = logging.getLogger(__name__)

DEFAULT_MAX_TOOL_ROUNDS = 8


class MaxToolRoundsExceededError(RuntimeError):
    """The model kept requesting tools past the configured round limit."""

    def __init__(self, rounds: int) -> None:
        super().__init__(f"Model still requested tools after {rounds} rounds")
        self.rounds = rounds


class OllamaClient:
    """Async client for chatting with Ollama models that can call tools.

    Attributes:
        host: The Ollama server URL (e.g., "http://localhost:11434")
        default_keep_alive: Keep-alive directive used when a call passes none
        _client: The underlying ollama.AsyncClient instance
    """

    def __init__(
        self,
        host: str,
        default_keep_alive: KeepAlive | None = None,
    ) -> None:
        """Initialize the Ollama client.

        Args:
            host: The Ollama server URL
            default_keep_alive: Optional keep-alive applied to every request
                                that does not specify its own
        """
        self.host = host
        self.default_keep_alive = default_keep_alive
        self._client = ollama.AsyncClient(host=host)
        logger.info(f"OllamaClient initialized with host: {host}")

    async def check_connection(self) -> bool:
        """Check if the Ollama server is reachable.

        Returns:
            bool: True if connection is successful, False otherwise
        """
        try:
            await self._client.list()
            logger.debug("Ollama connection check: successful")
            return True
        except Exception as e:
            logger.warning(f"Ollama connection check failed: {e}")
            return False

    async def chat(
        self,
        model: str,
        messages: list[dict[str, Any]],
        *,
        tools: ToolGroup | None = None,
        format: FormatType | None = None,
        keep_alive: KeepAlive | None = None,
        options: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Send one non-streaming chat request.

        Args:
            model: The model name to use for the chat
            messages: Messages in Ollama format. ``images`` entries may be
                      Image instances or base64 strings.
            tools: Optional tool group whose descriptors are advertised
            format: Optional response format directive
            keep_alive: Optional keep-alive directive, overriding the default
            options: Optional model parameters (temperature, etc.)

        Returns:
            dict: The Ollama response, including ``message`` and, when the
                  model wants tools, ``message.tool_calls``.

        Raises:
            Exception: If the Ollama API request fails
        """
        request: dict[str, Any] = {
            "model": model,
            "messages": [_prepare_message(m) for m in messages],
            "stream": False,
            "options": options,
        }
        if tools is not None:
            request["tools"] = [info.model_dump() for info in tools.descriptors()]
        if format is not None:
            request["format"] = format.to_wire()
        keep_alive = keep_alive or self.default_keep_alive
        if keep_alive is not None:
            request["keep_alive"] = keep_alive.to_wire()

        logger.debug(
            f"Chat request: model={model}, messages={len(messages)}, "
            f"tools={len(request.get('tools', []))}"
        )

        try:
            response = await self._client.chat(**request)
        except Exception as e:
            logger.error(f"Chat request failed: {e}")
            raise

        if hasattr(response, "model_dump"):
            return response.model_dump()
        return dict(response)

    async def chat_with_tools(
        self,
        model: str,
        messages: list[dict[str, Any]],
        tools: ToolGroup,
        *,
        format: FormatType | None = None,
        keep_alive: KeepAlive | None = None,
        options: dict[str, Any] | None = None,
        max_rounds: int = DEFAULT_MAX_TOOL_ROUNDS,
        lock: asyncio.Lock | None = None,
    ) -> ToolChatResult:
        """Chat until the model answers without requesting a tool.

        Each requested tool call is dispatched through ``tools`` one at a
        time, in the order the model listed them, and its result is appended
        as a ``tool`` message. Unknown tool names and invalid arguments are
        reported back to the model as the tool message so it can correct
        itself; a failing tool aborts the chat.

        When ``lock`` is given it is held around each dispatch, so callers
        sharing ``tools`` across tasks never run two calls inside the same
        tool at once.

        Raises:
            ToolExecutionError: A tool raised while running
            MaxToolRoundsExceededError: The model still requested tools after
                ``max_rounds`` requests
            Exception: If the Ollama API request fails
        """
        history = list(messages)
        executed: list[ExecutedToolCall] = []

        for round_number in range(1, max_rounds + 1):
            response = await self.chat(
                model,
                history,
                tools=tools,
                format=format,
                keep_alive=keep_alive,
                options=options,
            )
            message = response.get("message") or {}
            tool_calls = message.get("tool_calls") or []
            history.append(_assistant_message(message))

            if not tool_calls:
                logger.info(
                    f"Chat finished after {round_number} round(s) "
                    f"with {len(executed)} tool call(s)"
                )
                return ToolChatResult(
                    response=response,
                    messages=history,
                    tool_calls=executed,
                    rounds=round_number,
                )

            for raw_call in tool_calls:
                call = ToolCall.from_ollama(raw_call)
                outcome = await self._dispatch(tools, call, lock)
                executed.append(outcome)
                history.append(
                    {"role": "tool", "content": outcome.result, "tool_name": call.name}
                )

        logger.warning(f"Giving up after {max_rounds} tool rounds")
        raise MaxToolRoundsExceededError(max_rounds)

    async def _dispatch(
        self, tools: ToolGroup, call: ToolCall, lock: asyncio.Lock | None = None
    ) -> ExecutedToolCall:
        arguments = call.function.arguments
        try:
            async with lock or nullcontext():
                result = await tools.call(call)
        except (UnknownToolNameError, ArgumentDecodeError) as e:
            logger.warning(f"Reporting tool call error to model: {e}")
            return ExecutedToolCall(
                name=call.name, arguments=arguments, result=f"Error: {e}", error=True
            )
        logger.debug(f"Tool {call.name!r} returned {len(result)} characters")
        return ExecutedToolCall(name=call.name, arguments=arguments, result=result)

    async def close(self) -> None:
        """Close the client and clean up resources.

        ollama.AsyncClient wraps an httpx.AsyncClient; closing it releases
        pooled connections.
        """
        inner = getattr(self._client, "_client", None)
        aclose = getattr(inner, "aclose", None)
        if aclose is not None:
            await aclose()
        logger.debug("OllamaClient closed")


def _prepare_message(message: dict[str, Any]) -> dict[str, Any]:
    images = message.get("images")
    if not images:
        return message
    prepared = dict(message)
    prepared["images"] = [
        image.to_base64() if isinstance(image, Image) else image for image in images
    ]
    return prepared


def _assistant_message(message: dict[str, Any]) -> dict[str, Any]:
    assistant: dict[str, Any] = {
        "role": message.get("role") or "assistant",
        "content": message.get("content") or "",
    }
    if message.get("tool_calls"):
        assistant["tool_calls"] = message["tool_calls"]
    return assistant
