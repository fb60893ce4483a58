"""Chat API endpoint.

Runs a non-streaming chat against Ollama, letting the model call the
registered tools until it produces a final answer.
"""

import asyncio
import logging
from typing import Any

from fastapi import APIRouter, Depends, HTTPException

from ollama_toolkit.config import ToolkitSettings
from ollama_toolkit.dependencies import (
    get_app_settings,
    get_ollama_client,
    get_tool_lock,
    get_tool_registry,
)
from ollama_toolkit.generation import Image
from ollama_toolkit.models.chat import (
    ChatMessage,
    ChatRequest,
    ChatResponse,
    ExecutedToolCallResponse,
)
from ollama_toolkit.ollama import MaxToolRoundsExceededError, OllamaClient
from ollama_toolkit.routers.tools import tool_error_to_http
from ollama_toolkit.tools import ToolCallError, ToolGroup

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/chat", tags=["chat"])


def _to_ollama_messages(messages: list[ChatMessage]) -> list[dict[str, Any]]:
    """Convert request messages to Ollama format, dropping unset fields."""
    ollama_messages = []
    for msg in messages:
        ollama_msg: dict[str, Any] = {"role": msg.role, "content": msg.content}
        if msg.images:
            ollama_msg["images"] = [Image.from_base64(data) for data in msg.images]
        if msg.tool_calls:
            ollama_msg["tool_calls"] = msg.tool_calls
        if msg.tool_name:
            ollama_msg["tool_name"] = msg.tool_name
        ollama_messages.append(ollama_msg)
    return ollama_messages


def _ollama_error(e: Exception) -> HTTPException:
    return HTTPException(
        status_code=502,
        detail={
            "error": {
                "code": "ollama_error",
                "message": f"Failed to get response from Ollama: {str(e)}",
                "details": {},
            }
        },
    )


@router.post("", response_model=ChatResponse)
async def chat(
    request_body: ChatRequest,
    ollama_client: OllamaClient = Depends(get_ollama_client),
    registry: ToolGroup = Depends(get_tool_registry),
    lock: asyncio.Lock = Depends(get_tool_lock),
    settings: ToolkitSettings = Depends(get_app_settings),
) -> ChatResponse:
    """Send a conversation to a model and return its final answer.

    With ``use_tools`` the registered tools are advertised and every tool
    call the model makes is executed before the answer is returned.

    Raises:
        HTTPException: 500 if a tool failed or the model never stopped
            calling tools, 502 if Ollama could not be reached.
    """
    messages = _to_ollama_messages(request_body.messages)
    format = request_body.format_directive()
    keep_alive = request_body.keep_alive_directive()

    try:
        if request_body.use_tools:
            result = await ollama_client.chat_with_tools(
                request_body.model,
                messages,
                registry,
                format=format,
                keep_alive=keep_alive,
                options=request_body.options,
                max_rounds=settings.max_tool_rounds,
                lock=lock,
            )
            response, executed, rounds = result.response, result.tool_calls, result.rounds
        else:
            response = await ollama_client.chat(
                request_body.model,
                messages,
                format=format,
                keep_alive=keep_alive,
                options=request_body.options,
            )
            executed, rounds = [], 1
    except ToolCallError as e:
        logger.error(f"Tool failed during chat: {e}")
        raise tool_error_to_http(e)
    except MaxToolRoundsExceededError as e:
        logger.error(str(e))
        raise HTTPException(
            status_code=500,
            detail={
                "error": {
                    "code": "tool_rounds_exceeded",
                    "message": str(e),
                    "details": {"rounds": e.rounds},
                }
            },
        )
    except Exception as e:
        logger.error(f"Ollama chat error: {e}")
        raise _ollama_error(e)

    message = response.get("message") or {}
    logger.info(
        f"Chat with {request_body.model} completed: "
        f"{len(executed)} tool call(s), {rounds} round(s)"
    )
    return ChatResponse(
        model=response.get("model") or request_body.model,
        message=ChatMessage(
            role=message.get("role") or "assistant",
            content=message.get("content") or "",
        ),
        tool_calls_executed=[
            ExecutedToolCallResponse.model_validate(call) for call in executed
        ],
        rounds=rounds,
    )
