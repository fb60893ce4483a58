"""Tools API endpoints.

Lists the descriptors the server advertises to Ollama and dispatches single
tool calls directly, which is useful for testing tools without a model.
"""

import asyncio
import logging

from fastapi import APIRouter, Depends, HTTPException

from ollama_toolkit.models.tools import ToolCallResponse, ToolListResponse
from ollama_toolkit.tools import (
    ArgumentDecodeError,
    ToolCall,
    ToolCallError,
    ToolExecutionError,
    ToolGroup,
    UnknownToolNameError,
)
from ollama_toolkit.dependencies import get_tool_lock, get_tool_registry

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/tools", tags=["tools"])


def tool_error_to_http(error: ToolCallError) -> HTTPException:
    """Map a dispatch failure onto an HTTP error response."""
    if isinstance(error, UnknownToolNameError):
        status_code, code = 404, "unknown_tool"
    elif isinstance(error, ArgumentDecodeError):
        status_code, code = 422, "invalid_arguments"
    elif isinstance(error, ToolExecutionError):
        status_code, code = 500, "tool_failed"
    else:
        status_code, code = 500, "tool_error"

    return HTTPException(
        status_code=status_code,
        detail={
            "error": {
                "code": code,
                "message": str(error),
                "details": {"tool_name": error.tool_name},
            }
        },
    )


@router.get("", response_model=ToolListResponse)
async def list_tools(
    registry: ToolGroup = Depends(get_tool_registry),
) -> ToolListResponse:
    """List every registered tool descriptor in dispatch order."""
    tools = registry.descriptors()
    logger.debug(f"Listed {len(tools)} tools")
    return ToolListResponse(tools=tools)


@router.post("/call", response_model=ToolCallResponse)
async def call_tool(
    tool_call: ToolCall,
    registry: ToolGroup = Depends(get_tool_registry),
    lock: asyncio.Lock = Depends(get_tool_lock),
) -> ToolCallResponse:
    """Dispatch one tool call by name and return its JSON-encoded result.

    Raises:
        HTTPException: 404 for an unknown tool, 422 for invalid arguments,
            500 if the tool itself failed.
    """
    try:
        async with lock:
            result = await registry.call(tool_call)
    except ToolCallError as e:
        logger.info(f"Tool call {tool_call.name!r} failed: {e}")
        raise tool_error_to_http(e)

    return ToolCallResponse(name=tool_call.name, result=result)
