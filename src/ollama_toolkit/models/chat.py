"""Pydantic models for chat API requests and responses."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, StrictInt, StrictStr, field_validator

from ollama_toolkit.generation import FormatType, KeepAlive


class ChatMessage(BaseModel):
    """A single message in Ollama format."""

    role: str = Field(description="Message role (system, user, assistant, tool)")
    content: str = Field(default="", description="Message content")
    images: list[str] | None = Field(
        default=None, description="Base64-encoded images attached to the message"
    )
    tool_calls: list[dict[str, Any]] | None = Field(
        default=None, description="Tool calls made by the assistant (if any)"
    )
    tool_name: str | None = Field(
        default=None, description="Tool that produced this message (role 'tool')"
    )


class ChatRequest(BaseModel):
    """Request body for POST /api/v1/chat."""

    model: str = Field(description="Model to chat with")
    messages: list[ChatMessage] = Field(min_length=1, description="Conversation so far")
    format: str | dict[str, Any] | None = Field(
        default=None,
        description="'json' or a JSON schema the final answer must follow",
    )
    keep_alive: StrictInt | StrictStr | None = Field(
        default=None,
        description="-1 to keep the model loaded, 0 to unload, or e.g. '5m', '2hr'",
    )
    use_tools: bool = Field(
        default=True, description="Whether to advertise and run the registered tools"
    )
    options: dict[str, Any] | None = Field(
        default=None, description="Model parameters such as temperature"
    )

    model_config = ConfigDict(
        json_schema_extra={
            "examples": [
                {
                    "model": "llama3.2:latest",
                    "messages": [{"role": "user", "content": "What is 17 * 23?"}],
                    "keep_alive": "5m",
                    "use_tools": True,
                },
            ]
        }
    )

    @field_validator("format")
    @classmethod
    def _check_format(cls, value: Any) -> Any:
        if value is not None:
            FormatType.parse(value)
        return value

    @field_validator("keep_alive")
    @classmethod
    def _check_keep_alive(cls, value: Any) -> Any:
        if value is not None:
            KeepAlive.parse(value)
        return value

    def format_directive(self) -> FormatType | None:
        return None if self.format is None else FormatType.parse(self.format)

    def keep_alive_directive(self) -> KeepAlive | None:
        return None if self.keep_alive is None else KeepAlive.parse(self.keep_alive)


class ExecutedToolCallResponse(BaseModel):
    """A tool call that ran while producing the response."""

    name: str
    arguments: Any = None
    result: str
    error: bool = False

    model_config = ConfigDict(from_attributes=True)


class ChatResponse(BaseModel):
    """Response body for POST /api/v1/chat."""

    model: str = Field(description="Model that generated the answer")
    message: ChatMessage = Field(description="The final assistant message")
    tool_calls_executed: list[ExecutedToolCallResponse] = Field(
        default_factory=list,
        description="Tools that were executed while producing the answer",
    )
    rounds: int = Field(default=1, description="Number of requests sent to Ollama")
