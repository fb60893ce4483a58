"""Wire types for tool advertisement and tool-call requests.

These pydantic models mirror the JSON Ollama exchanges for tools:

    {"type": "function", "function": {"name", "description", "parameters"}}
    {"function": {"name", "arguments"}}
"""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from ollama_toolkit.tools.schema import project_schema


class ToolFunctionInfo(BaseModel):
    """Name, description and parameter schema of an advertised tool."""

    name: str = Field(..., description="Tool name the model uses to call it")
    description: str = Field(..., description="What the tool does")
    parameters: dict[str, Any] = Field(
        ..., description="Inlined JSON schema of the tool's arguments"
    )

    model_config = ConfigDict(frozen=True)


class ToolInfo(BaseModel):
    """Descriptor advertising one tool to the model.

    Build it with ``ToolInfo.new`` from a parameter shape, or with
    ``ToolInfo.from_schema`` when a schema document is already at hand.
    """

    type: Literal["function"] = "function"
    function: ToolFunctionInfo

    model_config = ConfigDict(frozen=True)

    @classmethod
    def new(cls, name: str, description: str, params: Any) -> "ToolInfo":
        """Create a descriptor whose parameters are projected from ``params``.

        Args:
            name: Tool name.
            description: Tool description shown to the model.
            params: The parameter shape (BaseModel subclass, dataclass, TypedDict).

        Returns:
            ToolInfo: Descriptor with an inlined draft-07 parameter schema.
        """
        return cls.from_schema(name, description, project_schema(params))

    @classmethod
    def from_schema(
        cls, name: str, description: str, schema: dict[str, Any]
    ) -> "ToolInfo":
        """Create a descriptor from a pre-built schema, used verbatim."""
        return cls(
            function=ToolFunctionInfo(
                name=name, description=description, parameters=schema
            )
        )

    @property
    def name(self) -> str:
        return self.function.name

    @property
    def description(self) -> str:
        return self.function.description

    @property
    def parameters(self) -> dict[str, Any]:
        return self.function.parameters


class ToolCallFunction(BaseModel):
    """Name and raw arguments of a tool call requested by the model."""

    name: str
    arguments: Any = Field(default_factory=dict)


class ToolCall(BaseModel):
    """A single tool call emitted by the model."""

    function: ToolCallFunction

    @classmethod
    def from_ollama(cls, raw: Any) -> "ToolCall":
        """Build a ToolCall from an ollama response object or plain dict."""
        if hasattr(raw, "model_dump"):
            raw = raw.model_dump()
        return cls.model_validate(raw)

    @property
    def name(self) -> str:
        return self.function.name
