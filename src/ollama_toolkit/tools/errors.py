"""Exceptions raised while advertising and dispatching tools.

Dispatch failures are raised as ToolCallError subclasses so callers can tell
"no such tool" apart from "the tool rejected its arguments" and "the tool
itself failed". Schema projection problems are programming errors and use
SchemaProjectionError instead.
"""


class ToolCallError(Exception):
    """Base class for all tool dispatch failures.

    Attributes:
        tool_name: Name from the incoming tool call that failed.
    """

    def __init__(self, tool_name: str, message: str) -> None:
        super().__init__(message)
        self.tool_name = tool_name


class UnknownToolNameError(ToolCallError):
    """No registered tool matches the requested name."""

    def __init__(self, tool_name: str) -> None:
        super().__init__(tool_name, f"Unknown tool name: {tool_name!r}")


class ArgumentDecodeError(ToolCallError):
    """The arguments could not be decoded into the matched tool's parameters."""

    def __init__(self, tool_name: str, cause: Exception) -> None:
        super().__init__(
            tool_name, f"Invalid arguments for tool {tool_name!r}: {cause}"
        )
        self.original_exc = cause
        self.__cause__ = cause


class ToolExecutionError(ToolCallError):
    """The matched tool raised while running, or its result could not be encoded."""

    def __init__(self, tool_name: str, cause: Exception) -> None:
        super().__init__(tool_name, f"Tool {tool_name!r} failed: {cause}")
        self.original_exc = cause
        self.__cause__ = cause


class SchemaProjectionError(TypeError):
    """A parameter shape produced a schema that cannot be sent to Ollama."""
