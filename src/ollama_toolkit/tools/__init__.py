"""Tool advertisement, composition and dispatch.

This package turns typed Python callables into tools Ollama can call:
descriptors with inlined parameter schemas, composable tool groups, and
name-based dispatch with typed failures.
"""

from ollama_toolkit.tools.base import FunctionTool, Tool, tool
from ollama_toolkit.tools.builtin import Calculator, CurrentTime, builtin_tools
from ollama_toolkit.tools.errors import (
    ArgumentDecodeError,
    SchemaProjectionError,
    ToolCallError,
    ToolExecutionError,
    UnknownToolNameError,
)
from ollama_toolkit.tools.registry import (
    EmptyToolGroup,
    SingleToolGroup,
    ToolChain,
    ToolGroup,
    as_group,
    compose,
)
from ollama_toolkit.tools.schema import inline_schema, project_schema, rename_definitions
from ollama_toolkit.tools.types import ToolCall, ToolCallFunction, ToolFunctionInfo, ToolInfo

__all__ = [
    "ArgumentDecodeError",
    "Calculator",
    "CurrentTime",
    "EmptyToolGroup",
    "FunctionTool",
    "SchemaProjectionError",
    "SingleToolGroup",
    "Tool",
    "ToolCall",
    "ToolCallError",
    "ToolCallFunction",
    "ToolChain",
    "ToolExecutionError",
    "ToolFunctionInfo",
    "ToolGroup",
    "ToolInfo",
    "UnknownToolNameError",
    "as_group",
    "builtin_tools",
    "compose",
    "inline_schema",
    "project_schema",
    "rename_definitions",
    "tool",
]
