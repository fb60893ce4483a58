"""Composable tool groups and name-based dispatch.

A ToolGroup advertises the descriptors of the tools it holds and routes an
incoming tool call to the tool whose name matches. Groups compose in order:
``compose(a, b, c)`` (or ``a | b | c``) tries ``a`` first, then ``b``, then
``c``. Only UnknownToolNameError moves dispatch on to the next group; any other
failure from a group whose tool matched the name ends dispatch.

The registry does not serialize concurrent calls. Callers that may receive
several tool calls per turn must await them one at a time or make sure each
tool instance is only used by one task. The HTTP app shares one lock across
requests for this (see ``create_app``).
"""

import logging
from abc import ABC, abstractmethod
from typing import Any

from pydantic import ValidationError
from pydantic_core import PydanticSerializationError, to_json

from ollama_toolkit.tools.base import Tool
from ollama_toolkit.tools.errors import (
    ArgumentDecodeError,
    ToolExecutionError,
    UnknownToolNameError,
)
from ollama_toolkit.tools.types import ToolCall, ToolInfo

logger = logging.getLogger(__name__)


class ToolGroup(ABC):
    """A collection of tools that can be advertised and dispatched to."""

    @abstractmethod
    def tool_info(self, out: list[ToolInfo]) -> None:
        """Append the descriptor of every held tool to ``out``, in order."""
        ...

    @abstractmethod
    async def call(self, tool_call: ToolCall) -> str:
        """Dispatch a tool call and return the JSON-encoded result.

        Raises:
            UnknownToolNameError: No held tool has the requested name.
            ArgumentDecodeError: The matched tool rejected the arguments.
            ToolExecutionError: The matched tool raised while running.
        """
        ...

    @abstractmethod
    def names(self) -> list[str]:
        """Names of the held tools, in dispatch order."""
        ...

    def descriptors(self) -> list[ToolInfo]:
        """Return a fresh list of all held descriptors."""
        out: list[ToolInfo] = []
        self.tool_info(out)
        return out

    def __or__(self, other: "ToolGroup | Tool") -> "ToolChain":
        return ToolChain(self, other)

    def __ror__(self, other: "ToolGroup | Tool") -> "ToolChain":
        return ToolChain(other, self)


class EmptyToolGroup(ToolGroup):
    """The group holding no tools. Every call is an unknown tool."""

    def tool_info(self, out: list[ToolInfo]) -> None:
        return None

    async def call(self, tool_call: ToolCall) -> str:
        raise UnknownToolNameError(tool_call.function.name)

    def names(self) -> list[str]:
        return []


class SingleToolGroup(ToolGroup):
    """A group wrapping exactly one Tool."""

    def __init__(self, tool: Tool) -> None:
        self.tool = tool

    def tool_info(self, out: list[ToolInfo]) -> None:
        out.append(self.tool.info())

    def names(self) -> list[str]:
        return [self.tool.name]

    async def call(self, tool_call: ToolCall) -> str:
        name = tool_call.function.name
        if name != self.tool.name:
            raise UnknownToolNameError(name)

        logger.debug(f"Dispatching tool call to {name!r}")

        try:
            params = self.tool.decode_params(tool_call.function.arguments)
        except ValidationError as exc:
            logger.warning(f"Rejected arguments for tool {name!r}: {exc}")
            raise ArgumentDecodeError(name, exc) from exc

        try:
            result = await self.tool.call(params)
        except Exception as exc:
            logger.warning(f"Tool {name!r} raised {exc.__class__.__name__}: {exc}")
            raise ToolExecutionError(name, exc) from exc

        try:
            return to_json(result).decode()
        except PydanticSerializationError as exc:
            logger.warning(f"Could not encode result of tool {name!r}: {exc}")
            raise ToolExecutionError(name, exc) from exc

    def __repr__(self) -> str:
        return f"SingleToolGroup({self.tool!r})"


class ToolChain(ToolGroup):
    """Ordered composition of groups; the first group matching the name wins."""

    def __init__(self, *groups: ToolGroup | Tool) -> None:
        self.groups: tuple[ToolGroup, ...] = tuple(as_group(g) for g in groups)

        seen: set[str] = set()
        for name in self.names():
            if name in seen:
                logger.warning(
                    f"Tool name {name!r} registered more than once; "
                    "the first registration wins"
                )
            seen.add(name)

    def tool_info(self, out: list[ToolInfo]) -> None:
        for group in self.groups:
            group.tool_info(out)

    def names(self) -> list[str]:
        return [name for group in self.groups for name in group.names()]

    async def call(self, tool_call: ToolCall) -> str:
        for group in self.groups:
            try:
                return await group.call(tool_call)
            except UnknownToolNameError:
                continue
        logger.debug(f"No tool named {tool_call.function.name!r}")
        raise UnknownToolNameError(tool_call.function.name)

    def __repr__(self) -> str:
        return f"ToolChain{self.groups!r}"


def as_group(item: Any) -> ToolGroup:
    """Coerce a Tool or ToolGroup into a ToolGroup."""
    if isinstance(item, ToolGroup):
        return item
    if isinstance(item, Tool):
        return SingleToolGroup(item)
    raise TypeError(f"Expected a Tool or ToolGroup, got {type(item).__name__}")


def compose(*items: ToolGroup | Tool) -> ToolGroup:
    """Compose tools and groups into one group, earlier items taking precedence.

    ``compose()`` returns the empty group.
    """
    if not items:
        return EmptyToolGroup()
    return ToolChain(*items)
