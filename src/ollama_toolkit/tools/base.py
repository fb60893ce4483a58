"""The Tool abstraction and the @tool decorator.

A tool pairs a fixed name and description with a parameter shape and an async
``call``. The parameter shape is any type pydantic can both describe and
validate, so the schema advertised to the model and the decoder used on the
model's arguments always agree.

Example:
    >>> class WeatherParams(BaseModel):
    ...     city: str = Field(description="City to look up")
    ...
    >>> class GetWeather(Tool):
    ...     name = "get_weather"
    ...     description = "Get the current weather for a city"
    ...     Params = WeatherParams
    ...
    ...     async def call(self, params: WeatherParams) -> str:
    ...         return f"Sunny in {params.city}"
"""

import inspect
from abc import ABC, abstractmethod
from functools import lru_cache
from typing import Any, Awaitable, Callable, get_type_hints

from pydantic import TypeAdapter

from ollama_toolkit.tools.types import ToolInfo


@lru_cache(maxsize=None)
def params_adapter(shape: Any) -> TypeAdapter:
    """Return the (cached) TypeAdapter used to validate a parameter shape."""
    return TypeAdapter(shape)


class Tool(ABC):
    """Base class for a callable capability the model can invoke.

    Subclasses set ``name``, ``description`` and ``Params`` and implement
    ``call``. Returning normally yields the result sent back to the model;
    raising makes the dispatch fail with ToolExecutionError. If the model
    should see and handle a failure, return it as a string instead.
    """

    name: str
    description: str
    Params: Any

    @abstractmethod
    async def call(self, params: Any) -> Any:
        """Run the tool with already validated parameters."""
        ...

    def info(self) -> ToolInfo:
        """Build the descriptor advertised to the model."""
        return ToolInfo.new(self.name, self.description, self.Params)

    def decode_params(self, arguments: Any) -> Any:
        """Validate raw call arguments into an instance of ``Params``.

        Raises:
            pydantic.ValidationError: If the arguments do not fit the shape.
        """
        return params_adapter(self.Params).validate_python(arguments)

    def __or__(self, other: Any) -> Any:
        from ollama_toolkit.tools.registry import ToolChain

        return ToolChain(self, other)

    def __ror__(self, other: Any) -> Any:
        from ollama_toolkit.tools.registry import ToolChain

        return ToolChain(other, self)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name!r})"


class FunctionTool(Tool):
    """A Tool backed by a plain function taking a single parameter object."""

    def __init__(
        self,
        fn: Callable[[Any], Any | Awaitable[Any]],
        *,
        name: str | None = None,
        description: str | None = None,
        params: Any = None,
    ) -> None:
        self.fn = fn
        self.name = name or fn.__name__
        self.description = description or inspect.getdoc(fn) or ""
        self.Params = params if params is not None else _single_param_type(fn)

    async def call(self, params: Any) -> Any:
        result = self.fn(params)
        if inspect.isawaitable(result):
            result = await result
        return result


def tool(
    fn: Callable[[Any], Any] | None = None,
    *,
    name: str | None = None,
    description: str | None = None,
) -> Any:
    """Turn a function into a FunctionTool.

    The function must take exactly one argument annotated with its parameter
    shape. Usable bare (``@tool``) or with overrides
    (``@tool(name="get_time")``).
    """

    def wrap(func: Callable[[Any], Any]) -> FunctionTool:
        return FunctionTool(func, name=name, description=description)

    if fn is not None:
        return wrap(fn)
    return wrap


def _single_param_type(fn: Callable[..., Any]) -> Any:
    parameters = list(inspect.signature(fn).parameters.values())
    if len(parameters) != 1:
        raise TypeError(
            f"Tool function {fn.__name__!r} must take exactly one parameter, "
            f"got {len(parameters)}"
        )
    hints = get_type_hints(fn)
    if parameters[0].name not in hints:
        raise TypeError(
            f"Tool function {fn.__name__!r} must annotate its parameter "
            "with a parameter shape"
        )
    return hints[parameters[0].name]
