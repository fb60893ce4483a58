"""Request directives: response format and keep-alive.

Both are immutable values consulted once when a request is built. ``to_wire``
returns exactly what Ollama expects in the ``format`` and ``keep_alive``
request fields; ``parse`` accepts those same wire forms back.
"""

import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Literal

from ollama_toolkit.tools.schema import project_schema, rename_definitions

_DURATION_PATTERN = re.compile(r"^(\d+)(s|m|hr)$")


@dataclass(frozen=True)
class JsonStructure:
    """A JSON schema the model's answer must conform to.

    Requires Ollama 0.5.0 or newer.
    """

    schema: dict[str, Any]

    @classmethod
    def new(cls, shape: Any) -> "JsonStructure":
        """Project a parameter shape into an inlined draft-07 schema."""
        return cls(schema=project_schema(shape))

    @classmethod
    def from_schema(cls, schema: Mapping[str, Any]) -> "JsonStructure":
        """Wrap an existing schema as-is.

        Ollama does not resolve ``$ref``; use ``JsonStructure.new`` (or
        ``inline_schema``) when the schema contains references.
        """
        return cls(schema=dict(schema))

    def to_wire(self) -> dict[str, Any]:
        return rename_definitions(self.schema)


@dataclass(frozen=True)
class FormatType:
    """How the model's final answer must be shaped.

    ``FormatType.json()`` asks for any JSON; ``FormatType.structured(Model)``
    asks for JSON matching ``Model``'s schema.
    """

    structure: JsonStructure | None = None

    @classmethod
    def json(cls) -> "FormatType":
        return cls()

    @classmethod
    def structured(cls, shape: Any) -> "FormatType":
        return cls(structure=JsonStructure.new(shape))

    @classmethod
    def from_schema(cls, schema: Mapping[str, Any]) -> "FormatType":
        return cls(structure=JsonStructure.from_schema(schema))

    @classmethod
    def parse(cls, value: Any) -> "FormatType":
        """Build a FormatType from its wire form (``"json"`` or a schema object).

        Raises:
            ValueError: If the value is neither.
        """
        if value == "json":
            return cls.json()
        if isinstance(value, Mapping):
            return cls.from_schema(value)
        raise ValueError(f"Invalid format: expected 'json' or a schema, got {value!r}")

    @property
    def is_structured(self) -> bool:
        return self.structure is not None

    def to_wire(self) -> str | dict[str, Any]:
        if self.structure is None:
            return "json"
        return self.structure.to_wire()


class TimeUnit(str, Enum):
    """Units accepted in a keep-alive duration; values are the wire symbols."""

    SECONDS = "s"
    MINUTES = "m"
    HOURS = "hr"

    @property
    def symbol(self) -> str:
        return self.value


@dataclass(frozen=True)
class KeepAlive:
    """How long the model stays loaded after a request.

    Ollama unloads models after five minutes of inactivity by default.

    Wire forms:
        indefinitely          -> -1
        unload_on_completion  -> 0
        until(5, MINUTES)     -> "5m"
    """

    kind: Literal["indefinitely", "unload_on_completion", "until"]
    time: int = 0
    unit: TimeUnit | None = field(default=None)

    def __post_init__(self) -> None:
        if self.kind == "until":
            if isinstance(self.time, bool) or not isinstance(self.time, int):
                raise TypeError(f"Keep-alive time must be an int, got {self.time!r}")
            if self.time < 0:
                raise ValueError(f"Keep-alive time must not be negative, got {self.time}")
            if not isinstance(self.unit, TimeUnit):
                raise TypeError(f"Keep-alive unit must be a TimeUnit, got {self.unit!r}")

    @classmethod
    def indefinitely(cls) -> "KeepAlive":
        return cls(kind="indefinitely")

    @classmethod
    def unload_on_completion(cls) -> "KeepAlive":
        return cls(kind="unload_on_completion")

    @classmethod
    def until(cls, time: int, unit: TimeUnit) -> "KeepAlive":
        return cls(kind="until", time=time, unit=unit)

    @classmethod
    def parse(cls, value: int | str) -> "KeepAlive":
        """Build a KeepAlive from its wire form.

        Accepts ``-1``, ``0`` (as ints or strings) and ``"<n>s"``,
        ``"<n>m"``, ``"<n>hr"``.

        Raises:
            ValueError: For any other value.
        """
        if isinstance(value, bool) or not isinstance(value, (int, str)):
            raise ValueError(f"Invalid keep_alive value: {value!r}")
        if value in (-1, "-1"):
            return cls.indefinitely()
        if value in (0, "0"):
            return cls.unload_on_completion()
        if isinstance(value, str):
            match = _DURATION_PATTERN.match(value)
            if match:
                return cls.until(int(match.group(1)), TimeUnit(match.group(2)))
        raise ValueError(f"Invalid keep_alive value: {value!r}")

    def to_wire(self) -> int | str:
        if self.kind == "indefinitely":
            return -1
        if self.kind == "unload_on_completion":
            return 0
        if self.unit is None:
            raise ValueError("Keep-alive duration has no unit")
        return f"{self.time}{self.unit.symbol}"
