"""JSON schema projection for tool parameters and structured output.

Ollama cannot dereference ``$ref`` pointers inside a schema and expects shared
sub-schemas under ``$defs`` rather than the draft-07 ``definitions`` key. This
module turns the schema pydantic generates for a parameter shape into a
self-contained draft-07 document that satisfies both constraints.

Pydantic emits JSON Schema 2020-12. Tuple positions (``prefixItems``) are
rewritten to the draft-07 array form of ``items``, with any trailing item
schema moved to ``additionalItems``. Other keywords are passed through as
generated.
"""

import logging
from collections.abc import Mapping
from typing import Any

from pydantic import TypeAdapter

from ollama_toolkit.tools.errors import SchemaProjectionError

logger = logging.getLogger(__name__)

DRAFT_07 = "http://json-schema.org/draft-07/schema#"

DEFS_KEY = "$defs"
DEFINITIONS_KEY = "definitions"

# Keywords kept when a recursive reference is cut short
_STUB_KEYWORDS = ("type", "title", "description")


def project_schema(shape: Any) -> dict[str, Any]:
    """Build the Ollama-ready schema for a parameter shape.

    Args:
        shape: Any type pydantic can describe: a BaseModel subclass, a
               dataclass or a TypedDict.

    Returns:
        A draft-07 schema with every reference inlined and shared
        definitions (if any) under ``$defs``.
    """
    return inline_schema(TypeAdapter(shape).json_schema())


def inline_schema(schema: Mapping[str, Any]) -> dict[str, Any]:
    """Inline all local references of an existing schema document.

    Args:
        schema: A schema whose root is a mapping. Definitions may live under
                either ``$defs`` or ``definitions``.

    Returns:
        A new schema with no ``$ref`` nodes. The input is not modified.

    Raises:
        SchemaProjectionError: If the root is not a mapping, or a reference
            points outside the local definitions.
    """
    root = _require_mapping(schema)
    definitions: dict[str, Any] = {}
    for key in (DEFINITIONS_KEY, DEFS_KEY):
        if key in root:
            definitions.update(_require_mapping(root.pop(key), key))

    inliner = _Inliner(definitions, root)
    body = inliner.expand(root, ("#",))

    projected: dict[str, Any] = {"$schema": body.pop("$schema", DRAFT_07)}
    projected.update(body)
    if definitions:
        projected[DEFS_KEY] = {
            name: inliner.expand(definition, (name,))
            for name, definition in definitions.items()
        }
    return projected


def rename_definitions(schema: Mapping[str, Any]) -> dict[str, Any]:
    """Move a ``definitions`` container to ``$defs`` without inlining.

    Raises:
        SchemaProjectionError: If the root is not a mapping.
    """
    root = _require_mapping(schema)
    if DEFINITIONS_KEY in root:
        merged = dict(root.get(DEFS_KEY) or {})
        merged.update(root.pop(DEFINITIONS_KEY))
        root[DEFS_KEY] = merged
    return root


def _require_mapping(value: Any, where: str = "root") -> dict[str, Any]:
    if not isinstance(value, Mapping):
        raise SchemaProjectionError(
            f"Schema {where} must be an object, got {type(value).__name__}"
        )
    return dict(value)


def _draft07_arrays(node: dict[str, Any]) -> dict[str, Any]:
    if not isinstance(node.get("prefixItems"), list):
        return node
    rest = node.pop("items", None)
    node["items"] = node.pop("prefixItems")
    if rest is not None:
        node["additionalItems"] = rest
    return node


class _Inliner:
    """Substitutes each ``$ref`` node with a fresh copy of its target."""

    def __init__(self, definitions: dict[str, Any], root: dict[str, Any]) -> None:
        self.definitions = definitions
        self.root = root

    def expand(self, node: Any, stack: tuple[str, ...]) -> Any:
        if isinstance(node, Mapping):
            if isinstance(node.get("$ref"), str):
                return self._resolve(node, stack)
            return _draft07_arrays(
                {key: self.expand(value, stack) for key, value in node.items()}
            )
        if isinstance(node, list):
            return [self.expand(item, stack) for item in node]
        return node

    def _resolve(self, node: Mapping[str, Any], stack: tuple[str, ...]) -> dict:
        name = self._target_name(node["$ref"])
        target = self.root if name == "#" else self.definitions[name]

        if name in stack:
            logger.debug(f"Cutting recursive schema reference to {name!r}")
            resolved = {k: target[k] for k in _STUB_KEYWORDS if k in target}
        else:
            resolved = self.expand(target, stack + (name,))

        siblings = {k: v for k, v in node.items() if k != "$ref"}
        resolved.update(self.expand(siblings, stack))
        return resolved

    def _target_name(self, ref: str) -> str:
        if ref == "#":
            return "#"
        for key in (DEFS_KEY, DEFINITIONS_KEY):
            prefix = f"#/{key}/"
            if ref.startswith(prefix):
                name = ref[len(prefix) :].replace("~1", "/").replace("~0", "~")
                if name in self.definitions:
                    return name
        raise SchemaProjectionError(f"Cannot inline schema reference {ref!r}")
