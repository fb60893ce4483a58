"""Per-request generation directives and payload types."""

from ollama_toolkit.generation.images import Image
from ollama_toolkit.generation.parameters import (
    FormatType,
    JsonStructure,
    KeepAlive,
    TimeUnit,
)

__all__ = ["FormatType", "Image", "JsonStructure", "KeepAlive", "TimeUnit"]
