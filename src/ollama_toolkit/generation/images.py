"""Opaque image payloads attached to chat messages."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Image:
    """A base64-encoded image, passed to Ollama untouched."""

    data: str

    @classmethod
    def from_base64(cls, data: str) -> "Image":
        return cls(data=data)

    def to_base64(self) -> str:
        return self.data
