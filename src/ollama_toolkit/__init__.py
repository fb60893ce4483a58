"""ollama-toolkit: typed tool calling and request directives for Ollama.

This package lets callers register typed tools, advertise them to an Ollama
model, dispatch the model's tool calls by name, and shape requests with
response-format and keep-alive directives. A small FastAPI app exposes the
same features over HTTP.
"""

from ollama_toolkit.app import create_app

__version__ = "0.1.0"

__all__ = ["create_app", "__version__"]
