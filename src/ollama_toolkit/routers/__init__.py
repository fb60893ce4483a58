"""FastAPI routers for API endpoints.

Each router module defines endpoints for a specific resource: health,
tools and chat.
"""

from ollama_toolkit.routers import chat, health, tools

__all__ = ["chat", "health", "tools"]
