"""Dependency injection providers for FastAPI endpoints.

This module provides FastAPI dependency functions that are used across
multiple routers to inject common dependencies like settings, the Ollama
client and the tool registry.
"""

import asyncio
from functools import lru_cache

from fastapi import HTTPException, Request

from ollama_toolkit.config import ToolkitSettings
from ollama_toolkit.ollama import OllamaClient
from ollama_toolkit.tools import ToolGroup


@lru_cache
def get_settings() -> ToolkitSettings:
    """Get the application settings instance.

    This function is cached so that the same settings instance is reused
    across all requests. Settings are loaded from environment variables
    with the OLLAMA_TOOLKIT_ prefix.

    Returns:
        ToolkitSettings: The application configuration settings.
    """
    return ToolkitSettings()


def get_ollama_client(request: Request) -> OllamaClient:
    """Get the Ollama client from app state.

    Raises:
        HTTPException: If the Ollama client is not initialized (503 Service Unavailable).
    """
    if not hasattr(request.app.state, "ollama_client"):
        raise HTTPException(
            status_code=503,
            detail="Ollama client not initialized",
        )
    return request.app.state.ollama_client


def get_tool_registry(request: Request) -> ToolGroup:
    """Get the tool registry the app was created with.

    The registry is created once in create_app() and shared by every
    request; tools holding state see all calls made through the server.
    """
    return request.app.state.tool_registry


def get_app_settings(request: Request) -> ToolkitSettings:
    """Get the settings stored on the app (which tests may override)."""
    return request.app.state.settings


def get_tool_lock(request: Request) -> asyncio.Lock:
    """Get the lock held while a tool call is dispatched.

    Tools may keep mutable state, so calls arriving from concurrent requests
    are run one at a time.
    """
    return request.app.state.tool_lock
