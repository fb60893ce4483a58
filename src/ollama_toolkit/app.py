"""FastAPI application factory and lifespan management.

This module contains the create_app() factory function that creates and
configures the FastAPI application instance, including lifespan management
for startup/shutdown and router registration.
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from ollama_toolkit.config import ToolkitSettings
from ollama_toolkit.ollama import OllamaClient
from ollama_toolkit.routers import chat, health, tools
from ollama_toolkit.tools import ToolGroup, Tool, builtin_tools, compose

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Lifespan context manager for FastAPI application.

    The Ollama client is created once at startup and stored in app.state
    for reuse across all requests.

    Args:
        app: The FastAPI application instance.

    Yields:
        None: Control is yielded while the app is running.
    """
    settings: ToolkitSettings = app.state.settings
    app.state.ollama_client = OllamaClient(
        host=settings.ollama_host,
        default_keep_alive=settings.keep_alive,
    )
    logger.info(f"Initialized Ollama client with host: {settings.ollama_host}")

    connected = await app.state.ollama_client.check_connection()
    if connected:
        logger.info("Successfully connected to Ollama")
    else:
        logger.warning("Could not connect to Ollama - check if server is running")

    yield

    if hasattr(app.state, "ollama_client"):
        await app.state.ollama_client.close()
        logger.info("Ollama client closed")


def create_app(
    settings: ToolkitSettings | None = None,
    registry: ToolGroup | Tool | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Tool calls from all requests share one lock, so no two calls run inside
    the registered tools at the same time.

    Args:
        settings: Optional ToolkitSettings instance. If not provided,
                  settings will be loaded from environment variables.
        registry: Optional tools to serve. They take precedence over the
                  built-in tools, which are appended when
                  ``enable_builtin_tools`` is set.

    Returns:
        FastAPI: Configured FastAPI application instance.
    """
    from ollama_toolkit import __version__

    if settings is None:
        from ollama_toolkit.dependencies import get_settings

        settings = get_settings()

    app = FastAPI(
        title="ollama-toolkit",
        description="Typed tool calling and request directives for Ollama",
        version=__version__,
        lifespan=lifespan,
    )

    app.state.settings = settings

    groups: list[ToolGroup | Tool] = []
    if registry is not None:
        groups.append(registry)
    if settings.enable_builtin_tools:
        groups.extend(builtin_tools())
    app.state.tool_registry = compose(*groups)
    app.state.tool_lock = asyncio.Lock()
    logger.info(f"Registered tools: {app.state.tool_registry.names()}")

    # Note: FastAPI's type hints for add_middleware are overly strict
    app.add_middleware(
        CORSMiddleware,  # type: ignore[arg-type]
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(health.router)
    app.include_router(tools.router)
    app.include_router(chat.router)

    return app
