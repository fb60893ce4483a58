"""Health check response model."""

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Response model for the health check endpoint.

    Attributes:
        status: Health status indicator ("ok" or "error").
        version: The version of ollama-toolkit.
        ollama_connected: Whether Ollama answered the connectivity check.
        ollama_host: The Ollama host URL.
        tool_count: Number of tools the server advertises.
    """

    status: str = Field(..., description="Health status of the service")
    version: str = Field(..., description="Version of ollama-toolkit")
    ollama_connected: bool | None = Field(
        default=None,
        description="Whether Ollama is connected",
    )
    ollama_host: str | None = Field(
        default=None,
        description="Ollama host URL",
    )
    tool_count: int = Field(default=0, description="Number of registered tools")
