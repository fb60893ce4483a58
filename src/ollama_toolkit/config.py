"""Configuration module for ollama-toolkit using pydantic-settings."""

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ollama_toolkit.generation import KeepAlive


class ToolkitSettings(BaseSettings):
    """Main configuration settings for ollama-toolkit.

    All settings can be overridden via environment variables with the
    OLLAMA_TOOLKIT_ prefix. For example, OLLAMA_TOOLKIT_OLLAMA_HOST will
    override the ollama_host setting.
    """

    # Server
    host: str = "127.0.0.1"
    port: int = 8000

    # Ollama
    ollama_host: str = "http://localhost:11434"

    # Requests: wire form of the keep_alive field ("5m", -1, 0, ...)
    default_keep_alive: int | str | None = None

    # Tools
    max_tool_rounds: int = Field(default=8, ge=1)
    enable_builtin_tools: bool = True

    # CORS
    cors_origins: list[str] = Field(default_factory=lambda: ["*"])

    # Logging
    log_level: str = "INFO"

    model_config = SettingsConfigDict(env_prefix="OLLAMA_TOOLKIT_")

    @field_validator("default_keep_alive")
    @classmethod
    def _check_keep_alive(cls, value: int | str | None) -> int | str | None:
        if value is not None:
            KeepAlive.parse(value)
        return value

    @property
    def keep_alive(self) -> KeepAlive | None:
        """The default keep-alive directive, if one is configured."""
        if self.default_keep_alive is None:
            return None
        return KeepAlive.parse(self.default_keep_alive)
