"""CLI entry point for ollama-toolkit.

Starts the HTTP server. It can be invoked as `ollama-toolkit` (via the script
entry point) or `python -m ollama_toolkit`.
"""

import argparse
import sys

import uvicorn

from ollama_toolkit import __version__, create_app
from ollama_toolkit.config import ToolkitSettings


def build_parser() -> argparse.ArgumentParser:
    """Build the command-line argument parser."""
    parser = argparse.ArgumentParser(
        prog="ollama-toolkit",
        description="Typed tool calling and request directives for Ollama",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"ollama-toolkit {__version__}",
    )

    parser.add_argument(
        "--host",
        type=str,
        default=None,
        help="Host to bind the server to (default: 127.0.0.1, can be set via OLLAMA_TOOLKIT_HOST)",
    )

    parser.add_argument(
        "--port",
        type=int,
        default=None,
        help="Port to bind the server to (default: 8000, can be set via OLLAMA_TOOLKIT_PORT)",
    )

    parser.add_argument(
        "--ollama-host",
        type=str,
        default=None,
        help="Ollama server URL (default: http://localhost:11434, can be set via OLLAMA_TOOLKIT_OLLAMA_HOST)",
    )

    parser.add_argument(
        "--keep-alive",
        type=str,
        default=None,
        help="Default keep_alive sent with each request: -1, 0, or e.g. 5m, 30s, 2hr",
    )

    parser.add_argument(
        "--no-builtin-tools",
        action="store_true",
        help="Do not register the built-in calculator and clock tools",
    )

    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging level (default: INFO, can be set via OLLAMA_TOOLKIT_LOG_LEVEL)",
    )

    return parser


def settings_from_args(args: argparse.Namespace) -> ToolkitSettings:
    """Build settings where CLI arguments override environment variables."""
    settings_kwargs: dict = {}
    if args.host is not None:
        settings_kwargs["host"] = args.host
    if args.port is not None:
        settings_kwargs["port"] = args.port
    if args.ollama_host is not None:
        settings_kwargs["ollama_host"] = args.ollama_host
    if args.keep_alive is not None:
        settings_kwargs["default_keep_alive"] = args.keep_alive
    if args.no_builtin_tools:
        settings_kwargs["enable_builtin_tools"] = False
    if args.log_level is not None:
        settings_kwargs["log_level"] = args.log_level

    return ToolkitSettings(**settings_kwargs)


def main() -> None:
    """Main entry point for the ollama-toolkit CLI."""
    args = build_parser().parse_args()
    settings = settings_from_args(args)

    app = create_app(settings=settings)

    uvicorn.run(
        app,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    sys.exit(main())
