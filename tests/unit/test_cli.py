"""Unit tests for the command-line entry point."""

from unittest.mock import patch

import pytest

from ollama_toolkit.__main__ import build_parser, main, settings_from_args


def test_cli_arguments_override_settings():
    """Test that CLI flags end up in the settings."""
    args = build_parser().parse_args(
        [
            "--host",
            "0.0.0.0",
            "--port",
            "9001",
            "--ollama-host",
            "http://gpu-box:11434",
            "--keep-alive",
            "30s",
            "--no-builtin-tools",
            "--log-level",
            "DEBUG",
        ]
    )

    settings = settings_from_args(args)

    assert settings.host == "0.0.0.0"
    assert settings.port == 9001
    assert settings.ollama_host == "http://gpu-box:11434"
    assert settings.default_keep_alive == "30s"
    assert settings.enable_builtin_tools is False
    assert settings.log_level == "DEBUG"


def test_cli_rejects_invalid_log_level():
    """Test argparse validation of the log level."""
    with pytest.raises(SystemExit):
        build_parser().parse_args(["--log-level", "LOUD"])


def test_main_starts_uvicorn():
    """Test that main() builds the app and hands it to uvicorn."""
    with (
        patch("sys.argv", ["ollama-toolkit", "--port", "9002"]),
        patch("ollama_toolkit.__main__.uvicorn.run") as mock_run,
    ):
        main()

    mock_run.assert_called_once()
    assert mock_run.call_args.kwargs["port"] == 9002
