"""Shared CLI utilities for code-excerpt.

This module contains exit codes, console singleton, and helper functions
used by the CLI commands.
"""

import logging
import os
import sys
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler

# Exit codes following Unix conventions
EXIT_ERROR: int = 1  # General error (file not found, fetch failed, etc.)
EXIT_CONFIG_ERROR: int = 2  # Configuration/usage error

# TTY detection for Rich markup
# When stdout is piped, Rich automatically strips ANSI codes
_is_tty = sys.stdout.isatty()

# Rich console for output
console = Console(force_terminal=_is_tty, no_color=not _is_tty)

# Separate console for diagnostics so piped excerpts stay clean
err_console = Console(stderr=True)


def _error(message: str) -> None:
    """Display error message with red styling.

    Args:
        message: Error message to display.

    """
    err_console.print(f"[red]Error:[/red] {message}")


def _setup_logging(verbose: bool, quiet: bool) -> None:
    """Configure logging based on verbosity flags.

    Args:
        verbose: If True, set DEBUG level.
        quiet: If True, set ERROR level.

    Note:
        verbose and quiet are mutually exclusive. If both are True,
        verbose takes precedence.

        CODE_EXCERPT_LOG_LEVEL env var can override the level.

    """
    env_level = os.environ.get("CODE_EXCERPT_LOG_LEVEL", "").upper()
    if env_level in ("DEBUG", "INFO", "WARNING", "ERROR"):
        level = getattr(logging, env_level)
    elif verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.ERROR
    else:
        level = logging.WARNING

    # Clear any existing handlers to avoid duplicates
    logging.root.handlers.clear()

    # Create handler with explicit level (basicConfig doesn't set handler level)
    handler = RichHandler(console=err_console, rich_tracebacks=True, show_path=False)
    handler.setLevel(level)

    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[handler],
    )

    # Suppress HTTP client loggers (security: request URLs may carry tokens)
    for logger_name in ("httpx", "httpcore"):
        logging.getLogger(logger_name).setLevel(logging.WARNING)


def _read_local_file(path: str) -> str:
    """Read a local document.

    Args:
        path: Path to the file.

    Returns:
        File text decoded as UTF-8 (undecodable bytes replaced).

    Raises:
        typer.Exit: If the file doesn't exist or can't be read.

    """
    file_path = Path(path)

    if not file_path.is_file():
        _error(f"File not found: {path}")
        raise typer.Exit(code=EXIT_ERROR)

    try:
        return file_path.read_text(encoding="utf-8", errors="replace")
    except OSError as e:
        _error(f"Cannot read {path}: {e}")
        raise typer.Exit(code=EXIT_ERROR) from e
