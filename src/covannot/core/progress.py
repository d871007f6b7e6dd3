"""User-facing status feedback for CLI runs.

Usage::

    from covannot.core.progress import spinner, status

    with spinner("Scanning sources"):
        do_work()  # structlog console output suppressed during this block

    status("All annotations consistent", style="success")  # ✓ ...
    status("3 inconsistencies", style="error")  # ✗ ...
"""

from __future__ import annotations

import sys
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from typing import TYPE_CHECKING

from rich.console import Console

if TYPE_CHECKING:
    from structlog.stdlib import BoundLogger

_console = Console(stderr=True)

_STYLES = {
    "success": "[green]✓[/green] ",
    "error": "[red]✗[/red] ",
    "warning": "[yellow]![/yellow] ",
    "info": "  ",
    "none": "",
}

# Suppresses structlog console output while a spinner is live
_suppress_console_logs = threading.local()


def is_console_suppressed() -> bool:
    return getattr(_suppress_console_logs, "active", False)


@contextmanager
def suppress_console_logs() -> Iterator[None]:
    """Pause console log output; file handlers still receive records."""
    _suppress_console_logs.active = True
    try:
        yield
    finally:
        _suppress_console_logs.active = False


def _get_logger() -> BoundLogger:
    """Get logger lazily to respect runtime config."""
    from covannot.core.logging import get_logger

    return get_logger("progress")


def _is_tty() -> bool:
    return hasattr(sys.stderr, "isatty") and sys.stderr.isatty()


def status(message: str, *, style: str = "info") -> None:
    """Print a styled status message to stderr."""
    prefix = _STYLES.get(style, "")
    _console.print(f"{prefix}{message}", highlight=False)

    _get_logger().debug("status", message=message, style=style)


def pluralize(count: int, singular: str, plural: str | None = None) -> str:
    """Return "1 file" / "3 files" style counts."""
    if plural is None:
        plural = singular + "s"
    word = singular if count == 1 else plural
    return f"{count} {word}"


@contextmanager
def spinner(message: str) -> Iterator[None]:
    """Show a spinner on a TTY; print nothing otherwise.

    Console logging is suppressed while the spinner is live so log lines do
    not collide with the display.
    """
    if _is_tty():
        with (
            suppress_console_logs(),
            _console.status(f"[cyan]{message}[/cyan]", spinner="dots"),
        ):
            yield
    else:
        _get_logger().debug("spinner", message=message)
        yield
