"""User-facing progress feedback for CLI runs.

Everything here writes to stderr so that rendered output on stdout stays
clean for pipes and redirects.

Usage::

    from apidiff.core.progress import status, task

    status("3 symbols added", style="warning")

    with task("Extracting public API"):
        do_work()
    # Prints: ✓ Extracting public API (3.2s)
"""

from __future__ import annotations

import time
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

_quiet = False


def set_quiet(quiet: bool) -> None:
    """Silence status output (used when stderr carries structured logs only)."""
    global _quiet
    _quiet = quiet


def _get_logger() -> BoundLogger:
    """Get logger lazily to respect runtime config."""
    from apidiff.core.logging import get_logger

    return get_logger("progress")


def status(message: str, *, style: str = "info", indent: int = 0) -> None:
    """Print a styled status message to stderr."""
    if not _quiet:
        prefix = _STYLES.get(style, "")
        padding = " " * indent
        _console.print(f"{padding}{prefix}{message}", highlight=False)

    _get_logger().debug("status", message=message, style=style)


def pluralize(count: int, singular: str, plural: str | None = None) -> str:
    """Return "1 symbol" / "3 symbols" style counts."""
    if plural is None:
        plural = singular + "s"
    word = singular if count == 1 else plural
    return f"{count} {word}"


@contextmanager
def task(name: str) -> Iterator[None]:
    """Context manager for a named task with timing."""
    log = _get_logger()
    log.debug("task_start", task=name)
    status(f"{name}...", style="none")
    start = time.perf_counter()

    try:
        yield
    except Exception as e:
        elapsed = time.perf_counter() - start
        status(f"{name} failed", style="error")
        log.debug("task_failed", task=name, elapsed_s=elapsed, error=str(e))
        raise
    elapsed = time.perf_counter() - start
    status(f"{name} ({elapsed:.1f}s)", style="success")
    log.debug("task_done", task=name, elapsed_s=elapsed)
