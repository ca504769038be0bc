"""User-facing status feedback for CLI operations.

Usage::

    from mockwright.core.progress import status

    status("Generating mock for: Widget")
    status("Wrote mocks/register.go", style="success")  # ✓ Wrote ...
    status("Error parsing file: ...", style="error")    # ✗ Error ...

Everything goes to stderr so ``--print`` output on stdout stays clean.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog
from rich.console import Console
from rich.markup import escape

if TYPE_CHECKING:
    from structlog.stdlib import BoundLogger

# Console for output
_console = Console(stderr=True)

# Style prefixes
_STYLES = {
    "success": "[green]✓[/green] ",
    "error": "[red]✗[/red] ",
    "warning": "[yellow]![/yellow] ",
    "info": "  ",
    "none": "",
}


def _get_logger() -> BoundLogger:
    """Get logger lazily to respect runtime config."""
    from mockwright.core.logging import get_logger

    return get_logger("progress")


def status(message: str, *, style: str = "info", indent: int = 0) -> None:
    """Print a styled status message to stderr."""
    prefix = _STYLES.get(style, "")
    padding = " " * indent
    _console.print(f"{padding}{prefix}{escape(message)}", highlight=False)

    # structlog's unconfigured default prints to stdout
    if structlog.is_configured():
        _get_logger().debug("status", message=message, style=style)


def pluralize(count: int, singular: str, plural: str | None = None) -> str:
    """Return grammatically correct singular/plural form.

    Returns:
        Formatted string like "1 mock" or "3 mocks"
    """
    if plural is None:
        plural = singular + "s"
    word = singular if count == 1 else plural
    return f"{count} {word}"
