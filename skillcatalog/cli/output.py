"""Line-oriented diagnostics for CLI commands.

Every message starts with a stable prefix so CI logs can be grepped:
``❌`` errors, ``⚠️`` warnings, ``✅`` success.
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

ERROR_PREFIX = "❌ "
WARNING_PREFIX = "⚠️  "
SUCCESS_PREFIX = "✅ "
REMOVED_PREFIX = "🗑️  "
RULE = "=" * 43


def make_console(stderr: bool = False) -> Console:
    # soft_wrap keeps each diagnostic on one physical line
    return Console(stderr=stderr, highlight=False, emoji=False, soft_wrap=True)


class Diagnostics:
    """Prints user-facing messages for one command run."""

    def __init__(self, console: Optional[Console] = None, err_console: Optional[Console] = None):
        self.console = console or make_console()
        self.err_console = err_console or make_console(stderr=True)

    def log(self, message: str = "") -> None:
        self.console.print(escape(message))

    def banner(self, title: str) -> None:
        self.log()
        self.log(title)
        self.log(RULE)
        self.log()

    def success(self, message: str) -> None:
        self.console.print(f"[green]{SUCCESS_PREFIX}{escape(message)}[/green]")

    def removed(self, message: str) -> None:
        self.console.print(f"{REMOVED_PREFIX}{escape(message)}")

    def warn(self, message: str) -> None:
        self.err_console.print(f"[yellow]{WARNING_PREFIX}{escape(message)}[/yellow]")

    def error(self, message: str) -> None:
        self.err_console.print(f"[red]{ERROR_PREFIX}{escape(message)}[/red]")

    def warnings(self, messages: Iterable[str]) -> None:
        for message in messages:
            self.warn(message)

    def errors(self, messages: Iterable[str]) -> None:
        for message in messages:
            self.error(message)

    def summary(self, processed: int, changes: int, errors: int, warnings: int) -> None:
        self.log(RULE)
        self.log(
            f"Summary: {processed} skill(s) processed, {changes} change(s), "
            f"{errors} error(s), {warnings} warning(s)"
        )
        self.log()


def setup_logging(verbosity: int) -> None:
    """Route package logs to stderr through rich when ``-v`` is given."""
    logger = logging.getLogger("skillcatalog")
    for handler in list(logger.handlers):
        if isinstance(handler, RichHandler):
            logger.removeHandler(handler)

    if verbosity <= 0:
        logger.setLevel(logging.WARNING)
        return

    handler = RichHandler(
        console=make_console(stderr=True),
        show_time=False,
        show_path=False,
        rich_tracebacks=True,
    )
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if verbosity > 1 else logging.INFO)
