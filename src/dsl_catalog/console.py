# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""User-facing console output and logging setup for the CLI."""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass, field

from rich.console import Console
from rich.logging import RichHandler
from rich.rule import Rule
from rich.text import Text


def detect_tty() -> bool:
    """Return ``True`` when stdout appears to be backed by a terminal."""

    try:
        return sys.stdout.isatty()
    except (AttributeError, ValueError):
        return False


def emoji(symbol: str, enable: bool) -> str:
    """Return ``symbol`` when emoji output is enabled, otherwise blank."""

    return symbol if enable else ""


@dataclass(slots=True)
class CLIConsole:
    """Rich console wrapper honouring colour and emoji preferences."""

    use_emoji: bool = True
    use_color: bool = field(default_factory=detect_tty)
    console: Console = field(init=False)

    def __post_init__(self) -> None:
        self.console = Console(no_color=not self.use_color, emoji=self.use_emoji, highlight=False)

    def _print_line(self, msg: str, *, style: str | None) -> None:
        text = Text(msg)
        if style and self.use_color:
            text.stylize(style)
        self.console.print(text)

    def section(self, title: str) -> None:
        """Render a section header to delineate console output blocks."""

        if self.use_color:
            self.console.print()
            self.console.print(Rule(title))
        else:
            self.console.print(f"\n--- {title} ---")

    def info(self, msg: str) -> None:
        """Emit an informational message."""

        self._print_line(f"{emoji('ℹ️ ', self.use_emoji)}{msg}", style="cyan")

    def ok(self, msg: str) -> None:
        """Emit a success message."""

        self._print_line(f"{emoji('✅ ', self.use_emoji)}{msg}", style="green")

    def warn(self, msg: str) -> None:
        """Emit a warning message."""

        self._print_line(f"{emoji('⚠️ ', self.use_emoji)}{msg}", style="yellow")

    def fail(self, msg: str) -> None:
        """Emit an error message."""

        self._print_line(f"{emoji('❌ ', self.use_emoji)}{msg}", style="bold red")


def configure_logging(*, debug: bool = False, console: Console | None = None) -> None:
    """Route ``dsl_catalog`` library logging through a Rich handler.

    Args:
        debug: Emit debug records when ``True``; warnings and above otherwise.
        console: Optional console receiving the log records.
    """

    logger = logging.getLogger("dsl_catalog")
    logger.handlers.clear()
    handler = RichHandler(console=console, show_path=False, markup=False, rich_tracebacks=False)
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if debug else logging.WARNING)


__all__ = ["CLIConsole", "configure_logging", "detect_tty", "emoji"]
