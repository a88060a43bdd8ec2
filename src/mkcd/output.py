"""Rich terminal output layer.

Reporter renders leveled messages, lists and tables on stderr and owns
the interactive prompts. When it is not interactive (quiet mode or no
terminal) every prompt returns its default without reading input, so
nothing upstream can block waiting for an answer that cannot arrive.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from rich import box
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.prompt import Confirm, Prompt
from rich.table import Table

# level -> (icon, plain label, Rich style)
_LEVEL_STYLES: dict[str, tuple[str, str, str]] = {
    "success": ("✓", "SUCCESS", "bold green"),
    "info": ("ℹ", "INFO", "cyan"),
    "warning": ("⚠", "WARNING", "bold yellow"),
    "error": ("✗", "ERROR", "bold red"),
    "debug": ("•", "DEBUG", "dim"),
}


def make_console(colors: bool = True) -> Console:
    """Console for user-facing output; stdout is reserved for the shell hand-off."""
    return Console(stderr=True, no_color=not colors, highlight=False, soft_wrap=True)


def configure_logging(console: Console, *, quiet: bool = False, verbose: bool = False, debug: bool = False) -> None:
    """Route the mkcd logger through a RichHandler on console."""
    if debug:
        level = logging.DEBUG
    elif verbose:
        level = logging.INFO
    elif quiet:
        level = logging.ERROR
    else:
        level = logging.WARNING

    logger = logging.getLogger("mkcd")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    handler = RichHandler(console=console, show_time=False, show_path=debug, markup=False)
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
    logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = False


class Reporter:
    """Leveled output plus confirm/select/input prompts.

    Args:
        console: Rich console to write to (stderr console by default).
        quiet: Suppress everything except errors; prompts use defaults.
        verbose: Show verbose messages.
        debug: Show debug messages.
        interactive: Whether prompts may read input.
        icons: Prefix messages with glyphs instead of plain labels.
    """

    def __init__(
        self,
        console: Console | None = None,
        *,
        quiet: bool = False,
        verbose: bool = False,
        debug: bool = False,
        interactive: bool = True,
        icons: bool = True,
    ) -> None:
        self.console = console or make_console()
        self.quiet = quiet
        self.verbose_mode = verbose
        self.debug_mode = debug
        self.interactive = interactive and not quiet
        self.icons = icons

    def _emit(self, level: str, message: str) -> None:
        icon, label, style = _LEVEL_STYLES[level]
        prefix = icon if self.icons else label
        self.console.print(f"[{style}]{prefix}[/{style}] {escape(message)}")

    def success(self, message: str) -> None:
        if not self.quiet:
            self._emit("success", message)

    def info(self, message: str) -> None:
        if not self.quiet:
            self._emit("info", message)

    def warning(self, message: str) -> None:
        if not self.quiet:
            self._emit("warning", message)

    def error(self, message: str) -> None:
        # Errors are shown even in quiet mode
        self._emit("error", message)

    def debug(self, message: str) -> None:
        if self.debug_mode and not self.quiet:
            self._emit("debug", message)

    def verbose(self, message: str) -> None:
        if (self.verbose_mode or self.debug_mode) and not self.quiet:
            self.console.print(f"[dim]{escape(message)}[/dim]")

    def header(self, title: str) -> None:
        if not self.quiet:
            self.console.print()
            self.console.rule(f"[bold]{escape(title)}[/bold]")

    def section(self, title: str) -> None:
        if not self.quiet:
            self.console.print()
            self.console.print(f"[bold underline]{escape(title)}[/bold underline]")

    def bullet_list(self, items: Sequence[str]) -> None:
        if self.quiet:
            return
        for item in items:
            self.console.print(f"  • {escape(item)}")

    def table(self, headers: Sequence[str], rows: Sequence[Sequence[str]]) -> None:
        if self.quiet:
            return
        table = Table(box=box.SIMPLE, padding=(0, 2))
        for header in headers:
            table.add_column(header, style="bold" if header == headers[0] else None)
        for row in rows:
            table.add_row(*(escape(cell) for cell in row))
        self.console.print(table)

    def confirm(self, question: str, default: bool = False) -> bool:
        if not self.interactive:
            return default
        return Confirm.ask(question, default=default, console=self.console)

    def select(self, question: str, options: Sequence[str]) -> str:
        """Choose one of options; the first option is the default.

        Raises:
            ValueError: If options is empty.
        """
        if not options:
            raise ValueError(f"no options available for: {question}")
        if not self.interactive:
            return options[0]
        return Prompt.ask(question, choices=list(options), default=options[0], console=self.console)

    def ask(self, question: str, default: str = "") -> str:
        if not self.interactive:
            return default
        return Prompt.ask(question, default=default, console=self.console, show_default=bool(default))
