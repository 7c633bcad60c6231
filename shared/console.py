"""
elfdeps Console Interface
==========================

Rich-powered console abstraction providing the presentation layer for
elfdeps: section headers, severity-coloured messages and tables, with
consistent styling.

Regular output goes to stdout; warnings and errors go to stderr so that
piping the dependency list stays clean.

References:
    - Rich library: https://github.com/Textualize/rich
"""

from __future__ import annotations

from typing import Any, Sequence

from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.theme import Theme

_DEPS_THEME = Theme(
    {
        "deps.section": "bold bright_magenta",
        "deps.success": "bold green",
        "deps.warning": "bold yellow",
        "deps.error": "bold red",
        "deps.info": "bold bright_blue",
        "deps.dim": "dim white",
        "deps.highlight": "bold bright_white",
    }
)


class DepsConsole:
    """Unified console interface for elfdeps output.

    Usage::

        con = DepsConsole()
        con.section("Dependencies")
        con.info("Resolved 3 libraries")
    """

    def __init__(self, *, no_color: bool = False) -> None:
        """Initialise the console.

        Args:
            no_color: Disable colour and styling.
        """
        self._console = Console(
            theme=_DEPS_THEME,
            highlight=False,
            no_color=no_color,
        )
        self._err_console = Console(
            theme=_DEPS_THEME,
            stderr=True,
            highlight=False,
            no_color=no_color,
        )

    # ------------------------------------------------------------------ #
    #  Section header
    # ------------------------------------------------------------------ #

    def section(self, title: str) -> None:
        """Print a prominent section header."""
        self._console.rule(
            f"  {escape(title)}  ",
            style="deps.section",
            characters="─",
        )

    # ------------------------------------------------------------------ #
    #  Message helpers (severity-coloured)
    # ------------------------------------------------------------------ #

    def info(self, message: str) -> None:
        """Print an informational message."""
        self._console.print(
            f"[deps.info][ℹ] INFO:[/deps.info] {escape(message)}",
            soft_wrap=True,
        )

    def warning(self, message: str) -> None:
        """Print a warning message to stderr."""
        self._err_console.print(
            f"[deps.warning][⚠] WARNING:[/deps.warning] {escape(message)}",
            soft_wrap=True,
        )

    def error(self, message: str) -> None:
        """Print an error message to stderr."""
        self._err_console.print(
            f"[deps.error][✘] ERROR:[/deps.error] {escape(message)}",
            soft_wrap=True,
        )

    # ------------------------------------------------------------------ #
    #  Table display
    # ------------------------------------------------------------------ #

    def table(
        self,
        title: str,
        columns: Sequence[str],
        rows: Sequence[Sequence[Any]],
        *,
        caption: str | None = None,
        styles: Sequence[str] | None = None,
    ) -> None:
        """Render a styled Rich table.

        Args:
            title:    Table title.
            columns:  Column header labels.
            rows:     Iterable of row tuples; each element is stringified.
            caption:  Optional footer caption.
            styles:   Optional per-column Rich style strings.
        """
        tbl = Table(
            title=title,
            caption=caption,
            border_style="bright_cyan",
            header_style="bold bright_magenta",
            padding=(0, 1),
        )
        for idx, col_name in enumerate(columns):
            style = styles[idx] if styles and idx < len(styles) else ""
            tbl.add_column(col_name, style=style)

        for row in rows:
            tbl.add_row(*(escape(str(cell)) for cell in row))

        self._console.print(tbl)

    # ------------------------------------------------------------------ #
    #  Utility
    # ------------------------------------------------------------------ #

    def out(self, text: str) -> None:
        """Write *text* verbatim (no markup, no wrapping) to stdout."""
        self._console.out(text, highlight=False)

