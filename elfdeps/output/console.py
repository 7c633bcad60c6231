"""
elfdeps Console Output
=======================

Rich-powered terminal display for :class:`DependencyReport` values: a
numbered dependency table, an optional details table (SONAME, RPATH,
RUNPATH, interpreter) and a plain one-name-per-line mode for scripting.
"""

from __future__ import annotations

import json

from shared.console import DepsConsole

from elfdeps.core.models import DependencyReport, DependencyStatus

_STATUS_MESSAGES: dict[DependencyStatus, str] = {
    DependencyStatus.STATIC: "not a dynamic executable (no PT_DYNAMIC segment)",
    DependencyStatus.NO_PROGRAM_HEADERS: "no program headers; dependencies cannot be resolved",
}


def _format_size(size: int) -> str:
    """Format a byte count with a binary unit suffix."""
    value = float(size)
    for unit in ("B", "KiB", "MiB"):
        if value < 1024.0:
            return f"{value:.0f} {unit}" if unit == "B" else f"{value:.1f} {unit}"
        value /= 1024.0
    return f"{value:.1f} GiB"


class DepsConsoleOutput:
    """Render dependency reports to the terminal.

    Usage::

        output = DepsConsoleOutput(console=DepsConsole())
        output.display(report, details=True)
    """

    def __init__(self, console: DepsConsole | None = None) -> None:
        self._con = console or DepsConsole()

    def display(self, report: DependencyReport, *, details: bool = False) -> None:
        """Show *report* as Rich tables."""
        title = report.path or "<buffer>"
        self._con.section(f"{title} ({_format_size(report.size)})")

        if not report.is_dynamic:
            self._con.warning(_STATUS_MESSAGES[report.status])
        elif report.needed:
            self._con.table(
                "Needed libraries",
                ["#", "Library"],
                [(idx, name) for idx, name in enumerate(report.needed, start=1)],
                styles=["dim", "deps.highlight"],
            )
        else:
            self._con.info("No DT_NEEDED entries")

        if details:
            self._display_details(report)

    def _display_details(self, report: DependencyReport) -> None:
        rows = [
            (label, value)
            for label, value in (
                ("SONAME", report.soname),
                ("RPATH", report.rpath),
                ("RUNPATH", report.runpath),
                ("Interpreter", report.interpreter),
            )
            if value is not None
        ]
        if rows:
            self._con.table("Dynamic details", ["Field", "Value"], rows, styles=["dim", ""])

    def display_plain(self, report: DependencyReport) -> None:
        """One library name per line, nothing else."""
        for name in report.needed:
            self._con.out(name)

    def display_json(self, report: DependencyReport) -> None:
        """The whole report as indented JSON."""
        self._con.out(json.dumps(report.model_dump(mode="json"), indent=2))
