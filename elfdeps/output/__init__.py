"""elfdeps output: console presentation of dependency reports."""

from elfdeps.output.console import DepsConsoleOutput

__all__ = ["DepsConsoleOutput"]
