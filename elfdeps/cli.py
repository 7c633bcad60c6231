"""
elfdeps CLI -- ELF64 Dependency Lister
=======================================

Click-based command-line interface.  Reads one ELF64 little-endian file
and lists the shared libraries it declares as ``DT_NEEDED``, in
declaration order.

Usage::

    # Table output
    elfdeps /usr/bin/ls

    # One name per line, for scripts
    elfdeps /usr/bin/ls --plain

    # Full report as JSON
    elfdeps /usr/lib/libfoo.so --json

Exit status:
    0  dependencies listed (possibly none)
    1  the file could not be read or is not a valid ELF64 LE object
    3  the object is well-formed but has no dynamic-linking information

References:
    - Click documentation: https://click.palletsprojects.com/
"""

from __future__ import annotations

import sys

import click

from shared.config import DepsConfig
from shared.console import DepsConsole
from shared.logger import setup_logging

from elfdeps import __version__
from elfdeps.core.engine import DependencyEngine
from elfdeps.core.errors import ElfDepsError
from elfdeps.output.console import DepsConsoleOutput

EXIT_OK: int = 0
EXIT_FAILURE: int = 1
EXIT_NOT_DYNAMIC: int = 3


@click.command("elfdeps")
@click.argument("path", type=click.Path(dir_okay=False))
@click.option(
    "--config", "-c",
    "config_path",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="TOML configuration file.  Default: config.toml in the project root.",
)
@click.option(
    "--format", "-f",
    "output_format",
    type=click.Choice(["table", "plain", "json"], case_sensitive=False),
    default=None,
    help="Output format.  Default: resolver.output_format from the config.",
)
@click.option(
    "--json", "json_output",
    is_flag=True,
    default=False,
    help="Shorthand for --format json.",
)
@click.option(
    "--plain", "plain_output",
    is_flag=True,
    default=False,
    help="Shorthand for --format plain.",
)
@click.option(
    "--details", "-d",
    is_flag=True,
    default=False,
    help="Also show SONAME, RPATH, RUNPATH and the interpreter.",
)
@click.option(
    "--translate-addresses", "-t",
    is_flag=True,
    default=False,
    help="Treat DT_STRTAB as a virtual address and map it through PT_LOAD.",
)
@click.option(
    "--verbose", "-v",
    is_flag=True,
    default=False,
    help="Enable debug logging on stderr.",
)
@click.option(
    "--no-color",
    is_flag=True,
    default=False,
    help="Disable coloured output.",
)
@click.version_option(__version__, prog_name="elfdeps")
def elfdeps_cli(
    path: str,
    config_path: str | None,
    output_format: str | None,
    json_output: bool,
    plain_output: bool,
    details: bool,
    translate_addresses: bool,
    verbose: bool,
    no_color: bool,
) -> None:
    """List the shared libraries an ELF64 object depends on.

    PATH is the executable or shared object to inspect.
    """
    console = DepsConsole(no_color=no_color)

    if json_output and plain_output:
        console.error("Cannot use --json and --plain together.")
        sys.exit(EXIT_FAILURE)
    if json_output:
        output_format = "json"
    elif plain_output:
        output_format = "plain"

    try:
        config = DepsConfig.load(config_path)
    except (OSError, ValueError) as exc:
        console.error(f"Cannot load configuration: {exc}")
        sys.exit(EXIT_FAILURE)

    settings = config.global_settings
    logger = setup_logging(
        log_level="DEBUG" if verbose or settings.debug else settings.log_level,
        log_file=settings.log_file,
        json_logs=settings.log_json,
    )

    if translate_addresses:
        config.resolver.translate_addresses = True
    output_format = (output_format or config.resolver.output_format).lower()
    details = details or config.resolver.include_details
    # Optional fields are only resolved when they will be shown.
    config.resolver.include_details = output_format == "json" or (
        output_format == "table" and details
    )

    engine = DependencyEngine(config=config, logger=logger)
    try:
        report = engine.inspect(path)
    except ElfDepsError as exc:
        console.error(f"{path}: {exc}")
        logger.debug("Resolution failed: %s", type(exc).__name__)
        sys.exit(EXIT_FAILURE)

    output = DepsConsoleOutput(console=console)
    if output_format == "json":
        output.display_json(report)
    elif output_format == "plain":
        if not report.is_dynamic:
            console.warning(f"{path}: not a dynamic executable")
        output.display_plain(report)
    else:
        output.display(report, details=details)

    sys.exit(EXIT_OK if report.is_dynamic else EXIT_NOT_DYNAMIC)


def main() -> None:
    """Entry point for the ``elfdeps`` console script."""
    elfdeps_cli()


if __name__ == "__main__":
    main()
