"""
elfdeps Resolution Engine
==========================

Orchestrates the dependency resolution pipeline over one immutable byte
buffer.

Pipeline:
    1. Validate the ELF identification (64-bit, little-endian)
    2. Locate the program header table
    3. Find the PT_DYNAMIC segment
    4. Decode the dynamic section (DT_STRTAB, DT_STRSZ, DT_NEEDED, ...)
    5. Resolve string table indices into library names

Stages are pure functions of the buffer and the previous stage's output;
the only I/O is :meth:`DependencyEngine.read_image`, performed once before
the pipeline starts.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from shared.config import DepsConfig
from shared.logger import DepsLogger

from elfdeps.core.errors import (
    IoFailureError,
    MissingDynamicSegmentError,
    NoProgramHeadersError,
)
from elfdeps.core.models import (
    DependencyReport,
    DependencyStatus,
    DynamicSectionSummary,
    FileHeaderMeta,
)
from elfdeps.parsers.dynamic import decode_dynamic_section
from elfdeps.parsers.header import locate_program_headers, validate_header
from elfdeps.parsers.segments import (
    find_dynamic_segment,
    find_interpreter,
    load_segments,
    translate_address,
)
from elfdeps.parsers.strtab import resolve_library_names, resolve_optional_string


def _program_headers(data: bytes) -> FileHeaderMeta:
    validate_header(data)
    meta = locate_program_headers(data)
    if meta is None:
        raise NoProgramHeadersError("object has no program header table")
    return meta


def _dynamic_summary(data: bytes, meta: FileHeaderMeta) -> DynamicSectionSummary:
    return decode_dynamic_section(data, find_dynamic_segment(data, meta))


def resolve_dependencies(raw_bytes: bytes | bytearray | memoryview) -> list[str]:
    """Return the ``DT_NEEDED`` library names of an ELF64 little-endian object.

    Names come back in the order the dynamic section declares them.

    Raises:
        NotElfError, UnsupportedFormatError, TruncatedHeaderError,
        NoProgramHeadersError, MissingDynamicSegmentError,
        MissingStringTableError, MissingStringTableSizeError,
        OutOfBoundsError, InvalidEncodingError
    """
    data = bytes(raw_bytes)
    meta = _program_headers(data)
    return resolve_library_names(data, _dynamic_summary(data, meta))


def inspect_image(
    raw_bytes: bytes | bytearray | memoryview,
    *,
    path: str = "",
    translate_addresses: bool = False,
    include_details: bool = False,
) -> DependencyReport:
    """Build a :class:`DependencyReport` for an in-memory image.

    Unlike :func:`resolve_dependencies`, objects without dynamic-linking
    information produce a report with a non-dynamic ``status`` instead of
    an exception.  Malformed objects still raise.

    Args:
        raw_bytes: Complete file contents.
        path: Recorded in the report.
        translate_addresses: Map ``DT_STRTAB`` through the ``PT_LOAD``
            segment that contains it.
        include_details: Also resolve SONAME, RPATH, RUNPATH and the
            interpreter.
    """
    data = bytes(raw_bytes)
    base = {"path": path, "size": len(data)}

    try:
        meta = _program_headers(data)
    except NoProgramHeadersError:
        return DependencyReport(status=DependencyStatus.NO_PROGRAM_HEADERS, **base)

    try:
        summary = _dynamic_summary(data, meta)
    except MissingDynamicSegmentError:
        summary = None

    interpreter = find_interpreter(data, meta) if include_details else None
    if summary is None:
        return DependencyReport(
            status=DependencyStatus.STATIC, interpreter=interpreter, **base
        )

    offset: Optional[int] = None
    if translate_addresses:
        offset = translate_address(
            load_segments(data, meta), summary.string_table_offset.value
        )

    details: dict[str, Optional[str]] = {}
    if include_details:
        details = {
            name: resolve_optional_string(data, summary, getattr(summary, name), offset)
            for name in ("soname", "rpath", "runpath")
        }

    return DependencyReport(
        status=DependencyStatus.DYNAMIC,
        needed=resolve_library_names(data, summary, offset),
        interpreter=interpreter,
        **details,
        **base,
    )


class DependencyEngine:
    """File-level front end to the resolution pipeline.

    Usage::

        engine = DependencyEngine()
        names = engine.resolve("/usr/bin/ls")
        report = engine.inspect("/usr/lib/libfoo.so")
    """

    def __init__(
        self,
        config: DepsConfig | None = None,
        logger: DepsLogger | None = None,
    ) -> None:
        """Initialise the engine.

        Args:
            config: elfdeps configuration.  Defaults are used if not provided.
            logger: Logger instance.  A new one is created if not provided.
        """
        self._config: DepsConfig = config or DepsConfig()
        self._logger: DepsLogger = logger or DepsLogger("engine")

    @property
    def config(self) -> DepsConfig:
        return self._config

    def read_image(self, path: str | Path) -> bytes:
        """Read the complete file at *path*.

        Raises:
            IoFailureError: The file is missing, unreadable, not a regular
                file or larger than ``resolver.max_file_size``.
        """
        file_path = Path(path)
        max_size = self._config.resolver.max_file_size
        try:
            size = file_path.stat().st_size
            if size > max_size:
                raise IoFailureError(
                    f"{file_path}: file too large ({size:,} bytes, max {max_size:,})"
                )
            data = file_path.read_bytes()
        except OSError as exc:
            raise IoFailureError(f"{file_path}: {exc.strerror or exc}") from exc
        self._logger.debug("Read %d bytes from %s", len(data), file_path)
        return data

    def resolve(self, path: str | Path) -> list[str]:
        """Read *path* and return its ``DT_NEEDED`` library names."""
        data = self.read_image(path)
        with self._logger.operation("resolve"):
            names = resolve_dependencies(data)
            self._logger.info("%s: %d needed libraries", path, len(names))
        return names

    def inspect(self, path: str | Path) -> DependencyReport:
        """Read *path* and build a full :class:`DependencyReport`."""
        data = self.read_image(path)
        resolver = self._config.resolver
        with self._logger.operation("inspect"), self._logger.timed(f"inspect {path}"):
            report = inspect_image(
                data,
                path=str(path),
                translate_addresses=resolver.translate_addresses,
                include_details=resolver.include_details,
            )
        self._logger.info(
            "%s: status=%s, %d needed libraries",
            path, report.status.value, len(report.needed),
        )
        return report
