"""
Dynamic String Table Resolution
================================

Turns ``DT_NEEDED`` (and ``DT_SONAME``/``DT_RPATH``/``DT_RUNPATH``) values,
which are byte indices into the dynamic string table, into text.  Each
string runs from its index up to the next NUL byte, which must lie inside
the table.
"""

from __future__ import annotations

from typing import Optional

from shared.logger import DepsLogger

from elfdeps.core.errors import InvalidEncodingError, OutOfBoundsError
from elfdeps.core.models import DynamicEntry, DynamicSectionSummary
from elfdeps.parsers._binary import checked_slice

_log = DepsLogger("strtab")


def string_table(
    data: bytes,
    summary: DynamicSectionSummary,
    offset: Optional[int] = None,
) -> bytes:
    """Return the string table bytes.

    Args:
        data: The raw image.
        summary: Decoded dynamic section.
        offset: File offset of the table; defaults to the ``DT_STRTAB``
            value itself.

    Raises:
        OutOfBoundsError: The table does not fit in *data*.
    """
    start = summary.string_table_offset.value if offset is None else offset
    return bytes(checked_slice(data, "string table", start, summary.string_table_size.value))


def read_string(table: bytes, index: int) -> str:
    """Read the NUL-terminated UTF-8 string starting at *index*.

    Raises:
        OutOfBoundsError: *index* is past the table, or no NUL follows it.
        InvalidEncodingError: The bytes are not valid UTF-8.
    """
    if index >= len(table):
        raise OutOfBoundsError("string table index", index, index + 1, len(table))
    end = table.find(b"\x00", index)
    if end == -1:
        raise OutOfBoundsError("unterminated string", index, len(table) + 1, len(table))
    try:
        return table[index:end].decode("utf-8")
    except UnicodeDecodeError as exc:
        raise InvalidEncodingError(
            f"string at index {index:#x} is not valid UTF-8: {exc.reason}"
        ) from exc


def resolve_library_names(
    data: bytes,
    summary: DynamicSectionSummary,
    offset: Optional[int] = None,
) -> list[str]:
    """Resolve every ``DT_NEEDED`` entry, preserving declaration order."""
    table = string_table(data, summary, offset)
    names = [read_string(table, entry.value) for entry in summary.needed]
    _log.debug("Resolved %d library names", len(names))
    return names


def resolve_optional_string(
    data: bytes,
    summary: DynamicSectionSummary,
    entry: Optional[DynamicEntry],
    offset: Optional[int] = None,
) -> Optional[str]:
    """Resolve a single optional string-valued entry (e.g. ``DT_SONAME``)."""
    if entry is None:
        return None
    return read_string(string_table(data, summary, offset), entry.value)
