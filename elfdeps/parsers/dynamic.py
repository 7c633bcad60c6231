"""
ELF64 Dynamic Section Decoding
===============================

Splits the ``PT_DYNAMIC`` segment into 16-byte Elf64_Dyn elements and
summarises the ones needed to resolve dependency names: the string table
location (``DT_STRTAB``) and size (``DT_STRSZ``), every ``DT_NEEDED``
reference in declaration order, and the first ``DT_SONAME``, ``DT_RPATH``
and ``DT_RUNPATH`` entries.

Elf64_Dyn layout::

    +0x00  d_tag  u64 (read unsigned; negative tags land in OTHER)
    +0x08  d_val  u64

References:
    - System V Application Binary Interface, Edition 4.1, "Dynamic Section".
"""

from __future__ import annotations

from typing import Iterator, Optional

from shared.logger import DepsLogger

from elfdeps.core.errors import MissingStringTableError, MissingStringTableSizeError
from elfdeps.core.models import (
    DynamicEntry,
    DynamicSectionSummary,
    DynamicTag,
    ProgramHeaderEntry,
)
from elfdeps.parsers._binary import checked_slice, read_u64

DYN_ENTRY_SIZE: int = 16

_log = DepsLogger("dynamic")


def iter_dynamic_entries(data: bytes, segment: ProgramHeaderEntry) -> Iterator[DynamicEntry]:
    """Decode each complete 16-byte element of the dynamic segment.

    The walk covers the whole segment; ``DT_NULL`` does not end it.  A
    trailing partial element is ignored.

    Raises:
        OutOfBoundsError: The segment does not fit in *data*.
    """
    section = checked_slice(data, "dynamic section", segment.file_offset, segment.file_size)
    for base in range(0, len(section) - DYN_ENTRY_SIZE + 1, DYN_ENTRY_SIZE):
        raw_tag = read_u64(section, base, "d_tag")
        yield DynamicEntry(
            tag=DynamicTag.from_raw(raw_tag),
            raw_tag=raw_tag,
            value=read_u64(section, base + 8, "d_val"),
        )


def decode_dynamic_section(data: bytes, segment: ProgramHeaderEntry) -> DynamicSectionSummary:
    """Summarise the dynamic section.

    Raises:
        OutOfBoundsError: The segment does not fit in *data*.
        MissingStringTableError: No ``DT_STRTAB`` entry.
        MissingStringTableSizeError: No ``DT_STRSZ`` entry.
    """
    firsts: dict[DynamicTag, DynamicEntry] = {}
    needed: list[DynamicEntry] = []
    count = 0

    for entry in iter_dynamic_entries(data, segment):
        count += 1
        if entry.tag is DynamicTag.NEEDED:
            needed.append(entry)
        elif entry.tag is not DynamicTag.OTHER:
            firsts.setdefault(entry.tag, entry)

    strtab: Optional[DynamicEntry] = firsts.get(DynamicTag.STRING_TABLE_OFFSET)
    if strtab is None:
        raise MissingStringTableError("dynamic section has no DT_STRTAB entry")
    strsz: Optional[DynamicEntry] = firsts.get(DynamicTag.STRING_TABLE_SIZE)
    if strsz is None:
        raise MissingStringTableSizeError("dynamic section has no DT_STRSZ entry")

    _log.debug(
        "Decoded %d dynamic entries: %d DT_NEEDED, DT_STRTAB=%#x, DT_STRSZ=%d",
        count, len(needed), strtab.value, strsz.value,
    )
    return DynamicSectionSummary(
        string_table_offset=strtab,
        string_table_size=strsz,
        needed=tuple(needed),
        soname=firsts.get(DynamicTag.SONAME),
        rpath=firsts.get(DynamicTag.RPATH),
        runpath=firsts.get(DynamicTag.RUNPATH),
    )
