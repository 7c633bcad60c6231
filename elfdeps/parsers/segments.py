"""
ELF64 Program Header Scanning
==============================

Walks the program header table located by
:func:`elfdeps.parsers.header.locate_program_headers` and picks out the
segments dependency resolution cares about: ``PT_DYNAMIC`` (the dynamic
section), ``PT_INTERP`` (the program interpreter) and ``PT_LOAD`` (used to
translate virtual addresses into file offsets).

Elf64_Phdr fields decoded per entry::

    +0x00  p_type    u32
    +0x08  p_offset  u64
    +0x10  p_vaddr   u64
    +0x20  p_filesz  u64

References:
    - System V Application Binary Interface, Edition 4.1, "Program Header".
"""

from __future__ import annotations

from typing import Iterator, Optional, Sequence

from shared.logger import DepsLogger

from elfdeps.core.errors import (
    InvalidEncodingError,
    MissingDynamicSegmentError,
    TruncatedHeaderError,
)
from elfdeps.core.models import FileHeaderMeta, ProgramHeaderEntry, SegmentType
from elfdeps.parsers._binary import checked_slice, read_u32, read_u64

P_TYPE: int = 0x00
P_OFFSET: int = 0x08
P_VADDR: int = 0x10
P_FILESZ: int = 0x20
# Smallest entry that still holds p_filesz
MIN_PHDR_SIZE: int = P_FILESZ + 8

_log = DepsLogger("segments")


def iter_program_headers(
    data: bytes, meta: FileHeaderMeta
) -> Iterator[ProgramHeaderEntry]:
    """Decode every entry of the program header table, in table order.

    Raises:
        OutOfBoundsError: The table does not fit in *data*.
        TruncatedHeaderError: ``e_phentsize`` is too small for an Elf64_Phdr.
    """
    table = checked_slice(
        data, "program header table", meta.program_header_offset, meta.table_size
    )
    entsize = meta.program_header_entry_size
    count = meta.program_header_entry_count
    if count and entsize < MIN_PHDR_SIZE:
        raise TruncatedHeaderError(
            f"program header entry size {entsize} is smaller than {MIN_PHDR_SIZE}"
        )

    for index in range(count):
        base = index * entsize
        raw_type = read_u32(table, base + P_TYPE, "p_type")
        yield ProgramHeaderEntry(
            segment_type=SegmentType.from_raw(raw_type),
            raw_type=raw_type,
            file_offset=read_u64(table, base + P_OFFSET, "p_offset"),
            virtual_address=read_u64(table, base + P_VADDR, "p_vaddr"),
            file_size=read_u64(table, base + P_FILESZ, "p_filesz"),
        )


def find_dynamic_segment(data: bytes, meta: FileHeaderMeta) -> ProgramHeaderEntry:
    """Return the first ``PT_DYNAMIC`` entry.

    The whole table is bounds-checked before any entry is examined.

    Raises:
        MissingDynamicSegmentError: No entry has type ``PT_DYNAMIC``
            (the usual case for statically linked executables).
    """
    for entry in iter_program_headers(data, meta):
        if entry.segment_type is SegmentType.DYNAMIC:
            _log.debug(
                "PT_DYNAMIC at offset %#x, %d bytes",
                entry.file_offset, entry.file_size,
            )
            return entry
    raise MissingDynamicSegmentError(
        f"none of the {meta.program_header_entry_count} program headers is PT_DYNAMIC"
    )


def load_segments(data: bytes, meta: FileHeaderMeta) -> list[ProgramHeaderEntry]:
    """Return every ``PT_LOAD`` entry, in table order."""
    return [
        entry for entry in iter_program_headers(data, meta)
        if entry.segment_type is SegmentType.LOAD
    ]


def find_interpreter(data: bytes, meta: FileHeaderMeta) -> Optional[str]:
    """Return the ``PT_INTERP`` path (e.g. ``/lib64/ld-linux-x86-64.so.2``).

    Returns:
        The interpreter path without its trailing NUL, or ``None`` if the
        object has no ``PT_INTERP`` segment.

    Raises:
        OutOfBoundsError: The segment does not fit in *data*.
        InvalidEncodingError: The path is not valid UTF-8.
    """
    for entry in iter_program_headers(data, meta):
        if entry.segment_type is not SegmentType.INTERP:
            continue
        raw = bytes(checked_slice(data, "PT_INTERP segment", entry.file_offset, entry.file_size))
        raw = raw.split(b"\x00", 1)[0]
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise InvalidEncodingError(f"interpreter path is not UTF-8: {exc}") from exc
    return None


def translate_address(segments: Sequence[ProgramHeaderEntry], address: int) -> int:
    """Map a virtual *address* to a file offset via the ``PT_LOAD`` covering it.

    Addresses no segment covers are returned unchanged.
    """
    for seg in segments:
        if seg.contains_address(address):
            offset = address - seg.virtual_address + seg.file_offset
            _log.debug("Translated address %#x to file offset %#x", address, offset)
            return offset
    return address
