"""Bounds-checked little-endian field readers shared by the ELF64 parsers."""

from __future__ import annotations

import struct

from elfdeps.core.errors import OutOfBoundsError

_U16 = struct.Struct("<H")
_U32 = struct.Struct("<I")
_U64 = struct.Struct("<Q")


def checked_range(what: str, start: int, length: int, limit: int) -> tuple[int, int]:
    """Return ``(start, end)`` for a range that must fit in ``[0, limit)``.

    Raises:
        OutOfBoundsError: If the range would extend past *limit*.
    """
    end = start + length
    if start < 0 or length < 0 or end > limit:
        raise OutOfBoundsError(what, start, end, limit)
    return start, end


def checked_slice(data: bytes, what: str, start: int, length: int) -> memoryview:
    """Zero-copy view of ``data[start:start + length]`` after a bounds check."""
    begin, end = checked_range(what, start, length, len(data))
    return memoryview(data)[begin:end]


def _unpack(fmt: struct.Struct, data: bytes | memoryview, offset: int, what: str) -> int:
    checked_range(what, offset, fmt.size, len(data))
    return fmt.unpack_from(data, offset)[0]


def read_u16(data: bytes | memoryview, offset: int, what: str = "u16 field") -> int:
    return _unpack(_U16, data, offset, what)


def read_u32(data: bytes | memoryview, offset: int, what: str = "u32 field") -> int:
    return _unpack(_U32, data, offset, what)


def read_u64(data: bytes | memoryview, offset: int, what: str = "u64 field") -> int:
    return _unpack(_U64, data, offset, what)
