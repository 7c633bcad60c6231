"""
ELF64 File Header Parsing
==========================

Validates the ELF identification bytes and locates the program header
table.  Only the 64-bit little-endian variant is accepted; 32-bit and
big-endian objects are rejected rather than misparsed.

ELF64 file header fields read here::

    0x00  e_ident[EI_MAG0..EI_MAG3]   7f 45 4c 46
    0x04  e_ident[EI_CLASS]           ELFCLASS64 = 2
    0x05  e_ident[EI_DATA]            ELFDATA2LSB = 1
    0x20  e_phoff                     u64
    0x36  e_phentsize                 u16
    0x38  e_phnum                     u16

References:
    - TIS Committee. (1995). Tool Interface Standard (TIS) Executable and
      Linkable Format (ELF) Specification, Version 1.2.
    - Linux man page: elf(5).
"""

from __future__ import annotations

from typing import Optional

from shared.logger import DepsLogger

from elfdeps.core.errors import (
    NotElfError,
    TruncatedHeaderError,
    UnsupportedFormatError,
)
from elfdeps.core.models import FileHeaderMeta
from elfdeps.parsers._binary import read_u16, read_u64


# ---------------------------------------------------------------------------
# ELF Constants
# ---------------------------------------------------------------------------

ELF_MAGIC: bytes = b"\x7fELF"

EI_CLASS: int = 4
EI_DATA: int = 5

# ELF Class (32-bit vs 64-bit)
ELFCLASS32: int = 1
ELFCLASS64: int = 2

# Data encoding (endianness)
ELFDATA2LSB: int = 1  # Little-endian
ELFDATA2MSB: int = 2  # Big-endian

_CLASS_NAMES: dict[int, str] = {ELFCLASS32: "ELF32", ELFCLASS64: "ELF64"}
_DATA_NAMES: dict[int, str] = {ELFDATA2LSB: "little-endian", ELFDATA2MSB: "big-endian"}

# ELF64 file header layout
ELF64_EHDR_SIZE: int = 64
E_PHOFF: int = 0x20
E_PHENTSIZE: int = 0x36
E_PHNUM: int = 0x38

_log = DepsLogger("header")


def validate_header(data: bytes) -> None:
    """Check the ELF magic, class and data encoding.

    Raises:
        NotElfError: The first four bytes are not ``\\x7fELF``.
        TruncatedHeaderError: The magic is present but the class and data
            bytes are missing.
        UnsupportedFormatError: The object is not ELF64 little-endian.
    """
    if data[:4] != ELF_MAGIC:
        raise NotElfError(
            f"bad magic {bytes(data[:4])!r}, expected {ELF_MAGIC!r}"
        )
    if len(data) <= EI_DATA:
        raise TruncatedHeaderError(
            f"identification is {len(data)} bytes, need {EI_DATA + 1}"
        )

    ei_class = data[EI_CLASS]
    ei_data = data[EI_DATA]
    if ei_class != ELFCLASS64:
        raise UnsupportedFormatError(
            f"unsupported class {_CLASS_NAMES.get(ei_class, ei_class)}; only ELF64 is handled"
        )
    if ei_data != ELFDATA2LSB:
        raise UnsupportedFormatError(
            f"unsupported encoding {_DATA_NAMES.get(ei_data, ei_data)}; only little-endian is handled"
        )
    _log.debug("ELF64 little-endian header accepted")


def locate_program_headers(data: bytes) -> Optional[FileHeaderMeta]:
    """Read ``e_phoff``, ``e_phentsize`` and ``e_phnum``.

    Args:
        data: A buffer already accepted by :func:`validate_header`.

    Returns:
        The program header table location, or ``None`` when ``e_phoff``
        is zero (the object has no program headers).

    Raises:
        TruncatedHeaderError: The buffer is shorter than an ELF64 header.
    """
    if len(data) < ELF64_EHDR_SIZE:
        raise TruncatedHeaderError(
            f"file header is {len(data)} bytes, need {ELF64_EHDR_SIZE}"
        )

    phoff = read_u64(data, E_PHOFF, "e_phoff")
    phentsize = read_u16(data, E_PHENTSIZE, "e_phentsize")
    phnum = read_u16(data, E_PHNUM, "e_phnum")

    if phoff == 0:
        _log.debug("e_phoff is zero; no program header table")
        return None

    _log.debug(
        "Program header table at %#x: %d entries of %d bytes",
        phoff, phnum, phentsize,
    )
    return FileHeaderMeta(
        program_header_offset=phoff,
        program_header_entry_size=phentsize,
        program_header_entry_count=phnum,
    )
