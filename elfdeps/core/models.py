"""
elfdeps Data Models
====================

Pydantic-based value objects produced by the dependency resolution
pipeline.  Every model is frozen: each stage consumes the immutable raw
image plus the previous stage's output and builds a new value.

Raw ELF type and tag integers are classified into closed enumerations with
an explicit ``OTHER`` member, so unknown values from newer toolchains are
carried through instead of rejected.

References:
    - TIS Committee. (1995). Executable and Linkable Format (ELF) Specification.
    - System V Application Binary Interface, Edition 4.1.
"""

from __future__ import annotations

import enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


# Program header types
PT_LOAD: int = 1
PT_DYNAMIC: int = 2
PT_INTERP: int = 3

# Dynamic tags
DT_NEEDED: int = 1
DT_STRTAB: int = 5
DT_STRSZ: int = 10
DT_SONAME: int = 14
DT_RPATH: int = 15
DT_RUNPATH: int = 29


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------

class SegmentType(str, enum.Enum):
    """Program header ``p_type`` values relevant to dependency resolution."""
    LOAD = "load"
    DYNAMIC = "dynamic"
    INTERP = "interp"
    OTHER = "other"

    @classmethod
    def from_raw(cls, value: int) -> SegmentType:
        """Classify a raw ``p_type`` value."""
        return _SEGMENT_TYPES.get(value, cls.OTHER)


_SEGMENT_TYPES: dict[int, SegmentType] = {
    PT_LOAD: SegmentType.LOAD,
    PT_DYNAMIC: SegmentType.DYNAMIC,
    PT_INTERP: SegmentType.INTERP,
}


class DynamicTag(str, enum.Enum):
    """Dynamic section ``d_tag`` values relevant to dependency resolution."""
    NEEDED = "needed"
    STRING_TABLE_OFFSET = "strtab"
    STRING_TABLE_SIZE = "strsz"
    SONAME = "soname"
    RPATH = "rpath"
    RUNPATH = "runpath"
    OTHER = "other"

    @classmethod
    def from_raw(cls, value: int) -> DynamicTag:
        """Classify a raw ``d_tag`` value."""
        return _DYNAMIC_TAGS.get(value, cls.OTHER)


_DYNAMIC_TAGS: dict[int, DynamicTag] = {
    DT_NEEDED: DynamicTag.NEEDED,
    DT_STRTAB: DynamicTag.STRING_TABLE_OFFSET,
    DT_STRSZ: DynamicTag.STRING_TABLE_SIZE,
    DT_SONAME: DynamicTag.SONAME,
    DT_RPATH: DynamicTag.RPATH,
    DT_RUNPATH: DynamicTag.RUNPATH,
}


class DependencyStatus(str, enum.Enum):
    """Outcome of inspecting one object."""
    DYNAMIC = "dynamic"
    STATIC = "static"
    NO_PROGRAM_HEADERS = "no_program_headers"


_FROZEN = ConfigDict(frozen=True)


# ---------------------------------------------------------------------------
# Pipeline values
# ---------------------------------------------------------------------------

class FileHeaderMeta(BaseModel):
    """Location of the program header table, read from the ELF64 file header.

    Attributes:
        program_header_offset: ``e_phoff``, never zero.
        program_header_entry_size: ``e_phentsize``.
        program_header_entry_count: ``e_phnum``.
    """
    model_config = _FROZEN

    program_header_offset: int = Field(gt=0, lt=1 << 64)
    program_header_entry_size: int = Field(ge=0, lt=1 << 16)
    program_header_entry_count: int = Field(ge=0, lt=1 << 16)

    @property
    def table_size(self) -> int:
        """Total byte size of the program header table."""
        return self.program_header_entry_size * self.program_header_entry_count


class ProgramHeaderEntry(BaseModel):
    """One decoded program header (segment) entry."""
    model_config = _FROZEN

    segment_type: SegmentType
    raw_type: int = 0
    file_offset: int = Field(ge=0, lt=1 << 64)
    virtual_address: int = Field(default=0, ge=0, lt=1 << 64)
    file_size: int = Field(ge=0, lt=1 << 64)

    def contains_address(self, address: int) -> bool:
        """Whether *address* lies within this segment's file-backed image."""
        return self.virtual_address <= address < self.virtual_address + self.file_size


class DynamicEntry(BaseModel):
    """One 16-byte element of the dynamic section.

    ``value`` is an offset, a size or a string-table index depending on
    ``tag``.
    """
    model_config = _FROZEN

    tag: DynamicTag
    raw_tag: int = 0
    value: int = Field(ge=0, lt=1 << 64)


class DynamicSectionSummary(BaseModel):
    """The entries of a dynamic section needed to resolve library names.

    Attributes:
        string_table_offset: First ``DT_STRTAB`` entry.
        string_table_size: First ``DT_STRSZ`` entry.
        needed: Every ``DT_NEEDED`` entry, in declaration order.
        soname: First ``DT_SONAME`` entry, if any.
        rpath: First ``DT_RPATH`` entry, if any.
        runpath: First ``DT_RUNPATH`` entry, if any.
    """
    model_config = _FROZEN

    string_table_offset: DynamicEntry
    string_table_size: DynamicEntry
    needed: tuple[DynamicEntry, ...] = ()
    soname: Optional[DynamicEntry] = None
    rpath: Optional[DynamicEntry] = None
    runpath: Optional[DynamicEntry] = None


# ---------------------------------------------------------------------------
# Aggregate report
# ---------------------------------------------------------------------------

class DependencyReport(BaseModel):
    """Everything the presentation layer shows for one object.

    Attributes:
        path: Filesystem path of the inspected file (empty for raw buffers).
        size: File size in bytes.
        status: Whether dependencies could be resolved at all.
        needed: Library names in declaration order.
        soname: ``DT_SONAME`` of a shared object.
        rpath: ``DT_RPATH`` search path string.
        runpath: ``DT_RUNPATH`` search path string.
        interpreter: Program interpreter from ``PT_INTERP``.
    """
    model_config = _FROZEN

    path: str = ""
    size: int = 0
    status: DependencyStatus = DependencyStatus.DYNAMIC
    needed: list[str] = Field(default_factory=list)
    soname: Optional[str] = None
    rpath: Optional[str] = None
    runpath: Optional[str] = None
    interpreter: Optional[str] = None

    @property
    def is_dynamic(self) -> bool:
        return self.status is DependencyStatus.DYNAMIC
