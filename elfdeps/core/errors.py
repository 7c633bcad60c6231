"""
elfdeps Error Taxonomy
=======================

Every failure the resolution pipeline can report is an
:class:`ElfDepsError`.  Stages raise the most specific subclass and never
recover from a malformed structure; the command-line layer maps the
classes onto human-readable messages and exit statuses.

:class:`NotDynamicError` groups the two terminal outcomes that mean
"well-formed, but nothing to resolve" (no program headers, no dynamic
segment) so callers can tell a statically linked object from a corrupt one.
"""

from __future__ import annotations


class ElfDepsError(Exception):
    """Base class for all dependency-resolution failures."""


class IoFailureError(ElfDepsError):
    """The file could not be read.  Wraps the underlying :class:`OSError`."""


class NotElfError(ElfDepsError):
    """The buffer does not start with the ELF magic sequence."""


class UnsupportedFormatError(ElfDepsError):
    """The object is ELF but not 64-bit little-endian."""


class TruncatedHeaderError(ElfDepsError):
    """The buffer is too short for a fixed-offset header read."""


class NotDynamicError(ElfDepsError):
    """The object carries no dynamic-linking information."""


class NoProgramHeadersError(NotDynamicError):
    """The file header declares no program header table (``e_phoff == 0``)."""


class MissingDynamicSegmentError(NotDynamicError):
    """No ``PT_DYNAMIC`` entry exists in the program header table."""


class MissingStringTableError(ElfDepsError):
    """The dynamic section has no ``DT_STRTAB`` entry."""


class MissingStringTableSizeError(ElfDepsError):
    """The dynamic section has no ``DT_STRSZ`` entry."""


class OutOfBoundsError(ElfDepsError):
    """A computed byte range falls outside the buffer it indexes.

    Attributes:
        what: Short description of the structure being read.
        start: First byte of the requested range.
        end: One past the last byte of the requested range.
        limit: Length of the buffer (or table) the range must fit in.
    """

    def __init__(self, what: str, start: int, end: int, limit: int) -> None:
        self.what = what
        self.start = start
        self.end = end
        self.limit = limit
        super().__init__(
            f"{what}: range [{start:#x}, {end:#x}) exceeds limit {limit:#x}"
        )


class InvalidEncodingError(ElfDepsError):
    """A resolved string is not valid UTF-8."""
