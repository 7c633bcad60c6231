"""
elfdeps ELF64 parsers: one module per pipeline stage.

    header    -- identification check and program header table location
    segments  -- program header walk (PT_DYNAMIC, PT_INTERP, PT_LOAD)
    dynamic   -- dynamic section decoding
    strtab    -- string table resolution
"""

from elfdeps.parsers.dynamic import decode_dynamic_section, iter_dynamic_entries
from elfdeps.parsers.header import locate_program_headers, validate_header
from elfdeps.parsers.segments import (
    find_dynamic_segment,
    find_interpreter,
    iter_program_headers,
    load_segments,
    translate_address,
)
from elfdeps.parsers.strtab import (
    read_string,
    resolve_library_names,
    resolve_optional_string,
    string_table,
)

__all__ = [
    "decode_dynamic_section",
    "find_dynamic_segment",
    "find_interpreter",
    "iter_dynamic_entries",
    "iter_program_headers",
    "load_segments",
    "locate_program_headers",
    "read_string",
    "resolve_library_names",
    "resolve_optional_string",
    "string_table",
    "translate_address",
    "validate_header",
]
