"""
elfdeps -- ELF64 Shared-Library Dependency Lister
===================================================

Extracts the ordered list of shared libraries (``DT_NEEDED`` entries) an
ELF64 little-endian executable or shared object declares, straight from
the file bytes.  No loader, no ``ldd``, no third-party ELF library.

Modules:
    - elfdeps.core.engine: Pipeline orchestration and file reading
    - elfdeps.core.models: Pydantic data models
    - elfdeps.core.errors: Error taxonomy
    - elfdeps.parsers: One module per decoding stage
    - elfdeps.output: Console presentation
    - elfdeps.cli: Click-based command-line interface

References:
    - TIS Committee. (1995). ELF Specification, Version 1.2.
    - System V Application Binary Interface, Edition 4.1.
"""

from elfdeps.core.engine import DependencyEngine, inspect_image, resolve_dependencies
from elfdeps.core.errors import ElfDepsError

__version__ = "1.0.0"
__all__ = [
    "DependencyEngine",
    "ElfDepsError",
    "inspect_image",
    "resolve_dependencies",
]
