import pathlib

import pytest

from tests.elf_image import ElfImage, build_elf


@pytest.fixture
def libc_libm() -> ElfImage:
    return build_elf(("libc.so.6", "libm.so.6"))

@pytest.fixture
def shared_object() -> ElfImage:
    return build_elf(
        ("libpthread.so.0", "libc.so.6"),
        soname = "libfoo.so.1",
        rpath = "/opt/foo/lib",
        runpath = "$ORIGIN/../lib",
        interp = "/lib64/ld-linux-x86-64.so.2",
    )

@pytest.fixture
def write_image(tmp_path : pathlib.Path):
    def write(data : bytes, name : str = 'a.out') -> pathlib.Path:
        path = tmp_path / name
        path.write_bytes(data)
        return path
    return write
