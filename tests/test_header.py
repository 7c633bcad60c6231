import pytest

from elfdeps.core.errors import NotElfError, TruncatedHeaderError, UnsupportedFormatError
from elfdeps.parsers.header import locate_program_headers, validate_header

from tests.elf_image import EHDR_SIZE, PHDR_SIZE, build_elf, patch


class TestValidateHeader:
    @pytest.mark.parametrize('data', [
        b'',
        b'\x7fEL',
        b'MZ\x90\x00' + bytes(60),
        b'\x7felf' + bytes(60),
        b'#!/bin/sh\n',
    ])
    def test_not_elf(self, data : bytes) -> None:
        with pytest.raises(NotElfError):
            validate_header(data)

    def test_magic_only(self) -> None:
        with pytest.raises(TruncatedHeaderError):
            validate_header(b'\x7fELF\x02')

    def test_elf32(self) -> None:
        with pytest.raises(UnsupportedFormatError, match = 'ELF32'):
            validate_header(build_elf(ei_class = 1).data)

    def test_big_endian(self) -> None:
        with pytest.raises(UnsupportedFormatError, match = 'big-endian'):
            validate_header(build_elf(ei_data = 2).data)

    def test_invalid_class(self) -> None:
        with pytest.raises(UnsupportedFormatError):
            validate_header(build_elf(ei_class = 0).data)

    def test_accepts_elf64_le(self, libc_libm) -> None:
        validate_header(libc_libm.data)


class TestLocateProgramHeaders:
    def test_fields(self, libc_libm) -> None:
        meta = locate_program_headers(libc_libm.data)
        assert meta is not None
        assert meta.program_header_offset == EHDR_SIZE
        assert meta.program_header_entry_size == PHDR_SIZE
        assert meta.program_header_entry_count == libc_libm.phnum
        assert meta.table_size == PHDR_SIZE * libc_libm.phnum

    def test_zero_offset(self) -> None:
        assert locate_program_headers(build_elf(phoff = 0).data) is None

    @pytest.mark.parametrize('length', [6, 16, 0x28, 0x39, EHDR_SIZE - 1])
    def test_truncated(self, libc_libm, length : int) -> None:
        with pytest.raises(TruncatedHeaderError):
            locate_program_headers(libc_libm.data[:length])

    def test_header_only(self, libc_libm) -> None:
        meta = locate_program_headers(libc_libm.data[:EHDR_SIZE])
        assert meta is not None
        assert meta.program_header_offset == EHDR_SIZE

    def test_little_endian_decoding(self, libc_libm) -> None:
        data = patch(libc_libm.data, 0x20, '<Q', 0x0102030405060708)
        data = patch(data, 0x36, '<H', 0x1234)
        meta = locate_program_headers(data)
        assert meta is not None
        assert meta.program_header_offset == 0x0102030405060708
        assert meta.program_header_entry_size == 0x1234
