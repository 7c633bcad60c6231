import struct

import pytest

from elfdeps.core.errors import MissingStringTableError, MissingStringTableSizeError, OutOfBoundsError
from elfdeps.core import models
from elfdeps.core.models import DynamicTag, ProgramHeaderEntry, SegmentType
from elfdeps.parsers.dynamic import decode_dynamic_section, iter_dynamic_entries

from tests import elf_image
from tests.elf_image import DT_NEEDED, DT_NULL, DT_STRSZ, DT_STRTAB, ElfImage, build_elf


def dynamic_segment(image : ElfImage, *, offset : int | None = None, size : int | None = None) -> ProgramHeaderEntry:
    return ProgramHeaderEntry(
        segment_type = SegmentType.DYNAMIC,
        raw_type = 2,
        file_offset = image.dynamic_offset if offset is None else offset,
        file_size = image.dynamic_size if size is None else size,
    )


class TestDynamicTag:
    @pytest.mark.parametrize(('raw', 'tag'), [
        (1, DynamicTag.NEEDED),
        (5, DynamicTag.STRING_TABLE_OFFSET),
        (10, DynamicTag.STRING_TABLE_SIZE),
        (14, DynamicTag.SONAME),
        (15, DynamicTag.RPATH),
        (29, DynamicTag.RUNPATH),
        (0, DynamicTag.OTHER),
        (0x6ffffef5, DynamicTag.OTHER),
        (2**64 - 1, DynamicTag.OTHER),
    ])
    def test_from_raw(self, raw : int, tag : DynamicTag) -> None:
        assert DynamicTag.from_raw(raw) is tag

    def test_named_tags_match_builder(self) -> None:
        for name in ('DT_NEEDED', 'DT_STRTAB', 'DT_STRSZ', 'DT_SONAME', 'DT_RPATH', 'DT_RUNPATH'):
            assert getattr(models, name) == getattr(elf_image, name), name
            assert DynamicTag.from_raw(getattr(models, name)) is not DynamicTag.OTHER, name

    def test_named_segment_types_match_builder(self) -> None:
        for name, segment_type in (('PT_LOAD', SegmentType.LOAD), ('PT_DYNAMIC', SegmentType.DYNAMIC), ('PT_INTERP', SegmentType.INTERP)):
            assert getattr(models, name) == getattr(elf_image, name), name
            assert SegmentType.from_raw(getattr(models, name)) is segment_type


class TestIterDynamicEntries:
    def test_walks_whole_segment(self, libc_libm) -> None:
        entries = list(iter_dynamic_entries(libc_libm.data, dynamic_segment(libc_libm)))
        assert len(entries) == libc_libm.dynamic_size // 16
        assert entries[-1].raw_tag == DT_NULL

    def test_does_not_stop_at_null(self) -> None:
        # DT_NEEDED after DT_NULL is still collected.
        image = build_elf(('libc.so.6',), extra_dynamic = [(DT_NULL, 0), (DT_NEEDED, 1)])
        summary = decode_dynamic_section(image.data, dynamic_segment(image))
        assert [e.value for e in summary.needed] == [1, 1]

    def test_partial_trailing_element_ignored(self, libc_libm) -> None:
        entries = list(iter_dynamic_entries(libc_libm.data, dynamic_segment(libc_libm, size = libc_libm.dynamic_size - 8)))
        assert len(entries) == libc_libm.dynamic_size // 16 - 1

    def test_empty_segment(self, libc_libm) -> None:
        assert list(iter_dynamic_entries(libc_libm.data, dynamic_segment(libc_libm, size = 0))) == []

    def test_out_of_bounds(self, libc_libm) -> None:
        with pytest.raises(OutOfBoundsError):
            list(iter_dynamic_entries(libc_libm.data, dynamic_segment(libc_libm, size = libc_libm.dynamic_size + 16)))

    def test_offset_past_end(self, libc_libm) -> None:
        with pytest.raises(OutOfBoundsError):
            list(iter_dynamic_entries(libc_libm.data, dynamic_segment(libc_libm, offset = len(libc_libm.data) + 1, size = 0)))


class TestDecodeDynamicSection:
    def test_summary(self, libc_libm) -> None:
        summary = decode_dynamic_section(libc_libm.data, dynamic_segment(libc_libm))
        assert summary.string_table_offset.value == libc_libm.strtab_offset
        assert summary.string_table_size.value == libc_libm.strtab_size
        assert [e.tag for e in summary.needed] == [DynamicTag.NEEDED] * 2
        assert [e.value for e in summary.needed] == [1, 1 + len('libc.so.6') + 1]
        assert summary.soname is None and summary.rpath is None and summary.runpath is None

    def test_optional_entries(self, shared_object) -> None:
        summary = decode_dynamic_section(shared_object.data, dynamic_segment(shared_object))
        assert summary.soname is not None
        assert summary.rpath is not None
        assert summary.runpath is not None

    def test_no_needed(self) -> None:
        image = build_elf(())
        summary = decode_dynamic_section(image.data, dynamic_segment(image))
        assert summary.needed == ()

    def test_missing_strtab(self) -> None:
        image = build_elf(with_strtab = False)
        with pytest.raises(MissingStringTableError):
            decode_dynamic_section(image.data, dynamic_segment(image))

    def test_missing_strsz(self) -> None:
        image = build_elf(with_strsz = False)
        with pytest.raises(MissingStringTableSizeError):
            decode_dynamic_section(image.data, dynamic_segment(image))

    def test_size_comes_from_strsz(self) -> None:
        """DT_STRSZ, not DT_STRTAB, provides the table size."""
        image = build_elf(extra_dynamic = [(DT_STRSZ, 0x999), (DT_STRTAB, 0x888)])
        summary = decode_dynamic_section(image.data, dynamic_segment(image))
        assert summary.string_table_size.value == image.strtab_size
        assert summary.string_table_offset.value == image.strtab_offset
        assert summary.string_table_size.value != summary.string_table_offset.value

    def test_negative_tag_is_other(self, libc_libm) -> None:
        data = bytearray(libc_libm.data)
        struct.pack_into('<q', data, libc_libm.dynamic_offset, -1)
        summary = decode_dynamic_section(bytes(data), dynamic_segment(libc_libm))
        assert len(summary.needed) == 1
