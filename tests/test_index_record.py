import struct

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from ntfsparse.index_entry import IndexEntryType
from ntfsparse.index_record import NtfsIndexRecord
from ntfsparse.types import (
    InvalidIndexAllocatedSizeError,
    InvalidIndexSignatureError,
    InvalidIndexUsedSizeError,
    InvalidStructuredValueSizeError,
    Position,
    UpdateSequenceError,
    Vcn,
)

SECTOR = 512


class RawKeys(IndexEntryType):
    has_file_reference = True

    @staticmethod
    def key_from_bytes(data, position):
        return bytes(data)


def make_entry(key=b"", *, last=False, subnode=None, file_reference=0):
    flags = 0
    body = key + b"\0" * (-len(key) % 8)
    if last:
        flags |= 0x02
    if subnode is not None:
        flags |= 0x01
        body += struct.pack("<q", subnode)
    length = 16 + len(body)
    return struct.pack("<QHHB3x", file_reference, length, len(key), flags) + body


def make_index_record(
    entries,
    *,
    vcn=0,
    record_size=1024,
    signature=b"INDX",
    allocated_size=None,
    index_size=None,
    has_subnodes=False,
    usn=b"\x07\x00",
):
    sectors = record_size // SECTOR
    usa_count = sectors + 1
    usa_offset = 40
    entries_start = (usa_offset + usa_count * 2 + 7) // 8 * 8
    entries_offset = entries_start - 24
    if index_size is None:
        index_size = entries_offset + len(entries)
    if allocated_size is None:
        allocated_size = record_size - 24

    data = bytearray(record_size)
    struct.pack_into("<4sHHQq", data, 0, signature, usa_offset, usa_count, 0, vcn)
    struct.pack_into(
        "<IIIB", data, 24, entries_offset, index_size, allocated_size, int(has_subnodes)
    )
    data[entries_start:entries_start + len(entries)] = entries
    data[usa_offset:usa_offset + 2] = usn
    array_positions = range(usa_offset + 2, usa_offset + 2 + 2 * sectors, 2)
    sector_ends = range(SECTOR, record_size + 1, SECTOR)
    for array_position, sector_end in zip(array_positions, sector_ends):
        data[array_position:array_position + 2] = data[sector_end - 2:sector_end]
        data[sector_end - 2:sector_end] = usn
    return bytes(data)


LONG_KEY = (bytes(range(256)) * 2)[:480]
ENTRIES = make_entry(LONG_KEY, file_reference=9) + make_entry(last=True)


def test_parse_and_fixup_restores_key():
    data = make_index_record(ENTRIES, vcn=5)
    record = NtfsIndexRecord.from_bytes(data, Position(4096))
    assert record.vcn() == Vcn(5)
    assert [entry.key() for entry in record.entries(RawKeys)] == [LONG_KEY, None]
    assert len(record) == 1024


def test_sizes_and_flags():
    record = NtfsIndexRecord.from_bytes(
        make_index_record(ENTRIES, has_subnodes=True), Position(4096)
    )
    assert record.has_subnodes() is True
    assert record.index_allocated_size() == 1024 - 24
    assert record.index_data_size() == 24 + len(ENTRIES)


def test_leaf_record():
    record = NtfsIndexRecord.from_bytes(make_index_record(ENTRIES), Position(4096))
    assert record.has_subnodes() is False


def test_entries_data_position():
    record = NtfsIndexRecord.from_bytes(make_index_record(ENTRIES), Position(4096))
    data, position = record.entries_data()
    assert data == ENTRIES
    assert position == Position(4096) + 48


def test_bad_signature():
    data = make_index_record(ENTRIES, signature=b"FILE")
    with pytest.raises(InvalidIndexSignatureError) as info:
        NtfsIndexRecord.from_bytes(data, Position(4096))
    assert info.value.actual == b"FILE"
    assert info.value.expected == b"INDX"


def test_update_sequence_mismatch():
    data = bytearray(make_index_record(ENTRIES))
    data[1022:1024] = b"\x00\x01"
    with pytest.raises(UpdateSequenceError):
        NtfsIndexRecord.from_bytes(bytes(data), Position(4096))


def test_allocated_size_too_big():
    data = make_index_record(ENTRIES, allocated_size=1024)
    with pytest.raises(InvalidIndexAllocatedSizeError) as info:
        NtfsIndexRecord.from_bytes(data, Position(4096))
    assert info.value.expected == 1024
    assert info.value.actual == 24 + 1024


def test_used_size_too_big():
    data = make_index_record(ENTRIES, index_size=1024 - 24 + 1)
    with pytest.raises(InvalidIndexUsedSizeError) as info:
        NtfsIndexRecord.from_bytes(data, Position(4096))
    assert info.value.expected == 1024
    assert info.value.actual > info.value.expected


def test_too_short():
    with pytest.raises(InvalidStructuredValueSizeError):
        NtfsIndexRecord.from_bytes(b"INDX" + b"\0" * 20, Position(4096))


@settings(max_examples=50)
@given(
    keys=st.lists(st.binary(min_size=1, max_size=120), min_size=1, max_size=6),
    vcn=st.integers(min_value=0, max_value=1 << 40),
)
def test_round_trip_keys(keys, vcn):
    entries = b"".join(make_entry(key) for key in keys) + make_entry(last=True)
    record = NtfsIndexRecord.from_bytes(make_index_record(entries, vcn=vcn), Position(8192))
    assert record.vcn() == Vcn(vcn)
    assert [entry.key() for entry in record.entries(RawKeys)] == keys + [None]