"""Index records (INDX): the subnodes of an NTFS B-tree index."""

from __future__ import annotations

import struct
from typing import Iterator, Tuple, Type

from ntfsparse.index_entry import IndexEntryType, NtfsIndexEntry, iter_node_entries
from ntfsparse.record import Record
from ntfsparse.types import (
    InvalidIndexAllocatedSizeError,
    InvalidIndexSignatureError,
    InvalidIndexUsedSizeError,
    InvalidStructuredValueSizeError,
    Position,
    Vcn,
)

# Record header (signature, update sequence, logfile sequence number) plus the VCN.
INDEX_RECORD_HEADER_SIZE = 24
# Size of all index node header fields plus some reserved bytes.
INDEX_NODE_HEADER_SIZE = 16

_SIGNATURE = b"INDX"
_VCN_OFFSET = 16
_VCN = struct.Struct("<q")
# entries offset, index size, allocated size, flags
_NODE_HEADER = struct.Struct("<IIIB")
_HAS_SUBNODES_FLAG = 0x01


class NtfsIndexRecord:
    """A single index record, read, fixed up and validated."""

    __slots__ = ("_data", "position")

    def __init__(self, record: Record) -> None:
        self._data = record.data
        self.position = record.position

    @classmethod
    def from_bytes(cls, data: bytes, position: Position) -> "NtfsIndexRecord":
        """Parse an index record of exactly the index's record size."""
        record = Record(data, position)
        minimum = INDEX_RECORD_HEADER_SIZE + INDEX_NODE_HEADER_SIZE
        if len(record) < minimum:
            raise InvalidStructuredValueSizeError(
                position, "IndexAllocation", minimum, len(record)
            )

        signature = record.signature()
        if signature != _SIGNATURE:
            raise InvalidIndexSignatureError(position, _SIGNATURE, signature)

        record.fixup()
        index_record = cls(record)
        index_record._validate_sizes()
        return index_record

    def _node_header(self) -> tuple:
        return _NODE_HEADER.unpack_from(self._data, INDEX_RECORD_HEADER_SIZE)

    def _validate_sizes(self) -> None:
        record_size = len(self._data)

        total_allocated_size = INDEX_RECORD_HEADER_SIZE + self.index_allocated_size()
        if total_allocated_size > record_size:
            raise InvalidIndexAllocatedSizeError(
                self.position, record_size, total_allocated_size
            )

        total_data_size = INDEX_RECORD_HEADER_SIZE + self.index_data_size()
        if total_data_size > total_allocated_size:
            raise InvalidIndexUsedSizeError(
                self.position, total_allocated_size, total_data_size
            )

    def entries_data(self) -> Tuple[bytes, Position]:
        """Return the bytes holding the index entries and their absolute position."""
        entries_offset, index_size, _, _ = self._node_header()
        start = INDEX_RECORD_HEADER_SIZE + entries_offset
        end = INDEX_RECORD_HEADER_SIZE + index_size
        return self._data[start:end], self.position + start

    def entries(self, entry_type: Type[IndexEntryType]) -> Iterator[NtfsIndexEntry]:
        """Yield the entries of this index record in order."""
        data, position = self.entries_data()
        return iter_node_entries(data, position, entry_type)

    def has_subnodes(self) -> bool:
        """Return whether this node has subnodes; otherwise it is a leaf node."""
        return bool(self._node_header()[3] & _HAS_SUBNODES_FLAG)

    def index_allocated_size(self) -> int:
        """Return the allocated size of this index record, in bytes."""
        return self._node_header()[2]

    def index_data_size(self) -> int:
        """Return the size used by index data within this index record, in bytes."""
        return self._node_header()[1]

    def vcn(self) -> Vcn:
        """Return the VCN this index record reports in its header."""
        (value,) = _VCN.unpack_from(self._data, _VCN_OFFSET)
        return Vcn(value)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return (
            f"NtfsIndexRecord(position={self.position}, vcn={self.vcn()}, "
            f"has_subnodes={self.has_subnodes()})"
        )