"""The $INDEX_ROOT structured value: the top-level node of an NTFS B-tree index."""

from __future__ import annotations

import struct
from typing import Iterator, Tuple, Type

from ntfsparse.index_entry import IndexEntryType, NtfsIndexEntry, iter_node_entries
from ntfsparse.types import (
    InvalidIndexRootError,
    InvalidStructuredValueSizeError,
    Position,
)

# Size of all index root header fields plus some reserved bytes.
INDEX_ROOT_HEADER_SIZE = 16
# Size of all index node header fields plus some reserved bytes.
INDEX_NODE_HEADER_SIZE = 16

# type, collation rule, index record size, clusters per index record
_ROOT_HEADER = struct.Struct("<IIIb")
# entries offset, index size, allocated size, flags
_NODE_HEADER = struct.Struct("<IIIB")

_LARGE_INDEX_FLAG = 0x01


class NtfsIndexRoot:
    """The top-level node of an index; the subnodes live in an index allocation."""

    __slots__ = ("_data", "position")

    def __init__(self, data: bytes, position: Position) -> None:
        self._data = bytes(data)
        self.position = position

    @classmethod
    def from_bytes(cls, data: bytes, position: Position) -> "NtfsIndexRoot":
        """Parse an $INDEX_ROOT value and check that its entries lie within it."""
        data = bytes(data)
        if len(data) < INDEX_ROOT_HEADER_SIZE + INDEX_NODE_HEADER_SIZE:
            raise InvalidStructuredValueSizeError(
                position, "IndexRoot", INDEX_ROOT_HEADER_SIZE, len(data)
            )
        index_root = cls(data, position)
        index_root._validate_sizes()
        return index_root

    def _node_header(self) -> tuple:
        return _NODE_HEADER.unpack_from(self._data, INDEX_ROOT_HEADER_SIZE)

    def _entries_range(self) -> Tuple[int, int]:
        entries_offset, index_size, _, _ = self._node_header()
        return (
            INDEX_ROOT_HEADER_SIZE + entries_offset,
            INDEX_ROOT_HEADER_SIZE + index_size,
        )

    def _validate_sizes(self) -> None:
        start, end = self._entries_range()
        if start >= len(self._data):
            raise InvalidIndexRootError(self.position, "entries offset", start, len(self._data))
        if end > len(self._data):
            raise InvalidIndexRootError(self.position, "used size", end, len(self._data))

    def entries_data(self) -> Tuple[bytes, Position]:
        """Return the bytes holding the index entries and their absolute position."""
        start, end = self._entries_range()
        return self._data[start:end], self.position + start

    def entries(self, entry_type: Type[IndexEntryType]) -> Iterator[NtfsIndexEntry]:
        """Yield the entries of this top-level node in order."""
        data, position = self.entries_data()
        return iter_node_entries(data, position, entry_type)

    def index_record_size(self) -> int:
        """Return the size of a single index record of this index, in bytes."""
        return _ROOT_HEADER.unpack_from(self._data)[2]

    def index_allocated_size(self) -> int:
        """Return the allocated size of this index root node, in bytes."""
        return self._node_header()[2]

    def index_data_size(self) -> int:
        """Return the size used by index data within this index root node, in bytes."""
        return self._node_header()[1]

    def is_large_index(self) -> bool:
        """Return whether this index needs an extra index allocation for its subnodes."""
        return bool(self._node_header()[3] & _LARGE_INDEX_FLAG)

    def __repr__(self) -> str:
        return (
            f"NtfsIndexRoot(position={self.position}, "
            f"index_record_size={self.index_record_size()}, "
            f"large={self.is_large_index()})"
        )