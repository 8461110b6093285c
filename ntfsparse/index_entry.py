"""Index entries: the key/data items stored in the nodes of an NTFS B-tree index."""

from __future__ import annotations

import struct
from abc import ABC, abstractmethod
from enum import IntFlag
from typing import Any, Callable, ClassVar, Iterator, Optional, Type

from ntfsparse.types import (
    InvalidIndexEntryDataRangeError,
    InvalidIndexEntrySizeError,
    Position,
    Vcn,
)

# Size of all header fields plus some reserved bytes.
INDEX_ENTRY_HEADER_SIZE = 16

# data_offset, data_length, padding, index_entry_length, key_length, flags
_HEADER = struct.Struct("<HHIHHB")
_FILE_REFERENCE = struct.Struct("<Q")
_VCN = struct.Struct("<q")


class NtfsIndexEntryFlags(IntFlag):
    """Flags of an index entry."""

    HAS_SUBNODE = 0x01
    LAST_ENTRY = 0x02


_KNOWN_FLAGS = NtfsIndexEntryFlags.HAS_SUBNODE | NtfsIndexEntryFlags.LAST_ENTRY


class IndexEntryType(ABC):
    """Describes the kind of an index: how its keys (and data, if any) are parsed.

    An entry type either carries a file reference in the first eight bytes of each
    entry (``has_file_reference = True``) or extra data described by the
    ``data_offset``/``data_length`` header fields (``data_from_bytes`` set).
    The two are mutually exclusive.
    """

    has_file_reference: ClassVar[bool] = False
    data_from_bytes: ClassVar[Optional[Callable[[bytes, Position], Any]]] = None

    @staticmethod
    @abstractmethod
    def key_from_bytes(data: bytes, position: Position) -> Any:
        """Parse the key of an index entry from its raw bytes."""


class NtfsIndexEntry:
    """A single entry of an NTFS index node."""

    __slots__ = ("_data", "position", "entry_type")

    def __init__(
        self, data: bytes, position: Position, entry_type: Type[IndexEntryType]
    ) -> None:
        raw = bytes(data)
        if len(raw) < INDEX_ENTRY_HEADER_SIZE:
            raise InvalidIndexEntrySizeError(position, INDEX_ENTRY_HEADER_SIZE, len(raw))

        (_, _, _, length, _, _) = _HEADER.unpack_from(raw)
        if length > len(raw):
            raise InvalidIndexEntrySizeError(position, length, len(raw))
        if length < INDEX_ENTRY_HEADER_SIZE:
            raise InvalidIndexEntrySizeError(position, INDEX_ENTRY_HEADER_SIZE, length)

        self._data = raw[:length]
        self.position = position
        self.entry_type = entry_type

    @property
    def raw(self) -> bytes:
        """The bytes of this entry, exactly ``index_entry_length()`` long."""
        return self._data

    def _header(self) -> tuple:
        return _HEADER.unpack_from(self._data)

    def _slice(self, start: int, end: int) -> bytes:
        if end > len(self._data):
            raise InvalidIndexEntryDataRangeError(self.position, start, end, len(self._data))
        return self._data[start:end]

    def flags(self) -> NtfsIndexEntryFlags:
        """Return the flags of this entry; unknown bits are dropped."""
        return NtfsIndexEntryFlags(self._header()[5] & _KNOWN_FLAGS)

    def index_entry_length(self) -> int:
        """Return the total length of this entry, in bytes."""
        return self._header()[3]

    def key_length(self) -> int:
        """Return the length of the key of this entry, in bytes."""
        return self._header()[4]

    def key(self) -> Any:
        """Return the parsed key, or ``None`` if this entry has none.

        The last entry of a node never has a key.
        """
        key_length = self.key_length()
        if key_length == 0 or NtfsIndexEntryFlags.LAST_ENTRY in self.flags():
            return None
        start = INDEX_ENTRY_HEADER_SIZE
        end = start + key_length
        return self.entry_type.key_from_bytes(self._slice(start, end), self.position + start)

    def _require_data_support(self) -> Callable[[bytes, Position], Any]:
        parser = self.entry_type.data_from_bytes
        if parser is None:
            raise TypeError(f"{self.entry_type.__name__} index entries carry no data")
        return parser

    def data_length(self) -> int:
        """Return the length of the data of this entry, in bytes."""
        self._require_data_support()
        return self._header()[1]

    def data(self) -> Any:
        """Return the parsed data of this entry, or ``None`` if it has none."""
        parser = self._require_data_support()
        data_offset, data_length = self._header()[:2]
        if data_offset == 0 or data_length == 0:
            return None
        end = data_offset + data_length
        return parser(self._slice(data_offset, end), self.position + data_offset)

    def file_reference(self) -> int:
        """Return the raw 64-bit reference to the file this entry points to."""
        if not self.entry_type.has_file_reference:
            raise TypeError(
                f"{self.entry_type.__name__} index entries carry no file reference"
            )
        (value,) = _FILE_REFERENCE.unpack_from(self._data)
        return value

    def subnode_vcn(self) -> Optional[Vcn]:
        """Return the VCN of this entry's subnode, or ``None`` if it has none."""
        if NtfsIndexEntryFlags.HAS_SUBNODE not in self.flags():
            return None
        start = max(self.index_entry_length() - _VCN.size, INDEX_ENTRY_HEADER_SIZE)
        end = start + _VCN.size
        (value,) = _VCN.unpack(self._slice(start, end))
        return Vcn(value)

    def __repr__(self) -> str:
        return (
            f"NtfsIndexEntry(position={self.position}, flags={self.flags()!r}, "
            f"length={self.index_entry_length()})"
        )


def iter_node_entries(
    data: bytes, position: Position, entry_type: Type[IndexEntryType]
) -> Iterator[NtfsIndexEntry]:
    """Yield the entries of one index node in order, up to and including the last entry."""
    view = memoryview(bytes(data))
    while view:
        entry = NtfsIndexEntry(view, position, entry_type)
        yield entry
        if NtfsIndexEntryFlags.LAST_ENTRY in entry.flags():
            return
        length = entry.index_entry_length()
        view = view[length:]
        position = position + length