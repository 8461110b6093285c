"""The $INDEX_ALLOCATION structured value: the subnodes of an NTFS B-tree index."""

from __future__ import annotations

from typing import Iterator

from ntfsparse.index_record import NtfsIndexRecord
from ntfsparse.types import (
    NtfsError,
    Position,
    Vcn,
    VcnMismatchError,
    VcnOutOfBoundsError,
)


class NtfsIndexAllocation:
    """The value of an $INDEX_ALLOCATION attribute, holding a sequence of index records."""

    __slots__ = ("_data", "position", "cluster_size")

    def __init__(self, data: bytes, position: Position, cluster_size: int) -> None:
        self._data = bytes(data)
        self.position = position
        self.cluster_size = cluster_size

    def __len__(self) -> int:
        return len(self._data)

    def _read_record(self, offset: int, index_record_size: int) -> NtfsIndexRecord:
        end = offset + index_record_size
        if end > len(self._data):
            raise NtfsError(
                f"The index allocation at byte position {self.position:#x} ends before "
                f"the index record at offset {offset} ({len(self._data)} < {end} bytes)"
            )
        return NtfsIndexRecord.from_bytes(self._data[offset:end], self.position + offset)

    def record_from_vcn(self, index_record_size: int, vcn: Vcn) -> NtfsIndexRecord:
        """Return the index record at the given VCN, checking that it reports that VCN."""
        offset = vcn.offset(self.cluster_size)
        if not 0 <= offset < len(self._data):
            raise VcnOutOfBoundsError(self.position, vcn)

        record = self._read_record(offset, index_record_size)
        if record.vcn() != vcn:
            raise VcnMismatchError(self.position, vcn, record.vcn())
        return record

    def records(self, index_record_size: int) -> Iterator[NtfsIndexRecord]:
        """Yield every index record of this allocation in order."""
        for offset in range(0, len(self._data), index_record_size):
            yield self._read_record(offset, index_record_size)

    def __repr__(self) -> str:
        return (
            f"NtfsIndexAllocation(position={self.position}, length={len(self._data)}, "
            f"cluster_size={self.cluster_size})"
        )