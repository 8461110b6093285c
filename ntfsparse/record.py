"""Multi-sector records protected by an update sequence array (FILE, INDX)."""

from __future__ import annotations

import struct

from ntfsparse.types import Position, UpdateSequenceError

NTFS_BLOCK_SIZE = 512

# signature, update_sequence_offset, update_sequence_count, logfile_sequence_number
_RECORD_HEADER = struct.Struct("<4sHHQ")
_USO_OFFSET = 4
_USC_OFFSET = 6
_U16 = 2


class Record:
    """Raw bytes of a record read from the filesystem, together with its position."""

    __slots__ = ("_data", "position")

    def __init__(self, data: bytes, position: Position) -> None:
        self._data = bytearray(data)
        self.position = position

    @property
    def data(self) -> bytes:
        """The record bytes (after fixup, once :meth:`fixup` has run)."""
        return bytes(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def signature(self) -> bytes:
        """Return the four signature bytes at the start of the record."""
        return bytes(self._data[:4])

    def _read_u16(self, offset: int) -> int:
        (value,) = struct.unpack_from("<H", self._data, offset)
        return value

    def _update_sequence_offset(self) -> int:
        return self._read_u16(_USO_OFFSET)

    def _update_sequence_count(self) -> int:
        return self._read_u16(_USC_OFFSET)

    def update_sequence_size(self) -> int:
        """Return the size of the update sequence (number plus array), in bytes."""
        return self._update_sequence_count() * _U16

    def fixup(self) -> None:
        """Restore the last two bytes of every sector from the update sequence array.

        Raises :class:`UpdateSequenceError` if a sector does not end with the update
        sequence number or the array reaches beyond the record.
        """
        offset = self._update_sequence_offset()
        usn = bytes(self._data[offset:offset + _U16])
        array_end = offset + self.update_sequence_size()
        array_count = self._update_sequence_count() - _U16

        for array_position, sector_position in zip(
            range(offset + _U16, array_end, _U16),
            range(NTFS_BLOCK_SIZE - _U16, 1 << 64, NTFS_BLOCK_SIZE),
        ):
            sector_end = sector_position + _U16
            if sector_end > len(self._data) or array_position + _U16 > len(self._data):
                raise UpdateSequenceError(
                    self.position,
                    f"the update sequence array with {array_count} entries exceeds "
                    f"the record size of {len(self._data)} bytes",
                )

            current = bytes(self._data[sector_position:sector_end])
            if current != usn:
                raise UpdateSequenceError(
                    self.position + array_position,
                    "the update sequence number does not match the end of the sector",
                    expected=usn,
                    actual=current,
                )

            self._data[sector_position:sector_end] = self._data[
                array_position:array_position + _U16
            ]