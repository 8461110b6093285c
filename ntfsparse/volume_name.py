"""The $VOLUME_NAME structured value."""

from __future__ import annotations

from ntfsparse.ntfs_string import NtfsString
from ntfsparse.types import InvalidStructuredValueSizeError, Position

# A volume name holds at most 128 UTF-16 code units.
VOLUME_NAME_MAX_SIZE = 128 * 2


class NtfsVolumeName:
    """The user-defined name (label) of an NTFS volume."""

    __slots__ = ("_name",)

    def __init__(self, name: bytes) -> None:
        self._name = bytes(name)

    @classmethod
    def from_bytes(cls, data: bytes, position: Position) -> "NtfsVolumeName":
        """Parse a $VOLUME_NAME value."""
        if len(data) > VOLUME_NAME_MAX_SIZE:
            raise InvalidStructuredValueSizeError(
                position, "VolumeName", VOLUME_NAME_MAX_SIZE, len(data)
            )
        return cls(data)

    def name(self) -> NtfsString:
        """Return the volume name."""
        return NtfsString(self._name)

    def name_length(self) -> int:
        """Return the volume name length, in bytes."""
        return len(self._name)

    def __repr__(self) -> str:
        return f"NtfsVolumeName({self.name().to_string_lossy()!r})"