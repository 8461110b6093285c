"""The $VOLUME_INFORMATION structured value."""

from __future__ import annotations

import struct
from dataclasses import dataclass
from enum import IntFlag
from functools import reduce
from operator import or_

from ntfsparse.types import InvalidStructuredValueSizeError, Position

_VOLUME_INFORMATION = struct.Struct("<QBBH")
_VOLUME_INFORMATION_SIZE = _VOLUME_INFORMATION.size


class NtfsVolumeFlags(IntFlag):
    """Flags set for an NTFS volume."""

    IS_DIRTY = 0x0001
    RESIZE_LOG_FILE = 0x0002
    UPGRADE_ON_MOUNT = 0x0004
    MOUNTED_ON_NT4 = 0x0008
    DELETE_USN_UNDERWAY = 0x0010
    REPAIR_OBJECT_ID = 0x0020
    CHKDSK_UNDERWAY = 0x4000
    MODIFIED_BY_CHKDSK = 0x8000


_KNOWN_VOLUME_FLAGS = reduce(or_, (member.value for member in NtfsVolumeFlags), 0)


@dataclass(frozen=True)
class NtfsVolumeInformation:
    """General information about the volume, such as the NTFS version."""

    major_version: int
    minor_version: int
    flags: NtfsVolumeFlags

    @classmethod
    def from_bytes(cls, data: bytes, position: Position) -> "NtfsVolumeInformation":
        """Parse a $VOLUME_INFORMATION value; unknown flag bits are dropped."""
        if len(data) < _VOLUME_INFORMATION_SIZE:
            raise InvalidStructuredValueSizeError(
                position, "VolumeInformation", _VOLUME_INFORMATION_SIZE, len(data)
            )
        _reserved, major, minor, raw_flags = _VOLUME_INFORMATION.unpack_from(data)
        return cls(
            major_version=major,
            minor_version=minor,
            flags=NtfsVolumeFlags(raw_flags & _KNOWN_VOLUME_FLAGS),
        )