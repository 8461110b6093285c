"""NTFS timestamps: 100-nanosecond intervals since 1601-01-01 UTC."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from ntfsparse.types import InvalidTimeError

_U64_MAX = (1 << 64) - 1

# 100-nanosecond intervals between 1601-01-01 and 1970-01-01.
_EPOCH_DIFFERENCE_IN_INTERVALS = 116_444_736_000_000_000
_INTERVALS_PER_SECOND = 10_000_000
_INTERVALS_PER_MICROSECOND = 10

_UNIX_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_NT_EPOCH = datetime(1601, 1, 1, tzinfo=timezone.utc)


@dataclass(frozen=True, order=True)
class NtfsTime:
    """A file time as stored by NTFS."""

    nt_timestamp: int

    def __post_init__(self) -> None:
        if not isinstance(self.nt_timestamp, int) or isinstance(self.nt_timestamp, bool):
            raise TypeError("an NTFS timestamp must be an integer")
        if not 0 <= self.nt_timestamp <= _U64_MAX:
            raise ValueError(f"NTFS timestamp {self.nt_timestamp} is outside the 64-bit range")

    @classmethod
    def from_datetime(cls, dt: datetime) -> "NtfsTime":
        """Convert a datetime (naive values are taken as UTC) to an NTFS timestamp."""
        if dt.tzinfo is None:
            dt = dt.replace(tzinfo=timezone.utc)
        delta = dt - _UNIX_EPOCH
        intervals_since_unix_epoch = (
            (delta.days * 86_400 + delta.seconds) * _INTERVALS_PER_SECOND
            + delta.microseconds * _INTERVALS_PER_MICROSECOND
        )
        nt_timestamp = intervals_since_unix_epoch + _EPOCH_DIFFERENCE_IN_INTERVALS
        if not 0 <= nt_timestamp <= _U64_MAX:
            raise InvalidTimeError()
        return cls(nt_timestamp)

    def to_datetime(self) -> datetime:
        """Return this timestamp as an aware UTC datetime, truncated to microseconds."""
        try:
            return _NT_EPOCH + timedelta(
                microseconds=self.nt_timestamp // _INTERVALS_PER_MICROSECOND
            )
        except OverflowError as exc:
            raise InvalidTimeError() from exc

    @classmethod
    def now(cls) -> "NtfsTime":
        """Return the current time as an NTFS timestamp."""
        return cls.from_datetime(datetime.now(timezone.utc))