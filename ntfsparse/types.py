"""Byte positions, cluster numbers and the errors raised while parsing NTFS structures."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

_U64_MAX = (1 << 64) - 1
_I64_MIN = -(1 << 63)
_I64_MAX = (1 << 63) - 1
_NONE_STR = "<NONE>"


class NtfsError(Exception):
    """Base class of every error raised while reading an NTFS filesystem."""


class InvalidStructuredValueSizeError(NtfsError):
    """A structured attribute value has a size that does not fit its structure."""

    def __init__(self, position: "Position", ty: str, expected: int, actual: int) -> None:
        self.position = position
        self.ty = ty
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"The {ty} structured value at byte position {position:#x} has a size of "
            f"{actual} bytes, but {expected} bytes are expected"
        )


class InvalidIndexEntrySizeError(NtfsError):
    """An index entry is smaller than its header or its declared length."""

    def __init__(self, position: "Position", expected: int, actual: int) -> None:
        self.position = position
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"The index entry at byte position {position:#x} has a size of {actual} bytes, "
            f"but {expected} bytes are expected"
        )


class InvalidIndexEntryDataRangeError(NtfsError):
    """A key, data or subnode range of an index entry lies outside the entry."""

    def __init__(self, position: "Position", start: int, end: int, size: int) -> None:
        self.position = position
        self.start = start
        self.end = end
        self.size = size
        super().__init__(
            f"The index entry at byte position {position:#x} references the range "
            f"{start}..{end}, which is outside its size of {size} bytes"
        )


class InvalidIndexSignatureError(NtfsError):
    """An index record does not carry the expected signature."""

    def __init__(self, position: "Position", expected: bytes, actual: bytes) -> None:
        self.position = position
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"The index record at byte position {position:#x} has signature {actual!r}, "
            f"expected {expected!r}"
        )


class InvalidIndexAllocatedSizeError(NtfsError):
    """An index record claims more allocated space than an index record has."""

    def __init__(self, position: "Position", expected: int, actual: int) -> None:
        self.position = position
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"The index record at byte position {position:#x} has an allocated size of "
            f"{actual} bytes, but the index record size is only {expected} bytes"
        )


class InvalidIndexUsedSizeError(NtfsError):
    """An index record claims more used space than it has allocated."""

    def __init__(self, position: "Position", expected: int, actual: int) -> None:
        self.position = position
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"The index record at byte position {position:#x} has a used size of "
            f"{actual} bytes, but only {expected} bytes are allocated"
        )


class InvalidIndexRootError(NtfsError):
    """An index root's entries offset or used size points outside its value."""

    def __init__(self, position: "Position", field: str, expected: int, actual: int) -> None:
        self.position = position
        self.field = field
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"The index root at byte position {position:#x} has an invalid {field}: "
            f"it needs {expected} bytes, but the value only has {actual} bytes"
        )


class UpdateSequenceError(NtfsError):
    """The update sequence array of a record is inconsistent with its sectors."""

    def __init__(
        self,
        position: "Position",
        detail: str,
        *,
        expected: Optional[bytes] = None,
        actual: Optional[bytes] = None,
    ) -> None:
        self.position = position
        self.detail = detail
        self.expected = expected
        self.actual = actual
        super().__init__(f"Update sequence error at byte position {position:#x}: {detail}")


class UnsupportedFileNamespaceError(NtfsError):
    """A file name carries a namespace value that is not known."""

    def __init__(self, position: "Position", actual: int) -> None:
        self.position = position
        self.actual = actual
        super().__init__(
            f"The file name at byte position {position:#x} has the unsupported namespace {actual}"
        )


class MissingIndexAllocationError(NtfsError):
    """A large index has no index allocation to hold its subnodes."""

    def __init__(self, position: "Position") -> None:
        self.position = position
        super().__init__(
            f"The index root at byte position {position:#x} is a large index, "
            f"but no matching index allocation exists"
        )


class VcnOutOfBoundsError(NtfsError):
    """A VCN points beyond the end of an index allocation."""

    def __init__(self, position: "Position", vcn: "Vcn") -> None:
        self.position = position
        self.vcn = vcn
        super().__init__(
            f"The VCN {vcn} is out of bounds for the index allocation at byte position {position:#x}"
        )


class VcnMismatchError(NtfsError):
    """An index record reports another VCN than the one it was read from."""

    def __init__(self, position: "Position", expected: "Vcn", actual: "Vcn") -> None:
        self.position = position
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"The index record in the index allocation at byte position {position:#x} "
            f"reports VCN {actual}, expected VCN {expected}"
        )


class InvalidUpcaseTableSizeError(NtfsError):
    """The $UpCase table does not have the size of one entry per BMP character."""

    def __init__(self, expected: int, actual: int) -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"The $UpCase table has a size of {actual} bytes, but {expected} bytes are expected"
        )


class InvalidTimeError(NtfsError):
    """A point in time cannot be represented as an NTFS timestamp."""

    def __init__(self) -> None:
        super().__init__("The given time cannot be represented as an NTFS timestamp")


class ClusterNumberTooBigError(NtfsError):
    """A cluster number cannot be turned into a byte position or offset."""

    def __init__(self, number: Union["Lcn", "Vcn"]) -> None:
        self.number = number
        super().__init__(
            f"The {type(number).__name__} {number} is too big to be turned into a byte position"
        )


@dataclass(frozen=True)
class Position:
    """An absolute nonzero byte position on the filesystem, or ``None`` if there is none."""

    value: Optional[int] = None

    def __post_init__(self) -> None:
        if self.value is None:
            return
        if not isinstance(self.value, int) or isinstance(self.value, bool):
            raise TypeError("a position must be an integer or None")
        if not 0 <= self.value <= _U64_MAX:
            raise ValueError(f"position {self.value} is outside the 64-bit unsigned range")
        if self.value == 0:
            object.__setattr__(self, "value", None)

    def __add__(self, other: int) -> "Position":
        if not isinstance(other, int) or isinstance(other, bool):
            return NotImplemented
        if self.value is None:
            return self
        return Position((self.value + other) & _U64_MAX)

    def __str__(self) -> str:
        return _NONE_STR if self.value is None else str(self.value)

    def __format__(self, spec: str) -> str:
        if self.value is None:
            return _NONE_STR
        return format(self.value, spec)


@dataclass(frozen=True, order=True)
class Lcn:
    """A Logical Cluster Number: an absolute cluster index into the filesystem."""

    value: int

    def __post_init__(self) -> None:
        if not isinstance(self.value, int) or isinstance(self.value, bool):
            raise TypeError("an LCN must be an integer")
        if not 0 <= self.value <= _U64_MAX:
            raise ValueError(f"LCN {self.value} is outside the 64-bit unsigned range")

    def __str__(self) -> str:
        return str(self.value)

    def __format__(self, spec: str) -> str:
        return format(self.value, spec)

    def checked_add(self, vcn: "Vcn") -> Optional["Lcn"]:
        """Add a VCN to this LCN, returning ``None`` if the result leaves the valid range."""
        result = self.value + vcn.value
        if not 0 <= result <= _U64_MAX:
            return None
        return Lcn(result)

    def position(self, cluster_size: int) -> Position:
        """Return the absolute byte position of this LCN for the given cluster size."""
        value = self.value * cluster_size
        if value > _U64_MAX:
            raise ClusterNumberTooBigError(self)
        return Position(value)


@dataclass(frozen=True, order=True)
class Vcn:
    """A Virtual Cluster Number, relative to an LCN or to the start of an attribute value."""

    value: int

    def __post_init__(self) -> None:
        if not isinstance(self.value, int) or isinstance(self.value, bool):
            raise TypeError("a VCN must be an integer")
        if not _I64_MIN <= self.value <= _I64_MAX:
            raise ValueError(f"VCN {self.value} is outside the 64-bit signed range")

    def __str__(self) -> str:
        return str(self.value)

    def __format__(self, spec: str) -> str:
        return format(self.value, spec)

    def offset(self, cluster_size: int) -> int:
        """Return the byte offset of this VCN for the given cluster size."""
        result = self.value * cluster_size
        if not _I64_MIN <= result <= _I64_MAX:
            raise ClusterNumberTooBigError(self)
        return result