"""Strings stored in NTFS structures as little-endian UTF-16 code units."""

from __future__ import annotations

import struct
from functools import total_ordering
from itertools import zip_longest
from typing import Callable, Iterable, Iterator, Optional, Protocol, Union

_REPLACEMENT_CHARACTER = "\ufffd"
_MISSING = object()


class _Upcaser(Protocol):
    def to_uppercase(self, code_unit: int) -> int: ...


def _units_from_bytes(data: bytes) -> Iterator[int]:
    usable = len(data) - len(data) % 2
    return (unit for (unit,) in struct.iter_unpack("<H", data[:usable]))


def _units_of(value: Union["NtfsString", str]) -> Iterator[int]:
    if isinstance(value, NtfsString):
        return value.code_units()
    if isinstance(value, str):
        return _units_from_bytes(value.encode("utf-16-le", "surrogatepass"))
    raise TypeError(f"cannot compare an NtfsString with {type(value).__name__}")


def _decode_utf16(units: Iterable[int]) -> Iterator[Optional[str]]:
    """Yield each decoded character, or ``None`` for every unpaired surrogate."""
    iterator = iter(units)
    pending: Optional[int] = None
    while True:
        if pending is not None:
            unit, pending = pending, None
        else:
            unit = next(iterator, None)
            if unit is None:
                return
        if 0xD800 <= unit <= 0xDBFF:
            low = next(iterator, None)
            if low is not None and 0xDC00 <= low <= 0xDFFF:
                yield chr(0x10000 + ((unit - 0xD800) << 10) + (low - 0xDC00))
            else:
                yield None
                pending = low
        elif 0xDC00 <= unit <= 0xDFFF:
            yield None
        else:
            yield chr(unit)


def compare_code_units(
    this: Iterable[int],
    other: Iterable[int],
    code_unit_fn: Optional[Callable[[int], int]] = None,
) -> int:
    """Compare two sequences of UTF-16 code units, returning -1, 0 or 1.

    Each code unit is passed through ``code_unit_fn`` (if given) before comparing.
    A sequence that is a prefix of the other compares as smaller.
    """
    for this_unit, other_unit in zip_longest(this, other, fillvalue=_MISSING):
        if other_unit is _MISSING:
            return 1
        if this_unit is _MISSING:
            return -1
        if code_unit_fn is not None:
            this_unit = code_unit_fn(this_unit)
            other_unit = code_unit_fn(other_unit)
        if this_unit != other_unit:
            return -1 if this_unit < other_unit else 1
    return 0


def upcase_cmp(
    this: Union["NtfsString", str],
    other: Union["NtfsString", str],
    upcase_table: _Upcaser,
) -> int:
    """Compare two strings case-insensitively using the filesystem's $UpCase table."""
    return compare_code_units(_units_of(this), _units_of(other), upcase_table.to_uppercase)


@total_ordering
class NtfsString:
    """A string as stored in an NTFS structure: raw little-endian UTF-16 bytes."""

    __slots__ = ("_data",)

    def __init__(self, data: bytes) -> None:
        self._data = bytes(data)

    @property
    def data(self) -> bytes:
        """The raw bytes of this string."""
        return self._data

    def __len__(self) -> int:
        """Return the length in bytes, not in characters."""
        return len(self._data)

    def __str__(self) -> str:
        return self.to_string_lossy()

    def __repr__(self) -> str:
        return f"NtfsString({self.to_string_lossy()!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, (NtfsString, str)):
            return NotImplemented
        return compare_code_units(self.code_units(), _units_of(other)) == 0

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, (NtfsString, str)):
            return NotImplemented
        return compare_code_units(self.code_units(), _units_of(other)) < 0

    def __hash__(self) -> int:
        return hash(tuple(self.code_units()))

    def code_units(self) -> Iterator[int]:
        """Yield the UTF-16 code units; a trailing odd byte is ignored."""
        return _units_from_bytes(self._data)

    def to_string_checked(self) -> Optional[str]:
        """Decode to ``str``, or return ``None`` if the data is not valid UTF-16."""
        chars = []
        for char in _decode_utf16(self.code_units()):
            if char is None:
                return None
            chars.append(char)
        return "".join(chars)

    def to_string_lossy(self) -> str:
        """Decode to ``str``, replacing invalid data with U+FFFD."""
        return "".join(
            _REPLACEMENT_CHARACTER if char is None else char
            for char in _decode_utf16(self.code_units())
        )