import pytest

from ntfsparse.types import InvalidStructuredValueSizeError, Position
from ntfsparse.volume_name import VOLUME_NAME_MAX_SIZE, NtfsVolumeName


def test_volume_name():
    volume_name = NtfsVolumeName.from_bytes("mylabel".encode("utf-16-le"), Position(4096))
    assert volume_name.name_length() == 14
    assert volume_name.name() == "mylabel"


def test_empty_volume_name():
    volume_name = NtfsVolumeName.from_bytes(b"", Position(4096))
    assert volume_name.name_length() == 0
    assert volume_name.name() == ""


def test_maximum_size_accepted():
    data = "x".encode("utf-16-le") * 128
    volume_name = NtfsVolumeName.from_bytes(data, Position(1))
    assert volume_name.name_length() == VOLUME_NAME_MAX_SIZE


def test_too_long_raises():
    data = b"a\x00" * 129
    with pytest.raises(InvalidStructuredValueSizeError) as info:
        NtfsVolumeName.from_bytes(data, Position(4096))
    assert info.value.expected == 256
    assert info.value.actual == len(data)
    assert info.value.position == Position(4096)