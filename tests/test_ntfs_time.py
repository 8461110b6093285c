from datetime import datetime, timedelta, timezone

import pytest
from hypothesis import given
from hypothesis import strategies as st

from ntfsparse.ntfs_time import NtfsTime
from ntfsparse.types import InvalidTimeError

NT_TIMESTAMP_2021_01_01 = 132539328000000000


def test_from_datetime_known_value():
    dt = datetime(2013, 1, 5, 18, 15, tzinfo=timezone.utc)
    nt = NtfsTime.from_datetime(dt)
    assert nt.nt_timestamp == 130018833000000000
    assert nt.to_datetime() == dt


def test_nt_epoch_is_zero():
    dt = datetime(1601, 1, 1, tzinfo=timezone.utc)
    assert NtfsTime.from_datetime(dt).nt_timestamp == 0
    assert NtfsTime(0).to_datetime() == dt


def test_before_nt_epoch_is_invalid():
    dt = datetime(1600, 12, 31, 23, 59, 59, tzinfo=timezone.utc)
    with pytest.raises(InvalidTimeError):
        NtfsTime.from_datetime(dt)


def test_now_is_after_2021():
    assert NtfsTime.now().nt_timestamp > NT_TIMESTAMP_2021_01_01


def test_naive_datetime_is_utc():
    naive = datetime(2013, 1, 5, 18, 15)
    aware = datetime(2013, 1, 5, 18, 15, tzinfo=timezone.utc)
    assert NtfsTime.from_datetime(naive) == NtfsTime.from_datetime(aware)


def test_other_timezone_same_instant():
    utc = datetime(2013, 1, 5, 18, 15, tzinfo=timezone.utc)
    shifted = utc.astimezone(timezone(timedelta(hours=5, minutes=30)))
    assert NtfsTime.from_datetime(shifted) == NtfsTime.from_datetime(utc)


def test_sub_microsecond_intervals_are_truncated():
    base = NtfsTime.from_datetime(datetime(2013, 1, 5, 18, 15, tzinfo=timezone.utc))
    finer = NtfsTime(base.nt_timestamp + 9)
    assert finer.to_datetime() == base.to_datetime()


def test_unrepresentable_timestamp_to_datetime():
    with pytest.raises(InvalidTimeError):
        NtfsTime((1 << 64) - 1).to_datetime()


def test_rejects_out_of_range_timestamp():
    with pytest.raises(ValueError):
        NtfsTime(-1)
    with pytest.raises(ValueError):
        NtfsTime(1 << 64)


def test_ordering_follows_timestamps():
    earlier = NtfsTime.from_datetime(datetime(2000, 1, 1, tzinfo=timezone.utc))
    later = NtfsTime.from_datetime(datetime(2020, 1, 1, tzinfo=timezone.utc))
    assert earlier < later


@given(
    st.datetimes(
        min_value=datetime(1601, 1, 1),
        max_value=datetime(9999, 12, 31, 23, 59, 59),
        timezones=st.just(timezone.utc),
    )
)
def test_datetime_round_trip(dt):
    assert NtfsTime.from_datetime(dt).to_datetime() == dt