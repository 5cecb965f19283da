from datetime import datetime, timedelta, timezone

import pytest

from hecgen.encoder import time_float
from hecgen.entry import Timestamp


def test_time_float_is_zero_before_epoch():
  assert time_float(Timestamp(sec=-1, nsec=0)) == 0
  assert time_float(Timestamp(sec=-1, nsec=999_999_999)) == 0
  assert time_float(Timestamp(sec=-86400 * 365 * 50, nsec=5)) == 0


def test_time_float_adds_fractional_seconds():
  assert time_float(Timestamp(sec=0, nsec=0)) == 0.0
  assert time_float(Timestamp(sec=1_700_000_000, nsec=500_000_000)) == pytest.approx(1_700_000_000.5)
  assert time_float(Timestamp(sec=12, nsec=1)) == pytest.approx(12.000000001)


def test_timestamp_from_nanos_handles_negative_values():
  ts = Timestamp.from_nanos(-1)
  assert ts.sec == -1
  assert ts.nsec == 999_999_999
  assert ts.before_epoch()


def test_timestamp_from_datetime_naive_is_utc():
  naive = Timestamp.from_datetime(datetime(2024, 1, 2, 3, 4, 5, 250000))
  aware = Timestamp.from_datetime(datetime(2024, 1, 2, 3, 4, 5, 250000, tzinfo=timezone.utc))
  assert naive == aware
  assert aware.nsec == 250_000_000


def test_timestamp_from_datetime_before_epoch():
  ts = Timestamp.from_datetime(datetime(1969, 12, 31, 23, 59, 59, tzinfo=timezone.utc))
  assert ts.sec == -1
  assert ts.before_epoch()


def test_timestamp_from_datetime_respects_offset():
  tz = timezone(timedelta(hours=2))
  ts = Timestamp.from_datetime(datetime(1970, 1, 1, 2, 0, 0, tzinfo=tz))
  assert ts == Timestamp(sec=0, nsec=0)


def test_timestamp_rejects_out_of_range_nanos():
  with pytest.raises(ValueError):
    Timestamp(sec=1, nsec=1_000_000_000)


def test_add_nanos_carries_into_seconds():
  ts = Timestamp(sec=10, nsec=999_000_000).add_nanos(2_000_000)
  assert ts == Timestamp(sec=11, nsec=1_000_000)
