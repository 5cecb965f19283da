from __future__ import annotations

import time
from dataclasses import dataclass
from datetime import datetime, timezone

NANOS_PER_SECOND = 1_000_000_000


@dataclass(frozen=True)
class Timestamp:
  """
  Point in time as whole seconds relative to the Unix epoch plus a
  nanosecond remainder. `sec` is negative for instants before 1970.
  """

  sec: int
  nsec: int = 0

  def __post_init__(self) -> None:
    if not 0 <= self.nsec < NANOS_PER_SECOND:
      raise ValueError(f"nsec out of range: {self.nsec}")

  @classmethod
  def now(cls) -> "Timestamp":
    return cls.from_nanos(time.time_ns())

  @classmethod
  def from_nanos(cls, nanos: int) -> "Timestamp":
    sec, nsec = divmod(nanos, NANOS_PER_SECOND)
    return cls(sec=sec, nsec=nsec)

  @classmethod
  def from_datetime(cls, dt: datetime) -> "Timestamp":
    """
    Convert a datetime; naive values are taken as UTC.
    """
    if dt.tzinfo is None:
      dt = dt.replace(tzinfo=timezone.utc)
    delta = dt - datetime(1970, 1, 1, tzinfo=timezone.utc)
    nanos = (delta.days * 86400 + delta.seconds) * NANOS_PER_SECOND + delta.microseconds * 1000
    return cls.from_nanos(nanos)

  def before_epoch(self) -> bool:
    return self.sec < 0

  def add_nanos(self, nanos: int) -> "Timestamp":
    return Timestamp.from_nanos(self.sec * NANOS_PER_SECOND + self.nsec + nanos)


@dataclass(frozen=True)
class Entry:
  """
  A single log entry handed to a transport.
  """

  ts: Timestamp
  tag: int
  data: bytes
