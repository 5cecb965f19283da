"""
Wire encodings for HEC uploads.

Raw mode forwards each payload followed by a newline. Event mode wraps
every entry into a compact JSON object with `event`, `time` and
`sourcetype` fields, one object per line.
"""

from __future__ import annotations

import enum
import json
import threading
from typing import List, Optional

from .entry import NANOS_PER_SECOND, Entry, Timestamp


class EmbedStrategy(str, enum.Enum):
  """How JSON-object payloads are placed in the `event` field."""

  OBJECT = "embed-as-object"
  STRING = "embed-as-string"
  ALTERNATE = "alternate"


def time_float(ts: Timestamp) -> float:
  """
  Fractional Unix epoch seconds for `ts`.

  Collectors reject negative epoch values, so anything before 1970 is
  reported as 0.
  """
  if ts.before_epoch():
    return 0.0
  return float(ts.sec) + float(ts.nsec) / NANOS_PER_SECOND


def looks_like_object(data: bytes) -> bool:
  return len(data) >= 2 and data[:1] == b"{" and data[-1:] == b"}"


def quote_payload(data: bytes) -> str:
  return json.dumps(data.decode("utf-8", errors="replace"), ensure_ascii=False)


def _reject_constant(name: str) -> None:
  raise ValueError(f"{name} is not valid JSON")


def _as_object(data: bytes) -> Optional[str]:
  try:
    json.loads(data, parse_constant=_reject_constant)
  except (ValueError, RecursionError):
    # Collectors reject NaN/Infinity; very deep nesting is sent quoted too.
    return None
  # Whitespace outside of JSON strings is insignificant; keep one record per line.
  return data.decode("utf-8").replace("\r", " ").replace("\n", " ")


class RawEncoder:
  def encode(self, entry: Entry) -> bytes:
    return entry.data + b"\n"


class EventEncoder:
  """
  Encoder for the JSON event endpoint.

  The sourcetype is fixed per connection. The alternate strategy flips
  between object and string embedding on every JSON-object payload,
  starting with object embedding.
  """

  def __init__(self, sourcetype: str, strategy: EmbedStrategy = EmbedStrategy.OBJECT) -> None:
    self.sourcetype = sourcetype
    self.strategy = EmbedStrategy(strategy)
    self._embed_next = True
    self._lock = threading.Lock()

  def _embed_as_object(self) -> bool:
    if self.strategy is EmbedStrategy.OBJECT:
      return True
    if self.strategy is EmbedStrategy.STRING:
      return False
    with self._lock:
      current = self._embed_next
      self._embed_next = not current
    return current

  def event_field(self, data: bytes) -> Optional[str]:
    if not data:
      return None
    if looks_like_object(data) and self._embed_as_object():
      embedded = _as_object(data)
      if embedded is not None:
        return embedded
    return quote_payload(data)

  def encode(self, entry: Entry) -> bytes:
    fields: List[str] = []
    event = self.event_field(entry.data)
    if event is not None:
      fields.append(f'"event":{event}')
    ts = time_float(entry.ts)
    if ts:
      fields.append(f'"time":{json.dumps(ts)}')
    if self.sourcetype:
      fields.append(f'"sourcetype":{json.dumps(self.sourcetype, ensure_ascii=False)}')
    return ("{" + ",".join(fields) + "}\n").encode("utf-8")


def make_encoder(raw_mode: bool, sourcetype: str, strategy: EmbedStrategy = EmbedStrategy.OBJECT):
  if raw_mode:
    return RawEncoder()
  return EventEncoder(sourcetype, strategy)
