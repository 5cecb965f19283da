from __future__ import annotations

from typing import Iterable, Optional, Protocol, Tuple, runtime_checkable

from ..entry import Entry, Timestamp
from ..resolver import IPAddress


@runtime_checkable
class IngestTransport(Protocol):
  """
  Contract a generator drives its ingest connection through.

  Every backend (the indexer muxer or the HTTP collector) exposes the same
  methods so the generator can use either without changes.
  """

  def write(self, ts: Timestamp, tag: int, data: bytes) -> None: ...

  def write_entry(self, entry: Entry) -> None: ...

  def write_batch(self, entries: Iterable[Entry]) -> None: ...

  def negotiate_tag(self, name: str) -> int: ...

  def lookup_tag(self, tag: int) -> Tuple[str, bool]: ...

  def source_ip(self) -> IPAddress: ...

  def wait_for_hot(self, timeout: Optional[float] = None) -> None: ...

  def sync(self, timeout: Optional[float] = None) -> None: ...

  def close(self) -> None: ...
