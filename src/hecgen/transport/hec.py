from __future__ import annotations

import logging
from typing import Iterable, Optional, Tuple

import httpx

from ..config import GeneratorConfig
from ..encoder import make_encoder
from ..entry import Entry, Timestamp
from ..errors import RequestError
from ..pipeline import UploadPipeline
from ..resolver import IPAddress, resolve_source_ip
from ..tags import TagTable

_logger = logging.getLogger("hecgen.transport")


class HecConnection:
  """
  Ingest connection that streams entries to an HTTP Event Collector.

  The whole lifetime of the connection maps onto one chunked POST: every
  write appends to the request body and `close()` ends it, then reports
  how the collector answered. Nothing is retried; a failed connection has
  to be replaced.

  Raw mode forwards payloads line by line and passes the default tag as
  the `sourcetype` query parameter. Event mode wraps every entry in a JSON
  event carrying the same sourcetype.
  """

  def __init__(
    self,
    config: GeneratorConfig,
    name: Optional[str] = None,
    timeout: Optional[float] = None,
    transport: Optional[httpx.BaseTransport] = None,
  ) -> None:
    self.config = config
    self.name = name or config.name
    self.timeout = timeout if timeout is not None else config.timeout
    self.url = config.hec_url
    self.auth = f"Splunk {config.auth}"
    self.tags = TagTable(config.tag)
    self._encoder = make_encoder(config.raw_mode, config.tag, config.embed_strategy)

    try:
      httpx.URL(self.url)
    except httpx.InvalidURL as exc:
      raise RequestError(f"invalid collector URL {self.url!r}: {exc}") from exc

    self._src = resolve_source_ip(self.url, timeout=self.timeout)

    params = {"sourcetype": config.tag} if config.raw_mode else None
    self._pipeline = UploadPipeline(
      self.url,
      headers={"Authorization": self.auth, "User-Agent": self.name},
      params=params,
      timeout=self.timeout,
      maxsize=config.buffer_size,
      transport=transport,
    )
    self._pipeline.start()
    _logger.debug(
      "HEC connection to %s open (source %s, %s mode)",
      self.url,
      self._src,
      "raw" if config.raw_mode else "event",
    )

  def __enter__(self) -> "HecConnection":
    return self

  def __exit__(self, exc_type, exc, tb) -> None:
    self.close()

  def write(self, ts: Timestamp, tag: int, data: bytes) -> None:
    self.write_entry(Entry(ts=ts, tag=tag, data=data))

  def write_entry(self, entry: Entry) -> None:
    self._pipeline.write(self._encoder.encode(entry))

  def write_batch(self, entries: Iterable[Entry]) -> None:
    for entry in entries:
      self.write_entry(entry)

  def negotiate_tag(self, name: str) -> int:
    return self.tags.negotiate(name)

  def lookup_tag(self, tag: int) -> Tuple[str, bool]:
    return self.tags.lookup(tag)

  def get_tag(self, name: str) -> int:
    return self.tags.resolve(name)

  def source_ip(self) -> IPAddress:
    return self._src

  def wait_for_hot(self, timeout: Optional[float] = None) -> None:
    # The collector has no warm-up phase to wait for.
    return None

  def sync(self, timeout: Optional[float] = None) -> None:
    return None

  def close(self) -> None:
    self._pipeline.close()

  @property
  def closed(self) -> bool:
    return self._pipeline.terminated
