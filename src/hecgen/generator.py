"""
Synthetic log entry generation.

Entries are spaced one millisecond apart and alternate between JSON
object payloads and plain text lines, so both event-mode embedding paths
get exercised.
"""

from __future__ import annotations

import json
import logging
import random
from typing import Iterator, List, Optional

from .entry import Entry, Timestamp
from .transport.base import IngestTransport

_logger = logging.getLogger(__name__)

_HOSTS = ["web-01", "web-02", "db-01", "cache-01", "worker-07"]
_USERS = ["alice", "bob", "carol", "dave", "eve"]
_ACTIONS = ["login", "logout", "read", "write", "delete", "update"]
_LEVELS = ["DEBUG", "INFO", "INFO", "INFO", "WARN", "ERROR"]

STEP_NANOS = 1_000_000


def _json_payload(rng: random.Random, seq: int) -> bytes:
  record = {
    "seq": seq,
    "host": rng.choice(_HOSTS),
    "user": rng.choice(_USERS),
    "action": rng.choice(_ACTIONS),
    "bytes": rng.randint(0, 65535),
    "ok": rng.random() > 0.1,
  }
  return json.dumps(record, separators=(",", ":")).encode("utf-8")


def _text_payload(rng: random.Random, seq: int) -> bytes:
  return (
    f"{rng.choice(_LEVELS)} seq={seq} host={rng.choice(_HOSTS)} "
    f"user={rng.choice(_USERS)} action={rng.choice(_ACTIONS)} "
    f"latency_ms={rng.randint(1, 2500)}"
  ).encode("utf-8")


def generate_entries(
  count: int,
  tag: int,
  seed: Optional[int] = None,
  start: Optional[Timestamp] = None,
) -> Iterator[Entry]:
  rng = random.Random(seed)
  ts = start or Timestamp.now()
  for seq in range(count):
    if seq % 2 == 0:
      data = _json_payload(rng, seq)
    else:
      data = _text_payload(rng, seq)
    yield Entry(ts=ts, tag=tag, data=data)
    ts = ts.add_nanos(STEP_NANOS)


def run_generator(
  conn: IngestTransport,
  tag_name: str,
  count: int,
  batch_size: int = 50,
  seed: Optional[int] = None,
) -> int:
  """
  Negotiate `tag_name` and push `count` synthetic entries through `conn`
  in batches. Returns the number of entries written.
  """
  tag = conn.negotiate_tag(tag_name)
  conn.wait_for_hot()

  written = 0
  batch: List[Entry] = []
  for entry in generate_entries(count, tag, seed=seed):
    batch.append(entry)
    if len(batch) >= batch_size:
      conn.write_batch(batch)
      written += len(batch)
      batch = []
  if batch:
    conn.write_batch(batch)
    written += len(batch)

  conn.sync()
  _logger.info("wrote %d entries with tag %s", written, tag_name)
  return written
