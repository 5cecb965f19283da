import socket
from typing import Iterator, List, Tuple

import httpx
import pytest


@pytest.fixture
def listener() -> Iterator[Tuple[str, int]]:
  """A loopback TCP socket that accepts connections into its backlog."""
  server = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
  server.bind(("127.0.0.1", 0))
  server.listen(16)
  try:
    yield server.getsockname()
  finally:
    server.close()


@pytest.fixture
def closed_port() -> int:
  sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
  sock.bind(("127.0.0.1", 0))
  port = sock.getsockname()[1]
  sock.close()
  return port


class RecordingCollector:
  """MockTransport handler that keeps every request it was sent."""

  def __init__(self, status: int = 200, body: bytes = b"") -> None:
    self.status = status
    self.body = body
    self.requests: List[httpx.Request] = []

  def __call__(self, request: httpx.Request) -> httpx.Response:
    self.requests.append(request)
    return httpx.Response(self.status, content=self.body)

  @property
  def last(self) -> httpx.Request:
    return self.requests[-1]


@pytest.fixture
def collector() -> RecordingCollector:
  return RecordingCollector()
