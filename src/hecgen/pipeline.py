from __future__ import annotations

import enum
import logging
import queue
import threading
from typing import Any, Dict, Iterator, Optional

import httpx

from .errors import HecError, RemoteRejection, RequestError, TransportError

MAX_ERROR_BODY = 512

_POLL_INTERVAL = 0.1
_PENDING = object()

_logger = logging.getLogger(__name__)


class PipelineState(enum.Enum):
  IDLE = "idle"
  STREAMING = "streaming"
  TERMINATED = "terminated"


class UploadPipeline:
  """
  Single long-lived HTTP upload fed from a bounded in-process queue.

  One background worker thread owns exactly one POST request whose body is
  the stream of chunks handed over through `write()`. The request finishes
  when `close()` ends the body (or the transport fails), and its result is
  posted once to a single-slot outcome queue that `wait()` reads.

  Writers block while the queue is full, which is the only backpressure:
  the worker drains it as fast as the socket accepts data.
  """

  def __init__(
    self,
    url: str,
    headers: Dict[str, str],
    params: Optional[Dict[str, str]] = None,
    timeout: Optional[float] = None,
    maxsize: int = 1024,
    transport: Optional[httpx.BaseTransport] = None,
  ) -> None:
    self.url = url
    self.headers = dict(headers)
    self.params = dict(params or {})
    self._timeout = httpx.Timeout(timeout)
    self._transport = transport
    self._chunks: "queue.Queue[Optional[bytes]]" = queue.Queue(maxsize=maxsize)
    self._outcome: "queue.Queue[Optional[HecError]]" = queue.Queue(maxsize=1)
    self._terminated = threading.Event()
    self._lock = threading.Lock()
    self._wait_lock = threading.Lock()
    self._write_lock = threading.Lock()
    self._closed = False
    self._result: Any = _PENDING
    self._thread: Optional[threading.Thread] = None
    self.state = PipelineState.IDLE

  def start(self) -> None:
    """
    Open the upload request on a background thread. Later calls are no-ops.
    """
    with self._lock:
      if self.state is not PipelineState.IDLE or self._closed:
        return
      self._thread = threading.Thread(target=self._run, name="hecgen-upload", daemon=True)
      self.state = PipelineState.STREAMING
      self._thread.start()

  @property
  def terminated(self) -> bool:
    return self._terminated.is_set()

  def write(self, chunk: bytes) -> None:
    # Held across the offer so no chunk can land behind the end-of-body sentinel.
    with self._write_lock:
      if self._closed:
        raise TransportError("write on closed upload stream")
      if not chunk:
        return
      if not self._offer(chunk):
        raise TransportError("upload stream already terminated")

  def close(self) -> None:
    """
    End the request body and wait for the upload's terminal outcome.

    Raises the error the upload finished with. Safe to call more than once;
    later calls report the same outcome.
    """
    with self._write_lock:
      with self._lock:
        first = not self._closed
        self._closed = True
        never_started = self.state is PipelineState.IDLE
        if first and never_started:
          self._finish(None)

      if first and not never_started:
        # A terminated worker no longer reads the queue; its outcome says why.
        self._offer(None)
    self.wait()

  def wait(self) -> None:
    with self._wait_lock:
      if self._result is _PENDING:
        self._result = self._outcome.get()
    if self._result is not None:
      raise self._result

  def _offer(self, item: Optional[bytes]) -> bool:
    while not self._terminated.is_set():
      try:
        self._chunks.put(item, timeout=_POLL_INTERVAL)
        return True
      except queue.Full:
        continue
    return False

  def _body(self) -> Iterator[bytes]:
    while True:
      chunk = self._chunks.get()
      if chunk is None:
        return
      yield chunk

  def _finish(self, outcome: Optional[HecError]) -> None:
    self.state = PipelineState.TERMINATED
    self._terminated.set()
    self._outcome.put_nowait(outcome)

  def _run(self) -> None:
    _logger.debug("upload stream to %s started", self.url)
    try:
      outcome = self._upload()
    except Exception as exc:
      # The outcome slot must always be filled or close() never returns.
      outcome = TransportError(f"upload worker failed: {exc!r}")
      outcome.__cause__ = exc
    if outcome is None:
      _logger.debug("upload stream to %s completed", self.url)
    else:
      _logger.warning("upload stream to %s failed: %s", self.url, outcome)
    self._finish(outcome)

  def _upload(self) -> Optional[HecError]:
    try:
      with httpx.Client(timeout=self._timeout, transport=self._transport) as client:
        with client.stream(
          "POST",
          self.url,
          params=self.params or None,
          headers=self.headers,
          content=self._body(),
        ) as response:
          if response.status_code == httpx.codes.OK:
            return None
          return RemoteRejection(
            response.status_code,
            response.reason_phrase,
            _read_limited(response, MAX_ERROR_BODY),
          )
    except (httpx.InvalidURL, httpx.UnsupportedProtocol) as exc:
      err: HecError = RequestError(f"invalid upload request to {self.url}: {exc}")
      err.__cause__ = exc
      return err
    except httpx.HTTPError as exc:
      err = TransportError(f"upload to {self.url} failed: {exc!r}")
      err.__cause__ = exc
      return err


def _read_limited(response: httpx.Response, limit: int) -> bytes:
  buf = bytearray()
  try:
    for chunk in response.iter_bytes():
      buf.extend(chunk)
      if len(buf) >= limit:
        break
  except httpx.HTTPError as exc:
    _logger.warning("failed to read rejection body: %s", exc)
  return bytes(buf[:limit])
