from __future__ import annotations

from typing import Optional


class HecError(Exception):
  """
  Base class for every error raised by the HEC transport.
  """


class ResolutionError(HecError):
  """
  The endpoint could not be resolved or reached while probing for the
  local source address. Raised during construction only.
  """


class RequestError(HecError):
  """
  The upload request could not be built (bad URL, unsupported scheme).
  """


class TransportError(HecError):
  """
  Network-level failure on the streaming request, or a write issued after
  the upload stream has already terminated.
  """


class RemoteRejection(HecError):
  """
  The collector answered with a non-200 status.
  """

  def __init__(self, status_code: int, reason: str, body: bytes = b"") -> None:
    self.status_code = status_code
    self.reason = reason
    self.body = body
    text = body.decode("utf-8", errors="replace")
    super().__init__(f"invalid status {status_code} ({status_code} {reason})\n{text}")


class InvalidTagName(HecError, ValueError):
  def __init__(self, name: str, detail: Optional[str] = None) -> None:
    self.name = name
    msg = f"invalid tag name {name!r}"
    if detail:
      msg = f"{msg}: {detail}"
    super().__init__(msg)


class TagNotFound(HecError, KeyError):
  def __init__(self, name: str) -> None:
    self.name = name
    super().__init__(f"tag {name!r} not found")

  def __str__(self) -> str:
    # KeyError quotes its argument; keep the plain message.
    return str(self.args[0])
