from __future__ import annotations

import ipaddress
import logging
import socket
from typing import Optional, Tuple, Union
from urllib.parse import urlsplit

from .errors import ResolutionError

IPAddress = Union[ipaddress.IPv4Address, ipaddress.IPv6Address]

_DEFAULT_PORTS = {"http": 80, "https": 443}

_logger = logging.getLogger(__name__)


def endpoint_address(url: str) -> Tuple[str, int]:
  """
  Extract (host, port) from an http(s) URL, filling in the scheme's
  default port when none is given.
  """
  try:
    parts = urlsplit(url)
    port = parts.port
  except ValueError as exc:
    raise ResolutionError(f"cannot parse endpoint {url!r}: {exc}") from exc

  host = parts.hostname
  if not host:
    raise ResolutionError(f"endpoint {url!r} has no host")
  if port is None:
    port = _DEFAULT_PORTS.get(parts.scheme.lower())
    if port is None:
      raise ResolutionError(f"endpoint {url!r} has no port and an unknown scheme")
  return host, port


def resolve_source_ip(url: str, timeout: Optional[float] = None) -> IPAddress:
  """
  Learn the local address used to reach the endpoint behind `url`.

  A throwaway TCP connection is opened and closed right away; nothing is
  sent on it.
  """
  host, port = endpoint_address(url)
  try:
    with socket.create_connection((host, port), timeout=timeout) as sock:
      local = sock.getsockname()[0]
  except OSError as exc:
    raise ResolutionError(f"failed to connect to {host}:{port}: {exc}") from exc

  # IPv6 link-local addresses may carry a zone suffix.
  local = local.split("%", 1)[0]
  try:
    addr = ipaddress.ip_address(local)
  except ValueError as exc:
    raise ResolutionError(f"unparseable local address {local!r}") from exc

  _logger.debug("resolved source address %s for %s:%s", addr, host, port)
  return addr
