from __future__ import annotations

import logging
import sys
from typing import Optional

_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class _HecgenStreamHandler(logging.StreamHandler):
  """Marker type so repeated setup calls can find the installed handler."""


def setup_logging(verbose: bool = False, logger: Optional[logging.Logger] = None) -> logging.Logger:
  """
  Send hecgen log output to stderr.

  Adds one stream handler to the `hecgen` logger (or the one given); calling
  it again only adjusts the level.
  """
  target_logger = logger or logging.getLogger("hecgen")
  level = logging.DEBUG if verbose else logging.INFO
  target_logger.setLevel(level)

  for existing in target_logger.handlers:
    if isinstance(existing, _HecgenStreamHandler):
      return target_logger

  handler = _HecgenStreamHandler(sys.stderr)
  handler.setFormatter(logging.Formatter(_FORMAT))
  target_logger.addHandler(handler)
  return target_logger
