"""
hecgen

Synthetic log generator backend that streams entries to an HTTP Event
Collector through the same transport contract as the indexer connection.
"""

from .config import GeneratorConfig
from .encoder import EmbedStrategy
from .entry import Entry, Timestamp
from .errors import (
  HecError,
  InvalidTagName,
  RemoteRejection,
  RequestError,
  ResolutionError,
  TagNotFound,
  TransportError,
)
from .logging_setup import setup_logging
from .transport import HecConnection, IngestTransport

__all__ = [
  "EmbedStrategy",
  "Entry",
  "GeneratorConfig",
  "HecConnection",
  "HecError",
  "IngestTransport",
  "InvalidTagName",
  "RemoteRejection",
  "RequestError",
  "ResolutionError",
  "TagNotFound",
  "Timestamp",
  "TransportError",
  "setup_logging",
]
