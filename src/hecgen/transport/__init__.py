from .base import IngestTransport
from .hec import HecConnection

__all__ = ["HecConnection", "IngestTransport"]
