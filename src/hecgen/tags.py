from __future__ import annotations

import threading
from typing import Dict, Tuple

from .errors import InvalidTagName, TagNotFound

MAX_TAG_LENGTH = 4096
FORBIDDEN_TAG_CHARS = frozenset("!@#$%^&*()=+<>,.:;`\"'{[}]|\\ \t\n\r")


def check_tag(name: str) -> None:
  """
  Validate a tag name against the naming rules enforced by the indexers.

  Raises InvalidTagName when the name is empty, too long, or contains a
  forbidden character.
  """
  if not name:
    raise InvalidTagName(name, "empty")
  if len(name) > MAX_TAG_LENGTH:
    raise InvalidTagName(name[:32] + "...", f"longer than {MAX_TAG_LENGTH} characters")
  for ch in name:
    if ch in FORBIDDEN_TAG_CHARS:
      raise InvalidTagName(name, f"forbidden character {ch!r}")


class TagTable:
  """
  Mapping of small integer tag ids to tag names.

  Id 0 is always the default tag the table was created with. New names are
  assigned the current table size, so ids grow in negotiation order and are
  never reused.
  """

  def __init__(self, default_tag: str) -> None:
    check_tag(default_tag)
    self._tags: Dict[int, str] = {0: default_tag}
    self._ids: Dict[str, int] = {default_tag: 0}
    self._lock = threading.Lock()

  def negotiate(self, name: str) -> int:
    check_tag(name)
    with self._lock:
      existing = self._ids.get(name)
      if existing is not None:
        return existing
      tag_id = len(self._tags)
      self._tags[tag_id] = name
      self._ids[name] = tag_id
      return tag_id

  def lookup(self, tag_id: int) -> Tuple[str, bool]:
    with self._lock:
      name = self._tags.get(tag_id)
    if name is None:
      return "", False
    return name, True

  def resolve(self, name: str) -> int:
    with self._lock:
      tag_id = self._ids.get(name)
    if tag_id is None:
      raise TagNotFound(name)
    return tag_id

  def __len__(self) -> int:
    with self._lock:
      return len(self._tags)
