from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict, Optional, Union
from urllib.parse import urlparse

import yaml
from pydantic import BaseModel, Field, field_validator

from .encoder import EmbedStrategy
from .errors import InvalidTagName
from .tags import check_tag

DEFAULT_CONFIG_FILE = "hecgen.yaml"

# field name -> environment variable
ENV_VARS = {
  "hec_url": "HECGEN_URL",
  "auth": "HECGEN_TOKEN",
  "tag": "HECGEN_TAG",
  "raw_mode": "HECGEN_RAW",
  "embed_strategy": "HECGEN_EMBED",
  "name": "HECGEN_NAME",
  "timeout": "HECGEN_TIMEOUT",
  "count": "HECGEN_COUNT",
}


class GeneratorConfig(BaseModel):
  """
  Settings for a generator run against an HTTP Event Collector.
  """

  hec_url: str = Field(..., description="Collector endpoint, e.g. https://host:8088/services/collector/event")
  auth: str = Field("", description="HEC token sent as 'Authorization: Splunk <token>'")
  tag: str = Field("default", description="Default tag; also used as the HEC sourcetype")
  raw_mode: bool = False
  embed_strategy: EmbedStrategy = EmbedStrategy.OBJECT
  name: str = Field("hecgen", description="Client name sent as the User-Agent")
  timeout: Optional[float] = Field(30.0, description="Request timeout in seconds, None to disable")
  buffer_size: int = Field(1024, ge=1, description="Encoded records queued ahead of the upload")

  count: int = Field(100, ge=0)
  batch_size: int = Field(50, ge=1)
  seed: Optional[int] = None

  @field_validator("hec_url")
  @classmethod
  def _check_url(cls, value: str) -> str:
    _validate_hec_url(value)
    return value

  @field_validator("tag")
  @classmethod
  def _check_tag(cls, value: str) -> str:
    try:
      check_tag(value)
    except InvalidTagName as exc:
      raise ValueError(str(exc)) from exc
    return value

  @field_validator("raw_mode", mode="before")
  @classmethod
  def _parse_flag(cls, value: Any) -> Any:
    if isinstance(value, str):
      return _parse_bool(value)
    return value

  @field_validator("timeout")
  @classmethod
  def _check_timeout(cls, value: Optional[float]) -> Optional[float]:
    if value is not None and value <= 0:
      raise ValueError("timeout must be positive")
    return value

  @classmethod
  def from_params_or_env(
    cls,
    config_file: Optional[Union[str, Path]] = None,
    **params: Any,
  ) -> "GeneratorConfig":
    """
    Build configuration from explicit parameters, falling back to the
    environment and then a YAML file.

    Priority:
      1. Explicit keyword arguments (None means "not given")
      2. HECGEN_* environment variables
      3. YAML file (`config_file`, or ./hecgen.yaml when present)
      4. Field defaults
    """
    values: Dict[str, Any] = {}

    path = Path(config_file) if config_file is not None else Path(DEFAULT_CONFIG_FILE)
    if config_file is not None or path.exists():
      values.update(load_yaml_config(path))

    for field, env_name in ENV_VARS.items():
      raw = os.getenv(env_name)
      if raw is not None and raw != "":
        values[field] = raw

    values.update({k: v for k, v in params.items() if v is not None})
    return cls(**values)


def load_yaml_config(path: Union[str, Path]) -> Dict[str, Any]:
  """
  Read a generator config mapping from a YAML file.

  Both `hec_url` and the shorter `url` / `token` spellings are accepted.
  """
  text = Path(path).read_text(encoding="utf-8")
  data = yaml.safe_load(text) or {}
  if not isinstance(data, dict):
    raise ValueError(f"config file {path} must contain a mapping, got {type(data).__name__}")

  aliases = {"url": "hec_url", "token": "auth", "raw": "raw_mode", "embed": "embed_strategy"}
  return {aliases.get(key, key): value for key, value in data.items()}


def _validate_hec_url(url: str) -> None:
  parsed = urlparse(url)
  if parsed.scheme not in ("http", "https") or not parsed.netloc:
    raise ValueError(
      f"Invalid HEC URL '{url}'. "
      "Expected an http(s) URL like https://localhost:8088/services/collector/event."
    )


def _parse_bool(raw: str) -> bool:
  value = raw.strip().lower()
  if value in ("1", "true", "yes", "on"):
    return True
  if value in ("0", "false", "no", "off"):
    return False
  raise ValueError(f"not a boolean: {raw!r}")
