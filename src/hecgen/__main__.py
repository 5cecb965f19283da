from __future__ import annotations

import argparse
import sys
from typing import NoReturn, Optional

from pydantic import ValidationError

from .config import GeneratorConfig
from .encoder import EmbedStrategy
from .errors import HecError
from .generator import run_generator
from .logging_setup import setup_logging
from .transport import HecConnection

EXIT_CONFIG = 1
EXIT_CONNECT = 2
EXIT_UPLOAD = 3


def _build_parser() -> argparse.ArgumentParser:
  parser = argparse.ArgumentParser(
    prog="hecgen",
    description="Generate synthetic log entries and stream them to an HTTP Event Collector",
  )
  parser.add_argument("--url", help="Collector endpoint URL (env: HECGEN_URL)")
  parser.add_argument("--token", help="HEC token (env: HECGEN_TOKEN)")
  parser.add_argument("--tag", help="Tag / sourcetype for generated entries (default: default)")
  parser.add_argument(
    "--raw",
    action="store_true",
    default=None,
    help="Use the raw endpoint encoding instead of JSON events",
  )
  parser.add_argument(
    "--embed",
    choices=[s.value for s in EmbedStrategy],
    default=None,
    help="How JSON payloads are embedded in event mode (default: embed-as-object)",
  )
  parser.add_argument("--name", help="Client name sent as User-Agent (default: hecgen)")
  parser.add_argument("--count", type=int, default=None, help="Number of entries to send (default: 100)")
  parser.add_argument("--batch-size", type=int, default=None, help="Entries per write batch (default: 50)")
  parser.add_argument("--timeout", type=float, default=None, help="Request timeout in seconds (default: 30)")
  parser.add_argument("--seed", type=int, default=None, help="Seed for reproducible payloads")
  parser.add_argument("--config", default=None, help="YAML config file (default: ./hecgen.yaml if present)")
  parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
  return parser


def main(argv: Optional[list[str]] = None) -> NoReturn:
  args = _build_parser().parse_args(sys.argv[1:] if argv is None else argv)
  setup_logging(verbose=args.verbose)

  try:
    config = GeneratorConfig.from_params_or_env(
      config_file=args.config,
      hec_url=args.url,
      auth=args.token,
      tag=args.tag,
      raw_mode=args.raw,
      embed_strategy=args.embed,
      name=args.name,
      count=args.count,
      batch_size=args.batch_size,
      timeout=args.timeout,
      seed=args.seed,
    )
  except (ValidationError, ValueError, OSError) as exc:
    print(f"hecgen: invalid configuration: {exc}", file=sys.stderr)
    sys.exit(EXIT_CONFIG)

  try:
    conn = HecConnection(config)
  except HecError as exc:
    print(f"hecgen: cannot connect to {config.hec_url}: {exc}", file=sys.stderr)
    sys.exit(EXIT_CONNECT)

  print(f"Streaming to {config.hec_url} from {conn.source_ip()}")

  written = None
  try:
    written = run_generator(
      conn,
      config.tag,
      config.count,
      batch_size=config.batch_size,
      seed=config.seed,
    )
  except HecError as exc:
    print(f"hecgen: write failed: {exc}", file=sys.stderr)

  try:
    conn.close()
  except HecError as exc:
    print(f"hecgen: upload failed: {exc}", file=sys.stderr)
    sys.exit(EXIT_UPLOAD)

  if written is None:
    sys.exit(EXIT_UPLOAD)
  print(f"Sent {written} entries")
  sys.exit(0)


if __name__ == "__main__":
  main()
