"""이슈 처리 CLI 진입점.

사용법:
  python -m place_resolver.main process
  python -m place_resolver.main convert --source data/places.json --target data/places.toon
"""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import Sequence

from place_resolver.core.config import Settings, load_settings
from place_resolver.core.exceptions import ConfigError, ResolverError
from place_resolver.core.logger import get_logger, mask_secret
from place_resolver.core.logging_config import configure_logging
from place_resolver.services.issue_processor import run_resolver_pipeline
from place_resolver.services.outputs import write_outputs
from place_resolver.services.place_store import PlaceStore, convert_json_to_store

logger = get_logger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Resolve place submission issues into place records.")
    subparsers = parser.add_subparsers(dest="command")

    subparsers.add_parser("process", help="Process the issue described by environment variables.")

    convert = subparsers.add_parser("convert", help="Convert a JSON place array into the data file format.")
    convert.add_argument("--source", type=str, default="data/places.json", help="JSON source path.")
    convert.add_argument("--target", type=str, default="data/places.toon", help="Data file path to write.")
    return parser


def _process(settings: Settings) -> int:
    try:
        settings.validate_credentials()
    except ConfigError as exc:
        logger.error("Configuration error: %s", exc.message)
        return 1

    logger.debug("GitHub token: %s", mask_secret(settings.GITHUB_TOKEN))
    outputs = run_resolver_pipeline(settings)
    write_outputs(outputs, settings.GITHUB_OUTPUT)
    return 1 if outputs.error else 0


def _convert(source: str, target: str) -> int:
    try:
        count = convert_json_to_store(source, PlaceStore(Path(target)))
    except (ResolverError, OSError) as exc:
        logger.error("Conversion failed: %s", getattr(exc, "message", exc))
        return 1
    logger.info("Converted %d places: %s -> %s", count, source, target)
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    try:
        settings = load_settings()
    except ConfigError as exc:
        configure_logging()
        logger.error("Configuration error: %s", exc.message)
        return 1
    configure_logging(settings.LOG_LEVEL)

    if args.command == "convert":
        return _convert(args.source, args.target)
    return _process(settings)


if __name__ == "__main__":
    raise SystemExit(main())
