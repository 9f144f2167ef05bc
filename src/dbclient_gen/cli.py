"""Command-line entry point for running the client generator."""

from __future__ import annotations

import argparse
import dataclasses
import logging
import os
from pathlib import Path
from typing import Iterable

from dotenv import load_dotenv

from .config import load_config
from .constants import ENV_LOG
from .pipeline import run
from .utils.errors import GenError


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Generate a database client package")
    parser.add_argument("config", help="Path to generator request (.json, .yaml)")
    parser.add_argument("--output", help="Override the configured output directory")
    parser.add_argument("--cache-dir", help="Engine cache directory (defaults to the user cache)")
    parser.add_argument("--max-workers", type=int, default=4, help="Concurrent engine downloads")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser


def _configure_logging(verbose: bool) -> None:
    debug = verbose or os.environ.get(ENV_LOG, "").lower() in {"debug", "1", "true"}
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def main(argv: Iterable[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    load_dotenv()
    _configure_logging(args.verbose)

    config = load_config(args.config)
    if args.output:
        config = dataclasses.replace(config, output=args.output)

    result = run(
        config,
        cache_dir=Path(args.cache_dir) if args.cache_dir else None,
        max_workers=args.max_workers,
    )
    for path in result.written:
        print(path)
    return 0


def entrypoint() -> None:  # pragma: no cover - console entry
    try:
        raise SystemExit(main())
    except GenError as exc:  # pragma: no cover - console behavior
        raise SystemExit(f"error: {exc}")
