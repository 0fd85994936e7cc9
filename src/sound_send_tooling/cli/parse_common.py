"""Shared CLI arguments (--project-root, --config, --verbose) and logging setup."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path


def path_resolver(s: str) -> Path:
    """Resolve a path argument to absolute Path (e.g. --project-root, --config)."""
    return Path(s).resolve()


def add_common_args(ap: argparse.ArgumentParser) -> None:
    ap.add_argument(
        "--project-root",
        type=path_resolver,
        default=Path.cwd(),
        help="Cargo project root (default: cwd)",
    )
    ap.add_argument(
        "--config",
        type=path_resolver,
        default=None,
        help="Config YAML (default: <project-root>/sound-send-tooling.yaml if present)",
    )
    ap.add_argument("-v", "--verbose", action="store_true", help="Debug logging")


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
