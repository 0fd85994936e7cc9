"""`sound-send-tooling resolve|link` and the per-target linker proxy scripts.

All of them honour `candidates` and `default_compiler` from sound-send-tooling.yaml
(cwd, or --config), so they pick the same linker the build matrix reports.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Any

from sound_send_tooling.cli.parse_common import add_common_args, configure_logging, path_resolver
from sound_send_tooling.config import load_config
from sound_send_tooling.errors import ToolchainNotFound
from sound_send_tooling.toolchain import detect_host_platform, parse_target, resolve, run_proxy
from sound_send_tooling.toolchain.targets import LINUX_AARCH64, LINUX_X86_64, WINDOWS_X86_64


def _load(project_root: Path, config_path: Path | None) -> dict[str, Any]:
    """Config for the toolchain commands. Exits 1 on a bad config."""
    try:
        return load_config(project_root, config_path)
    except ValueError as e:
        print(f"❌ {e}", file=sys.stderr)
        sys.exit(1)


def _split_config_flag(argv: list[str]) -> tuple[Path | None, list[str]]:
    """Take a leading `--config PATH` off argv; anything after the triple belongs to the linker."""
    if len(argv) >= 2 and argv[0] == "--config":
        return path_resolver(argv[1]), argv[2:]
    return None, argv


def _proxy(target_name: str, args: list[str], config_path: Path | None = None) -> int:
    config = _load(Path.cwd(), config_path)
    return run_proxy(
        target_name,
        args,
        default_compiler=config["default_compiler"],
        overrides=config["candidates"],
    )


def run_resolve_argv(argv: list[str] | None = None) -> None:
    """Print the linker this host would use for <triple>."""
    if argv is None:
        argv = sys.argv[2:] if len(sys.argv) > 2 else []
    ap = argparse.ArgumentParser(
        prog="sound-send-tooling resolve", description="Print the linker chosen for a target"
    )
    ap.add_argument("triple", help="Target triple, or 'native'")
    add_common_args(ap)
    args = ap.parse_args(argv)
    configure_logging(args.verbose)
    config = _load(args.project_root, args.config)
    try:
        target = parse_target(args.triple)
        print(
            resolve(
                detect_host_platform(),
                target,
                default_compiler=config["default_compiler"],
                overrides=config["candidates"],
            )
        )
    except (ValueError, ToolchainNotFound) as e:
        print(f"❌ {e}", file=sys.stderr)
        sys.exit(1)
    sys.exit(0)


def run_link_argv(argv: list[str] | None = None) -> None:
    """Linker proxy: sound-send-tooling link [--config PATH] <triple> [linker args...]."""
    if argv is None:
        argv = sys.argv[2:] if len(sys.argv) > 2 else []
    config_path, argv = _split_config_flag(argv)
    if not argv:
        print("Usage: sound-send-tooling link [--config PATH] <triple> [args...]", file=sys.stderr)
        sys.exit(1)
    sys.exit(_proxy(argv[0], argv[1:], config_path))


def link_x86_64_unknown_linux_gnu() -> None:
    sys.exit(_proxy(LINUX_X86_64.name, sys.argv[1:]))


def link_aarch64_unknown_linux_gnu() -> None:
    sys.exit(_proxy(LINUX_AARCH64.name, sys.argv[1:]))


def link_x86_64_pc_windows_gnu() -> None:
    sys.exit(_proxy(WINDOWS_X86_64.name, sys.argv[1:]))
