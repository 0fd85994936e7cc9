"""`sound-send-tooling release|verify|matrix`: verification and the release build matrix."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Any

from sound_send_tooling import orchestrator
from sound_send_tooling.build import BuildMatrix, load_manifest, matrix_from_config, plan_job
from sound_send_tooling.cli.parse_common import add_common_args, configure_logging
from sound_send_tooling.config import load_config
from sound_send_tooling.errors import ToolchainNotFound
from sound_send_tooling.process import interrupt_on_sigterm
from sound_send_tooling.toolchain import ToolchainResolver, detect_host_platform
from sound_send_tooling.verify import VerificationPipeline

INTERRUPTED_EXIT = 130


def _parse(argv: list[str] | None, prog: str, description: str) -> argparse.Namespace:
    if argv is None:
        argv = sys.argv[2:] if len(sys.argv) > 2 else []  # skip 'sound-send-tooling <cmd>'
    ap = argparse.ArgumentParser(prog=f"sound-send-tooling {prog}", description=description)
    add_common_args(ap)
    args = ap.parse_args(argv)
    configure_logging(args.verbose)
    return args


def _load(project_root: Path, config_path: Path | None) -> tuple[dict[str, Any], ToolchainResolver]:
    """Config plus a resolver for this host. Exits 1 on a bad config."""
    try:
        config = load_config(project_root, config_path)
    except ValueError as e:
        print(f"❌ {e}", file=sys.stderr)
        sys.exit(1)
    resolver = ToolchainResolver(
        detect_host_platform(),
        default_compiler=config["default_compiler"],
        overrides=config["candidates"],
    )
    return config, resolver


def _load_matrix(project_root: Path, config: dict[str, Any]) -> BuildMatrix:
    """Matrix from config, validated against Cargo.toml. Exits 1 when invalid."""
    try:
        matrix = matrix_from_config(config)
        matrix.validate(load_manifest(project_root))
    except ValueError as e:
        print(f"❌ {e}", file=sys.stderr)
        sys.exit(1)
    return matrix


def run_release_argv(argv: list[str] | None = None) -> None:
    """Verify, then build the whole matrix. Exits 0 only when every step and job succeeded."""
    args = _parse(argv, "release", "Verify (fmt, clippy, test) then build the release matrix")
    config, resolver = _load(args.project_root, args.config)
    matrix = _load_matrix(args.project_root, config)
    pipeline = VerificationPipeline(args.project_root, resolver, config)
    with interrupt_on_sigterm():
        try:
            report = orchestrator.run(
                matrix, pipeline, resolver, args.project_root, cargo=config["cargo"]
            )
        except KeyboardInterrupt:
            print("❌ Interrupted", file=sys.stderr)
            sys.exit(INTERRUPTED_EXIT)
    orchestrator.print_summary(report)
    sys.exit(report.exit_code)


def run_verify_argv(argv: list[str] | None = None) -> None:
    """Run only the verification pipeline."""
    args = _parse(argv, "verify", "Run fmt check, clippy and tests")
    config, resolver = _load(args.project_root, args.config)
    pipeline = VerificationPipeline(args.project_root, resolver, config)
    with interrupt_on_sigterm():
        try:
            result = pipeline.verify()
        except KeyboardInterrupt:
            print("❌ Interrupted", file=sys.stderr)
            sys.exit(INTERRUPTED_EXIT)
    if not result.ok:
        print(f"❌ Verification failed: {result.step}", file=sys.stderr)
        if result.output:
            print(result.output.rstrip(), file=sys.stderr)
        sys.exit(1)
    print("✅ Verification passed")
    sys.exit(0)


def run_matrix_argv(argv: list[str] | None = None) -> None:
    """List each job with its cargo command and resolved linker. Exits 1 if any linker is missing."""
    args = _parse(argv, "matrix", "Show the build matrix and the linker chosen for each job")
    config, resolver = _load(args.project_root, args.config)
    matrix = _load_matrix(args.project_root, config)
    rc = 0
    for job in matrix:
        try:
            cmd = plan_job(job, resolver, config["cargo"])
        except ToolchainNotFound as e:
            print(f"{job.job_id}\n  ❌ {e}")
            rc = 1
            continue
        print(f"{job.job_id}\n  {' '.join(cmd.argv)}\n  linker: {cmd.linker}")
    sys.exit(rc)
