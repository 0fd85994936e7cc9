"""Verification before any artifact is trusted: rustfmt check, clippy, cargo test.

Steps run in order and the first failure stops the pipeline. fmt runs in
check-only mode with error_on_line_overflow/error_on_unformatted so an
over-long line or an unformattable region fails instead of being skipped.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from sound_send_tooling.config import resolve_config
from sound_send_tooling.errors import ToolchainNotFound, VerificationFailed
from sound_send_tooling.process import run_command
from sound_send_tooling.toolchain.resolver import ToolchainResolver
from sound_send_tooling.toolchain.targets import parse_target

log = logging.getLogger(__name__)

STEPS = ("fmt", "lint", "test")


@dataclass(frozen=True)
class VerificationResult:
    ok: bool
    step: str | None = None
    output: str = ""

    def raise_for_status(self) -> None:
        if not self.ok:
            raise VerificationFailed(self.step or "unknown", self.output)


def fmt_command(config: dict[str, Any]) -> list[str]:
    cmd = [config["cargo"]]
    if config["fmt_toolchain"]:
        cmd.append(config["fmt_toolchain"])
    cmd += ["fmt", "--check", "--all"]
    if config["fmt_config"]:
        cmd += ["--", "--config", config["fmt_config"]]
    return cmd


def lint_command(config: dict[str, Any]) -> list[str]:
    cmd = [config["cargo"], "clippy", "--workspace", "--all-targets"]
    if config["lint_args"]:
        cmd += ["--", *config["lint_args"]]
    return cmd


def cargo_test_command(
    config: dict[str, Any], resolver: ToolchainResolver
) -> tuple[list[str], dict[str, str]]:
    """cargo test, cross-linked through the resolver when test_target is set. May raise ToolchainNotFound."""
    cmd = [config["cargo"], "test"]
    if not config["test_target"]:
        return cmd, {}
    target = parse_target(config["test_target"])
    return cmd + target.cargo_args(), resolver.linker_env(target)


class VerificationPipeline:
    def __init__(
        self,
        project_root: Path,
        resolver: ToolchainResolver,
        config: dict[str, Any] | None = None,
    ) -> None:
        self.project_root = project_root
        self.resolver = resolver
        self.config = config if config is not None else resolve_config(None)

    def _steps(self) -> list[tuple[str, Callable[[], tuple[list[str], dict[str, str]]]]]:
        return [
            ("fmt", lambda: (fmt_command(self.config), {})),
            ("lint", lambda: (lint_command(self.config), {})),
            ("test", lambda: cargo_test_command(self.config, self.resolver)),
        ]

    def verify(self) -> VerificationResult:
        """Run fmt, lint, test in order; stop at the first failure and carry its output."""
        for name, build in self._steps():
            try:
                cmd, env = build()
            except (ToolchainNotFound, ValueError) as e:
                return VerificationResult(ok=False, step=name, output=str(e))
            print(f"🔍 {name}: {' '.join(cmd)}")
            try:
                r = run_command(cmd, cwd=self.project_root, env=env, capture=True)
            except OSError as e:
                log.debug("%s could not be launched: %s", name, e)
                return VerificationResult(ok=False, step=name, output=str(e))
            if r.returncode != 0:
                output = (r.stdout or "") + (r.stderr or "")
                log.debug("%s failed with exit code %d", name, r.returncode)
                return VerificationResult(ok=False, step=name, output=output)
            print(f"  ✅ {name} passed")
        return VerificationResult(ok=True)
