"""Transparent linker proxy: resolve the compiler, forward argv verbatim, mirror its exit code.

Point cargo at it with `linker = "sound-send-link-<triple>"` in .cargo/config.toml.
"""

from __future__ import annotations

import sys
from collections.abc import Mapping, Sequence

from sound_send_tooling.errors import ToolchainNotFound
from sound_send_tooling.process import run_command
from sound_send_tooling.toolchain.host import HostPlatform, detect_host_platform
from sound_send_tooling.toolchain.probe import Probe, is_runnable
from sound_send_tooling.toolchain.resolver import DEFAULT_COMPILER, resolve
from sound_send_tooling.toolchain.targets import parse_target

# Exit status a shell reports for a command it could not run.
EXEC_FAILED_EXIT = 127


def forward(compiler: str, args: Sequence[str]) -> int:
    """Run compiler with args unchanged and return the exit status an exec would give.

    A compiler killed by signal n reports 128 + n. A compiler that cannot be
    launched reports 127.
    """
    try:
        r = run_command([compiler, *args], new_session=False)
    except OSError as e:
        print(f"error: could not run {compiler}: {e}", file=sys.stderr)
        return EXEC_FAILED_EXIT
    if r.returncode < 0:
        return 128 - r.returncode
    return r.returncode


def run_proxy(
    target_name: str,
    args: Sequence[str],
    host: HostPlatform | None = None,
    probe: Probe = is_runnable,
    default_compiler: str = DEFAULT_COMPILER,
    overrides: Mapping[str, Sequence[str]] | None = None,
) -> int:
    """Resolve the linker for target_name and forward args to it. Returns the linker's exit code, or 1."""
    try:
        target = parse_target(target_name)
    except ValueError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1
    try:
        compiler = resolve(
            host or detect_host_platform(),
            target,
            probe=probe,
            default_compiler=default_compiler,
            overrides=overrides,
        )
    except ToolchainNotFound as e:
        print(f"error: {e}", file=sys.stderr)
        return 1
    return forward(compiler, args)
