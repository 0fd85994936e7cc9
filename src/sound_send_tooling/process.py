"""Child-process execution shared by verification, build jobs and the linker proxy."""

from __future__ import annotations

import logging
import os
import signal
import subprocess
from collections.abc import Iterator, Mapping, Sequence
from contextlib import contextmanager
from pathlib import Path

log = logging.getLogger(__name__)

# Seconds a process group gets between SIGTERM and SIGKILL.
KILL_GRACE_SECONDS = 5.0


def run_command(
    cmd: Sequence[str],
    cwd: Path | None = None,
    env: Mapping[str, str] | None = None,
    capture: bool = False,
    new_session: bool = True,
) -> subprocess.CompletedProcess[str]:
    """Run cmd to completion with no timeout.

    extra env entries are layered over os.environ for the child only. With
    new_session the child leads its own process group, so an interrupt tears
    down everything it spawned (cargo -> rustc -> linker), not just cargo.
    OSError from launching cmd propagates to the caller.
    """
    child_env = None
    if env:
        child_env = os.environ.copy()
        child_env.update(env)
    log.debug("exec %s (cwd=%s, env=%s)", " ".join(cmd), cwd, dict(env or {}))
    pipe = subprocess.PIPE if capture else None
    with subprocess.Popen(
        list(cmd),
        cwd=cwd,
        env=child_env,
        stdout=pipe,
        stderr=pipe,
        text=True,
        start_new_session=new_session,
    ) as proc:
        try:
            stdout, stderr = proc.communicate()
        except BaseException:
            terminate(proc, group=new_session)
            raise
    return subprocess.CompletedProcess(proc.args, proc.returncode, stdout, stderr)


def _signal_group(pgid: int, sig: int) -> bool:
    try:
        os.killpg(pgid, sig)
    except ProcessLookupError:
        return False
    return True


def terminate(
    proc: subprocess.Popen, group: bool = True, grace: float = KILL_GRACE_SECONDS
) -> None:
    """Stop proc and, when group is set, every process left in its process group.

    SIGTERM first, SIGKILL once grace has passed, then reap. Group members that
    outlive the leader get the SIGKILL sweep too.
    """
    if not group or os.name != "posix":
        proc.kill()
        proc.wait()
        return
    log.debug("terminating process group %d", proc.pid)
    if _signal_group(proc.pid, signal.SIGTERM):
        try:
            proc.wait(timeout=grace)
        except subprocess.TimeoutExpired:
            log.debug("process group %d ignored SIGTERM", proc.pid)
        _signal_group(proc.pid, signal.SIGKILL)
    proc.wait()


def _raise_interrupt(signum: int, frame: object) -> None:
    raise KeyboardInterrupt


@contextmanager
def interrupt_on_sigterm() -> Iterator[None]:
    """Turn SIGTERM into KeyboardInterrupt so in-flight process groups are killed, not orphaned."""
    previous = signal.signal(signal.SIGTERM, _raise_interrupt)
    try:
        yield
    finally:
        signal.signal(signal.SIGTERM, previous)
