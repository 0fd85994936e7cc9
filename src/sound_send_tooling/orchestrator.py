"""Release orchestration: verify, then build every matrix job, then report.

Verification gates everything: when it fails no job starts. Jobs are
independent, so one failing (linker not found, cargo error) does not stop the
rest; the run fails if any job failed and the report names each of them.
"""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol

from sound_send_tooling.build.jobs import BuildJobSpec, plan_job
from sound_send_tooling.build.matrix import BuildMatrix
from sound_send_tooling.errors import BuildJobFailed, ToolchainNotFound
from sound_send_tooling.process import run_command
from sound_send_tooling.toolchain.resolver import ToolchainResolver
from sound_send_tooling.verify.pipeline import VerificationResult

log = logging.getLogger(__name__)


class Verifier(Protocol):
    def verify(self) -> VerificationResult: ...


@dataclass(frozen=True)
class JobOutcome:
    job_id: str
    ok: bool
    returncode: int | None = None
    linker: str | None = None
    error: str = ""


@dataclass
class BuildReport:
    verification: VerificationResult
    outcomes: list[JobOutcome] = field(default_factory=list)

    @property
    def failed_jobs(self) -> list[str]:
        return [o.job_id for o in self.outcomes if not o.ok]

    @property
    def ok(self) -> bool:
        return self.verification.ok and not self.failed_jobs

    @property
    def exit_code(self) -> int:
        return 0 if self.ok else 1


def run_job(
    job: BuildJobSpec,
    resolver: ToolchainResolver,
    project_root: Path,
    cargo: str = "cargo",
) -> JobOutcome:
    """Resolve the linker for job and run cargo. Failures become a failed JobOutcome."""
    try:
        cmd = plan_job(job, resolver, cargo)
    except ToolchainNotFound as e:
        return JobOutcome(job.job_id, ok=False, error=str(e))
    log.debug("%s: linker %s", job.job_id, cmd.linker)
    try:
        r = run_command(cmd.argv, cwd=project_root, env=cmd.env)
    except OSError as e:
        log.debug("%s: could not launch %s: %s", job.job_id, cmd.argv[0], e)
        return JobOutcome(job.job_id, ok=False, linker=cmd.linker, error=str(e))
    if r.returncode != 0:
        err = BuildJobFailed(job.job_id, r.returncode)
        return JobOutcome(
            job.job_id, ok=False, returncode=r.returncode, linker=cmd.linker, error=str(err)
        )
    return JobOutcome(job.job_id, ok=True, returncode=0, linker=cmd.linker)


def run(
    matrix: BuildMatrix,
    verification: Verifier,
    resolver: ToolchainResolver,
    project_root: Path,
    cargo: str = "cargo",
) -> BuildReport:
    """Verify, then build each job in matrix order. Returns the aggregate report."""
    print("🔍 Verifying...")
    result = verification.verify()
    report = BuildReport(verification=result)
    if not result.ok:
        print(
            f"❌ Verification failed at {result.step}; skipping {len(matrix)} build job(s)",
            file=sys.stderr,
        )
        if result.output:
            print(result.output.rstrip(), file=sys.stderr)
        return report

    print(f"🔨 Building {len(matrix)} job(s) for host {resolver.host}...")
    for job in matrix:
        print(f"🔨 {job.job_id}")
        outcome = run_job(job, resolver, project_root, cargo)
        report.outcomes.append(outcome)
        if outcome.ok:
            print(f"  ✅ {job.job_id}")
        else:
            print(f"❌ {outcome.error}", file=sys.stderr)
    return report


def print_summary(report: BuildReport) -> None:
    """Final status line; on failure lists every failing step or job on stderr."""
    if report.ok:
        print(f"🎉 Release complete: {len(report.outcomes)} job(s) built")
        return
    if not report.verification.ok:
        print(f"❌ Verification failed: {report.verification.step}", file=sys.stderr)
        return
    failed = report.failed_jobs
    print(f"❌ {len(failed)} of {len(report.outcomes)} build job(s) failed:", file=sys.stderr)
    for job_id in failed:
        print(f"  - {job_id}", file=sys.stderr)
