"""Error taxonomy for toolchain resolution, verification and build jobs."""

from __future__ import annotations

from collections.abc import Sequence


class ToolingError(Exception):
    """Base class for every failure the orchestrator reports."""


class ToolchainNotFound(ToolingError):
    """No candidate compiler for a target is present and runnable."""

    def __init__(self, target: str, candidates: Sequence[str]) -> None:
        self.target = target
        self.candidates = tuple(candidates)
        tried = ", ".join(self.candidates) or "(none)"
        super().__init__(f"could not find a linker for {target}; tried: {tried}")


class VerificationFailed(ToolingError):
    """A verification step (fmt, lint, test) failed."""

    def __init__(self, step: str, output: str = "") -> None:
        self.step = step
        self.output = output
        super().__init__(f"verification step '{step}' failed")


class BuildJobFailed(ToolingError):
    """A build job's cargo invocation returned non-zero."""

    def __init__(self, job_id: str, returncode: int) -> None:
        self.job_id = job_id
        self.returncode = returncode
        super().__init__(f"build job {job_id} failed with exit code {returncode}")


class InvalidJobSpec(ToolingError, ValueError):
    """A job declaration does not fit the project (unknown binary, missing feature, duplicate)."""
