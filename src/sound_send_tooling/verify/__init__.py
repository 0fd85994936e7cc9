"""Verification pipeline: fmt check, clippy, tests."""

from .pipeline import (
    STEPS,
    VerificationPipeline,
    VerificationResult,
    cargo_test_command,
    fmt_command,
    lint_command,
)

__all__ = [
    "STEPS",
    "VerificationPipeline",
    "VerificationResult",
    "cargo_test_command",
    "fmt_command",
    "lint_command",
]
