"""Toolchain resolution: host detection, target catalog, candidate probing, linker proxy."""

from .host import HostPlatform, detect_host_platform, host_from
from .probe import CandidateSearch, is_runnable
from .proxy import run_proxy
from .resolver import ToolchainResolver, candidates_for, is_native, resolve
from .targets import (
    LINUX_AARCH64,
    LINUX_X86_64,
    NATIVE,
    TARGETS,
    TOOLCHAIN_CANDIDATES,
    WINDOWS_X86_64,
    TargetTriple,
    parse_target,
)

__all__ = [
    "LINUX_AARCH64",
    "LINUX_X86_64",
    "NATIVE",
    "TARGETS",
    "TOOLCHAIN_CANDIDATES",
    "WINDOWS_X86_64",
    "CandidateSearch",
    "HostPlatform",
    "TargetTriple",
    "ToolchainResolver",
    "candidates_for",
    "detect_host_platform",
    "host_from",
    "is_native",
    "is_runnable",
    "parse_target",
    "resolve",
    "run_proxy",
]
