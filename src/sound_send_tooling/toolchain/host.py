"""Host platform detection (OS/arch), normalized to the names used in target triples."""

from __future__ import annotations

import platform
from dataclasses import dataclass
from functools import lru_cache

_OS_NAMES = {
    "linux": "linux",
    "windows": "windows",
    "darwin": "darwin",
}

_ARCH_NAMES = {
    "x86_64": "x86_64",
    "amd64": "x86_64",
    "x64": "x86_64",
    "aarch64": "aarch64",
    "arm64": "aarch64",
}


@dataclass(frozen=True)
class HostPlatform:
    os: str
    arch: str

    def __str__(self) -> str:
        return f"{self.os}-{self.arch}"


def normalize_os(system: str) -> str:
    """Linux -> linux, Windows -> windows, Darwin -> darwin; unknown names are lower-cased."""
    s = system.strip().lower()
    return _OS_NAMES.get(s, s)


def normalize_arch(machine: str) -> str:
    """amd64/x64 -> x86_64, arm64 -> aarch64; unknown names are lower-cased."""
    m = machine.strip().lower()
    return _ARCH_NAMES.get(m, m)


def host_from(system: str, machine: str) -> HostPlatform:
    return HostPlatform(normalize_os(system), normalize_arch(machine))


@lru_cache(maxsize=1)
def detect_host_platform() -> HostPlatform:
    """Host OS/arch of this process. Detected once; later calls return the same value."""
    return host_from(platform.system(), platform.machine())
