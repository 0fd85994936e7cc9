"""Target catalog: the fixed set of triples the release matrix builds for, and their probe order."""

from __future__ import annotations

from dataclasses import dataclass

NATIVE_NAME = "native"


@dataclass(frozen=True)
class TargetTriple:
    """An (architecture, vendor, OS, ABI) target, or the host-native pseudo-target."""

    name: str
    arch: str | None = None
    vendor: str | None = None
    os: str | None = None
    abi: str | None = None

    def __str__(self) -> str:
        return self.name

    @property
    def is_pseudo(self) -> bool:
        """True for the native pseudo-target (cargo runs without --target)."""
        return self.name == NATIVE_NAME

    def cargo_args(self) -> list[str]:
        return [] if self.is_pseudo else ["--target", self.name]

    def linker_env_var(self) -> str | None:
        """Cargo's per-target linker variable, e.g. CARGO_TARGET_X86_64_PC_WINDOWS_GNU_LINKER."""
        if self.is_pseudo:
            return None
        return "CARGO_TARGET_" + self.name.upper().replace("-", "_") + "_LINKER"


NATIVE = TargetTriple(NATIVE_NAME)
LINUX_X86_64 = TargetTriple("x86_64-unknown-linux-gnu", "x86_64", "unknown", "linux", "gnu")
LINUX_AARCH64 = TargetTriple("aarch64-unknown-linux-gnu", "aarch64", "unknown", "linux", "gnu")
WINDOWS_X86_64 = TargetTriple("x86_64-pc-windows-gnu", "x86_64", "pc", "windows", "gnu")

TARGETS: dict[str, TargetTriple] = {
    t.name: t for t in (NATIVE, LINUX_X86_64, LINUX_AARCH64, WINDOWS_X86_64)
}

# Fully-qualified cross prefix, then the distro alias, then clang as last resort.
TOOLCHAIN_CANDIDATES: dict[str, tuple[str, ...]] = {
    LINUX_X86_64.name: ("x86_64-unknown-linux-gnu-gcc", "x86_64-linux-gnu-gcc", "clang"),
    LINUX_AARCH64.name: ("aarch64-unknown-linux-gnu-gcc", "aarch64-linux-gnu-gcc", "clang"),
    WINDOWS_X86_64.name: ("x86_64-w64-mingw32-gcc", "x86_64-w64-mingw32-gcc-posix", "clang"),
}


def parse_target(name: str) -> TargetTriple:
    """Look up a catalog target by name. Raises ValueError for anything outside the catalog."""
    try:
        return TARGETS[name]
    except KeyError:
        known = ", ".join(sorted(TARGETS))
        msg = f"Unknown target {name!r} (known: {known})"
        raise ValueError(msg) from None
