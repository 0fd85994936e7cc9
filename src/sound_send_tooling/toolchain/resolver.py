"""Linker resolution: which compiler, on this host, links a working binary for that target.

Native targets (the pseudo-target, or a triple whose arch and OS equal the
host's) use the host's default compiler and never probe cross-prefixed names:
on a true native host the default compiler is correct, while a cross-prefixed
one may be missing or mis-targeted. Every other target walks its candidate
list (see TOOLCHAIN_CANDIDATES) and takes the first runnable entry.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence

from sound_send_tooling.errors import ToolchainNotFound
from sound_send_tooling.toolchain.host import HostPlatform
from sound_send_tooling.toolchain.probe import CandidateSearch, Probe, is_runnable
from sound_send_tooling.toolchain.targets import TOOLCHAIN_CANDIDATES, TargetTriple

log = logging.getLogger(__name__)

DEFAULT_COMPILER = "gcc"


def is_native(host: HostPlatform, target: TargetTriple) -> bool:
    if target.is_pseudo:
        return True
    return target.arch == host.arch and target.os == host.os


def candidates_for(
    target: TargetTriple,
    overrides: Mapping[str, Sequence[str]] | None = None,
) -> tuple[str, ...]:
    """Probe order for target; a config override replaces the built-in list entirely."""
    if overrides and target.name in overrides:
        return tuple(overrides[target.name])
    return TOOLCHAIN_CANDIDATES.get(target.name, ())


def resolve(
    host: HostPlatform,
    target: TargetTriple,
    probe: Probe = is_runnable,
    default_compiler: str = DEFAULT_COMPILER,
    overrides: Mapping[str, Sequence[str]] | None = None,
) -> str:
    """Return the compiler command to link for target on host. Raises ToolchainNotFound."""
    if is_native(host, target):
        log.debug("%s is native on %s: using %s", target, host, default_compiler)
        return default_compiler
    candidates = candidates_for(target, overrides)
    found = CandidateSearch(candidates, probe).first()
    if found is None:
        raise ToolchainNotFound(target.name, candidates)
    log.debug("%s on %s: resolved %s", target, host, found)
    return found


class ToolchainResolver:
    """resolve() bound to one host, probe and config; shared by verification and the build matrix."""

    def __init__(
        self,
        host: HostPlatform,
        probe: Probe = is_runnable,
        default_compiler: str = DEFAULT_COMPILER,
        overrides: Mapping[str, Sequence[str]] | None = None,
    ) -> None:
        self.host = host
        self.probe = probe
        self.default_compiler = default_compiler
        self.overrides = dict(overrides or {})

    def resolve(self, target: TargetTriple) -> str:
        return resolve(
            self.host,
            target,
            probe=self.probe,
            default_compiler=self.default_compiler,
            overrides=self.overrides,
        )

    def linker_env(self, target: TargetTriple) -> dict[str, str]:
        """Child env that points cargo at the resolved linker. Empty for the native pseudo-target."""
        var = target.linker_env_var()
        if var is None:
            return {}
        return {var: self.resolve(target)}
