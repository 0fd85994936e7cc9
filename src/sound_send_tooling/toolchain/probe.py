"""Ordered-candidate search: pick the first compiler name that is on PATH and actually runs."""

from __future__ import annotations

import logging
import shutil
from collections.abc import Callable, Sequence

from sound_send_tooling.process import run_command

log = logging.getLogger(__name__)

Probe = Callable[[str], bool]


def is_runnable(name: str) -> bool:
    """True if name is on PATH and `name --version` exits 0. A stale alias counts as absent."""
    path = shutil.which(name)
    if path is None:
        log.debug("probe %s: not on PATH", name)
        return False
    try:
        r = run_command([path, "--version"], capture=True)
    except OSError as e:
        log.debug("probe %s: %s failed to execute: %s", name, path, e)
        return False
    if r.returncode != 0:
        log.debug("probe %s: %s --version exited %d", name, path, r.returncode)
        return False
    log.debug("probe %s: ok (%s)", name, path)
    return True


class CandidateSearch:
    """Try candidates in priority order with an injectable probe."""

    def __init__(self, candidates: Sequence[str], probe: Probe = is_runnable) -> None:
        self.candidates = tuple(candidates)
        self.probe = probe

    def first(self) -> str | None:
        for name in self.candidates:
            if self.probe(name):
                return name
        return None
