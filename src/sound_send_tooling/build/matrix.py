"""Release build matrix: ordered, independent BuildJobSpecs.

The canonical matrix is {debug, release} x {no features, cpal} for the native
host, plus two single-binary release jobs for the artifacts that ship to other
platforms: udp_reciever for x86_64 Linux and udp_sender for Windows (GNU).
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from sound_send_tooling.build.jobs import PROFILES, BuildJobSpec, jobs_from_config
from sound_send_tooling.build.manifest import BinaryManifest
from sound_send_tooling.errors import InvalidJobSpec
from sound_send_tooling.toolchain.targets import LINUX_X86_64, NATIVE, WINDOWS_X86_64

AUDIO_CAPTURE_FEATURE = "cpal"
RECEIVER_BIN = "udp_reciever"
SENDER_BIN = "udp_sender"


class BuildMatrix:
    def __init__(self, jobs: Iterable[BuildJobSpec]) -> None:
        self.jobs: tuple[BuildJobSpec, ...] = tuple(jobs)
        seen: set[str] = set()
        for job in self.jobs:
            if job.job_id in seen:
                msg = f"Duplicate job in matrix: {job.job_id}"
                raise InvalidJobSpec(msg)
            seen.add(job.job_id)

    def __iter__(self) -> Iterator[BuildJobSpec]:
        return iter(self.jobs)

    def __len__(self) -> int:
        return len(self.jobs)

    def job_ids(self) -> list[str]:
        return [j.job_id for j in self.jobs]

    def validate(self, manifest: BinaryManifest) -> None:
        for job in self.jobs:
            job.validate(manifest)


def release_matrix() -> BuildMatrix:
    jobs = [
        BuildJobSpec(NATIVE, profile, features)
        for features in (frozenset(), frozenset({AUDIO_CAPTURE_FEATURE}))
        for profile in PROFILES
    ]
    jobs.append(BuildJobSpec(LINUX_X86_64, "release", binary=RECEIVER_BIN))
    jobs.append(BuildJobSpec(WINDOWS_X86_64, "release", binary=SENDER_BIN))
    return BuildMatrix(jobs)


def matrix_from_config(config: dict) -> BuildMatrix:
    """config["matrix"] when set (a list of job mappings), else the release matrix."""
    entries = config.get("matrix")
    if entries is None:
        return release_matrix()
    if not isinstance(entries, list):
        msg = "matrix must be a list of job mappings"
        raise InvalidJobSpec(msg)
    return BuildMatrix(jobs_from_config(entries))
