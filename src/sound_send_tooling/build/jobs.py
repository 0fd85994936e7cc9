"""One cargo build invocation: target, profile, features, optional single binary."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

from sound_send_tooling.build.manifest import BinaryManifest
from sound_send_tooling.errors import InvalidJobSpec
from sound_send_tooling.toolchain.resolver import ToolchainResolver
from sound_send_tooling.toolchain.targets import TargetTriple, parse_target

PROFILES = ("debug", "release")


@dataclass(frozen=True)
class BuildJobSpec:
    target: TargetTriple
    profile: str = "debug"
    features: frozenset[str] = frozenset()
    binary: str | None = None

    def __post_init__(self) -> None:
        if self.profile not in PROFILES:
            msg = f"Unknown profile {self.profile!r} (expected debug or release)"
            raise InvalidJobSpec(msg)
        object.__setattr__(self, "features", frozenset(self.features))

    @property
    def job_id(self) -> str:
        """Stable id, e.g. native/release/+cpal or x86_64-pc-windows-gnu/release/bin=udp_sender."""
        parts = [self.target.name, self.profile]
        if self.features:
            parts.append("+" + ",".join(sorted(self.features)))
        if self.binary:
            parts.append(f"bin={self.binary}")
        return "/".join(parts)

    def cargo_args(self) -> list[str]:
        args = ["build"]
        if self.profile == "release":
            args.append("--release")
        if self.features:
            args += ["--features", ",".join(sorted(self.features))]
        if self.binary:
            args += ["--bin", self.binary]
        return args + self.target.cargo_args()

    def validate(self, manifest: BinaryManifest) -> None:
        """Raise InvalidJobSpec if the binary or a feature is unknown, or a required feature is missing."""
        unknown = sorted(self.features - manifest.features)
        if unknown:
            msg = f"{self.job_id}: unknown feature(s) {', '.join(unknown)}"
            raise InvalidJobSpec(msg)
        if self.binary is None:
            return
        if not manifest.has_binary(self.binary):
            known = ", ".join(sorted(manifest.binaries)) or "(none)"
            msg = f"{self.job_id}: binary {self.binary!r} not in manifest (known: {known})"
            raise InvalidJobSpec(msg)
        missing = sorted(manifest.required_features(self.binary) - self.features)
        if missing:
            msg = f"{self.job_id}: binary {self.binary!r} requires feature(s) {', '.join(missing)}"
            raise InvalidJobSpec(msg)

    @classmethod
    def from_mapping(cls, entry: dict) -> BuildJobSpec:
        """Build from a config entry {target, profile, features, bin}."""
        if not isinstance(entry, dict) or "target" not in entry:
            msg = f"Matrix entry must be a mapping with a target: {entry!r}"
            raise InvalidJobSpec(msg)
        try:
            target = parse_target(str(entry["target"]))
        except ValueError as e:
            raise InvalidJobSpec(str(e)) from e
        features = entry.get("features") or []
        if isinstance(features, str):
            features = [f.strip() for f in features.split(",") if f.strip()]
        elif not isinstance(features, list) or not all(isinstance(f, str) for f in features):
            msg = f"Matrix entry features must be a list or comma-separated string: {entry!r}"
            raise InvalidJobSpec(msg)
        binary = entry.get("bin")
        if binary is not None and not isinstance(binary, str):
            msg = f"Matrix entry bin must be a binary name: {entry!r}"
            raise InvalidJobSpec(msg)
        profile = entry.get("profile", "debug")
        if not isinstance(profile, str):
            msg = f"Matrix entry profile must be a string: {entry!r}"
            raise InvalidJobSpec(msg)
        return cls(
            target=target,
            profile=profile,
            features=frozenset(features),
            binary=binary,
        )


@dataclass(frozen=True)
class BuildCommand:
    """A job made executable: cargo argv plus the child env carrying the resolved linker."""

    job: BuildJobSpec
    argv: list[str]
    env: dict[str, str] = field(default_factory=dict)
    linker: str | None = None


def plan_job(job: BuildJobSpec, resolver: ToolchainResolver, cargo: str = "cargo") -> BuildCommand:
    """Resolve the linker for job (fresh, no caching) and build its command. May raise ToolchainNotFound."""
    linker = resolver.resolve(job.target)
    var = job.target.linker_env_var()
    env = {var: linker} if var else {}
    return BuildCommand(job=job, argv=[cargo, *job.cargo_args()], env=env, linker=linker)


def jobs_from_config(entries: Iterable[dict]) -> list[BuildJobSpec]:
    return [BuildJobSpec.from_mapping(e) for e in entries]
