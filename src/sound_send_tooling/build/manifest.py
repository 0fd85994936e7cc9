"""Project binary manifest read from Cargo.toml.

Binaries are the [[bin]] tables (name, required-features) plus cargo's
auto-discovered targets: src/main.rs (named after the package), src/bin/*.rs
and src/bin/*/main.rs, unless [package] autobins = false. Features are the
[features] keys plus optional dependencies, which cargo exposes as implicit
features.
"""

from __future__ import annotations

import logging
import tomllib
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class BinaryManifest:
    binaries: Mapping[str, frozenset[str]] = field(default_factory=dict)
    features: frozenset[str] = frozenset()

    def has_binary(self, name: str) -> bool:
        return name in self.binaries

    def required_features(self, name: str) -> frozenset[str]:
        return self.binaries.get(name, frozenset())


def _optional_deps(data: dict[str, Any]) -> set[str]:
    tables = [data.get("dependencies") or {}]
    for target_cfg in (data.get("target") or {}).values():
        if isinstance(target_cfg, dict):
            tables.append(target_cfg.get("dependencies") or {})
    out: set[str] = set()
    for deps in tables:
        for name, spec in deps.items():
            if isinstance(spec, dict) and spec.get("optional"):
                out.add(name)
    return out


def _discovered_bins(project_root: Path, package_name: str | None) -> list[str]:
    src = project_root / "src"
    names: list[str] = []
    if package_name and (src / "main.rs").is_file():
        names.append(package_name)
    bin_dir = src / "bin"
    if bin_dir.is_dir():
        for p in sorted(bin_dir.iterdir()):
            if p.is_file() and p.suffix == ".rs":
                names.append(p.stem)
            elif p.is_dir() and (p / "main.rs").is_file():
                names.append(p.name)
    return names


def parse_manifest(data: dict[str, Any], project_root: Path) -> BinaryManifest:
    package = data.get("package") or {}
    binaries: dict[str, frozenset[str]] = {}
    if package.get("autobins", True):
        for name in _discovered_bins(project_root, package.get("name")):
            binaries[name] = frozenset()
    for entry in data.get("bin") or []:
        name = entry.get("name")
        if not name:
            continue
        binaries[name] = frozenset(entry.get("required-features") or [])
    features = set((data.get("features") or {}).keys()) | _optional_deps(data)
    return BinaryManifest(binaries=binaries, features=frozenset(features))


def load_manifest(project_root: Path) -> BinaryManifest:
    """Read project_root/Cargo.toml. Raises ValueError when missing or not valid TOML."""
    cargo_toml = project_root / "Cargo.toml"
    if not cargo_toml.is_file():
        msg = f"{cargo_toml} not found"
        raise ValueError(msg)
    try:
        with cargo_toml.open("rb") as f:
            data = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        msg = f"Could not parse {cargo_toml}: {e}"
        raise ValueError(msg) from e
    manifest = parse_manifest(data, project_root)
    log.debug(
        "manifest %s: binaries=%s features=%s",
        cargo_toml,
        sorted(manifest.binaries),
        sorted(manifest.features),
    )
    return manifest
