"""Tooling configuration: defaults plus optional sound-send-tooling.yaml overrides.

Config YAML format (all keys optional):
- cargo: cargo executable
- fmt_toolchain: rustup toolchain selector for fmt (e.g. +nightly; empty to use the default)
- fmt_config: rustfmt --config options
- lint_args: clippy arguments after --
- test_target: triple for the test step (unset = host)
- default_compiler: compiler used for native targets
- candidates: map triple -> [compiler, ...] overriding the built-in probe order
- matrix: list of {target, profile, features, bin} replacing the release matrix
"""

from __future__ import annotations

import copy
import logging
from pathlib import Path
from typing import Any

import yaml

log = logging.getLogger(__name__)

CONFIG_FILE_NAME = "sound-send-tooling.yaml"

DEFAULT_CONFIG: dict[str, Any] = {
    "cargo": "cargo",
    "fmt_toolchain": "+nightly",
    "fmt_config": "error_on_line_overflow=true,error_on_unformatted=true",
    "lint_args": ["-D", "warnings"],
    "test_target": None,
    "default_compiler": "gcc",
    "candidates": {},
    "matrix": None,
}


def resolve_config(overrides: dict[str, Any] | None) -> dict[str, Any]:
    """Return config dict with defaults filled. Unknown keys are dropped."""
    out = copy.deepcopy(DEFAULT_CONFIG)
    if overrides is None:
        return out
    for k, v in overrides.items():
        if k not in out:
            log.debug("Ignoring unknown config key %s", k)
            continue
        out[k] = v
    if not _is_str_list(out["lint_args"]):
        msg = "lint_args must be a list of strings"
        raise ValueError(msg)
    for key in ("cargo", "default_compiler"):
        if not isinstance(out[key], str) or not out[key]:
            msg = f"{key} must be a non-empty string"
            raise ValueError(msg)
    candidates = out["candidates"]
    if not isinstance(candidates, dict):
        msg = "candidates must map target triples to lists of compiler names"
        raise ValueError(msg)
    for triple, names in candidates.items():
        if not isinstance(triple, str) or not _is_str_list(names):
            msg = f"candidates[{triple!r}] must be a list of compiler names, got {names!r}"
            raise ValueError(msg)
    return out


def _is_str_list(value: Any) -> bool:
    return isinstance(value, list) and all(isinstance(x, str) for x in value)


def load_config(project_root: Path, path: Path | None = None) -> dict[str, Any]:
    """Load config from path (or project_root/sound-send-tooling.yaml) and fill defaults.

    A missing default file yields the defaults; an explicit path must exist.
    Raises ValueError on unreadable, invalid or non-mapping YAML.
    """
    explicit = path is not None
    p = path if path is not None else project_root / CONFIG_FILE_NAME
    if not p.exists():
        if explicit:
            msg = f"Config file not found: {p}"
            raise ValueError(msg)
        return resolve_config(None)
    try:
        with p.open() as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        msg = f"Could not read config {p}: {e}"
        raise ValueError(msg) from e
    if data is None:
        data = {}
    if not isinstance(data, dict):
        msg = f"Config {p} must be a mapping, got {type(data).__name__}"
        raise ValueError(msg)
    log.debug("Loaded config from %s", p)
    return resolve_config(data)
