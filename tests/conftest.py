"""Pytest fixtures for sound_send tooling tests."""

from collections.abc import Callable
from pathlib import Path

import pytest

from sound_send_tooling.toolchain import HostPlatform

CARGO_TOML = """\
[package]
name = "sound_send"
version = "0.1.0"
edition = "2021"

[features]
default = []

[dependencies]
anyhow = "1"
cpal = { version = "0.15", optional = true }

[[bin]]
name = "udp_sender"
path = "src/bin/udp_sender.rs"

[[bin]]
name = "udp_reciever"
path = "src/bin/udp_reciever.rs"
"""


@pytest.fixture
def cargo_project(tmp_path: Path) -> Path:
    """Minimal sound_send-like cargo project with udp_sender/udp_reciever and an optional cpal dep."""
    (tmp_path / "Cargo.toml").write_text(CARGO_TOML)
    bin_dir = tmp_path / "src" / "bin"
    bin_dir.mkdir(parents=True)
    (bin_dir / "udp_sender.rs").write_text("fn main() {}\n")
    (bin_dir / "udp_reciever.rs").write_text("fn main() {}\n")
    (tmp_path / "src" / "lib.rs").write_text("")
    return tmp_path


@pytest.fixture
def linux_x86_64() -> HostPlatform:
    return HostPlatform("linux", "x86_64")


@pytest.fixture
def linux_aarch64() -> HostPlatform:
    return HostPlatform("linux", "aarch64")


@pytest.fixture
def fake_path() -> Callable[..., Callable[[str], bool]]:
    """Factory for a probe that only 'finds' the given names and records every name asked."""

    def make(*present: str) -> Callable[[str], bool]:
        asked: list[str] = []

        def probe(name: str) -> bool:
            asked.append(name)
            return name in present

        probe.asked = asked  # type: ignore[attr-defined]
        return probe

    return make
