"""Cross-target build orchestration for sound_send: linker resolution, verification, release matrix."""

__version__ = "0.1.0"
