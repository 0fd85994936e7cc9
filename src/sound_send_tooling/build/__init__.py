"""Release build matrix for sound_send (cargo, native + cross targets)."""

from .jobs import PROFILES, BuildCommand, BuildJobSpec, plan_job
from .manifest import BinaryManifest, load_manifest
from .matrix import BuildMatrix, matrix_from_config, release_matrix

__all__ = [
    "PROFILES",
    "BinaryManifest",
    "BuildCommand",
    "BuildJobSpec",
    "BuildMatrix",
    "load_manifest",
    "matrix_from_config",
    "plan_job",
    "release_matrix",
]
