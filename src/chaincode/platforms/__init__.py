"""
This package validates, packages and builds chaincode deployable units:
untrusted code packages are checked against a path and mode policy, source
trees are packaged into reproducible gzip tars, and an external build step
turns a code package into the artifact placed in the runtime image.
"""

from .dockerfile import generate_dockerfile
from .java import JavaPlatform, default_registry
from .models import (
    BINPACKAGE_NAME,
    ArchiveEntry,
    BuildSpec,
    ExclusionRules,
    ImageSpec,
    ModePolicy,
    PathPolicy,
)
from .packaging.orchestrator import BuildOrchestrator
from .packaging.validator import ArchiveValidator
from .packaging.writer import ArchivePackager
from .platform import PlatformRegistry

__all__ = [
    "BINPACKAGE_NAME",
    "ArchiveEntry",
    "ArchivePackager",
    "ArchiveValidator",
    "BuildOrchestrator",
    "BuildSpec",
    "ExclusionRules",
    "ImageSpec",
    "JavaPlatform",
    "ModePolicy",
    "PathPolicy",
    "PlatformRegistry",
    "default_registry",
    "generate_dockerfile",
]
