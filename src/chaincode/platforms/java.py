"""The Java chaincode platform."""

import re
import tarfile
from urllib.parse import urlparse

from pyvider.telemetry import logger

from .config import PlatformConfig
from .dockerfile import generate_dockerfile
from .exceptions import InvalidInputError
from .executor import BuildExecutor, DockerBuildExecutor
from .models import (
    JAVA_EXCLUSION_RULES,
    JAVA_MODE_POLICY,
    JAVA_PATH_POLICY,
    JAVA_PLATFORM_NAME,
    ImageSpec,
)
from .packaging.orchestrator import BuildOrchestrator
from .packaging.validator import ArchiveValidator
from .packaging.writer import ArchivePackager
from .platform import PlatformRegistry

_BAD_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")


class JavaPlatform:
    def __init__(
        self,
        config: PlatformConfig | None = None,
        executor: BuildExecutor | None = None,
    ) -> None:
        self.config = config or PlatformConfig()
        self.executor = executor or DockerBuildExecutor(
            timeout=self.config.build_timeout
        )
        self.validator = ArchiveValidator(JAVA_PATH_POLICY, JAVA_MODE_POLICY)
        self.packager = ArchivePackager(JAVA_EXCLUSION_RULES)

    @property
    def name(self) -> str:
        return JAVA_PLATFORM_NAME

    def validate_path(self, raw_path: str) -> None:
        """
        Java chaincode paths only need to parse as a URL. Control characters,
        malformed percent escapes, a leading ":" (empty scheme) and bracketed
        hosts that do not parse are rejected.
        """
        problem = None
        if any(ord(c) < 0x20 or c == "\x7f" for c in raw_path):
            problem = "invalid control character in URL"
        elif raw_path.startswith(":"):
            problem = "missing protocol scheme"
        elif match := _BAD_ESCAPE.search(raw_path):
            problem = f"invalid URL escape {raw_path[match.start() : match.start() + 3]!r}"
        else:
            try:
                urlparse(raw_path)
            except ValueError as e:
                problem = str(e)

        if problem is not None:
            logger.error(f"Invalid chaincode path {raw_path!r}: {problem}")
            raise InvalidInputError(f"invalid path: {problem}")

    def validate_code_package(self, code: bytes) -> None:
        self.validator.validate(code)

    def get_deployment_payload(self, path: str) -> bytes:
        return self.packager.package(path)

    def generate_dockerfile(self) -> ImageSpec:
        return generate_dockerfile(self.config.runtime_image)

    def generate_docker_build(self, code: bytes, tar: tarfile.TarFile) -> bytes:
        """Validates `code`, builds it and appends the artifact to `tar`."""
        self.validate_code_package(code)
        orchestrator = BuildOrchestrator(
            executor=self.executor,
            image=self.config.runtime_image,
            command=self.config.build_command,
        )
        return orchestrator.build(code, tar)


def default_registry(
    config: PlatformConfig | None = None, executor: BuildExecutor | None = None
) -> PlatformRegistry:
    """Builds the registry of every supported platform."""
    return PlatformRegistry(JavaPlatform(config=config, executor=executor))
