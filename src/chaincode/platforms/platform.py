"""The per-language platform capability and the registry that looks platforms up."""

import tarfile
from typing import Protocol

from pyvider.telemetry import logger

from .exceptions import UnknownPlatformError
from .models import ImageSpec


class Platform(Protocol):
    """Everything the peer needs to validate, package and build one chaincode language."""

    @property
    def name(self) -> str: ...

    def validate_path(self, raw_path: str) -> None: ...

    def validate_code_package(self, code: bytes) -> None: ...

    def get_deployment_payload(self, path: str) -> bytes: ...

    def generate_dockerfile(self) -> ImageSpec: ...

    def generate_docker_build(self, code: bytes, tar: tarfile.TarFile) -> bytes: ...


class PlatformRegistry:
    def __init__(self, *platforms: Platform) -> None:
        self._platforms: dict[str, Platform] = {}
        for platform in platforms:
            self.register(platform)

    def register(self, platform: Platform) -> None:
        if platform.name in self._platforms:
            raise ValueError(f"Duplicate platform registered: {platform.name}")
        logger.debug(f"Registering platform {platform.name}")
        self._platforms[platform.name] = platform

    def get(self, name: str) -> Platform:
        try:
            return self._platforms[name]
        except KeyError:
            raise UnknownPlatformError(f"Unknown chaincodeType: {name}") from None

    def names(self) -> list[str]:
        return sorted(self._platforms)

    def __contains__(self, name: object) -> bool:
        return name in self._platforms
