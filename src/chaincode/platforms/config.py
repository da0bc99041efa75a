"""Loads platform settings from the `[tool.chaincode.java]` table of a TOML manifest."""

import os
from pathlib import Path
import tomllib
from typing import Any

from attrs import define, field

from .exceptions import InvalidInputError
from .models import DEFAULT_BUILD_COMMAND, DEFAULT_JAVA_RUNTIME

RUNTIME_ENV_VAR = "CHAINCODE_JAVA_RUNTIME"


def _positive_or_none(instance: object, attribute: Any, value: float | None) -> None:
    if value is None:
        return
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidInputError(f"'{attribute.name}' must be a number of seconds, not {value!r}.")
    if value <= 0:
        raise InvalidInputError(f"'{attribute.name}' must be a positive number of seconds.")


@define(frozen=True, slots=True)
class PlatformConfig:
    runtime_image: str = DEFAULT_JAVA_RUNTIME
    build_command: str = DEFAULT_BUILD_COMMAND
    build_timeout: float | None = field(default=None, validator=_positive_or_none)


def load_config(manifest_path: Path | None = None) -> PlatformConfig:
    """
    Reads the platform configuration.

    A missing manifest or table gives the defaults. The runtime image can be
    overridden with the CHAINCODE_JAVA_RUNTIME environment variable.
    """
    java_conf: dict[str, Any] = {}
    if manifest_path is not None and manifest_path.exists():
        try:
            with manifest_path.open("rb") as f:
                manifest_data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise InvalidInputError(f"Invalid manifest {manifest_path}: {e}") from e
        java_conf = manifest_data.get("tool", {}).get("chaincode", {}).get("java", {})

    runtime_image = os.environ.get(RUNTIME_ENV_VAR) or java_conf.get(
        "runtime_image", DEFAULT_JAVA_RUNTIME
    )
    return PlatformConfig(
        runtime_image=runtime_image,
        build_command=java_conf.get("build_command", DEFAULT_BUILD_COMMAND),
        build_timeout=java_conf.get("build_timeout"),
    )
