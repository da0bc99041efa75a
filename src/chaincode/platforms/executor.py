"""
Build executors: the capability that turns a source package into build output.

An executor receives a `BuildSpec`, reads the gzip source package from its
input stream, and writes the build output to its output stream. Any failure
is raised as `BuildError`.
"""

import shlex
import shutil
import subprocess
from typing import Protocol

from pyvider.telemetry import logger

from .exceptions import BuildError
from .models import BuildSpec

CONTAINER_INPUT_DIR = "/chaincode/input"
CONTAINER_OUTPUT_DIR = "/chaincode/output"


class BuildExecutor(Protocol):
    def run(self, spec: BuildSpec) -> None: ...


def build_script(command: str) -> str:
    """Shell script run inside the build container."""
    return (
        "set -e; "
        f"mkdir -p {CONTAINER_INPUT_DIR} {CONTAINER_OUTPUT_DIR}; "
        f"tar -C {CONTAINER_INPUT_DIR} -xzf -; "
        f"{command} 1>&2; "
        f"tar -C {CONTAINER_OUTPUT_DIR} -cf - ."
    )


class DockerBuildExecutor:
    """Runs the build command in a throwaway container via the docker CLI."""

    def __init__(self, docker: str = "docker", timeout: float | None = None) -> None:
        self.docker = docker
        self.timeout = timeout

    def _command(self, spec: BuildSpec) -> list[str]:
        return [
            self.docker, "run", "--rm", "-i",
            spec.image,
            "/bin/sh", "-c", build_script(spec.command),
        ]

    def run(self, spec: BuildSpec) -> None:
        if not shutil.which(self.docker):
            raise BuildError(f"'{self.docker}' not found in PATH.")

        command = self._command(spec)
        logger.info(f"Running command: {shlex.join(command)}")
        try:
            result = subprocess.run(
                command,
                input=spec.input_stream.read(),
                capture_output=True,
                timeout=self.timeout,
                check=False,
            )
        except subprocess.TimeoutExpired as e:
            raise BuildError(
                f"Build did not finish within {self.timeout} seconds."
            ) from e
        except OSError as e:
            raise BuildError(f"Could not start build container: {e}") from e

        stderr = result.stderr.decode(errors="replace").strip()
        if result.returncode != 0:
            raise BuildError(
                f"Error returned from build: {result.returncode}\n"
                f"  Image: {spec.image}\n"
                f"  Command: {spec.command}\n"
                f"  Output:\n{stderr}"
            )
        if stderr:
            logger.debug("Build output", output=stderr)

        spec.output_stream.write(result.stdout)
