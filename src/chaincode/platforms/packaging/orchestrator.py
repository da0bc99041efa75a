"""Core logic for building chaincode packages with an injected build executor."""

import io
import tarfile

from pyvider.telemetry import logger

from ..exceptions import BuildError, PackagingIOError
from ..executor import BuildExecutor
from ..models import BINPACKAGE_NAME, DEFAULT_BUILD_COMMAND, BuildSpec
from .writer import write_bytes_to_package


class BuildOrchestrator:
    def __init__(
        self,
        executor: BuildExecutor,
        image: str,
        command: str = DEFAULT_BUILD_COMMAND,
        artifact_name: str = BINPACKAGE_NAME,
    ) -> None:
        self.executor = executor
        self.image = image
        self.command = command
        self.artifact_name = artifact_name

    def build(self, code: bytes, tar: tarfile.TarFile) -> bytes:
        """
        Builds `code` and appends the build output to `tar` as one entry.

        The step is all-or-nothing: if the executor fails, or the build is
        cancelled underneath it, the partial output is dropped and nothing is
        written to `tar`.
        """
        output = io.BytesIO()
        spec = BuildSpec(
            image=self.image,
            command=self.command,
            input_stream=io.BytesIO(code),
            output_stream=output,
        )
        logger.debug(
            "Executing docker build", image=spec.image, cmd=spec.command
        )

        try:
            self.executor.run(spec)
        except Exception as e:
            logger.error(f"Can't build chaincode: {e}")
            raise BuildError(f"can't build chaincode: {e}") from e

        result_bytes = output.getvalue()
        try:
            write_bytes_to_package(self.artifact_name, result_bytes, tar)
        except OSError as e:
            raise PackagingIOError(
                f"failed to write {self.artifact_name} to build package: {e}"
            ) from e

        logger.info(
            f"Added {self.artifact_name} to build package", size=len(result_bytes)
        )
        return result_bytes
