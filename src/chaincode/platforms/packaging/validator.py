"""Policy checks applied to untrusted code packages before they are built."""

from pyvider.telemetry import logger

from ..exceptions import PolicyViolationError
from ..models import JAVA_MODE_POLICY, JAVA_PATH_POLICY, ModePolicy, PathPolicy
from .reader import ArchiveReader


class ArchiveValidator:
    """
    Accepts or rejects a gzip tar code package as a whole.

    Every entry must satisfy the path policy (deny wins over allow) and the
    mode policy. The first entry that fails either check aborts validation
    with a `PolicyViolationError` naming it; no partial results are kept.
    """

    def __init__(
        self,
        path_policy: PathPolicy = JAVA_PATH_POLICY,
        mode_policy: ModePolicy = JAVA_MODE_POLICY,
    ) -> None:
        self.path_policy = path_policy
        self.mode_policy = mode_policy

    def validate(self, code: bytes) -> None:
        if not code:
            logger.debug("Empty code package, nothing to validate")
            return

        checked = 0
        for entry in ArchiveReader(code).entries(read_content=False):
            if not self.path_policy.permits(entry.path):
                logger.error(f"Illegal file detected in payload: {entry.path}")
                raise PolicyViolationError(
                    f'illegal file detected in payload: "{entry.path}"',
                    path=entry.path,
                    mode=entry.mode,
                )

            if not self.mode_policy.permits(entry.mode):
                logger.error(
                    f"Illegal file mode detected for file {entry.path}: {entry.mode:o}"
                )
                raise PolicyViolationError(
                    f"illegal file mode detected for file {entry.path}: {entry.mode:o}",
                    path=entry.path,
                    mode=entry.mode,
                )
            checked += 1

        logger.debug("Code package validated", entries=checked)
