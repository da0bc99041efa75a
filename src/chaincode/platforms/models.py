import re
import stat
from typing import BinaryIO

from attrs import define, field

# Java chaincode platform constants
JAVA_PLATFORM_NAME: str = "JAVA"
JAVA_ALLOWED_PATHS = re.compile(
    r"^(/)?src/((src|META-INF)/.*|(build\.gradle|settings\.gradle|pom\.xml))"
)
JAVA_DENIED_PATHS = re.compile(r".*\.class\Z")

# Acceptable flags: ISREG == 0100000, -rw-rw-rw- == 0666
JAVA_PERMITTED_MODE: int = stat.S_IFREG | 0o666

JAVA_EXCLUDED_DIRECTORIES = frozenset({"target", "build", "out"})
JAVA_EXCLUDED_EXTENSIONS = frozenset({".class"})

BINPACKAGE_NAME: str = "binpackage.tar"
JAVA_CHAINCODE_PATH: str = "/root/chaincode-java/chaincode"
DEFAULT_BUILD_COMMAND: str = "./build.sh"
DEFAULT_JAVA_RUNTIME: str = "hyperledger/fabric-javaenv:latest"

# Normalised tar header values for reproducible packages
PACKAGE_FILE_MODE: int = stat.S_IFREG | 0o644
PACKAGE_OWNER_ID: int = 500


def _non_empty(instance: object, attribute: object, value: str) -> None:
    if not value:
        raise ValueError("Archive entry path cannot be empty.")


@define(frozen=True, slots=True)
class ArchiveEntry:
    path: str = field(validator=_non_empty)
    mode: int
    content: bytes = field(default=b"", repr=False)

    @property
    def size(self) -> int:
        return len(self.content)


@define(frozen=True, slots=True)
class PathPolicy:
    allow: re.Pattern[str]
    deny: re.Pattern[str]

    def permits(self, path: str) -> bool:
        """A path passes when it matches `allow` and does not match `deny`."""
        return bool(self.allow.match(path)) and not self.deny.search(path)


@define(frozen=True, slots=True)
class ModePolicy:
    permitted_mask: int

    def permits(self, mode: int) -> bool:
        return mode & ~self.permitted_mask == 0


@define(frozen=True, slots=True)
class ExclusionRules:
    excluded_directories: frozenset[str] = field(converter=frozenset)
    excluded_extensions: frozenset[str] = field(converter=frozenset)


@define(frozen=True, slots=True)
class BuildSpec:
    image: str
    command: str
    input_stream: BinaryIO
    output_stream: BinaryIO


@define(frozen=True, slots=True)
class ImageSpec:
    instructions: tuple[str, ...] = field(converter=tuple)

    def render(self) -> str:
        return "\n".join(self.instructions)


JAVA_PATH_POLICY = PathPolicy(allow=JAVA_ALLOWED_PATHS, deny=JAVA_DENIED_PATHS)
JAVA_MODE_POLICY = ModePolicy(permitted_mask=JAVA_PERMITTED_MODE)
JAVA_EXCLUSION_RULES = ExclusionRules(
    excluded_directories=JAVA_EXCLUDED_DIRECTORIES,
    excluded_extensions=JAVA_EXCLUDED_EXTENSIONS,
)
