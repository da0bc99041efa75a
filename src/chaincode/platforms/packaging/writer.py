"""Deterministic construction of gzip tar chaincode packages."""

from collections.abc import Callable, Iterable, Iterator
from contextlib import contextmanager
import gzip
import io
import os
from pathlib import Path
import tarfile
from typing import BinaryIO

from pyvider.telemetry import logger

from ..exceptions import InvalidInputError, PackagingIOError
from ..models import (
    JAVA_EXCLUSION_RULES,
    PACKAGE_FILE_MODE,
    PACKAGE_OWNER_ID,
    ExclusionRules,
)

SOURCE_PREFIX = "src"


def create_ignore_func(
    rules: ExclusionRules,
) -> Callable[[str, list[str]], Iterable[str]]:
    """Creates a function with the shape of shutil.copytree's ignore argument."""

    def ignore(dir_path_str: str, names: list[str]) -> Iterable[str]:
        dir_path = Path(dir_path_str)
        ignored_names = set()
        for name in names:
            if ".git" in name:
                ignored_names.add(name)
            elif (dir_path / name).is_dir():
                if name in rules.excluded_directories:
                    ignored_names.add(name)
            elif Path(name).suffix in rules.excluded_extensions:
                ignored_names.add(name)
        return ignored_names

    return ignore


def _walk_sorted(
    root: Path, ignore: Callable[[str, list[str]], Iterable[str]]
) -> Iterator[Path]:
    """Yields files depth-first in lexical order, pruning ignored names."""
    names = sorted(os.listdir(root))
    ignored = set(ignore(str(root), names))
    for name in names:
        if name in ignored:
            continue
        path = root / name
        if path.is_dir():
            # Symlinked directories are not followed.
            if not path.is_symlink():
                yield from _walk_sorted(path, ignore)
        elif path.is_file():
            yield path


@contextmanager
def open_package_writer(fileobj: BinaryIO) -> Iterator[tarfile.TarFile]:
    """Opens a gzip tar writer whose output depends only on what is added."""
    with gzip.GzipFile(filename="", mode="wb", fileobj=fileobj, mtime=0) as gz:
        with tarfile.open(fileobj=gz, mode="w", format=tarfile.PAX_FORMAT) as tar:
            yield tar


def write_bytes_to_package(name: str, data: bytes, tar: tarfile.TarFile) -> None:
    """Appends `data` as a single regular file entry with normalised headers."""
    info = tarfile.TarInfo(name=name)
    info.size = len(data)
    info.mode = PACKAGE_FILE_MODE
    info.mtime = 0
    info.uid = info.gid = PACKAGE_OWNER_ID
    info.uname = info.gname = ""
    tar.addfile(info, io.BytesIO(data))


def write_folder_to_package(
    tar: tarfile.TarFile, src_path: str, rules: ExclusionRules
) -> int:
    """Writes every non-excluded file under `src_path` as `src/<relative path>`."""
    root = Path(src_path)
    file_count = 0
    for path in _walk_sorted(root, create_ignore_func(rules)):
        package_path = f"{SOURCE_PREFIX}/{path.relative_to(root).as_posix()}"
        write_bytes_to_package(package_path, path.read_bytes(), tar)
        file_count += 1
    return file_count


class ArchivePackager:
    """Packages a chaincode source tree into a reproducible gzip tar."""

    def __init__(self, exclusion_rules: ExclusionRules = JAVA_EXCLUSION_RULES) -> None:
        self.exclusion_rules = exclusion_rules

    def package(self, source_directory: str) -> bytes:
        logger.debug(f"Packaging chaincode project from path {source_directory}")
        if not source_directory:
            logger.error("Chaincode path cannot be empty")
            raise InvalidInputError("chaincode path cannot be empty")

        # trim trailing slash if it exists
        root = source_directory.rstrip("/") or "/"

        buf = io.BytesIO()
        try:
            with open_package_writer(buf) as tar:
                file_count = write_folder_to_package(tar, root, self.exclusion_rules)
        except OSError as e:
            logger.error(f"Error writing chaincode project to tar package: {e}")
            raise PackagingIOError(f"failed to create chaincode package: {e}") from e

        if file_count == 0:
            raise InvalidInputError(f"no source files found in '{source_directory}'")

        logger.info(f"Packaged {file_count} files from {root}", size=buf.tell())
        return buf.getvalue()
