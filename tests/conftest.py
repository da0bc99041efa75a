"""Pytest fixtures for the entire chaincode-platforms test suite."""

import gzip
import io
from pathlib import Path
import tarfile
from typing import Callable

import pytest

from chaincode.platforms.exceptions import BuildError
from chaincode.platforms.models import BuildSpec

# (name, mode, tar type, content)
EntrySpec = tuple[str, int, bytes, bytes]


def make_code_package(entries: list[EntrySpec]) -> bytes:
    """Builds a gzip tar from raw entry descriptions, bypassing any normalisation."""
    buf = io.BytesIO()
    with gzip.GzipFile(filename="", mode="wb", fileobj=buf, mtime=0) as gz:
        with tarfile.open(fileobj=gz, mode="w") as tar:
            for name, mode, tar_type, content in entries:
                info = tarfile.TarInfo(name=name)
                info.mode = mode
                info.type = tar_type
                if tar_type == tarfile.SYMTYPE:
                    info.linkname = "/etc/passwd"
                    tar.addfile(info)
                elif tar_type == tarfile.REGTYPE:
                    info.size = len(content)
                    tar.addfile(info, io.BytesIO(content))
                else:
                    tar.addfile(info)
    return buf.getvalue()


@pytest.fixture
def code_package() -> Callable[[list[EntrySpec]], bytes]:
    return make_code_package


@pytest.fixture
def regular_file() -> Callable[..., EntrySpec]:
    def _regular(name: str, mode: int = 0o644, content: bytes = b"data") -> EntrySpec:
        return (name, mode, tarfile.REGTYPE, content)

    return _regular


@pytest.fixture
def java_project(tmp_path: Path) -> Path:
    """Creates a gradle project tree with build output and VCS clutter."""
    root = tmp_path / "cc-java"
    java_dir = root / "src" / "main" / "java" / "org" / "example"
    java_dir.mkdir(parents=True)
    (java_dir / "Main.java").write_text("public class Main {}\n")
    (java_dir / "Main.class").write_bytes(b"\xca\xfe\xba\xbe")
    generated = root / "src" / "main" / "resources" / "build"
    generated.mkdir(parents=True)
    (generated / "generated.txt").write_text("generated\n")
    (root / "build.gradle").write_text("plugins { id 'java' }\n")
    (root / "settings.gradle").write_text("rootProject.name = 'cc'\n")
    (root / "build" / "libs").mkdir(parents=True)
    (root / "build" / "libs" / "cc.jar").write_bytes(b"PK")
    (root / "target" / "classes").mkdir(parents=True)
    (root / "target" / "classes" / "Main.class").write_bytes(b"\xca\xfe\xba\xbe")
    (root / "out").mkdir()
    (root / "out" / "log.txt").write_text("out\n")
    (root / ".git").mkdir()
    (root / ".git" / "HEAD").write_text("ref: refs/heads/main\n")
    (root / ".gitignore").write_text("build/\n")
    return root


class RecordingExecutor:
    """In-process build executor that records specs and returns canned output."""

    def __init__(self, output: bytes = b"binary-package", error: Exception | None = None) -> None:
        self.output = output
        self.error = error
        self.specs: list[BuildSpec] = []
        self.inputs: list[bytes] = []

    def run(self, spec: BuildSpec) -> None:
        self.specs.append(spec)
        self.inputs.append(spec.input_stream.read())
        spec.output_stream.write(self.output)
        if self.error is not None:
            raise self.error


@pytest.fixture
def executor() -> RecordingExecutor:
    return RecordingExecutor()


@pytest.fixture
def failing_executor() -> RecordingExecutor:
    return RecordingExecutor(output=b"partial", error=BuildError("exit status 1"))


@pytest.fixture
def make_executor() -> type[RecordingExecutor]:
    return RecordingExecutor
