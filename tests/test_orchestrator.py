"""Tests for the BuildOrchestrator class."""

from concurrent.futures import CancelledError
import io

import pytest

from chaincode.platforms.exceptions import BuildError
from chaincode.platforms.packaging.orchestrator import BuildOrchestrator
from chaincode.platforms.packaging.reader import ArchiveReader
from chaincode.platforms.packaging.writer import open_package_writer


def test_build_appends_artifact(executor, code_package, regular_file) -> None:
    code = code_package([regular_file("src/pom.xml")])
    orchestrator = BuildOrchestrator(executor, image="registry/javaenv:1.0")

    buf = io.BytesIO()
    with open_package_writer(buf) as tar:
        result = orchestrator.build(code, tar)

    assert result == b"binary-package"
    (entry,) = ArchiveReader(buf.getvalue()).entries()
    assert entry.path == "binpackage.tar"
    assert entry.content == b"binary-package"


def test_build_passes_spec_to_executor(executor) -> None:
    orchestrator = BuildOrchestrator(
        executor, image="registry/javaenv:1.0", command="./gradlew build"
    )
    with open_package_writer(io.BytesIO()) as tar:
        orchestrator.build(b"source-bytes", tar)

    (spec,) = executor.specs
    assert spec.image == "registry/javaenv:1.0"
    assert spec.command == "./gradlew build"
    assert executor.inputs == [b"source-bytes"]


def test_build_uses_fresh_spec_per_call(executor) -> None:
    orchestrator = BuildOrchestrator(executor, image="img")
    with open_package_writer(io.BytesIO()) as tar:
        orchestrator.build(b"one", tar)
        orchestrator.build(b"two", tar)

    assert executor.inputs == [b"one", b"two"]
    assert executor.specs[0].output_stream is not executor.specs[1].output_stream


def test_build_failure_writes_nothing(failing_executor) -> None:
    orchestrator = BuildOrchestrator(failing_executor, image="img")

    buf = io.BytesIO()
    with open_package_writer(buf) as tar:
        with pytest.raises(BuildError, match="can't build chaincode: exit status 1"):
            orchestrator.build(b"code", tar)

    assert list(ArchiveReader(buf.getvalue()).entries()) == []


def test_build_cancellation_is_a_build_failure(make_executor) -> None:
    cancelled = CancelledError()
    orchestrator = BuildOrchestrator(make_executor(error=cancelled), image="img")

    buf = io.BytesIO()
    with open_package_writer(buf) as tar:
        with pytest.raises(BuildError) as exc_info:
            orchestrator.build(b"code", tar)

    assert exc_info.value.__cause__ is cancelled
    assert list(ArchiveReader(buf.getvalue()).entries()) == []


def test_build_custom_artifact_name(executor) -> None:
    orchestrator = BuildOrchestrator(executor, image="img", artifact_name="out.tar")
    buf = io.BytesIO()
    with open_package_writer(buf) as tar:
        orchestrator.build(b"code", tar)
    assert [e.path for e in ArchiveReader(buf.getvalue()).entries()] == ["out.tar"]
