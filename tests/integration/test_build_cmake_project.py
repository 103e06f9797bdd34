"""Integration tests: build a real CMake project from an in-memory archive.

cmake と make が PATH 上にない環境ではスキップする。
"""

from __future__ import annotations

import shutil
from functools import partial
from pathlib import Path

import httpx
import pytest

from cmake_source_builder.archive import download_file
from cmake_source_builder.builder import BuildRequest, build
from cmake_source_builder.ci.main import run_action
from cmake_source_builder.ci.workflow import WorkflowInputs, WorkflowOutputs
from cmake_source_builder.config import BuilderConfig
from cmake_source_builder.core.exceptions import ProcessError
from cmake_source_builder.core.runner import ProcessRunner

CMAKE_LISTS = """\
cmake_minimum_required(VERSION 3.10)
project(hello NONE)
if(NOT HELLO_NAME)
  message(FATAL_ERROR "HELLO_NAME is required")
endif()
configure_file(hello.txt.in hello.txt)
install(FILES ${CMAKE_CURRENT_BINARY_DIR}/hello.txt DESTINATION share/hello)
"""

pytestmark = [
    pytest.mark.integration,
    pytest.mark.skipif(
        shutil.which("cmake") is None or shutil.which("make") is None,
        reason="cmake and make are required",
    ),
]


@pytest.fixture
def served_archive(tar_gz_bytes):
    payload = tar_gz_bytes(
        {
            "hello-1.0.0/CMakeLists.txt": CMAKE_LISTS,
            "hello-1.0.0/hello.txt.in": "hello @HELLO_NAME@\n",
        }
    )

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, content=payload)

    client = httpx.Client(transport=httpx.MockTransport(handler))
    yield partial(download_file, client=client)
    client.close()


def test_build_and_install(tmp_path: Path, served_archive) -> None:
    result = build(
        BuildRequest(url="https://example.com/hello-1.0.0.tar.gz", cmake_args="-DHELLO_NAME=world"),
        work_dir=tmp_path,
        runner=ProcessRunner(),
        download=served_archive,
    )

    installed = result.install_dir / "share" / "hello" / "hello.txt"
    assert installed.read_text(encoding="utf-8") == "hello world\n"


def test_configure_failure_reported(tmp_path: Path, served_archive) -> None:
    with pytest.raises(ProcessError):
        build(
            BuildRequest(url="https://example.com/hello-1.0.0.tar.gz", cmake_args=""),
            work_dir=tmp_path,
            runner=ProcessRunner(),
            download=served_archive,
        )


def test_run_action_writes_output(tmp_path: Path, served_archive) -> None:
    output_file = tmp_path / "github_output"
    output_file.touch()
    inputs = WorkflowInputs(
        environ={
            "INPUT_URL": "https://example.com/hello-1.0.0.tar.gz",
            "INPUT_CMAKE_ARGS": "-DHELLO_NAME=action",
        }
    )
    outputs = WorkflowOutputs(environ={"GITHUB_OUTPUT": str(output_file)})

    result = run_action(inputs, outputs, config=BuilderConfig(work_dir=tmp_path / "work"), download=served_archive)

    assert result.ok, result.error
    assert (result.install_dir / "share" / "hello" / "hello.txt").exists()
    assert str(result.install_dir) in output_file.read_text(encoding="utf-8")
