from __future__ import annotations

import io
import sys
import tarfile
import zipfile
from collections.abc import Callable, Sequence
from pathlib import Path

import pytest
from loguru import logger

from cmake_source_builder.core.exceptions import ProcessError


class FakeRunner:
    """プロセスを起動せずに呼び出しを記録するランナー."""

    def __init__(self, fail_on: str | None = None, returncode: int = 1) -> None:
        self.calls: list[tuple[str, list[str]]] = []
        self.fail_on = fail_on
        self.returncode = returncode

    def run(
        self,
        program: str,
        args: Sequence[str | Path],
        cwd: Path | None = None,
        capture_output: bool = False,
    ) -> str:
        argv = [str(a) for a in args]
        self.calls.append((program, argv))
        if program == self.fail_on:
            raise ProcessError([program, *argv], self.returncode)
        return ""

    def programs(self) -> list[str]:
        return [program for program, _ in self.calls]


def _tar_gz_bytes(files: dict[str, str]) -> bytes:
    buf = io.BytesIO()
    with tarfile.open(fileobj=buf, mode="w:gz") as tar:
        for name, content in files.items():
            data = content.encode("utf-8")
            info = tarfile.TarInfo(name)
            info.size = len(data)
            tar.addfile(info, io.BytesIO(data))
    return buf.getvalue()


def _zip_bytes(files: dict[str, str]) -> bytes:
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w") as zf:
        for name, content in files.items():
            zf.writestr(name, content)
    return buf.getvalue()


@pytest.fixture
def runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture
def failing_runner() -> Callable[[str], FakeRunner]:
    return lambda program: FakeRunner(fail_on=program)


@pytest.fixture
def tar_gz_bytes() -> Callable[[dict[str, str]], bytes]:
    return _tar_gz_bytes


@pytest.fixture
def zip_bytes() -> Callable[[dict[str, str]], bytes]:
    return _zip_bytes


@pytest.fixture
def fake_download() -> Callable[[bytes], Callable[[str, Path], Path]]:
    """指定バイト列を書き出すダウンロード関数を作る. 呼び出されたURLは .urls に残る."""

    def factory(payload: bytes) -> Callable[[str, Path], Path]:
        def download(url: str, dest_dir: Path) -> Path:
            download.urls.append(url)
            dest_dir.mkdir(parents=True, exist_ok=True)
            path = dest_dir / "archive.download"
            path.write_bytes(payload)
            return path

        download.urls = []
        return download

    return factory


@pytest.fixture
def log_messages():
    """loguru の出力を (level, message) のリストとして集める."""
    messages: list[tuple[str, str]] = []
    handler_id = logger.add(lambda m: messages.append((m.record["level"].name, m.record["message"])))
    yield messages
    logger.remove(handler_id)


@pytest.fixture
def restore_logger():
    yield
    logger.remove()
    logger.add(sys.stderr)
