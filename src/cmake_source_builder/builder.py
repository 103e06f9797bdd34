"""Source build pipeline: download, unpack, configure, build and install."""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from pathlib import Path

from loguru import logger

from .archive import Downloader, download_and_unpack, download_file
from .cmake import CmakeArgs, run_cmake, run_make
from .core.runner import Runner
from .source_root import resolve_source_root


@dataclass(frozen=True)
class BuildRequest:
    url: str
    cmake_args: CmakeArgs


@dataclass(frozen=True)
class BuildResult:
    source_dir: Path
    build_dir: Path
    install_dir: Path


def build(
    request: BuildRequest,
    *,
    work_dir: Path,
    runner: Runner,
    download: Downloader = download_file,
    cmake: str = "cmake",
    make: str = "make",
) -> BuildResult:
    """アーカイブを取得してビルドし、インストール先を返す.

    ビルドディレクトリとインストールディレクトリは展開先の下に
    uuid4 で一意に生成する。

    Args:
        request: アーカイブURLと cmake 引数
        work_dir: ダウンロード・展開用の作業ディレクトリ
        runner: 外部プロセスランナー
        download: ダウンロード関数
        cmake: configure ツール名
        make: build ツール名

    Returns:
        ソース・ビルド・インストール各ディレクトリ
    """
    logger.debug("Building the project...")
    logger.debug(f"url={request.url}, args={request.cmake_args}")

    extracted = download_and_unpack(request.url, work_dir, runner=runner, download=download)
    source_dir = resolve_source_root(extracted)
    build_dir = extracted / str(uuid.uuid4())
    install_dir = extracted / str(uuid.uuid4())

    logger.debug(f"cmake arguments: {request.cmake_args}")
    run_cmake(request.cmake_args, source_dir, build_dir, install_dir, runner=runner, cmake=cmake)
    run_make(build_dir, runner=runner, make=make)

    logger.info(f"Installed to {install_dir}")
    return BuildResult(source_dir=source_dir, build_dir=build_dir, install_dir=install_dir)
