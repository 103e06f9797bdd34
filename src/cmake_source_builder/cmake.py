"""cmake（configure）と make（build/install）の呼び出し."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from pathlib import Path

from loguru import logger

from .core.runner import Runner

CmakeArgs = str | Mapping[str, object] | Sequence[str]


def _define_value(value: object) -> str:
    if isinstance(value, bool):
        return "ON" if value else "OFF"
    return str(value)


def parse_cmake_args(raw: CmakeArgs) -> list[str]:
    """cmake の -D 定義を引数リストに変換する.

    文字列はリテラル "-D" で分割し、前後の空白を除いて空の断片を捨て、
    各断片に "-D" を付け直す。値の中に "-D" を含む定義も分割される。

    Args:
        raw: "-DFOO=1 -DBAR=2" 形式の文字列、{"FOO": 1} 形式の辞書、
            または "FOO=1" / "-DFOO=1" 形式の文字列リスト

    Returns:
        -D 付き引数のリスト（入力順）

    Examples:
        >>> parse_cmake_args("-DFOO=1 -DBAR=2")
        ['-DFOO=1', '-DBAR=2']
        >>> parse_cmake_args({"BUILD_SHARED_LIBS": False})
        ['-DBUILD_SHARED_LIBS=OFF']
    """
    if isinstance(raw, str):
        fragments = (fragment.strip() for fragment in raw.split("-D"))
        return [f"-D{fragment}" for fragment in fragments if fragment]

    if isinstance(raw, Mapping):
        return [f"-D{key}={_define_value(value)}" for key, value in raw.items()]

    args = []
    for item in raw:
        item = str(item).strip()
        if not item:
            continue
        args.append(item if item.startswith("-D") else f"-D{item}")
    return args


def configure_args(
    raw: CmakeArgs,
    source_dir: Path,
    build_dir: Path,
    install_dir: Path,
) -> list[str]:
    args = parse_cmake_args(raw)
    args.append(f"-H{source_dir}")  # source dir
    args.append(f"-B{build_dir}")  # build dir
    args.append(f"-DCMAKE_INSTALL_PREFIX={install_dir}")  # install dir
    return args


def run_cmake(
    raw: CmakeArgs,
    source_dir: Path,
    build_dir: Path,
    install_dir: Path,
    *,
    runner: Runner,
    cmake: str = "cmake",
) -> None:
    logger.debug("running cmake")
    logger.debug(f"args={raw}, src={source_dir}, dst={build_dir}, install={install_dir}")
    runner.run(cmake, configure_args(raw, source_dir, build_dir, install_dir))


def run_make(build_dir: Path, *, runner: Runner, make: str = "make") -> None:
    logger.debug("running make")
    runner.run(make, ["-C", build_dir, "install"])
