"""CI entry point: build a CMake project from a source archive and report its install dir."""

from __future__ import annotations

import argparse
import os
import sys
from dataclasses import dataclass
from functools import partial
from pathlib import Path

from loguru import logger

from ..archive import Downloader, download_file
from ..builder import BuildRequest, build
from ..config import BuilderConfig, resolve_config
from ..core.runner import ProcessRunner, Runner
from ..core.tools import must_have_bin
from ..log import setup_logging
from .workflow import WorkflowInputs, WorkflowOutputs, is_github_actions, issue_command


@dataclass(frozen=True)
class ActionResult:
    install_dir: Path | None = None
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def exit_code(self) -> int:
        return 0 if self.ok else 1


def run_action(
    inputs: WorkflowInputs,
    outputs: WorkflowOutputs,
    *,
    config: BuilderConfig,
    runner: Runner | None = None,
    download: Downloader | None = None,
) -> ActionResult:
    """入力を読み、必須ツールを確認してビルドし、install_dir を出力する.

    どの段階の例外もここで一度だけ捕捉し、警告として記録した上で
    失敗の ActionResult として返す。失敗時は出力を設定しない。
    """
    runner = runner or ProcessRunner()
    if download is None:
        download = partial(download_file, timeout=config.download_timeout)

    try:
        url = inputs.get("url", required=True)
        cmake_args = inputs.get("cmake_args", required=True)

        must_have_bin(config.cmake)
        must_have_bin(config.make)

        result = build(
            BuildRequest(url=url, cmake_args=cmake_args),
            work_dir=config.work_dir,
            runner=runner,
            download=download,
            cmake=config.cmake,
            make=config.make,
        )
        outputs.set("install_dir", result.install_dir)
    except Exception as e:
        logger.warning(str(e))
        return ActionResult(error=e)

    return ActionResult(install_dir=result.install_dir)


_DASH_VALUE_OPTIONS = ("--cmake-args",)


def _join_dash_values(argv: list[str]) -> list[str]:
    """Rewrite ``--cmake-args -DFOO=1`` as ``--cmake-args=-DFOO=1``.

    argparse treats a separate value starting with "-" as another option.
    """
    out: list[str] = []
    i = 0
    while i < len(argv):
        arg = argv[i]
        if arg in _DASH_VALUE_OPTIONS and i + 1 < len(argv):
            out.append(f"{arg}={argv[i + 1]}")
            i += 2
            continue
        out.append(arg)
        i += 1
    return out


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        description="Download a source archive, configure it with cmake and install it with make"
    )
    p.add_argument("--url", default=None, help="archive URL (.tar.gz, .zip, .7z); overrides INPUT_URL")
    p.add_argument(
        "--cmake-args",
        default=None,
        help='cmake definitions, e.g. "-DFOO=1 -DBAR=2"; overrides INPUT_CMAKE_ARGS',
    )
    p.add_argument("--config", type=Path, default=None, help="YAML config file")
    p.add_argument(
        "--work-dir",
        type=Path,
        default=None,
        help="download/extract directory (default: $RUNNER_TEMP or the system temp dir)",
    )
    p.add_argument("--cmake", default=None, help="configure tool (default: cmake)")
    p.add_argument("--make", default=None, help="build tool (default: make)")
    p.add_argument("--timeout", type=float, default=None, help="download timeout in seconds")
    p.add_argument("--verbose", "-v", action="store_true", help="enable debug logging")
    return p.parse_args(_join_dash_values(sys.argv[1:] if argv is None else list(argv)))


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)

    verbose = args.verbose or os.environ.get("RUNNER_DEBUG") == "1"
    setup_logging("DEBUG" if verbose else "INFO", github_actions=is_github_actions())

    try:
        config = resolve_config(
            args.config,
            work_dir=args.work_dir,
            cmake=args.cmake,
            make=args.make,
            download_timeout=args.timeout,
        )
    except Exception as e:
        logger.warning(str(e))
        issue_command("error", str(e))
        return 1

    inputs = WorkflowInputs(
        overrides={"url": args.url, "cmake_args": args.cmake_args},
        defaults=config.inputs,
    )
    result = run_action(inputs, WorkflowOutputs(), config=config)
    if not result.ok:
        issue_command("error", str(result.error))
    return result.exit_code


if __name__ == "__main__":
    raise SystemExit(main())
