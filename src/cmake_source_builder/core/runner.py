"""外部プロセス実行レイヤ.

cmake / make / 7z の呼び出しは全て ProcessRunner を経由する。
テストでは同じ run() シグネチャを持つフェイクに差し替える。
"""

from __future__ import annotations

import shlex
import subprocess
from collections.abc import Sequence
from pathlib import Path
from typing import Protocol

from loguru import logger

from .exceptions import ProcessError


class Runner(Protocol):
    def run(
        self,
        program: str,
        args: Sequence[str | Path],
        cwd: Path | None = None,
        capture_output: bool = False,
    ) -> str: ...


class ProcessRunner:
    """subprocess による外部プロセス実行.

    標準出力はキャプチャ指定時のみ戻り値として返し、
    それ以外はそのままホストのログへ流す。
    """

    def run(
        self,
        program: str,
        args: Sequence[str | Path],
        cwd: Path | None = None,
        capture_output: bool = False,
    ) -> str:
        """プログラムを実行して完了を待つ.

        Args:
            program: 実行するプログラム名またはパス
            args: 引数リスト
            cwd: 作業ディレクトリ
            capture_output: 標準出力を取得するか

        Returns:
            キャプチャした標準出力（capture_output=False の場合は空文字列）

        Raises:
            ProcessError: 終了コードが0以外の場合
        """
        command = [program, *(str(a) for a in args)]
        logger.info(f"[command]{shlex.join(command)}")
        try:
            result = subprocess.run(
                command,
                cwd=cwd,
                capture_output=capture_output,
                text=True,
                check=True,
            )
        except subprocess.CalledProcessError as e:
            if e.stderr:
                logger.debug(e.stderr.strip())
            raise ProcessError(command, e.returncode) from e

        return result.stdout if capture_output else ""
