"""GitHub Actions の入出力レイヤ.

入力は INPUT_<NAME> 環境変数から読み、出力は GITHUB_OUTPUT ファイルへ追記する。
ワークフローコマンド（::debug:: / ::warning:: / ::error::）の書式もここで扱う。
"""

from __future__ import annotations

import os
import sys
import uuid
from collections.abc import Mapping
from pathlib import Path
from typing import Any, TextIO

from loguru import logger

from ..core.exceptions import MissingInputError


def escape_data(value: str) -> str:
    return value.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


def issue_command(command: str, message: str, stream: TextIO | None = None) -> None:
    stream = stream or sys.stdout
    stream.write(f"::{command}::{escape_data(message)}\n")
    stream.flush()


def is_github_actions(environ: Mapping[str, str] | None = None) -> bool:
    environ = os.environ if environ is None else environ
    return environ.get("GITHUB_ACTIONS") == "true"


class WorkflowInputs:
    """名前付き入力の取得.

    CLI等からの明示値 > INPUT_* 環境変数 > 設定ファイルの既定値 の順に解決する。
    """

    def __init__(
        self,
        environ: Mapping[str, str] | None = None,
        overrides: Mapping[str, Any] | None = None,
        defaults: Mapping[str, Any] | None = None,
    ) -> None:
        self._environ = os.environ if environ is None else environ
        self._overrides = dict(overrides or {})
        self._defaults = dict(defaults or {})

    @staticmethod
    def env_name(name: str) -> str:
        return f"INPUT_{name.replace(' ', '_').upper()}"

    def get(self, name: str, required: bool = False) -> Any:
        """入力値を取得する.

        文字列は前後の空白を除く。設定ファイル由来の辞書・リストはそのまま返す。

        Raises:
            MissingInputError: required=True で値が空または未指定の場合
        """
        value = self._overrides.get(name)
        if value is None:
            value = self._environ.get(self.env_name(name))
        if value is None or (isinstance(value, str) and not value.strip()):
            value = self._defaults.get(name)

        if isinstance(value, str):
            value = value.strip()
        if required and (value is None or value == "" or value == {} or value == []):
            raise MissingInputError(name)
        return "" if value is None else value


class WorkflowOutputs:
    """名前付き出力の書き出し.

    GITHUB_OUTPUT が設定されていればファイルへ追記し、
    なければ旧形式の ::set-output コマンドを標準出力へ書く。
    """

    def __init__(
        self,
        environ: Mapping[str, str] | None = None,
        stream: TextIO | None = None,
    ) -> None:
        self._environ = os.environ if environ is None else environ
        self._stream = stream
        self.values: dict[str, str] = {}

    def set(self, name: str, value: object) -> None:
        text = str(value)
        self.values[name] = text

        output_file = self._environ.get("GITHUB_OUTPUT")
        if output_file:
            delimiter = f"ghadelimiter_{uuid.uuid4()}"
            with open(Path(output_file), "a", encoding="utf-8") as f:
                f.write(f"{name}<<{delimiter}\n{text}\n{delimiter}\n")
        else:
            stream = self._stream or sys.stdout
            stream.write(f"\n::set-output name={name}::{escape_data(text)}\n")
            stream.flush()

        logger.debug(f"Output {name}={text}")
