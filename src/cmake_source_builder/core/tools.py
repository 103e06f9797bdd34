"""ホスト上の必須実行ファイルの確認."""

from __future__ import annotations

import shutil
from pathlib import Path

from loguru import logger

from .exceptions import MissingToolError


def must_have_bin(name: str) -> Path:
    """PATH 上に実行ファイルが存在することを確認する.

    Args:
        name: プログラム名（例: "cmake"）

    Returns:
        見つかった実行ファイルの絶対パス

    Raises:
        MissingToolError: PATH 上に見つからない場合
    """
    found = shutil.which(name)
    if found is None:
        raise MissingToolError(name)

    path = Path(found).resolve()
    logger.debug(f"Found {name} at {path}")
    return path
