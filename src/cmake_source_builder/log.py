"""loguru のシンク設定."""

from __future__ import annotations

import sys

from loguru import logger

from .ci.workflow import issue_command

_PLAIN_FORMAT = "<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | {message}"


def _workflow_sink(message) -> None:
    record = message.record
    level = record["level"].no
    text = record["message"]
    if record["exception"] is not None:
        text = str(message).rstrip("\n")

    if level < 20:
        issue_command("debug", text)
    elif level < 30:
        sys.stdout.write(f"{text}\n")
        sys.stdout.flush()
    elif level < 40:
        issue_command("warning", text)
    else:
        issue_command("error", text)


def setup_logging(level: str = "INFO", github_actions: bool = False) -> None:
    """既定のシンクを置き換える.

    GitHub Actions 上では全レベルをワークフローコマンドとして出力し、
    ::debug:: の表示可否はランナー側（ACTIONS_STEP_DEBUG）に任せる。
    """
    logger.remove()
    if github_actions:
        logger.add(_workflow_sink, level="DEBUG", format="{message}")
    else:
        logger.add(sys.stderr, level=level, format=_PLAIN_FORMAT)
