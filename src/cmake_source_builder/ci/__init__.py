"""ci: GitHub Actions 統合レイヤ.

入力の取得、出力の書き出し、ワークフローコマンドを提供する。
エントリポイントは ci.main.main。
"""

from .workflow import (
    WorkflowInputs,
    WorkflowOutputs,
    escape_data,
    is_github_actions,
    issue_command,
)

__all__ = [
    "WorkflowInputs",
    "WorkflowOutputs",
    "escape_data",
    "is_github_actions",
    "issue_command",
]
